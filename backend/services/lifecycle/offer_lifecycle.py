"""
Carrier offer lifecycle.

    new -> sent -> offered -> won | rejected

Accepting one offer is a compound transition: the offer is won, every other
offered sibling is rejected and the transport request becomes ``matched``
with the winning carrier, all in one transaction. Carrier notifications are
enqueued after commit; their failure never rolls a transition back.
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from django.db import transaction
from django.utils import timezone

from freight.models import CarrierRequest, TransportRequest
from services.notifications import notify_offer_accepted, notify_offer_rejected

from .exceptions import (
    TransitionError,
    OfferNotAvailableError,
    TransportRequestClosedError,
)

logger = logging.getLogger(__name__)

SUBMITTABLE_STATUSES = ("sent", "offered")


@dataclass
class OfferResult:
    """Result object for offer operations."""
    success: bool
    carrier_request: Optional[CarrierRequest] = None
    message: str = ""
    error_code: Optional[str] = None
    extra: Optional[Dict[str, Any]] = None


def mark_invitation_sent(carrier_request: CarrierRequest) -> bool:
    """
    Move a carrier request from ``new`` to ``sent``.

    Returns:
        True if this call performed the transition
    """
    now = timezone.now()
    updated = CarrierRequest.objects.filter(pk=carrier_request.pk, status="new").update(
        status="sent", email_sent_at=now, updated_at=now
    )
    if updated:
        carrier_request.status = "sent"
        carrier_request.email_sent_at = now
    return bool(updated)


def submit_offer(
    carrier_request: CarrierRequest,
    offered_price,
    offered_delivery_date=None,
    transport_type: str = "",
    vehicle_type: str = "",
    driver_language: str = "",
    notes: str = "",
) -> OfferResult:
    """
    Record a carrier's response to an invitation.

    An invited carrier (``sent``) makes an offer; a carrier that already
    offered may revise it while the customer has not decided.
    """
    try:
        with transaction.atomic():
            transport_request = _lock_transport_request(carrier_request)
            offer = _lock_offer(carrier_request, transport_request)
            if offer.status not in SUBMITTABLE_STATUSES:
                raise OfferNotAvailableError(
                    f"This invitation can no longer be answered (status: {offer.status})"
                )
            if offer.transport_request.status != "matching":
                raise TransportRequestClosedError("This transport request is no longer open for offers")

            offer.offered_price = offered_price
            offer.offered_delivery_date = offered_delivery_date
            offer.transport_type = transport_type or ""
            offer.vehicle_type = vehicle_type or ""
            offer.driver_language = driver_language or ""
            offer.notes = notes or ""
            offer.status = "offered"
            offer.response_date = timezone.now()
            offer.save()
    except TransitionError as exc:
        return _failure(carrier_request, exc)

    logger.info(
        "Carrier request %s offered %s for transport request %s",
        offer.id, offer.offered_price, offer.transport_request_id
    )
    return OfferResult(success=True, carrier_request=offer, message="Offer submitted successfully")


@transaction.atomic
def _award(carrier_request: CarrierRequest):
    transport_request = _lock_transport_request(carrier_request)
    offer = _lock_offer(carrier_request, transport_request)

    if transport_request.status == "matched":
        raise TransportRequestClosedError("This transport request has already been awarded")
    if transport_request.status != "matching":
        raise TransportRequestClosedError("This transport request is no longer open for offers")
    if offer.status != "offered":
        raise OfferNotAvailableError(f"Only offered carrier requests can be accepted (status: {offer.status})")

    now = timezone.now()
    offer.status = "won"
    offer.save(update_fields=["status", "updated_at"])

    rejected_ids: List[int] = list(
        transport_request.carrier_requests.select_for_update()
        .filter(status="offered")
        .exclude(pk=offer.pk)
        .values_list("id", flat=True)
    )
    CarrierRequest.objects.filter(id__in=rejected_ids).update(status="rejected", updated_at=now)

    transport_request.status = "matched"
    transport_request.matched_carrier_id = offer.carrier_id
    transport_request.save(update_fields=["status", "matched_carrier", "updated_at"])

    transaction.on_commit(lambda: _notify_award(offer.id, rejected_ids))
    return offer, transport_request, rejected_ids


def accept_offer(carrier_request: CarrierRequest) -> OfferResult:
    """
    Award the transport request to this carrier's offer.

    Returns:
        OfferResult; ``extra["rejected_ids"]`` lists the siblings rejected
    """
    try:
        offer, transport_request, rejected_ids = _award(carrier_request)
    except TransitionError as exc:
        return _failure(carrier_request, exc)

    carrier_request.status = offer.status
    logger.info(
        "Transport request %s matched to carrier %s (%d sibling offers rejected)",
        transport_request.id, offer.carrier_id, len(rejected_ids)
    )
    return OfferResult(
        success=True,
        carrier_request=offer,
        message="Offer accepted. The carrier has been notified.",
        extra={"rejected_ids": rejected_ids, "transport_request_id": transport_request.id},
    )


def reject_offer(carrier_request: CarrierRequest) -> OfferResult:
    """Decline a single offer."""
    try:
        with transaction.atomic():
            transport_request = _lock_transport_request(carrier_request)
            offer = _lock_offer(carrier_request, transport_request)
            if offer.status != "offered":
                raise OfferNotAvailableError(
                    f"Only offered carrier requests can be rejected (status: {offer.status})"
                )

            offer.status = "rejected"
            offer.save(update_fields=["status", "updated_at"])
            offer_id = offer.id
            transaction.on_commit(lambda: notify_offer_rejected(offer_id))
    except TransitionError as exc:
        return _failure(carrier_request, exc)

    carrier_request.status = offer.status
    logger.info("Carrier request %s rejected", offer.id)
    return OfferResult(success=True, carrier_request=offer, message="Offer rejected.")


# ===================== Helper Functions =====================

# Offer transitions lock the transport request row before any carrier request row
def _lock_transport_request(carrier_request: CarrierRequest) -> TransportRequest:
    return TransportRequest.objects.select_for_update().get(pk=carrier_request.transport_request_id)


def _lock_offer(carrier_request: CarrierRequest, transport_request: TransportRequest) -> CarrierRequest:
    offer = CarrierRequest.objects.select_for_update().get(pk=carrier_request.pk)
    offer.transport_request = transport_request
    return offer


def _notify_award(winner_id: int, rejected_ids: List[int]):
    notify_offer_accepted(winner_id)
    for rejected_id in rejected_ids:
        notify_offer_rejected(rejected_id)


def _failure(carrier_request: CarrierRequest, exc: TransitionError) -> OfferResult:
    logger.info("Carrier request %s transition refused: %s", carrier_request.pk, exc.message)
    return OfferResult(
        success=False,
        carrier_request=carrier_request,
        message=exc.message,
        error_code=exc.error_code,
    )
