"""
Two-stage matching pipeline.

Stage 1 (match) runs the CarrierMatcher; stage 2 (invitations) moves every
``new`` CarrierRequest to ``sent`` and notifies the carrier. Each stage runs
as its own Celery task and the second is only enqueued once the first has
committed at least one match. ``TransportRequest.matching_stage`` records
how far the pipeline got so an interrupted chain can be resumed.
"""

import logging
from typing import List

from django.db import transaction

from freight.models import TransportRequest

from .carrier_matcher import CarrierMatcher

logger = logging.getLogger(__name__)

MATCHABLE_STATUSES = ("new", "quote_accepted")


def start_matching(transport_request: TransportRequest) -> bool:
    """
    Mark the request as matching and enqueue the match stage.

    Returns:
        True if the match stage was queued, False if the request is not in a
        matchable status
    """
    from freight.tasks import match_carriers_task

    with transaction.atomic():
        locked = TransportRequest.objects.select_for_update().get(pk=transport_request.pk)
        if locked.status not in MATCHABLE_STATUSES:
            logger.info(
                "Transport request %s not matchable (status: %s)",
                locked.id, locked.status
            )
            return False

        locked.status = "matching"
        locked.matching_stage = "match_queued"
        locked.save(update_fields=["status", "matching_stage", "updated_at"])

        request_id = locked.id
        transaction.on_commit(lambda: match_carriers_task.delay(request_id))

    transport_request.status = locked.status
    transport_request.matching_stage = locked.matching_stage
    return True


def run_match_stage(transport_request_id: int) -> int:
    """
    Run the carrier matcher for one transport request.

    With zero matches the request goes back to ``new`` and the pipeline
    stops. Otherwise the invitation stage is enqueued.

    Returns:
        Number of carrier requests belonging to the transport request
    """
    from freight.tasks import send_carrier_invitations_task

    transport_request = TransportRequest.objects.get(id=transport_request_id)
    if transport_request.status != "matching":
        logger.info(
            "Transport request %s left matching (status: %s); match stage skipped",
            transport_request.id, transport_request.status
        )
        return 0

    existing = transport_request.carrier_requests.count()
    if existing:
        # Redelivered task: the matcher already committed for this request
        logger.warning(
            "Transport request %s already has %d carrier requests; skipping matcher",
            transport_request.id, existing
        )
        match_count = existing
    else:
        match_count = CarrierMatcher(transport_request).run()

    with transaction.atomic():
        if match_count == 0:
            transport_request.status = "new"
            transport_request.matching_stage = "no_matches"
            transport_request.save(update_fields=["status", "matching_stage", "updated_at"])
            logger.info("No carriers matched transport request %s", transport_request.id)
            return 0

        transport_request.matching_stage = "invitations_queued"
        transport_request.save(update_fields=["matching_stage", "updated_at"])
        transaction.on_commit(
            lambda: send_carrier_invitations_task.delay(transport_request_id)
        )

    return match_count


def run_invitation_stage(transport_request_id: int) -> int:
    """
    Dispatch invitations for every ``new`` carrier request of a transport request.

    Returns:
        Number of invitations dispatched
    """
    from services.lifecycle import mark_invitation_sent
    from services.notifications import notify_invitation

    transport_request = TransportRequest.objects.get(id=transport_request_id)

    sent = 0
    for carrier_request in transport_request.carrier_requests.filter(status="new"):
        with transaction.atomic():
            if not mark_invitation_sent(carrier_request):
                continue
            request_id = carrier_request.id
            transaction.on_commit(lambda request_id=request_id: notify_invitation(request_id))
        sent += 1

    transport_request.matching_stage = "invitations_sent"
    transport_request.save(update_fields=["matching_stage", "updated_at"])

    logger.info(
        "Sent %d invitations for transport request %s",
        sent, transport_request.id
    )
    return sent


def resume_pending_invitations() -> List[int]:
    """
    Re-enqueue the invitation stage where the chain stopped between stages.

    Returns:
        IDs of the transport requests that were re-enqueued
    """
    from freight.tasks import send_carrier_invitations_task

    request_ids = list(
        TransportRequest.objects.filter(
            status="matching",
            carrier_requests__status="new",
        )
        .order_by("id")
        .distinct()
        .values_list("id", flat=True)
    )

    for request_id in request_ids:
        send_carrier_invitations_task.delay(request_id)

    logger.info("Resumed invitation stage for %d transport requests", len(request_ids))
    return request_ids
