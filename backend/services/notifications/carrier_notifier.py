"""
Carrier email notifications.

The ``notify_*`` helpers are fire-and-forget: they enqueue a Celery task and
log (never raise) when the broker is unavailable. The task itself calls
``send_carrier_email`` to render and deliver the plain-text message.
"""

import logging

from django.conf import settings
from django.core.mail import send_mail
from django.utils import timezone

from freight.models import CarrierRequest

logger = logging.getLogger(__name__)

INVITATION = "invitation"
OFFER_ACCEPTED = "offer_accepted"
OFFER_REJECTED = "offer_rejected"

SUBJECTS = {
    INVITATION: "New transport request",
    OFFER_ACCEPTED: "Your offer has been accepted",
    OFFER_REJECTED: "Transport request has been awarded",
}


def notify_invitation(carrier_request_id: int) -> bool:
    return _enqueue(INVITATION, carrier_request_id)


def notify_offer_accepted(carrier_request_id: int) -> bool:
    return _enqueue(OFFER_ACCEPTED, carrier_request_id)


def notify_offer_rejected(carrier_request_id: int) -> bool:
    return _enqueue(OFFER_REJECTED, carrier_request_id)


def _enqueue(kind: str, carrier_request_id: int) -> bool:
    from freight.tasks import send_carrier_email_task

    try:
        send_carrier_email_task.delay(kind, carrier_request_id)
    except Exception:
        logger.exception(
            "Failed to enqueue %s email for carrier request %s",
            kind, carrier_request_id
        )
        return False
    return True


def offer_url(carrier_request: CarrierRequest) -> str:
    template = getattr(
        settings, "CARRIER_OFFER_URL", "http://localhost:8000/api/freight/offers/{token}/"
    )
    return template.format(token=carrier_request.access_token)


def build_message(kind: str, carrier_request: CarrierRequest) -> str:
    transport = carrier_request.transport_request
    route = f"{transport.start_address} -> {transport.destination_address}"
    pickup = timezone.localtime(transport.pickup_date_from).strftime("%Y-%m-%d %H:%M")

    if kind == INVITATION:
        return (
            f"Hello {carrier_request.carrier.company_name},\n\n"
            f"a new transport request matches your fleet.\n\n"
            f"Route: {route}\n"
            f"Pickup: {pickup}\n"
            f"Distance: {transport.distance_km} km\n"
            f"Vehicle: {transport.get_vehicle_type_display() or 'any'}\n\n"
            f"Submit your offer here: {offer_url(carrier_request)}\n"
        )
    if kind == OFFER_ACCEPTED:
        return (
            f"Hello {carrier_request.carrier.company_name},\n\n"
            f"your offer of {carrier_request.offered_price} for {route} "
            f"(pickup {pickup}) has been accepted.\n"
        )
    if kind == OFFER_REJECTED:
        return (
            f"Hello {carrier_request.carrier.company_name},\n\n"
            f"the transport request {route} (pickup {pickup}) has been "
            f"awarded to another carrier. Thank you for your offer.\n"
        )
    raise ValueError(f"Unknown carrier email kind: {kind}")


def send_carrier_email(kind: str, carrier_request_id: int) -> int:
    """
    Render and send one carrier email.

    Returns:
        Number of messages delivered (0 or 1)
    """
    carrier_request = CarrierRequest.objects.select_related(
        "carrier", "transport_request"
    ).get(id=carrier_request_id)

    message = build_message(kind, carrier_request)
    sent = send_mail(
        subject=SUBJECTS[kind],
        message=message,
        from_email=settings.DEFAULT_FROM_EMAIL,
        recipient_list=[carrier_request.carrier.contact_email],
    )
    logger.info(
        "Sent %s email to carrier %s for carrier request %s",
        kind, carrier_request.carrier_id, carrier_request.id
    )
    return sent
