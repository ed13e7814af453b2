"""Celery tasks for carrier matching and carrier notifications."""

from celery import shared_task
import logging

logger = logging.getLogger(__name__)


@shared_task
def match_carriers_task(transport_request_id: int):
    """
    Run the match stage of the matching pipeline.

    Enqueued by start_matching once the request is marked as matching. On
    success the invitation stage is enqueued by the pipeline itself.
    """
    from .models import TransportRequest
    from services.matching import run_match_stage

    try:
        match_count = run_match_stage(transport_request_id)
        logger.info(f"Match stage for transport request {transport_request_id}: {match_count} carriers")
        return match_count
    except TransportRequest.DoesNotExist:
        logger.warning(f"Transport request {transport_request_id} not found for match stage")
        return 0


@shared_task
def send_carrier_invitations_task(transport_request_id: int):
    """Send invitations to every carrier matched but not yet contacted."""
    from .models import TransportRequest
    from services.matching import run_invitation_stage

    try:
        return run_invitation_stage(transport_request_id)
    except TransportRequest.DoesNotExist:
        logger.warning(f"Transport request {transport_request_id} not found for invitation stage")
        return 0


@shared_task
def send_carrier_email_task(kind: str, carrier_request_id: int):
    """Deliver one carrier email (invitation, offer accepted or offer rejected)."""
    from .models import CarrierRequest
    from services.notifications.carrier_notifier import send_carrier_email

    try:
        return send_carrier_email(kind, carrier_request_id)
    except CarrierRequest.DoesNotExist:
        logger.warning(f"Carrier request {carrier_request_id} not found for {kind} email")
        return 0
