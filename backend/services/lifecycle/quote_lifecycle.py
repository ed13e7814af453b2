"""
Quote acceptance and decline.

Both transitions are only allowed from ``pending`` and update the quote and
its transport request in one transaction. A pending quote past its validity
deadline counts as expired and can no longer be accepted or declined.
"""

import logging

from django.db import transaction
from django.utils import timezone

from freight.models import Quote

logger = logging.getLogger(__name__)


def accept_quote(quote: Quote) -> bool:
    """
    Accept a pending quote; the transport request becomes ``quote_accepted``.

    Returns:
        True on success, False if the quote is not pending (nothing changes)
    """
    return _transition(quote, "accepted", "accepted_at", "quote_accepted")


def decline_quote(quote: Quote) -> bool:
    """
    Decline a pending quote; the transport request becomes ``quote_declined``.

    Returns:
        True on success, False if the quote is not pending (nothing changes)
    """
    return _transition(quote, "declined", "declined_at", "quote_declined")


def _transition(quote: Quote, new_status: str, timestamp_field: str, request_status: str) -> bool:
    with transaction.atomic():
        locked = (
            Quote.objects.select_for_update()
            .select_related("transport_request")
            .get(pk=quote.pk)
        )
        if locked.status != "pending" or locked.is_expired:
            logger.info(
                "Quote %s cannot become %s (status: %s)",
                locked.id, new_status, locked.effective_status
            )
            return False

        now = timezone.now()
        locked.status = new_status
        setattr(locked, timestamp_field, now)
        locked.save(update_fields=["status", timestamp_field, "updated_at"])

        transport_request = locked.transport_request
        transport_request.status = request_status
        transport_request.save(update_fields=["status", "updated_at"])

    # Reflect the committed state on the caller's instances
    quote.status = new_status
    setattr(quote, timestamp_field, now)
    quote.transport_request.status = request_status

    logger.info("Quote %s %s", quote.id, new_status)
    return True
