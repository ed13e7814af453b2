"""
Lifecycle service - state machines for quotes and carrier offers.

This module handles:
    - Accepting/declining quotes
    - Marking invitations sent
    - Submitting, accepting and rejecting carrier offers
"""

from .quote_lifecycle import accept_quote, decline_quote
from .offer_lifecycle import (
    OfferResult,
    mark_invitation_sent,
    submit_offer,
    accept_offer,
    reject_offer,
)

from .exceptions import (
    TransitionError,
    OfferNotAvailableError,
    TransportRequestClosedError,
)

__all__ = [
    # Quote transitions
    "accept_quote",
    "decline_quote",
    # Offer transitions
    "OfferResult",
    "mark_invitation_sent",
    "submit_offer",
    "accept_offer",
    "reject_offer",
    # Exceptions
    "TransitionError",
    "OfferNotAvailableError",
    "TransportRequestClosedError",
]
