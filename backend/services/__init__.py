"""
Services package - Business logic layer.

This package contains all business logic services that operate on Django models
but are decoupled from the HTTP layer.

Modules:
    - intake: Transport request creation from geocoded addresses
    - pricing: Rule-based quote calculation
    - matching: Carrier matching and the background matching pipeline
    - lifecycle: Quote and carrier offer state machines
    - notifications: Carrier emails
"""

# Expose commonly used functions at package level
from .pricing import PriceCalculator
from .matching import (
    CarrierMatcher,
    start_matching,
    run_match_stage,
    run_invitation_stage,
    resume_pending_invitations,
)
from .lifecycle import (
    accept_quote,
    decline_quote,
    OfferResult,
    mark_invitation_sent,
    submit_offer,
    accept_offer,
    reject_offer,
    TransitionError,
    OfferNotAvailableError,
    TransportRequestClosedError,
)

__all__ = [
    # Pricing
    "PriceCalculator",
    # Matching
    "CarrierMatcher",
    "start_matching",
    "run_match_stage",
    "run_invitation_stage",
    "resume_pending_invitations",
    # Lifecycles
    "accept_quote",
    "decline_quote",
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
