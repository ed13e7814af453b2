"""
Carrier matching service.

This module handles:
    - Filtering the carrier pool for a transport request
    - Materializing one CarrierRequest per qualifying carrier
    - The two-stage (match, invitations) background pipeline
"""

from .carrier_matcher import CarrierMatcher
from .pipeline import (
    start_matching,
    run_match_stage,
    run_invitation_stage,
    resume_pending_invitations,
)

__all__ = [
    "CarrierMatcher",
    "start_matching",
    "run_match_stage",
    "run_invitation_stage",
    "resume_pending_invitations",
]
