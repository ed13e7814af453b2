"""
Carrier notifications (invitation, offer accepted, offer rejected).
"""

from .carrier_notifier import (
    notify_invitation,
    notify_offer_accepted,
    notify_offer_rejected,
)

__all__ = [
    "notify_invitation",
    "notify_offer_accepted",
    "notify_offer_rejected",
]
