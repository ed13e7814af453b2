"""
Pricing service - rule-based quote calculation for transport requests.
"""

from .calculator import PriceCalculator, money

__all__ = [
    "PriceCalculator",
    "money",
]
