"""
Rule-based price calculation for transport requests.

Looks up the PricingRule for the request's vehicle type, computes the base
price and any weekend/express surcharges, and persists a pending Quote with
ordered line items. Line items carry a ``kind`` plus the parameters of the
calculation; display text is left to the presentation layer.
"""

import logging
from dataclasses import dataclass, field
from datetime import timedelta
from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Dict, List, Optional

from django.conf import settings
from django.core.exceptions import ValidationError
from django.db import transaction
from django.utils import timezone

from freight.models import PricingRule, Quote, QuoteLineItem, TransportRequest

logger = logging.getLogger(__name__)

TWO_PLACES = Decimal("0.01")
HUNDRED = Decimal("100")
EXPRESS_WINDOW = timedelta(hours=24)

# Umbrella request categories without a direct rate, resolved to a concrete one
DEFAULT_UMBRELLA_FALLBACKS = {
    "either": "van",
    "truck": "truck_7_5t",
}


def money(value) -> Decimal:
    return Decimal(value).quantize(TWO_PLACES, rounding=ROUND_HALF_UP)


@dataclass
class Surcharge:
    kind: str
    percent: Decimal
    amount: Decimal
    params: Dict[str, Any] = field(default_factory=dict)

    @property
    def calculation(self) -> str:
        return f"{self.percent}% surcharge"


class PriceCalculator:
    """
    Price one transport request.

    Usage:
        calculator = PriceCalculator(transport_request)
        quote = calculator.calculate()
        if quote is None:
            print(calculator.errors)
    """

    def __init__(self, transport_request: TransportRequest):
        self.transport_request = transport_request
        self.pricing_rule: Optional[PricingRule] = None
        self.errors: List[str] = []

    def calculate(self) -> Optional[Quote]:
        """
        Calculate and persist a quote.

        Returns:
            The created Quote, or None with reasons collected in ``errors``
        """
        if not self._validate_request():
            return None

        try:
            self.pricing_rule = self.find_pricing_rule()
            if self.pricing_rule is None:
                self.errors.append(
                    f"No pricing rule found for vehicle type: {self.transport_request.vehicle_type}"
                )
                return None

            base_price = self.calculate_base_price()
            surcharges = self.calculate_surcharges(base_price)
            return self._create_quote(base_price, surcharges)
        except Exception as exc:
            self.errors.append(f"Quote calculation failed: {exc}")
            logger.exception(
                "Pricing calculation error for transport request %s",
                self.transport_request.id
            )
            return None

    # ===================== Steps =====================

    def _validate_request(self) -> bool:
        # Quoting later in the flow would drag a matching request back to quoted
        if self.transport_request.status != "new":
            self.errors.append(
                f"Only new transport requests can be priced (status: {self.transport_request.status})"
            )
            return False

        distance = self.transport_request.distance_km
        if distance is None or distance <= 0:
            self.errors.append("Distance must be calculated before pricing")
            return False

        if not self.transport_request.vehicle_type:
            self.errors.append("Vehicle type must be specified")
            return False

        return True

    def find_pricing_rule(self) -> Optional[PricingRule]:
        vehicle_type = self.transport_request.vehicle_type
        rule = PricingRule.objects.find_for_vehicle_type(vehicle_type)

        if rule is None:
            fallbacks = getattr(settings, "PRICING_UMBRELLA_FALLBACKS", DEFAULT_UMBRELLA_FALLBACKS)
            fallback = fallbacks.get(vehicle_type)
            if fallback:
                rule = PricingRule.objects.find_for_vehicle_type(fallback)

        return rule

    def calculate_base_price(self) -> Decimal:
        distance = Decimal(str(self.transport_request.distance_km))
        calculated = distance * self.pricing_rule.rate_per_km
        return money(max(calculated, self.pricing_rule.minimum_price))

    def calculate_surcharges(self, base_price: Decimal) -> List[Surcharge]:
        rule = self.pricing_rule
        surcharges = []

        if self.is_weekend_pickup() and rule.weekend_surcharge_percent > 0:
            surcharges.append(self._surcharge(
                "weekend_surcharge", base_price, rule.weekend_surcharge_percent
            ))

        if self.is_express_delivery() and rule.express_surcharge_percent > 0:
            surcharges.append(self._surcharge(
                "express_surcharge", base_price, rule.express_surcharge_percent
            ))

        return surcharges

    def is_weekend_pickup(self) -> bool:
        pickup = self.transport_request.pickup_date_from
        if pickup is None:
            return False
        if timezone.is_aware(pickup):
            pickup = timezone.localtime(pickup)
        # Saturday=5, Sunday=6
        return pickup.weekday() >= 5

    def is_express_delivery(self) -> bool:
        pickup = self.transport_request.pickup_date_from
        delivery = self.transport_request.delivery_date_from
        if pickup is None or delivery is None:
            return False
        return delivery - pickup <= EXPRESS_WINDOW

    # ===================== Helpers =====================

    def _surcharge(self, kind: str, base_price: Decimal, percent: Decimal) -> Surcharge:
        amount = money(base_price * percent / HUNDRED)
        return Surcharge(
            kind=kind,
            percent=percent,
            amount=amount,
            params={"percent": str(percent), "base_price": str(base_price)},
        )

    def _create_quote(self, base_price: Decimal, surcharges: List[Surcharge]) -> Optional[Quote]:
        request = self.transport_request
        rule = self.pricing_rule
        surcharge_total = money(sum((s.amount for s in surcharges), Decimal("0")))
        validity_days = getattr(settings, "QUOTE_VALIDITY_DAYS", 7)

        quote = Quote(
            transport_request=request,
            status="pending",
            base_price=base_price,
            surcharge_total=surcharge_total,
            total_price=money(base_price + surcharge_total),
            currency=getattr(settings, "PLATFORM_CURRENCY", "EUR"),
            valid_until=timezone.now() + timedelta(days=validity_days),
        )

        try:
            quote.full_clean()
        except ValidationError as exc:
            self.errors.extend(exc.messages)
            return None

        with transaction.atomic():
            quote.save()

            line_items = [
                QuoteLineItem(
                    quote=quote,
                    kind="base_transport",
                    params={
                        "distance_km": str(request.distance_km),
                        "rate_per_km": str(rule.rate_per_km),
                        "minimum_price": str(rule.minimum_price),
                    },
                    calculation=f"{request.distance_km} km × {rule.rate_per_km}/km",
                    amount=base_price,
                    line_order=0,
                )
            ]
            for index, surcharge in enumerate(surcharges, start=1):
                line_items.append(QuoteLineItem(
                    quote=quote,
                    kind=surcharge.kind,
                    params=surcharge.params,
                    calculation=surcharge.calculation,
                    amount=surcharge.amount,
                    line_order=index,
                ))
            QuoteLineItem.objects.bulk_create(line_items)

            request.status = "quoted"
            request.save(update_fields=["status", "updated_at"])

        logger.info(
            "Quote %s created for transport request %s: %s %s",
            quote.id, request.id, quote.total_price, quote.currency
        )
        return quote
