"""
Match one transport request against the carrier pool.

Runs the filter chain and materializes one CarrierRequest per qualifying
carrier. The matcher is strict: an existing (transport_request, carrier) pair
makes the whole run fail with an IntegrityError.
"""

import logging
from decimal import Decimal, ROUND_HALF_UP
from typing import List, Optional

from django.db import transaction

from carriers.models import Carrier
from common.utils import haversine
from freight.models import CarrierRequest, TransportRequest

from .filters import FILTER_CHAIN, narrow_queryset, qualifies

logger = logging.getLogger(__name__)

TWO_PLACES = Decimal("0.01")


def _round_km(distance: Optional[float]) -> Optional[Decimal]:
    if distance is None:
        return None
    return Decimal(str(distance)).quantize(TWO_PLACES, rounding=ROUND_HALF_UP)


class CarrierMatcher:
    """Filter the carrier pool for one transport request and record the matches."""

    def __init__(self, transport_request: TransportRequest, chain=FILTER_CHAIN):
        self.transport_request = transport_request
        self.chain = chain
        self.matches: List[CarrierRequest] = []

    def candidates(self, carriers=None) -> List[Carrier]:
        """
        Carriers passing every filter stage.

        Args:
            carriers: Optional queryset or iterable forming the pool.
                Defaults to all active carriers.
        """
        if carriers is None:
            carriers = narrow_queryset(self.transport_request, Carrier.objects.active())

        return [
            carrier for carrier in carriers
            if qualifies(self.transport_request, carrier, self.chain)
        ]

    def run(self, carriers=None) -> int:
        """
        Create CarrierRequest rows for every qualifying carrier.

        Returns:
            Number of matches created
        """
        qualifying = self.candidates(carriers)

        with transaction.atomic():
            for carrier in qualifying:
                self.matches.append(self._create_match(carrier))

        logger.info(
            "Matched %d carriers for transport request %s",
            len(self.matches), self.transport_request.id
        )
        return len(self.matches)

    def _create_match(self, carrier: Carrier) -> CarrierRequest:
        request = self.transport_request

        distance_to_pickup = None
        if carrier.has_location and request.has_start_location:
            distance_to_pickup = haversine(
                carrier.latitude, carrier.longitude,
                request.start_latitude, request.start_longitude,
            )

        distance_to_delivery = None
        if carrier.has_location and request.has_destination_location:
            distance_to_delivery = haversine(
                carrier.latitude, carrier.longitude,
                request.destination_latitude, request.destination_longitude,
            )

        if carrier.ignore_radius:
            in_radius = True
        elif distance_to_pickup is not None and carrier.pickup_radius_km is not None:
            in_radius = distance_to_pickup <= carrier.pickup_radius_km
        else:
            in_radius = False

        return CarrierRequest.objects.create(
            transport_request=request,
            carrier=carrier,
            status="new",
            distance_to_pickup_km=_round_km(distance_to_pickup),
            distance_to_delivery_km=_round_km(distance_to_delivery),
            in_radius=in_radius,
        )
