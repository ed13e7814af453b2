"""
Transport request intake.

Geocoding happens outside this service: callers pass addresses already
resolved to coordinates and a country code. The factory computes the cached
distance, validates and saves; nothing is mutated implicitly on creation.
"""

import logging
from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP
from typing import Optional

from django.db import transaction

from common.utils import haversine
from freight.models import PackageItem, TransportRequest

logger = logging.getLogger(__name__)

COORDINATE_PLACES = Decimal("0.000001")


def _coordinate(value) -> Optional[Decimal]:
    if value is None:
        return None
    return Decimal(str(value)).quantize(COORDINATE_PLACES, rounding=ROUND_HALF_UP)


@dataclass
class GeocodedAddress:
    """Output of the geocoding collaborator for one free-text address."""
    address: str
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    country: str = ""

    @property
    def has_coordinates(self) -> bool:
        return self.latitude is not None and self.longitude is not None


def route_distance_km(start: GeocodedAddress, destination: GeocodedAddress) -> Optional[Decimal]:
    """Great-circle distance between two geocoded addresses, rounded to 2 decimals."""
    if not (start.has_coordinates and destination.has_coordinates):
        return None

    distance = haversine(start.latitude, start.longitude, destination.latitude, destination.longitude)
    return Decimal(str(distance)).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)


@transaction.atomic
def create_transport_request(
    customer,
    start: GeocodedAddress,
    destination: GeocodedAddress,
    package_items=None,
    **fields,
) -> TransportRequest:
    """
    Create a new transport request from geocoded addresses.

    Args:
        customer: User model instance owning the request
        start: Geocoded pickup address
        destination: Geocoded delivery address
        package_items: Optional list of PackageItem field dicts
            (package_type, quantity, weight_kg and dimensions)
        **fields: Remaining TransportRequest fields (dates, vehicle type,
            cargo and equipment requirements)

    Returns:
        The saved TransportRequest with status ``new``

    Raises:
        django.core.exceptions.ValidationError: if the request is invalid
    """
    transport_request = TransportRequest(
        customer=customer,
        status="new",
        start_address=start.address,
        start_country=(start.country or "").upper(),
        start_latitude=_coordinate(start.latitude),
        start_longitude=_coordinate(start.longitude),
        destination_address=destination.address,
        destination_country=(destination.country or "").upper(),
        destination_latitude=_coordinate(destination.latitude),
        destination_longitude=_coordinate(destination.longitude),
        distance_km=route_distance_km(start, destination),
        **fields,
    )
    transport_request.full_clean()
    transport_request.save()

    for item_fields in package_items or ():
        item = PackageItem(transport_request=transport_request, **item_fields)
        item.full_clean()
        item.save()

    logger.info(
        "Transport request %s created for customer %s (%s km, %d package items)",
        transport_request.id, customer.id, transport_request.distance_km, len(package_items or ())
    )
    return transport_request
