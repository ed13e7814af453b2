"""
Carrier filter chain.

Each stage is a predicate ``(transport_request, carrier) -> bool``; a carrier
qualifies when every stage keeps it. A stage whose criterion does not apply
to the request keeps every carrier.

The vehicle-type stage is also expressed as a queryset narrowing so it can be
pushed into the storage query. Coverage, radius, capacity and equipment run
in memory over carriers fetched once.
"""

from common.utils import haversine

EQUIPMENT_REQUIREMENTS = (
    ("requires_liftgate", "has_liftgate"),
    ("requires_pallet_jack", "has_pallet_jack"),
    ("requires_gps_tracking", "has_gps_tracking"),
)

CARGO_DIMENSIONS = (
    ("cargo_length_cm", "truck_length_cm"),
    ("cargo_width_cm", "truck_width_cm"),
    ("cargo_height_cm", "truck_height_cm"),
)


def narrow_queryset(transport_request, carriers):
    """Apply the vehicle-type stage to a Carrier queryset."""
    if transport_request.vehicle_type == "van":
        return carriers.with_van()
    if transport_request.vehicle_type == "truck":
        return carriers.with_truck()
    return carriers


def vehicle_type_ok(transport_request, carrier) -> bool:
    if transport_request.vehicle_type == "van":
        return carrier.has_van
    if transport_request.vehicle_type == "truck":
        return carrier.has_truck
    # "either" or unspecified
    return True


def coverage_ok(transport_request, carrier) -> bool:
    origin = transport_request.start_country
    destination = transport_request.destination_country
    if not (origin and destination):
        return True

    return (
        origin in (carrier.pickup_countries or [])
        and destination in (carrier.delivery_countries or [])
    )


def radius_ok(transport_request, carrier) -> bool:
    if not transport_request.has_start_location:
        return True

    if carrier.ignore_radius:
        return True

    if not carrier.has_location or carrier.pickup_radius_km is None:
        return False

    distance = haversine(
        carrier.latitude,
        carrier.longitude,
        transport_request.start_latitude,
        transport_request.start_longitude,
    )
    return distance <= carrier.pickup_radius_km


def capacity_ok(transport_request, carrier) -> bool:
    if transport_request.vehicle_type != "truck":
        return True

    requested = [
        (getattr(transport_request, cargo_field), truck_field)
        for cargo_field, truck_field in CARGO_DIMENSIONS
    ]
    if all(size is None for size, _ in requested):
        return True

    if not carrier.has_truck:
        return False

    # A dimension missing on either side does not constrain that axis
    for size, truck_field in requested:
        capacity = getattr(carrier, truck_field)
        if size is not None and capacity is not None and capacity < size:
            return False
    return True


def equipment_ok(transport_request, carrier) -> bool:
    # TODO: check requires_side_loading / requires_tarp once product confirms
    # the carrier has_side_loading / has_tarp flags are maintained
    for requirement, capability in EQUIPMENT_REQUIREMENTS:
        if getattr(transport_request, requirement) and not getattr(carrier, capability):
            return False
    return True


FILTER_CHAIN = (
    vehicle_type_ok,
    coverage_ok,
    radius_ok,
    capacity_ok,
    equipment_ok,
)


def qualifies(transport_request, carrier, chain=FILTER_CHAIN) -> bool:
    return all(stage(transport_request, carrier) for stage in chain)
