from decimal import Decimal, ROUND_HALF_UP

from django.core.exceptions import ValidationError as DjangoValidationError
from rest_framework import serializers

from carriers.serializers import CarrierBasicSerializer
from services.intake import GeocodedAddress, create_transport_request
from .models import TransportRequest, CarrierRequest, PackageItem, PackageTypePreset, Quote, QuoteLineItem


class CoordinateField(serializers.DecimalField):
    """Decimal coordinate rounded to the 6 stored places instead of rejected."""

    def __init__(self, **kwargs):
        kwargs.setdefault('max_digits', 10)
        kwargs.setdefault('decimal_places', 6)
        kwargs.setdefault('rounding', ROUND_HALF_UP)
        super().__init__(**kwargs)

    def validate_precision(self, value):
        # Geocoders return more precision than is stored
        return super().validate_precision(self.quantize(value))


class PackageItemSerializer(serializers.ModelSerializer):
    total_weight = serializers.DecimalField(max_digits=12, decimal_places=2, read_only=True)
    package_type_label = serializers.CharField(read_only=True)

    class Meta:
        model = PackageItem
        fields = ['id', 'package_type', 'package_type_label', 'quantity',
                  'length_cm', 'width_cm', 'height_cm', 'weight_kg', 'total_weight']
        read_only_fields = ['id']


class PackageTypePresetSerializer(serializers.ModelSerializer):
    class Meta:
        model = PackageTypePreset
        fields = ['id', 'name', 'category', 'default_length_cm', 'default_width_cm',
                  'default_height_cm', 'default_weight_kg']
        read_only_fields = fields


class TransportRequestSerializer(serializers.ModelSerializer):
    """Serializer for Transport Requests"""
    matched_carrier = CarrierBasicSerializer(read_only=True)
    package_items = PackageItemSerializer(many=True, read_only=True)
    total_package_weight = serializers.DecimalField(max_digits=12, decimal_places=2, read_only=True)
    total_package_count = serializers.IntegerField(read_only=True)

    class Meta:
        model = TransportRequest
        fields = ['id', 'status', 'matching_stage', 'matched_carrier',
                  'start_address', 'start_country', 'start_latitude', 'start_longitude',
                  'destination_address', 'destination_country',
                  'destination_latitude', 'destination_longitude', 'distance_km',
                  'pickup_date_from', 'pickup_date_to', 'delivery_date_from', 'delivery_date_to',
                  'vehicle_type', 'shipping_mode', 'loading_meters',
                  'cargo_length_cm', 'cargo_width_cm', 'cargo_height_cm', 'cargo_weight_kg',
                  'requires_liftgate', 'requires_pallet_jack', 'requires_side_loading',
                  'requires_tarp', 'requires_gps_tracking', 'driver_language',
                  'package_items', 'total_package_weight', 'total_package_count',
                  'created_at', 'updated_at']
        read_only_fields = fields


class TransportRequestCreateSerializer(serializers.ModelSerializer):
    """
    Serializer for creating transport requests.

    Addresses arrive already geocoded (coordinates and country code); the
    distance is computed on creation.
    """
    start_latitude = CoordinateField(required=False, allow_null=True)
    start_longitude = CoordinateField(required=False, allow_null=True)
    destination_latitude = CoordinateField(required=False, allow_null=True)
    destination_longitude = CoordinateField(required=False, allow_null=True)
    package_items = PackageItemSerializer(many=True, required=False)

    class Meta:
        model = TransportRequest
        fields = ['start_address', 'start_country', 'start_latitude', 'start_longitude',
                  'destination_address', 'destination_country',
                  'destination_latitude', 'destination_longitude',
                  'pickup_date_from', 'pickup_date_to', 'delivery_date_from', 'delivery_date_to',
                  'vehicle_type', 'shipping_mode', 'loading_meters',
                  'cargo_length_cm', 'cargo_width_cm', 'cargo_height_cm', 'cargo_weight_kg',
                  'requires_liftgate', 'requires_pallet_jack', 'requires_side_loading',
                  'requires_tarp', 'requires_gps_tracking', 'driver_language',
                  'package_items']

    def create(self, validated_data):
        start = GeocodedAddress(
            address=validated_data.pop('start_address'),
            latitude=validated_data.pop('start_latitude', None),
            longitude=validated_data.pop('start_longitude', None),
            country=validated_data.pop('start_country', ''),
        )
        destination = GeocodedAddress(
            address=validated_data.pop('destination_address'),
            latitude=validated_data.pop('destination_latitude', None),
            longitude=validated_data.pop('destination_longitude', None),
            country=validated_data.pop('destination_country', ''),
        )
        customer = validated_data.pop('customer')

        try:
            return create_transport_request(customer, start, destination, **validated_data)
        except DjangoValidationError as exc:
            raise serializers.ValidationError(exc.message_dict)


class QuoteLineItemSerializer(serializers.ModelSerializer):
    description = serializers.CharField(source='get_kind_display', read_only=True)

    class Meta:
        model = QuoteLineItem
        fields = ['line_order', 'kind', 'description', 'calculation', 'params', 'amount']


class QuoteSerializer(serializers.ModelSerializer):
    """Quote with its ordered line items; status reports expiry as 'expired'."""
    status = serializers.CharField(source='effective_status', read_only=True)
    line_items = QuoteLineItemSerializer(many=True, read_only=True)

    class Meta:
        model = Quote
        fields = ['id', 'transport_request', 'status', 'base_price', 'surcharge_total',
                  'total_price', 'currency', 'valid_until', 'accepted_at', 'declined_at',
                  'notes', 'line_items', 'created_at']
        read_only_fields = fields


class CarrierOfferSerializer(serializers.ModelSerializer):
    """A carrier request as seen by the customer comparing offers."""
    carrier = CarrierBasicSerializer(read_only=True)

    class Meta:
        model = CarrierRequest
        fields = ['id', 'carrier', 'status', 'distance_to_pickup_km', 'distance_to_delivery_km',
                  'in_radius', 'offered_price', 'offered_delivery_date', 'transport_type',
                  'vehicle_type', 'driver_language', 'notes', 'response_date']
        read_only_fields = fields


class OfferDetailSerializer(serializers.ModelSerializer):
    """Public view of an invitation, reached through the carrier's offer link."""
    carrier = serializers.CharField(source='carrier.company_name', read_only=True)
    transport_request = serializers.SerializerMethodField()

    class Meta:
        model = CarrierRequest
        fields = ['carrier', 'status', 'distance_to_pickup_km', 'offered_price',
                  'offered_delivery_date', 'transport_type', 'vehicle_type',
                  'driver_language', 'notes', 'transport_request']
        read_only_fields = fields

    def get_transport_request(self, obj):
        transport = obj.transport_request
        return {
            'id': transport.id,
            'status': transport.status,
            'start_address': transport.start_address,
            'start_country': transport.start_country,
            'destination_address': transport.destination_address,
            'destination_country': transport.destination_country,
            'distance_km': str(transport.distance_km) if transport.distance_km is not None else None,
            'pickup_date_from': transport.pickup_date_from,
            'pickup_date_to': transport.pickup_date_to,
            'delivery_date_from': transport.delivery_date_from,
            'delivery_date_to': transport.delivery_date_to,
            'vehicle_type': transport.vehicle_type,
            'shipping_mode': transport.shipping_mode,
            'loading_meters': str(transport.loading_meters) if transport.loading_meters is not None else None,
            'cargo_weight_kg': transport.cargo_weight_kg,
            'package_items': PackageItemSerializer(transport.package_items.all(), many=True).data,
            'total_package_weight': str(transport.total_package_weight()),
        }


class OfferSubmissionSerializer(serializers.Serializer):
    """Serializer for a carrier's offer"""
    offered_price = serializers.DecimalField(max_digits=10, decimal_places=2, min_value=Decimal("0"))
    offered_delivery_date = serializers.DateTimeField(required=False, allow_null=True)
    transport_type = serializers.CharField(required=False, allow_blank=True, max_length=50)
    vehicle_type = serializers.CharField(required=False, allow_blank=True, max_length=50)
    driver_language = serializers.CharField(required=False, allow_blank=True, max_length=2)
    notes = serializers.CharField(required=False, allow_blank=True)
