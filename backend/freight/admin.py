"""Tells what to show in the Django admin interface for the freight app"""

from django.contrib import admin, messages

from services.matching import start_matching
from services.pricing import PriceCalculator
from .models import (
    TransportRequest, CarrierRequest, PackageItem, PackageTypePreset, PricingRule, Quote, QuoteLineItem,
)


class PackageItemInline(admin.TabularInline):
    model = PackageItem
    extra = 0
    fields = ("package_type", "quantity", "length_cm", "width_cm", "height_cm", "weight_kg")


class CarrierRequestInline(admin.TabularInline):
    model = CarrierRequest
    extra = 0
    fields = ("carrier", "status", "distance_to_pickup_km", "in_radius", "offered_price", "response_date")
    readonly_fields = fields
    can_delete = False


@admin.register(TransportRequest)
class TransportRequestAdmin(admin.ModelAdmin):
    """Transport Request admin"""
    list_display = ['id', 'customer', 'status', 'matching_stage', 'start_country',
                    'destination_country', 'distance_km', 'vehicle_type', 'pickup_date_from']
    list_filter = ['status', 'matching_stage', 'vehicle_type']
    search_fields = ['customer__username', 'start_address', 'destination_address']
    readonly_fields = ['distance_km', 'matching_stage', 'matched_carrier', 'created_at', 'updated_at']
    date_hierarchy = 'pickup_date_from'
    inlines = [PackageItemInline, CarrierRequestInline]
    actions = ['calculate_quote', 'run_carrier_matching']

    @admin.action(description="Calculate quote")
    def calculate_quote(self, request, queryset):
        for transport_request in queryset:
            calculator = PriceCalculator(transport_request)
            if calculator.calculate() is None:
                self.message_user(
                    request,
                    f"Transport #{transport_request.id}: {'; '.join(calculator.errors)}",
                    level=messages.ERROR,
                )

    @admin.action(description="Run carrier matching")
    def run_carrier_matching(self, request, queryset):
        queued = sum(1 for transport_request in queryset if start_matching(transport_request))
        self.message_user(request, f"Carrier matching queued for {queued} transport request(s).")


@admin.register(CarrierRequest)
class CarrierRequestAdmin(admin.ModelAdmin):
    list_display = ("transport_request", "carrier", "status", "distance_to_pickup_km",
                    "in_radius", "offered_price", "email_sent_at")
    list_filter = ("status", "in_radius")
    search_fields = ("transport_request__id", "carrier__company_name")
    readonly_fields = ("access_token", "email_sent_at", "response_date")


@admin.register(PricingRule)
class PricingRuleAdmin(admin.ModelAdmin):
    list_display = ("vehicle_type", "rate_per_km", "minimum_price",
                    "weekend_surcharge_percent", "express_surcharge_percent", "active")
    list_filter = ("active",)


class QuoteLineItemInline(admin.TabularInline):
    model = QuoteLineItem
    extra = 0
    fields = ("line_order", "kind", "calculation", "amount")
    readonly_fields = fields
    can_delete = False


@admin.register(Quote)
class QuoteAdmin(admin.ModelAdmin):
    list_display = ("transport_request", "status", "total_price", "currency", "valid_until")
    list_filter = ("status",)
    readonly_fields = ("accepted_at", "declined_at", "created_at")
    inlines = [QuoteLineItemInline]


@admin.register(PackageTypePreset)
class PackageTypePresetAdmin(admin.ModelAdmin):
    list_display = ("name", "category", "default_length_cm", "default_width_cm",
                    "default_height_cm", "default_weight_kg")
    list_filter = ("category",)
    search_fields = ("name",)
