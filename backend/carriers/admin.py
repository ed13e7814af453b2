from django.contrib import admin
from carriers.models import Carrier


@admin.register(Carrier)
class CarrierAdmin(admin.ModelAdmin):
    """Admin panel for managing the carrier pool"""

    list_display = [
        "company_name",
        "contact_email",
        "country",
        "pickup_radius_km",
        "ignore_radius",
        "has_van",
        "has_truck",
        "blacklisted",
    ]

    list_filter = [
        "blacklisted",
        "has_van",
        "has_truck",
        "ignore_radius",
        "country",
    ]

    search_fields = [
        "company_name",
        "contact_email",
        "address",
    ]

    readonly_fields = [
        "created_at",
        "updated_at",
    ]

    fieldsets = (
        (None, {"fields": ("company_name", "contact_email", "contact_phone",
                           "preferred_contact_method", "language", "blacklisted")}),
        ("Location", {"fields": ("country", "address", "latitude", "longitude",
                                 "pickup_radius_km", "ignore_radius")}),
        ("Coverage", {"fields": ("pickup_countries", "delivery_countries")}),
        ("Fleet", {"fields": ("has_van", "has_truck", "truck_length_cm",
                              "truck_width_cm", "truck_height_cm")}),
        ("Equipment", {"fields": ("has_liftgate", "has_pallet_jack", "has_side_loading",
                                  "has_tarp", "has_gps_tracking")}),
        ("Ratings", {"fields": ("rating_communication", "rating_punctuality", "notes")}),
        ("Timestamps", {"fields": ("created_at", "updated_at")}),
    )

    ordering = ("company_name",)
