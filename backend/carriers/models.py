from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models


class CarrierQuerySet(models.QuerySet):
    def active(self):
        """Carriers that may be invited to transport requests."""
        return self.filter(blacklisted=False)

    def with_van(self):
        return self.filter(has_van=True)

    def with_truck(self):
        return self.filter(has_truck=True)


class Carrier(models.Model):
    """Transport provider maintained by operations staff; read-only to matching."""

    LANGUAGE_CHOICES = [
        ('de', 'Deutsch'),
        ('en', 'English'),
        ('fr', 'Français'),
        ('it', 'Italiano'),
        ('nl', 'Nederlands'),
    ]

    CONTACT_METHOD_CHOICES = [
        ('email', 'Email'),
        ('phone', 'Phone'),
    ]

    # Company & contact
    company_name = models.CharField(max_length=255)
    contact_email = models.EmailField()
    contact_phone = models.CharField(max_length=30, blank=True)
    preferred_contact_method = models.CharField(
        max_length=10, choices=CONTACT_METHOD_CHOICES, default='email'
    )
    language = models.CharField(max_length=2, choices=LANGUAGE_CHOICES, blank=True)
    country = models.CharField(max_length=2, blank=True)
    address = models.TextField(blank=True)

    # Location & pickup radius
    latitude = models.DecimalField(max_digits=10, decimal_places=6, null=True, blank=True)
    longitude = models.DecimalField(max_digits=10, decimal_places=6, null=True, blank=True)
    pickup_radius_km = models.PositiveIntegerField(null=True, blank=True)
    ignore_radius = models.BooleanField(default=False)

    # Fleet
    has_van = models.BooleanField(default=False)
    has_truck = models.BooleanField(default=False)
    truck_length_cm = models.PositiveIntegerField(null=True, blank=True)
    truck_width_cm = models.PositiveIntegerField(null=True, blank=True)
    truck_height_cm = models.PositiveIntegerField(null=True, blank=True)

    # Equipment
    has_liftgate = models.BooleanField(default=False)
    has_pallet_jack = models.BooleanField(default=False)
    has_side_loading = models.BooleanField(default=False)
    has_tarp = models.BooleanField(default=False)
    has_gps_tracking = models.BooleanField(default=False)

    # Coverage (ISO 3166 alpha-2 codes)
    pickup_countries = models.JSONField(default=list, blank=True)
    delivery_countries = models.JSONField(default=list, blank=True)

    blacklisted = models.BooleanField(default=False)

    rating_communication = models.DecimalField(
        max_digits=3, decimal_places=2, null=True, blank=True,
        validators=[MinValueValidator(0), MaxValueValidator(5)],
    )
    rating_punctuality = models.DecimalField(
        max_digits=3, decimal_places=2, null=True, blank=True,
        validators=[MinValueValidator(0), MaxValueValidator(5)],
    )
    notes = models.TextField(blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = CarrierQuerySet.as_manager()

    class Meta:
        db_table = 'carriers'
        ordering = ['company_name']

    def __str__(self):
        return self.company_name

    @property
    def has_location(self):
        return self.latitude is not None and self.longitude is not None
