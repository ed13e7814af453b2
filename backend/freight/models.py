import uuid
from decimal import Decimal

from django.conf import settings
from django.core.exceptions import ValidationError
from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models
from django.utils import timezone
from django.utils.translation import gettext_lazy as _

MAX_LOADING_METERS = Decimal('13.6')


class TransportRequest(models.Model):
    """A customer's shipment order awaiting pricing and carrier assignment."""

    STATUS_CHOICES = [
        ('new', 'New'),
        ('quoted', 'Quoted'),
        ('quote_accepted', 'Quote Accepted'),
        ('quote_declined', 'Quote Declined'),
        ('matching', 'Matching'),
        ('matched', 'Matched'),
        ('in_transit', 'In Transit'),
        ('delivered', 'Delivered'),
        ('cancelled', 'Cancelled'),
    ]

    # Persisted marker of the two-stage matching pipeline
    MATCHING_STAGE_CHOICES = [
        ('', 'Not started'),
        ('match_queued', 'Match queued'),
        ('invitations_queued', 'Invitations queued'),
        ('invitations_sent', 'Invitations sent'),
        ('no_matches', 'No matching carriers'),
    ]

    VEHICLE_TYPE_CHOICES = [
        ('van', 'Van'),
        ('truck', 'Truck'),
        ('either', 'Either'),
    ]

    SHIPPING_MODE_CHOICES = [
        ('packages', 'Pallets & packages'),
        ('loading_meters', 'Loading meters'),
        ('vehicle_booking', 'Vehicle booking'),
    ]

    customer = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='transport_requests'
    )

    matched_carrier = models.ForeignKey(
        'carriers.Carrier',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='won_transport_requests'
    )

    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default='new')
    matching_stage = models.CharField(
        max_length=20, choices=MATCHING_STAGE_CHOICES, default='', blank=True
    )

    # Pickup location
    start_address = models.TextField()
    start_country = models.CharField(max_length=2, blank=True)
    start_latitude = models.DecimalField(max_digits=10, decimal_places=6, null=True, blank=True)
    start_longitude = models.DecimalField(max_digits=10, decimal_places=6, null=True, blank=True)

    # Delivery location
    destination_address = models.TextField()
    destination_country = models.CharField(max_length=2, blank=True)
    destination_latitude = models.DecimalField(max_digits=10, decimal_places=6, null=True, blank=True)
    destination_longitude = models.DecimalField(max_digits=10, decimal_places=6, null=True, blank=True)

    # Computed once at intake
    distance_km = models.DecimalField(max_digits=8, decimal_places=2, null=True, blank=True)

    # Date windows
    pickup_date_from = models.DateTimeField()
    pickup_date_to = models.DateTimeField(null=True, blank=True)
    delivery_date_from = models.DateTimeField(null=True, blank=True)
    delivery_date_to = models.DateTimeField(null=True, blank=True)

    # Cargo
    vehicle_type = models.CharField(max_length=10, choices=VEHICLE_TYPE_CHOICES, blank=True)
    shipping_mode = models.CharField(max_length=20, choices=SHIPPING_MODE_CHOICES, blank=True)
    loading_meters = models.DecimalField(
        max_digits=4, decimal_places=2, null=True, blank=True,
        validators=[MinValueValidator(Decimal('0.01')), MaxValueValidator(MAX_LOADING_METERS)],
    )
    cargo_length_cm = models.PositiveIntegerField(null=True, blank=True)
    cargo_width_cm = models.PositiveIntegerField(null=True, blank=True)
    cargo_height_cm = models.PositiveIntegerField(null=True, blank=True)
    cargo_weight_kg = models.PositiveIntegerField(null=True, blank=True)

    # Equipment requirements
    requires_liftgate = models.BooleanField(default=False)
    requires_pallet_jack = models.BooleanField(default=False)
    requires_side_loading = models.BooleanField(default=False)
    requires_tarp = models.BooleanField(default=False)
    requires_gps_tracking = models.BooleanField(default=False)

    driver_language = models.CharField(max_length=2, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'transport_requests'
        ordering = ['-created_at']

    def __str__(self):
        return f"Transport #{self.id} - {self.start_country or '?'} -> {self.destination_country or '?'} - {self.status}"

    def clean(self):
        errors = {}
        if self.pickup_date_from and self.delivery_date_from:
            if self.delivery_date_from < self.pickup_date_from:
                errors['delivery_date_from'] = 'Delivery date must be after pickup date.'
        if self.shipping_mode == 'loading_meters' and self.loading_meters is None:
            errors['loading_meters'] = 'Loading meters are required for this shipping mode.'
        if errors:
            raise ValidationError(errors)

    @property
    def has_start_location(self):
        return self.start_latitude is not None and self.start_longitude is not None

    @property
    def has_destination_location(self):
        return self.destination_latitude is not None and self.destination_longitude is not None

    def total_package_weight(self):
        return sum((item.total_weight for item in self.package_items.all()), Decimal('0'))

    def total_package_count(self):
        return self.package_items.aggregate(total=models.Sum('quantity'))['total'] or 0


class CarrierRequest(models.Model):
    """One carrier invited to one transport request, tracking its response."""

    STATUS_CHOICES = [
        ('new', 'New'),
        ('sent', 'Invitation Sent'),
        ('offered', 'Offered'),
        ('won', 'Won'),
        ('rejected', 'Rejected'),
    ]

    transport_request = models.ForeignKey(
        TransportRequest,
        on_delete=models.CASCADE,
        related_name='carrier_requests'
    )

    carrier = models.ForeignKey(
        'carriers.Carrier',
        on_delete=models.CASCADE,
        related_name='carrier_requests'
    )

    status = models.CharField(max_length=10, choices=STATUS_CHOICES, default='new')

    # Snapshot computed by the matcher
    distance_to_pickup_km = models.DecimalField(max_digits=8, decimal_places=2, null=True, blank=True)
    distance_to_delivery_km = models.DecimalField(max_digits=8, decimal_places=2, null=True, blank=True)
    in_radius = models.BooleanField(default=False)

    # Public offer link
    access_token = models.UUIDField(default=uuid.uuid4, unique=True, editable=False)

    email_sent_at = models.DateTimeField(null=True, blank=True)
    response_date = models.DateTimeField(null=True, blank=True)

    # Carrier's offer
    offered_price = models.DecimalField(max_digits=10, decimal_places=2, null=True, blank=True)
    offered_delivery_date = models.DateTimeField(null=True, blank=True)
    transport_type = models.CharField(max_length=50, blank=True)
    vehicle_type = models.CharField(max_length=50, blank=True)
    driver_language = models.CharField(max_length=2, blank=True)
    notes = models.TextField(blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'carrier_requests'
        ordering = ['created_at']
        constraints = [
            models.UniqueConstraint(
                fields=['transport_request', 'carrier'],
                name='unique_transport_request_carrier'
            )
        ]

    def __str__(self):
        return f"CarrierRequest #{self.id} - Transport {self.transport_request_id} -> {self.carrier} ({self.status})"


class PricingRuleQuerySet(models.QuerySet):
    def active(self):
        return self.filter(active=True)

    def find_for_vehicle_type(self, vehicle_type):
        """Active rule for the exact vehicle type, falling back to the 'any' rule."""
        return (
            self.active().filter(vehicle_type=vehicle_type).order_by('id').first()
            or self.active().filter(vehicle_type='any').order_by('id').first()
        )


class PricingRule(models.Model):
    """Rate table row keyed by vehicle category."""

    VEHICLE_TYPE_CHOICES = [
        ('van', 'Van'),
        ('sprinter', 'Sprinter'),
        ('truck_7_5t', 'Truck 7.5 t'),
        ('truck_12t', 'Truck 12 t'),
        ('truck_18t', 'Truck 18 t'),
        ('truck_24t', 'Truck 24 t'),
        ('any', 'Any vehicle'),
    ]

    vehicle_type = models.CharField(max_length=20, choices=VEHICLE_TYPE_CHOICES)
    rate_per_km = models.DecimalField(
        max_digits=10, decimal_places=2, validators=[MinValueValidator(Decimal('0.01'))]
    )
    minimum_price = models.DecimalField(
        max_digits=10, decimal_places=2, validators=[MinValueValidator(Decimal('0'))]
    )
    weekend_surcharge_percent = models.DecimalField(
        max_digits=5, decimal_places=2, default=Decimal('0'),
        validators=[MinValueValidator(Decimal('0'))]
    )
    express_surcharge_percent = models.DecimalField(
        max_digits=5, decimal_places=2, default=Decimal('0'),
        validators=[MinValueValidator(Decimal('0'))]
    )
    active = models.BooleanField(default=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = PricingRuleQuerySet.as_manager()

    class Meta:
        db_table = 'pricing_rules'
        ordering = ['vehicle_type']
        indexes = [
            models.Index(fields=['vehicle_type', 'active'], name='pricing_rule_lookup_idx'),
        ]

    def __str__(self):
        return f"{self.get_vehicle_type_display()} - {self.rate_per_km}/km"


class QuoteQuerySet(models.QuerySet):
    def expired(self):
        """Pending quotes whose validity deadline has passed."""
        return self.filter(status='pending', valid_until__lt=timezone.now())


class Quote(models.Model):
    """The priced proposal shown to the customer before carrier matching."""

    STATUS_CHOICES = [
        ('pending', 'Pending'),
        ('accepted', 'Accepted'),
        ('declined', 'Declined'),
        ('expired', 'Expired'),
    ]

    transport_request = models.OneToOneField(
        TransportRequest,
        on_delete=models.CASCADE,
        related_name='quote'
    )

    status = models.CharField(max_length=10, choices=STATUS_CHOICES, default='pending')
    base_price = models.DecimalField(
        max_digits=10, decimal_places=2, validators=[MinValueValidator(Decimal('0'))]
    )
    surcharge_total = models.DecimalField(
        max_digits=10, decimal_places=2, default=Decimal('0'),
        validators=[MinValueValidator(Decimal('0'))]
    )
    total_price = models.DecimalField(
        max_digits=10, decimal_places=2, validators=[MinValueValidator(Decimal('0'))]
    )
    currency = models.CharField(max_length=3, default='EUR')

    valid_until = models.DateTimeField(null=True, blank=True)
    accepted_at = models.DateTimeField(null=True, blank=True)
    declined_at = models.DateTimeField(null=True, blank=True)
    notes = models.TextField(blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = QuoteQuerySet.as_manager()

    class Meta:
        db_table = 'quotes'
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['status'], name='quote_status_idx'),
        ]

    def __str__(self):
        return f"Quote #{self.id} - {self.total_price} {self.currency} ({self.status})"

    @property
    def is_expired(self):
        return (
            self.status == 'pending'
            and self.valid_until is not None
            and self.valid_until < timezone.now()
        )

    @property
    def effective_status(self):
        return 'expired' if self.is_expired else self.status


class QuoteLineItem(models.Model):
    """One ordered line of a quote; line 0 is always the base transport cost."""

    KIND_CHOICES = [
        ('base_transport', _('Base transport')),
        ('weekend_surcharge', _('Weekend surcharge')),
        ('express_surcharge', _('Express surcharge')),
        ('discount', _('Discount')),
    ]

    quote = models.ForeignKey(
        Quote,
        on_delete=models.CASCADE,
        related_name='line_items'
    )

    kind = models.CharField(max_length=20, choices=KIND_CHOICES)
    params = models.JSONField(default=dict, blank=True)
    calculation = models.CharField(max_length=255, blank=True)
    amount = models.DecimalField(max_digits=10, decimal_places=2)
    line_order = models.PositiveIntegerField(default=0)

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'quote_line_items'
        ordering = ['line_order', 'created_at']

    def __str__(self):
        return f"{self.get_kind_display()}: {self.amount}"

    @property
    def is_surcharge(self):
        return self.amount > 0 and self.line_order > 0

    @property
    def is_discount(self):
        return self.amount < 0


class PackageTypePreset(models.Model):
    """Named package type with default dimensions offered when entering packages."""

    CATEGORY_CHOICES = [
        ('pallet', 'Pallet'),
        ('box', 'Box'),
        ('custom', 'Custom'),
    ]

    name = models.CharField(max_length=100, unique=True)
    category = models.CharField(max_length=10, choices=CATEGORY_CHOICES, blank=True)
    default_length_cm = models.PositiveIntegerField(null=True, blank=True)
    default_width_cm = models.PositiveIntegerField(null=True, blank=True)
    default_height_cm = models.PositiveIntegerField(null=True, blank=True)
    default_weight_kg = models.DecimalField(max_digits=10, decimal_places=2, null=True, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'package_type_presets'
        ordering = ['name']

    def __str__(self):
        return self.name


class PackageItem(models.Model):
    """A line of identical packages (e.g. 4 euro pallets) in a ``packages`` shipment."""

    transport_request = models.ForeignKey(
        TransportRequest,
        on_delete=models.CASCADE,
        related_name='package_items'
    )

    package_type = models.CharField(max_length=50)
    quantity = models.PositiveIntegerField(default=1, validators=[MinValueValidator(1)])
    length_cm = models.PositiveIntegerField(null=True, blank=True, validators=[MinValueValidator(1)])
    width_cm = models.PositiveIntegerField(null=True, blank=True, validators=[MinValueValidator(1)])
    height_cm = models.PositiveIntegerField(null=True, blank=True, validators=[MinValueValidator(1)])
    # Weight of a single package
    weight_kg = models.DecimalField(
        max_digits=10, decimal_places=2, validators=[MinValueValidator(Decimal('0.01'))]
    )

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'package_items'
        ordering = ['id']
        indexes = [
            models.Index(fields=['transport_request', 'package_type'], name='package_item_type_idx'),
        ]

    def __str__(self):
        return f"{self.quantity} x {self.package_type} ({self.weight_kg} kg)"

    @property
    def total_weight(self):
        return self.weight_kg * self.quantity

    @property
    def package_type_label(self):
        preset = PackageTypePreset.objects.filter(name__iexact=self.package_type.replace('_', ' ')).first()
        if preset is not None:
            return preset.name
        return self.package_type.replace('_', ' ').capitalize()
