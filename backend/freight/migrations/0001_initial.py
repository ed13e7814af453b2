from decimal import Decimal
import uuid

from django.conf import settings
import django.core.validators
from django.db import migrations, models
import django.db.models.deletion


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('carriers', '0001_initial'),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='PricingRule',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('vehicle_type', models.CharField(choices=[('van', 'Van'), ('sprinter', 'Sprinter'), ('truck_7_5t', 'Truck 7.5 t'), ('truck_12t', 'Truck 12 t'), ('truck_18t', 'Truck 18 t'), ('truck_24t', 'Truck 24 t'), ('any', 'Any vehicle')], max_length=20)),
                ('rate_per_km', models.DecimalField(decimal_places=2, max_digits=10, validators=[django.core.validators.MinValueValidator(Decimal('0.01'))])),
                ('minimum_price', models.DecimalField(decimal_places=2, max_digits=10, validators=[django.core.validators.MinValueValidator(Decimal('0'))])),
                ('weekend_surcharge_percent', models.DecimalField(decimal_places=2, default=Decimal('0'), max_digits=5, validators=[django.core.validators.MinValueValidator(Decimal('0'))])),
                ('express_surcharge_percent', models.DecimalField(decimal_places=2, default=Decimal('0'), max_digits=5, validators=[django.core.validators.MinValueValidator(Decimal('0'))])),
                ('active', models.BooleanField(default=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
            ],
            options={
                'db_table': 'pricing_rules',
                'ordering': ['vehicle_type'],
                'indexes': [models.Index(fields=['vehicle_type', 'active'], name='pricing_rule_lookup_idx')],
            },
        ),
        migrations.CreateModel(
            name='TransportRequest',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('status', models.CharField(choices=[('new', 'New'), ('quoted', 'Quoted'), ('quote_accepted', 'Quote Accepted'), ('quote_declined', 'Quote Declined'), ('matching', 'Matching'), ('matched', 'Matched'), ('in_transit', 'In Transit'), ('delivered', 'Delivered'), ('cancelled', 'Cancelled')], default='new', max_length=20)),
                ('matching_stage', models.CharField(blank=True, choices=[('', 'Not started'), ('match_queued', 'Match queued'), ('invitations_queued', 'Invitations queued'), ('invitations_sent', 'Invitations sent'), ('no_matches', 'No matching carriers')], default='', max_length=20)),
                ('start_address', models.TextField()),
                ('start_country', models.CharField(blank=True, max_length=2)),
                ('start_latitude', models.DecimalField(blank=True, decimal_places=6, max_digits=10, null=True)),
                ('start_longitude', models.DecimalField(blank=True, decimal_places=6, max_digits=10, null=True)),
                ('destination_address', models.TextField()),
                ('destination_country', models.CharField(blank=True, max_length=2)),
                ('destination_latitude', models.DecimalField(blank=True, decimal_places=6, max_digits=10, null=True)),
                ('destination_longitude', models.DecimalField(blank=True, decimal_places=6, max_digits=10, null=True)),
                ('distance_km', models.DecimalField(blank=True, decimal_places=2, max_digits=8, null=True)),
                ('pickup_date_from', models.DateTimeField()),
                ('pickup_date_to', models.DateTimeField(blank=True, null=True)),
                ('delivery_date_from', models.DateTimeField(blank=True, null=True)),
                ('delivery_date_to', models.DateTimeField(blank=True, null=True)),
                ('vehicle_type', models.CharField(blank=True, choices=[('van', 'Van'), ('truck', 'Truck'), ('either', 'Either')], max_length=10)),
                ('shipping_mode', models.CharField(blank=True, choices=[('packages', 'Pallets & packages'), ('loading_meters', 'Loading meters'), ('vehicle_booking', 'Vehicle booking')], max_length=20)),
                ('loading_meters', models.DecimalField(blank=True, decimal_places=2, max_digits=4, null=True, validators=[django.core.validators.MinValueValidator(Decimal('0.01')), django.core.validators.MaxValueValidator(Decimal('13.6'))])),
                ('cargo_length_cm', models.PositiveIntegerField(blank=True, null=True)),
                ('cargo_width_cm', models.PositiveIntegerField(blank=True, null=True)),
                ('cargo_height_cm', models.PositiveIntegerField(blank=True, null=True)),
                ('cargo_weight_kg', models.PositiveIntegerField(blank=True, null=True)),
                ('requires_liftgate', models.BooleanField(default=False)),
                ('requires_pallet_jack', models.BooleanField(default=False)),
                ('requires_side_loading', models.BooleanField(default=False)),
                ('requires_tarp', models.BooleanField(default=False)),
                ('requires_gps_tracking', models.BooleanField(default=False)),
                ('driver_language', models.CharField(blank=True, max_length=2)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('customer', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='transport_requests', to=settings.AUTH_USER_MODEL)),
                ('matched_carrier', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='won_transport_requests', to='carriers.carrier')),
            ],
            options={
                'db_table': 'transport_requests',
                'ordering': ['-created_at'],
            },
        ),
        migrations.CreateModel(
            name='Quote',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('status', models.CharField(choices=[('pending', 'Pending'), ('accepted', 'Accepted'), ('declined', 'Declined'), ('expired', 'Expired')], default='pending', max_length=10)),
                ('base_price', models.DecimalField(decimal_places=2, max_digits=10, validators=[django.core.validators.MinValueValidator(Decimal('0'))])),
                ('surcharge_total', models.DecimalField(decimal_places=2, default=Decimal('0'), max_digits=10, validators=[django.core.validators.MinValueValidator(Decimal('0'))])),
                ('total_price', models.DecimalField(decimal_places=2, max_digits=10, validators=[django.core.validators.MinValueValidator(Decimal('0'))])),
                ('currency', models.CharField(default='EUR', max_length=3)),
                ('valid_until', models.DateTimeField(blank=True, null=True)),
                ('accepted_at', models.DateTimeField(blank=True, null=True)),
                ('declined_at', models.DateTimeField(blank=True, null=True)),
                ('notes', models.TextField(blank=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('transport_request', models.OneToOneField(on_delete=django.db.models.deletion.CASCADE, related_name='quote', to='freight.transportrequest')),
            ],
            options={
                'db_table': 'quotes',
                'ordering': ['-created_at'],
                'indexes': [models.Index(fields=['status'], name='quote_status_idx')],
            },
        ),
        migrations.CreateModel(
            name='QuoteLineItem',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('kind', models.CharField(choices=[('base_transport', 'Base transport'), ('weekend_surcharge', 'Weekend surcharge'), ('express_surcharge', 'Express surcharge'), ('discount', 'Discount')], max_length=20)),
                ('params', models.JSONField(blank=True, default=dict)),
                ('calculation', models.CharField(blank=True, max_length=255)),
                ('amount', models.DecimalField(decimal_places=2, max_digits=10)),
                ('line_order', models.PositiveIntegerField(default=0)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('quote', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='line_items', to='freight.quote')),
            ],
            options={
                'db_table': 'quote_line_items',
                'ordering': ['line_order', 'created_at'],
            },
        ),
        migrations.CreateModel(
            name='CarrierRequest',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('status', models.CharField(choices=[('new', 'New'), ('sent', 'Invitation Sent'), ('offered', 'Offered'), ('won', 'Won'), ('rejected', 'Rejected')], default='new', max_length=10)),
                ('distance_to_pickup_km', models.DecimalField(blank=True, decimal_places=2, max_digits=8, null=True)),
                ('distance_to_delivery_km', models.DecimalField(blank=True, decimal_places=2, max_digits=8, null=True)),
                ('in_radius', models.BooleanField(default=False)),
                ('access_token', models.UUIDField(default=uuid.uuid4, editable=False, unique=True)),
                ('email_sent_at', models.DateTimeField(blank=True, null=True)),
                ('response_date', models.DateTimeField(blank=True, null=True)),
                ('offered_price', models.DecimalField(blank=True, decimal_places=2, max_digits=10, null=True)),
                ('offered_delivery_date', models.DateTimeField(blank=True, null=True)),
                ('transport_type', models.CharField(blank=True, max_length=50)),
                ('vehicle_type', models.CharField(blank=True, max_length=50)),
                ('driver_language', models.CharField(blank=True, max_length=2)),
                ('notes', models.TextField(blank=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('carrier', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='carrier_requests', to='carriers.carrier')),
                ('transport_request', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='carrier_requests', to='freight.transportrequest')),
            ],
            options={
                'db_table': 'carrier_requests',
                'ordering': ['created_at'],
                'constraints': [models.UniqueConstraint(fields=('transport_request', 'carrier'), name='unique_transport_request_carrier')],
            },
        ),
    ]
