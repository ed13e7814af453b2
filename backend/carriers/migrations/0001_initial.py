import django.core.validators
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name='Carrier',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('company_name', models.CharField(max_length=255)),
                ('contact_email', models.EmailField(max_length=254)),
                ('contact_phone', models.CharField(blank=True, max_length=30)),
                ('preferred_contact_method', models.CharField(choices=[('email', 'Email'), ('phone', 'Phone')], default='email', max_length=10)),
                ('language', models.CharField(blank=True, choices=[('de', 'Deutsch'), ('en', 'English'), ('fr', 'Français'), ('it', 'Italiano'), ('nl', 'Nederlands')], max_length=2)),
                ('country', models.CharField(blank=True, max_length=2)),
                ('address', models.TextField(blank=True)),
                ('latitude', models.DecimalField(blank=True, decimal_places=6, max_digits=10, null=True)),
                ('longitude', models.DecimalField(blank=True, decimal_places=6, max_digits=10, null=True)),
                ('pickup_radius_km', models.PositiveIntegerField(blank=True, null=True)),
                ('ignore_radius', models.BooleanField(default=False)),
                ('has_van', models.BooleanField(default=False)),
                ('has_truck', models.BooleanField(default=False)),
                ('truck_length_cm', models.PositiveIntegerField(blank=True, null=True)),
                ('truck_width_cm', models.PositiveIntegerField(blank=True, null=True)),
                ('truck_height_cm', models.PositiveIntegerField(blank=True, null=True)),
                ('has_liftgate', models.BooleanField(default=False)),
                ('has_pallet_jack', models.BooleanField(default=False)),
                ('has_side_loading', models.BooleanField(default=False)),
                ('has_tarp', models.BooleanField(default=False)),
                ('has_gps_tracking', models.BooleanField(default=False)),
                ('pickup_countries', models.JSONField(blank=True, default=list)),
                ('delivery_countries', models.JSONField(blank=True, default=list)),
                ('blacklisted', models.BooleanField(default=False)),
                ('rating_communication', models.DecimalField(blank=True, decimal_places=2, max_digits=3, null=True, validators=[django.core.validators.MinValueValidator(0), django.core.validators.MaxValueValidator(5)])),
                ('rating_punctuality', models.DecimalField(blank=True, decimal_places=2, max_digits=3, null=True, validators=[django.core.validators.MinValueValidator(0), django.core.validators.MaxValueValidator(5)])),
                ('notes', models.TextField(blank=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
            ],
            options={
                'db_table': 'carriers',
                'ordering': ['company_name'],
            },
        ),
    ]
