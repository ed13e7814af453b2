from django.db import models
from django.contrib.auth.models import AbstractUser


class User(AbstractUser):
    """Extended user model with platform role"""
    ROLE_CHOICES = [
        ('admin', 'Administrator'),
        ('dispatcher', 'Dispatcher'),
        ('customer', 'Customer'),
    ]

    LOCALE_CHOICES = [
        ('de', 'Deutsch'),
        ('en', 'English'),
    ]

    # Role & basic info
    role = models.CharField(max_length=20, choices=ROLE_CHOICES, default='customer')
    company_name = models.CharField(max_length=255, blank=True)
    phone_number = models.CharField(max_length=30, blank=True)
    locale = models.CharField(max_length=5, choices=LOCALE_CHOICES, default='de')

    class Meta:
        db_table = 'users'

    def __str__(self):
        return f"{self.username} ({self.get_role_display()})"

    @property
    def is_customer(self):
        return self.role == 'customer'

    @property
    def is_dispatcher(self):
        """Admins and dispatchers both operate the marketplace."""
        return self.role in ('admin', 'dispatcher')
