from django.contrib import admin
from django.contrib.auth.admin import UserAdmin as BaseUserAdmin
from accounts.models import User


@admin.register(User)
class UserAdmin(BaseUserAdmin):
    """Admin panel for custom User model"""

    list_display = [
        "username",
        "email",
        "role",
        "company_name",
        "locale",
        "is_active",
        "is_staff",
    ]

    list_filter = [
        "role",
        "locale",
        "is_active",
        "is_staff",
    ]

    search_fields = [
        "username",
        "email",
        "company_name",
    ]

    ordering = ("username",)

    # Extend default Django UserAdmin fieldsets
    fieldsets = BaseUserAdmin.fieldsets + (
        (
            "Marketplace",
            {
                "fields": (
                    "role",
                    "company_name",
                    "phone_number",
                    "locale",
                )
            },
        ),
    )

    # For create user page in admin
    add_fieldsets = BaseUserAdmin.add_fieldsets + (
        (
            "Marketplace",
            {
                "fields": (
                    "role",
                    "company_name",
                )
            },
        ),
    )
