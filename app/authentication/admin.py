"""
Django admin configuration for authentication models.

Related files:
    - models.py: Model definitions
"""

from django.contrib import admin
from django.contrib.auth.admin import UserAdmin as BaseUserAdmin

from authentication.models import User


@admin.register(User)
class UserAdmin(BaseUserAdmin):
    """
    Admin configuration for User model.

    Customized for mobile-based authentication.
    """

    list_display = (
        "mobile",
        "name",
        "status",
        "is_active",
        "is_staff",
        "created_at",
    )
    list_filter = (
        "status",
        "is_active",
        "is_staff",
        "is_superuser",
    )
    search_fields = ("mobile", "name")
    ordering = ("-created_at",)

    fieldsets = (
        (None, {"fields": ("mobile", "password")}),
        ("Profile", {"fields": ("name", "profile_pic", "status")}),
        (
            "Permissions",
            {
                "fields": (
                    "is_active",
                    "is_staff",
                    "is_superuser",
                    "groups",
                    "user_permissions",
                )
            },
        ),
        ("Important dates", {"fields": ("created_at", "last_login")}),
    )
    readonly_fields = ("created_at", "last_login")

    add_fieldsets = (
        (
            None,
            {
                "classes": ("wide",),
                "fields": ("mobile", "name", "password1", "password2"),
            },
        ),
    )
