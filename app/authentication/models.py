"""
Authentication models.

This module defines the identity directory's single model:
- User: Custom user model keyed by a 10-digit mobile number

Other apps refer to users by identifier only (foreign keys); they never copy
profile data, so name, picture and status are always read live.

Related files:
    - managers.py: Custom user manager for mobile-based creation
    - services.py: IdentityService and AuthService business logic

Security:
    - Passwords hashed with Django's PBKDF2 via set_password()
    - The raw password is never stored
"""

from django.contrib.auth.models import AbstractBaseUser, PermissionsMixin
from django.core.validators import MinLengthValidator, RegexValidator
from django.db import models

from authentication.managers import UserManager

DEFAULT_PROFILE_PIC = "https://via.placeholder.com/150x150?text=User"

NAME_MIN_LENGTH = 2
NAME_MAX_LENGTH = 50
PASSWORD_MIN_LENGTH = 6

mobile_validator = RegexValidator(
    regex=r"^[0-9]{10}$",
    message="Mobile number must be exactly 10 digits.",
)


class User(AbstractBaseUser, PermissionsMixin):
    """
    Custom User model using the mobile number as the primary identifier.

    Fields:
        name: Display name (2-50 characters)
        mobile: Primary identifier, unique, exactly 10 digits
        profile_pic: Avatar URL (defaults to a placeholder image)
        status: Presence status (online, offline, away)
        is_active: Whether the user account is active
        is_staff: Whether the user can access Django admin
        created_at: When the user account was created
        updated_at: When the user record was last modified

    Usage:
        user = User.objects.create_user(
            mobile="5550001111",
            password="secret1",
            name="Ada",
        )
    """

    class Status(models.TextChoices):
        ONLINE = "online", "Online"
        OFFLINE = "offline", "Offline"
        AWAY = "away", "Away"

    name = models.CharField(
        max_length=NAME_MAX_LENGTH,
        validators=[MinLengthValidator(NAME_MIN_LENGTH)],
        help_text="User's display name",
    )
    mobile = models.CharField(
        max_length=10,
        unique=True,
        db_index=True,
        validators=[mobile_validator],
        help_text="10-digit mobile number (primary identifier)",
    )
    profile_pic = models.URLField(
        max_length=500,
        default=DEFAULT_PROFILE_PIC,
        help_text="URL of the user's profile picture",
    )
    status = models.CharField(
        max_length=10,
        choices=Status.choices,
        default=Status.OFFLINE,
        help_text="Presence status",
    )

    # Account status flags
    is_active = models.BooleanField(
        default=True,
        help_text="Whether this user account is active. Deselect instead of deleting.",
    )
    is_staff = models.BooleanField(
        default=False,
        help_text="Whether the user can access the admin site.",
    )

    # Timestamps
    created_at = models.DateTimeField(
        auto_now_add=True,
        help_text="When the user account was created",
    )
    updated_at = models.DateTimeField(
        auto_now=True,
        help_text="When the user record was last modified",
    )

    USERNAME_FIELD = "mobile"

    # Prompted for by createsuperuser in addition to mobile and password
    REQUIRED_FIELDS = ["name"]

    objects = UserManager()

    class Meta:
        verbose_name = "user"
        verbose_name_plural = "users"
        ordering = ["-created_at"]

    def __str__(self):
        """Return name and mobile as string representation."""
        return f"{self.name} ({self.mobile})"
