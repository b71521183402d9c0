"""
Serializers for authentication.

This module provides DRF serializers for:
- User model (public profile read operations)
- Registration and login requests
- Profile and status updates

Related files:
    - models.py: User model and field limits
    - views.py: Views that use these serializers

Security:
    - Password fields are write-only
    - Staff flags are never exposed
"""

from rest_framework import serializers

from authentication.models import (
    NAME_MAX_LENGTH,
    NAME_MIN_LENGTH,
    PASSWORD_MIN_LENGTH,
    User,
    mobile_validator,
)


class UserSerializer(serializers.ModelSerializer):
    """
    Public profile of a user.

    Used for the current user, search results, contact entries and chat
    members.
    """

    class Meta:
        model = User
        fields = [
            "id",
            "name",
            "mobile",
            "profile_pic",
            "status",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields


class RegisterSerializer(serializers.Serializer):
    """Validate registration input. Uniqueness is checked by AuthService."""

    name = serializers.CharField(
        min_length=NAME_MIN_LENGTH,
        max_length=NAME_MAX_LENGTH,
        trim_whitespace=True,
    )
    mobile = serializers.CharField(validators=[mobile_validator])
    password = serializers.CharField(
        write_only=True,
        min_length=PASSWORD_MIN_LENGTH,
        style={"input_type": "password"},
        help_text="Password must be at least 6 characters.",
    )


class LoginSerializer(serializers.Serializer):
    mobile = serializers.CharField()
    password = serializers.CharField(write_only=True, style={"input_type": "password"})


class TokenPairSerializer(serializers.Serializer):
    access = serializers.CharField()
    refresh = serializers.CharField()


class AuthResponseSerializer(serializers.Serializer):
    """Response body for register and login."""

    user = UserSerializer()
    tokens = TokenPairSerializer()


class ProfileUpdateSerializer(serializers.Serializer):
    name = serializers.CharField(
        required=False,
        min_length=NAME_MIN_LENGTH,
        max_length=NAME_MAX_LENGTH,
    )
    profile_pic = serializers.URLField(required=False, max_length=500)


class StatusUpdateSerializer(serializers.Serializer):
    # Membership in the allowed set is checked by AuthService.update_status
    status = serializers.CharField()
