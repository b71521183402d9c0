"""
Serializers for the contacts API.
"""

from rest_framework import serializers

from authentication.models import mobile_validator
from authentication.serializers import UserSerializer
from contacts.constants import CONTACT_CONFIG


class ContactSerializer(serializers.Serializer):
    """A contact with the referenced user's live public profile."""

    user = serializers.DictField(read_only=True)
    name = serializers.CharField(read_only=True)
    added_at = serializers.DateTimeField(read_only=True)


class ContactEntrySerializer(serializers.Serializer):
    """Response for a freshly added or renamed entry."""

    user = UserSerializer(source="contact", read_only=True)
    name = serializers.CharField(read_only=True)
    added_at = serializers.DateTimeField(read_only=True)


class ContactListResponseSerializer(serializers.Serializer):
    contacts = ContactSerializer(many=True)
    total = serializers.IntegerField()


class ContactCreateSerializer(serializers.Serializer):
    mobile = serializers.CharField(validators=[mobile_validator])
    name = serializers.CharField(
        min_length=CONTACT_CONFIG.NAME_MIN_LENGTH,
        max_length=CONTACT_CONFIG.NAME_MAX_LENGTH,
    )


class ContactRenameSerializer(serializers.Serializer):
    name = serializers.CharField(
        min_length=CONTACT_CONFIG.NAME_MIN_LENGTH,
        max_length=CONTACT_CONFIG.NAME_MAX_LENGTH,
    )
