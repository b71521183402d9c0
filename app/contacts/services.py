"""
Contact ledger services.

This module provides ContactService, the only writer of contact lists.

Error codes:
    SELF_REFERENCE: Owner tried to add themself
    INVALID_CONTACT_NAME: Display name outside 1-50 characters after trimming
    DUPLICATE_CONTACT: The user is already in the owner's list
    NOT_FOUND: No entry for the given user id

Usage:
    from contacts.services import ContactService

    result = ContactService.add(owner, target, "Mom")
    if not result:
        return service_failure_response(result)
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from django.db import IntegrityError
from django.utils import timezone

from authentication.services import IdentityService
from contacts.constants import CONTACT_CONFIG
from contacts.models import ContactEntry, ContactList
from core.services import BaseService, ServiceResult

if TYPE_CHECKING:
    from typing import Any

    from authentication.models import User


def _validate_name(name: str | None) -> ServiceResult[str]:
    name = name.strip() if isinstance(name, str) else ""
    if not (CONTACT_CONFIG.NAME_MIN_LENGTH <= len(name) <= CONTACT_CONFIG.NAME_MAX_LENGTH):
        return ServiceResult.failure(
            f"Contact name must be between {CONTACT_CONFIG.NAME_MIN_LENGTH} "
            f"and {CONTACT_CONFIG.NAME_MAX_LENGTH} characters",
            error_code="INVALID_CONTACT_NAME",
        )
    return ServiceResult.success(name)


class ContactService(BaseService):
    """Operations on a user's contact list."""

    @classmethod
    def get_or_create(cls, owner: User) -> tuple[ContactList, bool]:
        """
        Return the owner's contact list, creating it on first use.

        Idempotent: a concurrent first call resolves to the same list
        through the unique owner constraint.
        """
        contact_list, created = ContactList.objects.get_or_create(owner=owner)
        if created:
            cls.get_logger().info(f"Created contact list for user {owner.pk}")
        return contact_list, created

    @classmethod
    def add(cls, owner: User, target: User, display_name: str) -> ServiceResult[ContactEntry]:
        """
        Add a user to the owner's contact list.

        Args:
            owner: List owner
            target: User to add
            display_name: Owner's custom name for the contact

        Returns:
            ServiceResult with the new entry, or SELF_REFERENCE,
            INVALID_CONTACT_NAME or DUPLICATE_CONTACT. A duplicate leaves the
            existing name unchanged.
        """
        if owner.pk == target.pk:
            return ServiceResult.failure(
                "Cannot add yourself as a contact",
                error_code="SELF_REFERENCE",
            )

        name_result = _validate_name(display_name)
        if not name_result:
            return name_result

        contact_list, _ = cls.get_or_create(owner)

        try:
            with cls.atomic():
                entry = ContactEntry.objects.create(
                    contact_list=contact_list,
                    contact=target,
                    name=name_result.data,
                    added_at=timezone.now(),
                )
        except IntegrityError:
            return ServiceResult.failure(
                "Contact already exists",
                error_code="DUPLICATE_CONTACT",
            )

        cls.get_logger().info(f"User {owner.pk} added contact {target.pk}")
        return ServiceResult.success(entry)

    @classmethod
    def remove(cls, owner: User, target_id) -> ServiceResult[None]:
        """Remove the entry for target_id; NOT_FOUND if absent."""
        contact_list, _ = cls.get_or_create(owner)

        deleted, _ = ContactEntry.objects.filter(
            contact_list=contact_list, contact_id=target_id
        ).delete()
        if not deleted:
            return ServiceResult.failure(
                "Contact not found",
                error_code="NOT_FOUND",
            )

        cls.get_logger().info(f"User {owner.pk} removed contact {target_id}")
        return ServiceResult.success(None)

    @classmethod
    def rename(cls, owner: User, target_id, new_name: str) -> ServiceResult[ContactEntry]:
        """Overwrite the custom name for target_id; NOT_FOUND or INVALID_CONTACT_NAME."""
        contact_list, _ = cls.get_or_create(owner)

        entry = ContactEntry.objects.filter(
            contact_list=contact_list, contact_id=target_id
        ).first()
        if entry is None:
            return ServiceResult.failure(
                "Contact not found",
                error_code="NOT_FOUND",
            )

        name_result = _validate_name(new_name)
        if not name_result:
            return name_result

        entry.name = name_result.data
        entry.save(update_fields=["name"])
        return ServiceResult.success(entry)

    @classmethod
    def list_with_profiles(cls, owner: User) -> list[dict[str, Any]]:
        """
        Return the owner's contacts in insertion order.

        Each item is the contact's live public profile plus the owner's
        custom name and when the contact was added:

            {"user": {...}, "name": "Mom", "added_at": datetime}
        """
        contact_list, _ = cls.get_or_create(owner)

        entries = contact_list.entries.select_related("contact").order_by(
            "added_at", "id"
        )
        return [
            {
                "user": IdentityService.public_profile(entry.contact),
                "name": entry.name,
                "added_at": entry.added_at,
            }
            for entry in entries
        ]
