"""
Contact ledger models.

Models:
    ContactList: One per user, the owner's private address book
    ContactEntry: A reference to another user with the owner's custom name

Design Decisions:
    - Entries hold only the contact's user id and the custom name; profile
      data is read live from the user row
    - A list never contains the same user twice (database constraint)
    - Lists are never deleted once created
"""

from __future__ import annotations

from django.conf import settings
from django.core.validators import MinLengthValidator
from django.db import models
from django.utils import timezone

from contacts.constants import CONTACT_CONFIG
from core.models import BaseModel


class ContactList(BaseModel):
    """
    A user's contact list.

    Fields:
        owner: The user who owns this list (unique)
    """

    owner = models.OneToOneField(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="contact_list",
        help_text="User who owns this contact list",
    )

    class Meta:
        db_table = "contacts_contact_list"
        verbose_name = "contact list"
        verbose_name_plural = "contact lists"

    def __str__(self) -> str:
        return f"Contacts of user {self.owner_id}"


class ContactEntry(models.Model):
    """
    A single contact in a list.

    Fields:
        contact_list: The list this entry belongs to
        contact: The referenced user
        name: Owner's custom display name for the contact (1-50 chars)
        added_at: When the contact was added

    Constraints:
        - UniqueConstraint(contact_list, contact): no duplicate contacts
    """

    contact_list = models.ForeignKey(
        ContactList,
        on_delete=models.CASCADE,
        related_name="entries",
        help_text="Contact list this entry belongs to",
    )
    contact = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="+",
        help_text="The user this entry refers to",
    )
    name = models.CharField(
        max_length=CONTACT_CONFIG.NAME_MAX_LENGTH,
        validators=[MinLengthValidator(CONTACT_CONFIG.NAME_MIN_LENGTH)],
        help_text="Owner's custom name for this contact",
    )
    added_at = models.DateTimeField(
        default=timezone.now,
        help_text="When this contact was added",
    )

    class Meta:
        db_table = "contacts_contact_entry"
        ordering = ["added_at", "id"]
        verbose_name = "contact"
        verbose_name_plural = "contacts"
        constraints = [
            models.UniqueConstraint(
                fields=["contact_list", "contact"],
                name="unique_contact_per_list",
            ),
        ]

    def __str__(self) -> str:
        return f"{self.name} (user {self.contact_id})"
