"""
Django admin configuration for contact models.
"""

from django.contrib import admin

from contacts.models import ContactEntry, ContactList


class ContactEntryInline(admin.TabularInline):
    model = ContactEntry
    extra = 0
    raw_id_fields = ["contact"]
    readonly_fields = ["added_at"]


@admin.register(ContactList)
class ContactListAdmin(admin.ModelAdmin):
    list_display = ["id", "owner", "created_at"]
    search_fields = ["owner__mobile", "owner__name"]
    raw_id_fields = ["owner"]
    inlines = [ContactEntryInline]
