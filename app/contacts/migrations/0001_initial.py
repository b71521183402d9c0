"""
Initial schema for the contact ledger.

Changes:
    - Create ContactList (one per owner)
    - Create ContactEntry with a unique (contact_list, contact) pair
"""

import django.core.validators
import django.db.models.deletion
import django.utils.timezone
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):
    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="ContactList",
            fields=[
                (
                    "id",
                    models.BigAutoField(
                        auto_created=True,
                        primary_key=True,
                        serialize=False,
                        verbose_name="ID",
                    ),
                ),
                (
                    "created_at",
                    models.DateTimeField(
                        auto_now_add=True,
                        db_index=True,
                        help_text="Timestamp when this record was created",
                    ),
                ),
                (
                    "updated_at",
                    models.DateTimeField(
                        auto_now=True,
                        help_text="Timestamp when this record was last modified",
                    ),
                ),
                (
                    "owner",
                    models.OneToOneField(
                        help_text="User who owns this contact list",
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="contact_list",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "verbose_name": "contact list",
                "verbose_name_plural": "contact lists",
                "db_table": "contacts_contact_list",
            },
        ),
        migrations.CreateModel(
            name="ContactEntry",
            fields=[
                (
                    "id",
                    models.BigAutoField(
                        auto_created=True,
                        primary_key=True,
                        serialize=False,
                        verbose_name="ID",
                    ),
                ),
                (
                    "name",
                    models.CharField(
                        help_text="Owner's custom name for this contact",
                        max_length=50,
                        validators=[django.core.validators.MinLengthValidator(1)],
                    ),
                ),
                (
                    "added_at",
                    models.DateTimeField(
                        default=django.utils.timezone.now,
                        help_text="When this contact was added",
                    ),
                ),
                (
                    "contact",
                    models.ForeignKey(
                        help_text="The user this entry refers to",
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="+",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
                (
                    "contact_list",
                    models.ForeignKey(
                        help_text="Contact list this entry belongs to",
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="entries",
                        to="contacts.contactlist",
                    ),
                ),
            ],
            options={
                "verbose_name": "contact",
                "verbose_name_plural": "contacts",
                "db_table": "contacts_contact_entry",
                "ordering": ["added_at", "id"],
                "constraints": [
                    models.UniqueConstraint(
                        fields=("contact_list", "contact"),
                        name="unique_contact_per_list",
                    )
                ],
            },
        ),
    ]
