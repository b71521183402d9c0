"""
URL configuration for contacts app.

URL structure:
    /api/v1/contacts/             - List/add contacts
    /api/v1/contacts/{user_id}/   - Rename/remove contact
"""

from django.urls import path

from contacts.views import ContactDetailView, ContactListView

app_name = "contacts"

urlpatterns = [
    path("", ContactListView.as_view(), name="contact-list"),
    path("<int:user_id>/", ContactDetailView.as_view(), name="contact-detail"),
]
