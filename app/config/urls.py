"""
URL configuration for the messaging backend.

URL Structure:
    /                              - ReDoc API documentation
    /admin/                        - Django admin interface
    /health/                       - Health check endpoint
    /schema/                       - OpenAPI schema (YAML)
    /api/v1/auth/                  - Authentication endpoints
        register/                  - Create account (returns JWT pair)
        login/                     - Mobile/password login
        token/refresh/             - Refresh access token
        profile/                   - Current user (GET/PATCH)
        status/                    - Presence status (PATCH)
        users/search/              - Find users by name or mobile
    /api/v1/contacts/              - Contact list (GET/POST)
        {user_id}/                 - Rename/remove contact (PATCH/DELETE)
    /api/v1/chats/                 - Chat list
        individual/                - Find or create one-to-one chat
        group/                     - Create group chat
        {id}/                      - Chat detail / group info update
        {id}/members/              - Add group member
        {id}/members/{user_id}/    - Remove group member
        {id}/leave/                - Leave group
        {id}/messages/             - Message list/send
        {id}/messages/unread-count/ - Unread count for caller
        {id}/messages/search/      - Search message content
        {id}/seen/                 - Mark all messages seen
    /api/v1/messages/{id}/         - Message detail/edit/delete
        seen/                      - Mark one message seen
    ws/chat/{id}/                  - WebSocket (see chat.routing)
"""

from django.contrib import admin
from django.urls import include, path
from drf_spectacular.views import SpectacularAPIView, SpectacularRedocView

from core.views import health_check

# =============================================================================
# API v1 Routes
# =============================================================================
api_v1_patterns = [
    path("auth/", include("authentication.urls")),
    path("contacts/", include("contacts.urls")),
    path("", include("chat.urls")),
]

urlpatterns = [
    # Documentation
    path("", SpectacularRedocView.as_view(url_name="schema"), name="redoc"),
    path("schema/", SpectacularAPIView.as_view(), name="schema"),
    # Admin
    path("admin/", admin.site.urls),
    # Health check (Docker, Kubernetes, load balancers)
    path("health/", health_check, name="health_check"),
    # API v1
    path("api/v1/", include(api_v1_patterns)),
]

# =============================================================================
# Admin Site Customization
# =============================================================================
admin.site.site_header = "Messaging Admin"
admin.site.site_title = "Messaging Admin Portal"
admin.site.index_title = "Users, contacts and chats"
