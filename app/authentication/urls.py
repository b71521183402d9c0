"""
URL configuration for authentication app.

URL structure:
    /api/v1/auth/register/        - Create account (POST)
    /api/v1/auth/login/           - Login (POST)
    /api/v1/auth/token/refresh/   - Refresh access token (POST)
    /api/v1/auth/profile/         - Current user profile (GET/PATCH)
    /api/v1/auth/status/          - Presence status (PATCH)
    /api/v1/auth/users/search/    - User search (GET)
"""

from django.urls import path
from rest_framework_simplejwt.views import TokenRefreshView

from authentication.views import (
    LoginView,
    ProfileView,
    RegisterView,
    StatusView,
    UserSearchView,
)

app_name = "authentication"

urlpatterns = [
    path("register/", RegisterView.as_view(), name="register"),
    path("login/", LoginView.as_view(), name="login"),
    path("token/refresh/", TokenRefreshView.as_view(), name="token-refresh"),
    path("profile/", ProfileView.as_view(), name="profile"),
    path("status/", StatusView.as_view(), name="status"),
    path("users/search/", UserSearchView.as_view(), name="user-search"),
]
