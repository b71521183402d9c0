"""
Authentication views.

This module provides API views for:
- Registration and login (mobile + password, JWT response)
- Profile retrieval and updates
- Presence status updates
- User search

Related files:
    - serializers.py: Request/response serialization
    - services.py: Business logic (AuthService, IdentityService)
    - urls.py: URL routing

Note:
    Token refresh is served by simplejwt's TokenRefreshView, wired in urls.py.
"""

from drf_spectacular.utils import OpenApiParameter, extend_schema
from rest_framework import status
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from authentication.serializers import (
    AuthResponseSerializer,
    LoginSerializer,
    ProfileUpdateSerializer,
    RegisterSerializer,
    StatusUpdateSerializer,
    UserSerializer,
)
from authentication.services import AuthService, IdentityService
from core.views import service_failure_response


def _auth_payload(data):
    return {
        "user": UserSerializer(data["user"]).data,
        "tokens": data["tokens"],
    }


class RegisterView(APIView):
    """
    Create an account.

    POST /api/v1/auth/register/
    """

    permission_classes = [AllowAny]

    @extend_schema(
        summary="Register",
        description="Create an account with name, mobile and password.",
        tags=["Auth"],
        request=RegisterSerializer,
        responses={201: AuthResponseSerializer},
    )
    def post(self, request):
        serializer = RegisterSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        result = AuthService.register(**serializer.validated_data)
        if not result:
            return service_failure_response(result)

        return Response(_auth_payload(result.data), status=status.HTTP_201_CREATED)


class LoginView(APIView):
    """
    Log in with mobile and password.

    POST /api/v1/auth/login/

    Sets the user's status to online.
    """

    permission_classes = [AllowAny]

    @extend_schema(
        summary="Login",
        tags=["Auth"],
        request=LoginSerializer,
        responses={200: AuthResponseSerializer},
    )
    def post(self, request):
        serializer = LoginSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        result = AuthService.login(**serializer.validated_data)
        if not result:
            return service_failure_response(result)

        return Response(_auth_payload(result.data))


class ProfileView(APIView):
    """
    API view for the current user's profile.

    GET: Retrieve current user's profile
    PATCH: Update name and/or profile picture

    URL: /api/v1/auth/profile/
    """

    permission_classes = [IsAuthenticated]

    @extend_schema(
        summary="Get current user's profile",
        tags=["Auth - Profile"],
        responses={200: UserSerializer},
    )
    def get(self, request):
        return Response(UserSerializer(request.user).data)

    @extend_schema(
        summary="Partially update profile",
        tags=["Auth - Profile"],
        request=ProfileUpdateSerializer,
        responses={200: UserSerializer},
    )
    def patch(self, request):
        """
        Request body:
            {
                "name": "Ada Lovelace",                     // Optional
                "profile_pic": "https://cdn.example/a.png"  // Optional
            }
        """
        serializer = ProfileUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        result = AuthService.update_profile(request.user, **serializer.validated_data)
        if not result:
            return service_failure_response(result)

        return Response(UserSerializer(result.data).data)


class StatusView(APIView):
    """PATCH /api/v1/auth/status/ - set presence to online, offline or away."""

    permission_classes = [IsAuthenticated]

    @extend_schema(
        summary="Update presence status",
        tags=["Auth - Profile"],
        request=StatusUpdateSerializer,
        responses={200: UserSerializer},
    )
    def patch(self, request):
        serializer = StatusUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        result = AuthService.update_status(
            request.user, serializer.validated_data["status"]
        )
        if not result:
            return service_failure_response(result)

        return Response(UserSerializer(result.data).data)


class UserSearchView(APIView):
    """
    Find other users by name or mobile.

    GET /api/v1/auth/users/search/?query=<text>
    """

    permission_classes = [IsAuthenticated]

    @extend_schema(
        summary="Search users",
        tags=["Auth - Users"],
        parameters=[
            OpenApiParameter(
                name="query",
                type=str,
                required=True,
                description="Name or mobile fragment (min 2 characters)",
            ),
        ],
        responses={200: UserSerializer(many=True)},
    )
    def get(self, request):
        result = IdentityService.search_users(
            request.query_params.get("query", ""),
            exclude_user=request.user,
        )
        if not result:
            return service_failure_response(result)

        return Response(UserSerializer(result.data, many=True).data)
