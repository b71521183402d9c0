"""
Authentication services.

This module provides the identity directory used by the rest of the system
and the account operations exposed over HTTP:

- IdentityService: Resolve users by mobile or id, public profiles, search
- AuthService: Registration, login, status and profile updates

Related files:
    - models.py: User model
    - views.py: HTTP endpoints calling these services

Error codes:
    PARTIAL_MEMBERSHIP: One or more mobiles did not resolve to a user
    QUERY_TOO_SHORT: Search query shorter than 2 characters
    MOBILE_EXISTS: Registration with a mobile that is already taken
    INVALID_CREDENTIALS: Unknown mobile, wrong password or inactive account
    INVALID_STATUS: Status outside online/offline/away
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from django.db import IntegrityError
from django.db.models import Q
from rest_framework_simplejwt.tokens import RefreshToken

from authentication.models import User
from core.services import BaseService, ServiceResult

if TYPE_CHECKING:
    from collections.abc import Iterable
    from typing import Any

SEARCH_MIN_LENGTH = 2
SEARCH_DEFAULT_LIMIT = 10


def issue_tokens(user: User) -> dict[str, str]:
    """Issue a JWT access/refresh pair for the user."""
    refresh = RefreshToken.for_user(user)
    return {
        "access": str(refresh.access_token),
        "refresh": str(refresh),
    }


class IdentityService(BaseService):
    """
    Read-only lookups over the user directory.

    Contact and chat code never copy user data; they hold identifiers and
    resolve them through this service (or the ORM relation) at read time.
    """

    @classmethod
    def resolve_by_mobile(cls, mobile: str) -> User | None:
        """Return the active user with this mobile number, or None."""
        if not mobile:
            return None
        return User.objects.filter(mobile=mobile.strip(), is_active=True).first()

    @classmethod
    def resolve_by_id(cls, user_id) -> User | None:
        """Return the active user with this id, or None."""
        try:
            return User.objects.filter(pk=user_id, is_active=True).first()
        except (TypeError, ValueError):
            return None

    @classmethod
    def resolve_many_by_mobile(cls, mobiles: Iterable[str]) -> ServiceResult[list[User]]:
        """
        Resolve every mobile in the list to a user.

        Duplicates in the input collapse to one user. The order of first
        appearance is preserved.

        Returns:
            ServiceResult with the list of users, or PARTIAL_MEMBERSHIP
            naming the mobiles that did not resolve.
        """
        wanted = []
        for mobile in mobiles:
            mobile = (mobile or "").strip()
            if mobile and mobile not in wanted:
                wanted.append(mobile)

        found = {
            user.mobile: user
            for user in User.objects.filter(mobile__in=wanted, is_active=True)
        }
        missing = [mobile for mobile in wanted if mobile not in found]
        if missing:
            return ServiceResult.failure(
                "Some members were not found",
                error_code="PARTIAL_MEMBERSHIP",
                errors={"member_mobiles": missing},
            )

        return ServiceResult.success([found[mobile] for mobile in wanted])

    @classmethod
    def public_profile(cls, user: User) -> dict[str, Any]:
        """Public fields of a user, safe to show to other users."""
        return {
            "id": user.pk,
            "name": user.name,
            "mobile": user.mobile,
            "profile_pic": user.profile_pic,
            "status": user.status,
            "created_at": user.created_at,
            "updated_at": user.updated_at,
        }

    @classmethod
    def search_users(
        cls,
        query: str,
        exclude_user: User | None = None,
        limit: int = SEARCH_DEFAULT_LIMIT,
    ) -> ServiceResult[list[User]]:
        """
        Find users whose name or mobile contains the query (case-insensitive).

        Args:
            query: Search text, at least 2 characters after trimming
            exclude_user: Usually the caller; never part of the results
            limit: Maximum number of users returned
        """
        query = (query or "").strip()
        if len(query) < SEARCH_MIN_LENGTH:
            return ServiceResult.failure(
                "Search query must be at least 2 characters",
                error_code="QUERY_TOO_SHORT",
            )

        users = User.objects.filter(
            Q(name__icontains=query) | Q(mobile__icontains=query),
            is_active=True,
        )
        if exclude_user is not None:
            users = users.exclude(pk=exclude_user.pk)

        return ServiceResult.success(list(users.order_by("name", "id")[:limit]))


class AuthService(BaseService):
    """
    Account lifecycle: registration, login, presence and profile.

    Usage:
        result = AuthService.register("Ada", "5550001111", "secret1")
        if result.success:
            user, tokens = result.data["user"], result.data["tokens"]
    """

    @classmethod
    def register(cls, name: str, mobile: str, password: str) -> ServiceResult[dict]:
        """
        Create an account and issue tokens.

        Field formats are validated by RegisterSerializer; this method
        enforces mobile uniqueness.

        Returns:
            ServiceResult with {"user", "tokens"}, or MOBILE_EXISTS
        """
        mobile = mobile.strip()
        if User.objects.filter(mobile=mobile).exists():
            return ServiceResult.failure(
                "User with this mobile number already exists",
                error_code="MOBILE_EXISTS",
            )

        try:
            with cls.atomic():
                user = User.objects.create_user(
                    mobile=mobile,
                    password=password,
                    name=name.strip(),
                )
        except IntegrityError:
            # Lost a race with a concurrent registration of the same mobile
            return ServiceResult.failure(
                "User with this mobile number already exists",
                error_code="MOBILE_EXISTS",
            )

        cls.get_logger().info(f"Registered user {user.pk}")
        return ServiceResult.success({"user": user, "tokens": issue_tokens(user)})

    @classmethod
    def login(cls, mobile: str, password: str) -> ServiceResult[dict]:
        """
        Check credentials, mark the user online and issue tokens.

        Returns:
            ServiceResult with {"user", "tokens"}, or INVALID_CREDENTIALS
        """
        user = User.objects.filter(mobile=(mobile or "").strip()).first()
        if user is None or not user.is_active or not user.check_password(password):
            cls.get_logger().info("Rejected login attempt")
            return ServiceResult.failure(
                "Invalid mobile number or password",
                error_code="INVALID_CREDENTIALS",
            )

        user.status = User.Status.ONLINE
        user.save(update_fields=["status", "updated_at"])

        cls.get_logger().info(f"User {user.pk} logged in")
        return ServiceResult.success({"user": user, "tokens": issue_tokens(user)})

    @classmethod
    def update_status(cls, user: User, status: str) -> ServiceResult[User]:
        """Set presence status; INVALID_STATUS outside online/offline/away."""
        if status not in User.Status.values:
            return ServiceResult.failure(
                "Status must be one of: online, offline, away",
                error_code="INVALID_STATUS",
            )

        user.status = status
        user.save(update_fields=["status", "updated_at"])
        return ServiceResult.success(user)

    @classmethod
    def update_profile(
        cls,
        user: User,
        name: str | None = None,
        profile_pic: str | None = None,
    ) -> ServiceResult[User]:
        """Update name and/or profile picture. Omitted fields are unchanged."""
        update_fields = []
        if name is not None:
            user.name = name.strip()
            update_fields.append("name")
        if profile_pic is not None:
            user.profile_pic = profile_pic
            update_fields.append("profile_pic")

        if update_fields:
            update_fields.append("updated_at")
            user.save(update_fields=update_fields)
            cls.get_logger().info(f"User {user.pk} updated profile: {update_fields}")

        return ServiceResult.success(user)
