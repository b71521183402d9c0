"""
Base exception classes for application-wide error handling.

This module provides a standardized exception hierarchy that enables:
- Consistent error responses across the application
- Machine-readable error codes for client handling
- A clear split between domain failures and infrastructure failures

Exception Hierarchy:
    BaseApplicationError (base)
    ├── NotFoundError - Resource not found
    └── StorageError - The data store failed (opaque infrastructure error)

Usage:
    from core.exceptions import NotFoundError

    raise NotFoundError("Chat not found", details={"chat_id": chat_id})

    # Convert to dict for API response
    try:
        ...
    except BaseApplicationError as e:
        return Response(e.to_dict(), status=e.status_code)

Note:
    Expected domain failures (duplicate contact, not a member, ...) are
    returned as ServiceResult failures, not raised. These exceptions cover
    lookups at the view boundary and infrastructure errors.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from django.db import DatabaseError
from rest_framework import status
from rest_framework.exceptions import PermissionDenied
from rest_framework.response import Response
from rest_framework.views import exception_handler

if TYPE_CHECKING:
    from typing import Any

logger = logging.getLogger(__name__)


class BaseApplicationError(Exception):
    """
    Base exception for all application-specific errors.

    Attributes:
        message: Human-readable error description
        error_code: Machine-readable code for client-side handling
        details: Additional error context (ids, metadata, etc.)
        status_code: HTTP status used by api_exception_handler
    """

    default_error_code: str = "APPLICATION_ERROR"
    status_code: int = status.HTTP_400_BAD_REQUEST

    def __init__(
        self,
        message: str,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        self.message = message
        self.error_code = error_code or self.default_error_code
        self.details = details or {}
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        """
        Convert exception to dictionary for API response.

        Example:
            {
                "error": "Chat not found",
                "error_code": "NOT_FOUND",
                "details": {"chat_id": 12}
            }
        """
        result: dict[str, Any] = {
            "error": self.message,
            "error_code": self.error_code,
        }
        if self.details:
            result["details"] = self.details
        return result

    def __str__(self) -> str:
        """Return string representation with error code."""
        return f"[{self.error_code}] {self.message}"

    def __repr__(self) -> str:
        """Return detailed representation for debugging."""
        return (
            f"{self.__class__.__name__}("
            f"message={self.message!r}, "
            f"error_code={self.error_code!r}, "
            f"details={self.details!r})"
        )


class NotFoundError(BaseApplicationError):
    """
    Raised when a requested resource is not found.

    Example:
        chat = Chat.objects.filter(pk=chat_id).first()
        if not chat:
            raise NotFoundError("Chat not found", details={"chat_id": chat_id})
    """

    default_error_code: str = "NOT_FOUND"
    status_code: int = status.HTTP_404_NOT_FOUND


class StorageError(BaseApplicationError):
    """
    Raised (or synthesized by the exception handler) when the data store fails.

    Never reported as a domain error: a lock timeout is a storage failure,
    not a missing record.
    """

    default_error_code: str = "STORAGE_ERROR"
    status_code: int = status.HTTP_503_SERVICE_UNAVAILABLE


def api_exception_handler(exc: Exception, context: dict) -> Response | None:
    """
    DRF exception handler that understands the application hierarchy.

    - BaseApplicationError: rendered with ``to_dict()`` and its status code
    - django.db.DatabaseError: logged and rendered as STORAGE_ERROR (503)
    - PermissionDenied: rendered as ``{"error", "error_code"}`` using the
      denying permission's ``code``
    - Everything else: DRF's default handling

    Configured via REST_FRAMEWORK["EXCEPTION_HANDLER"].
    """
    if isinstance(exc, DatabaseError):
        view = context.get("view")
        logger.exception(
            f"Storage failure in {view.__class__.__name__ if view else 'unknown view'}"
        )
        exc = StorageError("The data store is temporarily unavailable")

    if isinstance(exc, BaseApplicationError):
        return Response(exc.to_dict(), status=exc.status_code)

    response = exception_handler(exc, context)

    if response is not None and isinstance(exc, PermissionDenied):
        response.data = {
            "error": str(exc.detail),
            "error_code": getattr(exc.detail, "code", None) or "PERMISSION_DENIED",
        }

    return response
