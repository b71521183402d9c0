"""
Base service layer patterns for business logic encapsulation.

This module provides foundational patterns for the service layer:
- ServiceResult: Standard result wrapper for consistent success/failure handling
- BaseService: Base class with common service utilities

Service Layer Philosophy:
    Services encapsulate the domain rules of contacts, chats and messages.
    Views handle HTTP concerns and authorization, models hold data,
    services enforce invariants.

Pattern Comparison:
    - ServiceResult: Expected failures (duplicate contact, not a member, ...)
    - Exceptions: Unexpected failures (database errors, bugs)

Usage:
    from core.services import BaseService, ServiceResult

    class ContactService(BaseService):
        @classmethod
        def add(cls, owner, target, name) -> ServiceResult[ContactEntry]:
            if owner.pk == target.pk:
                return ServiceResult.failure(
                    "Cannot add yourself as a contact",
                    error_code="SELF_REFERENCE",
                )

            with cls.atomic():
                entry = ContactEntry.objects.create(...)

            cls.get_logger().info(f"User {owner.pk} added contact {target.pk}")
            return ServiceResult.success(entry)

    # In view
    result = ContactService.add(request.user, target, name)
    if not result:
        return service_failure_response(result)

Related:
    - core.exceptions: For unexpected/exceptional errors
    - core.views.service_failure_response: Maps failures to HTTP responses
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Generic, TypeVar

from django.db import transaction

if TYPE_CHECKING:
    from collections.abc import Generator

# Generic type for ServiceResult data
T = TypeVar("T")


@dataclass
class ServiceResult(Generic[T]):
    """
    Standard result wrapper for service operations.

    Provides consistent success/failure handling without exceptions.
    Use this for expected failures (validation errors, business rule violations).

    Attributes:
        success: Whether the operation succeeded
        data: Result data if successful (None if failed)
        error: Error message if failed (None if successful)
        error_code: Machine-readable error code for client handling
        errors: Field-level errors for validation failures

    Usage:
        # Success case
        return ServiceResult.success(message)

        # Failure case
        return ServiceResult.failure("Message is already deleted", "ALREADY_DELETED")

        # Check result
        result = MessageService.delete(message, user)
        if result.success:
            ...
        else:
            print(f"Error: {result.error} ({result.error_code})")
    """

    success: bool
    data: T | None = None
    error: str | None = None
    error_code: str | None = None
    errors: dict[str, list[str]] | None = field(default=None)

    @classmethod
    def success(cls, data: T) -> ServiceResult[T]:
        """
        Create a successful result.

        Args:
            data: The result data

        Returns:
            ServiceResult with success=True and data set
        """
        return cls(success=True, data=data)

    @classmethod
    def failure(
        cls,
        error: str,
        error_code: str | None = None,
        errors: dict[str, list[str]] | None = None,
    ) -> ServiceResult[T]:
        """
        Create a failed result.

        Args:
            error: Human-readable error message
            error_code: Machine-readable error code for client handling
            errors: Field-level errors (for validation failures)

        Returns:
            ServiceResult with success=False and error details

        Example:
            return ServiceResult.failure(
                "You are not a member of this chat",
                error_code="NOT_CHAT_MEMBER",
            )
        """
        return cls(
            success=False,
            error=error,
            error_code=error_code,
            errors=errors,
        )

    def __bool__(self) -> bool:
        """Allow using result in boolean context (same as ``result.success``)."""
        return self.success


class BaseService:
    """
    Base class for service layer classes.

    Provides common utilities for services:
    - Logging setup per service
    - Database transaction management

    Design Notes:
        - Use @classmethod (no instance state)
        - Use ServiceResult for expected failures
        - Let database exceptions propagate; the API exception handler
          reports them as storage failures
    """

    @classmethod
    def get_logger(cls) -> logging.Logger:
        """
        Get logger for this service.

        Returns a logger named after the service class for
        easy filtering in logs.
        """
        return logging.getLogger(f"{cls.__module__}.{cls.__name__}")

    @classmethod
    @contextmanager
    def atomic(cls) -> Generator[None, None, None]:
        """
        Execute operations in a database transaction.

        Thin wrapper around Django's transaction.atomic() that makes
        transaction boundaries explicit in service code.

        Example:
            with cls.atomic():
                message = Message.objects.create(...)
                Chat.objects.filter(pk=chat.pk).update(last_message=message)
        """
        with transaction.atomic():
            yield
