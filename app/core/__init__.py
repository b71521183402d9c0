"""
Core Application - Infrastructure & Base Classes

This app contains infrastructure code shared by the domain apps
(authentication, contacts, chat). It holds no domain logic.

Models (import from core.models):
    - BaseModel: Abstract model with timestamps (created_at, updated_at)

Model Mixins (import from core.model_mixins):
    - SoftDeleteMixin: Soft delete support (is_deleted, deleted_at)

Services (import from core.services):
    - BaseService: Base class for service layer
    - ServiceResult: Standard result wrapper for success/failure handling

Exceptions (import from core.exceptions):
    - BaseApplicationError: Base exception with error codes
    - NotFoundError: Resource not found
    - StorageError: Data store failure
    - api_exception_handler: DRF exception handler

Views (import from core.views):
    - health_check: Liveness/readiness endpoint
    - service_failure_response: ServiceResult failure -> HTTP response

Note:
    Only the service layer is re-exported here. Models, exceptions and
    views import Django or DRF machinery that is not usable while apps
    are still loading; import them directly from their modules.
"""

# Services (no Django model dependencies)
from .services import BaseService, ServiceResult

__all__ = [
    "BaseService",
    "ServiceResult",
]
