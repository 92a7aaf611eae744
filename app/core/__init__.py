"""
Core Application - Infrastructure & Base Classes

This app contains infrastructure code shared by the domain apps:

- Generic, reusable base classes (no ledger-specific logic)
- Clear extension points for domain apps
- Infrastructure concerns separated from business logic

Models (import from core.models):
    - BaseModel: Abstract model with timestamps (created_at, updated_at)

Model Mixins (import from core.model_mixins):
    - UUIDPrimaryKeyMixin: UUID as primary key
    - StatusMixin: Active/inactive status for records that are never deleted

Services (import from core.services):
    - BaseService: Base class for service layer
    - ServiceResult: Result wrapper for reporting operations

Exceptions (import from core.exceptions):
    - BaseApplicationError: Base exception with error codes
    - AuthenticationRequiredError: No principal
    - ValidationError: Input validation failures
    - NotFoundError: Resource not found
    - PermissionDeniedError: Authorization failures
    - ConflictError: State conflicts (duplicates, inactive references, etc.)

API (import from their modules):
    - core.exception_handler: DRF exception handler for BaseApplicationError
    - core.openapi: drf-spectacular hooks and tag descriptions
    - core.views: Health check endpoint

Usage:
    from core.models import BaseModel
    from core.model_mixins import StatusMixin, UUIDPrimaryKeyMixin
    from core.services import BaseService, ServiceResult
    from core.exceptions import ConflictError, NotFoundError

Note:
    - Business logic should NOT go here. Extend core classes in your domain apps.
    - Django models and model mixins are NOT imported here to avoid AppRegistryNotReady
      errors. Import them directly from their modules.
"""

# Services (no Django model dependencies)
from .services import BaseService, ServiceResult

# Exceptions (no Django dependencies)
from .exceptions import (
    AuthenticationRequiredError,
    BaseApplicationError,
    ConflictError,
    NotFoundError,
    PermissionDeniedError,
    ValidationError,
)

# Note: Models and model mixins are NOT imported here because they depend on
# Django's app registry being ready. Import them directly from their modules:
#   from core.models import BaseModel
#   from core.model_mixins import StatusMixin, UUIDPrimaryKeyMixin

__all__ = [
    # Services
    "BaseService",
    "ServiceResult",
    # Exceptions
    "BaseApplicationError",
    "AuthenticationRequiredError",
    "ValidationError",
    "NotFoundError",
    "PermissionDeniedError",
    "ConflictError",
]
