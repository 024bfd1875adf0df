#!/usr/bin/env python3
"""
Error Handling for the Recipe Manager
Exception taxonomy shared by the store, combiner, interchange and CLI layers,
plus structured error recording with Prometheus counters.
"""

import uuid
from datetime import datetime, timezone
from enum import Enum
from typing import Dict, List, Optional, Any

import structlog
from prometheus_client import Counter

# Metrics
ERROR_COUNTER = Counter(
    'recipro_errors_total',
    'Total errors by code, severity and component',
    ['error_code', 'severity', 'component']
)

# Setup logging
logger = structlog.get_logger(__name__)


# Enums
class ErrorSeverity(Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class ErrorCategory(Enum):
    VALIDATION = "validation"
    NOT_FOUND = "not_found"
    STORAGE = "storage"
    AUTHORIZATION = "authorization"
    UNKNOWN = "unknown"


# Custom Exceptions
class RecipeManagerError(Exception):
    """Base exception for recipe manager errors."""

    def __init__(self, message: str, error_code: str = None, details: Dict[str, Any] = None,
                 severity: ErrorSeverity = ErrorSeverity.MEDIUM, category: ErrorCategory = ErrorCategory.UNKNOWN):
        super().__init__(message)
        self.message = message
        self.error_code = error_code or self.__class__.__name__
        self.details = details or {}
        self.severity = severity
        self.category = category
        self.timestamp = datetime.now(timezone.utc)
        self.trace_id = str(uuid.uuid4())

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "error_code": self.error_code,
            "message": self.message,
            "severity": self.severity.value,
            "category": self.category.value,
            "details": self.details,
            "timestamp": self.timestamp.isoformat(),
            "trace_id": self.trace_id,
        }


class NotFoundError(RecipeManagerError):
    """Referenced recipe id does not exist in the store."""

    def __init__(self, recipe_id: str, **kwargs):
        super().__init__(f"Recipe with ID {recipe_id} not found",
                         details={"recipe_id": recipe_id},
                         category=ErrorCategory.NOT_FOUND, **kwargs)
        self.recipe_id = recipe_id


class DuplicateKeyError(RecipeManagerError):
    """Store rejected a create because the id already exists."""

    def __init__(self, recipe_id: str, **kwargs):
        super().__init__(f"Recipe with ID {recipe_id} already exists",
                         details={"recipe_id": recipe_id},
                         category=ErrorCategory.STORAGE, **kwargs)
        self.recipe_id = recipe_id


class ValidationError(RecipeManagerError):
    """Error during data validation."""

    def __init__(self, message: str, validation_errors: List[str] = None, **kwargs):
        super().__init__(message, category=ErrorCategory.VALIDATION, **kwargs)
        self.validation_errors = validation_errors or []
        self.details.setdefault("validation_errors", self.validation_errors)


class StorageError(RecipeManagerError):
    """Unexpected persistence failure."""

    def __init__(self, message: str, operation: str = None, **kwargs):
        super().__init__(message, category=ErrorCategory.STORAGE,
                         severity=ErrorSeverity.HIGH, **kwargs)
        self.operation = operation
        self.details.setdefault("operation", operation)


class PermissionDeniedError(RecipeManagerError):
    """Admin-only action attempted by a regular user."""

    def __init__(self, action: str, user: Optional[str] = None, **kwargs):
        super().__init__(f"'{action}' requires an admin user",
                         details={"action": action, "user": user},
                         category=ErrorCategory.AUTHORIZATION,
                         severity=ErrorSeverity.LOW, **kwargs)
        self.action = action
        self.user = user


def record_error(error: Exception, component: str = "unknown", operation: str = "unknown") -> Dict[str, Any]:
    """
    Log an error and count it.

    Args:
        error: The exception being reported
        component: Component the error surfaced in
        operation: Operation that failed

    Returns:
        Error details dictionary
    """
    if isinstance(error, RecipeManagerError):
        details = error.to_dict()
    else:
        details = {
            "error_code": type(error).__name__,
            "message": str(error),
            "severity": ErrorSeverity.HIGH.value,
            "category": ErrorCategory.UNKNOWN.value,
        }

    ERROR_COUNTER.labels(
        error_code=details["error_code"],
        severity=details["severity"],
        component=component
    ).inc()

    log = logger.warning if details["severity"] in ("low", "medium") else logger.error
    log("operation_failed", component=component, operation=operation, **details)
    return details
