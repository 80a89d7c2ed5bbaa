"""
Domain Result Types - Pure Business Logic Results.

These types represent the outcome of domain operations without any
infrastructure or presentation concerns. Every failure carries a stable
``error_code`` that adapters branch on.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Generic, Optional, TypeVar


class DomainErrorType(Enum):
    """Coarse categories of domain errors."""

    VALIDATION_ERROR = "validation_error"
    NOT_FOUND = "not_found"
    ALREADY_EXISTS = "already_exists"
    BUSINESS_RULE_VIOLATION = "business_rule_violation"
    PRECONDITION_FAILED = "precondition_failed"
    DEPENDENCY_ERROR = "dependency_error"
    OPERATION_FAILED = "operation_failed"
    UNAUTHORIZED = "unauthorized"


T = TypeVar("T")


@dataclass
class DomainResult(Generic[T]):
    """
    Base result type for domain operations.

    Represents either success with data or failure with error information.
    This is a pure domain type with no infrastructure dependencies.
    """

    success: bool
    data: Optional[T] = None
    error_type: Optional[DomainErrorType] = None
    error_code: Optional[str] = None
    error_message: Optional[str] = None
    error_details: Dict[str, Any] = field(default_factory=dict)

    @property
    def is_success(self) -> bool:
        """Check if result is successful."""
        return self.success

    @property
    def is_failure(self) -> bool:
        """Check if result is a failure."""
        return not self.success

    def get_data_or_raise(self) -> T:
        """Get data or raise exception if failed."""
        if self.is_failure:
            raise ValueError(
                f"Cannot get data from failed result [{self.error_code}]: {self.error_message}"
            )
        return self.data  # type: ignore

    def get_data_or_default(self, default: T) -> T:
        """Get data or return default if failed."""
        return self.data if self.is_success and self.data is not None else default


@dataclass
class DomainSuccess(Generic[T]):
    """
    Factory for creating successful domain results.

    Usage:
        result = DomainSuccess.create(data=task)
    """

    @staticmethod
    def create(data: Optional[T] = None) -> DomainResult[T]:
        """Create a successful domain result."""
        return DomainResult(success=True, data=data)


@dataclass
class DomainError:
    """
    Factory for creating failed domain results.

    Usage:
        result = DomainError.validation_error("Invalid input", details={"field": "name"})
    """

    @staticmethod
    def create(
        error_type: DomainErrorType,
        code: str,
        message: str,
        details: Optional[Dict[str, Any]] = None,
    ) -> DomainResult[Any]:
        """Create a failed domain result."""
        return DomainResult(
            success=False,
            error_type=error_type,
            error_code=code,
            error_message=message,
            error_details=details or {},
        )

    @staticmethod
    def validation_error(
        message: str,
        details: Optional[Dict[str, Any]] = None,
        code: str = "validation_error",
    ) -> DomainResult[Any]:
        """Create a validation error result."""
        return DomainError.create(DomainErrorType.VALIDATION_ERROR, code, message, details)

    @staticmethod
    def not_found(resource: str, resource_id: str) -> DomainResult[Any]:
        """Create a not found error result, coded ``<resource>_not_found``."""
        return DomainError.create(
            DomainErrorType.NOT_FOUND,
            f"{resource.lower()}_not_found",
            f"{resource} {resource_id} was not found.",
            {"resource": resource, "id": resource_id},
        )

    @staticmethod
    def already_exists(
        resource: str, identifier: str, code: Optional[str] = None
    ) -> DomainResult[Any]:
        """Create an already exists error result."""
        return DomainError.create(
            DomainErrorType.ALREADY_EXISTS,
            code or f"{resource.lower()}_already_exists",
            f"{resource} {identifier} already exists.",
            {"resource": resource, "identifier": identifier},
        )

    @staticmethod
    def operation_failed(
        operation: str,
        reason: str,
        details: Optional[Dict[str, Any]] = None,
    ) -> DomainResult[Any]:
        """Create an operation failed error result."""
        return DomainError.create(
            DomainErrorType.OPERATION_FAILED,
            "operation_failed",
            f"Operation '{operation}' failed: {reason}",
            {**(details or {}), "operation": operation},
        )
