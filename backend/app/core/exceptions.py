"""
Service layer custom exceptions.

Domain errors (not found, already exists) are raised directly so the
presentation layer can map them to distinct responses. Anything that goes
wrong in the store surfaces as ``PlayerDataRetrievalError``.
"""

from typing import Any, Dict, Optional


class ServiceException(Exception):
    """Base exception for all service layer errors."""

    def __init__(
        self,
        message: str,
        service: Optional[str] = None,
        operation: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
        original_error: Optional[Exception] = None,
    ):
        super().__init__(message)
        self.message = message
        self.service = service
        self.operation = operation
        self.context = context or {}
        self.original_error = original_error

    def __str__(self) -> str:
        return self.message


class ValidationError(ServiceException):
    """Exception raised for input validation errors in services."""

    def __init__(
        self,
        message: str,
        service: Optional[str] = "PlayerService",
        operation: Optional[str] = None,
        field: Optional[str] = None,
        value: Optional[Any] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        validation_context = context or {}
        if field:
            validation_context["field"] = field
        if value is not None:
            validation_context["value"] = str(value)

        super().__init__(
            message=f"Validation error: {message}",
            service=service,
            operation=operation,
            context=validation_context,
        )


class PlayerDataRetrievalError(ServiceException):
    """Raised when the player store cannot be read or written."""

    def __init__(
        self,
        operation: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
        original_error: Optional[Exception] = None,
    ):
        super().__init__(
            message="Could not retrieve player data",
            service="PlayerService",
            operation=operation,
            context=context,
            original_error=original_error,
        )


class PlayerNotFoundError(ServiceException):
    """Raised when no player matches the requested last name."""

    def __init__(self, last_name: str, operation: Optional[str] = None):
        super().__init__(
            message=f"Player with last name {last_name} could not be found.",
            service="PlayerService",
            operation=operation,
            context={"last_name": last_name},
        )
        self.last_name = last_name


class PlayerAlreadyExistsError(ServiceException):
    """Raised when creating a player whose last name is already taken."""

    def __init__(self, last_name: str, operation: Optional[str] = None):
        super().__init__(
            message=f"Player with last name {last_name} already exists.",
            service="PlayerService",
            operation=operation,
            context={"last_name": last_name},
        )
        self.last_name = last_name
