"""
Service layer decorators for common functionality.

This module provides decorators for error handling, logging, and input
validation in the service layer.
"""

import functools
import inspect
import structlog
from typing import Any, Awaitable, Callable, Dict, Optional, ParamSpec, TypeVar

from sqlalchemy.exc import SQLAlchemyError

from app.core.exceptions import (
    PlayerDataRetrievalError,
    ServiceException,
    ValidationError,
)

logger = structlog.get_logger(__name__)

# Type variables for generic decorator typing
P = ParamSpec("P")
R = TypeVar("R")

# Errors that originate in the store or the connection beneath it
STORE_ERRORS = (SQLAlchemyError, ConnectionError, TimeoutError)


def _build_context(
    service_name: str,
    operation_name: str,
    bound_args: inspect.BoundArguments,
    include_context: bool,
) -> Dict[str, Any]:
    context: Dict[str, Any] = {
        "service": service_name,
        "operation": operation_name,
    }
    if not include_context:
        return context

    for name, value in bound_args.arguments.items():
        if name in ["self", "db", "session"]:
            continue
        # Limit string values to avoid huge log entries
        if isinstance(value, str) and len(value) > 100:
            context[name] = value[:100] + "..."
        else:
            context[name] = str(value)[:200] if value is not None else None
    return context


def service_error_handler(
    service_name: str,
    include_context: bool = True,
) -> Callable[[Callable[P, Awaitable[R]]], Callable[P, Awaitable[R]]]:
    """
    Decorator for handling service method errors with structured logging.

    Service exceptions are logged and re-raised unchanged. Store failures
    (SQLAlchemy, connection and timeout errors) are re-raised as
    ``PlayerDataRetrievalError`` chained to the original error, so callers
    never see storage specific exception types.

    :param service_name: Name of the service (e.g., "PlayerService")
    :param include_context: Whether to include method parameters in error context
    :returns: Decorated coroutine function with error handling

    :example:
        @service_error_handler("PlayerService")
        async def get_by_last_name(self, last_name: str) -> Player:
            ...
    """

    def decorator(func: Callable[P, Awaitable[R]]) -> Callable[P, Awaitable[R]]:
        operation_name = func.__name__
        sig = inspect.signature(func)

        @functools.wraps(func)
        async def wrapper(*args: P.args, **kwargs: P.kwargs) -> R:
            bound_args = sig.bind(*args, **kwargs)
            bound_args.apply_defaults()
            context = _build_context(
                service_name, operation_name, bound_args, include_context
            )

            try:
                logger.debug("Service method called", **context)
                result = await func(*args, **kwargs)
                logger.debug("Service method completed successfully", **context)
                return result

            except ServiceException as e:
                if e.operation is None:
                    e.operation = operation_name
                log = logger.error if isinstance(e, PlayerDataRetrievalError) else logger.warning
                log(
                    "Service operation failed",
                    error_type=e.__class__.__name__,
                    error_message=str(e),
                    error_context=e.context,
                    **context,
                )
                raise

            except STORE_ERRORS as e:
                logger.error(
                    "Player store error in service operation",
                    error_type=e.__class__.__name__,
                    error_message=str(e),
                    **context,
                )
                raise PlayerDataRetrievalError(
                    operation=operation_name,
                    context=context if include_context else {},
                    original_error=e,
                ) from e

        return wrapper

    return decorator


def input_validation(
    validate_non_empty: Optional[list[str]] = None,
) -> Callable[[Callable[P, Awaitable[R]]], Callable[P, Awaitable[R]]]:
    """
    Decorator for input validation in service methods.

    :param validate_non_empty: List of parameter names that must not be empty

    :example:
        @input_validation(validate_non_empty=["last_name"])
    """

    def decorator(func: Callable[P, Awaitable[R]]) -> Callable[P, Awaitable[R]]:
        sig = inspect.signature(func)

        @functools.wraps(func)
        async def wrapper(*args: P.args, **kwargs: P.kwargs) -> R:
            bound_args = sig.bind(*args, **kwargs)
            bound_args.apply_defaults()

            for param_name in validate_non_empty or []:
                value = bound_args.arguments.get(param_name)
                if value is None or (isinstance(value, str) and not value.strip()):
                    raise ValidationError(
                        message=f"{param_name} cannot be empty or None",
                        operation=func.__name__,
                        field=param_name,
                        value=value,
                    )

            return await func(*args, **kwargs)

        return wrapper

    return decorator
