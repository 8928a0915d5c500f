"""Custom exception classes and error handling utilities."""
from typing import Any, Dict, Optional

from fastapi import Request, status
from fastapi.responses import JSONResponse
from loguru import logger


class DailyBudgetException(Exception):
    """Base exception for the application."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        self.message = message
        self.details = details or {}
        super().__init__(message)


class ValidationError(DailyBudgetException):
    """Malformed or missing request fields."""

    status_code = status.HTTP_400_BAD_REQUEST


class AuthenticationError(DailyBudgetException):
    """Missing bearer token or token/endpoint mismatch."""

    status_code = status.HTTP_401_UNAUTHORIZED


class SubscriptionNotFoundError(DailyBudgetException):
    """No subscription is stored under the requested key."""

    status_code = status.HTTP_404_NOT_FOUND


class ConfigurationError(DailyBudgetException):
    """Required server configuration (secrets, VAPID keys) is missing."""


class StorageError(DailyBudgetException):
    """Key-value store operation errors."""


class PushDeliveryError(DailyBudgetException):
    """The push service rejected a message or could not be reached."""

    def __init__(
        self,
        message: str,
        details: Optional[Dict[str, Any]] = None,
        status_code: Optional[int] = None,
    ):
        super().__init__(message, details)
        self.push_status = status_code

    @property
    def subscription_gone(self) -> bool:
        """True when the push service reports the subscription as expired."""

        return self.push_status in (404, 410)


def _error_response(error: DailyBudgetException, detail: str) -> JSONResponse:
    headers = None
    if isinstance(error, AuthenticationError):
        headers = {"WWW-Authenticate": "Bearer"}
    return JSONResponse(
        status_code=error.status_code,
        content={"detail": detail},
        headers=headers,
    )


async def handle_client_error(request: Request, error: DailyBudgetException) -> JSONResponse:
    """Handle validation, authentication and not-found errors."""
    logger.warning(
        "Client error",
        path=request.url.path,
        error_type=type(error).__name__,
        message=error.message,
    )
    return _error_response(error, error.message)


async def handle_configuration_error(request: Request, error: ConfigurationError) -> JSONResponse:
    """Handle missing server configuration."""
    logger.error("Configuration error", path=request.url.path, message=error.message)
    return _error_response(error, error.message)


async def handle_storage_error(request: Request, error: StorageError) -> JSONResponse:
    """Handle key-value store failures."""
    logger.error("Storage error", path=request.url.path, message=error.message)
    return _error_response(error, "Storage operation failed")


async def handle_push_delivery_error(request: Request, error: PushDeliveryError) -> JSONResponse:
    """Handle push-service failures on synchronous paths."""
    logger.error(
        "Push delivery error",
        path=request.url.path,
        push_status=error.push_status,
        message=error.message,
    )
    return _error_response(error, error.message)


def register_exception_handlers(app) -> None:
    """Attach the handlers above to a FastAPI application."""

    for exc_class in (ValidationError, AuthenticationError, SubscriptionNotFoundError):
        app.add_exception_handler(exc_class, handle_client_error)
    app.add_exception_handler(ConfigurationError, handle_configuration_error)
    app.add_exception_handler(StorageError, handle_storage_error)
    app.add_exception_handler(PushDeliveryError, handle_push_delivery_error)
