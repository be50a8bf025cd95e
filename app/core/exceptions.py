"""Typed errors raised by the services and mapped to status codes by the HTTP layer."""
from typing import Any, Dict, Optional


class AppException(Exception):
    status_code: int = 500
    code: str = "INTERNAL_SERVER_ERROR"

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details


class NotFoundError(AppException):
    status_code = 404
    code = "NOT_FOUND"


class ValidationFailureError(AppException):
    status_code = 400
    code = "BAD_REQUEST"


class UnauthorizedError(AppException):
    status_code = 401
    code = "UNAUTHORIZED"


class ForbiddenError(AppException):
    status_code = 403
    code = "FORBIDDEN"


class PaymentGatewayError(AppException):
    status_code = 502
    code = "PAYMENT_GATEWAY_ERROR"


class CacheUnavailableError(AppException):
    """The cache backend could not be reached. Never means "entry absent"."""
    status_code = 503
    code = "CACHE_UNAVAILABLE"
