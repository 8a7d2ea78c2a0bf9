from enum import Enum
from typing import Any, Dict, List, Optional


class ErrorType(str, Enum):
    BAD_REQUEST = "BAD_REQUEST"
    UNAUTHORIZED = "UNAUTHORIZED"
    FORBIDDEN = "FORBIDDEN"
    NOT_FOUND = "NOT_FOUND"
    CONFLICT = "CONFLICT"
    VALIDATION = "VALIDATION_ERROR"
    PAYMENT = "PAYMENT_ERROR"
    UPLOAD = "UPLOAD_ERROR"
    INTERNAL_SERVER = "INTERNAL_SERVER_ERROR"


class AppError(Exception):
    """
    Typed application error

    Raised by services and dependencies; the error handlers in
    gamification.core.responses turn it into a JSON envelope.
    """
    type: ErrorType = ErrorType.INTERNAL_SERVER
    status_code: int = 500

    def __init__(self, message: str, details: Any = None, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.details = details
        if status_code is not None:
            self.status_code = status_code


class BadRequest(AppError):
    type = ErrorType.BAD_REQUEST
    status_code = 400


class Unauthorized(AppError):
    type = ErrorType.UNAUTHORIZED
    status_code = 401


class Forbidden(AppError):
    type = ErrorType.FORBIDDEN
    status_code = 403


class NotFound(AppError):
    type = ErrorType.NOT_FOUND
    status_code = 404


class Conflict(AppError):
    type = ErrorType.CONFLICT
    status_code = 409


class ValidationFailed(AppError):
    """Accumulated field errors: [{"field": ..., "message": ...}]"""
    type = ErrorType.VALIDATION
    status_code = 422

    def __init__(self, errors: List[Dict[str, str]]):
        super().__init__("Validation failed", details=errors)
        self.errors = errors


class PaymentError(AppError):
    """Gateway or transport failure; details keep the gateway's own error payload"""
    type = ErrorType.PAYMENT
    status_code = 502


class UploadError(AppError):
    type = ErrorType.UPLOAD
    status_code = 502


class InternalServerError(AppError):
    type = ErrorType.INTERNAL_SERVER
    status_code = 500
