#!/usr/bin/env python3
"""
Custom exceptions and error handlers for the web application.

Every error leaves the API with the same body:
    {"success": false, "error": str, "code": CODE, "details": {...}}
"""

import logging
from typing import Any, Dict, Optional
from fastapi import Request, HTTPException
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from core.admission import AdmissionRejected, RejectionCode

logger = logging.getLogger(__name__)


REJECTION_STATUS: Dict[RejectionCode, int] = {
    RejectionCode.VALIDATION_ERROR: 400,
    RejectionCode.NOT_FOUND: 404,
    RejectionCode.JOB_NOT_ACTIVE: 400,
    RejectionCode.DUPLICATE_APPLICATION: 409,
    RejectionCode.PAYMENT_REQUIRED: 402,
    RejectionCode.MATCH_SCORE_TOO_LOW: 400,
    RejectionCode.DAILY_LIMIT_REACHED: 429,
}


class ServiceException(Exception):
    """Base exception for service layer errors."""
    status_code = 500
    code = 'INTERNAL_ERROR'

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class ValidationException(ServiceException):
    """Raised when caller input breaks a business rule."""
    status_code = 400
    code = 'VALIDATION_ERROR'


class NotFoundException(ServiceException):
    """Raised when a resource is missing or not visible to the caller."""
    status_code = 404
    code = 'NOT_FOUND'


class AuthenticationException(ServiceException):
    """Raised when the bearer credential is missing or invalid."""
    status_code = 401
    code = 'UNAUTHORIZED'


class ForbiddenException(ServiceException):
    """Raised when the caller's role may not use an endpoint."""
    status_code = 403
    code = 'FORBIDDEN'


class InvalidSignatureException(ServiceException):
    """Raised when a webhook signature does not verify."""
    status_code = 401
    code = 'INVALID_SIGNATURE'


class ConfigurationException(ServiceException):
    """Raised when a required secret or endpoint is not configured."""
    status_code = 500
    code = 'CONFIGURATION_ERROR'


class RateLimitExceededException(ServiceException):
    """Raised when the caller's window budget is spent."""
    status_code = 429
    code = 'RATE_LIMIT_EXCEEDED'

    def __init__(self, message: str, headers: Dict[str, str], retry_after_seconds: int):
        super().__init__(message, {'retry_after_seconds': retry_after_seconds})
        self.headers = dict(headers)
        self.headers['Retry-After'] = str(retry_after_seconds)


class AdmissionRejectedException(ServiceException):
    """Carries an admission rejection out of a route."""

    def __init__(self, rejection: AdmissionRejected):
        super().__init__(rejection.message, rejection.details)
        self.rejection = rejection
        self.code = rejection.code.value
        self.status_code = REJECTION_STATUS.get(rejection.code, 400)


def error_body(message: str, code: str, details: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    return {
        "success": False,
        "error": message,
        "code": code,
        "details": details or {}
    }


async def service_exception_handler(
    request: Request,
    exc: ServiceException
) -> JSONResponse:
    """
    Handle service layer exceptions.

    Args:
        request: The FastAPI request.
        exc: The service exception.

    Returns:
        JSONResponse with error details.
    """
    if exc.status_code >= 500:
        logger.error(f"Service error in {request.url.path}: {exc}", exc_info=True)
    else:
        logger.info(f"{exc.code} in {request.url.path}: {exc.message}")

    return JSONResponse(
        status_code=exc.status_code,
        content=error_body(exc.message, exc.code, exc.details),
        headers=getattr(exc, 'headers', None)
    )


async def http_exception_handler(
    request: Request,
    exc: HTTPException
) -> JSONResponse:
    """Handle FastAPI HTTP exceptions with consistent format."""
    return JSONResponse(
        status_code=exc.status_code,
        content=error_body(str(exc.detail), "HTTP_ERROR"),
        headers=getattr(exc, 'headers', None)
    )


async def validation_exception_handler(
    request: Request,
    exc: RequestValidationError
) -> JSONResponse:
    """Request body or parameter failed pydantic validation."""
    return JSONResponse(
        status_code=422,
        content=error_body("Invalid request", "VALIDATION_ERROR", {"errors": jsonable_encoder(exc.errors())})
    )


async def general_exception_handler(
    request: Request,
    exc: Exception
) -> JSONResponse:
    """Handle unexpected exceptions."""
    logger.exception(f"Unexpected error in {request.url.path}")

    return JSONResponse(
        status_code=500,
        content=error_body("Internal server error", "InternalError")
    )
