"""Standardized error responses for the TruthStamp API.

All error responses share one body format:
{
    "success": false,
    "error": {
        "code": "ERROR_CODE",
        "message": "Human readable message"
    }
}
"""

import logging

from fastapi import Request
from fastapi.responses import JSONResponse

from ..domain.errors import (
    AlreadyInitializedError,
    AlreadyRegisteredError,
    AuthorizationError,
    DistributionArithmeticError,
    NotFoundError,
    ProtocolError,
    ValidationError,
)

logger = logging.getLogger(__name__)


class MissingAccountError(ProtocolError):
    """The request carries no acting account."""

    code = "AUTH_MISSING_ADDRESS"


# Most specific classes first
_STATUS_CODES = [
    (MissingAccountError, 401),
    (AuthorizationError, 403),
    (NotFoundError, 404),
    (AlreadyInitializedError, 409),
    (AlreadyRegisteredError, 409),
    (DistributionArithmeticError, 409),
    (ValidationError, 400),
]


def error_response(code: str, message: str, status_code: int = 400) -> JSONResponse:
    """Create a standardized error response.

    Args:
        code: Error code (e.g., NOT_FOUND_RESOURCE)
        message: Human-readable error message
        status_code: HTTP status code (default 400)

    Returns:
        JSONResponse with standardized error format
    """
    return JSONResponse(
        {
            "success": False,
            "error": {
                "code": code,
                "message": message,
            },
        },
        status_code=status_code,
    )


def status_code_for(error: ProtocolError) -> int:
    """Map a protocol error to its HTTP status code."""
    for error_type, status_code in _STATUS_CODES:
        if isinstance(error, error_type):
            return status_code
    return 500


async def protocol_error_handler(request: Request, exc: ProtocolError) -> JSONResponse:
    """Convert protocol errors raised by the domain services."""
    status_code = status_code_for(exc)
    if status_code >= 500:
        logger.error(f"❌ {request.method} {request.url.path} failed: {type(exc).__name__}: {exc}")
    else:
        logger.warning(f"⚠️ {request.method} {request.url.path} rejected: {type(exc).__name__}: {exc}")
    return error_response(exc.code, exc.message, status_code=status_code)
