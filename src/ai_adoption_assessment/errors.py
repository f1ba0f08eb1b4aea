"""Domain error taxonomy and its HTTP mapping.

Services raise these exceptions; the handlers registered by
``register_exception_handlers`` translate them into JSON error responses.
"""

from enum import Enum

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from ai_adoption_assessment.observability import get_logger

logger = get_logger(__name__)


class ErrorCode(str, Enum):
    """Machine-readable error codes returned in error bodies."""

    NOT_FOUND = "NOT_FOUND"
    INVALID_OPERATION = "INVALID_OPERATION"
    VALIDATION_FAILED = "VALIDATION_FAILED"
    UNAUTHENTICATED = "UNAUTHENTICATED"
    LLM_UNAVAILABLE = "LLM_UNAVAILABLE"
    LLM_BAD_RESPONSE = "LLM_BAD_RESPONSE"


class AdoptionError(Exception):
    """Base class for all domain errors."""

    status_code: int = status.HTTP_400_BAD_REQUEST
    default_code: ErrorCode = ErrorCode.INVALID_OPERATION

    def __init__(self, message: str, error_code: ErrorCode | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.error_code = error_code or self.default_code


class NotFoundError(AdoptionError):
    """Raised when a requested entity does not exist."""

    status_code = status.HTTP_404_NOT_FOUND
    default_code = ErrorCode.NOT_FOUND


class ConflictError(AdoptionError):
    """Raised when an operation is not allowed in the entity's current state."""

    status_code = status.HTTP_409_CONFLICT
    default_code = ErrorCode.INVALID_OPERATION


class ValidationError(AdoptionError):
    """Raised when caller input is semantically invalid."""

    status_code = status.HTTP_422_UNPROCESSABLE_ENTITY
    default_code = ErrorCode.VALIDATION_FAILED


class LLMInvocationError(AdoptionError):
    """Raised when the LLM endpoint fails or returns unusable content."""

    status_code = status.HTTP_502_BAD_GATEWAY
    default_code = ErrorCode.LLM_UNAVAILABLE


async def _handle_adoption_error(request: Request, exc: AdoptionError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error(
            "Request failed",
            path=request.url.path,
            error_code=exc.error_code.value,
            error=exc.message,
        )
    else:
        logger.info(
            "Request rejected",
            path=request.url.path,
            error_code=exc.error_code.value,
            error=exc.message,
        )
    return JSONResponse(
        status_code=exc.status_code,
        content={"error_code": exc.error_code.value, "message": exc.message},
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Attach the domain error handler to a FastAPI application."""
    app.add_exception_handler(AdoptionError, _handle_adoption_error)  # type: ignore[arg-type]
