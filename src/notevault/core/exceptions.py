"""
Application errors and their HTTP mapping.

Every failure leaves the API in the same envelope (see ``ErrorResponse``):
domain errors raised by services, request validation errors, store failures
and anything unexpected.
"""

import logging
from typing import Any, Dict, List, Optional

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from .schemas.common import ErrorResponse

logger = logging.getLogger(__name__)


class NoteVaultError(Exception):
    """Base class for errors that map to an API response."""

    code = "Internal"
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = "Internal server error"

    def __init__(self, message: Optional[str] = None, details: Optional[Dict[str, Any]] = None):
        self.message = message or self.default_message
        self.details = details
        super().__init__(self.message)

    @property
    def headers(self) -> Optional[Dict[str, str]]:
        return None


class ValidationError(NoteVaultError):
    """Malformed input, surfaced with per-field detail."""

    code = "ValidationError"
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Invalid request"

    @classmethod
    def for_field(cls, field: str, message: str) -> "ValidationError":
        return cls(details={"errors": [{"field": field, "message": message}]})


class ConflictError(NoteVaultError):
    code = "Conflict"
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Account already exists"


class InvalidCredentialsError(NoteVaultError):
    # same message whether the email or the password was wrong
    code = "InvalidCredentials"
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Invalid credentials"


class UnauthorizedError(NoteVaultError):
    code = "Unauthorized"
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Not authenticated"

    @property
    def headers(self) -> Optional[Dict[str, str]]:
        return {"WWW-Authenticate": "Bearer"}


class NotFoundError(NoteVaultError):
    """Absent note, or a note the principal may not touch. Never distinguished."""

    code = "NotFound"
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Note not found"


class BadRequestError(NoteVaultError):
    code = "BadRequest"
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Bad request"


class InternalError(NoteVaultError):
    """Collaborator failure. The message never carries internal detail."""


def _error_response(
    status_code: int,
    code: str,
    message: str,
    details: Optional[Dict[str, Any]] = None,
    headers: Optional[Dict[str, str]] = None,
) -> JSONResponse:
    body = ErrorResponse(error=code, message=message, details=details)
    return JSONResponse(
        status_code=status_code, content=jsonable_encoder(body), headers=headers
    )


def _validation_details(exc: RequestValidationError) -> Dict[str, List[Dict[str, str]]]:
    errors = []
    for error in exc.errors():
        # drop the "body"/"query" prefix so the field reads like the payload key
        location = [str(part) for part in error.get("loc", ()) if part not in ("body", "query", "path")]
        errors.append({"field": ".".join(location) or "body", "message": error.get("msg", "")})
    return {"errors": errors}


_HTTP_CODES = {
    status.HTTP_400_BAD_REQUEST: BadRequestError.code,
    status.HTTP_401_UNAUTHORIZED: UnauthorizedError.code,
    status.HTTP_404_NOT_FOUND: NotFoundError.code,
}


def register_exception_handlers(app: FastAPI) -> None:
    """Attach handlers that render every failure as an ``ErrorResponse``."""

    @app.exception_handler(NoteVaultError)
    async def notevault_error_handler(request: Request, exc: NoteVaultError) -> JSONResponse:
        if exc.status_code >= 500:
            logger.error(
                "Request failed: [%s] %s", exc.code, exc.message,
                extra={"path": request.url.path},
                exc_info=exc.__cause__ or exc,
            )
        else:
            logger.info(
                "Request rejected: [%s] %s", exc.code, exc.message,
                extra={"path": request.url.path},
            )
        return _error_response(exc.status_code, exc.code, exc.message, exc.details, exc.headers)

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        return _error_response(
            status.HTTP_400_BAD_REQUEST,
            ValidationError.code,
            ValidationError.default_message,
            _validation_details(exc),
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(
        request: Request, exc: StarletteHTTPException
    ) -> JSONResponse:
        code = _HTTP_CODES.get(exc.status_code, "HTTPError")
        return _error_response(
            exc.status_code, code, str(exc.detail), headers=getattr(exc, "headers", None)
        )

    @app.exception_handler(SQLAlchemyError)
    async def store_error_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
        logger.error("Store failure", extra={"path": request.url.path}, exc_info=exc)
        return _error_response(
            status.HTTP_500_INTERNAL_SERVER_ERROR, InternalError.code, InternalError.default_message
        )

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.error("Unhandled error", extra={"path": request.url.path}, exc_info=exc)
        return _error_response(
            status.HTTP_500_INTERNAL_SERVER_ERROR, InternalError.code, InternalError.default_message
        )
