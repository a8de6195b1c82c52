"""Translate domain errors into HTTP responses.

Client errors keep the domain message; anything else becomes a generic 500
so internal causes (which hashing step failed, what the database said)
stay in the server log.
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from domain.model.errors import (
    DomainError,
    InvalidCredentialsError,
    InvalidTokenError,
    NotFoundError,
    PermissionDeniedError,
    UnauthorizedError,
    UserExistsError,
    ValidationError,
)

logger = logging.getLogger(__name__)

# Checked in order; first match wins
_STATUS_BY_ERROR: list[tuple[type[DomainError], int]] = [
    (ValidationError, status.HTTP_400_BAD_REQUEST),
    (InvalidCredentialsError, status.HTTP_401_UNAUTHORIZED),
    (InvalidTokenError, status.HTTP_401_UNAUTHORIZED),
    (UnauthorizedError, status.HTTP_401_UNAUTHORIZED),
    (PermissionDeniedError, status.HTTP_403_FORBIDDEN),
    (NotFoundError, status.HTTP_404_NOT_FOUND),
    (UserExistsError, status.HTTP_409_CONFLICT),
]


def status_for(error: DomainError) -> int:
    for error_type, code in _STATUS_BY_ERROR:
        if isinstance(error, error_type):
            return code
    return status.HTTP_500_INTERNAL_SERVER_ERROR


async def domain_error_handler(request: Request, exc: DomainError) -> JSONResponse:
    code = status_for(exc)
    if code >= 500:
        logger.error("Unhandled domain error", extra={
            "path": request.url.path,
            "errorType": type(exc).__name__,
            "error": str(exc),
        })
        return JSONResponse(status_code=code, content={"detail": "Internal server error"})

    headers = {"WWW-Authenticate": "Bearer"} if code == status.HTTP_401_UNAUTHORIZED else None
    return JSONResponse(status_code=code, content={"detail": str(exc)}, headers=headers)


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(DomainError, domain_error_handler)
