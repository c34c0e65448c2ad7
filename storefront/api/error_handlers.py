# This file defines the API error taxonomy and the exception handlers that render it.
# Every failure leaves the service as the same error body with request trace fields.
# Storage and unexpected failures are logged and reported without internal detail.

from __future__ import annotations

import logging
from datetime import UTC, datetime
from typing import Any

from fastapi import FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

LOGGER = logging.getLogger("storefront.api")


class APIError(Exception):
    """Domain error type with structured API details."""

    default_status_code = 500
    default_error_code = "INTERNAL_SERVER_ERROR"

    def __init__(
        self,
        *,
        message: str,
        status_code: int | None = None,
        error_code: str | None = None,
        details: Any | None = None,
    ) -> None:
        self.status_code = status_code or self.default_status_code
        self.error_code = error_code or self.default_error_code
        self.message = message
        self.details = details
        super().__init__(message)


class Unauthenticated(APIError):
    """No credential, or a credential that is not a bearer token."""

    default_status_code = 401
    default_error_code = "UNAUTHENTICATED"


class InvalidCredential(APIError):
    """Bad signature, expired token, or wrong password."""

    default_status_code = 401
    default_error_code = "INVALID_CREDENTIAL"


class Forbidden(APIError):
    default_status_code = 403
    default_error_code = "FORBIDDEN"


class NotFound(APIError):
    default_status_code = 404
    default_error_code = "NOT_FOUND"


class ValidationFailed(APIError):
    default_status_code = 400
    default_error_code = "VALIDATION_ERROR"


class Conflict(APIError):
    default_status_code = 409
    default_error_code = "CONFLICT"


class StorageFailure(APIError):
    default_status_code = 500
    default_error_code = "STORAGE_FAILURE"


class ConstraintViolation(StorageFailure):
    """A statement was rejected by a uniqueness or check constraint."""


def _request_id(request: Request) -> str:
    return str(getattr(request.state, "request_id", "unknown"))


def _error_body(
    *, request: Request, error_code: str, message: str, details: Any | None = None
) -> dict[str, Any]:
    return {
        "error_code": error_code,
        "message": message,
        "details": details,
        "request_id": _request_id(request),
        "timestamp": datetime.now(tz=UTC).isoformat(),
    }


def register_error_handlers(app: FastAPI) -> None:
    """Register global exception handlers."""

    @app.exception_handler(StorageFailure)
    async def storage_failure_handler(request: Request, exc: StorageFailure) -> JSONResponse:
        LOGGER.error(
            "storage failure request_id=%s path=%s: %s",
            _request_id(request),
            request.url.path,
            exc.message,
        )
        return JSONResponse(
            status_code=exc.status_code,
            content=_error_body(
                request=request,
                error_code=exc.error_code,
                message="The data store could not complete the request.",
            ),
        )

    @app.exception_handler(APIError)
    async def api_error_handler(request: Request, exc: APIError) -> JSONResponse:
        return JSONResponse(
            status_code=exc.status_code,
            content=_error_body(
                request=request,
                error_code=exc.error_code,
                message=exc.message,
                details=exc.details,
            ),
        )

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        return JSONResponse(
            status_code=422,
            content=_error_body(
                request=request,
                error_code="VALIDATION_ERROR",
                message="Invalid request parameters.",
                details=_jsonable_errors(exc.errors()),
            ),
        )

    @app.exception_handler(HTTPException)
    async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
        return JSONResponse(
            status_code=exc.status_code,
            content=_error_body(
                request=request,
                error_code="HTTP_ERROR",
                message=str(exc.detail),
            ),
        )

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        LOGGER.exception("unhandled error request_id=%s path=%s", _request_id(request), request.url.path, exc_info=exc)
        return JSONResponse(
            status_code=500,
            content=_error_body(
                request=request,
                error_code="INTERNAL_SERVER_ERROR",
                message="The server encountered an unexpected error.",
            ),
        )


def _jsonable_errors(errors: Any) -> list[dict[str, Any]]:
    # pydantic error contexts may carry exception objects
    cleaned: list[dict[str, Any]] = []
    for error in errors:
        item = dict(error)
        if "ctx" in item:
            item["ctx"] = {key: str(value) for key, value in item["ctx"].items()}
        item.pop("url", None)
        cleaned.append(item)
    return cleaned
