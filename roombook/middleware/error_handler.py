import logging
import traceback
from fastapi import Request, status
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from sqlalchemy.exc import IntegrityError, OperationalError
from starlette.exceptions import HTTPException as StarletteHTTPException

from roombook.middleware.security_headers import SECURITY_HEADERS
from roombook.schemas.common import PROBLEM_CONTENT_TYPE, build_problem
from roombook.utils.exceptions import AppException, ErrorCode, ValidationException

logger = logging.getLogger(__name__)


def problem_response(
    request: Request,
    status_code: int,
    detail: str,
    error_code: str | None = None,
    headers: dict | None = None,
    **extra,
) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=build_problem(status_code, detail, request.url.path, error_code, **extra),
        media_type=PROBLEM_CONTENT_TYPE,
        headers={**SECURITY_HEADERS, **(headers or {})},
    )


async def app_exception_handler(request: Request, exc: AppException) -> JSONResponse:
    """Handle all AppException subclasses (our custom exceptions)."""
    return problem_response(
        request, exc.status_code, exc.detail, exc.error_code, exc.headers, **exc.extra
    )


def _errors_text(exc: RequestValidationError) -> str:
    parts = []
    for error in exc.errors():
        # loc is a tuple like ("body", "name")
        loc = ".".join(str(l) for l in error.get("loc", ()))
        msg = error.get("msg", "Invalid value")
        parts.append(f"{loc}: {msg}" if loc else msg)
    return "; ".join(parts)


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """
    Handle pydantic validation errors.
    Reported as 400 with the individual failures flattened into errorsText.
    """
    return await app_exception_handler(request, ValidationException(errors_text=_errors_text(exc)))


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Framework-raised HTTP errors (unknown route, wrong method)."""
    detail = exc.detail if isinstance(exc.detail, str) else str(exc.detail)
    return problem_response(request, exc.status_code, detail, headers=exc.headers)


async def integrity_error_handler(request: Request, exc: IntegrityError) -> JSONResponse:
    """
    Handle SQLAlchemy IntegrityError (FK violations, check constraints).
    Prevents raw DB errors from leaking to the client.
    """
    logger.warning(f"IntegrityError on {request.method} {request.url}: {exc.orig}")
    return problem_response(
        request,
        status.HTTP_409_CONFLICT,
        "The request conflicts with existing records.",
        ErrorCode.INTEGRITY_ERROR,
    )


async def operational_error_handler(request: Request, exc: OperationalError) -> JSONResponse:
    """Database unreachable or failing at the connection level."""
    logger.error(f"Database error on {request.method} {request.url}: {exc.orig}")
    return problem_response(
        request,
        status.HTTP_503_SERVICE_UNAVAILABLE,
        "The database is currently unavailable.",
        ErrorCode.SERVICE_UNAVAILABLE,
    )


async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """
    Catch-all handler for unexpected exceptions.
    Logs the full traceback, returns a safe 500 response.
    """
    logger.error(
        f"Unhandled exception on {request.method} {request.url}\n"
        f"{''.join(traceback.format_exception(exc))}"
    )
    return problem_response(
        request,
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        "An unexpected error occurred. Please try again later.",
        ErrorCode.INTERNAL_SERVER_ERROR,
    )
