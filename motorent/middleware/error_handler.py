import logging
import traceback

from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError

from motorent.schemas.common import error_body
from motorent.utils.exceptions import AppException, ErrorCode
from motorent.utils.mappers import classify_db_error, handle_db_error

logger = logging.getLogger(__name__)


async def app_exception_handler(request: Request, exc: AppException) -> JSONResponse:
    """Handle all AppException subclasses."""
    detail = exc.detail
    return JSONResponse(
        status_code=exc.status_code,
        content={
            "success": False,
            "message": detail.get("message", "An error occurred"),
            "error": detail.get("error", {"code": ErrorCode.INTERNAL_SERVER_ERROR}),
        },
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    details = []
    for error in exc.errors():
        # loc is a tuple like ("body", "email")
        loc = error.get("loc", [])
        field = ".".join(str(l) for l in loc if l != "body") if loc else "unknown"
        details.append({"field": field, "message": error.get("msg", "Invalid value")})

    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content=error_body(ErrorCode.VALIDATION_ERROR, "Validation error. Please check your input.", details),
    )


async def integrity_error_handler(request: Request, exc: IntegrityError) -> JSONResponse:
    """Unique and foreign-key violations that slipped past service checks."""
    logger.warning(f"IntegrityError on {request.method} {request.url}: {exc.orig}")
    code, _ = classify_db_error(exc)
    error_code = ErrorCode.RESOURCE_IN_USE if code == "23503" else ErrorCode.DUPLICATE_ENTRY
    return JSONResponse(
        status_code=status.HTTP_409_CONFLICT,
        content=error_body(error_code, handle_db_error(exc)),
    )


async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Catch-all: log the traceback, return a safe 500."""
    logger.error(
        f"Unhandled exception on {request.method} {request.url}\n"
        f"{traceback.format_exc()}"
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=error_body(ErrorCode.INTERNAL_SERVER_ERROR, "An unexpected error occurred. Please try again later."),
    )
