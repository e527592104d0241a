"""Exception handlers for the FastAPI app.

Register with register_exception_handlers(app). Maps PortalException
error codes to HTTP status codes.
"""

import logging
from typing import Any

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from portal.core.config import get_settings
from portal.domain.exceptions import PortalException

logger = logging.getLogger(__name__)

_ERROR_CODE_STATUS: dict[str, int] = {
    "VALIDATION_ERROR": 400,
    "WEAK_SECRET": 400,
    "AUTHENTICATION_ERROR": 401,
    "REAUTHENTICATION_ERROR": 401,
    "PERMISSION_DENIED": 403,
    "CREDENTIAL_NOT_FOUND": 404,
    "DUPLICATE_ACCOUNT": 409,
    "CREDENTIAL_EXPIRED": 410,
    "RATE_LIMITED": 429,
    "PARTIALLY_PROVISIONED": 500,
    "CONFIGURATION_ERROR": 500,
    "NOTIFICATION_ERROR": 502,
    "IDENTITY_PROVIDER_ERROR": 502,
}


def status_for(exc: PortalException) -> int:
    return _ERROR_CODE_STATUS.get(exc.error_code, 400)


def _portal_exception_handler(request: Request, exc: PortalException) -> JSONResponse:
    status = status_for(exc)
    if status >= 500:
        logger.error("%s on %s: %s", exc.error_code, request.url.path, exc.message)
    return JSONResponse(status_code=status, content=exc.to_dict())


def _validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Return 422 with field errors; submitted values are left out (they may be secrets)."""
    errors = [
        {"loc": list(err.get("loc", ())), "msg": err.get("msg"), "type": err.get("type")}
        for err in exc.errors()
    ]
    return JSONResponse(
        status_code=422,
        content={
            "error": "VALIDATION_ERROR",
            "message": "Request validation failed",
            "details": errors,
        },
    )


def _http_exception_handler(
    request: Request, exc: StarletteHTTPException
) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": "HTTP_ERROR", "message": exc.detail},
    )


def _generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Return 500; include detail only when debug is True."""
    logger.exception("Unhandled exception: %s", exc)
    detail: Any = str(exc) if get_settings().debug else "Internal server error"
    return JSONResponse(
        status_code=500,
        content={"error": "INTERNAL_ERROR", "message": detail},
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Register all exception handlers on the FastAPI app."""
    app.add_exception_handler(PortalException, _portal_exception_handler)
    app.add_exception_handler(RequestValidationError, _validation_exception_handler)
    app.add_exception_handler(StarletteHTTPException, _http_exception_handler)
    app.add_exception_handler(Exception, _generic_exception_handler)
