"""Exception handlers rendering errors as ``{"success": false, "error": ...}``."""

import logging
from typing import Any

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from rep_deployer.domain.errors import DeployerError, InternalError

logger = logging.getLogger(__name__)

INTERNAL_ERROR_MESSAGE = "Internal server error"


def error_response(
    status_code: int,
    message: str,
    *,
    headers: dict[str, str] | None = None,
    **extra: Any,
) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"success": False, "error": message, **extra},
        headers=headers,
    )


async def deployer_error_handler(request: Request, exc: DeployerError) -> JSONResponse:
    if isinstance(exc, InternalError):
        logger.error("Internal error on %s: %s", request.url.path, exc.message)
        return error_response(exc.status_code, INTERNAL_ERROR_MESSAGE)
    return error_response(exc.status_code, exc.message)


async def http_exception_handler(
    request: Request, exc: StarletteHTTPException
) -> JSONResponse:
    if isinstance(exc.detail, dict):
        extra = dict(exc.detail)
        message = str(extra.pop("error", "Request failed"))
        extra.pop("success", None)
        return error_response(exc.status_code, message, headers=exc.headers, **extra)
    return error_response(exc.status_code, str(exc.detail), headers=exc.headers)


async def request_validation_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    logger.info("Rejected malformed request to %s: %s", request.url.path, exc.errors())
    return error_response(status.HTTP_400_BAD_REQUEST, "Invalid request")


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s", request.url.path)
    return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, INTERNAL_ERROR_MESSAGE)


def register_exception_handlers(app: FastAPI) -> None:
    """Attach the JSON error handlers to ``app``."""

    app.add_exception_handler(DeployerError, deployer_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)


__all__ = ["error_response", "register_exception_handlers"]
