# students_api/core/handlers.py
from typing import Any, Dict, List, Optional

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException
from students_api.core.exceptions import BaseAPIException, StudentNotFoundException
from students_api.core.logging import logger

ERROR_STATUS = "Error"


def error_envelope(message: str, details: Optional[List[str]] = None) -> Dict[str, Any]:
    content: Dict[str, Any] = {"status": ERROR_STATUS, "error": message}
    if details is not None:
        content["details"] = details
    return content


def _not_found_status(request: Request) -> int:
    # Reference behaviour reports a missing student as a server error
    settings = getattr(request.app.state, "settings", None)
    if settings is not None and settings.strict_not_found:
        return status.HTTP_404_NOT_FOUND
    return status.HTTP_500_INTERNAL_SERVER_ERROR


def _field_name(loc) -> str:
    parts = [str(x) for x in loc if x not in ("body", "path", "query")]
    return ".".join(parts)


def _decode_error_message(errors: List[dict]) -> Optional[str]:
    """Return a message when the body could not be decoded at all."""
    for error in errors:
        if error["type"] == "json_invalid":
            reason = (error.get("ctx") or {}).get("error")
            return f"invalid JSON body: {reason}" if reason else "invalid JSON body"

        if tuple(error["loc"]) == ("body",):
            if error["type"] == "missing":
                return "empty body"
            return f"invalid request body: {error['msg']}"
    return None


def _validation_message(error: dict) -> str:
    field = _field_name(error["loc"])
    if error["loc"] and error["loc"][0] == "path":
        return f"invalid {field}: {error['msg']}"
    if error["type"] == "missing":
        return f"field {field} is required"
    return f"field {field} is invalid: {error['msg']}"


# 1. Handle our own errors (raised by storage and endpoints)
async def custom_api_exception_handler(request: Request, exc: BaseAPIException):
    status_code = exc.status_code
    if isinstance(exc, StudentNotFoundException):
        status_code = _not_found_status(request)
        logger.info(f"{request.method} {request.url.path}: {exc.message}")
    else:
        logger.error(f"{request.method} {request.url.path}: {exc.code}: {exc.message}")

    return JSONResponse(
        status_code=status_code,
        content=error_envelope(exc.message),
    )

# 2. Handle Validation Errors (raised by FastAPI/Pydantic before the endpoint runs)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()

    decode_error = _decode_error_message(errors)
    if decode_error is not None:
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content=error_envelope(decode_error),
        )

    messages = [_validation_message(error) for error in errors]
    logger.warning(f"Validation error on {request.url.path}: {messages}")

    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=error_envelope(", ".join(messages), details=messages),
    )

# 3. Handle Standard HTTP Errors (unknown URL, wrong method, ...)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content=error_envelope(str(exc.detail)),
        headers=getattr(exc, "headers", None),
    )

# 4. Handle General System Errors
async def general_exception_handler(request: Request, exc: Exception):
    logger.critical(f"Unhandled Exception: {exc}", exc_info=True)

    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=error_envelope("An unexpected error occurred"),
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(BaseAPIException, custom_api_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(Exception, general_exception_handler)
