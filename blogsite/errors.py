"""
Process-wide error-response formatter.

Every error body is a JSON object with a server ``timestamp``, the numeric
``status`` and an ``error`` label.  Validation failures add an ``errors``
mapping of field name to message; every other category adds a single
``message``.  Internal details of unexpected failures are logged and never
returned to the caller.
"""
import logging
from datetime import datetime

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from blogsite.exceptions import BlogsiteError
from blogsite.validation import FieldValidationError

logger = logging.getLogger(__name__)

GENERIC_ERROR_MESSAGE = "An unexpected error occurred. Please try again later."


def error_body(status: int, error: str, **extra) -> dict:
    body = {
        "timestamp": datetime.now().isoformat(),
        "status": status,
        "error": error,
    }
    body.update(extra)
    return body


def error_response(status: int, error: str, **extra) -> JSONResponse:
    return JSONResponse(status_code=status, content=error_body(status, error, **extra))


def collect_field_errors(errors: list[dict]) -> dict[str, str]:
    """
    Flatten pydantic/FastAPI error entries into ``{field: message}``.

    Body rule violations arrive wrapped in a single ``FieldValidationError``
    and are merged as-is; anything else (bad path/query parameters, body
    that is not JSON) is keyed by the last element of its location.
    """
    fields: dict[str, str] = {}
    for err in errors:
        cause = (err.get("ctx") or {}).get("error")
        if isinstance(cause, FieldValidationError):
            fields.update(cause.errors)
            continue
        loc = err.get("loc") or ("body",)
        fields[str(loc[-1])] = err.get("msg", "Invalid value")
    return fields


async def handle_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    return error_response(400, "Validation Failed", errors=collect_field_errors(exc.errors()))


async def handle_blogsite_error(request: Request, exc: BlogsiteError) -> JSONResponse:
    return error_response(exc.status_code, exc.error, message=exc.message)


async def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unexpected error on %s %s", request.method, request.url.path)
    return error_response(500, "Internal Server Error", message=GENERIC_ERROR_MESSAGE)


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(RequestValidationError, handle_validation_error)
    app.add_exception_handler(BlogsiteError, handle_blogsite_error)
    app.add_exception_handler(Exception, handle_unexpected_error)
