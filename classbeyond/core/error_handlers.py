"""
Error handling utilities and exception handlers for the ClassBeyond API.
"""

import logging
from typing import Any, Dict

from fastapi import HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)


def get_json_error_response(
    status_code: int, detail: str | None = None, error_type: str = "api_error"
) -> Dict[str, Any]:
    """Create a standardized JSON error response."""
    error_messages = {
        400: "Bad Request",
        401: "Unauthorized",
        403: "Forbidden",
        404: "Not Found",
        405: "Method Not Allowed",
        409: "Conflict",
        422: "Unprocessable Entity",
        500: "Internal Server Error",
        503: "Service Unavailable",
    }

    message = detail or error_messages.get(status_code, "An error occurred")

    return {"error": {"code": status_code, "message": message, "type": error_type}}


async def fastapi_http_exception_handler(request: Request, exc: HTTPException):
    """Handle FastAPI HTTP exceptions"""
    starlette_exc = StarletteHTTPException(
        status_code=exc.status_code, detail=exc.detail
    )
    return await http_exception_handler(request, starlette_exc)


async def http_exception_handler(_: Request, exc: StarletteHTTPException):
    """Handle HTTP exceptions with a JSON body"""
    error_data = get_json_error_response(exc.status_code, exc.detail)
    return JSONResponse(content=error_data, status_code=exc.status_code)


async def validation_exception_handler(_: Request, exc: RequestValidationError):
    """Handle request validation errors"""
    error_details = []
    for error in exc.errors():
        error_details.append(
            {
                "field": " -> ".join(str(loc) for loc in error["loc"]),
                "message": error["msg"],
                "type": error["type"],
            }
        )

    error_data = get_json_error_response(422, "Validation Error", "validation_error")
    error_data["error"]["details"] = error_details
    return JSONResponse(content=error_data, status_code=422)


async def unhandled_exception_handler(request: Request, exc: Exception):
    """Last resort handler, the traceback goes to the log and never to the client"""
    logger.exception("Unhandled error on %s %s: %s", request.method, request.url.path, exc)
    error_data = get_json_error_response(500, None, "server_error")
    return JSONResponse(content=error_data, status_code=500)


def register_error_handlers(app):
    """Register all error handlers with the FastAPI app."""
    app.add_exception_handler(HTTPException, fastapi_http_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
