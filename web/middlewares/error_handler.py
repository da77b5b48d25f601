"""
Global error handler middleware.

Maps application errors to JSON responses in one place:
{"message": ..., "action": ..., "errors"?: [...]} with the error's HTTP
status. Unexpected exceptions are logged with traceback and reported as a
generic 500 without technical details.
"""

from collections.abc import Awaitable, Callable

from aiohttp import web
from loguru import logger

from app.utils.exceptions import AppError, UploadError


Handler = Callable[[web.Request], Awaitable[web.StreamResponse]]

INTERNAL_ERROR_MESSAGE = "Something went wrong on our side. Please try again later."


def error_response(error: AppError) -> web.Response:
    """JSON response for an application error."""
    return web.json_response(error.to_dict(), status=error.http_status)


@web.middleware
async def error_middleware(request: web.Request, handler: Handler) -> web.StreamResponse:
    """Translate exceptions raised by handlers."""
    try:
        return await handler(request)
    except AppError as e:
        log = logger.warning if e.http_status < 500 else logger.error
        log(f"{request.method} {request.path} -> {e.http_status}: {e.message}")
        return error_response(e)
    except web.HTTPRequestEntityTooLarge as e:
        logger.warning(f"{request.method} {request.path} -> 413: body too large")
        error = UploadError("Request is too large. Maximum logo size is 5MB.")
        return web.json_response(error.to_dict(), status=e.status)
    except web.HTTPException:
        raise
    except Exception as e:
        logger.exception(f"Unhandled exception in {request.method} {request.path}: {e}")
        return web.json_response(
            {"message": INTERNAL_ERROR_MESSAGE, "action": "Retry"},
            status=500,
        )
