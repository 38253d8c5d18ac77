"""Exception handlers: every error leaves the API as ``{"message": ...}``."""
import logging
from typing import Mapping, Sequence

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger("passgate.api")


def _error_message(status_code: int) -> str:
    if status_code == 401:
        return "Not authenticated."
    if status_code == 404:
        return "Not found."
    if status_code == 405:
        return "Method not allowed."
    if status_code == 429:
        return "Too many attempts, please try again later."
    if status_code >= 500:
        return "Something went wrong, please try again."
    return "Request failed."


def register_error_handlers(
    app: FastAPI,
    allowed_methods: Mapping[str, Sequence[str]] | None = None,
) -> None:
    """Install the handlers. ``allowed_methods`` maps a path to the verbs it serves."""
    allowed_methods = dict(allowed_methods or {})

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException):
        headers = dict(exc.headers or {})
        if exc.status_code == 405:
            # Starlette only reports the verbs of the first route it tried.
            methods = allowed_methods.get(request.url.path)
            if methods:
                headers["Allow"] = ", ".join(methods)
        detail = exc.detail if isinstance(exc.detail, str) and exc.status_code != 405 else None
        return JSONResponse(
            status_code=exc.status_code,
            content={"message": detail or _error_message(exc.status_code)},
            headers=headers or None,
        )

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        return JSONResponse(status_code=422, content={"message": "Invalid request body."})

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception):
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return JSONResponse(status_code=500, content={"message": _error_message(500)})
