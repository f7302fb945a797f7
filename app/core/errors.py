import logging
import traceback
from typing import Any, Callable, Dict, Iterable, Optional

from fastapi import FastAPI, HTTPException, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.concurrency import run_in_threadpool
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.core.config import Settings

logger = logging.getLogger(__name__)

_REQUEST_PARTS = ("body", "query", "path", "header", "cookie")
MALFORMED_BODY = "Malformed JSON body."


class AppError(HTTPException):
    """Base class for errors that map onto a fixed HTTP status."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, detail: str, headers: Optional[Dict[str, str]] = None):
        super().__init__(status_code=type(self).status_code, detail=detail, headers=headers)


class ValidationError(AppError):
    status_code = status.HTTP_400_BAD_REQUEST


class UnauthenticatedError(AppError):
    status_code = status.HTTP_401_UNAUTHORIZED

    def __init__(self, detail: str):
        super().__init__(detail, headers={"WWW-Authenticate": "Bearer"})


class NotFoundError(AppError):
    status_code = status.HTTP_404_NOT_FOUND


class ConflictError(AppError):
    status_code = status.HTTP_409_CONFLICT


class InternalError(AppError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR


def _describe(error: Dict[str, Any]) -> str:
    if error.get("type") == "json_invalid":
        return MALFORMED_BODY

    ctx = error.get("ctx") or {}
    if error.get("type") == "value_error" and "error" in ctx:
        return str(ctx["error"])

    fields = [str(part) for part in error.get("loc", ()) if part not in _REQUEST_PARTS]
    message = error.get("msg", "Invalid value")
    if fields:
        return f"{'.'.join(fields)}: {message}"
    return message


def validation_message(errors: Iterable[Dict[str, Any]]) -> str:
    """
    Joins field-level complaints into a single client-facing message.

    Args:
        errors (Iterable[dict]): Error dicts as produced by pydantic.

    Returns:
        str: ``"Validation Failed: <msg>, <msg>"``.
    """
    messages = []
    for error in errors:
        text = _describe(error)
        if text not in messages:
            messages.append(text)
    return f"Validation Failed: {', '.join(messages)}"


def register_exception_handlers(
    app: FastAPI,
    settings: Settings,
    auth_guard: Optional[Callable[[Request], None]] = None,
) -> None:
    """
    Installs the handlers that give every failure a ``{message}`` body.

    ``auth_guard`` is run before reporting an undecodable JSON body, so that
    missing or bad credentials still win over a broken payload.
    """

    async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        return JSONResponse(
            status_code=exc.status_code,
            content={"message": str(exc.detail)},
            headers=getattr(exc, "headers", None),
        )

    async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        errors = exc.errors()
        if auth_guard is not None and any(e.get("type") == "json_invalid" for e in errors):
            try:
                await run_in_threadpool(auth_guard, request)
            except UnauthenticatedError as e:
                return await http_error_handler(request, e)

        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"message": validation_message(errors)},
        )

    async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        body: Dict[str, Any] = {"message": "Internal Server Error"}
        if settings.is_development:
            body["error"] = "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))
        return JSONResponse(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content=body)

    app.add_exception_handler(StarletteHTTPException, http_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
