"""
Problem-JSON error responses.

Every error body has the same shape::

    {"type", "title", "status", "detail", "message", "code", "instance", "errors"?}

``message`` mirrors ``detail`` so clients that only read ``message`` always
find a human-readable reason.
"""

import logging
from typing import Any, Optional, Tuple

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from .core.exceptions import DomainException, RepositoryException

logger = logging.getLogger(__name__)

_TITLES = {
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


def _title_from_status(status_code: int) -> str:
    return _TITLES.get(status_code, "Error")


def problem_response(
    request: Request,
    status: int,
    detail: Optional[str] = None,
    *,
    code: Optional[str] = None,
    errors: Any = None,
    headers: Optional[dict] = None,
) -> JSONResponse:
    """Render one error as problem JSON; ``code`` defaults to the snake-cased title."""
    title = _title_from_status(status)
    text = detail or title
    body = {
        "type": "about:blank",
        "title": title,
        "status": status,
        "detail": text,
        "message": text,
        "code": code or title.lower().replace(" ", "_"),
        "instance": request.url.path,
    }
    if errors:
        body["errors"] = jsonable_encoder(errors)
    return JSONResponse(body, status_code=status, headers=headers)


def _unpack_http_detail(detail: Any) -> Tuple[Optional[str], Optional[str], Any]:
    # HTTPException.detail may be a plain string or a {message, code, details} dict.
    if isinstance(detail, dict):
        message = detail.get("message") or detail.get("detail")
        code = detail.get("code")
        return (
            message if isinstance(message, str) else None,
            code if isinstance(code, str) else None,
            detail.get("details") or detail.get("errors"),
        )
    if detail is None:
        return None, None, None
    return str(detail), None, None


def register_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(DomainException)
    async def domain_exception_handler(request: Request, exc: DomainException) -> JSONResponse:
        if exc.status_code >= 500:
            logger.error("%s on %s: %s", exc.code, request.url.path, exc.message, exc_info=exc)
        return problem_response(
            request, exc.status_code, exc.message, code=exc.code, errors=exc.details
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(
        request: Request, exc: StarletteHTTPException
    ) -> JSONResponse:
        detail, code, errors = _unpack_http_detail(exc.detail)
        return problem_response(
            request, exc.status_code, detail, code=code, errors=errors, headers=exc.headers
        )

    @app.exception_handler(RequestValidationError)
    async def request_validation_exception_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        return problem_response(
            request, 422, "Request validation failed", code="validation_error", errors=exc.errors()
        )

    @app.exception_handler(RepositoryException)
    async def repository_exception_handler(
        request: Request, exc: RepositoryException
    ) -> JSONResponse:
        logger.error("Storage failure on %s: %s", request.url.path, exc)
        return problem_response(request, 500)

    @app.exception_handler(Exception)
    async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("Unhandled error on %s", request.url.path, exc_info=exc)
        return problem_response(request, 500)
