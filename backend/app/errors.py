# backend/app/errors.py
"""
Problem-details rendering for every error the API returns.

Bodies follow RFC 7807 (``type``, ``title``, ``status``, ``detail``,
``instance``) with two extensions: ``code``, the machine-readable reason a
client can branch on, and ``errors``, structured context such as field
validation failures.
"""

from http import HTTPStatus
import logging
from typing import Any, Dict, NamedTuple, Optional

from fastapi import FastAPI, HTTPException, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import ValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from .core.exceptions import DomainException

logger = logging.getLogger(__name__)

PROBLEM_MEDIA_TYPE = "application/problem+json"


class ErrorDetail(NamedTuple):
    message: Optional[str]
    code: Optional[str]
    errors: Optional[Any]


def _status_phrase(status_code: int) -> str:
    try:
        return HTTPStatus(status_code).phrase
    except ValueError:
        return "Error"


def problem_body(
    request: Request,
    status_code: int,
    detail: Any = None,
    code: Optional[str] = None,
    errors: Any = None,
) -> Dict[str, Any]:
    body: Dict[str, Any] = {
        "type": "about:blank",
        "title": _status_phrase(status_code),
        "status": status_code,
        "detail": detail if detail is not None else "",
        "instance": request.url.path,
    }
    if code:
        body["code"] = code
    if errors:
        body["errors"] = jsonable_encoder(errors)
    return body


def split_detail(detail: Any) -> ErrorDetail:
    """
    Unpack an ``HTTPException.detail``.

    Domain exceptions put ``{"message", "code", "details"}`` there; plain
    FastAPI errors use a string.
    """
    if isinstance(detail, dict):
        code = detail.get("code")
        message = detail.get("message", detail.get("detail"))
        return ErrorDetail(
            message=message if isinstance(message, str) else None,
            code=code if isinstance(code, str) else None,
            errors=detail.get("details") or detail.get("errors"),
        )
    if detail is None:
        return ErrorDetail(None, None, None)
    return ErrorDetail(str(detail), None, None)


def _problem_response(
    request: Request, status_code: int, headers: Optional[Dict[str, str]] = None, **fields: Any
) -> JSONResponse:
    return JSONResponse(
        problem_body(request, status_code, **fields),
        status_code=status_code,
        headers=headers,
        media_type=PROBLEM_MEDIA_TYPE,
    )


def _from_http_exception(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    parsed = split_detail(exc.detail)
    return _problem_response(
        request,
        exc.status_code,
        headers=getattr(exc, "headers", None),
        detail=parsed.message,
        code=parsed.code,
        errors=parsed.errors,
    )


def _from_validation_errors(request: Request, errors: Any) -> JSONResponse:
    encoded = jsonable_encoder(errors)
    return _problem_response(
        request, 422, detail=encoded, code="validation_error", errors=encoded
    )


def register_error_handlers(app: FastAPI) -> None:
    """Install the problem-details handlers on ``app``."""

    @app.exception_handler(HTTPException)
    async def on_http_exception(request: Request, exc: HTTPException) -> JSONResponse:
        return _from_http_exception(request, exc)

    # Routing errors (unknown path, wrong method) come from Starlette directly
    @app.exception_handler(StarletteHTTPException)
    async def on_starlette_exception(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        return _from_http_exception(request, exc)

    @app.exception_handler(DomainException)
    async def on_domain_exception(request: Request, exc: DomainException) -> JSONResponse:
        logger.warning(f"Unhandled {type(exc).__name__} on {request.url.path}: {exc.message}")
        return _from_http_exception(request, exc.to_http_exception())

    @app.exception_handler(RequestValidationError)
    async def on_request_validation(request: Request, exc: RequestValidationError) -> JSONResponse:
        return _from_validation_errors(request, exc.errors())

    @app.exception_handler(ValidationError)
    async def on_model_validation(request: Request, exc: ValidationError) -> JSONResponse:
        return _from_validation_errors(request, exc.errors())

    @app.exception_handler(Exception)
    async def on_unexpected(request: Request, exc: Exception) -> JSONResponse:
        logger.error(f"Unhandled error on {request.method} {request.url.path}: {exc}", exc_info=exc)
        return _problem_response(
            request, 500, detail="Internal Server Error", code="internal_server_error"
        )
