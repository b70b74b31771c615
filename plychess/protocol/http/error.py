"""JSON error envelope for the HTTP API.

Every failure is rendered as::

    {"error": {"code", "message", "type", "request_id", "field_errors"?}}

Engine calls raise ``ValueError`` for bad FEN, malformed or illegal moves and
empty undo stacks; those are client errors and map to 400 without any
per-endpoint translation.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, cast

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette import status
from starlette.exceptions import HTTPException


logger = logging.getLogger(__name__)


_CODES: Dict[int, str] = {
    status.HTTP_400_BAD_REQUEST: "bad_request",
    status.HTTP_404_NOT_FOUND: "not_found",
    status.HTTP_405_METHOD_NOT_ALLOWED: "method_not_allowed",
    status.HTTP_422_UNPROCESSABLE_ENTITY: "unprocessable_entity",
}


def _error_response(
    request: Request,
    status_code: int,
    message: str,
    field_errors: Optional[List[Dict[str, str]]] = None,
    headers: Optional[Dict[str, str]] = None,
) -> JSONResponse:
    if status_code >= 500:
        code, err_type = "internal_error", "server_error"
    else:
        code, err_type = _CODES.get(status_code, "error"), "client_error"
    body: Dict[str, Any] = {
        "code": code,
        "message": message,
        "type": err_type,
        "request_id": getattr(request.state, "request_id", ""),
    }
    if field_errors:
        body["field_errors"] = field_errors
    return JSONResponse(status_code=status_code, content={"error": body}, headers=headers)


async def on_http_error(request: Request, exc: Exception) -> JSONResponse:
    http_exc = cast(HTTPException, exc)
    return _error_response(
        request, http_exc.status_code, str(http_exc.detail), headers=http_exc.headers
    )


async def on_engine_error(request: Request, exc: Exception) -> JSONResponse:
    logger.info("rejected %s %s: %s", request.method, request.url.path, exc)
    return _error_response(request, status.HTTP_400_BAD_REQUEST, str(exc))


async def on_validation_error(request: Request, exc: Exception) -> JSONResponse:
    errors = exc.errors() if isinstance(exc, RequestValidationError) else []
    fields = [
        {
            "field": ".".join(str(part) for part in e.get("loc", ())),
            "code": e.get("type", "value_error"),
            "message": e.get("msg", "invalid value"),
        }
        for e in errors
    ]
    return _error_response(
        request, status.HTTP_422_UNPROCESSABLE_ENTITY, "Validation error", fields
    )


async def on_unhandled_error(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("unhandled error on %s %s", request.method, request.url.path)
    return _error_response(
        request, status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal Server Error"
    )


def install_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(HTTPException, on_http_error)
    app.add_exception_handler(RequestValidationError, on_validation_error)
    app.add_exception_handler(ValueError, on_engine_error)
    app.add_exception_handler(Exception, on_unhandled_error)
