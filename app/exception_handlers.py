from __future__ import annotations

import logging
import uuid
from typing import Any, Dict, Optional, List

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.errors import AppError
from dbstudio.errors.codes import ErrorCode
from dbstudio.errors.exceptions import StudioError
from dbstudio.errors.mapper import map_error

log = logging.getLogger(__name__)


def _request_id(request: Request) -> str:
    return request.headers.get("X-Request-ID") or str(uuid.uuid4())


def error_response(
    request: Request,
    *,
    status: int,
    code: str,
    message: str,
    details: Optional[List[str]] = None,
    retryable: bool = False,
) -> JSONResponse:
    request_id = _request_id(request)
    payload: Dict[str, Any] = {
        "error": message,
        "code": code,
        "request_id": request_id,
    }
    if details:
        payload["details"] = details

    headers = {"X-Request-ID": request_id}
    if retryable:
        headers["Retry-After"] = "2"

    return JSONResponse(status_code=status, content=payload, headers=headers)


def register_exception_handlers(app: FastAPI) -> None:
    """Register global exception handlers for the FastAPI application."""

    @app.exception_handler(StudioError)
    async def studio_error_handler(request: Request, exc: StudioError) -> JSONResponse:
        status = map_error(exc.code)
        if status >= 500:
            log.warning(
                "Request failed: %s",
                exc.message,
                extra={"code": exc.code.value, "path": request.url.path},
            )
        return error_response(
            request,
            status=status,
            code=exc.code.value,
            message=exc.message,
            details=exc.details,
        )

    @app.exception_handler(AppError)
    async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
        return error_response(
            request,
            status=exc.http_status,
            code=exc.code,
            message=exc.message,
            details=exc.details,
            retryable=exc.retryable,
        )

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        details = [
            f"{'.'.join(str(p) for p in err.get('loc', ()))}: {err.get('msg', '')}"
            for err in exc.errors()
        ]
        return error_response(
            request,
            status=400,
            code=ErrorCode.INVALID_REQUEST.value,
            message="Invalid request body",
            details=details,
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(
        request: Request, exc: StarletteHTTPException
    ) -> JSONResponse:
        if exc.status_code == 404:
            return JSONResponse(status_code=404, content={"error": "Not found"})
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": str(exc.detail)},
            headers=getattr(exc, "headers", None),
        )
