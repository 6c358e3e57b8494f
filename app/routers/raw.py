from __future__ import annotations

import json
from typing import Any, List, Optional

from fastapi import APIRouter, Depends, Query, Request

from app.dependencies import get_raw_gateway
from app.schemas import ErrorResponse, RawStatementRequest
from dbstudio.raw_gateway import RawGateway


router = APIRouter(prefix="/raw", tags=["raw"])

ALL_METHODS = ["GET", "POST", "PUT", "PATCH", "DELETE", "HEAD"]

ERROR_RESPONSES = {
    400: {"model": ErrorResponse},
    405: {"model": ErrorResponse},
    500: {"model": ErrorResponse},
}


def query_params(values: Optional[List[str]]) -> Any:
    """
    Positional parameters from the query string.

    ``?params=5&params=6`` arrives as a list already; a single value that is a
    JSON array (``?params=[5,6]``) is decoded into its elements.
    """
    if not values:
        return None
    if len(values) == 1:
        raw = values[0].strip()
        if raw.startswith("["):
            try:
                decoded = json.loads(raw)
            except ValueError:
                return values
            if isinstance(decoded, list):
                return decoded
    return values


def _handle(
    request: Request,
    gateway: RawGateway,
    body: Optional[RawStatementRequest],
    sql: Optional[str],
    params: Optional[List[str]],
) -> dict:
    if request.method == "GET":
        return gateway.handle("GET", sql, query_params(params))
    body = body or RawStatementRequest()
    return gateway.handle(request.method, body.sql, body.params)


@router.api_route("", methods=ALL_METHODS, responses=ERROR_RESPONSES, name="raw_handler")
def raw_handler(
    request: Request,
    body: Optional[RawStatementRequest] = None,
    sql: Optional[str] = Query(None),
    params: Optional[List[str]] = Query(None),
    gateway: RawGateway = Depends(get_raw_gateway),
):
    """
    - GET: run ``sql`` from the query string and return ``{"rows": [...]}``
    - POST: run ``sql`` from the JSON body and return ``{"success": bool}``
    """
    return _handle(request, gateway, body, sql, params)


@router.api_route("/{rest:path}", methods=ALL_METHODS, include_in_schema=False)
def raw_subpath_handler(
    request: Request,
    rest: str,
    body: Optional[RawStatementRequest] = None,
    sql: Optional[str] = Query(None),
    params: Optional[List[str]] = Query(None),
    gateway: RawGateway = Depends(get_raw_gateway),
):
    return _handle(request, gateway, body, sql, params)
