from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Request

from app.dependencies import get_action_gateway
from app.routers.raw import ALL_METHODS, ERROR_RESPONSES
from app.schemas import ActionRequest
from dbstudio.action_gateway import ActionGateway

router = APIRouter(prefix="/actions", tags=["actions"])


def _handle(
    request: Request, gateway: ActionGateway, body: Optional[ActionRequest]
) -> dict:
    payload = body.model_dump(exclude_none=True) if body is not None else {}
    return gateway.handle(request.method, payload)


@router.api_route(
    "", methods=ALL_METHODS, responses=ERROR_RESPONSES, name="actions_handler"
)
def actions_handler(
    request: Request,
    body: Optional[ActionRequest] = None,
    gateway: ActionGateway = Depends(get_action_gateway),
):
    """
    Named introspection actions (POST only):

    - ``{"action": "getTables"}`` → ``{"tables": [...]}``
    - ``{"action": "getTableInfo", "table": "t"}`` → ``{"columns": [...]}``
    """
    return _handle(request, gateway, body)


@router.api_route("/{rest:path}", methods=ALL_METHODS, include_in_schema=False)
def actions_subpath_handler(
    request: Request,
    rest: str,
    body: Optional[ActionRequest] = None,
    gateway: ActionGateway = Depends(get_action_gateway),
):
    return _handle(request, gateway, body)
