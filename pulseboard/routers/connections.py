"""Third-party connection endpoints: OAuth callbacks and saved connections."""

from typing import Annotated, List, Optional

from fastapi import APIRouter, Depends, Query, status
from fastapi.responses import RedirectResponse

from ..models.user import User
from ..schemas.common import ActionResult
from ..schemas.connection import ConnectionCreate, ConnectionResponse
from ..services import oauth_service
from ..services.auth_service import get_current_user
from ..services.connection_service import ConnectionService, get_connection_service

oauth_router = APIRouter(prefix="/api/auth/callback", tags=["OAuth"])
connections_router = APIRouter(prefix="/api/connections", tags=["Connections"])

CurrentUser = Annotated[User, Depends(get_current_user)]
Service = Annotated[ConnectionService, Depends(get_connection_service)]


@oauth_router.get("/discord", summary="Discord OAuth callback", response_class=RedirectResponse)
async def discord_callback(
    code: Optional[str] = Query(None),
    error: Optional[str] = Query(None),
) -> RedirectResponse:
    return RedirectResponse(await oauth_service.discord_callback(code, error))


@oauth_router.get("/notion", summary="Notion OAuth callback", response_class=RedirectResponse)
async def notion_callback(
    code: Optional[str] = Query(None),
    error: Optional[str] = Query(None),
) -> RedirectResponse:
    return RedirectResponse(await oauth_service.notion_callback(code, error))


@oauth_router.get("/slack", summary="Slack OAuth callback", response_class=RedirectResponse)
async def slack_callback(
    code: Optional[str] = Query(None),
    error: Optional[str] = Query(None),
) -> RedirectResponse:
    return RedirectResponse(await oauth_service.slack_callback(code, error))


@connections_router.get("", response_model=List[ConnectionResponse], summary="List saved connections")
async def list_connections(current_user: CurrentUser, service: Service) -> List[ConnectionResponse]:
    connections = await service.list_connections(current_user)
    return [ConnectionResponse.model_validate(connection) for connection in connections]


@connections_router.post(
    "",
    response_model=ActionResult[ConnectionResponse],
    status_code=status.HTTP_201_CREATED,
    summary="Save a connection",
)
async def save_connection(
    data: ConnectionCreate,
    current_user: CurrentUser,
    service: Service,
) -> ActionResult[ConnectionResponse]:
    connection = await service.save_connection(current_user, data)
    return ActionResult(data=ConnectionResponse.model_validate(connection))
