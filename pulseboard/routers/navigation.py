"""Role-based navigation and board endpoints."""

from typing import Annotated, Dict, List
from uuid import UUID

from fastapi import APIRouter, Depends
from fastapi.responses import RedirectResponse
from pydantic import BaseModel

from ..models.user import User
from ..schemas.task import TaskResponse
from ..services.auth_service import get_current_user
from ..services.kanban_service import group_tasks
from ..services.navigation import dashboard_path, navigation_for
from ..services.task_service import TaskService, get_task_service

router = APIRouter(tags=["Navigation"])

CurrentUser = Annotated[User, Depends(get_current_user)]


class NavItemResponse(BaseModel):
    path: str
    label: str


class KanbanResponse(BaseModel):
    project_id: UUID
    columns: Dict[str, List[TaskResponse]]


@router.get("/api/navigation", response_model=List[NavItemResponse], summary="Sidebar items for the caller's role")
async def get_navigation(current_user: CurrentUser) -> List[NavItemResponse]:
    return [NavItemResponse(path=item.path, label=item.label) for item in navigation_for(current_user.role)]


@router.get("/dashboard", summary="Redirect to the caller's dashboard", response_class=RedirectResponse)
async def dashboard_redirect(current_user: CurrentUser) -> RedirectResponse:
    return RedirectResponse(dashboard_path(current_user.role))


@router.get(
    "/api/kanban/{project_id}",
    response_model=KanbanResponse,
    summary="A project's visible tasks grouped into board columns",
)
async def get_kanban(
    project_id: UUID,
    current_user: CurrentUser,
    service: Annotated[TaskService, Depends(get_task_service)],
) -> KanbanResponse:
    tasks = await service.visible_tasks(current_user, project_id)
    return KanbanResponse(project_id=project_id, columns=group_tasks(tasks))
