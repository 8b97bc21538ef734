"""Project API endpoints."""

from typing import Annotated, List
from uuid import UUID

from fastapi import APIRouter, Depends, status

from ..models.user import User
from ..schemas.common import ActionResult, ErrorResponse
from ..schemas.project import (
    ProjectCreate,
    ProjectMemberAdd,
    ProjectMemberResponse,
    ProjectProgressUpdate,
    ProjectResponse,
    ProjectUpdate,
)
from ..schemas.user import UserSummary
from ..services.auth_service import get_current_user
from ..services.project_service import ProjectService, get_project_service

router = APIRouter(prefix="/api/projects", tags=["Projects"])

CurrentUser = Annotated[User, Depends(get_current_user)]
Service = Annotated[ProjectService, Depends(get_project_service)]

_FAILURES = {
    401: {"model": ErrorResponse, "description": "Not authenticated"},
    403: {"model": ErrorResponse, "description": "Not authorized"},
    404: {"model": ErrorResponse, "description": "Project not found"},
}


@router.get(
    "",
    response_model=List[ProjectResponse],
    summary="List projects visible to the caller",
)
async def list_projects(current_user: CurrentUser, service: Service) -> List[ProjectResponse]:
    projects = await service.list_projects(current_user)
    return [ProjectResponse.model_validate(project) for project in projects]


@router.post(
    "",
    response_model=ActionResult[ProjectResponse],
    status_code=status.HTTP_201_CREATED,
    summary="Create a project",
    responses=_FAILURES,
)
async def create_project(
    data: ProjectCreate,
    current_user: CurrentUser,
    service: Service,
) -> ActionResult[ProjectResponse]:
    project = await service.create_project(current_user, data)
    return ActionResult(data=ProjectResponse.model_validate(project))


@router.get(
    "/{project_id}",
    response_model=ProjectResponse,
    summary="Get a project",
    responses=_FAILURES,
)
async def get_project(project_id: UUID, current_user: CurrentUser, service: Service) -> ProjectResponse:
    return ProjectResponse.model_validate(await service.get_project(current_user, project_id))


@router.put(
    "/{project_id}",
    response_model=ActionResult[ProjectResponse],
    summary="Update a project",
    responses=_FAILURES,
)
async def update_project(
    project_id: UUID,
    changes: ProjectUpdate,
    current_user: CurrentUser,
    service: Service,
) -> ActionResult[ProjectResponse]:
    project = await service.update_project(current_user, project_id, changes)
    return ActionResult(data=ProjectResponse.model_validate(project))


@router.delete(
    "/{project_id}",
    response_model=ActionResult[None],
    summary="Delete a project with its tasks, comments and meetings",
    responses=_FAILURES,
)
async def delete_project(project_id: UUID, current_user: CurrentUser, service: Service) -> ActionResult[None]:
    await service.delete_project(current_user, project_id)
    return ActionResult(message="Project deleted")


@router.put(
    "/{project_id}/progress",
    response_model=ActionResult[ProjectResponse],
    summary="Override project progress",
    responses=_FAILURES,
)
async def update_project_progress(
    project_id: UUID,
    data: ProjectProgressUpdate,
    current_user: CurrentUser,
    service: Service,
) -> ActionResult[ProjectResponse]:
    project = await service.update_progress(current_user, project_id, data.progress)
    return ActionResult(data=ProjectResponse.model_validate(project))


@router.get(
    "/{project_id}/members",
    response_model=List[ProjectMemberResponse],
    summary="Project team members with task counters",
    responses=_FAILURES,
)
async def list_project_members(
    project_id: UUID,
    current_user: CurrentUser,
    service: Service,
) -> List[ProjectMemberResponse]:
    return await service.list_members(current_user, project_id)


@router.post(
    "/{project_id}/members",
    response_model=ActionResult[UserSummary],
    status_code=status.HTTP_201_CREATED,
    summary="Add a member to the project team",
    responses={**_FAILURES, 409: {"model": ErrorResponse, "description": "Already a member"}},
)
async def add_project_member(
    project_id: UUID,
    data: ProjectMemberAdd,
    current_user: CurrentUser,
    service: Service,
) -> ActionResult[UserSummary]:
    user = await service.add_member(current_user, project_id, data.user_id)
    return ActionResult(data=UserSummary.model_validate(user))


@router.delete(
    "/{project_id}/members/{user_id}",
    response_model=ActionResult[None],
    summary="Remove a member from the project team",
    responses=_FAILURES,
)
async def remove_project_member(
    project_id: UUID,
    user_id: UUID,
    current_user: CurrentUser,
    service: Service,
) -> ActionResult[None]:
    await service.remove_member(current_user, project_id, user_id)
    return ActionResult(message="Member removed")
