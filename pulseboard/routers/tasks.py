"""Task API endpoints.

Static paths (``/unassigned``, ``/cleanup``, ``/assign-by-skills``,
``/notify-due-today``) are declared before ``/{task_id}`` so they are not
captured as task ids.
"""

from typing import Annotated, List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status

from ..models.user import User
from ..schemas.common import ActionResult, ErrorResponse
from ..schemas.task import (
    CleanupResult,
    SkillAssignRequest,
    SkillAssignResult,
    TaskAssign,
    TaskCreate,
    TaskDecline,
    TaskPage,
    TaskPriority,
    TaskProgressUpdate,
    TaskResponse,
    TaskStatus,
    TaskStatusUpdate,
    TaskUpdate,
)
from ..services.assignment_service import AssignmentService, get_assignment_service
from ..services.auth_service import get_current_user
from ..services.task_service import TaskService, get_task_service

router = APIRouter(prefix="/api/tasks", tags=["Tasks"])

CurrentUser = Annotated[User, Depends(get_current_user)]
Service = Annotated[TaskService, Depends(get_task_service)]

_FAILURES = {
    400: {"model": ErrorResponse, "description": "Validation failed"},
    401: {"model": ErrorResponse, "description": "Not authenticated"},
    403: {"model": ErrorResponse, "description": "Not authorized"},
    404: {"model": ErrorResponse, "description": "Task, project or user not found"},
}


@router.get(
    "",
    response_model=TaskPage,
    summary="List tasks",
    description="Tasks visible to the caller's role, newest first.",
    responses={401: _FAILURES[401]},
)
async def list_tasks(
    current_user: CurrentUser,
    service: Service,
    project_id: Optional[UUID] = Query(None, description="Filter by project"),
    task_status: Optional[TaskStatus] = Query(None, alias="status", description="Filter by status"),
    priority: Optional[TaskPriority] = Query(None, description="Filter by priority"),
    search: Optional[str] = Query(None, max_length=200, description="Match title or description"),
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
) -> TaskPage:
    return await service.list_tasks(
        current_user,
        project_id=project_id,
        status=task_status,
        priority=priority,
        search=search,
        page=page,
        limit=limit,
    )


@router.post(
    "",
    response_model=ActionResult[TaskResponse],
    status_code=status.HTTP_201_CREATED,
    summary="Create a task",
    responses=_FAILURES,
)
async def create_task(
    data: TaskCreate,
    current_user: CurrentUser,
    service: Service,
) -> ActionResult[TaskResponse]:
    task = await service.create_task(current_user, data)
    return ActionResult(data=TaskResponse.model_validate(task))


@router.get(
    "/unassigned",
    response_model=List[TaskResponse],
    summary="List unassigned tasks",
    description="PENDING tasks nobody is assigned to.",
    responses={401: _FAILURES[401], 403: _FAILURES[403]},
)
async def list_unassigned_tasks(current_user: CurrentUser, service: Service) -> List[TaskResponse]:
    tasks = await service.list_unassigned_tasks(current_user)
    return [TaskResponse.model_validate(task) for task in tasks]


@router.post(
    "/cleanup",
    response_model=CleanupResult,
    summary="Unassign tasks whose assignee no longer exists",
    responses={401: _FAILURES[401], 403: _FAILURES[403]},
)
async def cleanup_orphaned_tasks(current_user: CurrentUser, service: Service) -> CleanupResult:
    return await service.cleanup_orphaned_tasks(current_user)


@router.post(
    "/assign-by-skills",
    response_model=ActionResult[SkillAssignResult],
    summary="Form a team for a task from users with matching skills",
    responses=_FAILURES,
)
async def assign_by_skills(
    data: SkillAssignRequest,
    current_user: CurrentUser,
    service: Annotated[AssignmentService, Depends(get_assignment_service)],
) -> ActionResult[SkillAssignResult]:
    result = await service.assign_by_skills(current_user, data.task_id, data.required_skills)
    return ActionResult(data=result)


@router.post(
    "/notify-due-today",
    response_model=ActionResult[int],
    summary="Remind assignees of tasks due today",
    responses={401: _FAILURES[401], 403: _FAILURES[403]},
)
async def notify_due_today(current_user: CurrentUser, service: Service) -> ActionResult[int]:
    sent = await service.notify_due_today(current_user)
    return ActionResult(data=sent, message=f"Sent {sent} reminders")


@router.get(
    "/{task_id}",
    response_model=TaskResponse,
    summary="Get a task",
    responses={401: _FAILURES[401], 404: _FAILURES[404]},
)
async def get_task(task_id: UUID, current_user: CurrentUser, service: Service) -> TaskResponse:
    return TaskResponse.model_validate(await service.get_task(current_user, task_id))


@router.put(
    "/{task_id}",
    response_model=ActionResult[TaskResponse],
    summary="Edit a task",
    responses=_FAILURES,
)
async def edit_task(
    task_id: UUID,
    changes: TaskUpdate,
    current_user: CurrentUser,
    service: Service,
) -> ActionResult[TaskResponse]:
    task = await service.edit_task(current_user, task_id, changes)
    return ActionResult(data=TaskResponse.model_validate(task))


@router.delete(
    "/{task_id}",
    response_model=ActionResult[None],
    summary="Delete a task",
    responses=_FAILURES,
)
async def delete_task(task_id: UUID, current_user: CurrentUser, service: Service) -> ActionResult[None]:
    await service.delete_task(current_user, task_id)
    return ActionResult(message="Task deleted")


@router.post(
    "/{task_id}/assign",
    response_model=ActionResult[TaskResponse],
    summary="Assign a task",
    responses=_FAILURES,
)
async def assign_task(
    task_id: UUID,
    data: TaskAssign,
    current_user: CurrentUser,
    service: Service,
) -> ActionResult[TaskResponse]:
    task = await service.assign_task(current_user, task_id, data.assignee_id)
    return ActionResult(data=TaskResponse.model_validate(task))


@router.post(
    "/{task_id}/unassign",
    response_model=ActionResult[TaskResponse],
    summary="Unassign a task",
    responses=_FAILURES,
)
async def unassign_task(task_id: UUID, current_user: CurrentUser, service: Service) -> ActionResult[TaskResponse]:
    task = await service.unassign_task(current_user, task_id)
    return ActionResult(data=TaskResponse.model_validate(task))


@router.post(
    "/{task_id}/start",
    response_model=ActionResult[TaskResponse],
    summary="Start working on a task",
    responses=_FAILURES,
)
async def start_task(task_id: UUID, current_user: CurrentUser, service: Service) -> ActionResult[TaskResponse]:
    task = await service.start_task(current_user, task_id)
    return ActionResult(data=TaskResponse.model_validate(task))


@router.post(
    "/{task_id}/accept",
    response_model=ActionResult[TaskResponse],
    summary="Accept an assigned task",
    responses=_FAILURES,
)
async def accept_task(task_id: UUID, current_user: CurrentUser, service: Service) -> ActionResult[TaskResponse]:
    task = await service.accept_task(current_user, task_id)
    return ActionResult(data=TaskResponse.model_validate(task))


@router.post(
    "/{task_id}/decline",
    response_model=ActionResult[TaskResponse],
    summary="Decline an assigned task",
    responses=_FAILURES,
)
async def decline_task(
    task_id: UUID,
    data: TaskDecline,
    current_user: CurrentUser,
    service: Service,
) -> ActionResult[TaskResponse]:
    task = await service.decline_task(current_user, task_id, data.reason)
    return ActionResult(data=TaskResponse.model_validate(task))


@router.put(
    "/{task_id}/status",
    response_model=ActionResult[TaskResponse],
    summary="Change a task's status",
    responses=_FAILURES,
)
async def update_task_status(
    task_id: UUID,
    data: TaskStatusUpdate,
    current_user: CurrentUser,
    service: Service,
) -> ActionResult[TaskResponse]:
    task = await service.update_task_status(current_user, task_id, data.status)
    return ActionResult(data=TaskResponse.model_validate(task))


@router.put(
    "/{task_id}/progress",
    response_model=ActionResult[TaskResponse],
    summary="Report task progress",
    responses=_FAILURES,
)
async def update_task_progress(
    task_id: UUID,
    data: TaskProgressUpdate,
    current_user: CurrentUser,
    service: Service,
) -> ActionResult[TaskResponse]:
    task = await service.update_task_progress(current_user, task_id, data.progress)
    return ActionResult(data=TaskResponse.model_validate(task))
