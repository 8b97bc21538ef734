"""Time tracking API endpoints."""

from typing import Annotated, List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, status

from ..models.user import User
from ..schemas.common import ActionResult, ErrorResponse
from ..schemas.time_entry import TimeEntryResponse, TimeEntryStart, TimeReport
from ..services.auth_service import get_current_user
from ..services.time_tracking_service import TimeTrackingService, get_time_tracking_service

router = APIRouter(prefix="/api/time-entries", tags=["Time Tracking"])

CurrentUser = Annotated[User, Depends(get_current_user)]
Service = Annotated[TimeTrackingService, Depends(get_time_tracking_service)]


@router.post(
    "/tasks/{task_id}/start",
    response_model=ActionResult[TimeEntryResponse],
    status_code=status.HTTP_201_CREATED,
    summary="Start tracking time on a task",
    responses={
        404: {"model": ErrorResponse, "description": "Task not found"},
        409: {"model": ErrorResponse, "description": "Another entry is already running"},
    },
)
async def start_time_tracking(
    task_id: UUID,
    current_user: CurrentUser,
    service: Service,
    data: Optional[TimeEntryStart] = None,
) -> ActionResult[TimeEntryResponse]:
    entry = await service.start_time_tracking(
        current_user,
        task_id,
        description=data.description if data else None,
    )
    return ActionResult(data=TimeEntryResponse.model_validate(entry))


@router.post(
    "/{entry_id}/stop",
    response_model=ActionResult[TimeEntryResponse],
    summary="Stop a running time entry",
    responses={404: {"model": ErrorResponse, "description": "No such running entry"}},
)
async def stop_time_tracking(
    entry_id: UUID,
    current_user: CurrentUser,
    service: Service,
) -> ActionResult[TimeEntryResponse]:
    entry = await service.stop_time_tracking(current_user, entry_id)
    return ActionResult(data=TimeEntryResponse.model_validate(entry))


@router.get(
    "/tasks/{task_id}/active",
    response_model=Optional[TimeEntryResponse],
    summary="The caller's running entry on a task, if any",
)
async def get_active_time_entry(
    task_id: UUID,
    current_user: CurrentUser,
    service: Service,
) -> Optional[TimeEntryResponse]:
    entry = await service.get_active_time_entry(current_user, task_id)
    return TimeEntryResponse.model_validate(entry) if entry else None


@router.get(
    "/tasks/{task_id}",
    response_model=List[TimeEntryResponse],
    summary="The caller's entries on a task",
)
async def get_task_time_entries(
    task_id: UUID,
    current_user: CurrentUser,
    service: Service,
) -> List[TimeEntryResponse]:
    entries = await service.get_task_time_entries(current_user, task_id)
    return [TimeEntryResponse.model_validate(entry) for entry in entries]


@router.get(
    "/report",
    response_model=TimeReport,
    summary="Tracked seconds per task for the caller",
)
async def time_report(current_user: CurrentUser, service: Service) -> TimeReport:
    return await service.time_report(current_user)
