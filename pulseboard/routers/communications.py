"""Comment and meeting API endpoints."""

from typing import Annotated, List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status

from ..models.user import User
from ..schemas.comment import CommentCreate, CommentResponse
from ..schemas.common import ActionResult, ErrorResponse
from ..schemas.meeting import AttendeeStatusUpdate, MeetingCreate, MeetingResponse, MeetingStatusUpdate
from ..services.auth_service import get_current_user
from ..services.comment_service import CommentService, get_comment_service
from ..services.meeting_service import MeetingService, get_meeting_service

comments_router = APIRouter(prefix="/api/comments", tags=["Comments"])
meetings_router = APIRouter(prefix="/api/meetings", tags=["Meetings"])

CurrentUser = Annotated[User, Depends(get_current_user)]
Comments = Annotated[CommentService, Depends(get_comment_service)]
Meetings = Annotated[MeetingService, Depends(get_meeting_service)]

_NOT_FOUND = {404: {"model": ErrorResponse, "description": "Not found or not visible"}}


@comments_router.get("", response_model=List[CommentResponse], summary="List comments")
async def list_comments(
    current_user: CurrentUser,
    service: Comments,
    project_id: Optional[UUID] = Query(None, description="Only comments on this project"),
) -> List[CommentResponse]:
    comments = await service.list_comments(current_user, project_id)
    return [CommentResponse.model_validate(comment) for comment in comments]


@comments_router.post(
    "",
    response_model=ActionResult[CommentResponse],
    status_code=status.HTTP_201_CREATED,
    summary="Comment on a project",
    responses=_NOT_FOUND,
)
async def create_comment(
    data: CommentCreate,
    current_user: CurrentUser,
    service: Comments,
) -> ActionResult[CommentResponse]:
    comment = await service.create_comment(current_user, data)
    return ActionResult(data=CommentResponse.model_validate(comment))


@meetings_router.get("", response_model=List[MeetingResponse], summary="List my meetings")
async def list_my_meetings(current_user: CurrentUser, service: Meetings) -> List[MeetingResponse]:
    meetings = await service.list_my_meetings(current_user)
    return [MeetingResponse.model_validate(meeting) for meeting in meetings]


@meetings_router.post(
    "",
    response_model=ActionResult[MeetingResponse],
    status_code=status.HTTP_201_CREATED,
    summary="Schedule a meeting",
    responses=_NOT_FOUND,
)
async def create_meeting(
    data: MeetingCreate,
    current_user: CurrentUser,
    service: Meetings,
) -> ActionResult[MeetingResponse]:
    meeting = await service.create_meeting(current_user, data)
    return ActionResult(data=MeetingResponse.model_validate(meeting))


@meetings_router.put(
    "/{meeting_id}/response",
    response_model=ActionResult[MeetingResponse],
    summary="Answer a meeting invitation",
    responses=_NOT_FOUND,
)
async def respond_to_meeting(
    meeting_id: UUID,
    data: AttendeeStatusUpdate,
    current_user: CurrentUser,
    service: Meetings,
) -> ActionResult[MeetingResponse]:
    meeting = await service.respond(current_user, meeting_id, data.status)
    return ActionResult(data=MeetingResponse.model_validate(meeting))


@meetings_router.put(
    "/{meeting_id}/status",
    response_model=ActionResult[MeetingResponse],
    summary="Change a meeting's status",
    responses={**_NOT_FOUND, 403: {"model": ErrorResponse, "description": "Not the organizer"}},
)
async def update_meeting_status(
    meeting_id: UUID,
    data: MeetingStatusUpdate,
    current_user: CurrentUser,
    service: Meetings,
) -> ActionResult[MeetingResponse]:
    meeting = await service.update_status(current_user, meeting_id, data.status)
    return ActionResult(data=MeetingResponse.model_validate(meeting))
