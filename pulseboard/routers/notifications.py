"""Notification API endpoints.

Users only ever see and modify their own notifications.
"""

from typing import Annotated, List
from uuid import UUID

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from ..database import get_db
from ..errors import NotFoundError
from ..models.notification import Notification
from ..models.user import User
from ..schemas.common import ActionResult, ErrorResponse
from ..schemas.notification import NotificationCount, NotificationResponse
from ..services.auth_service import get_current_user

router = APIRouter(prefix="/api/notifications", tags=["Notifications"])


@router.get(
    "",
    response_model=List[NotificationResponse],
    summary="List user notifications",
    responses={401: {"model": ErrorResponse, "description": "Not authenticated"}},
)
async def list_notifications(
    current_user: Annotated[User, Depends(get_current_user)],
    db: AsyncSession = Depends(get_db),
    skip: int = Query(0, ge=0, description="Number of records to skip"),
    limit: int = Query(50, ge=1, le=100, description="Maximum number of records to return"),
    unread_only: bool = Query(False, description="Return only unread notifications"),
) -> List[NotificationResponse]:
    """
    List notifications for the authenticated user, newest first.

    - **skip**: Number of records to skip for pagination
    - **limit**: Maximum number of records to return (1-100)
    - **unread_only**: If true, return only unread notifications
    """
    stmt = select(Notification).where(Notification.user_id == current_user.id)
    if unread_only:
        stmt = stmt.where(Notification.is_read.is_(False))

    result = await db.execute(
        stmt.order_by(Notification.created_at.desc()).offset(skip).limit(limit)
    )
    return [NotificationResponse.model_validate(n) for n in result.scalars().all()]


@router.get(
    "/count",
    response_model=NotificationCount,
    summary="Get notification counts",
)
async def get_notification_count(
    current_user: Annotated[User, Depends(get_current_user)],
    db: AsyncSession = Depends(get_db),
) -> NotificationCount:
    total = await db.scalar(
        select(func.count(Notification.id)).where(Notification.user_id == current_user.id)
    )
    unread = await db.scalar(
        select(func.count(Notification.id)).where(
            Notification.user_id == current_user.id,
            Notification.is_read.is_(False),
        )
    )
    return NotificationCount(total=total or 0, unread=unread or 0)


@router.post(
    "/read-all",
    response_model=ActionResult[int],
    summary="Mark all notifications as read",
)
async def mark_all_read(
    current_user: Annotated[User, Depends(get_current_user)],
    db: AsyncSession = Depends(get_db),
) -> ActionResult[int]:
    result = await db.execute(
        update(Notification)
        .where(Notification.user_id == current_user.id, Notification.is_read.is_(False))
        .values(is_read=True)
    )
    await db.commit()
    return ActionResult(data=result.rowcount, message="All notifications marked as read")


@router.post(
    "/{notification_id}/read",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Mark a notification as read",
    responses={404: {"model": ErrorResponse, "description": "Notification not found"}},
)
async def mark_read(
    notification_id: UUID,
    current_user: Annotated[User, Depends(get_current_user)],
    db: AsyncSession = Depends(get_db),
) -> Response:
    """Mark one of the caller's notifications read; other users' rows are not found."""
    result = await db.execute(
        select(Notification).where(
            Notification.id == notification_id,
            Notification.user_id == current_user.id,
        )
    )
    notification = result.scalar_one_or_none()
    if notification is None:
        raise NotFoundError("Notification not found")

    notification.is_read = True
    await db.commit()
    return Response(status_code=status.HTTP_204_NO_CONTENT)
