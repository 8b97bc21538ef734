"""Notification service for creating and delivering notifications.

Every notification is stored first and then pushed on the recipient's
private channel. There is no de-duplication: each triggering action
produces its own notification.
"""

import logging
from datetime import datetime
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from ..models.meeting import Meeting
from ..models.notification import Notification
from ..models.project import Project
from ..models.task import Task
from ..models.user import User
from ..schemas.notification import NotificationResponse, NotificationType
from ..websocket.handlers import Broadcaster

logger = logging.getLogger(__name__)


def display_name(user: Optional[User]) -> str:
    """Name shown in notification text."""
    if user is None:
        return "Someone"
    return user.name or user.email


class NotificationService:
    """
    Service for managing notifications.

    Handles notification creation and delivery over the recipient's
    ``notifications-<id>`` channel.
    """

    @staticmethod
    async def create_notification(
        db: AsyncSession,
        broadcaster: Broadcaster,
        recipient: User,
        title: str,
        message: str,
        notification_type: NotificationType,
        link: Optional[str] = None,
    ) -> Notification:
        """
        Store a notification and push it in real time.

        Args:
            db: Database session
            broadcaster: Event publisher
            recipient: The user being notified
            title: Short title
            message: Body text
            notification_type: Notification type
            link: Optional in-app href

        Returns:
            Notification: The created notification
        """
        notification = Notification(
            user_id=recipient.id,
            title=title,
            message=message,
            type=notification_type.value,
            link=link,
            is_read=False,
        )
        db.add(notification)
        await db.commit()

        logger.info(
            f"Notification created: id={notification.id}, "
            f"user={notification.user_id}, type={notification.type}"
        )

        payload = NotificationResponse.model_validate(notification).model_dump(mode="json")
        await broadcaster.notify_user(recipient.clerk_id, payload)
        return notification

    @staticmethod
    async def notify_task_assigned(
        db: AsyncSession,
        broadcaster: Broadcaster,
        task: Task,
        assignee: User,
        assigner: User,
    ) -> Notification:
        return await NotificationService.create_notification(
            db,
            broadcaster,
            recipient=assignee,
            title="New Task Assignment",
            message=f'A new task "{task.title}" has been assigned to you by {display_name(assigner)}',
            notification_type=NotificationType.TASK_ASSIGNED,
            link=f"/dashboards/employee?taskId={task.id}",
        )

    @staticmethod
    async def notify_task_completed(
        db: AsyncSession,
        broadcaster: Broadcaster,
        task: Task,
        recipient: User,
        completed_by: User,
    ) -> Notification:
        return await NotificationService.create_notification(
            db,
            broadcaster,
            recipient=recipient,
            title="Task Completed",
            message=f'Task "{task.title}" has been completed by {display_name(completed_by)}',
            notification_type=NotificationType.TASK_COMPLETED,
            link=f"/kanban?taskId={task.id}",
        )

    @staticmethod
    async def notify_task_accepted(
        db: AsyncSession,
        broadcaster: Broadcaster,
        task: Task,
        recipient: User,
        accepted_by: User,
    ) -> Notification:
        return await NotificationService.create_notification(
            db,
            broadcaster,
            recipient=recipient,
            title="Task Accepted",
            message=f'Task "{task.title}" has been accepted by {display_name(accepted_by)}',
            notification_type=NotificationType.TASK_ACCEPTED,
            link=f"/kanban?taskId={task.id}",
        )

    @staticmethod
    async def notify_task_declined(
        db: AsyncSession,
        broadcaster: Broadcaster,
        task: Task,
        recipient: User,
        declined_by: User,
        reason: str,
    ) -> Notification:
        return await NotificationService.create_notification(
            db,
            broadcaster,
            recipient=recipient,
            title="Task Declined",
            message=f'{display_name(declined_by)} has declined the task "{task.title}". Reason: {reason}',
            notification_type=NotificationType.TASK_DECLINED,
            link=f"/kanban?taskId={task.id}",
        )

    @staticmethod
    async def notify_task_rescheduled(
        db: AsyncSession,
        broadcaster: Broadcaster,
        task: Task,
        recipient: User,
        new_deadline: datetime,
    ) -> Notification:
        return await NotificationService.create_notification(
            db,
            broadcaster,
            recipient=recipient,
            title="Task Rescheduled",
            message=f'Task "{task.title}" has been rescheduled to {new_deadline.strftime("%Y-%m-%d")}',
            notification_type=NotificationType.TASK_RESCHEDULED,
            link=f"/dashboards/employee?taskId={task.id}",
        )

    @staticmethod
    async def notify_task_due_today(
        db: AsyncSession,
        broadcaster: Broadcaster,
        task: Task,
        recipient: User,
    ) -> Notification:
        return await NotificationService.create_notification(
            db,
            broadcaster,
            recipient=recipient,
            title="Task Due Today",
            message=f'Task "{task.title}" is due today',
            notification_type=NotificationType.TASK_DUE_TODAY,
            link=f"/dashboards/employee?taskId={task.id}",
        )

    @staticmethod
    async def notify_comment_added(
        db: AsyncSession,
        broadcaster: Broadcaster,
        project: Project,
        recipient: User,
        author: User,
    ) -> Notification:
        return await NotificationService.create_notification(
            db,
            broadcaster,
            recipient=recipient,
            title="New Comment",
            message=f'{display_name(author)} commented on project "{project.name}"',
            notification_type=NotificationType.COMMENT,
            link=f"/projects/{project.id}",
        )

    @staticmethod
    async def notify_meeting_invite(
        db: AsyncSession,
        broadcaster: Broadcaster,
        meeting: Meeting,
        recipient: User,
        organizer: User,
    ) -> Notification:
        return await NotificationService.create_notification(
            db,
            broadcaster,
            recipient=recipient,
            title="New Meeting",
            message=f'{display_name(organizer)} invited you to "{meeting.title}"',
            notification_type=NotificationType.MEETING,
            link=f"/communications?meeting={meeting.id}",
        )

    @staticmethod
    async def notify_meeting_response(
        db: AsyncSession,
        broadcaster: Broadcaster,
        meeting: Meeting,
        recipient: User,
        responder: User,
        status: str,
    ) -> Notification:
        return await NotificationService.create_notification(
            db,
            broadcaster,
            recipient=recipient,
            title="Meeting Response",
            message=f"{display_name(responder)} has {status.lower()} the meeting invitation",
            notification_type=NotificationType.MEETING_RESPONSE,
            link=f"/communications?meeting={meeting.id}",
        )


# Convenience aliases
create_notification = NotificationService.create_notification
notify_task_assigned = NotificationService.notify_task_assigned
