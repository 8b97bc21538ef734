"""Project meetings and attendee responses."""

import logging
from uuid import UUID

from fastapi import Depends
from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from ..database import get_db
from ..errors import NotAuthorizedError, NotFoundError
from ..models.meeting import Meeting, MeetingAttendee
from ..models.project import Project
from ..models.user import User
from ..schemas.meeting import AttendeeStatus, MeetingCreate, MeetingStatus
from ..websocket.handlers import Broadcaster, get_broadcaster
from .notification_service import NotificationService
from .policy import Action, Resource, require
from .scoping import project_visibility

logger = logging.getLogger(__name__)


def project_participants(project: Project) -> list[User]:
    """Manager, client and team members of a project, without duplicates."""
    people: dict[UUID, User] = {}
    candidates = [project.manager, project.client]
    if project.team is not None:
        candidates.extend(project.team.members)
    for user in candidates:
        if user is not None:
            people.setdefault(user.id, user)
    return list(people.values())


class MeetingService:
    def __init__(self, db: AsyncSession, broadcaster: Broadcaster):
        self.db = db
        self.broadcaster = broadcaster

    async def _load(self, meeting_id: UUID) -> Meeting:
        result = await self.db.execute(
            select(Meeting)
            .where(Meeting.id == meeting_id)
            .execution_options(populate_existing=True)
        )
        meeting = result.scalar_one_or_none()
        if meeting is None:
            raise NotFoundError("Meeting not found")
        return meeting

    async def create_meeting(self, actor: User, data: MeetingCreate) -> Meeting:
        """
        Schedule a meeting for a project.

        Everyone on the project except the organizer is invited and notified.
        """
        require(actor.role, Action.CREATE, Resource.MEETING, "Not authorized to schedule meetings")

        stmt = select(Project).where(Project.id == data.project_id)
        visibility = project_visibility(actor)
        if visibility is not None:
            stmt = stmt.where(visibility)
        project = (await self.db.execute(stmt)).scalar_one_or_none()
        if project is None:
            raise NotFoundError("Project not found")

        invitees = [user for user in project_participants(project) if user.id != actor.id]
        meeting = Meeting(
            title=data.title,
            description=data.description,
            start_time=data.start_time,
            end_time=data.end_time,
            link=data.link,
            location=data.location,
            organizer_id=actor.id,
            project_id=project.id,
            attendees=[
                MeetingAttendee(user_id=user.id, status=AttendeeStatus.PENDING.value)
                for user in invitees
            ],
        )
        self.db.add(meeting)
        await self.db.commit()

        meeting = await self._load(meeting.id)
        logger.info(f"Meeting created: id={meeting.id}, project={project.id}, invitees={len(invitees)}")

        for user in invitees:
            await NotificationService.notify_meeting_invite(self.db, self.broadcaster, meeting, user, actor)
        return meeting

    async def list_my_meetings(self, actor: User) -> list[Meeting]:
        """Meetings the actor organizes or is invited to, soonest first."""
        invited = select(MeetingAttendee.meeting_id).where(MeetingAttendee.user_id == actor.id)
        result = await self.db.execute(
            select(Meeting)
            .where(or_(Meeting.organizer_id == actor.id, Meeting.id.in_(invited)))
            .order_by(Meeting.start_time)
        )
        return list(result.scalars().all())

    async def respond(self, actor: User, meeting_id: UUID, status: AttendeeStatus) -> Meeting:
        """Record the actor's answer and tell the organizer."""
        meeting = await self._load(meeting_id)
        attendee = next((a for a in meeting.attendees if a.user_id == actor.id), None)
        if attendee is None:
            raise NotFoundError("You are not invited to this meeting")

        attendee.status = status.value
        await self.db.commit()
        meeting = await self._load(meeting_id)

        if meeting.organizer is not None:
            await NotificationService.notify_meeting_response(
                self.db, self.broadcaster, meeting, meeting.organizer, actor, status.value
            )
        return meeting

    async def update_status(self, actor: User, meeting_id: UUID, status: MeetingStatus) -> Meeting:
        meeting = await self._load(meeting_id)
        if meeting.organizer_id != actor.id:
            raise NotAuthorizedError("Only the organizer can change the meeting status")

        meeting.status = status.value
        await self.db.commit()
        logger.info(f"Meeting status updated: id={meeting_id}, status={status.value}")
        return meeting


def get_meeting_service(
    db: AsyncSession = Depends(get_db),
    broadcaster: Broadcaster = Depends(get_broadcaster),
) -> MeetingService:
    return MeetingService(db, broadcaster)
