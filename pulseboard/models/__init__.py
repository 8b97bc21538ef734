"""SQLAlchemy ORM models package."""

from .campaign import Campaign
from .comment import Comment
from .connection import Connection
from .meeting import Meeting, MeetingAttendee
from .notification import Notification
from .project import Project
from .task import Task
from .team import Team, TeamMembers
from .time_entry import TimeEntry
from .user import User
from .workflow import Workflow

__all__ = [
    "Campaign",
    "Comment",
    "Connection",
    "Meeting",
    "MeetingAttendee",
    "Notification",
    "Project",
    "Task",
    "Team",
    "TeamMembers",
    "TimeEntry",
    "User",
    "Workflow",
]
