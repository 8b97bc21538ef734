"""API routers package.

Each router handles a specific domain of the API.
"""

from .billing import billing_router, campaigns_router, workflows_router
from .communications import comments_router, meetings_router
from .connections import connections_router, oauth_router
from .navigation import router as navigation_router
from .notifications import router as notifications_router
from .projects import router as projects_router
from .tasks import router as tasks_router
from .teams import router as teams_router
from .time_entries import router as time_entries_router
from .users import router as users_router
from .webhooks import router as webhooks_router

__all__ = [
    "billing_router",
    "campaigns_router",
    "comments_router",
    "connections_router",
    "meetings_router",
    "navigation_router",
    "notifications_router",
    "oauth_router",
    "projects_router",
    "tasks_router",
    "teams_router",
    "time_entries_router",
    "users_router",
    "webhooks_router",
    "workflows_router",
]
