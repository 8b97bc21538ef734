"""Identity provider webhook processing.

The provider signs deliveries with Svix. Verified ``user.created`` and
``user.updated`` events upsert the local user, ``user.deleted`` releases
the user's tasks and removes the row. A user who still manages projects is
kept until those projects are handed over.
"""

import json
import logging
from dataclasses import dataclass
from typing import Any, Mapping, Optional

import httpx
from sqlalchemy import func, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from svix.webhooks import Webhook, WebhookVerificationError

from ..config import settings
from ..errors import ConflictError
from ..models.project import Project
from ..models.task import Task
from ..models.user import User
from ..schemas.task import TaskStatus
from . import clerk_client
from .user_service import sync_user

logger = logging.getLogger(__name__)

SVIX_HEADERS = ("svix-id", "svix-timestamp", "svix-signature")
MANAGES_PROJECTS_MESSAGE = "Error occured -- user still manages projects"


@dataclass
class WebhookOutcome:
    """Plain-text reply for the provider."""

    status_code: int
    message: str


def _full_name(data: Mapping[str, Any]) -> str:
    return f"{data.get('first_name') or ''} {data.get('last_name') or ''}".strip()


def _primary_email(data: Mapping[str, Any]) -> Optional[str]:
    addresses = data.get("email_addresses") or []
    primary_id = data.get("primary_email_address_id")
    for address in addresses:
        if address.get("id") == primary_id:
            return address.get("email_address")
    return addresses[0].get("email_address") if addresses else None


async def delete_user(db: AsyncSession, clerk_id: str) -> bool:
    """
    Unassign a departing user's tasks and delete them.

    Raises ConflictError, leaving the user and their tasks untouched, while
    the user is still the manager of any project.
    """
    user = (await db.execute(select(User).where(User.clerk_id == clerk_id))).scalar_one_or_none()
    if user is None:
        return False

    managed = await db.scalar(select(func.count(Project.id)).where(Project.manager_id == user.id))
    if managed:
        logger.error(f"User deletion refused: clerk_id={clerk_id} manages {managed} project(s)")
        raise ConflictError(MANAGES_PROJECTS_MESSAGE)

    await db.execute(
        update(Task)
        .where(Task.assignee_id == user.id)
        .values(assignee_id=None, status=TaskStatus.PENDING.value, accepted=False)
    )
    await db.delete(user)
    try:
        await db.commit()
    except IntegrityError as e:
        await db.rollback()
        logger.error(f"User deletion failed: clerk_id={clerk_id}: {e}")
        raise ConflictError("Error occured -- user is still referenced")

    logger.info(f"User deleted from webhook: clerk_id={clerk_id}")
    return True


async def process_clerk_webhook(
    db: AsyncSession,
    body: bytes,
    headers: Mapping[str, str],
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> WebhookOutcome:
    """Verify and apply one webhook delivery."""
    svix_headers = {name: headers.get(name) for name in SVIX_HEADERS}
    if not all(svix_headers.values()):
        logger.error("Webhook rejected: missing svix headers")
        return WebhookOutcome(400, "Error occured -- no svix headers")

    try:
        Webhook(settings.clerk_webhook_secret).verify(body, svix_headers)
    except WebhookVerificationError as e:
        logger.error(f"Webhook verification failed: {e}")
        return WebhookOutcome(400, "Error occured")

    try:
        event = json.loads(body)
    except ValueError as e:
        logger.error(f"Webhook body is not JSON: {e}")
        return WebhookOutcome(400, "Error occured")
    if not isinstance(event, dict):
        return WebhookOutcome(400, "Error occured")

    event_type = event.get("type")
    data = event.get("data") or {}
    logger.info(f"Webhook received: type={event_type}")

    if event_type in ("user.created", "user.updated"):
        email = _primary_email(data)
        if not data.get("id") or not email:
            return WebhookOutcome(400, "Error occured -- missing user id or email")

        user, _ = await sync_user(
            db,
            clerk_id=data["id"],
            email=email,
            name=_full_name(data) or None,
            profile_image=data.get("image_url") or data.get("profile_image_url"),
        )
        await clerk_client.push_role_metadata(user.clerk_id, user.role, transport=transport)
        return WebhookOutcome(200, "User synchronized successfully")

    if event_type == "user.deleted":
        if data.get("id"):
            try:
                await delete_user(db, data["id"])
            except ConflictError as e:
                return WebhookOutcome(409, e.message)
        return WebhookOutcome(200, "User deleted")

    return WebhookOutcome(200, "Webhook processed")
