"""Calls to the identity provider's backend API."""

import logging
from typing import Optional

import httpx

from ..config import settings

logger = logging.getLogger(__name__)


async def push_role_metadata(
    clerk_id: str,
    role: str,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> bool:
    """
    Mirror a user's role into the provider's public metadata.

    Failures are logged and reported through the return value; the local
    role stays authoritative either way.
    """
    if not settings.clerk_secret_key:
        logger.debug(f"Skipping role metadata push for {clerk_id}: no secret key configured")
        return False

    url = f"{settings.clerk_api_url}/users/{clerk_id}/metadata"
    try:
        async with httpx.AsyncClient(timeout=settings.oauth_http_timeout, transport=transport) as client:
            response = await client.patch(
                url,
                headers={"Authorization": f"Bearer {settings.clerk_secret_key}"},
                json={"public_metadata": {"role": role}},
            )
            response.raise_for_status()
    except httpx.HTTPError as e:
        logger.error(f"Failed to push role metadata for {clerk_id}: {e}")
        return False

    logger.info(f"Role metadata pushed: clerk_id={clerk_id}, role={role}")
    return True
