"""Identity provider webhook endpoint."""

from fastapi import APIRouter, Depends, Request
from fastapi.responses import PlainTextResponse
from sqlalchemy.ext.asyncio import AsyncSession

from ..database import get_db
from ..services.webhook_service import process_clerk_webhook

router = APIRouter(prefix="/api/webhooks", tags=["Webhooks"])


@router.post(
    "/clerk",
    response_class=PlainTextResponse,
    summary="Receive identity provider user events",
    responses={400: {"description": "Missing or invalid signature headers"}},
)
async def clerk_webhook(request: Request, db: AsyncSession = Depends(get_db)) -> PlainTextResponse:
    body = await request.body()
    outcome = await process_clerk_webhook(db, body, request.headers)
    return PlainTextResponse(outcome.message, status_code=outcome.status_code)
