"""Email campaign statistics."""

import logging
import math
from datetime import datetime
from typing import Optional

from fastapi import Depends
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from ..database import get_db
from ..models.campaign import Campaign
from ..models.user import User
from ..schemas.campaign import CampaignCreate, CampaignPage, CampaignResponse
from .policy import Action, Resource, require

logger = logging.getLogger(__name__)


class CampaignService:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def list_campaigns(
        self,
        actor: User,
        search: Optional[str] = None,
        min_open_rate: Optional[float] = None,
        min_click_rate: Optional[float] = None,
        page: int = 1,
        limit: int = 10,
    ) -> CampaignPage:
        require(actor.role, Action.VIEW, Resource.CAMPAIGN)
        page = max(page, 1)
        limit = min(max(limit, 1), 100)

        conditions = [Campaign.user_id == actor.id]
        if search:
            conditions.append(Campaign.name.ilike(f"%{search}%"))
        if min_open_rate is not None:
            conditions.append(Campaign.open_rate >= min_open_rate)
        if min_click_rate is not None:
            conditions.append(Campaign.click_rate >= min_click_rate)

        total = await self.db.scalar(select(func.count(Campaign.id)).where(*conditions)) or 0
        result = await self.db.execute(
            select(Campaign)
            .where(*conditions)
            .order_by(Campaign.date.desc())
            .offset((page - 1) * limit)
            .limit(limit)
        )

        return CampaignPage(
            campaigns=[CampaignResponse.model_validate(c) for c in result.scalars().all()],
            total=total,
            page=page,
            total_pages=math.ceil(total / limit) if total else 0,
        )

    async def create_campaign(self, actor: User, data: CampaignCreate) -> Campaign:
        require(actor.role, Action.CREATE, Resource.CAMPAIGN)
        campaign = Campaign(
            user_id=actor.id,
            name=data.name,
            date=data.date or datetime.utcnow(),
            open_rate=data.open_rate,
            click_rate=data.click_rate,
            recipients=data.recipients,
            growth=data.growth,
        )
        self.db.add(campaign)
        await self.db.commit()

        logger.info(f"Campaign created: id={campaign.id}, user={actor.id}")
        return campaign


def get_campaign_service(db: AsyncSession = Depends(get_db)) -> CampaignService:
    return CampaignService(db)
