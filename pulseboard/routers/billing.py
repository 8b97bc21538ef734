"""Billing, campaign and workflow API endpoints."""

from typing import Annotated, List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from ..database import get_db
from ..models.user import User
from ..schemas.billing import BillingResponse, TierUpdate
from ..schemas.campaign import CampaignCreate, CampaignPage, CampaignResponse
from ..schemas.common import ActionResult, ErrorResponse
from ..schemas.workflow import WorkflowCreate, WorkflowPublish, WorkflowResponse, WorkflowTemplateUpdate
from ..services.auth_service import get_current_user
from ..services.campaign_service import CampaignService, get_campaign_service
from ..services.policy import Action, Resource, require
from ..services.workflow_service import WorkflowService, get_workflow_service

billing_router = APIRouter(prefix="/api/billing", tags=["Billing"])
campaigns_router = APIRouter(prefix="/api/campaigns", tags=["Campaigns"])
workflows_router = APIRouter(prefix="/api/workflows", tags=["Workflows"])

CurrentUser = Annotated[User, Depends(get_current_user)]

# Credits are not metered; every tier shows the same label.
CREDITS_LABEL = "Unlimited"


@billing_router.get("", response_model=BillingResponse, summary="Get billing tier and credits")
async def get_billing(current_user: CurrentUser) -> BillingResponse:
    require(current_user.role, Action.VIEW, Resource.BILLING)
    return BillingResponse(tier=current_user.tier, credits=CREDITS_LABEL)


@billing_router.put("/tier", response_model=ActionResult[BillingResponse], summary="Switch billing tier")
async def update_tier(
    data: TierUpdate,
    current_user: CurrentUser,
    db: AsyncSession = Depends(get_db),
) -> ActionResult[BillingResponse]:
    require(current_user.role, Action.EDIT, Resource.BILLING)
    current_user.tier = data.tier.value
    current_user.credits = CREDITS_LABEL
    await db.commit()
    return ActionResult(data=BillingResponse(tier=data.tier, credits=CREDITS_LABEL))


@campaigns_router.get("", response_model=CampaignPage, summary="List campaigns")
async def list_campaigns(
    current_user: CurrentUser,
    service: Annotated[CampaignService, Depends(get_campaign_service)],
    search: Optional[str] = Query(None, max_length=200),
    min_open_rate: Optional[float] = Query(None, ge=0, le=100),
    min_click_rate: Optional[float] = Query(None, ge=0, le=100),
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
) -> CampaignPage:
    return await service.list_campaigns(
        current_user,
        search=search,
        min_open_rate=min_open_rate,
        min_click_rate=min_click_rate,
        page=page,
        limit=limit,
    )


@campaigns_router.post(
    "",
    response_model=ActionResult[CampaignResponse],
    status_code=status.HTTP_201_CREATED,
    summary="Create a campaign",
    responses={400: {"model": ErrorResponse, "description": "Invalid numbers"}},
)
async def create_campaign(
    data: CampaignCreate,
    current_user: CurrentUser,
    service: Annotated[CampaignService, Depends(get_campaign_service)],
) -> ActionResult[CampaignResponse]:
    campaign = await service.create_campaign(current_user, data)
    return ActionResult(data=CampaignResponse.model_validate(campaign))


@workflows_router.get("", response_model=List[WorkflowResponse], summary="List workflows")
async def list_workflows(
    current_user: CurrentUser,
    service: Annotated[WorkflowService, Depends(get_workflow_service)],
) -> List[WorkflowResponse]:
    workflows = await service.list_workflows(current_user)
    return [WorkflowResponse.model_validate(workflow) for workflow in workflows]


@workflows_router.post(
    "",
    response_model=ActionResult[WorkflowResponse],
    status_code=status.HTTP_201_CREATED,
    summary="Create a workflow",
)
async def create_workflow(
    data: WorkflowCreate,
    current_user: CurrentUser,
    service: Annotated[WorkflowService, Depends(get_workflow_service)],
) -> ActionResult[WorkflowResponse]:
    workflow = await service.create_workflow(current_user, data)
    return ActionResult(data=WorkflowResponse.model_validate(workflow))


@workflows_router.put(
    "/{workflow_id}/publish",
    response_model=ActionResult[WorkflowResponse],
    summary="Publish or unpublish a workflow",
)
async def publish_workflow(
    workflow_id: UUID,
    data: WorkflowPublish,
    current_user: CurrentUser,
    service: Annotated[WorkflowService, Depends(get_workflow_service)],
) -> ActionResult[WorkflowResponse]:
    workflow, message = await service.set_publish(current_user, workflow_id, data.publish)
    return ActionResult(data=WorkflowResponse.model_validate(workflow), message=message)


@workflows_router.put(
    "/{workflow_id}/template",
    response_model=ActionResult[WorkflowResponse],
    summary="Save a provider message template",
)
async def save_workflow_template(
    workflow_id: UUID,
    data: WorkflowTemplateUpdate,
    current_user: CurrentUser,
    service: Annotated[WorkflowService, Depends(get_workflow_service)],
) -> ActionResult[WorkflowResponse]:
    workflow = await service.save_template(current_user, workflow_id, data.provider, data.template)
    return ActionResult(data=WorkflowResponse.model_validate(workflow), message="Template saved")
