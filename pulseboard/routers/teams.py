"""Team API endpoints."""

from typing import Annotated, List
from uuid import UUID

from fastapi import APIRouter, Depends, status

from ..models.user import User
from ..schemas.common import ActionResult, ErrorResponse
from ..schemas.team import TeamCreate, TeamResponse, TeamUpdate
from ..services.auth_service import get_current_user
from ..services.team_service import TeamService, get_team_service

router = APIRouter(prefix="/api/teams", tags=["Teams"])

CurrentUser = Annotated[User, Depends(get_current_user)]
Service = Annotated[TeamService, Depends(get_team_service)]

_FAILURES = {
    403: {"model": ErrorResponse, "description": "Not authorized"},
    404: {"model": ErrorResponse, "description": "Team or user not found"},
}


@router.get("", response_model=List[TeamResponse], summary="List teams", responses=_FAILURES)
async def list_teams(current_user: CurrentUser, service: Service) -> List[TeamResponse]:
    teams = await service.list_teams(current_user)
    return [TeamResponse.model_validate(team) for team in teams]


@router.post(
    "",
    response_model=ActionResult[TeamResponse],
    status_code=status.HTTP_201_CREATED,
    summary="Create a team",
    responses=_FAILURES,
)
async def create_team(data: TeamCreate, current_user: CurrentUser, service: Service) -> ActionResult[TeamResponse]:
    team = await service.create_team(current_user, data)
    return ActionResult(data=TeamResponse.model_validate(team))


@router.get("/{team_id}", response_model=TeamResponse, summary="Get a team", responses=_FAILURES)
async def get_team(team_id: UUID, current_user: CurrentUser, service: Service) -> TeamResponse:
    return TeamResponse.model_validate(await service.get_team(current_user, team_id))


@router.put(
    "/{team_id}",
    response_model=ActionResult[TeamResponse],
    summary="Update a team",
    description="Managers or the team's leader. `member_ids` replaces the member set.",
    responses=_FAILURES,
)
async def update_team(
    team_id: UUID,
    changes: TeamUpdate,
    current_user: CurrentUser,
    service: Service,
) -> ActionResult[TeamResponse]:
    team = await service.update_team(current_user, team_id, changes)
    return ActionResult(data=TeamResponse.model_validate(team))
