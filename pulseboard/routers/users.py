"""User API endpoints: the caller's profile and role management."""

from typing import Annotated, List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query

from ..models.user import User
from ..schemas.common import ActionResult, ErrorResponse
from ..schemas.user import Role, RoleResponse, UserProfileUpdate, UserResponse, UserRoleUpdate
from ..services.auth_service import get_current_user
from ..services.user_service import UserService, get_user_service

router = APIRouter(prefix="/api/users", tags=["Users"])

CurrentUser = Annotated[User, Depends(get_current_user)]
Service = Annotated[UserService, Depends(get_user_service)]


@router.get(
    "/me",
    response_model=UserResponse,
    summary="Get current user",
    responses={401: {"model": ErrorResponse, "description": "Not authenticated"}},
)
async def get_me(current_user: CurrentUser) -> UserResponse:
    return UserResponse.model_validate(current_user)


@router.get("/me/role", response_model=RoleResponse, summary="Get current user's role")
async def get_role(current_user: CurrentUser) -> RoleResponse:
    return RoleResponse(role=current_user.role)


@router.put(
    "/me",
    response_model=ActionResult[UserResponse],
    summary="Update current user's profile",
)
async def update_profile(
    changes: UserProfileUpdate,
    current_user: CurrentUser,
    service: Service,
) -> ActionResult[UserResponse]:
    user = await service.update_profile(current_user, changes)
    return ActionResult(data=UserResponse.model_validate(user))


@router.get(
    "",
    response_model=List[UserResponse],
    summary="List users",
    responses={403: {"model": ErrorResponse, "description": "Not authorized"}},
)
async def list_users(
    current_user: CurrentUser,
    service: Service,
    role: Optional[Role] = Query(None, description="Filter by role"),
) -> List[UserResponse]:
    users = await service.list_users(current_user, role=role)
    return [UserResponse.model_validate(user) for user in users]


@router.put(
    "/{user_id}/role",
    response_model=ActionResult[UserResponse],
    summary="Change a user's role",
    responses={
        400: {"model": ErrorResponse, "description": "Role can not be assigned"},
        403: {"model": ErrorResponse, "description": "Not authorized"},
        404: {"model": ErrorResponse, "description": "User not found"},
    },
)
async def update_user_role(
    user_id: UUID,
    data: UserRoleUpdate,
    current_user: CurrentUser,
    service: Service,
) -> ActionResult[UserResponse]:
    user = await service.update_user_role(current_user, user_id, data.role)
    return ActionResult(data=UserResponse.model_validate(user), message="Role updated")
