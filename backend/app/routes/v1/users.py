# backend/app/routes/v1/users.py
"""
User account routes - API v1

Endpoints:
    GET / - List users (admin)
    GET /{user_id} - Get a user (self or admin)
    PUT /{user_id} - Update a user (self or admin)
    DELETE /{user_id} - Deactivate a user (self or admin)
    PUT /{user_id}/role - Change a user's role (admin)
"""

import logging
from typing import List, NoReturn

from fastapi import APIRouter, Depends, HTTPException, status

from ...api.dependencies import get_current_active_user, get_user_service
from ...core.exceptions import DomainException
from ...models.user import User
from ...schemas.base_responses import SuccessResponse
from ...schemas.user import RoleUpdate, UserResponse, UserUpdate
from ...services.user_service import UserService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["users-v1"])


def handle_domain_exception(exc: DomainException) -> NoReturn:
    """Convert domain exceptions to HTTP exceptions."""
    if hasattr(exc, "to_http_exception"):
        raise exc.to_http_exception()
    raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(exc))


@router.get("", response_model=List[UserResponse])
def list_users(
    current_user: User = Depends(get_current_active_user),
    user_service: UserService = Depends(get_user_service),
) -> List[UserResponse]:
    """All accounts, newest first."""
    try:
        return [UserResponse.model_validate(u) for u in user_service.list_users(current_user)]
    except DomainException as e:
        handle_domain_exception(e)


@router.get("/{user_id}", response_model=UserResponse)
def get_user(
    user_id: str,
    current_user: User = Depends(get_current_active_user),
    user_service: UserService = Depends(get_user_service),
) -> UserResponse:
    try:
        return UserResponse.model_validate(user_service.get_user(current_user, user_id))
    except DomainException as e:
        handle_domain_exception(e)


@router.put("/{user_id}", response_model=UserResponse)
def update_user(
    user_id: str,
    payload: UserUpdate,
    current_user: User = Depends(get_current_active_user),
    user_service: UserService = Depends(get_user_service),
) -> UserResponse:
    try:
        user = user_service.update_user(
            current_user, user_id, payload.model_dump(exclude_unset=True)
        )
        return UserResponse.model_validate(user)
    except DomainException as e:
        handle_domain_exception(e)


@router.delete("/{user_id}", response_model=SuccessResponse)
def deactivate_user(
    user_id: str,
    current_user: User = Depends(get_current_active_user),
    user_service: UserService = Depends(get_user_service),
) -> SuccessResponse:
    try:
        user = user_service.deactivate_user(current_user, user_id)
        return SuccessResponse(message="User deactivated successfully", data={"id": user.id})
    except DomainException as e:
        handle_domain_exception(e)


@router.put("/{user_id}/role", response_model=UserResponse)
def change_role(
    user_id: str,
    payload: RoleUpdate,
    current_user: User = Depends(get_current_active_user),
    user_service: UserService = Depends(get_user_service),
) -> UserResponse:
    try:
        return UserResponse.model_validate(
            user_service.change_role(current_user, user_id, payload.role)
        )
    except DomainException as e:
        handle_domain_exception(e)
