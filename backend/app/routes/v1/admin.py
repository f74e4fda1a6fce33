# backend/app/routes/v1/admin.py
"""
Admin routes - API v1

Every endpoint requires the admin role.

Endpoints:
    GET /users - Filtered, paginated user listing
    PUT /users/{user_id}/status - Activate or deactivate an account
    PUT /users/{user_id}/role - Change an account's role
    GET /trainers - Trainer profiles, optionally by verification flag
    PUT /trainers/{trainer_id}/verify - Set a trainer's verification flag
    GET /sessions - All training sessions, optionally by status
    GET /bookings - All bookings, optionally by status and payment status
"""

import logging
from typing import NoReturn, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status

from ...api.dependencies import get_admin_service, require_admin
from ...core.config import settings
from ...core.enums import RoleName
from ...core.exceptions import DomainException
from ...models.booking import BookingStatus, PaymentStatus
from ...models.training_session import SessionStatus
from ...models.user import User
from ...schemas.admin import TrainerVerifyUpdate
from ...schemas.base_responses import PaginatedResponse
from ...schemas.booking import BookingResponse
from ...schemas.trainer import TrainerProfileResponse
from ...schemas.training_session import SessionResponse
from ...schemas.user import RoleUpdate, UserResponse, UserStatusUpdate
from ...services.admin_service import AdminService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["admin-v1"])


def handle_domain_exception(exc: DomainException) -> NoReturn:
    """Convert domain exceptions to HTTP exceptions."""
    if hasattr(exc, "to_http_exception"):
        raise exc.to_http_exception()
    raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(exc))


@router.get("/users", response_model=PaginatedResponse[UserResponse])
def list_users(
    role: Optional[RoleName] = Query(None),
    is_active: Optional[bool] = Query(None),
    search: Optional[str] = Query(None, description="Name or email substring"),
    page: int = Query(1, ge=1),
    limit: int = Query(settings.default_page_size, ge=1, le=settings.max_page_size),
    _: User = Depends(require_admin),
    admin_service: AdminService = Depends(get_admin_service),
) -> PaginatedResponse[UserResponse]:
    users, total = admin_service.list_users(
        role=role.value if role else None,
        is_active=is_active,
        search=search,
        page=page,
        per_page=limit,
    )
    return PaginatedResponse[UserResponse].build(
        items=[UserResponse.model_validate(u) for u in users],
        total=total,
        page=page,
        per_page=limit,
    )


@router.put("/users/{user_id}/status", response_model=UserResponse)
def update_user_status(
    user_id: str,
    payload: UserStatusUpdate,
    current_admin: User = Depends(require_admin),
    admin_service: AdminService = Depends(get_admin_service),
) -> UserResponse:
    try:
        user = admin_service.set_user_status(current_admin, user_id, payload.is_active)
        return UserResponse.model_validate(user)
    except DomainException as e:
        handle_domain_exception(e)


@router.put("/users/{user_id}/role", response_model=UserResponse)
def update_user_role(
    user_id: str,
    payload: RoleUpdate,
    current_admin: User = Depends(require_admin),
    admin_service: AdminService = Depends(get_admin_service),
) -> UserResponse:
    try:
        user = admin_service.set_user_role(current_admin, user_id, payload.role)
        return UserResponse.model_validate(user)
    except DomainException as e:
        handle_domain_exception(e)


@router.get("/trainers", response_model=PaginatedResponse[TrainerProfileResponse])
def list_trainers(
    is_verified: Optional[bool] = Query(None),
    page: int = Query(1, ge=1),
    limit: int = Query(settings.default_page_size, ge=1, le=settings.max_page_size),
    _: User = Depends(require_admin),
    admin_service: AdminService = Depends(get_admin_service),
) -> PaginatedResponse[TrainerProfileResponse]:
    profiles, total = admin_service.list_trainers(is_verified=is_verified, page=page, per_page=limit)
    return PaginatedResponse[TrainerProfileResponse].build(
        items=[TrainerProfileResponse.from_profile(p, include_reviews=False) for p in profiles],
        total=total,
        page=page,
        per_page=limit,
    )


@router.put("/trainers/{trainer_id}/verify", response_model=TrainerProfileResponse)
def verify_trainer(
    trainer_id: str,
    payload: TrainerVerifyUpdate,
    current_admin: User = Depends(require_admin),
    admin_service: AdminService = Depends(get_admin_service),
) -> TrainerProfileResponse:
    try:
        profile = admin_service.verify_trainer(
            current_admin, trainer_id, payload.is_verified, payload.notes
        )
        return TrainerProfileResponse.from_profile(profile)
    except DomainException as e:
        handle_domain_exception(e)


@router.get("/sessions", response_model=PaginatedResponse[SessionResponse])
def list_sessions(
    status_filter: Optional[SessionStatus] = Query(None, alias="status"),
    page: int = Query(1, ge=1),
    limit: int = Query(settings.default_page_size, ge=1, le=settings.max_page_size),
    _: User = Depends(require_admin),
    admin_service: AdminService = Depends(get_admin_service),
) -> PaginatedResponse[SessionResponse]:
    sessions, total = admin_service.list_sessions(
        status=status_filter.value if status_filter else None, page=page, per_page=limit
    )
    return PaginatedResponse[SessionResponse].build(
        items=[SessionResponse.from_session(s) for s in sessions],
        total=total,
        page=page,
        per_page=limit,
    )


@router.get("/bookings", response_model=PaginatedResponse[BookingResponse])
def list_bookings(
    status_filter: Optional[BookingStatus] = Query(None, alias="status"),
    payment_status: Optional[PaymentStatus] = Query(None),
    page: int = Query(1, ge=1),
    limit: int = Query(settings.default_page_size, ge=1, le=settings.max_page_size),
    _: User = Depends(require_admin),
    admin_service: AdminService = Depends(get_admin_service),
) -> PaginatedResponse[BookingResponse]:
    bookings, total = admin_service.list_bookings(
        status=status_filter.value if status_filter else None,
        payment_status=payment_status.value if payment_status else None,
        page=page,
        per_page=limit,
    )
    return PaginatedResponse[BookingResponse].build(
        items=[BookingResponse.from_booking(b) for b in bookings],
        total=total,
        page=page,
        per_page=limit,
    )
