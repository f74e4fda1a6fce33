# backend/app/routes/v1/trainers.py
"""
Trainer profile routes - API v1

Endpoints:
    GET / - Search active trainers (filters, sorting, pagination)
    GET /search/nearby - Trainers inside a radius around a point
    GET /user/{user_id} - Caller's own profile
    PUT /user/{user_id} - Create or update the caller's own profile
    GET /{trainer_id} - Public profile
    POST / - Create the caller's profile (trainers only)
    PUT /{trainer_id} - Update a profile (owner only)
    POST /{trainer_id}/reviews - Review a trainer
"""

import logging
from typing import List, NoReturn, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status

from ...api.dependencies import get_current_active_user, get_trainer_service
from ...core.config import settings
from ...core.constants import DEFAULT_NEARBY_RADIUS_KM
from ...core.enums import SortOrder, TrainerSortField
from ...core.exceptions import DomainException
from ...models.user import User
from ...schemas.base_responses import PaginatedResponse
from ...schemas.trainer import (
    ReviewCreate,
    TrainerProfileCreate,
    TrainerProfileResponse,
    TrainerProfileUpdate,
)
from ...services.trainer_service import TrainerService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["trainers-v1"])


def handle_domain_exception(exc: DomainException) -> NoReturn:
    """Convert domain exceptions to HTTP exceptions."""
    if hasattr(exc, "to_http_exception"):
        raise exc.to_http_exception()
    raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(exc))


@router.get("", response_model=PaginatedResponse[TrainerProfileResponse])
def search_trainers(
    specialization: Optional[str] = Query(None, description="Substring, case-insensitive"),
    location: Optional[str] = Query(None, description="City substring, case-insensitive"),
    rating: Optional[float] = Query(None, ge=0, le=5, description="Minimum average rating"),
    experience: Optional[int] = Query(None, ge=0, description="Minimum years of experience"),
    price_min: Optional[float] = Query(None, ge=0),
    price_max: Optional[float] = Query(None, ge=0),
    sort_by: TrainerSortField = Query(TrainerSortField.RATING),
    sort_order: SortOrder = Query(SortOrder.DESC),
    page: int = Query(1, ge=1),
    limit: int = Query(settings.default_page_size, ge=1, le=settings.max_page_size),
    trainer_service: TrainerService = Depends(get_trainer_service),
) -> PaginatedResponse[TrainerProfileResponse]:
    """
    Search active trainers.

    Price bounds and price sorting use each trainer's cheapest service.
    """
    try:
        profiles, total = trainer_service.search_trainers(
            specialization=specialization,
            city=location,
            min_rating=rating,
            min_experience=experience,
            price_min=price_min,
            price_max=price_max,
            sort_by=sort_by,
            sort_order=sort_order,
            page=page,
            per_page=limit,
        )
        return PaginatedResponse[TrainerProfileResponse].build(
            items=[TrainerProfileResponse.from_profile(p, include_reviews=False) for p in profiles],
            total=total,
            page=page,
            per_page=limit,
        )
    except DomainException as e:
        handle_domain_exception(e)


@router.get("/search/nearby", response_model=List[TrainerProfileResponse])
def search_nearby(
    latitude: float = Query(..., ge=-90, le=90),
    longitude: float = Query(..., ge=-180, le=180),
    radius: float = Query(DEFAULT_NEARBY_RADIUS_KM, gt=0, description="Radius in km"),
    trainer_service: TrainerService = Depends(get_trainer_service),
) -> List[TrainerProfileResponse]:
    try:
        profiles = trainer_service.search_nearby(latitude, longitude, radius)
        return [TrainerProfileResponse.from_profile(p, include_reviews=False) for p in profiles]
    except DomainException as e:
        handle_domain_exception(e)


@router.get("/user/{user_id}", response_model=TrainerProfileResponse)
def get_own_profile(
    user_id: str,
    current_user: User = Depends(get_current_active_user),
    trainer_service: TrainerService = Depends(get_trainer_service),
) -> TrainerProfileResponse:
    try:
        return TrainerProfileResponse.from_profile(
            trainer_service.get_trainer_by_user(current_user, user_id)
        )
    except DomainException as e:
        handle_domain_exception(e)


@router.put("/user/{user_id}", response_model=TrainerProfileResponse)
def upsert_own_profile(
    user_id: str,
    payload: TrainerProfileCreate,
    response: Response,
    current_user: User = Depends(get_current_active_user),
    trainer_service: TrainerService = Depends(get_trainer_service),
) -> TrainerProfileResponse:
    """Update the caller's profile, creating it (201) when it does not exist yet."""
    try:
        profile, created = trainer_service.upsert_profile_for_user(
            current_user, user_id, payload.model_dump()
        )
        if created:
            response.status_code = status.HTTP_201_CREATED
        return TrainerProfileResponse.from_profile(profile)
    except DomainException as e:
        handle_domain_exception(e)


@router.get("/{trainer_id}", response_model=TrainerProfileResponse)
def get_trainer(
    trainer_id: str,
    trainer_service: TrainerService = Depends(get_trainer_service),
) -> TrainerProfileResponse:
    try:
        return TrainerProfileResponse.from_profile(trainer_service.get_trainer(trainer_id))
    except DomainException as e:
        handle_domain_exception(e)


@router.post("", response_model=TrainerProfileResponse, status_code=status.HTTP_201_CREATED)
def create_profile(
    payload: TrainerProfileCreate,
    current_user: User = Depends(get_current_active_user),
    trainer_service: TrainerService = Depends(get_trainer_service),
) -> TrainerProfileResponse:
    try:
        profile = trainer_service.create_profile(current_user, payload.model_dump())
        return TrainerProfileResponse.from_profile(profile)
    except DomainException as e:
        handle_domain_exception(e)


@router.put("/{trainer_id}", response_model=TrainerProfileResponse)
def update_profile(
    trainer_id: str,
    payload: TrainerProfileUpdate,
    current_user: User = Depends(get_current_active_user),
    trainer_service: TrainerService = Depends(get_trainer_service),
) -> TrainerProfileResponse:
    try:
        profile = trainer_service.update_profile(
            current_user, trainer_id, payload.model_dump(exclude_unset=True)
        )
        return TrainerProfileResponse.from_profile(profile)
    except DomainException as e:
        handle_domain_exception(e)


@router.post(
    "/{trainer_id}/reviews",
    response_model=TrainerProfileResponse,
    status_code=status.HTTP_201_CREATED,
)
def add_review(
    trainer_id: str,
    payload: ReviewCreate,
    current_user: User = Depends(get_current_active_user),
    trainer_service: TrainerService = Depends(get_trainer_service),
) -> TrainerProfileResponse:
    try:
        profile = trainer_service.add_review(
            current_user, trainer_id, payload.rating, payload.comment
        )
        return TrainerProfileResponse.from_profile(profile)
    except DomainException as e:
        handle_domain_exception(e)
