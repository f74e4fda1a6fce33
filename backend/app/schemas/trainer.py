# backend/app/schemas/trainer.py
"""
Trainer profile request/response schemas.

Shape validation lives here; business rules (allowed specializations,
at least one available day, hours on available days) are enforced by
TrainerService so they surface as 400 errors with a domain code.
"""

from datetime import date, datetime
from typing import Dict, List, Optional

from pydantic import BaseModel, Field, field_validator

from ..core.constants import (
    DAYS_OF_WEEK,
    MAX_RATING,
    MAX_REVIEW_COMMENT_LENGTH,
    MAX_SESSION_DURATION,
    MIN_RATING,
    MIN_SESSION_DURATION,
)
from ..models.trainer import TrainerProfile
from .base import Money, StandardizedModel, StrictRequestModel

TIME_PATTERN = r"^([01]\d|2[0-3]):[0-5]\d$"


class DayAvailability(BaseModel):
    start: Optional[str] = Field(None, pattern=TIME_PATTERN)
    end: Optional[str] = Field(None, pattern=TIME_PATTERN)
    available: bool = False


def _check_days(value: Optional[Dict[str, DayAvailability]]) -> Optional[Dict[str, DayAvailability]]:
    if value is None:
        return value
    unknown = [day for day in value if day not in DAYS_OF_WEEK]
    if unknown:
        raise ValueError(f"Unknown weekday(s): {', '.join(unknown)}")
    return value


class ServiceIn(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    description: Optional[str] = None
    duration: int = Field(60, ge=MIN_SESSION_DURATION, le=MAX_SESSION_DURATION)
    price: Money = Field(..., description="Hourly rate")

    @field_validator("price")
    @classmethod
    def validate_price(cls, v):
        if v < 0:
            raise ValueError("Price must be non-negative")
        return v


class CertificationIn(BaseModel):
    name: str = Field(..., min_length=1, max_length=150)
    issuing_organization: Optional[str] = None
    issue_date: Optional[date] = None
    expiry_date: Optional[date] = None


class AchievementIn(BaseModel):
    title: str = Field(..., min_length=1, max_length=150)
    description: Optional[str] = None
    achieved_on: Optional[date] = None


class ExperienceIn(BaseModel):
    years: int = Field(0, ge=0)
    description: Optional[str] = None


class LocationIn(BaseModel):
    address: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    zip_code: Optional[str] = None
    country: Optional[str] = None
    latitude: Optional[float] = Field(None, ge=-90, le=90)
    longitude: Optional[float] = Field(None, ge=-180, le=180)


class TrainerProfileCreate(StrictRequestModel):
    specialization: str
    experience: ExperienceIn = ExperienceIn()
    services: List[ServiceIn] = []
    certifications: List[CertificationIn] = []
    achievements: List[AchievementIn] = []
    availability: Dict[str, DayAvailability]
    location: Optional[LocationIn] = None
    social_media: Dict[str, str] = {}
    tags: List[str] = []

    @field_validator("availability")
    @classmethod
    def validate_days(cls, v):
        return _check_days(v)


class TrainerProfileUpdate(StrictRequestModel):
    """Partial update; omitted fields are left unchanged."""

    specialization: Optional[str] = None
    experience: Optional[ExperienceIn] = None
    services: Optional[List[ServiceIn]] = None
    achievements: Optional[List[AchievementIn]] = None
    availability: Optional[Dict[str, DayAvailability]] = None
    location: Optional[LocationIn] = None
    social_media: Optional[Dict[str, str]] = None
    tags: Optional[List[str]] = None

    @field_validator("availability")
    @classmethod
    def validate_days(cls, v):
        return _check_days(v)


class ReviewCreate(StrictRequestModel):
    rating: int = Field(..., ge=MIN_RATING, le=MAX_RATING)
    comment: str = Field(..., min_length=1, max_length=MAX_REVIEW_COMMENT_LENGTH)


# Responses


class TrainerServiceResponse(StandardizedModel):
    id: str
    name: str
    description: Optional[str] = None
    duration: int
    price: Money


class CertificationResponse(StandardizedModel):
    name: str
    issuing_organization: Optional[str] = None
    issue_date: Optional[date] = None
    expiry_date: Optional[date] = None


class AchievementResponse(StandardizedModel):
    title: str
    description: Optional[str] = None
    achieved_on: Optional[date] = None


class ReviewResponse(StandardizedModel):
    id: str
    user_id: str
    rating: int
    comment: str
    created_at: Optional[datetime] = None


class LocationResponse(StandardizedModel):
    address: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    zip_code: Optional[str] = None
    country: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None


class TrainerProfileResponse(StandardizedModel):
    id: str
    user_id: str
    name: Optional[str] = None
    specialization: str
    experience_years: int
    experience_description: Optional[str] = None
    availability: Dict[str, DayAvailability]
    location: LocationResponse
    rating_average: float
    rating_count: int
    total_clients: int = 0
    active_clients: int = 0
    services: List[TrainerServiceResponse] = []
    certifications: List[CertificationResponse] = []
    achievements: List[AchievementResponse] = []
    reviews: List[ReviewResponse] = []
    min_price: Optional[Money] = None
    social_media: Dict[str, str] = {}
    tags: List[str] = []
    is_verified: bool
    is_active: bool
    featured: bool
    created_at: Optional[datetime] = None

    @classmethod
    def from_profile(cls, profile: TrainerProfile, include_reviews: bool = True) -> "TrainerProfileResponse":
        return cls(
            id=profile.id,
            user_id=profile.user_id,
            name=profile.user.name if profile.user else None,
            specialization=profile.specialization,
            experience_years=profile.experience_years,
            experience_description=profile.experience_description,
            availability=profile.availability or {},
            location=LocationResponse.model_validate(profile),
            rating_average=profile.rating_average or 0.0,
            rating_count=profile.rating_count or 0,
            total_clients=profile.total_clients or 0,
            active_clients=profile.active_clients or 0,
            services=[TrainerServiceResponse.model_validate(s) for s in profile.services],
            certifications=[CertificationResponse.model_validate(c) for c in profile.certifications],
            achievements=[AchievementResponse.model_validate(a) for a in profile.achievements],
            reviews=[ReviewResponse.model_validate(r) for r in profile.reviews] if include_reviews else [],
            min_price=profile.min_service_price,
            social_media=profile.social_media or {},
            tags=profile.tags or [],
            is_verified=bool(profile.is_verified),
            is_active=bool(profile.is_active),
            featured=bool(profile.featured),
            created_at=profile.created_at,
        )
