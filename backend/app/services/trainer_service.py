# backend/app/services/trainer_service.py
"""
Trainer Service for the TrainerLocator platform.

Handles trainer profile management, search, reviews and the coordinate
"nearby" lookup. Profile writes replace child collections (services,
certifications, achievements) wholesale, keeping the order the trainer
sent so that the first service stays the pricing fallback.
"""

import logging
import math
from typing import Any, Dict, List, Optional, Tuple

from sqlalchemy.orm import Session

from ..core.constants import (
    DAYS_OF_WEEK,
    DEFAULT_NEARBY_RADIUS_KM,
    KM_PER_DEGREE_LATITUDE,
    MAX_NEARBY_RESULTS,
    SPECIALIZATIONS,
)
from ..core.enums import SortOrder, TrainerSortField
from ..core.exceptions import ForbiddenException, NotFoundException, ValidationException
from ..models.trainer import (
    TrainerAchievement,
    TrainerCertification,
    TrainerProfile,
    TrainerReview,
    TrainerService as TrainerServiceModel,
)
from ..models.user import User
from ..repositories.factory import RepositoryFactory
from ..repositories.trainer_repository import TrainerRepository
from .base import BaseService

logger = logging.getLogger(__name__)

_LOCATION_FIELDS = ("address", "city", "state", "zip_code", "country", "latitude", "longitude")


def validate_specialization(specialization: Optional[str]) -> None:
    if not specialization:
        raise ValidationException("Specialization is required", code="SPECIALIZATION_REQUIRED")
    if specialization not in SPECIALIZATIONS:
        raise ValidationException(
            "Invalid specialization",
            code="INVALID_SPECIALIZATION",
            details={"allowed": list(SPECIALIZATIONS)},
        )


def validate_availability(availability: Optional[Dict[str, Dict[str, Any]]]) -> None:
    """
    At least one weekday must be available and every available day
    needs both a start and an end time.
    """
    availability = availability or {}
    if not any(entry.get("available") for entry in availability.values()):
        raise ValidationException(
            "At least one day must be available", code="NO_AVAILABLE_DAYS"
        )
    for day in DAYS_OF_WEEK:
        entry = availability.get(day)
        if not entry or not entry.get("available"):
            continue
        if not entry.get("start"):
            raise ValidationException(f"Start time is required for {day}", code="MISSING_START_TIME")
        if not entry.get("end"):
            raise ValidationException(f"End time is required for {day}", code="MISSING_END_TIME")


def bounding_box(
    latitude: float, longitude: float, radius_km: float
) -> Tuple[float, float, float, float]:
    """
    Rough square around a point: 1 degree of latitude is ~111 km and a
    degree of longitude shrinks with cos(latitude).

    Returns:
        (min_latitude, max_latitude, min_longitude, max_longitude)
    """
    lat_delta = radius_km / KM_PER_DEGREE_LATITUDE
    cos_lat = math.cos(math.radians(latitude))
    # Clamp near the poles so the longitude span stays finite
    lon_delta = radius_km / (KM_PER_DEGREE_LATITUDE * max(abs(cos_lat), 1e-6))
    return latitude - lat_delta, latitude + lat_delta, longitude - lon_delta, longitude + lon_delta


class TrainerService(BaseService):
    """Business logic for trainer profiles."""

    def __init__(self, db: Session, trainer_repository: Optional[TrainerRepository] = None):
        super().__init__(db)
        self.logger = logging.getLogger(__name__)
        self.trainer_repository = trainer_repository or RepositoryFactory.create_trainer_repository(db)

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    @BaseService.measure_operation("search_trainers")
    def search_trainers(
        self,
        *,
        specialization: Optional[str] = None,
        city: Optional[str] = None,
        min_rating: Optional[float] = None,
        min_experience: Optional[int] = None,
        price_min: Optional[float] = None,
        price_max: Optional[float] = None,
        sort_by: TrainerSortField = TrainerSortField.RATING,
        sort_order: SortOrder = SortOrder.DESC,
        page: int = 1,
        per_page: int = 10,
    ) -> Tuple[List[TrainerProfile], int]:
        return self.trainer_repository.search(
            specialization=specialization,
            city=city,
            min_rating=min_rating,
            min_experience=min_experience,
            price_min=price_min,
            price_max=price_max,
            sort_by=sort_by,
            sort_order=sort_order,
            page=page,
            per_page=per_page,
        )

    @BaseService.measure_operation("get_trainer")
    def get_trainer(self, trainer_id: str) -> TrainerProfile:
        """Public profile; inactive profiles are reported as missing."""
        profile = self.trainer_repository.get_by_id(trainer_id)
        if profile is None:
            raise NotFoundException("Trainer not found", code="TRAINER_NOT_FOUND")
        if not profile.is_active:
            raise NotFoundException("Trainer profile is not available", code="TRAINER_INACTIVE")
        return profile

    @BaseService.measure_operation("get_trainer_by_user")
    def get_trainer_by_user(self, actor: User, user_id: str) -> TrainerProfile:
        if actor.id != user_id:
            raise ForbiddenException("Not authorized to access this profile", code="ACCESS_DENIED")
        profile = self.trainer_repository.get_by_user_id(user_id)
        if profile is None:
            raise NotFoundException("Trainer profile not found", code="TRAINER_NOT_FOUND")
        return profile

    @BaseService.measure_operation("search_nearby")
    def search_nearby(
        self, latitude: float, longitude: float, radius_km: float = DEFAULT_NEARBY_RADIUS_KM
    ) -> List[TrainerProfile]:
        min_lat, max_lat, min_lon, max_lon = bounding_box(latitude, longitude, radius_km)
        return self.trainer_repository.find_in_bounding_box(
            min_latitude=min_lat,
            max_latitude=max_lat,
            min_longitude=min_lon,
            max_longitude=max_lon,
            limit=MAX_NEARBY_RESULTS,
        )

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    def _ensure_trainer(self, actor: User, action: str) -> None:
        if not actor.is_trainer:
            self.logger.warning(f"User {actor.id} ({actor.role}) tried to {action} a trainer profile")
            raise ForbiddenException(
                f"Only trainers can {action} trainer profiles", code="TRAINER_ROLE_REQUIRED"
            )

    def _apply(self, profile: TrainerProfile, data: Dict[str, Any]) -> None:
        """Copy the fields present in ``data`` onto ``profile``."""
        if "specialization" in data and data["specialization"] is not None:
            profile.specialization = data["specialization"]

        experience = data.get("experience")
        if experience is not None:
            profile.experience_years = experience.get("years", 0)
            profile.experience_description = experience.get("description")

        if data.get("availability") is not None:
            profile.availability = data["availability"]

        location = data.get("location")
        if location is not None:
            for field in _LOCATION_FIELDS:
                if field in location and location[field] is not None:
                    setattr(profile, field, location[field])

        if data.get("services") is not None:
            profile.services = [
                TrainerServiceModel(
                    name=service["name"],
                    description=service.get("description"),
                    duration=service.get("duration", 60),
                    price=service["price"],
                    position=position,
                )
                for position, service in enumerate(data["services"])
            ]

        if data.get("certifications") is not None:
            profile.certifications = [TrainerCertification(**cert) for cert in data["certifications"]]

        if data.get("achievements") is not None:
            profile.achievements = [TrainerAchievement(**item) for item in data["achievements"]]

        if data.get("social_media") is not None:
            profile.social_media = dict(data["social_media"])

        if data.get("tags") is not None:
            profile.tags = list(data["tags"])

    def _validate(self, data: Dict[str, Any], *, partial: bool) -> None:
        if not partial or data.get("specialization") is not None:
            validate_specialization(data.get("specialization"))
        if not partial or data.get("availability") is not None:
            validate_availability(data.get("availability"))

    @BaseService.measure_operation("create_profile")
    def create_profile(self, actor: User, data: Dict[str, Any]) -> TrainerProfile:
        """
        Create the caller's trainer profile.

        Raises:
            ForbiddenException: If the caller is not a trainer
            ValidationException: If a profile exists or the data breaks a rule
        """
        self._ensure_trainer(actor, "create")
        if self.trainer_repository.get_by_user_id(actor.id):
            raise ValidationException("Trainer profile already exists", code="PROFILE_EXISTS")
        self._validate(data, partial=False)

        with self.transaction():
            profile = TrainerProfile(user_id=actor.id, availability={})
            self._apply(profile, data)
            self.trainer_repository.add(profile)

        self.logger.info(f"Created trainer profile {profile.id} for user {actor.id}")
        return self.trainer_repository.get_by_id(profile.id) or profile

    @BaseService.measure_operation("update_profile")
    def update_profile(self, actor: User, trainer_id: str, data: Dict[str, Any]) -> TrainerProfile:
        profile = self.trainer_repository.get_by_id(trainer_id)
        if profile is None:
            raise NotFoundException("Trainer profile not found", code="TRAINER_NOT_FOUND")
        if profile.user_id != actor.id:
            self.logger.warning(f"User {actor.id} denied update of trainer profile {trainer_id}")
            raise ForbiddenException("Not authorized to update this profile", code="ACCESS_DENIED")
        self._validate(data, partial=True)

        with self.transaction():
            self._apply(profile, data)
            self.trainer_repository.flush()

        self.logger.info(f"Updated trainer profile {profile.id}")
        return profile

    @BaseService.measure_operation("upsert_profile_for_user")
    def upsert_profile_for_user(
        self, actor: User, user_id: str, data: Dict[str, Any]
    ) -> Tuple[TrainerProfile, bool]:
        """
        Update the trainer's own profile, creating it when missing.

        Returns:
            (profile, created)
        """
        if actor.id != user_id:
            raise ForbiddenException("Not authorized to update this profile", code="ACCESS_DENIED")
        self._ensure_trainer(actor, "update")
        self._validate(data, partial=False)

        profile = self.trainer_repository.get_by_user_id(user_id)
        created = profile is None
        with self.transaction():
            if profile is None:
                profile = TrainerProfile(user_id=user_id, availability={})
                self._apply(profile, data)
                self.trainer_repository.add(profile)
            else:
                self._apply(profile, data)
                self.trainer_repository.flush()

        self.logger.info(
            f"{'Created' if created else 'Updated'} trainer profile {profile.id} for user {user_id}"
        )
        return profile, created

    @BaseService.measure_operation("add_review")
    def add_review(self, actor: User, trainer_id: str, rating: int, comment: str) -> TrainerProfile:
        """
        Add the caller's review and refresh the denormalized rating.

        Raises:
            NotFoundException: If the trainer does not exist
            ValidationException: If the caller already reviewed this trainer
        """
        profile = self.trainer_repository.get_by_id(trainer_id)
        if profile is None:
            raise NotFoundException("Trainer not found", code="TRAINER_NOT_FOUND")
        if self.trainer_repository.get_review_by_user(profile.id, actor.id):
            raise ValidationException(
                "You have already reviewed this trainer", code="ALREADY_REVIEWED"
            )

        with self.transaction():
            profile.reviews.append(TrainerReview(user_id=actor.id, rating=rating, comment=comment))
            profile.recalculate_rating()
            self.trainer_repository.flush()

        self.logger.info(
            f"Review added to trainer {profile.id}: average {profile.rating_average:.2f} "
            f"over {profile.rating_count}"
        )
        return profile
