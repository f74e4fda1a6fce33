# backend/app/repositories/trainer_repository.py
"""
Trainer Repository for the TrainerLocator platform.

Profile lookups, filtered/sorted search, the coordinate bounding-box
query behind "nearby" search, and review lookups.
"""

import logging
from typing import List, Optional, Tuple

from sqlalchemy import case, func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Query, Session, selectinload

from ..core.enums import SortOrder, TrainerSortField
from ..core.exceptions import RepositoryException
from ..models.trainer import TrainerProfile, TrainerReview, TrainerService
from .base_repository import BaseRepository

logger = logging.getLogger(__name__)


class TrainerRepository(BaseRepository[TrainerProfile]):
    """Repository for TrainerProfile and its child rows."""

    def __init__(self, db: Session):
        super().__init__(db, TrainerProfile)
        self.logger = logging.getLogger(__name__)

    def _apply_eager_loading(self, query: Query) -> Query:
        return query.options(
            selectinload(TrainerProfile.user),
            selectinload(TrainerProfile.services),
            selectinload(TrainerProfile.certifications),
            selectinload(TrainerProfile.achievements),
            selectinload(TrainerProfile.reviews),
        )

    def get_by_user_id(self, user_id: str) -> Optional[TrainerProfile]:
        try:
            query = self._apply_eager_loading(
                self.db.query(TrainerProfile).filter(TrainerProfile.user_id == user_id)
            )
            return query.first()
        except SQLAlchemyError as e:
            self.logger.error(f"Error getting trainer profile for user {user_id}: {str(e)}")
            raise RepositoryException(f"Failed to retrieve trainer profile: {str(e)}")

    def resolve(self, trainer_ref: str) -> Optional[TrainerProfile]:
        """
        Find a trainer by profile id, falling back to the owning user id.

        Clients may address a trainer by either identifier.
        """
        return self.get_by_id(trainer_ref) or self.get_by_user_id(trainer_ref)

    def search(
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
        """
        Search active trainers.

        Text filters are case-insensitive substring matches. Price bounds
        and price sorting use each trainer's cheapest service.
        """
        min_price = (
            self.db.query(
                TrainerService.trainer_id.label("trainer_id"),
                func.min(TrainerService.price).label("min_price"),
            )
            .group_by(TrainerService.trainer_id)
            .subquery()
        )

        query = (
            self.db.query(TrainerProfile)
            .outerjoin(min_price, min_price.c.trainer_id == TrainerProfile.id)
            .filter(TrainerProfile.is_active.is_(True))
        )

        if specialization:
            query = query.filter(TrainerProfile.specialization.ilike(f"%{specialization.strip()}%"))
        if city:
            query = query.filter(TrainerProfile.city.ilike(f"%{city.strip()}%"))
        if min_rating is not None:
            query = query.filter(TrainerProfile.rating_average >= min_rating)
        if min_experience is not None:
            query = query.filter(TrainerProfile.experience_years >= min_experience)
        if price_min is not None:
            query = query.filter(min_price.c.min_price >= price_min)
        if price_max is not None:
            query = query.filter(min_price.c.min_price <= price_max)

        if sort_by == TrainerSortField.PRICE:
            sort_column = min_price.c.min_price
        elif sort_by == TrainerSortField.EXPERIENCE:
            sort_column = TrainerProfile.experience_years
        else:
            sort_column = TrainerProfile.rating_average
        ordered = sort_column.asc() if sort_order == SortOrder.ASC else sort_column.desc()
        # Trainers without a price always sort last
        query = query.order_by(
            case((sort_column.is_(None), 1), else_=0), ordered, TrainerProfile.id
        )

        query = query.options(selectinload(TrainerProfile.user), selectinload(TrainerProfile.services))
        return self._paginate(query, page, per_page)

    def find_in_bounding_box(
        self,
        *,
        min_latitude: float,
        max_latitude: float,
        min_longitude: float,
        max_longitude: float,
        limit: int,
    ) -> List[TrainerProfile]:
        query = (
            self.db.query(TrainerProfile)
            .filter(
                TrainerProfile.is_active.is_(True),
                TrainerProfile.latitude.between(min_latitude, max_latitude),
                TrainerProfile.longitude.between(min_longitude, max_longitude),
            )
            .options(selectinload(TrainerProfile.user), selectinload(TrainerProfile.services))
            .order_by(TrainerProfile.rating_average.desc(), TrainerProfile.id)
            .limit(limit)
        )
        return self._execute_query(query)

    def list_for_admin(
        self, *, is_verified: Optional[bool] = None, page: int = 1, per_page: int = 10
    ) -> Tuple[List[TrainerProfile], int]:
        query = (
            self._build_query()
            .filter_by(**self._filters(is_verified=is_verified))
            .options(selectinload(TrainerProfile.user), selectinload(TrainerProfile.services))
            .order_by(TrainerProfile.created_at.desc(), TrainerProfile.id.desc())
        )
        return self._paginate(query, page, per_page)

    def get_review_by_user(self, trainer_id: str, user_id: str) -> Optional[TrainerReview]:
        try:
            return (
                self.db.query(TrainerReview)
                .filter(TrainerReview.trainer_id == trainer_id, TrainerReview.user_id == user_id)
                .first()
            )
        except SQLAlchemyError as e:
            self.logger.error(f"Error checking review for trainer {trainer_id}: {str(e)}")
            raise RepositoryException(f"Failed to retrieve review: {str(e)}")
