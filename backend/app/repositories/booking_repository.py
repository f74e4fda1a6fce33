# backend/app/repositories/booking_repository.py
"""
Booking Repository for the TrainerLocator platform.

Loads bookings together with their line items and audit history, and
provides the participant/trainer/admin listings.
"""

import logging
from typing import List, Optional, Tuple

from sqlalchemy.orm import Query, Session, selectinload

from ..models.booking import Booking
from .base_repository import BaseRepository

logger = logging.getLogger(__name__)


class BookingRepository(BaseRepository[Booking]):
    """Repository for Booking data access."""

    def __init__(self, db: Session):
        super().__init__(db, Booking)
        self.logger = logging.getLogger(__name__)

    def _apply_eager_loading(self, query: Query) -> Query:
        return query.options(
            selectinload(Booking.client),
            selectinload(Booking.trainer),
            selectinload(Booking.items),
            selectinload(Booking.status_history),
            selectinload(Booking.payment_history),
        )

    def _list(self, query: Query, page: int, per_page: int) -> Tuple[List[Booking], int]:
        query = self._apply_eager_loading(query).order_by(Booking.created_at.desc(), Booking.id.desc())
        return self._paginate(query, page, per_page)

    def list_for_user(
        self,
        user_id: str,
        *,
        as_trainer: bool,
        status: Optional[str] = None,
        page: int = 1,
        per_page: int = 10,
    ) -> Tuple[List[Booking], int]:
        """Bookings the user takes part in, newest first."""
        column = Booking.trainer_id if as_trainer else Booking.client_id
        query = self._build_query().filter(column == user_id).filter_by(**self._filters(status=status))
        return self._list(query, page, per_page)

    def list_for_trainer(
        self,
        trainer_user_id: str,
        *,
        status: Optional[str] = None,
        page: int = 1,
        per_page: int = 10,
    ) -> Tuple[List[Booking], int]:
        query = (
            self._build_query()
            .filter(Booking.trainer_id == trainer_user_id)
            .filter_by(**self._filters(status=status))
        )
        return self._list(query, page, per_page)

    def list_for_admin(
        self,
        *,
        status: Optional[str] = None,
        payment_status: Optional[str] = None,
        page: int = 1,
        per_page: int = 10,
    ) -> Tuple[List[Booking], int]:
        query = self._build_query().filter_by(
            **self._filters(status=status, payment_status=payment_status)
        )
        return self._list(query, page, per_page)
