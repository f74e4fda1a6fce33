# backend/app/repositories/training_session_repository.py
"""
TrainingSession Repository for the TrainerLocator platform.

Besides CRUD, this owns the schedule query the conflict checker relies
on: sessions of one trainer, in a blocking status, starting inside a
time window.
"""

from datetime import datetime
import logging
from typing import Dict, List, Optional, Sequence, Tuple

from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Query, Session, selectinload

from ..core.exceptions import RepositoryException
from ..models.training_session import BLOCKING_SESSION_STATUSES, TrainingSession
from .base_repository import BaseRepository

logger = logging.getLogger(__name__)


class TrainingSessionRepository(BaseRepository[TrainingSession]):
    """Repository for TrainingSession data access."""

    def __init__(self, db: Session):
        super().__init__(db, TrainingSession)
        self.logger = logging.getLogger(__name__)

    def _apply_eager_loading(self, query: Query) -> Query:
        return query.options(
            selectinload(TrainingSession.client),
            selectinload(TrainingSession.trainer),
            selectinload(TrainingSession.status_history),
        )

    def _participant_column(self, as_trainer: bool):
        return TrainingSession.trainer_id if as_trainer else TrainingSession.client_id

    def list_for_user(
        self,
        user_id: str,
        *,
        as_trainer: bool,
        status: Optional[str] = None,
        session_type: Optional[str] = None,
    ) -> List[TrainingSession]:
        """Sessions the user takes part in, newest start first."""
        query = self._apply_eager_loading(
            self._build_query().filter(self._participant_column(as_trainer) == user_id)
        )
        query = query.filter_by(**self._filters(status=status, session_type=session_type))
        return self._execute_query(query.order_by(TrainingSession.starts_at.desc()))

    def find_blocking_in_window(
        self,
        trainer_id: str,
        window_start: datetime,
        window_end: datetime,
        exclude_session_id: Optional[str] = None,
    ) -> List[TrainingSession]:
        """
        Sessions for ``trainer_id`` in a blocking status that start within
        ``[window_start, window_end]`` (inclusive).
        """
        try:
            query = self.db.query(TrainingSession).filter(
                TrainingSession.trainer_id == trainer_id,
                TrainingSession.status.in_(BLOCKING_SESSION_STATUSES),
                TrainingSession.starts_at >= window_start,
                TrainingSession.starts_at <= window_end,
            )
            if exclude_session_id:
                query = query.filter(TrainingSession.id != exclude_session_id)
            return query.order_by(TrainingSession.starts_at).all()
        except SQLAlchemyError as e:
            self.logger.error(f"Error checking schedule for trainer {trainer_id}: {str(e)}")
            raise RepositoryException(f"Failed to check trainer schedule: {str(e)}")

    def get_many(self, session_ids: Sequence[str]) -> List[TrainingSession]:
        if not session_ids:
            return []
        query = self._apply_eager_loading(
            self._build_query().filter(TrainingSession.id.in_(list(session_ids)))
        )
        return self._execute_query(query)

    def count_by_status(self, user_id: str, *, as_trainer: bool) -> Dict[str, int]:
        """Number of the user's sessions per status."""
        try:
            rows = (
                self.db.query(TrainingSession.status, func.count(TrainingSession.id))
                .filter(self._participant_column(as_trainer) == user_id)
                .group_by(TrainingSession.status)
                .all()
            )
            return {status: count for status, count in rows}
        except SQLAlchemyError as e:
            self.logger.error(f"Error counting sessions for {user_id}: {str(e)}")
            raise RepositoryException(f"Failed to count sessions: {str(e)}")

    def count_created_since(self, user_id: str, *, as_trainer: bool, since: datetime) -> int:
        try:
            return (
                self.db.query(TrainingSession)
                .filter(
                    self._participant_column(as_trainer) == user_id,
                    TrainingSession.created_at >= since,
                )
                .count()
            )
        except SQLAlchemyError as e:
            self.logger.error(f"Error counting recent sessions for {user_id}: {str(e)}")
            raise RepositoryException(f"Failed to count sessions: {str(e)}")

    def list_for_admin(
        self, *, status: Optional[str] = None, page: int = 1, per_page: int = 10
    ) -> Tuple[List[TrainingSession], int]:
        query = self._apply_eager_loading(
            self._build_query().filter_by(**self._filters(status=status))
        ).order_by(TrainingSession.starts_at.desc())
        return self._paginate(query, page, per_page)

