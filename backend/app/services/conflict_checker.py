# backend/app/services/conflict_checker.py
"""
Conflict Checker Service for the TrainerLocator platform.

Handles schedule validation for new or moved sessions:
- The session must not start in the past
- The trainer's weekly availability must mark that weekday as available
- No other scheduled/in-progress session of the same trainer may start
  within ``duration`` minutes (either side, inclusive) of the requested start

The window uses the *requested* session's duration, not the existing
session's, so a long existing session that started just outside the
window is not reported.
"""

from datetime import datetime, timedelta
import logging
from typing import Any, Dict, List, Optional, Tuple

from sqlalchemy.orm import Session

from ..core.exceptions import (
    BookingConflictException,
    TrainerUnavailableException,
    ValidationException,
)
from ..core.timezone_utils import ensure_utc, utc_now, weekday_name
from ..models.trainer import TrainerProfile
from ..monitoring.prometheus_metrics import prometheus_metrics
from ..repositories import RepositoryFactory
from ..repositories.training_session_repository import TrainingSessionRepository
from .base import BaseService

logger = logging.getLogger(__name__)


def conflict_window(start: datetime, duration_minutes: int) -> Tuple[datetime, datetime]:
    """Inclusive ``[start - duration, start + duration]`` window, in UTC."""
    start_utc = ensure_utc(start)
    delta = timedelta(minutes=duration_minutes)
    return start_utc - delta, start_utc + delta


class ConflictChecker(BaseService):
    """
    Service for checking trainer schedule conflicts.

    Centralizes conflict detection so session creation, session edits and
    booking confirmation all apply the same rules.
    """

    def __init__(self, db: Session, repository: Optional[TrainingSessionRepository] = None):
        super().__init__(db)
        self.logger = logging.getLogger(__name__)
        self.repository = repository or RepositoryFactory.create_training_session_repository(db)

    @BaseService.measure_operation("check_session_conflicts")
    def check_session_conflicts(
        self,
        trainer_user_id: str,
        start: datetime,
        duration_minutes: int,
        exclude_session_id: Optional[str] = None,
    ) -> List[Dict[str, Any]]:
        """
        Find sessions that block the requested slot.

        Args:
            trainer_user_id: Trainer's user id
            start: Requested start
            duration_minutes: Requested duration, sizes the window
            exclude_session_id: Session being edited, ignored in the check

        Returns:
            List of conflicts with session details
        """
        window_start, window_end = conflict_window(start, duration_minutes)
        sessions = self.repository.find_blocking_in_window(
            trainer_user_id, window_start, window_end, exclude_session_id
        )

        conflicts = [
            {
                "session_id": s.id,
                "starts_at": s.start_time.isoformat(),
                "duration": s.duration,
                "status": s.status,
            }
            for s in sessions
        ]

        if conflicts:
            self.logger.warning(
                f"Found {len(conflicts)} session conflicts for trainer {trainer_user_id} "
                f"between {window_start.isoformat()} and {window_end.isoformat()}"
            )

        return conflicts

    def ensure_no_conflicts(
        self,
        trainer_user_id: str,
        start: datetime,
        duration_minutes: int,
        exclude_session_id: Optional[str] = None,
    ) -> None:
        """Raise BookingConflictException if the slot is blocked."""
        conflicts = self.check_session_conflicts(
            trainer_user_id, start, duration_minutes, exclude_session_id
        )
        if conflicts:
            prometheus_metrics.inc_schedule_conflict()
            raise BookingConflictException(details={"conflicts": conflicts})

    def ensure_trainer_available(self, trainer: TrainerProfile, start: datetime) -> None:
        """Raise TrainerUnavailableException if the weekday is not marked available."""
        day = weekday_name(ensure_utc(start))
        if not trainer.is_available_on(day):
            self.logger.info(f"Trainer {trainer.id} is not available on {day}")
            raise TrainerUnavailableException(day)

    @staticmethod
    def ensure_not_in_past(start: datetime, now: Optional[datetime] = None) -> None:
        now = now or utc_now()
        if ensure_utc(start) < now:
            raise ValidationException(
                "Session date cannot be in the past", code="DATE_IN_PAST"
            )

    @BaseService.measure_operation("validate_session_slot")
    def validate_session_slot(
        self,
        trainer: TrainerProfile,
        start: datetime,
        duration_minutes: int,
        exclude_session_id: Optional[str] = None,
    ) -> None:
        """
        Run every schedule rule for a session slot.

        Raises:
            ValidationException: If the start is in the past
            TrainerUnavailableException: If the trainer does not work that day
            BookingConflictException: If another session blocks the slot
        """
        self.ensure_not_in_past(start)
        self.ensure_trainer_available(trainer, start)
        self.ensure_no_conflicts(trainer.user_id, start, duration_minutes, exclude_session_id)
