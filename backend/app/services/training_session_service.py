# backend/app/services/training_session_service.py
"""
Training Session Service for the TrainerLocator platform.

Handles the single-session lifecycle: creation with schedule validation,
participant-only reads and edits, status changes with an append-only
history, cancellation, client ratings and per-user statistics.
"""

from datetime import datetime, timedelta
import logging
from typing import Any, Dict, List, Optional

from sqlalchemy.orm import Session

from ..core.config import settings
from ..core.exceptions import ForbiddenException, NotFoundException, ValidationException
from ..core.timezone_utils import ensure_utc, utc_now
from ..models.training_session import SessionStatus, SessionType, TrainingSession
from ..models.user import User
from ..monitoring.prometheus_metrics import prometheus_metrics
from ..repositories.factory import RepositoryFactory
from ..repositories.trainer_repository import TrainerRepository
from ..repositories.training_session_repository import TrainingSessionRepository
from .base import BaseService
from .conflict_checker import ConflictChecker
from .pricing_service import PricingService

logger = logging.getLogger(__name__)

_LOCATION_FIELDS = ("address", "city", "state", "zip_code", "latitude", "longitude")


def completion_rate(completed: int, total: int) -> float:
    """Completed share of all sessions in percent, one decimal place."""
    if total <= 0:
        return 0.0
    return round(completed / total * 100, 1)


class TrainingSessionService(BaseService):
    """
    Service layer for training sessions.

    ``trainer_id`` on a session is the trainer's user id; the trainer
    profile is only consulted for availability and pricing.
    """

    def __init__(
        self,
        db: Session,
        session_repository: Optional[TrainingSessionRepository] = None,
        trainer_repository: Optional[TrainerRepository] = None,
        conflict_checker: Optional[ConflictChecker] = None,
        pricing_service: Optional[PricingService] = None,
    ):
        super().__init__(db)
        self.logger = logging.getLogger(__name__)
        self.session_repository = (
            session_repository or RepositoryFactory.create_training_session_repository(db)
        )
        self.trainer_repository = trainer_repository or RepositoryFactory.create_trainer_repository(db)
        self.conflict_checker = conflict_checker or ConflictChecker(db, self.session_repository)
        self.pricing_service = pricing_service or PricingService(db)

    @staticmethod
    def _views_as_trainer(user: User) -> bool:
        return user.is_trainer

    def _get_for_participant(self, user: User, session_id: str) -> TrainingSession:
        session = self.session_repository.get_by_id(session_id)
        if session is None:
            raise NotFoundException("Session not found", code="SESSION_NOT_FOUND")
        if not session.is_participant(user.id):
            self.logger.warning(f"User {user.id} denied access to session {session_id}")
            raise ForbiddenException("Access denied", code="ACCESS_DENIED")
        return session

    @staticmethod
    def _apply_location(session: TrainingSession, location: Optional[Dict[str, Any]]) -> None:
        if not location:
            return
        for field in _LOCATION_FIELDS:
            if field in location:
                setattr(session, field, location[field])

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    @BaseService.measure_operation("list_sessions")
    def list_sessions(
        self, user: User, status: Optional[str] = None, session_type: Optional[str] = None
    ) -> List[TrainingSession]:
        return self.session_repository.list_for_user(
            user.id,
            as_trainer=self._views_as_trainer(user),
            status=status,
            session_type=session_type,
        )

    @BaseService.measure_operation("get_session")
    def get_session(self, user: User, session_id: str) -> TrainingSession:
        return self._get_for_participant(user, session_id)

    @BaseService.measure_operation("session_stats")
    def session_stats(self, user: User, now: Optional[datetime] = None) -> Dict[str, Any]:
        as_trainer = self._views_as_trainer(user)
        counts = self.session_repository.count_by_status(user.id, as_trainer=as_trainer)
        since = (now or utc_now()) - timedelta(days=settings.recent_window_days)
        total = sum(counts.values())
        completed = counts.get(SessionStatus.COMPLETED.value, 0)
        return {
            "total": total,
            "completed": completed,
            "scheduled": counts.get(SessionStatus.SCHEDULED.value, 0),
            "cancelled": counts.get(SessionStatus.CANCELLED.value, 0),
            "recent": self.session_repository.count_created_since(
                user.id, as_trainer=as_trainer, since=since
            ),
            "completion_rate": completion_rate(completed, total),
        }

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    @BaseService.measure_operation("create_session")
    def create_session(self, client: User, data: Dict[str, Any]) -> TrainingSession:
        """
        Schedule a session with a trainer.

        Args:
            client: Requesting user (must not be a trainer)
            data: trainer_id (trainer's user id), session_type, duration,
                starts_at and optional service_type, notes, location

        Raises:
            ValidationException: Trainer caller, past date or unavailable weekday
            NotFoundException: Trainer missing or inactive
            BookingConflictException: Slot overlaps an existing session
        """
        if client.is_trainer:
            raise ValidationException("Trainers cannot create sessions", code="TRAINER_CANNOT_BOOK")

        trainer = self.trainer_repository.get_by_user_id(data["trainer_id"])
        if trainer is None or not trainer.is_active:
            raise NotFoundException("Trainer not found or inactive", code="TRAINER_NOT_FOUND")

        starts_at = ensure_utc(data["starts_at"])
        duration = data["duration"]
        self.conflict_checker.validate_session_slot(trainer, starts_at, duration)

        quote = self.pricing_service.quote_session(trainer, data.get("service_type"), duration)

        with self.transaction():
            session = TrainingSession(
                client_id=client.id,
                trainer_id=trainer.user_id,
                session_type=SessionType(data["session_type"]).value,
                service_type=data.get("service_type") or (quote.service.name if quote else None),
                duration=duration,
                starts_at=starts_at,
                notes=data.get("notes"),
                price_amount=quote.price if quote else 0,
            )
            self._apply_location(session, data.get("location"))
            session.record_status(SessionStatus.SCHEDULED.value, client.id, "Session created")
            self.session_repository.add(session)

        prometheus_metrics.inc_session_created(session.session_type, "direct")
        self.logger.info(
            f"Session {session.id} scheduled: client {client.id} with trainer {trainer.user_id} "
            f"at {starts_at.isoformat()}"
        )
        return session

    @BaseService.measure_operation("update_session_status")
    def update_session_status(
        self, user: User, session_id: str, status: str, notes: Optional[str] = None
    ) -> TrainingSession:
        """Any status may follow any other; the change is always audited."""
        session = self._get_for_participant(user, session_id)
        previous = session.status
        with self.transaction():
            if notes:
                session.notes = notes
            session.record_status(SessionStatus(status).value, user.id, notes)
            self.session_repository.flush()
        self.logger.info(f"Session {session.id} status {previous} -> {session.status} by {user.id}")
        return session

    @BaseService.measure_operation("update_session")
    def update_session(self, user: User, session_id: str, changes: Dict[str, Any]) -> TrainingSession:
        """
        Edit a scheduled session.

        A new start or duration is re-validated against the trainer's
        schedule, ignoring this session itself.
        """
        session = self._get_for_participant(user, session_id)
        if session.status != SessionStatus.SCHEDULED.value:
            raise ValidationException(
                "Cannot update session that is not in scheduled status", code="SESSION_NOT_SCHEDULED"
            )

        new_start = ensure_utc(changes["starts_at"]) if changes.get("starts_at") else None
        new_duration = changes.get("duration")
        if new_start is not None or new_duration is not None:
            start = new_start or session.start_time
            duration = new_duration or session.duration
            if new_start is not None:
                self.conflict_checker.ensure_not_in_past(start)
            self.conflict_checker.ensure_no_conflicts(
                session.trainer_id, start, duration, exclude_session_id=session.id
            )

        with self.transaction():
            if new_start is not None:
                session.starts_at = new_start
            if new_duration is not None:
                session.duration = new_duration
            if "notes" in changes:
                session.notes = changes["notes"]
            self._apply_location(session, changes.get("location"))
            self.session_repository.flush()

        self.logger.info(f"Session {session.id} updated by {user.id}")
        return session

    @BaseService.measure_operation("cancel_session")
    def cancel_session(self, user: User, session_id: str) -> TrainingSession:
        session = self._get_for_participant(user, session_id)
        if session.status != SessionStatus.SCHEDULED.value:
            raise ValidationException(
                "Cannot cancel session that is not in scheduled status", code="SESSION_NOT_SCHEDULED"
            )
        with self.transaction():
            session.record_status(SessionStatus.CANCELLED.value, user.id, "Session cancelled by user")
            self.session_repository.flush()
        self.logger.info(f"Session {session.id} cancelled by {user.id}")
        return session

    @BaseService.measure_operation("rate_session")
    def rate_session(
        self, user: User, session_id: str, score: int, comment: Optional[str] = None
    ) -> TrainingSession:
        """
        Raises:
            ForbiddenException: If the caller is not the session's client
            ValidationException: If the session is not completed
        """
        session = self.session_repository.get_by_id(session_id)
        if session is None:
            raise NotFoundException("Session not found", code="SESSION_NOT_FOUND")
        if session.client_id != user.id:
            raise ForbiddenException("Only the client can rate a session", code="ACCESS_DENIED")
        if session.status != SessionStatus.COMPLETED.value:
            raise ValidationException("Only completed sessions can be rated", code="SESSION_NOT_COMPLETED")

        with self.transaction():
            session.rating_score = score
            session.rating_comment = comment
            session.rated_at = utc_now()
            self.session_repository.flush()
        return session
