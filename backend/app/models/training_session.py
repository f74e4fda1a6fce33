# backend/app/models/training_session.py
"""
Training session model for the TrainerLocator platform.

A TrainingSession is one scheduled appointment between a client and a
trainer. It is named TrainingSession to stay clear of SQLAlchemy's
``Session``. ``trainer_id`` references the trainer's *user* id, which is
what the conflict check and role-filtered listings key on.

Every status change appends a SessionStatusChange row; the history is
append-only and no transition table restricts which status may follow.
"""

from datetime import datetime, timedelta
from enum import Enum
import logging
from typing import Optional

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Column,
    DateTime,
    Float,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    String,
    Text,
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
import ulid

from ..core.constants import DEFAULT_CURRENCY, UPCOMING_WINDOW_HOURS
from ..core.timezone_utils import ensure_utc, utc_now
from ..database import Base

logger = logging.getLogger(__name__)


class SessionStatus(str, Enum):
    """Session lifecycle statuses."""

    SCHEDULED = "scheduled"
    IN_PROGRESS = "in-progress"
    COMPLETED = "completed"
    CANCELLED = "cancelled"
    NO_SHOW = "no-show"


class SessionType(str, Enum):
    IN_PERSON = "in-person"
    VIRTUAL = "virtual"


class RecurrenceFrequency(str, Enum):
    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"


# Statuses that occupy the trainer's calendar
BLOCKING_SESSION_STATUSES = (SessionStatus.SCHEDULED.value, SessionStatus.IN_PROGRESS.value)


class TrainingSession(Base):
    """
    A single training appointment.

    Attributes:
        client_id: Client user
        trainer_id: Trainer's user id
        starts_at: Start time (UTC)
        duration: Minutes, 15..480
        status: SessionStatus value
        price_amount / currency / is_paid: Price snapshot
        rating_score / rating_comment / rated_at: Client rating after completion
    """

    __tablename__ = "training_sessions"

    id = Column(String(26), primary_key=True, index=True, default=lambda: str(ulid.ULID()))
    client_id = Column(String(26), ForeignKey("users.id"), nullable=False, index=True)
    trainer_id = Column(String(26), ForeignKey("users.id"), nullable=False, index=True)

    session_type = Column(String(20), nullable=False, default=SessionType.IN_PERSON.value)
    service_type = Column(String(100), nullable=True)
    duration = Column(Integer, nullable=False)
    starts_at = Column(DateTime(timezone=True), nullable=False)
    status = Column(String(20), nullable=False, default=SessionStatus.SCHEDULED.value, index=True)

    # Location (in-person sessions)
    address = Column(String(255), nullable=True)
    city = Column(String(100), nullable=True)
    state = Column(String(100), nullable=True)
    zip_code = Column(String(20), nullable=True)
    latitude = Column(Float, nullable=True)
    longitude = Column(Float, nullable=True)

    notes = Column(Text, nullable=True)

    # Price snapshot
    price_amount = Column(Numeric(10, 2), nullable=False, default=0)
    currency = Column(String(3), nullable=False, default=DEFAULT_CURRENCY)
    is_paid = Column(Boolean, nullable=False, default=False)

    # Client rating
    rating_score = Column(Integer, nullable=True)
    rating_comment = Column(Text, nullable=True)
    rated_at = Column(DateTime(timezone=True), nullable=True)

    # Recurrence
    is_recurring = Column(Boolean, nullable=False, default=False)
    recurrence_frequency = Column(String(10), nullable=True)
    recurrence_interval = Column(Integer, nullable=True)
    recurrence_end_date = Column(DateTime(timezone=True), nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    client = relationship("User", foreign_keys=[client_id])
    trainer = relationship("User", foreign_keys=[trainer_id])
    status_history = relationship(
        "SessionStatusChange",
        back_populates="session",
        cascade="all, delete-orphan",
        order_by="SessionStatusChange.sequence",
    )

    __table_args__ = (
        Index("ix_training_sessions_trainer_starts", "trainer_id", "starts_at"),
        CheckConstraint("duration >= 15 AND duration <= 480", name="check_session_duration"),
        CheckConstraint(
            "rating_score IS NULL OR (rating_score >= 1 AND rating_score <= 5)",
            name="check_session_rating_range",
        ),
    )

    def __repr__(self) -> str:
        return f"<TrainingSession {self.id} trainer={self.trainer_id} {self.starts_at} {self.status}>"

    def record_status(
        self, status: str, changed_by_id: Optional[str], notes: Optional[str] = None
    ) -> "SessionStatusChange":
        """Set the status and append the matching history entry."""
        self.status = status
        entry = SessionStatusChange(
            status=status,
            changed_by_id=changed_by_id,
            notes=notes,
            timestamp=utc_now(),
            sequence=len(self.status_history),
        )
        self.status_history.append(entry)
        return entry

    def is_participant(self, user_id: str) -> bool:
        return user_id in (self.client_id, self.trainer_id)

    @property
    def start_time(self) -> datetime:
        return ensure_utc(self.starts_at)

    @property
    def end_time(self) -> datetime:
        return self.start_time + timedelta(minutes=self.duration)

    @property
    def duration_hours(self) -> float:
        return self.duration / 60

    def is_past(self, now: Optional[datetime] = None) -> bool:
        now = now or utc_now()
        return self.start_time < now

    def is_today(self, now: Optional[datetime] = None) -> bool:
        now = now or utc_now()
        return self.start_time.date() == now.date()

    def is_upcoming(self, now: Optional[datetime] = None) -> bool:
        """True when the session starts within the next 24 hours."""
        now = now or utc_now()
        return now < self.start_time <= now + timedelta(hours=UPCOMING_WINDOW_HOURS)


class SessionStatusChange(Base):
    """Append-only audit entry for a session status change."""

    __tablename__ = "session_status_changes"

    id = Column(String(26), primary_key=True, index=True, default=lambda: str(ulid.ULID()))
    session_id = Column(
        String(26), ForeignKey("training_sessions.id", ondelete="CASCADE"), nullable=False, index=True
    )
    sequence = Column(Integer, nullable=False, default=0)
    status = Column(String(20), nullable=False)
    changed_by_id = Column(String(26), ForeignKey("users.id"), nullable=True)
    timestamp = Column(DateTime(timezone=True), nullable=False, default=utc_now)
    notes = Column(Text, nullable=True)

    session = relationship("TrainingSession", back_populates="status_history")

    def __repr__(self) -> str:
        return f"<SessionStatusChange {self.session_id} -> {self.status}>"
