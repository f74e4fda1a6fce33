from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field

from ..core.constants import (
    MAX_RATING,
    MAX_SESSION_DURATION,
    MAX_SESSION_NOTES_LENGTH,
    MIN_RATING,
    MIN_SESSION_DURATION,
)
from ..core.timezone_utils import utc_now
from ..models.training_session import SessionStatus, SessionType, TrainingSession
from .base import Money, StandardizedModel, StrictRequestModel


class SessionLocation(BaseModel):
    address: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    zip_code: Optional[str] = None
    latitude: Optional[float] = Field(None, ge=-90, le=90)
    longitude: Optional[float] = Field(None, ge=-180, le=180)


class SessionCreate(StrictRequestModel):
    """Client request for a single session. ``trainer_id`` is the trainer's user id."""

    trainer_id: str
    session_type: SessionType
    duration: int = Field(..., ge=MIN_SESSION_DURATION, le=MAX_SESSION_DURATION)
    starts_at: datetime
    service_type: Optional[str] = Field(None, max_length=100)
    notes: Optional[str] = Field(None, max_length=MAX_SESSION_NOTES_LENGTH)
    location: Optional[SessionLocation] = None


class SessionUpdate(StrictRequestModel):
    starts_at: Optional[datetime] = None
    duration: Optional[int] = Field(None, ge=MIN_SESSION_DURATION, le=MAX_SESSION_DURATION)
    notes: Optional[str] = Field(None, max_length=MAX_SESSION_NOTES_LENGTH)
    location: Optional[SessionLocation] = None


class SessionStatusUpdate(StrictRequestModel):
    status: SessionStatus
    notes: Optional[str] = Field(None, max_length=MAX_SESSION_NOTES_LENGTH)


class SessionRatingCreate(StrictRequestModel):
    score: int = Field(..., ge=MIN_RATING, le=MAX_RATING)
    comment: Optional[str] = Field(None, max_length=MAX_SESSION_NOTES_LENGTH)


class StatusChangeResponse(StandardizedModel):
    status: str
    changed_by_id: Optional[str] = None
    timestamp: datetime
    notes: Optional[str] = None


class SessionResponse(StandardizedModel):
    id: str
    client_id: str
    trainer_id: str
    session_type: str
    service_type: Optional[str] = None
    duration: int
    duration_hours: float
    starts_at: datetime
    end_time: datetime
    status: str
    location: SessionLocation
    notes: Optional[str] = None
    price_amount: Money
    currency: str
    is_paid: bool
    rating_score: Optional[int] = None
    rating_comment: Optional[str] = None
    rated_at: Optional[datetime] = None
    is_past: bool
    is_today: bool
    is_upcoming: bool
    status_history: List[StatusChangeResponse] = []
    created_at: Optional[datetime] = None

    @classmethod
    def from_session(cls, session: TrainingSession) -> "SessionResponse":
        now = utc_now()
        return cls(
            id=session.id,
            client_id=session.client_id,
            trainer_id=session.trainer_id,
            session_type=session.session_type,
            service_type=session.service_type,
            duration=session.duration,
            duration_hours=session.duration_hours,
            starts_at=session.start_time,
            end_time=session.end_time,
            status=session.status,
            location=SessionLocation(
                address=session.address,
                city=session.city,
                state=session.state,
                zip_code=session.zip_code,
                latitude=session.latitude,
                longitude=session.longitude,
            ),
            notes=session.notes,
            price_amount=session.price_amount or 0,
            currency=session.currency,
            is_paid=bool(session.is_paid),
            rating_score=session.rating_score,
            rating_comment=session.rating_comment,
            rated_at=session.rated_at,
            is_past=session.is_past(now),
            is_today=session.is_today(now),
            is_upcoming=session.is_upcoming(now),
            status_history=[StatusChangeResponse.model_validate(h) for h in session.status_history],
            created_at=session.created_at,
        )


class SessionStatsResponse(BaseModel):
    total: int
    completed: int
    scheduled: int
    cancelled: int
    recent: int = Field(description="Sessions created in the recent window (30 days by default)")
    completion_rate: float = Field(description="Completed / total, percent with one decimal")
