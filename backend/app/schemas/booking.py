# backend/app/schemas/booking.py
"""
Booking request/response schemas.

Prices are never accepted from the client: line item prices and the
total are computed server-side from the trainer's service catalog.
"""

from datetime import datetime
from typing import List, Optional

from pydantic import Field

from ..core.constants import (
    MAX_SESSION_DURATION,
    MAX_SESSION_NOTES_LENGTH,
    MAX_SPECIAL_REQUESTS_LENGTH,
    MIN_SESSION_DURATION,
)
from ..models.booking import Booking, BookingStatus, BookingType, PaymentMethod, PaymentStatus
from ..models.training_session import SessionType
from .base import Money, StandardizedModel, StrictRequestModel
from .training_session import StatusChangeResponse


class BookingItemCreate(StrictRequestModel):
    service_name: str = Field(..., min_length=1, max_length=100, description="Requested service")
    session_type: SessionType = SessionType.IN_PERSON
    duration: int = Field(..., ge=MIN_SESSION_DURATION, le=MAX_SESSION_DURATION)
    starts_at: datetime


class BookingCreate(StrictRequestModel):
    """
    Booking request.

    ``trainer_id`` may be either the trainer profile id or the trainer's user id.
    """

    trainer_id: str
    booking_type: BookingType = BookingType.SINGLE
    sessions: List[BookingItemCreate] = Field(..., min_length=1)
    payment_method: PaymentMethod
    notes: Optional[str] = Field(None, max_length=MAX_SESSION_NOTES_LENGTH)
    special_requests: Optional[str] = Field(None, max_length=MAX_SPECIAL_REQUESTS_LENGTH)


class BookingStatusUpdate(StrictRequestModel):
    status: BookingStatus
    notes: Optional[str] = Field(None, max_length=MAX_SESSION_NOTES_LENGTH)


class BookingPaymentUpdate(StrictRequestModel):
    payment_status: PaymentStatus
    transaction_id: Optional[str] = Field(None, max_length=255)
    payment_method: Optional[PaymentMethod] = None


class BookingItemResponse(StandardizedModel):
    id: str
    service_name: str
    session_type: str
    duration: int
    starts_at: datetime
    price: Money
    service_id: Optional[str] = None
    session_id: Optional[str] = None


class PaymentChangeResponse(StandardizedModel):
    status: str
    transaction_id: Optional[str] = None
    payment_method: Optional[str] = None
    updated_by_id: Optional[str] = None
    timestamp: datetime


class BookingResponse(StandardizedModel):
    id: str
    client_id: str
    trainer_id: str
    booking_type: str
    status: str
    sessions: List[BookingItemResponse]
    total_price: Money
    payment_method: str
    payment_status: str
    transaction_id: Optional[str] = None
    notes: Optional[str] = None
    special_requests: Optional[str] = None
    cancellation_hours_before: int
    refund_percentage: int
    total_sessions: int
    total_duration_hours: float
    average_price_per_session: Money
    next_session_date: Optional[datetime] = None
    can_be_cancelled: bool
    refund_amount: Money
    status_history: List[StatusChangeResponse] = []
    payment_history: List[PaymentChangeResponse] = []
    created_at: Optional[datetime] = None

    @classmethod
    def from_booking(cls, booking: Booking) -> "BookingResponse":
        return cls(
            id=booking.id,
            client_id=booking.client_id,
            trainer_id=booking.trainer_id,
            booking_type=booking.booking_type,
            status=booking.status,
            sessions=[BookingItemResponse.model_validate(item) for item in booking.items],
            total_price=booking.total_price,
            payment_method=booking.payment_method,
            payment_status=booking.payment_status,
            transaction_id=booking.transaction_id,
            notes=booking.notes,
            special_requests=booking.special_requests,
            cancellation_hours_before=booking.cancellation_hours_before,
            refund_percentage=booking.refund_percentage,
            total_sessions=booking.total_sessions,
            total_duration_hours=booking.total_duration_hours,
            average_price_per_session=booking.average_price_per_session,
            next_session_date=booking.next_session_date(),
            can_be_cancelled=booking.can_be_cancelled(),
            refund_amount=booking.calculate_refund_amount(),
            status_history=[StatusChangeResponse.model_validate(h) for h in booking.status_history],
            payment_history=[PaymentChangeResponse.model_validate(p) for p in booking.payment_history],
            created_at=booking.created_at,
        )
