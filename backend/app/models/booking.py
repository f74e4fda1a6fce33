# backend/app/models/booking.py
"""
Booking model for the TrainerLocator platform.

A booking groups one or more priced line items (BookingItem) that a
client requests from a trainer. Line items are priced at creation time
from the trainer's service catalog and keep that snapshot afterwards.

Status and payment status are free-form within their enums: any value
may follow any other. Each change appends a row to the corresponding
history table (BookingStatusChange / BookingPaymentChange), which is
never updated or deleted.
"""

from datetime import datetime, timedelta
from decimal import ROUND_HALF_UP, Decimal
from enum import Enum
import logging
from typing import Optional

from sqlalchemy import (
    JSON,
    Boolean,
    CheckConstraint,
    Column,
    DateTime,
    ForeignKey,
    Integer,
    Numeric,
    String,
    Text,
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
import ulid

from ..core.timezone_utils import ensure_utc, utc_now
from ..database import Base

logger = logging.getLogger(__name__)

CENTS = Decimal("0.01")


class BookingStatus(str, Enum):
    """Booking lifecycle statuses."""

    PENDING = "pending"  # Default on creation
    CONFIRMED = "confirmed"  # Trainer accepted; sessions materialized
    CANCELLED = "cancelled"
    COMPLETED = "completed"


class BookingType(str, Enum):
    SINGLE = "single"
    PACKAGE = "package"
    SUBSCRIPTION = "subscription"


class PaymentStatus(str, Enum):
    PENDING = "pending"
    PAID = "paid"
    FAILED = "failed"
    REFUNDED = "refunded"


class PaymentMethod(str, Enum):
    CREDIT_CARD = "credit_card"
    PAYPAL = "paypal"
    STRIPE = "stripe"
    CASH = "cash"


# Statuses from which a client may still cancel
CANCELLABLE_STATUSES = (BookingStatus.PENDING.value, BookingStatus.CONFIRMED.value)


class Booking(Base):
    """
    Client request for one or more sessions with a trainer.

    Attributes:
        client_id: Client user
        trainer_id: Trainer's user id
        booking_type: single | package | subscription
        total_price: Sum of line item prices
        cancellation_hours_before / refund_percentage: Cancellation policy
    """

    __tablename__ = "bookings"

    id = Column(String(26), primary_key=True, index=True, default=lambda: str(ulid.ULID()))
    client_id = Column(String(26), ForeignKey("users.id"), nullable=False, index=True)
    trainer_id = Column(String(26), ForeignKey("users.id"), nullable=False, index=True)

    booking_type = Column(String(20), nullable=False, default=BookingType.SINGLE.value)
    total_price = Column(Numeric(10, 2), nullable=False, default=0)

    payment_method = Column(String(20), nullable=False)
    payment_status = Column(String(20), nullable=False, default=PaymentStatus.PENDING.value)
    transaction_id = Column(String(255), nullable=True)

    notes = Column(Text, nullable=True)
    special_requests = Column(Text, nullable=True)

    status = Column(String(20), nullable=False, default=BookingStatus.PENDING.value, index=True)

    # Cancellation policy
    cancellation_hours_before = Column(Integer, nullable=False, default=24)
    refund_percentage = Column(Integer, nullable=False, default=100)

    # Recurrence
    is_recurring = Column(Boolean, nullable=False, default=False)
    recurrence_frequency = Column(String(10), nullable=True)
    recurrence_interval = Column(Integer, nullable=True)
    recurrence_end_date = Column(DateTime(timezone=True), nullable=True)
    recurrence_days_of_week = Column(JSON, nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    client = relationship("User", foreign_keys=[client_id])
    trainer = relationship("User", foreign_keys=[trainer_id])
    items = relationship(
        "BookingItem",
        back_populates="booking",
        cascade="all, delete-orphan",
        order_by="BookingItem.position",
    )
    status_history = relationship(
        "BookingStatusChange",
        back_populates="booking",
        cascade="all, delete-orphan",
        order_by="BookingStatusChange.sequence",
    )
    payment_history = relationship(
        "BookingPaymentChange",
        back_populates="booking",
        cascade="all, delete-orphan",
        order_by="BookingPaymentChange.sequence",
    )

    __table_args__ = (
        CheckConstraint("total_price >= 0", name="check_total_price_non_negative"),
        CheckConstraint(
            "refund_percentage >= 0 AND refund_percentage <= 100", name="check_refund_percentage"
        ),
    )

    def __repr__(self) -> str:
        return f"<Booking {self.id} client={self.client_id} trainer={self.trainer_id} {self.status}>"

    def is_participant(self, user_id: str) -> bool:
        return user_id in (self.client_id, self.trainer_id)

    # ------------------------------------------------------------------
    # Audit trail
    # ------------------------------------------------------------------

    def record_status(
        self, status: str, changed_by_id: Optional[str], notes: Optional[str] = None
    ) -> "BookingStatusChange":
        """Set the status and append the matching history entry."""
        self.status = status
        entry = BookingStatusChange(
            status=status,
            changed_by_id=changed_by_id,
            notes=notes,
            timestamp=utc_now(),
            sequence=len(self.status_history),
        )
        self.status_history.append(entry)
        return entry

    def record_payment(
        self,
        payment_status: str,
        updated_by_id: Optional[str],
        transaction_id: Optional[str] = None,
        payment_method: Optional[str] = None,
    ) -> "BookingPaymentChange":
        """Set payment fields and append the matching payment history entry."""
        self.payment_status = payment_status
        if transaction_id:
            self.transaction_id = transaction_id
        if payment_method:
            self.payment_method = payment_method
        entry = BookingPaymentChange(
            status=payment_status,
            transaction_id=self.transaction_id,
            payment_method=self.payment_method,
            updated_by_id=updated_by_id,
            timestamp=utc_now(),
            sequence=len(self.payment_history),
        )
        self.payment_history.append(entry)
        return entry

    # ------------------------------------------------------------------
    # Derived values
    # ------------------------------------------------------------------

    @property
    def total_sessions(self) -> int:
        return len(self.items)

    @property
    def total_duration_hours(self) -> float:
        return sum(item.duration for item in self.items) / 60

    @property
    def average_price_per_session(self) -> Decimal:
        if not self.items:
            return Decimal("0.00")
        return (Decimal(self.total_price) / len(self.items)).quantize(CENTS, ROUND_HALF_UP)

    def next_session_date(self, now: Optional[datetime] = None) -> Optional[datetime]:
        """Earliest line item date still in the future."""
        now = now or utc_now()
        upcoming = [
            ensure_utc(item.starts_at)
            for item in self.items
            if ensure_utc(item.starts_at) > now
        ]
        return min(upcoming) if upcoming else None

    def can_be_cancelled(self, now: Optional[datetime] = None) -> bool:
        """
        Whether cancelling now qualifies for the refund policy.

        Requires a pending/confirmed status, an upcoming session, and at
        least ``cancellation_hours_before`` hours until that session.
        """
        now = now or utc_now()
        if self.status not in CANCELLABLE_STATUSES:
            return False
        next_date = self.next_session_date(now)
        if next_date is None:
            return False
        return (next_date - now) >= timedelta(hours=self.cancellation_hours_before)

    def calculate_refund_amount(self, now: Optional[datetime] = None) -> Decimal:
        if not self.can_be_cancelled(now):
            return Decimal("0.00")
        refund = Decimal(self.total_price) * Decimal(self.refund_percentage) / Decimal(100)
        return refund.quantize(CENTS, ROUND_HALF_UP)


class BookingItem(Base):
    """
    One priced session request inside a booking.

    ``session_id`` is filled in once the booking is confirmed and the
    item has been materialized into a TrainingSession.
    """

    __tablename__ = "booking_items"

    id = Column(String(26), primary_key=True, index=True, default=lambda: str(ulid.ULID()))
    booking_id = Column(
        String(26), ForeignKey("bookings.id", ondelete="CASCADE"), nullable=False, index=True
    )
    position = Column(Integer, nullable=False, default=0)
    service_name = Column(String(100), nullable=False)
    session_type = Column(String(20), nullable=False, default="in-person")
    duration = Column(Integer, nullable=False)
    starts_at = Column(DateTime(timezone=True), nullable=False)
    price = Column(Numeric(10, 2), nullable=False)
    service_id = Column(String(26), ForeignKey("trainer_services.id", ondelete="SET NULL"), nullable=True)
    session_id = Column(
        String(26), ForeignKey("training_sessions.id", ondelete="SET NULL"), nullable=True
    )

    booking = relationship("Booking", back_populates="items")
    session = relationship("TrainingSession")

    __table_args__ = (
        CheckConstraint("duration >= 15 AND duration <= 480", name="check_item_duration"),
        CheckConstraint("price >= 0", name="check_item_price_non_negative"),
    )


class BookingStatusChange(Base):
    """Append-only audit entry for a booking status change."""

    __tablename__ = "booking_status_changes"

    id = Column(String(26), primary_key=True, index=True, default=lambda: str(ulid.ULID()))
    booking_id = Column(
        String(26), ForeignKey("bookings.id", ondelete="CASCADE"), nullable=False, index=True
    )
    sequence = Column(Integer, nullable=False, default=0)
    status = Column(String(20), nullable=False)
    changed_by_id = Column(String(26), ForeignKey("users.id"), nullable=True)
    timestamp = Column(DateTime(timezone=True), nullable=False, default=utc_now)
    notes = Column(Text, nullable=True)

    booking = relationship("Booking", back_populates="status_history")


class BookingPaymentChange(Base):
    """Append-only audit entry for a payment status change."""

    __tablename__ = "booking_payment_changes"

    id = Column(String(26), primary_key=True, index=True, default=lambda: str(ulid.ULID()))
    booking_id = Column(
        String(26), ForeignKey("bookings.id", ondelete="CASCADE"), nullable=False, index=True
    )
    sequence = Column(Integer, nullable=False, default=0)
    status = Column(String(20), nullable=False)
    transaction_id = Column(String(255), nullable=True)
    payment_method = Column(String(20), nullable=True)
    updated_by_id = Column(String(26), ForeignKey("users.id"), nullable=True)
    timestamp = Column(DateTime(timezone=True), nullable=False, default=utc_now)

    booking = relationship("Booking", back_populates="payment_history")
