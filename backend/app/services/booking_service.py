# backend/app/services/booking_service.py
"""
Booking Service for the TrainerLocator platform.

Handles the booking lifecycle:
- Creation: line items are priced from the trainer's service catalog
- Status changes, each appended to the booking's status history
- Cancellation cascades to every session materialized from the booking
- Confirmation materializes line items into scheduled TrainingSessions,
  each passing the trainer conflict check; one conflict rejects the
  whole confirmation and nothing is written
- Payment updates, each appended to the payment history
"""

from decimal import Decimal
import logging
from typing import Any, Dict, List, Optional, Tuple

from sqlalchemy.orm import Session

from ..core.config import settings
from ..core.exceptions import ForbiddenException, NotFoundException, ValidationException
from ..core.timezone_utils import ensure_utc
from ..models.booking import (
    CANCELLABLE_STATUSES,
    Booking,
    BookingItem,
    BookingStatus,
    BookingType,
    PaymentMethod,
    PaymentStatus,
)
from ..models.training_session import SessionStatus, SessionType, TrainingSession
from ..models.user import User
from ..monitoring.prometheus_metrics import prometheus_metrics
from ..repositories.booking_repository import BookingRepository
from ..repositories.factory import RepositoryFactory
from ..repositories.trainer_repository import TrainerRepository
from ..repositories.training_session_repository import TrainingSessionRepository
from .base import BaseService
from .conflict_checker import ConflictChecker
from .pricing_service import PricingService, total_price

logger = logging.getLogger(__name__)

BOOKING_CREATED_NOTE = "Booking created"
BOOKING_CANCELLED_NOTE = "Booking cancelled by user"
SESSION_CASCADE_NOTE = "Cancelled due to booking cancellation"
SESSION_FROM_BOOKING_NOTE = "Scheduled from booking confirmation"


class BookingService(BaseService):
    """
    Service layer for booking operations.

    ``Booking.trainer_id`` is the trainer's user id, so participant checks
    compare user ids on both sides.
    """

    def __init__(
        self,
        db: Session,
        repository: Optional[BookingRepository] = None,
        trainer_repository: Optional[TrainerRepository] = None,
        session_repository: Optional[TrainingSessionRepository] = None,
        conflict_checker: Optional[ConflictChecker] = None,
        pricing_service: Optional[PricingService] = None,
    ):
        super().__init__(db)
        self.logger = logging.getLogger(__name__)
        self.repository = repository or RepositoryFactory.create_booking_repository(db)
        self.trainer_repository = trainer_repository or RepositoryFactory.create_trainer_repository(db)
        self.session_repository = (
            session_repository or RepositoryFactory.create_training_session_repository(db)
        )
        self.conflict_checker = conflict_checker or ConflictChecker(db, self.session_repository)
        self.pricing_service = pricing_service or PricingService(db)

    def _get_for_participant(self, user: User, booking_id: str) -> Booking:
        booking = self.repository.get_by_id(booking_id)
        if booking is None:
            raise NotFoundException("Booking not found", code="BOOKING_NOT_FOUND")
        if not booking.is_participant(user.id):
            self.logger.warning(f"User {user.id} denied access to booking {booking_id}")
            raise ForbiddenException("Access denied", code="ACCESS_DENIED")
        return booking

    # ------------------------------------------------------------------
    # Creation
    # ------------------------------------------------------------------

    @BaseService.measure_operation("create_booking")
    def create_booking(self, client: User, data: Dict[str, Any]) -> Booking:
        """
        Create a pending booking.

        Args:
            client: The booking user
            data: trainer_id (profile id or user id), booking_type,
                sessions [{service_name, session_type, duration, starts_at}],
                payment_method, notes, special_requests

        Raises:
            NotFoundException: Trainer missing or inactive
            NoServicesAvailableException: Trainer has no services to price against
            ValidationException: A line item starts in the past
        """
        trainer = self.trainer_repository.resolve(data["trainer_id"])
        if trainer is None or not trainer.is_active:
            raise NotFoundException("Trainer not found or inactive", code="TRAINER_NOT_FOUND")

        requested = data["sessions"]
        starts = [ensure_utc(line["starts_at"]) for line in requested]
        for start in starts:
            self.conflict_checker.ensure_not_in_past(start)

        payment_method = PaymentMethod(data["payment_method"]).value
        priced = self.pricing_service.price_lines(
            trainer, [(line["service_name"], line["duration"]) for line in requested]
        )

        with self.transaction():
            booking = Booking(
                client_id=client.id,
                trainer_id=trainer.user_id,
                booking_type=BookingType(data.get("booking_type") or BookingType.SINGLE).value,
                payment_method=payment_method,
                payment_status=PaymentStatus.PENDING.value,
                notes=data.get("notes"),
                special_requests=data.get("special_requests"),
                total_price=total_price(line.amount for line in priced),
                cancellation_hours_before=settings.default_cancellation_hours,
                refund_percentage=settings.default_refund_percentage,
            )
            booking.items = [
                BookingItem(
                    position=position,
                    service_name=line["service_name"],
                    session_type=SessionType(line.get("session_type") or SessionType.IN_PERSON).value,
                    duration=line["duration"],
                    starts_at=start,
                    price=quote.price,
                    service_id=quote.service.id,
                )
                for position, (line, start, quote) in enumerate(zip(requested, starts, priced))
            ]
            booking.record_status(BookingStatus.PENDING.value, client.id, BOOKING_CREATED_NOTE)
            booking.record_payment(
                PaymentStatus.PENDING.value, client.id, payment_method=payment_method
            )
            self.repository.add(booking)

        prometheus_metrics.inc_booking_status_change(BookingStatus.PENDING.value)
        self.logger.info(
            f"Booking {booking.id} created by {client.id} for trainer {trainer.user_id}: "
            f"{len(booking.items)} session(s), total {booking.total_price}"
        )
        return booking

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    @BaseService.measure_operation("list_bookings")
    def list_bookings(
        self, user: User, status: Optional[str] = None, page: int = 1, per_page: int = 10
    ) -> Tuple[List[Booking], int]:
        return self.repository.list_for_user(
            user.id,
            as_trainer=user.is_trainer,
            status=status,
            page=page,
            per_page=per_page,
        )

    @BaseService.measure_operation("list_trainer_bookings")
    def list_trainer_bookings(
        self, trainer_id: str, status: Optional[str] = None, page: int = 1, per_page: int = 10
    ) -> Tuple[List[Booking], int]:
        """Public listing; ``trainer_id`` is the trainer's user id."""
        return self.repository.list_for_trainer(trainer_id, status=status, page=page, per_page=per_page)

    @BaseService.measure_operation("get_booking")
    def get_booking(self, user: User, booking_id: str) -> Booking:
        return self._get_for_participant(user, booking_id)

    # ------------------------------------------------------------------
    # Status changes
    # ------------------------------------------------------------------

    def _cascade_cancel(self, booking: Booking, actor_id: str) -> int:
        """Cancel every session materialized from ``booking``."""
        session_ids = [item.session_id for item in booking.items if item.session_id]
        sessions = self.session_repository.get_many(session_ids)
        for session in sessions:
            session.record_status(SessionStatus.CANCELLED.value, actor_id, SESSION_CASCADE_NOTE)
        return len(sessions)

    def _materialize_sessions(self, booking: Booking, actor_id: str) -> List[TrainingSession]:
        """
        Turn line items without a session into scheduled sessions.

        Each new session is flushed before the next item is checked, so
        two items of the same booking also conflict with each other.
        """
        created: List[TrainingSession] = []
        for item in booking.items:
            if item.session_id:
                continue
            start = ensure_utc(item.starts_at)
            self.conflict_checker.ensure_no_conflicts(booking.trainer_id, start, item.duration)
            session = TrainingSession(
                client_id=booking.client_id,
                trainer_id=booking.trainer_id,
                session_type=item.session_type,
                service_type=item.service_name,
                duration=item.duration,
                starts_at=start,
                price_amount=item.price,
            )
            session.record_status(SessionStatus.SCHEDULED.value, actor_id, SESSION_FROM_BOOKING_NOTE)
            self.session_repository.add(session)
            item.session_id = session.id
            created.append(session)
        return created

    @BaseService.measure_operation("update_booking_status")
    def update_booking_status(
        self, user: User, booking_id: str, status: str, notes: Optional[str] = None
    ) -> Booking:
        """
        Set any booking status and audit it.

        Raises:
            BookingConflictException: Confirming would double-book the trainer
        """
        booking = self._get_for_participant(user, booking_id)
        status = BookingStatus(status).value
        previous = booking.status

        created: List[TrainingSession] = []
        with self.transaction():
            if status == BookingStatus.CONFIRMED.value:
                created = self._materialize_sessions(booking, user.id)
                if created:
                    self.logger.info(f"Booking {booking.id}: scheduled {len(created)} session(s)")
            elif status == BookingStatus.CANCELLED.value:
                cancelled = self._cascade_cancel(booking, user.id)
                if cancelled:
                    self.logger.info(f"Booking {booking.id}: cancelled {cancelled} linked session(s)")

            if notes:
                booking.notes = notes
            booking.record_status(status, user.id, notes)
            self.repository.flush()

        prometheus_metrics.inc_booking_status_change(status)
        for session in created:
            prometheus_metrics.inc_session_created(session.session_type, "booking")
        self.logger.info(f"Booking {booking.id} status {previous} -> {status} by {user.id}")
        return booking

    @BaseService.measure_operation("cancel_booking")
    def cancel_booking(self, user: User, booking_id: str) -> Tuple[Booking, Decimal]:
        """
        Cancel a pending or confirmed booking.

        Returns:
            (booking, refund) where refund is what the policy grants at the
            moment of cancelling
        """
        booking = self._get_for_participant(user, booking_id)
        if booking.status not in CANCELLABLE_STATUSES:
            raise ValidationException(
                "Cannot cancel booking in current status",
                code="BOOKING_NOT_CANCELLABLE",
                details={"status": booking.status},
            )

        refund = booking.calculate_refund_amount()
        with self.transaction():
            self._cascade_cancel(booking, user.id)
            booking.record_status(BookingStatus.CANCELLED.value, user.id, BOOKING_CANCELLED_NOTE)
            self.repository.flush()

        prometheus_metrics.inc_booking_status_change(BookingStatus.CANCELLED.value)
        self.logger.info(f"Booking {booking.id} cancelled by {user.id}, refund {refund}")
        return booking, refund

    @BaseService.measure_operation("update_payment")
    def update_payment(
        self,
        user: User,
        booking_id: str,
        payment_status: str,
        transaction_id: Optional[str] = None,
        payment_method: Optional[str] = None,
    ) -> Booking:
        booking = self._get_for_participant(user, booking_id)
        with self.transaction():
            booking.record_payment(
                PaymentStatus(payment_status).value,
                user.id,
                transaction_id=transaction_id,
                payment_method=PaymentMethod(payment_method).value if payment_method else None,
            )
            self.repository.flush()
        self.logger.info(f"Booking {booking.id} payment -> {booking.payment_status} by {user.id}")
        return booking
