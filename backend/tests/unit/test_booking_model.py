"""
Tests for Booking derived values and the cancellation/refund policy.
"""

from datetime import datetime, timedelta, timezone
from decimal import Decimal

import pytest

from app.models.booking import Booking, BookingItem, BookingStatus, PaymentStatus

NOW = datetime(2030, 3, 4, 12, 0, tzinfo=timezone.utc)


def _booking(*starts_in_hours, status=BookingStatus.PENDING.value, total="150.00", refund_pct=100):
    booking = Booking(
        client_id="client",
        trainer_id="trainer",
        booking_type="package",
        payment_method="cash",
        total_price=Decimal(total),
        cancellation_hours_before=24,
        refund_percentage=refund_pct,
    )
    booking.items = [
        BookingItem(
            position=i,
            service_name="Personal Training",
            session_type="in-person",
            duration=60 if i % 2 == 0 else 30,
            starts_at=NOW + timedelta(hours=hours),
            price=Decimal("50.00"),
        )
        for i, hours in enumerate(starts_in_hours)
    ]
    booking.record_status(status, "client")
    return booking


def test_summary_values():
    booking = _booking(48, 72, 96)

    assert booking.total_sessions == 3
    assert booking.total_duration_hours == pytest.approx(2.5)
    assert booking.average_price_per_session == Decimal("50.00")


def test_average_price_without_items():
    booking = _booking()
    assert booking.average_price_per_session == Decimal("0.00")


def test_next_session_skips_past_items():
    booking = _booking(-5, 72, 30)
    assert booking.next_session_date(NOW) == NOW + timedelta(hours=30)


def test_next_session_none_when_all_past():
    booking = _booking(-5, -1)
    assert booking.next_session_date(NOW) is None


def test_full_refund_outside_policy_window():
    booking = _booking(48)
    assert booking.can_be_cancelled(NOW)
    assert booking.calculate_refund_amount(NOW) == Decimal("150.00")


def test_policy_window_boundary_is_inclusive():
    booking = _booking(24)
    assert booking.can_be_cancelled(NOW)


def test_no_refund_inside_policy_window():
    booking = _booking(23)
    assert not booking.can_be_cancelled(NOW)
    assert booking.calculate_refund_amount(NOW) == Decimal("0.00")


def test_partial_refund_percentage():
    booking = _booking(48, total="99.99", refund_pct=50)
    assert booking.calculate_refund_amount(NOW) == Decimal("50.00")


@pytest.mark.parametrize("status", [BookingStatus.CANCELLED.value, BookingStatus.COMPLETED.value])
def test_closed_bookings_cannot_be_cancelled(status):
    booking = _booking(48, status=status)
    assert not booking.can_be_cancelled(NOW)
    assert booking.calculate_refund_amount(NOW) == Decimal("0.00")


def test_status_history_is_append_only():
    booking = _booking(48)
    booking.record_status(BookingStatus.CONFIRMED.value, "trainer", "See you there")
    booking.record_status(BookingStatus.CANCELLED.value, "client")

    assert booking.status == BookingStatus.CANCELLED.value
    assert [h.status for h in booking.status_history] == ["pending", "confirmed", "cancelled"]
    assert [h.sequence for h in booking.status_history] == [0, 1, 2]
    assert booking.status_history[1].notes == "See you there"
    assert booking.status_history[1].changed_by_id == "trainer"


def test_record_payment_keeps_previous_transaction():
    booking = _booking(48)
    booking.record_payment(PaymentStatus.PAID.value, "client", transaction_id="txn_1")
    booking.record_payment(PaymentStatus.REFUNDED.value, "client", payment_method="paypal")

    assert booking.payment_status == PaymentStatus.REFUNDED.value
    assert booking.transaction_id == "txn_1"
    assert booking.payment_method == "paypal"
    assert [p.status for p in booking.payment_history] == ["paid", "refunded"]
    assert booking.payment_history[1].transaction_id == "txn_1"


def test_participants():
    booking = _booking(48)
    assert booking.is_participant("client")
    assert booking.is_participant("trainer")
    assert not booking.is_participant("someone-else")
