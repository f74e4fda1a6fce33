"""
Tests for TrainingSession derived values.
"""

from datetime import datetime, timedelta, timezone

from app.core.timezone_utils import utc_now
from app.models.training_session import SessionStatus, TrainingSession
from app.schemas.training_session import SessionResponse
from app.services.training_session_service import completion_rate

NOW = datetime(2030, 3, 4, 12, 0, tzinfo=timezone.utc)


def _session(starts_at, duration=90):
    return TrainingSession(
        client_id="client",
        trainer_id="trainer",
        session_type="in-person",
        duration=duration,
        starts_at=starts_at,
    )


def test_end_time_and_hours():
    session = _session(NOW, duration=90)
    assert session.end_time == NOW + timedelta(minutes=90)
    assert session.duration_hours == 1.5


def test_naive_start_is_read_as_utc():
    session = _session(datetime(2030, 3, 4, 12, 0))
    assert session.start_time == NOW


def test_upcoming_window():
    assert _session(NOW + timedelta(hours=2)).is_upcoming(NOW)
    assert _session(NOW + timedelta(hours=24)).is_upcoming(NOW)
    assert not _session(NOW + timedelta(hours=25)).is_upcoming(NOW)
    assert not _session(NOW - timedelta(minutes=1)).is_upcoming(NOW)


def test_past_and_today():
    earlier = _session(NOW - timedelta(hours=1))
    assert earlier.is_past(NOW)
    assert earlier.is_today(NOW)
    assert not _session(NOW + timedelta(days=1)).is_today(NOW)


def test_record_status_appends_history():
    session = _session(NOW)
    session.record_status(SessionStatus.SCHEDULED.value, "client", "Session created")
    session.record_status(SessionStatus.COMPLETED.value, "trainer")

    assert session.status == SessionStatus.COMPLETED.value
    assert [h.status for h in session.status_history] == ["scheduled", "completed"]
    assert session.status_history[0].notes == "Session created"


def test_completion_rate():
    assert completion_rate(0, 0) == 0.0
    assert completion_rate(1, 3) == 33.3
    assert completion_rate(2, 3) == 66.7
    assert completion_rate(4, 4) == 100.0


def test_response_exposes_derived_flags():
    session = _session(utc_now() - timedelta(days=2))
    session.id = "01HZZZZZZZZZZZZZZZZZZZZZZZ"
    session.status = SessionStatus.COMPLETED.value
    session.currency = "USD"
    session.is_paid = False

    body = SessionResponse.from_session(session).model_dump()

    assert body["is_past"] is True
    assert body["is_today"] is False
    assert body["is_upcoming"] is False
