"""
Tests for ConflictChecker schedule rules.

The conflict window is [start - duration, start + duration] inclusive,
sized by the requested session, and only scheduled/in-progress sessions
block it.
"""

from datetime import datetime, timedelta, timezone

import pytest

from app.core.exceptions import (
    BookingConflictException,
    TrainerUnavailableException,
    ValidationException,
)
from app.models.training_session import SessionStatus, TrainingSession
from app.services.conflict_checker import ConflictChecker, conflict_window


@pytest.fixture
def checker(db):
    return ConflictChecker(db)


@pytest.fixture
def existing_start(slot_at):
    return slot_at(0, hour=10)  # a Monday


def _add_session(db, client, trainer, start, duration=60, status=SessionStatus.SCHEDULED.value):
    session = TrainingSession(
        client_id=client.id,
        trainer_id=trainer.id,
        session_type="in-person",
        duration=duration,
        starts_at=start,
        price_amount=0,
    )
    session.record_status(status, client.id)
    db.add(session)
    db.commit()
    return session


def test_conflict_window_is_symmetric():
    start = datetime(2030, 1, 7, 10, 0, tzinfo=timezone.utc)
    assert conflict_window(start, 45) == (
        datetime(2030, 1, 7, 9, 15, tzinfo=timezone.utc),
        datetime(2030, 1, 7, 10, 45, tzinfo=timezone.utc),
    )


def test_conflict_window_treats_naive_as_utc():
    window_start, _ = conflict_window(datetime(2030, 1, 7, 10, 0), 60)
    assert window_start.tzinfo == timezone.utc


def test_past_start_is_rejected():
    past = datetime.now(timezone.utc) - timedelta(minutes=5)
    with pytest.raises(ValidationException) as exc_info:
        ConflictChecker.ensure_not_in_past(past)
    assert exc_info.value.message == "Session date cannot be in the past"


def test_unavailable_weekday(checker, test_trainer_profile, availability_factory, existing_start):
    test_trainer_profile.availability = availability_factory(
        monday={"start": None, "end": None, "available": False}
    )
    with pytest.raises(TrainerUnavailableException) as exc_info:
        checker.ensure_trainer_available(test_trainer_profile, existing_start)
    assert exc_info.value.details == {"day": "monday"}

    # Tuesday is still fine
    checker.ensure_trainer_available(test_trainer_profile, existing_start + timedelta(days=1))


def test_overlap_at_window_edge_conflicts(
    db, checker, test_client_user, test_trainer, existing_start
):
    _add_session(db, test_client_user, test_trainer, existing_start)

    # Existing start sits exactly on the lower bound of [T+60-60, T+60+60]
    with pytest.raises(BookingConflictException) as exc_info:
        checker.ensure_no_conflicts(test_trainer.id, existing_start + timedelta(minutes=60), 60)

    assert exc_info.value.status_code == 409
    assert len(exc_info.value.details["conflicts"]) == 1


def test_just_outside_window_is_free(db, checker, test_client_user, test_trainer, existing_start):
    _add_session(db, test_client_user, test_trainer, existing_start)

    assert checker.check_session_conflicts(
        test_trainer.id, existing_start + timedelta(minutes=61), 60
    ) == []


def test_window_uses_requested_duration(
    db, checker, test_client_user, test_trainer, existing_start
):
    # A four hour session is not seen by a short request 90 minutes later
    _add_session(db, test_client_user, test_trainer, existing_start, duration=240)

    assert checker.check_session_conflicts(
        test_trainer.id, existing_start + timedelta(minutes=90), 60
    ) == []


@pytest.mark.parametrize(
    "status",
    [SessionStatus.CANCELLED.value, SessionStatus.COMPLETED.value, SessionStatus.NO_SHOW.value],
)
def test_non_blocking_statuses_are_ignored(
    db, checker, test_client_user, test_trainer, existing_start, status
):
    _add_session(db, test_client_user, test_trainer, existing_start, status=status)

    assert checker.check_session_conflicts(test_trainer.id, existing_start, 60) == []


def test_in_progress_session_blocks(db, checker, test_client_user, test_trainer, existing_start):
    _add_session(
        db, test_client_user, test_trainer, existing_start, status=SessionStatus.IN_PROGRESS.value
    )

    assert len(checker.check_session_conflicts(test_trainer.id, existing_start, 30)) == 1


def test_excluded_session_is_ignored(db, checker, test_client_user, test_trainer, existing_start):
    session = _add_session(db, test_client_user, test_trainer, existing_start)

    checker.ensure_no_conflicts(
        test_trainer.id, existing_start, 60, exclude_session_id=session.id
    )


def test_other_trainers_do_not_conflict(
    db, checker, test_client_user, test_trainer, test_other_user, existing_start
):
    _add_session(db, test_client_user, test_other_user, existing_start)

    assert checker.check_session_conflicts(test_trainer.id, existing_start, 60) == []


def test_validate_session_slot_runs_every_rule(
    db, checker, test_client_user, test_trainer, test_trainer_profile, existing_start
):
    _add_session(db, test_client_user, test_trainer, existing_start)

    with pytest.raises(BookingConflictException):
        checker.validate_session_slot(test_trainer_profile, existing_start + timedelta(minutes=30), 60)

    checker.validate_session_slot(test_trainer_profile, existing_start + timedelta(hours=3), 60)
