# backend/alembic/versions/002_sessions_and_bookings.py
"""Training sessions and bookings

Revision ID: 002_sessions_and_bookings
Revises: 001_users_and_trainers
Create Date: 2026-09-01 00:10:00.000000

Sessions with their status history, bookings with priced line items and
the booking status/payment audit tables. ``booking_items.session_id``
links an item to the session created when the booking is confirmed.
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = "002_sessions_and_bookings"
down_revision: Union[str, None] = "001_users_and_trainers"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    print("Creating session and booking tables...")

    op.create_table(
        "training_sessions",
        sa.Column("id", sa.String(26), primary_key=True),
        sa.Column("client_id", sa.String(26), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("trainer_id", sa.String(26), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("session_type", sa.String(20), nullable=False, server_default="in-person"),
        sa.Column("service_type", sa.String(100), nullable=True),
        sa.Column("duration", sa.Integer(), nullable=False),
        sa.Column("starts_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("status", sa.String(20), nullable=False, server_default="scheduled"),
        sa.Column("address", sa.String(255), nullable=True),
        sa.Column("city", sa.String(100), nullable=True),
        sa.Column("state", sa.String(100), nullable=True),
        sa.Column("zip_code", sa.String(20), nullable=True),
        sa.Column("latitude", sa.Float(), nullable=True),
        sa.Column("longitude", sa.Float(), nullable=True),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("price_amount", sa.Numeric(10, 2), nullable=False, server_default="0"),
        sa.Column("currency", sa.String(3), nullable=False, server_default="USD"),
        sa.Column("is_paid", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("rating_score", sa.Integer(), nullable=True),
        sa.Column("rating_comment", sa.Text(), nullable=True),
        sa.Column("rated_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("is_recurring", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("recurrence_frequency", sa.String(10), nullable=True),
        sa.Column("recurrence_interval", sa.Integer(), nullable=True),
        sa.Column("recurrence_end_date", sa.DateTime(timezone=True), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
        sa.CheckConstraint("duration >= 15 AND duration <= 480", name="check_session_duration"),
        sa.CheckConstraint(
            "rating_score IS NULL OR (rating_score >= 1 AND rating_score <= 5)",
            name="check_session_rating_range",
        ),
    )
    op.create_index("ix_training_sessions_id", "training_sessions", ["id"])
    op.create_index("ix_training_sessions_client_id", "training_sessions", ["client_id"])
    op.create_index("ix_training_sessions_trainer_id", "training_sessions", ["trainer_id"])
    op.create_index("ix_training_sessions_status", "training_sessions", ["status"])
    # Conflict checks scan a trainer's sessions by start time
    op.create_index(
        "ix_training_sessions_trainer_starts", "training_sessions", ["trainer_id", "starts_at"]
    )

    op.create_table(
        "session_status_changes",
        sa.Column("id", sa.String(26), primary_key=True),
        sa.Column(
            "session_id",
            sa.String(26),
            sa.ForeignKey("training_sessions.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("sequence", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("status", sa.String(20), nullable=False),
        sa.Column("changed_by_id", sa.String(26), sa.ForeignKey("users.id"), nullable=True),
        sa.Column("timestamp", sa.DateTime(timezone=True), nullable=False),
        sa.Column("notes", sa.Text(), nullable=True),
    )
    op.create_index("ix_session_status_changes_id", "session_status_changes", ["id"])
    op.create_index(
        "ix_session_status_changes_session_id", "session_status_changes", ["session_id"]
    )

    op.create_table(
        "bookings",
        sa.Column("id", sa.String(26), primary_key=True),
        sa.Column("client_id", sa.String(26), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("trainer_id", sa.String(26), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("booking_type", sa.String(20), nullable=False, server_default="single"),
        sa.Column("total_price", sa.Numeric(10, 2), nullable=False, server_default="0"),
        sa.Column("payment_method", sa.String(20), nullable=False),
        sa.Column("payment_status", sa.String(20), nullable=False, server_default="pending"),
        sa.Column("transaction_id", sa.String(255), nullable=True),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("special_requests", sa.Text(), nullable=True),
        sa.Column("status", sa.String(20), nullable=False, server_default="pending"),
        sa.Column("cancellation_hours_before", sa.Integer(), nullable=False, server_default="24"),
        sa.Column("refund_percentage", sa.Integer(), nullable=False, server_default="100"),
        sa.Column("is_recurring", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("recurrence_frequency", sa.String(10), nullable=True),
        sa.Column("recurrence_interval", sa.Integer(), nullable=True),
        sa.Column("recurrence_end_date", sa.DateTime(timezone=True), nullable=True),
        sa.Column("recurrence_days_of_week", sa.JSON(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
        sa.CheckConstraint("total_price >= 0", name="check_total_price_non_negative"),
        sa.CheckConstraint(
            "refund_percentage >= 0 AND refund_percentage <= 100", name="check_refund_percentage"
        ),
    )
    op.create_index("ix_bookings_id", "bookings", ["id"])
    op.create_index("ix_bookings_client_id", "bookings", ["client_id"])
    op.create_index("ix_bookings_trainer_id", "bookings", ["trainer_id"])
    op.create_index("ix_bookings_status", "bookings", ["status"])

    op.create_table(
        "booking_items",
        sa.Column("id", sa.String(26), primary_key=True),
        sa.Column(
            "booking_id",
            sa.String(26),
            sa.ForeignKey("bookings.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("position", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("service_name", sa.String(100), nullable=False),
        sa.Column("session_type", sa.String(20), nullable=False, server_default="in-person"),
        sa.Column("duration", sa.Integer(), nullable=False),
        sa.Column("starts_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("price", sa.Numeric(10, 2), nullable=False),
        sa.Column(
            "service_id",
            sa.String(26),
            sa.ForeignKey("trainer_services.id", ondelete="SET NULL"),
            nullable=True,
        ),
        sa.Column(
            "session_id",
            sa.String(26),
            sa.ForeignKey("training_sessions.id", ondelete="SET NULL"),
            nullable=True,
        ),
        sa.CheckConstraint("duration >= 15 AND duration <= 480", name="check_item_duration"),
        sa.CheckConstraint("price >= 0", name="check_item_price_non_negative"),
    )
    op.create_index("ix_booking_items_id", "booking_items", ["id"])
    op.create_index("ix_booking_items_booking_id", "booking_items", ["booking_id"])

    op.create_table(
        "booking_status_changes",
        sa.Column("id", sa.String(26), primary_key=True),
        sa.Column(
            "booking_id",
            sa.String(26),
            sa.ForeignKey("bookings.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("sequence", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("status", sa.String(20), nullable=False),
        sa.Column("changed_by_id", sa.String(26), sa.ForeignKey("users.id"), nullable=True),
        sa.Column("timestamp", sa.DateTime(timezone=True), nullable=False),
        sa.Column("notes", sa.Text(), nullable=True),
    )
    op.create_index("ix_booking_status_changes_id", "booking_status_changes", ["id"])
    op.create_index(
        "ix_booking_status_changes_booking_id", "booking_status_changes", ["booking_id"]
    )

    op.create_table(
        "booking_payment_changes",
        sa.Column("id", sa.String(26), primary_key=True),
        sa.Column(
            "booking_id",
            sa.String(26),
            sa.ForeignKey("bookings.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("sequence", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("status", sa.String(20), nullable=False),
        sa.Column("transaction_id", sa.String(255), nullable=True),
        sa.Column("payment_method", sa.String(20), nullable=True),
        sa.Column("updated_by_id", sa.String(26), sa.ForeignKey("users.id"), nullable=True),
        sa.Column("timestamp", sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index("ix_booking_payment_changes_id", "booking_payment_changes", ["id"])
    op.create_index(
        "ix_booking_payment_changes_booking_id", "booking_payment_changes", ["booking_id"]
    )

    print("Session and booking tables created")


def downgrade() -> None:
    print("Dropping session and booking tables...")
    op.drop_table("booking_payment_changes")
    op.drop_table("booking_status_changes")
    op.drop_table("booking_items")
    op.drop_table("bookings")
    op.drop_table("session_status_changes")
    op.drop_table("training_sessions")
