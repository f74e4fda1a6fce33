# backend/alembic/versions/001_users_and_trainers.py
"""Users and trainer profiles

Revision ID: 001_users_and_trainers
Revises:
Create Date: 2026-09-01 00:00:00.000000

Accounts plus trainer profiles with their ordered service catalog,
certifications, achievements and reviews.
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = "001_users_and_trainers"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    print("Creating users and trainer tables...")

    op.create_table(
        "users",
        sa.Column("id", sa.String(26), primary_key=True),
        sa.Column("name", sa.String(50), nullable=False),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("hashed_password", sa.String(), nullable=False),
        sa.Column("role", sa.String(20), nullable=False, server_default="user"),
        sa.Column("bio", sa.Text(), nullable=True),
        sa.Column("phone", sa.String(20), nullable=True),
        sa.Column("location", sa.String(255), nullable=True),
        sa.Column("profile_image", sa.String(500), nullable=True),
        sa.Column("is_verified", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("last_login", sa.DateTime(timezone=True), nullable=True),
        sa.Column("notifications_enabled", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("email_updates", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index("ix_users_id", "users", ["id"])
    op.create_index("ix_users_email", "users", ["email"], unique=True)
    op.create_index("ix_users_role", "users", ["role"])

    op.create_table(
        "trainer_profiles",
        sa.Column("id", sa.String(26), primary_key=True),
        sa.Column(
            "user_id",
            sa.String(26),
            sa.ForeignKey("users.id", ondelete="CASCADE"),
            nullable=False,
            unique=True,
        ),
        sa.Column("specialization", sa.String(100), nullable=False),
        sa.Column("experience_years", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("experience_description", sa.Text(), nullable=True),
        sa.Column("availability", sa.JSON(), nullable=False),
        sa.Column("address", sa.String(255), nullable=True),
        sa.Column("city", sa.String(100), nullable=True),
        sa.Column("state", sa.String(100), nullable=True),
        sa.Column("zip_code", sa.String(20), nullable=True),
        sa.Column("country", sa.String(100), nullable=True, server_default="USA"),
        sa.Column("latitude", sa.Float(), nullable=True),
        sa.Column("longitude", sa.Float(), nullable=True),
        sa.Column("rating_average", sa.Float(), nullable=False, server_default="0"),
        sa.Column("rating_count", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("total_clients", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("active_clients", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("social_media", sa.JSON(), nullable=False),
        sa.Column("tags", sa.JSON(), nullable=False),
        sa.Column("is_verified", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("featured", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
        sa.CheckConstraint("experience_years >= 0", name="check_experience_non_negative"),
        sa.CheckConstraint(
            "rating_average >= 0 AND rating_average <= 5", name="check_rating_average_range"
        ),
    )
    op.create_index("ix_trainer_profiles_id", "trainer_profiles", ["id"])
    op.create_index("ix_trainer_profiles_specialization", "trainer_profiles", ["specialization"])
    op.create_index("ix_trainer_profiles_city", "trainer_profiles", ["city"])
    op.create_index("ix_trainer_profiles_is_active", "trainer_profiles", ["is_active"])

    op.create_table(
        "trainer_services",
        sa.Column("id", sa.String(26), primary_key=True),
        sa.Column(
            "trainer_id",
            sa.String(26),
            sa.ForeignKey("trainer_profiles.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("duration", sa.Integer(), nullable=False, server_default="60"),
        sa.Column("price", sa.Numeric(10, 2), nullable=False),
        sa.Column("position", sa.Integer(), nullable=False, server_default="0"),
        sa.CheckConstraint("price >= 0", name="check_service_price_non_negative"),
    )
    op.create_index("ix_trainer_services_id", "trainer_services", ["id"])
    op.create_index("ix_trainer_services_trainer_id", "trainer_services", ["trainer_id"])

    op.create_table(
        "trainer_certifications",
        sa.Column("id", sa.String(26), primary_key=True),
        sa.Column(
            "trainer_id",
            sa.String(26),
            sa.ForeignKey("trainer_profiles.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("name", sa.String(150), nullable=False),
        sa.Column("issuing_organization", sa.String(150), nullable=True),
        sa.Column("issue_date", sa.Date(), nullable=True),
        sa.Column("expiry_date", sa.Date(), nullable=True),
    )
    op.create_index("ix_trainer_certifications_id", "trainer_certifications", ["id"])
    op.create_index(
        "ix_trainer_certifications_trainer_id", "trainer_certifications", ["trainer_id"]
    )

    op.create_table(
        "trainer_achievements",
        sa.Column("id", sa.String(26), primary_key=True),
        sa.Column(
            "trainer_id",
            sa.String(26),
            sa.ForeignKey("trainer_profiles.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("title", sa.String(150), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("achieved_on", sa.Date(), nullable=True),
    )
    op.create_index("ix_trainer_achievements_id", "trainer_achievements", ["id"])
    op.create_index("ix_trainer_achievements_trainer_id", "trainer_achievements", ["trainer_id"])

    op.create_table(
        "trainer_reviews",
        sa.Column("id", sa.String(26), primary_key=True),
        sa.Column(
            "trainer_id",
            sa.String(26),
            sa.ForeignKey("trainer_profiles.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("user_id", sa.String(26), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("rating", sa.Integer(), nullable=False),
        sa.Column("comment", sa.Text(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.UniqueConstraint("trainer_id", "user_id", name="uq_trainer_review_user"),
        sa.CheckConstraint("rating >= 1 AND rating <= 5", name="check_review_rating_range"),
    )
    op.create_index("ix_trainer_reviews_id", "trainer_reviews", ["id"])
    op.create_index("ix_trainer_reviews_trainer_id", "trainer_reviews", ["trainer_id"])

    print("Users and trainer tables created")


def downgrade() -> None:
    print("Dropping users and trainer tables...")
    op.drop_table("trainer_reviews")
    op.drop_table("trainer_achievements")
    op.drop_table("trainer_certifications")
    op.drop_table("trainer_services")
    op.drop_table("trainer_profiles")
    op.drop_table("users")
