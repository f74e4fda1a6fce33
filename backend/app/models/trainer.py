# backend/app/models/trainer.py
"""
Trainer profile models for the TrainerLocator platform.

A TrainerProfile extends a User with role ``trainer``. Services form the
priced catalog used to compute booking and session prices; their
``position`` keeps the order the trainer entered them, which matters
because the first service is the pricing fallback.
"""

from decimal import Decimal
import logging
from typing import Any, Dict, List, Optional

from sqlalchemy import (
    JSON,
    Boolean,
    CheckConstraint,
    Column,
    Date,
    DateTime,
    Float,
    ForeignKey,
    Integer,
    Numeric,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
import ulid

from ..database import Base

logger = logging.getLogger(__name__)


class TrainerProfile(Base):
    """
    Public profile of a trainer.

    Attributes:
        user_id: Owning user (unique, one profile per user)
        specialization: One of core.constants.SPECIALIZATIONS
        availability: Weekday map ``{"monday": {"start": "09:00", "end": "17:00", "available": true}}``
        rating_average / rating_count: Denormalized from reviews
        is_active: Inactive profiles are hidden from search and cannot be booked
    """

    __tablename__ = "trainer_profiles"

    id = Column(String(26), primary_key=True, index=True, default=lambda: str(ulid.ULID()))
    user_id = Column(
        String(26), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, unique=True
    )

    specialization = Column(String(100), nullable=False, index=True)
    experience_years = Column(Integer, nullable=False, default=0)
    experience_description = Column(Text, nullable=True)

    availability = Column(JSON, nullable=False, default=dict)

    # Location
    address = Column(String(255), nullable=True)
    city = Column(String(100), nullable=True, index=True)
    state = Column(String(100), nullable=True)
    zip_code = Column(String(20), nullable=True)
    country = Column(String(100), nullable=True, default="USA")
    latitude = Column(Float, nullable=True)
    longitude = Column(Float, nullable=True)

    # Rating (denormalized)
    rating_average = Column(Float, nullable=False, default=0.0)
    rating_count = Column(Integer, nullable=False, default=0)

    total_clients = Column(Integer, nullable=False, default=0)
    active_clients = Column(Integer, nullable=False, default=0)

    social_media = Column(JSON, nullable=False, default=dict)
    tags = Column(JSON, nullable=False, default=list)

    is_verified = Column(Boolean, nullable=False, default=False)
    is_active = Column(Boolean, nullable=False, default=True, index=True)
    featured = Column(Boolean, nullable=False, default=False)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    user = relationship("User", back_populates="trainer_profile")
    services = relationship(
        "TrainerService",
        back_populates="trainer",
        cascade="all, delete-orphan",
        order_by="TrainerService.position",
    )
    certifications = relationship(
        "TrainerCertification", back_populates="trainer", cascade="all, delete-orphan"
    )
    achievements = relationship(
        "TrainerAchievement", back_populates="trainer", cascade="all, delete-orphan"
    )
    reviews = relationship(
        "TrainerReview",
        back_populates="trainer",
        cascade="all, delete-orphan",
        order_by="TrainerReview.created_at",
    )

    __table_args__ = (
        CheckConstraint("experience_years >= 0", name="check_experience_non_negative"),
        CheckConstraint(
            "rating_average >= 0 AND rating_average <= 5", name="check_rating_average_range"
        ),
    )

    def __repr__(self) -> str:
        return f"<TrainerProfile {self.id} user={self.user_id} {self.specialization}>"

    def day_availability(self, day: str) -> Optional[Dict[str, Any]]:
        """Availability entry for a weekday key, if any."""
        return (self.availability or {}).get(day)

    def is_available_on(self, day: str) -> bool:
        entry = self.day_availability(day)
        return bool(entry and entry.get("available"))

    @property
    def min_service_price(self) -> Optional[Decimal]:
        prices = [s.price for s in self.services if s.price is not None]
        return min(prices) if prices else None

    def recalculate_rating(self) -> None:
        """Refresh rating_average and rating_count from the attached reviews."""
        ratings: List[int] = [r.rating for r in self.reviews]
        self.rating_count = len(ratings)
        self.rating_average = (sum(ratings) / len(ratings)) if ratings else 0.0


class TrainerService(Base):
    """
    A service a trainer offers, priced per hour.

    ``price`` is an hourly rate; ``duration`` is the advertised default
    length in minutes and does not affect pricing.
    """

    __tablename__ = "trainer_services"

    id = Column(String(26), primary_key=True, index=True, default=lambda: str(ulid.ULID()))
    trainer_id = Column(
        String(26), ForeignKey("trainer_profiles.id", ondelete="CASCADE"), nullable=False, index=True
    )
    name = Column(String(100), nullable=False)
    description = Column(Text, nullable=True)
    duration = Column(Integer, nullable=False, default=60)
    price = Column(Numeric(10, 2), nullable=False)
    position = Column(Integer, nullable=False, default=0)

    trainer = relationship("TrainerProfile", back_populates="services")

    __table_args__ = (CheckConstraint("price >= 0", name="check_service_price_non_negative"),)

    def __repr__(self) -> str:
        return f"<TrainerService {self.name} ${self.price}/hr>"


class TrainerCertification(Base):
    __tablename__ = "trainer_certifications"

    id = Column(String(26), primary_key=True, index=True, default=lambda: str(ulid.ULID()))
    trainer_id = Column(
        String(26), ForeignKey("trainer_profiles.id", ondelete="CASCADE"), nullable=False, index=True
    )
    name = Column(String(150), nullable=False)
    issuing_organization = Column(String(150), nullable=True)
    issue_date = Column(Date, nullable=True)
    expiry_date = Column(Date, nullable=True)

    trainer = relationship("TrainerProfile", back_populates="certifications")


class TrainerAchievement(Base):
    __tablename__ = "trainer_achievements"

    id = Column(String(26), primary_key=True, index=True, default=lambda: str(ulid.ULID()))
    trainer_id = Column(
        String(26), ForeignKey("trainer_profiles.id", ondelete="CASCADE"), nullable=False, index=True
    )
    title = Column(String(150), nullable=False)
    description = Column(Text, nullable=True)
    achieved_on = Column(Date, nullable=True)

    trainer = relationship("TrainerProfile", back_populates="achievements")


class TrainerReview(Base):
    """A client's review of a trainer. One review per user per trainer."""

    __tablename__ = "trainer_reviews"

    id = Column(String(26), primary_key=True, index=True, default=lambda: str(ulid.ULID()))
    trainer_id = Column(
        String(26), ForeignKey("trainer_profiles.id", ondelete="CASCADE"), nullable=False, index=True
    )
    user_id = Column(String(26), ForeignKey("users.id"), nullable=False)
    rating = Column(Integer, nullable=False)
    comment = Column(Text, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    trainer = relationship("TrainerProfile", back_populates="reviews")
    user = relationship("User")

    __table_args__ = (
        UniqueConstraint("trainer_id", "user_id", name="uq_trainer_review_user"),
        CheckConstraint("rating >= 1 AND rating <= 5", name="check_review_rating_range"),
    )
