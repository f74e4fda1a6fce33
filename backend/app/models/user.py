# backend/app/models/user.py
"""
User model for the TrainerLocator platform.

A single table holds clients, trainers and admins; the ``role`` column
tells them apart. Trainers additionally own a TrainerProfile.

Classes:
    User: Account, authentication and contact details
"""

import logging
from typing import Any, Dict

from sqlalchemy import Boolean, Column, DateTime, String, Text
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
import ulid

from ..core.enums import RoleName
from ..database import Base

logger = logging.getLogger(__name__)


class User(Base):
    """
    Account record for every person using the platform.

    Attributes:
        id: ULID primary key
        name: Display name
        email: Unique, stored lowercase, used for login
        hashed_password: Bcrypt hash
        role: One of RoleName (user, trainer, admin)
        bio: Optional short biography
        is_active: False once the account has been deactivated (soft delete)
        last_login: Timestamp of the last successful login
        notifications_enabled / email_updates: Notification preferences

    Relationships:
        trainer_profile: One-to-one with TrainerProfile (trainers only)
    """

    __tablename__ = "users"

    id = Column(String(26), primary_key=True, index=True, default=lambda: str(ulid.ULID()))
    name = Column(String(50), nullable=False)
    email = Column(String(255), unique=True, index=True, nullable=False)
    hashed_password = Column(String, nullable=False)
    role = Column(String(20), nullable=False, default=RoleName.USER.value, index=True)

    bio = Column(Text, nullable=True)
    phone = Column(String(20), nullable=True)
    location = Column(String(255), nullable=True)
    profile_image = Column(String(500), nullable=True)

    is_verified = Column(Boolean, nullable=False, default=False)
    is_active = Column(Boolean, nullable=False, default=True)
    last_login = Column(DateTime(timezone=True), nullable=True)

    # Preferences
    notifications_enabled = Column(Boolean, nullable=False, default=True)
    email_updates = Column(Boolean, nullable=False, default=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    trainer_profile = relationship(
        "TrainerProfile", back_populates="user", uselist=False, cascade="all, delete-orphan"
    )

    def __init__(self, **kwargs: Any) -> None:
        if kwargs.get("email"):
            kwargs["email"] = kwargs["email"].strip().lower()
        super().__init__(**kwargs)

    def __repr__(self) -> str:
        return f"<User {self.email} role={self.role}>"

    @property
    def is_admin(self) -> bool:
        return self.role == RoleName.ADMIN.value

    @property
    def is_trainer(self) -> bool:
        return self.role == RoleName.TRAINER.value

    @property
    def preferences(self) -> Dict[str, bool]:
        return {
            "notifications": bool(self.notifications_enabled),
            "email_updates": bool(self.email_updates),
        }
