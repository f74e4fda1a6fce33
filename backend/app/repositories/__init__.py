# backend/app/repositories/__init__.py
"""
Repository Pattern Implementation for the TrainerLocator platform.

This package provides the repository layer for data access,
separating business logic from database queries.

Usage:
    from app.repositories import RepositoryFactory

    # In a service:
    self.booking_repository = RepositoryFactory.create_booking_repository(db)
"""

from .base_repository import BaseRepository
from .booking_repository import BookingRepository
from .factory import RepositoryFactory
from .trainer_repository import TrainerRepository
from .training_session_repository import TrainingSessionRepository
from .user_repository import UserRepository

__all__ = [
    "BaseRepository",
    "RepositoryFactory",
    "UserRepository",
    "TrainerRepository",
    "TrainingSessionRepository",
    "BookingRepository",
]
