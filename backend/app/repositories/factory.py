# backend/app/repositories/factory.py
"""
Repository Factory for the TrainerLocator platform.

Provides centralized creation of repository instances,
ensuring consistent initialization and dependency injection.
"""

from typing import TYPE_CHECKING

from sqlalchemy.orm import Session

# Avoid circular imports
if TYPE_CHECKING:
    from .booking_repository import BookingRepository
    from .trainer_repository import TrainerRepository
    from .training_session_repository import TrainingSessionRepository
    from .user_repository import UserRepository


class RepositoryFactory:
    """Factory class for creating repository instances."""

    @staticmethod
    def create_user_repository(db: Session) -> "UserRepository":
        from .user_repository import UserRepository

        return UserRepository(db)

    @staticmethod
    def create_trainer_repository(db: Session) -> "TrainerRepository":
        from .trainer_repository import TrainerRepository

        return TrainerRepository(db)

    @staticmethod
    def create_training_session_repository(db: Session) -> "TrainingSessionRepository":
        from .training_session_repository import TrainingSessionRepository

        return TrainingSessionRepository(db)

    @staticmethod
    def create_booking_repository(db: Session) -> "BookingRepository":
        from .booking_repository import BookingRepository

        return BookingRepository(db)
