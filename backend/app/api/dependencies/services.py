# backend/app/api/dependencies/services.py
"""
Service layer dependencies for dependency injection.

This module provides factory functions that create service instances
bound to the request's database session.
"""

from fastapi import Depends
from sqlalchemy.orm import Session

from ...services.admin_service import AdminService
from ...services.auth_service import AuthService
from ...services.booking_service import BookingService
from ...services.conflict_checker import ConflictChecker
from ...services.pricing_service import PricingService
from ...services.trainer_service import TrainerService
from ...services.training_session_service import TrainingSessionService
from ...services.user_service import UserService
from .database import get_db


def get_auth_service(db: Session = Depends(get_db)) -> AuthService:
    return AuthService(db)


def get_user_service(db: Session = Depends(get_db)) -> UserService:
    return UserService(db)


def get_trainer_service(db: Session = Depends(get_db)) -> TrainerService:
    return TrainerService(db)


def get_pricing_service(db: Session = Depends(get_db)) -> PricingService:
    """Provide pricing service instance for dependency injection."""
    return PricingService(db)


def get_conflict_checker(db: Session = Depends(get_db)) -> ConflictChecker:
    return ConflictChecker(db)


def get_training_session_service(
    db: Session = Depends(get_db),
    conflict_checker: ConflictChecker = Depends(get_conflict_checker),
    pricing_service: PricingService = Depends(get_pricing_service),
) -> TrainingSessionService:
    """
    Get training session service instance with its collaborators.

    Args:
        db: Database session
        conflict_checker: Schedule validation
        pricing_service: Session price quotes

    Returns:
        TrainingSessionService instance
    """
    return TrainingSessionService(
        db, conflict_checker=conflict_checker, pricing_service=pricing_service
    )


def get_booking_service(
    db: Session = Depends(get_db),
    conflict_checker: ConflictChecker = Depends(get_conflict_checker),
    pricing_service: PricingService = Depends(get_pricing_service),
) -> BookingService:
    """
    Get booking service instance with all dependencies.

    Returns:
        BookingService instance
    """
    return BookingService(db, conflict_checker=conflict_checker, pricing_service=pricing_service)


def get_admin_service(db: Session = Depends(get_db)) -> AdminService:
    return AdminService(db)
