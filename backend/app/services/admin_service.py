# backend/app/services/admin_service.py
"""
Admin Service for the TrainerLocator platform.

Filtered listings across users, trainers, sessions and bookings, plus
account status/role changes and trainer verification. Every method
expects the caller to have passed the admin role check.
"""

import logging
from typing import List, Optional, Tuple

from sqlalchemy.orm import Session

from ..core.exceptions import NotFoundException
from ..models.booking import Booking
from ..models.trainer import TrainerProfile
from ..models.training_session import TrainingSession
from ..models.user import User
from ..repositories.factory import RepositoryFactory
from .base import BaseService
from .user_service import UserService

logger = logging.getLogger(__name__)


class AdminService(BaseService):
    def __init__(self, db: Session, user_service: Optional[UserService] = None):
        super().__init__(db)
        self.logger = logging.getLogger(__name__)
        self.user_repository = RepositoryFactory.create_user_repository(db)
        self.trainer_repository = RepositoryFactory.create_trainer_repository(db)
        self.session_repository = RepositoryFactory.create_training_session_repository(db)
        self.booking_repository = RepositoryFactory.create_booking_repository(db)
        self.user_service = user_service or UserService(db, self.user_repository)

    @BaseService.measure_operation("admin_list_users")
    def list_users(
        self,
        *,
        role: Optional[str] = None,
        is_active: Optional[bool] = None,
        search: Optional[str] = None,
        page: int = 1,
        per_page: int = 10,
    ) -> Tuple[List[User], int]:
        return self.user_repository.search(
            role=role, is_active=is_active, search=search, page=page, per_page=per_page
        )

    def set_user_status(self, admin: User, user_id: str, is_active: bool) -> User:
        return self.user_service.set_active(admin, user_id, is_active)

    def set_user_role(self, admin: User, user_id: str, role: str) -> User:
        return self.user_service.change_role(admin, user_id, role)

    @BaseService.measure_operation("admin_list_trainers")
    def list_trainers(
        self, *, is_verified: Optional[bool] = None, page: int = 1, per_page: int = 10
    ) -> Tuple[List[TrainerProfile], int]:
        return self.trainer_repository.list_for_admin(
            is_verified=is_verified, page=page, per_page=per_page
        )

    @BaseService.measure_operation("verify_trainer")
    def verify_trainer(
        self, admin: User, trainer_id: str, is_verified: bool, notes: Optional[str] = None
    ) -> TrainerProfile:
        profile = self.trainer_repository.get_by_id(trainer_id)
        if profile is None:
            raise NotFoundException("Trainer not found", code="TRAINER_NOT_FOUND")
        with self.transaction():
            profile.is_verified = is_verified
            self.trainer_repository.flush()
        self.logger.info(
            f"Trainer {profile.id} verified={is_verified} by admin {admin.id}"
            + (f": {notes}" if notes else "")
        )
        return profile

    @BaseService.measure_operation("admin_list_sessions")
    def list_sessions(
        self, *, status: Optional[str] = None, page: int = 1, per_page: int = 10
    ) -> Tuple[List[TrainingSession], int]:
        return self.session_repository.list_for_admin(status=status, page=page, per_page=per_page)

    @BaseService.measure_operation("admin_list_bookings")
    def list_bookings(
        self,
        *,
        status: Optional[str] = None,
        payment_status: Optional[str] = None,
        page: int = 1,
        per_page: int = 10,
    ) -> Tuple[List[Booking], int]:
        return self.booking_repository.list_for_admin(
            status=status, payment_status=payment_status, page=page, per_page=per_page
        )
