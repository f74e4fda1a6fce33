# backend/app/services/user_service.py
"""
User account management.

Owners may read, edit and deactivate their own account; admins may do
so for anyone. Role changes are admin only and an admin can never change
their own role.
"""

import logging
from typing import Any, Dict, List, Optional

from sqlalchemy.orm import Session

from ..core.enums import RoleName
from ..core.exceptions import (
    ConflictException,
    ForbiddenException,
    NotFoundException,
    ValidationException,
)
from ..models.user import User
from ..repositories.factory import RepositoryFactory
from ..repositories.user_repository import UserRepository
from .base import BaseService

logger = logging.getLogger(__name__)

_PROFILE_FIELDS = ("name", "bio", "phone", "location", "profile_image")


class UserService(BaseService):
    def __init__(self, db: Session, user_repository: Optional[UserRepository] = None) -> None:
        super().__init__(db)
        self.user_repository = user_repository or RepositoryFactory.create_user_repository(db)

    def _get_or_404(self, user_id: str) -> User:
        user = self.user_repository.get_by_id(user_id)
        if user is None:
            raise NotFoundException("User not found", code="USER_NOT_FOUND")
        return user

    def _ensure_self_or_admin(self, actor: User, user_id: str) -> None:
        if actor.id != user_id and not actor.is_admin:
            self.logger.warning(f"User {actor.id} denied access to account {user_id}")
            raise ForbiddenException("Access denied", code="ACCESS_DENIED")

    def _ensure_admin(self, actor: User) -> None:
        if not actor.is_admin:
            self.logger.warning(f"Non-admin {actor.id} attempted an admin operation")
            raise ForbiddenException("Admin access required", code="ADMIN_REQUIRED")

    @BaseService.measure_operation("list_users")
    def list_users(self, actor: User) -> List[User]:
        self._ensure_admin(actor)
        return self.user_repository.list_newest_first()

    @BaseService.measure_operation("get_user")
    def get_user(self, actor: User, user_id: str) -> User:
        self._ensure_self_or_admin(actor, user_id)
        return self._get_or_404(user_id)

    @BaseService.measure_operation("update_user")
    def update_user(self, actor: User, user_id: str, changes: Dict[str, Any]) -> User:
        """
        Apply a partial update.

        ``changes`` holds only the fields the caller sent. Preferences are
        merged key by key rather than replaced.

        Raises:
            ConflictException: If the new email belongs to another account
        """
        self._ensure_self_or_admin(actor, user_id)
        user = self._get_or_404(user_id)

        email = changes.get("email")
        if email and self.user_repository.email_taken(email, exclude_user_id=user.id):
            self.logger.warning(f"Email update rejected for {user.id}: address in use")
            raise ConflictException("Email already in use", code="EMAIL_TAKEN")

        with self.transaction():
            for field in _PROFILE_FIELDS:
                if field in changes:
                    setattr(user, field, changes[field])
            if email:
                user.email = email.strip().lower()

            preferences = changes.get("preferences") or {}
            if preferences.get("notifications") is not None:
                user.notifications_enabled = preferences["notifications"]
            if preferences.get("email_updates") is not None:
                user.email_updates = preferences["email_updates"]
            self.user_repository.flush()

        self.logger.info(f"Updated user {user.id}")
        return user

    @BaseService.measure_operation("deactivate_user")
    def deactivate_user(self, actor: User, user_id: str) -> User:
        self._ensure_self_or_admin(actor, user_id)
        user = self._get_or_404(user_id)
        with self.transaction():
            user.is_active = False
            self.user_repository.flush()
        self.logger.info(f"Deactivated user {user.id} (by {actor.id})")
        return user

    @BaseService.measure_operation("change_role")
    def change_role(self, actor: User, user_id: str, role: str) -> User:
        """
        Raises:
            ForbiddenException: If the actor is not an admin
            ValidationException: If an admin targets their own account
        """
        self._ensure_admin(actor)
        if actor.id == user_id:
            raise ValidationException("Cannot change your own role", code="SELF_ROLE_CHANGE")
        user = self._get_or_404(user_id)
        with self.transaction():
            user.role = RoleName(role).value
            self.user_repository.flush()
        self.logger.info(f"Role of user {user.id} set to {user.role} by {actor.id}")
        return user

    @BaseService.measure_operation("set_active")
    def set_active(self, actor: User, user_id: str, is_active: bool) -> User:
        self._ensure_admin(actor)
        if actor.id == user_id:
            raise ValidationException("Cannot change your own status", code="SELF_STATUS_CHANGE")
        user = self._get_or_404(user_id)
        with self.transaction():
            user.is_active = is_active
            self.user_repository.flush()
        self.logger.info(f"User {user.id} is_active={is_active} (by {actor.id})")
        return user
