# backend/app/services/auth_service.py
"""
Authentication Service for the TrainerLocator platform.

Handles user registration, credential checks and token issuance.
Follows the service layer pattern to keep business logic out of routes.
"""

import logging
from typing import Optional

from sqlalchemy.orm import Session

from ..auth import create_access_token, get_password_hash, verify_password
from ..core.enums import RoleName
from ..core.exceptions import ConflictException, UnauthorizedException
from ..core.timezone_utils import utc_now
from ..models.user import User
from ..repositories.factory import RepositoryFactory
from ..repositories.user_repository import UserRepository
from .base import BaseService

logger = logging.getLogger(__name__)


class AuthService(BaseService):
    """Service for handling authentication operations."""

    def __init__(self, db: Session, user_repository: Optional[UserRepository] = None) -> None:
        super().__init__(db)
        self.logger = logging.getLogger(__name__)
        self.user_repository = user_repository or RepositoryFactory.create_user_repository(db)

    @BaseService.measure_operation("register_user")
    def register_user(
        self,
        name: str,
        email: str,
        password: str,
        role: str = RoleName.USER.value,
    ) -> User:
        """
        Register a new account.

        Raises:
            ConflictException: If the email is already registered
        """
        self.log_operation("register_user", email=email, role=role)

        if self.user_repository.get_by_email(email):
            self.logger.warning(f"Registration failed - email already exists: {email}")
            raise ConflictException("User already exists", code="EMAIL_TAKEN")

        with self.transaction():
            user = self.user_repository.create(
                name=name.strip(),
                email=email,
                hashed_password=get_password_hash(password),
                role=role,
            )

        self.logger.info(f"Registered user {user.id} with role {role}")
        return user

    @BaseService.measure_operation("authenticate_user")
    def authenticate_user(self, email: str, password: str) -> User:
        """
        Check credentials and stamp ``last_login``.

        Unknown email, wrong password and deactivated accounts all fail
        with the same 401 so callers cannot tell them apart.
        """
        user = self.user_repository.get_by_email(email)
        if user is None or not verify_password(password, user.hashed_password):
            self.logger.warning(f"Failed login attempt for {email}")
            raise UnauthorizedException("Invalid credentials", code="INVALID_CREDENTIALS")
        if not user.is_active:
            self.logger.warning(f"Login attempt for deactivated account {email}")
            raise UnauthorizedException("Invalid credentials", code="INVALID_CREDENTIALS")

        with self.transaction():
            user.last_login = utc_now()
            self.user_repository.flush()

        return user

    def issue_token(self, user: User) -> str:
        return create_access_token(data={"sub": user.email})

    def login(self, email: str, password: str) -> str:
        user = self.authenticate_user(email, password)
        return self.issue_token(user)
