# backend/app/repositories/user_repository.py
"""
User Repository for the TrainerLocator platform.

Handles User lookups by id/email and the filtered listings used by the
users and admin endpoints.
"""

import logging
from typing import List, Optional, Tuple

from sqlalchemy import or_
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..core.exceptions import RepositoryException
from ..models.user import User
from .base_repository import BaseRepository

logger = logging.getLogger(__name__)


class UserRepository(BaseRepository[User]):
    """Repository for User data access."""

    def __init__(self, db: Session):
        super().__init__(db, User)
        self.logger = logging.getLogger(__name__)

    def get_by_email(self, email: str) -> Optional[User]:
        """Get user by email (case-insensitive, emails are stored lowercase)."""
        try:
            normalized = (email or "").strip().lower()
            return self.db.query(User).filter(User.email == normalized).first()
        except SQLAlchemyError as e:
            self.logger.error(f"Error getting user by email {email}: {str(e)}")
            raise RepositoryException(f"Failed to retrieve user: {str(e)}")

    def email_taken(self, email: str, exclude_user_id: Optional[str] = None) -> bool:
        """Whether another account already uses ``email``."""
        existing = self.get_by_email(email)
        return existing is not None and existing.id != exclude_user_id

    def list_newest_first(self) -> List[User]:
        return self._execute_query(self._build_query().order_by(User.created_at.desc(), User.id.desc()))

    def search(
        self,
        *,
        role: Optional[str] = None,
        is_active: Optional[bool] = None,
        search: Optional[str] = None,
        page: int = 1,
        per_page: int = 10,
    ) -> Tuple[List[User], int]:
        """
        Filtered, paginated user listing for admin tooling.

        ``search`` matches name or email, case-insensitively.
        """
        query = self._build_query().filter_by(**self._filters(role=role, is_active=is_active))
        if search:
            pattern = f"%{search.strip()}%"
            query = query.filter(or_(User.name.ilike(pattern), User.email.ilike(pattern)))
        query = query.order_by(User.created_at.desc(), User.id.desc())
        return self._paginate(query, page, per_page)
