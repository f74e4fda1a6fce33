# backend/app/repositories/base_repository.py
"""
Base Repository Pattern for the TrainerLocator platform.

Repositories own every query; services own every transaction. Nothing
here commits or rolls back. Writes are flushed so generated IDs are
available to the caller, and SQLAlchemy failures surface as
RepositoryException.
"""

import logging
from typing import Any, Callable, Dict, Generic, List, Optional, Tuple, Type, TypeVar

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Query, Session

from ..core.exceptions import RepositoryException

T = TypeVar("T")
R = TypeVar("R")

logger = logging.getLogger(__name__)


class BaseRepository(Generic[T]):
    """
    Shared lookups, writes and pagination for one model.

    Attributes:
        db: SQLAlchemy session
        model: SQLAlchemy model class
    """

    def __init__(self, db: Session, model: Type[T]):
        self.db = db
        self.model = model
        self.logger = logging.getLogger(f"{__name__}.{model.__name__}")

    def _run(self, action: str, fn: Callable[[], R]) -> R:
        """Run ``fn`` and translate database errors for the service layer."""
        try:
            return fn()
        except IntegrityError as e:
            self.logger.error(f"Integrity error while trying to {action} {self.model.__name__}: {e}")
            raise RepositoryException(f"Integrity constraint violated: {e}") from e
        except SQLAlchemyError as e:
            self.logger.error(f"Failed to {action} {self.model.__name__}: {e}")
            raise RepositoryException(f"Failed to {action} {self.model.__name__}: {e}") from e

    def get_by_id(self, id: str, load_relationships: bool = True) -> Optional[T]:
        """Fetch one row, eager-loading what the subclass asks for."""

        def fetch() -> Optional[T]:
            query = self._build_query().filter(self.model.id == id)
            if load_relationships:
                query = self._apply_eager_loading(query)
            return query.first()

        return self._run("retrieve", fetch)

    def create(self, **kwargs: Any) -> T:
        entity = self.model(**kwargs)
        return self.add(entity)

    def add(self, entity: T) -> T:
        """Attach an already-built entity (with children) and flush it."""

        def persist() -> T:
            self.db.add(entity)
            self.db.flush()
            return entity

        return self._run("create", persist)

    def flush(self) -> None:
        self._run("save", self.db.flush)

    # Protected helpers for subclasses

    def _apply_eager_loading(self, query: Query) -> Query:
        """Override to add ``selectinload`` options for child collections."""
        return query

    def _build_query(self) -> Query:
        return self.db.query(self.model)

    def _execute_query(self, query: Query) -> List[T]:
        return self._run("query", query.all)

    def _paginate(self, query: Query, page: int, per_page: int) -> Tuple[List[T], int]:
        """
        Run ``query`` for one page.

        Returns:
            (items on the page, total matching rows)
        """

        def fetch_page() -> Tuple[List[T], int]:
            total = query.order_by(None).count()
            items = query.offset((page - 1) * per_page).limit(per_page).all()
            return items, total

        return self._run("paginate", fetch_page)

    @staticmethod
    def _filters(**criteria: Any) -> Dict[str, Any]:
        """Drop criteria whose value is None."""
        return {key: value for key, value in criteria.items() if value is not None}
