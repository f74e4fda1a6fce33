# backend/app/api/dependencies/database.py
"""
Request-scoped database session.

Services commit their own transactions. Whatever is still pending when a
request fails is rolled back here before the session is closed.
"""

import logging
from typing import Generator

from sqlalchemy.orm import Session

from ...database import SessionLocal

logger = logging.getLogger(__name__)


def get_db() -> Generator[Session, None, None]:
    db = SessionLocal()
    try:
        yield db
    except Exception:
        logger.debug("Rolling back request session after an error")
        db.rollback()
        raise
    finally:
        db.close()
