# backend/app/api/dependencies/__init__.py
"""
Central export point for all dependencies.

This module re-exports all dependencies from submodules
for convenient access throughout the application.
"""

from .auth import get_current_active_user, get_current_user, require_admin
from .database import get_db
from .services import (
    get_admin_service,
    get_auth_service,
    get_booking_service,
    get_conflict_checker,
    get_pricing_service,
    get_trainer_service,
    get_training_session_service,
    get_user_service,
)

__all__ = [
    # Auth
    "get_current_user",
    "get_current_active_user",
    "require_admin",
    # Database
    "get_db",
    # Services
    "get_auth_service",
    "get_user_service",
    "get_trainer_service",
    "get_pricing_service",
    "get_conflict_checker",
    "get_training_session_service",
    "get_booking_service",
    "get_admin_service",
]
