# backend/app/schemas/__init__.py
"""
Pydantic schemas for the TrainerLocator platform.

Request models forbid unknown fields; response models are built from ORM
objects (``from_attributes``) and serialize money as floats.
"""

from .admin import TrainerVerifyUpdate
from .base_responses import PaginatedResponse, SuccessResponse
from .booking import (
    BookingCreate,
    BookingItemCreate,
    BookingItemResponse,
    BookingPaymentUpdate,
    BookingResponse,
    BookingStatusUpdate,
    PaymentChangeResponse,
)
from .trainer import (
    ReviewCreate,
    TrainerProfileCreate,
    TrainerProfileResponse,
    TrainerProfileUpdate,
)
from .training_session import (
    SessionCreate,
    SessionRatingCreate,
    SessionResponse,
    SessionStatsResponse,
    SessionStatusUpdate,
    SessionUpdate,
    StatusChangeResponse,
)
from .user import (
    AuthResponse,
    RoleUpdate,
    Token,
    UserCreate,
    UserLogin,
    UserResponse,
    UserStatusUpdate,
    UserUpdate,
)

__all__ = [
    # Common
    "PaginatedResponse",
    "SuccessResponse",
    # Users
    "UserCreate",
    "UserLogin",
    "UserUpdate",
    "UserResponse",
    "UserStatusUpdate",
    "RoleUpdate",
    "Token",
    "AuthResponse",
    # Trainers
    "TrainerProfileCreate",
    "TrainerProfileUpdate",
    "TrainerProfileResponse",
    "ReviewCreate",
    # Sessions
    "SessionCreate",
    "SessionUpdate",
    "SessionStatusUpdate",
    "SessionRatingCreate",
    "SessionResponse",
    "SessionStatsResponse",
    "StatusChangeResponse",
    # Bookings
    "BookingCreate",
    "BookingItemCreate",
    "BookingStatusUpdate",
    "BookingPaymentUpdate",
    "BookingResponse",
    "BookingItemResponse",
    "PaymentChangeResponse",
    # Admin
    "TrainerVerifyUpdate",
]
