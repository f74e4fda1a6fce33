"""
Database models for the TrainerLocator platform.

Importing this package registers every table on ``Base.metadata``:
- Users (clients, trainers, admins)
- Trainer profiles, services, certifications, achievements and reviews
- Training sessions and their status history
- Bookings, line items, and status/payment history
"""

from .booking import (
    Booking,
    BookingItem,
    BookingPaymentChange,
    BookingStatus,
    BookingStatusChange,
    BookingType,
    PaymentMethod,
    PaymentStatus,
)
from .trainer import (
    TrainerAchievement,
    TrainerCertification,
    TrainerProfile,
    TrainerReview,
    TrainerService,
)
from .training_session import (
    SessionStatus,
    SessionStatusChange,
    SessionType,
    TrainingSession,
)
from .user import User

__all__ = [
    "User",
    "TrainerProfile",
    "TrainerService",
    "TrainerCertification",
    "TrainerAchievement",
    "TrainerReview",
    "TrainingSession",
    "SessionStatusChange",
    "SessionStatus",
    "SessionType",
    "Booking",
    "BookingItem",
    "BookingStatusChange",
    "BookingPaymentChange",
    "BookingStatus",
    "BookingType",
    "PaymentMethod",
    "PaymentStatus",
]
