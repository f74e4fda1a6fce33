# backend/app/core/enums.py
"""
Core enums for the TrainerLocator platform.

Status and type enums that belong to a single model live next to that
model (see app.models.booking and app.models.training_session). This
module keeps the values shared across users, trainers and admin tooling.
"""

from enum import Enum


class RoleName(str, Enum):
    """
    Account roles.

    Every account has exactly one role. Clients register as ``user``,
    trainers as ``trainer``. ``admin`` can only be granted by another admin.
    """

    USER = "user"
    TRAINER = "trainer"
    ADMIN = "admin"


class SortOrder(str, Enum):
    ASC = "asc"
    DESC = "desc"


class TrainerSortField(str, Enum):
    """Sort keys accepted by trainer search."""

    RATING = "rating"
    EXPERIENCE = "experience"
    PRICE = "price"
