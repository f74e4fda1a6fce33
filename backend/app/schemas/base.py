# backend/app/schemas/base.py
"""
Shared schema bases.

Request bodies reject unknown fields, so a client can never slip a price
or a status into a write. Response models read straight from ORM rows.
"""

from decimal import ROUND_HALF_UP, Decimal
from typing import Annotated

from pydantic import AfterValidator, BaseModel, ConfigDict, PlainSerializer

CENTS = Decimal("0.01")


def _to_cents(value: Decimal) -> Decimal:
    return value.quantize(CENTS, rounding=ROUND_HALF_UP)


# Decimal in Python, float in JSON
Money = Annotated[
    Decimal,
    AfterValidator(_to_cents),
    PlainSerializer(float, return_type=float, when_used="json"),
]


class StrictRequestModel(BaseModel):
    """Request body base; enum fields arrive as their string values."""

    model_config = ConfigDict(extra="forbid", use_enum_values=True)


class StandardizedModel(BaseModel):
    model_config = ConfigDict(use_enum_values=True, populate_by_name=True, from_attributes=True)
