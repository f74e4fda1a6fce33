from typing import Optional

from pydantic import Field

from .base import StrictRequestModel


class TrainerVerifyUpdate(StrictRequestModel):
    is_verified: bool
    notes: Optional[str] = Field(None, max_length=500)
