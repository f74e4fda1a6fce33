from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, EmailStr, Field

from ..core.constants import MAX_BIO_LENGTH, MAX_NAME_LENGTH, MIN_PASSWORD_LENGTH
from ..core.enums import RoleName
from .base import StandardizedModel, StrictRequestModel


class UserCreate(StrictRequestModel):
    name: str = Field(..., min_length=1, max_length=MAX_NAME_LENGTH)
    email: EmailStr
    password: str = Field(..., min_length=MIN_PASSWORD_LENGTH)
    # Admin accounts cannot be self-registered
    role: Literal["user", "trainer"] = "user"


class UserLogin(BaseModel):
    email: EmailStr
    password: str


class Token(BaseModel):
    access_token: str
    token_type: str = "bearer"


class PreferencesUpdate(StrictRequestModel):
    notifications: Optional[bool] = None
    email_updates: Optional[bool] = None


class UserUpdate(StrictRequestModel):
    name: Optional[str] = Field(None, min_length=1, max_length=MAX_NAME_LENGTH)
    email: Optional[EmailStr] = None
    bio: Optional[str] = Field(None, max_length=MAX_BIO_LENGTH)
    phone: Optional[str] = Field(None, max_length=20)
    location: Optional[str] = Field(None, max_length=255)
    profile_image: Optional[str] = Field(None, max_length=500)
    preferences: Optional[PreferencesUpdate] = None


class RoleUpdate(StrictRequestModel):
    role: RoleName


class UserStatusUpdate(StrictRequestModel):
    is_active: bool


class Preferences(BaseModel):
    notifications: bool = True
    email_updates: bool = True


class UserResponse(StandardizedModel):
    id: str
    name: str
    email: EmailStr
    role: str
    bio: Optional[str] = None
    phone: Optional[str] = None
    location: Optional[str] = None
    profile_image: Optional[str] = None
    is_verified: bool = False
    is_active: bool = True
    last_login: Optional[datetime] = None
    preferences: Preferences = Preferences()
    created_at: Optional[datetime] = None


class AuthResponse(Token):
    """Token plus the account it was issued for."""

    user: UserResponse
