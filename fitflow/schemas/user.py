# fitflow/schemas/user.py
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, EmailStr, Field

from ..core.enums import UserRole
from ._strict_base import ORMResponseModel, StrictRequestModel


class UserUpsertRequest(StrictRequestModel):
    """Registration or sign-in refresh. Roles are never accepted here."""

    email: EmailStr
    display_name: Optional[str] = Field(None, max_length=120)
    photo_url: Optional[str] = Field(None, max_length=500)
    last_sign_in_time: Optional[str] = Field(None, max_length=64)


class UserUpdateRequest(StrictRequestModel):
    email: EmailStr
    last_sign_in_time: Optional[str] = Field(None, max_length=64)
    role: Optional[UserRole] = None


class UserResponse(ORMResponseModel):
    id: str
    email: str
    display_name: Optional[str] = None
    photo_url: Optional[str] = None
    role: UserRole
    last_sign_in_time: Optional[str] = None
    created_at: Optional[datetime] = None


class UserUpsertResponse(BaseModel):
    message: str
    created: bool
    user: UserResponse


class RoleResponse(BaseModel):
    role: UserRole
