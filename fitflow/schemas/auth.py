from pydantic import BaseModel, EmailStr

from ..core.enums import UserRole
from ._strict_base import StrictRequestModel


class LoginRequest(StrictRequestModel):
    email: EmailStr


class SessionUser(BaseModel):
    email: str
    role: UserRole


class LoginResponse(BaseModel):
    message: str
    user: SessionUser
    access_token: str
    token_type: str = "bearer"
