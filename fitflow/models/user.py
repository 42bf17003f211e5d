# fitflow/models/user.py
"""
User model for the FitFlow platform.

A user is the stored side of a principal: the email is the stable identity
key handed over by the identity provider, and the role drives every
authorization decision. The role starts as ``member`` and is only changed
by an admin decision on a trainer application.
"""

from sqlalchemy import Column, DateTime, String
from sqlalchemy.sql import func

from ..core.enums import UserRole
from ..core.ulid_helper import generate_ulid
from ..database import Base


class User(Base):
    __tablename__ = "users"

    id = Column(String(26), primary_key=True, default=generate_ulid)
    email = Column(String(255), unique=True, index=True, nullable=False)
    display_name = Column(String(120), nullable=True)
    photo_url = Column(String(500), nullable=True)
    role = Column(String(20), nullable=False, default=UserRole.MEMBER.value)
    last_sign_in_time = Column(String(64), nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    def __repr__(self) -> str:
        return f"<User(id={self.id}, email='{self.email}', role='{self.role}')>"
