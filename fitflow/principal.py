"""Principal abstraction for authenticated callers."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .core.enums import UserRole


@dataclass(frozen=True)
class Principal:
    """The authenticated identity making a request."""

    email: str
    role: UserRole = UserRole.MEMBER
    display_name: Optional[str] = None
    user_id: Optional[str] = None

    @property
    def is_admin(self) -> bool:
        return self.role is UserRole.ADMIN

    def has_role(self, *roles: UserRole) -> bool:
        return self.role in roles
