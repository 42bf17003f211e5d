# fitflow/services/user_service.py
"""
User directory operations.

Registration never grants a role: new users start as ``member`` and only an
admin (directly, or through a trainer decision) moves them elsewhere.
"""

import logging
from typing import List, Optional, Tuple

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ..core.enums import UserRole
from ..core.exceptions import ConflictException, ForbiddenException, NotFoundException
from ..models.user import User
from ..principal import Principal
from ..repositories.user_repository import UserRepository
from .base import BaseService

logger = logging.getLogger(__name__)


class UserService(BaseService):
    def __init__(self, db: Session, user_repository: Optional[UserRepository] = None):
        super().__init__(db)
        self.repository = user_repository or UserRepository(db)

    @BaseService.measure_operation("list_users")
    def list_users(self) -> List[User]:
        return self.repository.list_users()

    @BaseService.measure_operation("get_user")
    def get_user(self, email: str) -> User:
        user = self.repository.get_by_email(email)
        if user is None:
            raise NotFoundException("User not found", code="USER_NOT_FOUND")
        return user

    def get_role(self, email: str) -> str:
        user = self.repository.get_by_email(email)
        return user.role if user is not None else UserRole.MEMBER.value

    @BaseService.measure_operation("upsert_user")
    def upsert_user(
        self,
        *,
        email: str,
        display_name: Optional[str] = None,
        photo_url: Optional[str] = None,
        last_sign_in_time: Optional[str] = None,
    ) -> Tuple[User, bool]:
        """
        Insert on first registration, refresh profile fields afterwards.

        Returns ``(user, created)``.
        """
        try:
            with self.transaction():
                user = self.repository.get_by_email(email)
                if user is not None:
                    if display_name is not None:
                        user.display_name = display_name
                    if photo_url is not None:
                        user.photo_url = photo_url
                    if last_sign_in_time is not None:
                        user.last_sign_in_time = last_sign_in_time
                    created = False
                else:
                    user = self.repository.create(
                        email=email,
                        display_name=display_name,
                        photo_url=photo_url,
                        last_sign_in_time=last_sign_in_time,
                        role=UserRole.MEMBER.value,
                    )
                    created = True
        except IntegrityError:
            self.logger.info(f"Concurrent registration for {email}")
            raise ConflictException("User is being registered concurrently", code="USER_EXISTS")

        self.log_operation("upsert_user", email=email, inserted=created)
        return user, created

    @BaseService.measure_operation("update_user")
    def update_user(
        self,
        principal: Principal,
        email: str,
        *,
        last_sign_in_time: Optional[str] = None,
        role: Optional[UserRole] = None,
    ) -> User:
        if role is not None and not principal.is_admin:
            raise ForbiddenException("Only an admin can change roles", code="ROLE_CHANGE_FORBIDDEN")
        if principal.email != email and not principal.is_admin:
            raise ForbiddenException("You can only update your own profile")

        with self.transaction():
            user = self.repository.get_by_email(email)
            if user is None:
                raise NotFoundException("User not found", code="USER_NOT_FOUND")
            if last_sign_in_time is not None:
                user.last_sign_in_time = last_sign_in_time
            if role is not None:
                user.role = role.value

        if role is not None:
            self.log_operation("change_role", email=email, role=role.value, admin=principal.email)
        return user

    @BaseService.measure_operation("delete_user")
    def delete_user(self, email: str) -> None:
        with self.transaction():
            deleted = self.repository.delete_by_email_ci(email)
            if deleted == 0:
                raise NotFoundException("User not found", code="USER_NOT_FOUND")
        self.log_operation("delete_user", email=email)
