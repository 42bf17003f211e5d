# fitflow/repositories/user_repository.py
"""
User Repository for the FitFlow platform.

Emails are compared verbatim except for deletion, which matches
case-insensitively so an admin can remove an account regardless of how
the address was typed at sign-up.
"""

import logging
from typing import List, Optional

from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..core.exceptions import RepositoryException
from ..models.user import User
from .base_repository import BaseRepository

logger = logging.getLogger(__name__)


class UserRepository(BaseRepository[User]):
    def __init__(self, db: Session):
        super().__init__(db, User)

    def get_by_email(self, email: str) -> Optional[User]:
        try:
            return self.db.query(User).filter(User.email == email).first()
        except SQLAlchemyError as e:
            self.logger.error(f"Error getting user by email: {str(e)}")
            raise RepositoryException(f"Failed to get user by email: {str(e)}")

    def list_users(self) -> List[User]:
        try:
            return self.db.query(User).order_by(User.created_at.desc(), User.id.desc()).all()
        except SQLAlchemyError as e:
            self.logger.error(f"Error listing users: {str(e)}")
            raise RepositoryException(f"Failed to list users: {str(e)}")

    def set_role(self, email: str, role: str) -> int:
        """Set the role of the user with ``email``; returns rows affected."""
        try:
            return (
                self.db.query(User)
                .filter(User.email == email)
                .update({User.role: role}, synchronize_session="fetch")
            )
        except SQLAlchemyError as e:
            self.logger.error(f"Error setting role for {email}: {str(e)}")
            raise RepositoryException(f"Failed to set user role: {str(e)}")

    def delete_by_email_ci(self, email: str) -> int:
        try:
            return (
                self.db.query(User)
                .filter(func.lower(User.email) == email.strip().lower())
                .delete(synchronize_session=False)
            )
        except SQLAlchemyError as e:
            self.logger.error(f"Error deleting user {email}: {str(e)}")
            raise RepositoryException(f"Failed to delete user: {str(e)}")
