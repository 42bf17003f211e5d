# fitflow/repositories/review_repository.py
"""
Repository for booking reviews.

Follows repository pattern: no business logic, DB-only operations.
"""

import logging
from typing import List

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..core.exceptions import RepositoryException
from ..models.review import Review
from .base_repository import BaseRepository

logger = logging.getLogger(__name__)


class ReviewRepository(BaseRepository[Review]):
    """Data access for `Review`."""

    def __init__(self, db: Session):
        super().__init__(db, Review)

    def exists_for_booking(self, booking_id: str) -> bool:
        try:
            return (
                self.db.query(Review.id).filter(Review.booking_id == booking_id).first()
                is not None
            )
        except SQLAlchemyError as e:
            self.logger.error(f"Error checking review existence: {e}")
            raise RepositoryException(f"Failed to check review existence: {e}")

    def list_latest(self, limit: int) -> List[Review]:
        try:
            return (
                self.db.query(Review)
                .order_by(Review.created_at.desc(), Review.id.desc())
                .limit(limit)
                .all()
            )
        except SQLAlchemyError as e:
            self.logger.error(f"Error listing reviews: {e}")
            raise RepositoryException(f"Failed to list reviews: {e}")

    def list_for_trainer(self, trainer_id: str) -> List[Review]:
        try:
            return (
                self.db.query(Review)
                .filter(Review.trainer_id == trainer_id)
                .order_by(Review.created_at.desc(), Review.id.desc())
                .all()
            )
        except SQLAlchemyError as e:
            self.logger.error(f"Error listing reviews for trainer {trainer_id}: {e}")
            raise RepositoryException(f"Failed to list trainer reviews: {e}")
