# fitflow/repositories/rating_repository.py
"""
Repository for trainer star ratings.

Follows repository pattern: no business logic, DB-only operations. The
trainer's ``rating`` and ``rating_count`` are recomputed from the rating
rows by one UPDATE with scalar subqueries, never read-modify-written in
Python.
"""

import logging
from typing import Tuple

from sqlalchemy import func, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..core.exceptions import RepositoryException
from ..models.trainer import Trainer, TrainerRating
from .base_repository import BaseRepository

logger = logging.getLogger(__name__)


class RatingRepository(BaseRepository[TrainerRating]):
    def __init__(self, db: Session):
        super().__init__(db, TrainerRating)

    def has_rated(self, trainer_id: str, rater_email: str) -> bool:
        try:
            return (
                self.db.query(TrainerRating.id)
                .filter(
                    TrainerRating.trainer_id == trainer_id,
                    TrainerRating.rater_email == rater_email,
                )
                .first()
                is not None
            )
        except SQLAlchemyError as e:
            self.logger.error(f"Error checking rating existence: {str(e)}")
            raise RepositoryException(f"Failed to check rating existence: {str(e)}")

    def recompute_trainer_rating(self, trainer_id: str) -> int:
        """Refresh the trainer's average and count from its rating rows."""
        try:
            average = (
                select(func.coalesce(func.avg(TrainerRating.value), 0.0))
                .where(TrainerRating.trainer_id == trainer_id)
                .scalar_subquery()
            )
            total = (
                select(func.count(TrainerRating.id))
                .where(TrainerRating.trainer_id == trainer_id)
                .scalar_subquery()
            )
            result = self.db.execute(
                update(Trainer)
                .where(Trainer.id == trainer_id)
                .values(rating=average, rating_count=total)
                .execution_options(synchronize_session=False)
            )
            return result.rowcount
        except SQLAlchemyError as e:
            self.logger.error(f"Error recomputing rating for trainer {trainer_id}: {str(e)}")
            raise RepositoryException(f"Failed to recompute trainer rating: {str(e)}")

    def get_summary(self, trainer_id: str) -> Tuple[float, int]:
        """Return ``(rating, rating_count)`` as stored on the trainer row."""
        try:
            row = (
                self.db.query(Trainer.rating, Trainer.rating_count)
                .filter(Trainer.id == trainer_id)
                .first()
            )
            if row is None:
                return (0.0, 0)
            return (float(row[0] or 0.0), int(row[1] or 0))
        except SQLAlchemyError as e:
            self.logger.error(f"Error reading rating summary: {str(e)}")
            raise RepositoryException(f"Failed to read rating summary: {str(e)}")
