# fitflow/services/rating_service.py
"""
Trainer star ratings.

One rating per (trainer, rater). The insert and the average recompute run
in one transaction, and the recompute reads the rating rows in SQL, so two
raters submitting at once can never lose each other's vote.
"""

from dataclasses import dataclass
import logging
from typing import Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ..core.constants import MAX_RATING, MIN_RATING
from ..core.exceptions import (
    DuplicateRatingException,
    ForbiddenException,
    NotFoundException,
    ValidationException,
)
from ..principal import Principal
from ..repositories.rating_repository import RatingRepository
from ..repositories.trainer_repository import TrainerRepository
from .base import BaseService

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RatingSummary:
    average_rating: float
    total_ratings: int


class RatingService(BaseService):
    def __init__(
        self,
        db: Session,
        rating_repository: Optional[RatingRepository] = None,
        trainer_repository: Optional[TrainerRepository] = None,
    ):
        super().__init__(db)
        self.repository = rating_repository or RatingRepository(db)
        self.trainer_repository = trainer_repository or TrainerRepository(db)

    @BaseService.measure_operation("submit_rating")
    def submit_rating(self, principal: Principal, trainer_id: str, value: int) -> RatingSummary:
        if isinstance(value, bool) or not isinstance(value, int) or not MIN_RATING <= value <= MAX_RATING:
            raise ValidationException(
                f"Rating must be an integer between {MIN_RATING} and {MAX_RATING}",
                code="INVALID_RATING",
            )

        try:
            with self.transaction():
                trainer = self.trainer_repository.get_by_id(trainer_id)
                if trainer is None:
                    raise NotFoundException("Trainer not found", code="TRAINER_NOT_FOUND")
                if not trainer.is_accepted:
                    raise ForbiddenException(
                        "Only accepted trainers can be rated", code="TRAINER_NOT_ACCEPTED"
                    )
                if self.repository.has_rated(trainer_id, principal.email):
                    raise DuplicateRatingException(trainer_id)

                self.repository.create(
                    trainer_id=trainer_id,
                    rater_email=principal.email,
                    rater_name=principal.display_name,
                    value=value,
                )
                self.repository.recompute_trainer_rating(trainer_id)
        except IntegrityError:
            raise DuplicateRatingException(trainer_id)

        summary = self.get_summary(trainer_id)
        self.log_operation(
            "submit_rating", trainer_id=trainer_id, total_ratings=summary.total_ratings
        )
        return summary

    def get_summary(self, trainer_id: str) -> RatingSummary:
        if self.trainer_repository.get_by_id(trainer_id) is None:
            raise NotFoundException("Trainer not found", code="TRAINER_NOT_FOUND")
        average, total = self.repository.get_summary(trainer_id)
        return RatingSummary(average_rating=round(average, 2), total_ratings=total)
