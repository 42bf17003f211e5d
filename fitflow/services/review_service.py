# fitflow/services/review_service.py
"""
Review Service.

A member reviews a trainer through one of their bookings. Each booking can
carry at most one review: the review row is unique per booking, and the
booking's ``has_reviewed`` flag is flipped by a conditional update in the
same transaction.
"""

import logging
from typing import List, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ..core.constants import MAX_RATING, MAX_REVIEW_COMMENT_LENGTH, MIN_RATING
from ..core.exceptions import (
    DuplicateReviewException,
    ForbiddenException,
    NotFoundException,
    ValidationException,
)
from ..models.review import Review
from ..principal import Principal
from ..repositories.booking_repository import BookingRepository
from ..repositories.review_repository import ReviewRepository
from .base import BaseService

logger = logging.getLogger(__name__)


class ReviewService(BaseService):
    def __init__(
        self,
        db: Session,
        review_repository: Optional[ReviewRepository] = None,
        booking_repository: Optional[BookingRepository] = None,
    ):
        super().__init__(db)
        self.repository = review_repository or ReviewRepository(db)
        self.booking_repository = booking_repository or BookingRepository(db)

    @BaseService.measure_operation("submit_review")
    def submit_review(
        self,
        principal: Principal,
        booking_id: str,
        rating: int,
        comment: Optional[str] = None,
    ) -> Review:
        if not MIN_RATING <= rating <= MAX_RATING:
            raise ValidationException("Rating must be between 1 and 5", code="INVALID_RATING")
        if comment is not None:
            comment = comment.strip() or None
        if comment and len(comment) > MAX_REVIEW_COMMENT_LENGTH:
            raise ValidationException("Comment is too long", code="COMMENT_TOO_LONG")

        try:
            with self.transaction():
                booking = self.booking_repository.get_by_id(booking_id)
                if booking is None:
                    raise NotFoundException("Booking not found", code="BOOKING_NOT_FOUND")
                if booking.user_email != principal.email:
                    raise ForbiddenException("You can only review your own bookings")
                if booking.has_reviewed or self.repository.exists_for_booking(booking_id):
                    raise DuplicateReviewException(booking_id)

                review = self.repository.create(
                    trainer_id=booking.trainer_id,
                    booking_id=booking_id,
                    reviewer_email=principal.email,
                    reviewer_name=principal.display_name or booking.user_name,
                    rating=rating,
                    comment=comment,
                )
                if not self.booking_repository.mark_reviewed(booking_id):
                    raise DuplicateReviewException(booking_id)
        except IntegrityError:
            raise DuplicateReviewException(booking_id)

        self.log_operation("submit_review", booking_id=booking_id, trainer_id=review.trainer_id)
        return review

    def list_latest(self, limit: int) -> List[Review]:
        return self.repository.list_latest(limit)

    def list_for_trainer(self, trainer_id: str) -> List[Review]:
        return self.repository.list_for_trainer(trainer_id)
