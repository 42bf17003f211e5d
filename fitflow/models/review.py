# fitflow/models/review.py
"""
Review model.

Design notes:
- Review is per booking (one review per booking via DB unique constraint)
- The booking's ``has_reviewed`` flag is flipped in the same transaction
"""

from datetime import datetime, timezone

from sqlalchemy import CheckConstraint, Column, DateTime, Index, Integer, String, Text, UniqueConstraint

from ..core.ulid_helper import generate_ulid
from ..database import Base


class Review(Base):
    __tablename__ = "reviews"

    id = Column(String(26), primary_key=True, default=generate_ulid)
    trainer_id = Column(String(26), nullable=False, index=True)
    booking_id = Column(String(26), nullable=False)
    reviewer_email = Column(String(255), nullable=False, index=True)
    reviewer_name = Column(String(120), nullable=True)
    rating = Column(Integer, nullable=False)
    comment = Column(Text, nullable=True)
    created_at = Column(
        DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc)
    )

    __table_args__ = (
        UniqueConstraint("booking_id", name="uq_reviews_booking"),
        CheckConstraint("rating >= 1 AND rating <= 5", name="ck_reviews_rating_range"),
        Index("idx_reviews_created_at", "created_at"),
    )
