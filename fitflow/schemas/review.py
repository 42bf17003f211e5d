# fitflow/schemas/review.py
from datetime import datetime
from typing import Optional

from pydantic import Field
from pydantic.functional_validators import field_validator

from ..core.constants import MAX_REVIEW_COMMENT_LENGTH
from ._strict_base import ORMResponseModel, StrictRequestModel


class ReviewSubmitRequest(StrictRequestModel):
    booking_id: str = Field(..., min_length=1)
    rating: int = Field(..., ge=1, le=5)
    comment: Optional[str] = Field(None, max_length=MAX_REVIEW_COMMENT_LENGTH)

    @field_validator("comment")
    @classmethod
    def _clean_text(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return v
        return v.strip() or None


class ReviewItem(ORMResponseModel):
    id: str
    trainer_id: str
    booking_id: str
    reviewer_name: Optional[str] = None
    rating: int
    comment: Optional[str] = None
    created_at: datetime
