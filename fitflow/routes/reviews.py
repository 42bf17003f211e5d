# fitflow/routes/reviews.py
from typing import List

from fastapi import APIRouter, Body, Depends, Query, status

from ..api.dependencies import get_current_principal, get_review_service
from ..core.constants import MAX_PAGE_SIZE
from ..principal import Principal
from ..schemas.review import ReviewItem, ReviewSubmitRequest
from ..services.review_service import ReviewService

router = APIRouter(prefix="/reviews", tags=["reviews"])


@router.post("", response_model=ReviewItem, status_code=status.HTTP_201_CREATED)
def submit_review(
    payload: ReviewSubmitRequest = Body(...),
    principal: Principal = Depends(get_current_principal),
    service: ReviewService = Depends(get_review_service),
) -> ReviewItem:
    review = service.submit_review(
        principal,
        payload.booking_id,
        payload.rating,
        payload.comment,
    )
    return ReviewItem.model_validate(review)


@router.get("", response_model=List[ReviewItem])
def latest_reviews(
    limit: int = Query(10, ge=1, le=MAX_PAGE_SIZE),
    service: ReviewService = Depends(get_review_service),
) -> List[ReviewItem]:
    return [ReviewItem.model_validate(r) for r in service.list_latest(limit)]
