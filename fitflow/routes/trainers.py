# fitflow/routes/trainers.py
"""
Trainer routes.

Endpoints:
    POST /trainers - Apply to become a trainer
    GET /trainers - Accepted trainers (public)
    GET /trainers/applications - Pending applications (admin)
    GET /trainers/me - Caller's own application
    GET /trainers/slots - Caller's slots with rosters (trainer)
    POST /trainers/slots - Publish a slot (accepted trainer)
    DELETE /trainers/slots/{slot_id} - Remove an own slot
    POST /trainers/rating/{trainer_id} - Rate a trainer once
    GET /trainers/{trainer_id} - Trainer detail with public slots
    GET /trainers/{trainer_id}/ratings - Rating summary
    GET /trainers/{trainer_id}/reviews - Reviews left after sessions
    GET /trainers/{trainer_id}/slots/{slot_id} - Slot detail for the booking page
    PATCH /trainers/{trainer_id}/status - Accept or reject (admin)

Static paths are declared before ``/{trainer_id}`` so they are matched first.
"""

from typing import List

from fastapi import APIRouter, Depends, status

from ..api.dependencies import (
    get_current_principal,
    get_rating_service,
    get_review_service,
    get_trainer_service,
    require_admin,
    require_trainer,
)
from ..principal import Principal
from ..schemas.common import MessageResponse
from ..schemas.review import ReviewItem
from ..schemas.trainer import (
    RatingRequest,
    RatingSummaryResponse,
    SlotCreateRequest,
    SlotDetailResponse,
    SlotOwnerResponse,
    SlotPublicResponse,
    TrainerApplicationRequest,
    TrainerApplicationResponse,
    TrainerDetailResponse,
    TrainerStatusUpdateRequest,
    TrainerSummaryResponse,
)
from ..services.rating_service import RatingService
from ..services.review_service import ReviewService
from ..services.trainer_service import SlotSpec, TrainerApplication, TrainerService

router = APIRouter(prefix="/trainers", tags=["trainers"])


@router.post("", response_model=TrainerApplicationResponse, status_code=status.HTTP_201_CREATED)
def apply(
    payload: TrainerApplicationRequest,
    principal: Principal = Depends(get_current_principal),
    service: TrainerService = Depends(get_trainer_service),
) -> TrainerApplicationResponse:
    trainer = service.apply(principal, TrainerApplication(**payload.model_dump()))
    return TrainerApplicationResponse.model_validate(trainer)


@router.get("", response_model=List[TrainerSummaryResponse])
def list_trainers(
    service: TrainerService = Depends(get_trainer_service),
) -> List[TrainerSummaryResponse]:
    return [TrainerSummaryResponse.model_validate(t) for t in service.list_accepted()]


@router.get("/applications", response_model=List[TrainerApplicationResponse])
def list_applications(
    _: Principal = Depends(require_admin),
    service: TrainerService = Depends(get_trainer_service),
) -> List[TrainerApplicationResponse]:
    return [TrainerApplicationResponse.model_validate(t) for t in service.list_applications()]


@router.get("/me", response_model=TrainerApplicationResponse)
def my_application(
    principal: Principal = Depends(get_current_principal),
    service: TrainerService = Depends(get_trainer_service),
) -> TrainerApplicationResponse:
    return TrainerApplicationResponse.model_validate(service.get_my_application(principal))


# Slots


@router.get("/slots", response_model=List[SlotOwnerResponse])
def my_slots(
    principal: Principal = Depends(require_trainer),
    service: TrainerService = Depends(get_trainer_service),
) -> List[SlotOwnerResponse]:
    return [SlotOwnerResponse.model_validate(slot) for slot in service.list_my_slots(principal)]


@router.post("/slots", response_model=SlotOwnerResponse, status_code=status.HTTP_201_CREATED)
def add_slot(
    payload: SlotCreateRequest,
    principal: Principal = Depends(require_trainer),
    service: TrainerService = Depends(get_trainer_service),
) -> SlotOwnerResponse:
    slot = service.add_slot(principal, SlotSpec(**payload.model_dump()))
    return SlotOwnerResponse.model_validate(slot)


@router.delete("/slots/{slot_id}", response_model=MessageResponse)
def delete_slot(
    slot_id: str,
    principal: Principal = Depends(get_current_principal),
    service: TrainerService = Depends(get_trainer_service),
) -> MessageResponse:
    service.delete_slot(principal, slot_id)
    return MessageResponse(message="Slot deleted")


# Ratings


@router.post("/rating/{trainer_id}", response_model=RatingSummaryResponse)
def rate_trainer(
    trainer_id: str,
    payload: RatingRequest,
    principal: Principal = Depends(get_current_principal),
    service: RatingService = Depends(get_rating_service),
) -> RatingSummaryResponse:
    summary = service.submit_rating(principal, trainer_id, payload.rating)
    return RatingSummaryResponse(
        average_rating=summary.average_rating, total_ratings=summary.total_ratings
    )


# Single trainer


@router.get("/{trainer_id}", response_model=TrainerDetailResponse)
def get_trainer(
    trainer_id: str,
    service: TrainerService = Depends(get_trainer_service),
) -> TrainerDetailResponse:
    return TrainerDetailResponse.model_validate(service.get_trainer(trainer_id))


@router.get("/{trainer_id}/ratings", response_model=RatingSummaryResponse)
def get_ratings(
    trainer_id: str,
    service: RatingService = Depends(get_rating_service),
) -> RatingSummaryResponse:
    summary = service.get_summary(trainer_id)
    return RatingSummaryResponse(
        average_rating=summary.average_rating, total_ratings=summary.total_ratings
    )


@router.get("/{trainer_id}/reviews", response_model=List[ReviewItem])
def get_reviews(
    trainer_id: str,
    service: ReviewService = Depends(get_review_service),
) -> List[ReviewItem]:
    return [ReviewItem.model_validate(r) for r in service.list_for_trainer(trainer_id)]


@router.get("/{trainer_id}/slots/{slot_id}", response_model=SlotDetailResponse)
def get_slot(
    trainer_id: str,
    slot_id: str,
    service: TrainerService = Depends(get_trainer_service),
) -> SlotDetailResponse:
    trainer, slot = service.get_slot_detail(trainer_id, slot_id)
    return SlotDetailResponse(
        trainer=TrainerSummaryResponse.model_validate(trainer),
        slot=SlotPublicResponse.model_validate(slot),
    )


@router.patch("/{trainer_id}/status", response_model=TrainerApplicationResponse)
def decide_application(
    trainer_id: str,
    payload: TrainerStatusUpdateRequest,
    _: Principal = Depends(require_admin),
    service: TrainerService = Depends(get_trainer_service),
) -> TrainerApplicationResponse:
    trainer = service.decide(trainer_id, payload.status, payload.feedback)
    return TrainerApplicationResponse.model_validate(trainer)
