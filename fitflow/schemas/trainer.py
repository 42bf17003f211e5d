# fitflow/schemas/trainer.py
"""Trainer, slot and rating DTOs."""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator

from ..core.constants import MAX_RATING, MIN_RATING, WEEKDAYS
from ..core.enums import TrainerStatus
from ._strict_base import ORMResponseModel, StrictRequestModel


def _normalize_days(days: List[str]) -> List[str]:
    by_lower = {day.lower(): day for day in WEEKDAYS}
    normalized: List[str] = []
    for day in days:
        canonical = by_lower.get(day.strip().lower())
        if canonical is None:
            raise ValueError(f"Unknown weekday: {day!r}")
        if canonical not in normalized:
            normalized.append(canonical)
    return normalized


class TrainerApplicationRequest(StrictRequestModel):
    name: str = Field(..., min_length=1, max_length=120)
    age: Optional[int] = Field(None, ge=16, le=100)
    photo_url: Optional[str] = Field(None, max_length=500)
    experience_years: int = Field(0, ge=0, le=80)
    skills: List[str] = Field(default_factory=list)
    available_days: List[str] = Field(default_factory=list)
    available_time: Optional[str] = Field(None, max_length=120)
    bio: Optional[str] = Field(None, max_length=2000)

    @field_validator("available_days")
    @classmethod
    def _days(cls, value: List[str]) -> List[str]:
        return _normalize_days(value)


class TrainerStatusUpdateRequest(StrictRequestModel):
    status: TrainerStatus = Field(..., description="accepted or rejected")
    feedback: Optional[str] = Field(None, max_length=2000)


class SlotCreateRequest(StrictRequestModel):
    name: str = Field(..., min_length=1, max_length=120)
    time: str = Field(..., min_length=1, max_length=64)
    days: List[str] = Field(..., min_length=1)
    duration_minutes: int = Field(60, gt=0, le=24 * 60)
    max_participants: int = Field(..., ge=1)
    class_name: Optional[str] = Field(None, max_length=120)

    @field_validator("days")
    @classmethod
    def _days(cls, value: List[str]) -> List[str]:
        return _normalize_days(value)


class SlotMemberResponse(ORMResponseModel):
    name: Optional[str] = None
    email: str
    package: Optional[str] = None
    joined_at: datetime


class SlotPublicResponse(ORMResponseModel):
    """Slot as shown to members: the roster's emails are projected out."""

    id: str
    trainer_id: str
    name: str
    time: str
    days: List[str]
    duration_minutes: int
    class_name: Optional[str] = None
    max_participants: int
    booking_count: int
    is_booked: bool
    seats_left: int


class SlotOwnerResponse(SlotPublicResponse):
    """Slot as shown to its trainer, roster included."""

    members: List[SlotMemberResponse] = Field(default_factory=list)


class TrainerSummaryResponse(ORMResponseModel):
    id: str
    name: str
    photo_url: Optional[str] = None
    experience_years: int
    skills: List[str]
    available_days: List[str]
    available_time: Optional[str] = None
    rating: float
    rating_count: int


class TrainerDetailResponse(TrainerSummaryResponse):
    age: Optional[int] = None
    bio: Optional[str] = None
    slots: List[SlotPublicResponse] = Field(default_factory=list)


class TrainerApplicationResponse(ORMResponseModel):
    id: str
    email: str
    name: str
    age: Optional[int] = None
    photo_url: Optional[str] = None
    experience_years: int
    skills: List[str]
    available_days: List[str]
    available_time: Optional[str] = None
    bio: Optional[str] = None
    status: TrainerStatus
    feedback: Optional[str] = None
    applied_at: datetime
    decided_at: Optional[datetime] = None


class SlotDetailResponse(BaseModel):
    trainer: TrainerSummaryResponse
    slot: SlotPublicResponse


class RatingRequest(StrictRequestModel):
    rating: int = Field(..., ge=MIN_RATING, le=MAX_RATING)


class RatingSummaryResponse(BaseModel):
    average_rating: float
    total_ratings: int
