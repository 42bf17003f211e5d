from typing import Dict, List

from pydantic import BaseModel

from .booking import BookingResponse


class AdminOverviewResponse(BaseModel):
    total_revenue: float
    recent_transactions: List[BookingResponse]
    subscriber_count: int
    paid_member_count: int
    trainer_counts: Dict[str, int]


class OrphanedBookingsResponse(BaseModel):
    older_than_minutes: int
    count: int
    bookings: List[BookingResponse]
