# fitflow/schemas/booking.py
from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_serializer

from ..core.enums import PaymentStatus
from ._strict_base import StrictRequestModel


class BookingCreateRequest(StrictRequestModel):
    trainer_id: str = Field(..., min_length=1)
    slot_id: str = Field(..., min_length=1)
    email: EmailStr
    name: Optional[str] = Field(None, max_length=120)
    package_name: Optional[str] = Field(None, max_length=60)
    price: Decimal = Field(..., gt=0, max_digits=10, decimal_places=2)
    transaction_id: str = Field(..., min_length=1, max_length=255)
    payment_status: PaymentStatus = PaymentStatus.PAID


class BookingUpdateRequest(StrictRequestModel):
    payment_status: Optional[PaymentStatus] = None
    transaction_id: Optional[str] = Field(None, min_length=1, max_length=255)


class BookingResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    user_email: str
    user_name: Optional[str] = None
    trainer_id: str
    trainer_name: Optional[str] = None
    slot_id: str
    slot_name: Optional[str] = None
    package_name: Optional[str] = None
    price: Decimal
    transaction_id: str
    payment_status: str
    has_reviewed: bool
    created_at: datetime
    updated_at: Optional[datetime] = None

    @field_serializer("price")
    def _price_as_number(self, value: Decimal) -> float:
        return float(value)


class PaymentHistoryItem(BaseModel):
    booking_id: str
    transaction_id: str
    amount: float
    payment_status: str
    paid_at: datetime
