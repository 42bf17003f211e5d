from decimal import Decimal

from pydantic import BaseModel, Field

from ._strict_base import StrictRequestModel


class PaymentIntentRequest(StrictRequestModel):
    amount: Decimal = Field(..., gt=0, description="Amount in dollars")


class PaymentIntentResponse(BaseModel):
    client_secret: str
    payment_intent_id: str
    amount: int = Field(..., description="Amount in cents")
    currency: str
