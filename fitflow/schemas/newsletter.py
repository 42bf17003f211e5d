from datetime import datetime

from pydantic import EmailStr, Field

from ._strict_base import ORMResponseModel, StrictRequestModel


class SubscribeRequest(StrictRequestModel):
    name: str = Field(..., min_length=1, max_length=120)
    email: EmailStr


class SubscriberResponse(ORMResponseModel):
    id: str
    name: str
    email: str
    subscribed_at: datetime
