# fitflow/services/payment_service.py
"""
Payment intents and payment history.

The service only opens a PaymentIntent; the client confirms the card
payment with the processor and then submits the resulting transaction id
with the booking. Nothing here ever refunds or reverses a payment.
"""

from decimal import ROUND_HALF_UP, Decimal
import logging
from typing import List, Optional

from sqlalchemy.orm import Session

from ..core.exceptions import ServiceException, ValidationException
from ..integrations.payment_gateway import PaymentGateway, PaymentGatewayError, PaymentHandle
from ..models.booking import Booking
from ..principal import Principal
from ..repositories.booking_repository import BookingRepository
from .base import BaseService

logger = logging.getLogger(__name__)


def to_cents(amount: Decimal) -> int:
    """Convert a dollar amount to integer cents, rounding half up."""
    return int((amount * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


class PaymentService(BaseService):
    def __init__(
        self,
        db: Session,
        gateway: PaymentGateway,
        currency: str = "usd",
        booking_repository: Optional[BookingRepository] = None,
    ):
        super().__init__(db)
        self.gateway = gateway
        self.currency = currency
        self.booking_repository = booking_repository or BookingRepository(db)

    @BaseService.measure_operation("create_payment_intent")
    def create_payment_intent(self, principal: Principal, amount: Decimal) -> PaymentHandle:
        if amount is None or amount <= 0:
            raise ValidationException("Amount must be greater than zero", code="INVALID_AMOUNT")
        amount_cents = to_cents(amount)
        if amount_cents <= 0:
            raise ValidationException("Amount must be at least one cent", code="INVALID_AMOUNT")

        try:
            handle = self.gateway.create_payment_intent(
                amount_cents, self.currency, metadata={"email": principal.email}
            )
        except PaymentGatewayError as exc:
            raise ServiceException("Payment processor error", code="PAYMENT_GATEWAY_ERROR") from exc

        self.log_operation("create_payment_intent", payment_intent_id=handle.id, amount_cents=amount_cents)
        return handle

    def history(self, principal: Principal) -> List[Booking]:
        return self.booking_repository.list_settled_for_user(principal.email)
