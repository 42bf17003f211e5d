# fitflow/routes/payments.py
"""
Payment routes.

The card is charged on the client against the intent created here; the
resulting transaction id then travels with ``POST /bookings``.
"""

from typing import List

from fastapi import APIRouter, Depends

from ..api.dependencies import get_current_principal, get_payment_service
from ..principal import Principal
from ..schemas.booking import PaymentHistoryItem
from ..schemas.payment import PaymentIntentRequest, PaymentIntentResponse
from ..services.payment_service import PaymentService

router = APIRouter(prefix="/payments", tags=["payments"])


@router.post("/create-intent", response_model=PaymentIntentResponse)
def create_payment_intent(
    payload: PaymentIntentRequest,
    principal: Principal = Depends(get_current_principal),
    service: PaymentService = Depends(get_payment_service),
) -> PaymentIntentResponse:
    handle = service.create_payment_intent(principal, payload.amount)
    return PaymentIntentResponse(
        client_secret=handle.client_secret,
        payment_intent_id=handle.id,
        amount=handle.amount_cents,
        currency=handle.currency,
    )


@router.get("/history", response_model=List[PaymentHistoryItem])
def payment_history(
    principal: Principal = Depends(get_current_principal),
    service: PaymentService = Depends(get_payment_service),
) -> List[PaymentHistoryItem]:
    return [
        PaymentHistoryItem(
            booking_id=booking.id,
            transaction_id=booking.transaction_id,
            amount=float(booking.price),
            payment_status=booking.payment_status,
            paid_at=booking.created_at,
        )
        for booking in service.history(principal)
    ]
