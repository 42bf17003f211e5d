# fitflow/routes/bookings.py
"""
Booking routes.

Endpoints:
    POST /bookings - Reserve a seat after payment
    GET /bookings/me - Caller's bookings, newest first
    GET /bookings/trainer - Bookings on the caller's slots
    GET /bookings - All bookings (admin, paginated)
    GET /bookings/{booking_id} - One booking (owner or admin)
    PATCH /bookings/{booking_id} - Update payment fields (owner or admin)
"""

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status

from ..api.dependencies import (
    get_booking_service,
    get_capacity_manager,
    get_current_principal,
    require_admin,
    require_trainer,
)
from ..core.constants import DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE
from ..models.booking import Booking
from ..principal import Principal
from ..schemas.booking import BookingCreateRequest, BookingResponse, BookingUpdateRequest
from ..services.booking_service import BookingService
from ..services.capacity_manager import BookingDetails, CapacityManager

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/bookings", tags=["bookings"])


def _to_response(booking: Booking, trainer_name: Optional[str] = None) -> BookingResponse:
    response = BookingResponse.model_validate(booking)
    if trainer_name is not None:
        response = response.model_copy(update={"trainer_name": trainer_name})
    return response


@router.post("", response_model=BookingResponse, status_code=status.HTTP_201_CREATED)
def create_booking(
    payload: BookingCreateRequest,
    principal: Principal = Depends(get_current_principal),
    manager: CapacityManager = Depends(get_capacity_manager),
) -> BookingResponse:
    """
    Reserve one seat in a slot.

    The slot's seat counter never exceeds its capacity; a full slot answers
    409 ``SLOT_FULL`` and no booking is kept.
    """
    details = BookingDetails(
        email=payload.email,
        name=payload.name,
        package_name=payload.package_name,
        price=payload.price,
        transaction_id=payload.transaction_id,
        payment_status=payload.payment_status,
    )
    booking = manager.reserve_slot(principal, payload.trainer_id, payload.slot_id, details)
    return _to_response(booking)


@router.get("/me", response_model=List[BookingResponse])
def my_bookings(
    principal: Principal = Depends(get_current_principal),
    service: BookingService = Depends(get_booking_service),
) -> List[BookingResponse]:
    return [_to_response(booking, name) for booking, name in service.list_mine(principal)]


@router.get("/trainer", response_model=List[BookingResponse])
def bookings_for_my_slots(
    principal: Principal = Depends(require_trainer),
    service: BookingService = Depends(get_booking_service),
) -> List[BookingResponse]:
    return [_to_response(booking) for booking in service.list_for_my_slots(principal)]


@router.get("", response_model=List[BookingResponse])
def list_bookings(
    skip: int = Query(0, ge=0),
    limit: int = Query(DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE),
    _: Principal = Depends(require_admin),
    service: BookingService = Depends(get_booking_service),
) -> List[BookingResponse]:
    return [_to_response(booking, name) for booking, name in service.list_all(skip, limit)]


@router.get("/{booking_id}", response_model=BookingResponse)
def get_booking(
    booking_id: str,
    principal: Principal = Depends(get_current_principal),
    service: BookingService = Depends(get_booking_service),
) -> BookingResponse:
    return _to_response(service.get_booking(principal, booking_id))


@router.patch("/{booking_id}", response_model=BookingResponse)
def update_booking(
    booking_id: str,
    payload: BookingUpdateRequest,
    principal: Principal = Depends(get_current_principal),
    service: BookingService = Depends(get_booking_service),
) -> BookingResponse:
    booking = service.update_payment(
        principal,
        booking_id,
        payment_status=payload.payment_status,
        transaction_id=payload.transaction_id,
    )
    return _to_response(booking)
