# fitflow/services/booking_service.py
"""
Booking ledger reads and payment updates.

Creating a booking goes through ``CapacityManager.reserve_slot``; this
service covers everything after that. A booking is immutable apart from
its payment fields and the review flag, which only the review service
sets.
"""

import logging
from typing import List, Optional, Tuple

from sqlalchemy.orm import Session

from ..core.enums import PaymentStatus
from ..core.exceptions import ForbiddenException, NotFoundException, ValidationException
from ..models.booking import Booking
from ..principal import Principal
from ..repositories.booking_repository import BookingRepository
from ..repositories.trainer_repository import TrainerRepository
from .base import BaseService

logger = logging.getLogger(__name__)


class BookingService(BaseService):
    def __init__(
        self,
        db: Session,
        booking_repository: Optional[BookingRepository] = None,
        trainer_repository: Optional[TrainerRepository] = None,
    ):
        super().__init__(db)
        self.repository = booking_repository or BookingRepository(db)
        self.trainer_repository = trainer_repository or TrainerRepository(db)

    def list_mine(self, principal: Principal) -> List[Tuple[Booking, Optional[str]]]:
        return self.repository.list_for_user(principal.email)

    def list_for_my_slots(self, principal: Principal) -> List[Booking]:
        trainer = self.trainer_repository.get_by_email(principal.email)
        if trainer is None:
            raise NotFoundException("Trainer profile not found", code="TRAINER_NOT_FOUND")
        return self.repository.list_for_trainer(trainer.id)

    def list_all(self, skip: int, limit: int) -> List[Tuple[Booking, Optional[str]]]:
        return self.repository.list_all(skip=skip, limit=limit)

    def _get_visible(self, principal: Principal, booking_id: str) -> Booking:
        booking = self.repository.get_by_id(booking_id)
        if booking is None:
            raise NotFoundException("Booking not found", code="BOOKING_NOT_FOUND")
        if booking.user_email != principal.email and not principal.is_admin:
            raise ForbiddenException("You do not have access to this booking")
        return booking

    def get_booking(self, principal: Principal, booking_id: str) -> Booking:
        return self._get_visible(principal, booking_id)

    @BaseService.measure_operation("update_payment")
    def update_payment(
        self,
        principal: Principal,
        booking_id: str,
        *,
        payment_status: Optional[PaymentStatus] = None,
        transaction_id: Optional[str] = None,
    ) -> Booking:
        changes = {}
        if payment_status is not None:
            changes["payment_status"] = payment_status.value
        if transaction_id is not None:
            if not transaction_id.strip():
                raise ValidationException(
                    "transaction_id cannot be blank", code="MISSING_TRANSACTION_ID"
                )
            changes["transaction_id"] = transaction_id.strip()
        if not changes:
            raise ValidationException("Nothing to update", code="EMPTY_UPDATE")

        with self.transaction():
            booking = self._get_visible(principal, booking_id)
            self.repository.update_payment(booking, changes)

        self.log_operation("update_payment", booking_id=booking_id, fields=sorted(changes))
        return booking
