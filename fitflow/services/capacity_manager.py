# fitflow/services/capacity_manager.py
"""
Seat reservation for trainer slots.

A reservation touches two records that do not share a transaction: the
booking ledger row and the trainer's slot. It runs as a two-phase saga:

1. Validate the trainer and slot, then insert and commit the booking.
2. Take a seat with one conditional UPDATE (``booking_count < max``) and
   append the roster entry in the same transaction.

When phase 2 matches no row (the slot filled up, or the slot or trainer
vanished in between) the booking from phase 1 is deleted again and the
caller gets a conflict. The seat counter itself can never exceed
``max_participants``: the capacity check lives in the UPDATE's WHERE
clause, and the table carries a CHECK constraint as a second guard.

A booking that survives a crash between the phases, or a failed
compensation, has no roster entry; ``reconcile_orphaned_bookings`` reports
those for manual follow-up. Payments are never reversed here.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from decimal import Decimal
import logging
from typing import List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..core.enums import PaymentStatus
from ..core.exceptions import (
    BookingConflictException,
    DomainException,
    ForbiddenException,
    NotFoundException,
    RepositoryException,
    ServiceException,
    SlotFullException,
    ValidationException,
)
from ..models.booking import Booking
from ..monitoring.prometheus_metrics import prometheus_metrics
from ..principal import Principal
from ..repositories.booking_repository import BookingRepository
from ..repositories.slot_repository import SlotRepository
from ..repositories.trainer_repository import TrainerRepository
from .base import BaseService

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BookingDetails:
    """Who is booking and what was paid."""

    email: str
    name: Optional[str]
    package_name: Optional[str]
    price: Decimal
    transaction_id: str
    payment_status: PaymentStatus = PaymentStatus.PAID


class CapacityManager(BaseService):
    """Reserves seats without ever overbooking a slot."""

    def __init__(
        self,
        db: Session,
        trainer_repository: Optional[TrainerRepository] = None,
        slot_repository: Optional[SlotRepository] = None,
        booking_repository: Optional[BookingRepository] = None,
    ):
        super().__init__(db)
        self.trainer_repository = trainer_repository or TrainerRepository(db)
        self.slot_repository = slot_repository or SlotRepository(db)
        self.booking_repository = booking_repository or BookingRepository(db)

    @BaseService.measure_operation("reserve_slot")
    def reserve_slot(
        self, principal: Principal, trainer_id: str, slot_id: str, details: BookingDetails
    ) -> Booking:
        """
        Reserve one seat in ``slot_id`` for the calling principal.

        Raises:
            ForbiddenException: booking for someone else, or trainer not accepted
            ValidationException: non-positive price or missing transaction id
            NotFoundException: unknown trainer or slot
            SlotFullException: no seat left
            BookingConflictException: the slot changed under the reservation
        """
        if details.email != principal.email:
            raise ForbiddenException(
                "You can only book a slot for yourself", code="SELF_BOOKING_ONLY"
            )
        if details.price is None or details.price <= 0:
            raise ValidationException("Price must be greater than zero", code="INVALID_PRICE")
        if not (details.transaction_id or "").strip():
            raise ValidationException("A payment transaction id is required", code="MISSING_TRANSACTION_ID")

        # Phase 1: validate and record the booking
        with self.transaction():
            trainer = self.trainer_repository.get_by_id(trainer_id)
            if trainer is None:
                raise NotFoundException("Trainer not found", code="TRAINER_NOT_FOUND")
            if not trainer.is_accepted:
                raise ForbiddenException(
                    "Trainer is not accepting bookings", code="TRAINER_NOT_ACCEPTED"
                )

            slot = self.slot_repository.get_for_trainer(trainer_id, slot_id)
            if slot is None:
                raise NotFoundException("Slot not found", code="SLOT_NOT_FOUND")
            # Advisory only; the conditional update in phase 2 decides
            if slot.booking_count >= slot.max_participants:
                prometheus_metrics.inc_reservation("rejected_full")
                raise SlotFullException(trainer_id, slot_id, slot.max_participants)

            booking = self.booking_repository.create(
                user_email=details.email,
                user_name=details.name,
                trainer_id=trainer_id,
                slot_id=slot_id,
                slot_name=slot.name,
                package_name=details.package_name,
                price=details.price,
                transaction_id=details.transaction_id.strip(),
                payment_status=details.payment_status.value,
            )

        booking_id = booking.id
        transaction_id = booking.transaction_id
        self._after_booking_inserted(booking)

        # Phase 2: take the seat
        try:
            self._before_slot_update(booking)
            with self.transaction():
                reserved = self.slot_repository.reserve_seat(trainer_id, slot_id)
                if reserved:
                    self.slot_repository.add_member(
                        slot_id=slot_id,
                        booking_id=booking_id,
                        email=details.email,
                        name=details.name,
                        package=details.package_name,
                    )
        except DomainException:
            self._compensate(booking_id, trainer_id, slot_id, transaction_id)
            raise
        except (SQLAlchemyError, RepositoryException) as exc:
            self._compensate(booking_id, trainer_id, slot_id, transaction_id)
            raise ServiceException("Failed to reserve a seat in the slot") from exc

        if not reserved:
            self._compensate(booking_id, trainer_id, slot_id, transaction_id)
            current = self.slot_repository.get_for_trainer(trainer_id, slot_id, refresh=True)
            capacity = current.max_participants if current is not None else None
            slot_full = current is not None and current.booking_count >= current.max_participants
            self.db.rollback()
            if slot_full:
                raise SlotFullException(trainer_id, slot_id, capacity)
            raise BookingConflictException(
                "The slot is no longer available",
                details={"trainer_id": trainer_id, "slot_id": slot_id},
            )

        prometheus_metrics.inc_reservation("committed")
        self.log_operation(
            "reserve_slot", booking_id=booking_id, trainer_id=trainer_id, slot_id=slot_id
        )
        return booking

    def _compensate(
        self, booking_id: str, trainer_id: str, slot_id: str, transaction_id: str
    ) -> None:
        """Delete the phase-1 booking; log loudly if that fails too."""
        try:
            with self.transaction():
                self.booking_repository.delete_by_id(booking_id)
        except (SQLAlchemyError, RepositoryException, ServiceException) as exc:
            prometheus_metrics.inc_reservation("compensation_failed")
            self.logger.error(
                "Compensation failed, orphaned booking %s for slot %s (transaction %s): %s",
                booking_id,
                slot_id,
                transaction_id,
                exc,
            )
            return

        prometheus_metrics.inc_reservation("compensated")
        self.logger.warning(
            "Rolled back booking %s: slot %s of trainer %s could not take the seat",
            booking_id,
            slot_id,
            trainer_id,
        )

    # Extension points between the two phases; no-ops in production

    def _after_booking_inserted(self, booking: Booking) -> None:
        pass

    def _before_slot_update(self, booking: Booking) -> None:
        pass

    @BaseService.measure_operation("reconcile_orphaned_bookings")
    def reconcile_orphaned_bookings(self, older_than: timedelta) -> List[Booking]:
        """
        Bookings older than ``older_than`` that never made it onto a slot roster.

        Report only; nothing is deleted since the payment was already taken.
        """
        cutoff = datetime.now(timezone.utc) - older_than
        orphans = self.booking_repository.find_without_slot_member(cutoff)
        if orphans:
            self.logger.warning("Found %d orphaned bookings older than %s", len(orphans), cutoff)
        return orphans
