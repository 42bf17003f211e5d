# fitflow/repositories/booking_repository.py
"""
Booking Repository for the FitFlow platform.

Implements all data access operations for the booking ledger. Listings
are joined with the trainer name through an outer join, since a booking
can outlive the trainer document it was made against.
"""

from datetime import datetime
from decimal import Decimal
import logging
from typing import Any, Dict, List, Optional, Sequence, Tuple

from sqlalchemy import and_, exists, func, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..core.enums import PaymentStatus
from ..core.exceptions import RepositoryException
from ..models.booking import Booking
from ..models.trainer import SlotMember, Trainer
from .base_repository import BaseRepository

logger = logging.getLogger(__name__)

_SETTLED = [status.value for status in PaymentStatus.settled()]


class BookingRepository(BaseRepository[Booking]):
    def __init__(self, db: Session):
        super().__init__(db, Booking)

    def _with_trainer_name(self):
        return self.db.query(Booking, Trainer.name).outerjoin(
            Trainer, Trainer.id == Booking.trainer_id
        )

    def list_for_user(self, email: str) -> List[Tuple[Booking, Optional[str]]]:
        try:
            return (
                self._with_trainer_name()
                .filter(Booking.user_email == email)
                .order_by(Booking.created_at.desc(), Booking.id.desc())
                .all()
            )
        except SQLAlchemyError as e:
            self.logger.error(f"Error listing bookings for {email}: {str(e)}")
            raise RepositoryException(f"Failed to list bookings: {str(e)}")

    def list_for_trainer(self, trainer_id: str) -> List[Booking]:
        try:
            return (
                self.db.query(Booking)
                .filter(Booking.trainer_id == trainer_id)
                .order_by(Booking.created_at.desc(), Booking.id.desc())
                .all()
            )
        except SQLAlchemyError as e:
            self.logger.error(f"Error listing bookings for trainer {trainer_id}: {str(e)}")
            raise RepositoryException(f"Failed to list trainer bookings: {str(e)}")

    def list_all(self, skip: int = 0, limit: int = 100) -> List[Tuple[Booking, Optional[str]]]:
        try:
            return (
                self._with_trainer_name()
                .order_by(Booking.created_at.desc(), Booking.id.desc())
                .offset(skip)
                .limit(limit)
                .all()
            )
        except SQLAlchemyError as e:
            self.logger.error(f"Error listing bookings: {str(e)}")
            raise RepositoryException(f"Failed to list bookings: {str(e)}")

    def list_settled_for_user(self, email: str) -> List[Booking]:
        try:
            return (
                self.db.query(Booking)
                .filter(Booking.user_email == email, Booking.payment_status.in_(_SETTLED))
                .order_by(Booking.created_at.desc(), Booking.id.desc())
                .all()
            )
        except SQLAlchemyError as e:
            self.logger.error(f"Error listing payments for {email}: {str(e)}")
            raise RepositoryException(f"Failed to list payment history: {str(e)}")

    def delete_by_id(self, booking_id: str) -> int:
        """Delete a booking row without loading it; returns rows deleted."""
        try:
            return (
                self.db.query(Booking)
                .filter(Booking.id == booking_id)
                .delete(synchronize_session=False)
            )
        except SQLAlchemyError as e:
            self.logger.error(f"Error deleting booking {booking_id}: {str(e)}")
            raise RepositoryException(f"Failed to delete booking: {str(e)}")

    def mark_reviewed(self, booking_id: str) -> bool:
        """Flip ``has_reviewed`` once; False if it was already set."""
        try:
            result = self.db.execute(
                update(Booking)
                .where(Booking.id == booking_id, Booking.has_reviewed.is_(False))
                .values(has_reviewed=True)
                .execution_options(synchronize_session=False)
            )
            return result.rowcount == 1
        except SQLAlchemyError as e:
            self.logger.error(f"Error marking booking {booking_id} reviewed: {str(e)}")
            raise RepositoryException(f"Failed to mark booking reviewed: {str(e)}")

    def find_without_slot_member(self, created_before: datetime) -> List[Booking]:
        """Bookings older than ``created_before`` that never reached a slot roster."""
        try:
            has_member = exists().where(SlotMember.booking_id == Booking.id)
            return (
                self.db.query(Booking)
                .filter(and_(Booking.created_at < created_before, ~has_member))
                .order_by(Booking.created_at, Booking.id)
                .all()
            )
        except SQLAlchemyError as e:
            self.logger.error(f"Error scanning for orphaned bookings: {str(e)}")
            raise RepositoryException(f"Failed to scan bookings: {str(e)}")

    # Read-side aggregates for the admin overview

    def total_settled_revenue(self) -> Decimal:
        try:
            total = (
                self.db.query(func.coalesce(func.sum(Booking.price), 0))
                .filter(Booking.payment_status.in_(_SETTLED))
                .scalar()
            )
            return Decimal(str(total or 0))
        except SQLAlchemyError as e:
            self.logger.error(f"Error summing revenue: {str(e)}")
            raise RepositoryException(f"Failed to compute revenue: {str(e)}")

    def recent(self, limit: int) -> Sequence[Booking]:
        try:
            return (
                self.db.query(Booking)
                .order_by(Booking.created_at.desc(), Booking.id.desc())
                .limit(limit)
                .all()
            )
        except SQLAlchemyError as e:
            self.logger.error(f"Error loading recent bookings: {str(e)}")
            raise RepositoryException(f"Failed to load recent bookings: {str(e)}")

    def count_paid_members(self) -> int:
        try:
            return int(
                self.db.query(func.count(func.distinct(Booking.user_email)))
                .filter(Booking.payment_status.in_(_SETTLED))
                .scalar()
                or 0
            )
        except SQLAlchemyError as e:
            self.logger.error(f"Error counting paid members: {str(e)}")
            raise RepositoryException(f"Failed to count paid members: {str(e)}")

    def update_payment(self, booking: Booking, changes: Dict[str, Any]) -> Booking:
        try:
            for key, value in changes.items():
                setattr(booking, key, value)
            self.db.flush()
            return booking
        except SQLAlchemyError as e:
            self.logger.error(f"Error updating booking {booking.id}: {str(e)}")
            raise RepositoryException(f"Failed to update booking: {str(e)}")
