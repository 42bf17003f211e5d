# fitflow/repositories/slot_repository.py
"""
Slot Repository for the FitFlow platform.

The seat counter on ``trainer_slots`` is only ever changed through
``reserve_seat``: a single conditional UPDATE whose WHERE clause carries the
capacity check, so two concurrent reservations can never both take the
last seat.
"""

import logging
from typing import List, Optional

from sqlalchemy import case, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, selectinload

from ..core.exceptions import RepositoryException
from ..models.trainer import SlotMember, TrainerSlot
from .base_repository import BaseRepository

logger = logging.getLogger(__name__)


class SlotRepository(BaseRepository[TrainerSlot]):
    def __init__(self, db: Session):
        super().__init__(db, TrainerSlot)

    def get_for_trainer(
        self, trainer_id: str, slot_id: str, *, refresh: bool = False
    ) -> Optional[TrainerSlot]:
        """
        Load one slot within one trainer.

        ``refresh`` bypasses the identity map so counters reflect what other
        sessions have committed since the slot was first loaded.
        """
        try:
            query = self.db.query(TrainerSlot).filter(
                TrainerSlot.id == slot_id, TrainerSlot.trainer_id == trainer_id
            )
            if refresh:
                query = query.populate_existing()
            return query.first()
        except SQLAlchemyError as e:
            self.logger.error(f"Error loading slot {slot_id}: {str(e)}")
            raise RepositoryException(f"Failed to load slot: {str(e)}")

    def list_for_trainer(self, trainer_id: str) -> List[TrainerSlot]:
        try:
            return (
                self.db.query(TrainerSlot)
                .options(selectinload(TrainerSlot.members))
                .filter(TrainerSlot.trainer_id == trainer_id)
                .order_by(TrainerSlot.created_at, TrainerSlot.id)
                .all()
            )
        except SQLAlchemyError as e:
            self.logger.error(f"Error listing slots for trainer {trainer_id}: {str(e)}")
            raise RepositoryException(f"Failed to list slots: {str(e)}")

    def reserve_seat(self, trainer_id: str, slot_id: str) -> bool:
        """
        Atomically take one seat in the slot.

        Returns False when no row matched: the slot is full, or the slot or
        its trainer no longer exists.
        """
        try:
            stmt = (
                update(TrainerSlot)
                .where(
                    TrainerSlot.id == slot_id,
                    TrainerSlot.trainer_id == trainer_id,
                    TrainerSlot.booking_count < TrainerSlot.max_participants,
                )
                .values(
                    booking_count=TrainerSlot.booking_count + 1,
                    is_booked=case(
                        (TrainerSlot.booking_count + 1 >= TrainerSlot.max_participants, True),
                        else_=False,
                    ),
                )
                .execution_options(synchronize_session=False)
            )
            result = self.db.execute(stmt)
            return result.rowcount == 1
        except SQLAlchemyError as e:
            self.logger.error(f"Error reserving seat in slot {slot_id}: {str(e)}")
            raise RepositoryException(f"Failed to reserve seat: {str(e)}")

    def add_member(
        self,
        *,
        slot_id: str,
        booking_id: str,
        email: str,
        name: Optional[str],
        package: Optional[str],
    ) -> SlotMember:
        try:
            member = SlotMember(
                slot_id=slot_id, booking_id=booking_id, email=email, name=name, package=package
            )
            self.db.add(member)
            self.db.flush()
            return member
        except SQLAlchemyError as e:
            self.logger.error(f"Error adding member to slot {slot_id}: {str(e)}")
            raise RepositoryException(f"Failed to add slot member: {str(e)}")
