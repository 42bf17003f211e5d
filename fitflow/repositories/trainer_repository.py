# fitflow/repositories/trainer_repository.py
"""
Trainer Repository for the FitFlow platform.

Handles the trainer document itself: applications, the public listing and
the status decision. Slots and ratings owned by a trainer have their own
repositories so the conditional statements that guard them stay in one
place each.
"""

from datetime import datetime, timezone
import logging
from typing import Dict, List, Optional

from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, selectinload

from ..core.enums import TrainerStatus
from ..core.exceptions import RepositoryException
from ..models.trainer import Trainer, TrainerSlot
from .base_repository import BaseRepository

logger = logging.getLogger(__name__)


class TrainerRepository(BaseRepository[Trainer]):
    def __init__(self, db: Session):
        super().__init__(db, Trainer)

    def get_by_email(self, email: str) -> Optional[Trainer]:
        try:
            return self.db.query(Trainer).filter(Trainer.email == email).first()
        except SQLAlchemyError as e:
            self.logger.error(f"Error getting trainer by email: {str(e)}")
            raise RepositoryException(f"Failed to get trainer by email: {str(e)}")

    def get_with_slots(self, trainer_id: str) -> Optional[Trainer]:
        try:
            return (
                self.db.query(Trainer)
                .options(selectinload(Trainer.slots).selectinload(TrainerSlot.members))
                .filter(Trainer.id == trainer_id)
                .first()
            )
        except SQLAlchemyError as e:
            self.logger.error(f"Error loading trainer {trainer_id}: {str(e)}")
            raise RepositoryException(f"Failed to load trainer: {str(e)}")

    def list_by_status(self, status: TrainerStatus) -> List[Trainer]:
        try:
            return (
                self.db.query(Trainer)
                .options(selectinload(Trainer.slots))
                .filter(Trainer.status == status.value)
                .order_by(Trainer.applied_at.desc(), Trainer.id.desc())
                .all()
            )
        except SQLAlchemyError as e:
            self.logger.error(f"Error listing {status.value} trainers: {str(e)}")
            raise RepositoryException(f"Failed to list trainers: {str(e)}")

    def transition_status(
        self,
        trainer_id: str,
        *,
        from_status: TrainerStatus,
        to_status: TrainerStatus,
        feedback: Optional[str] = None,
    ) -> int:
        """
        Move a trainer from ``from_status`` to ``to_status`` in one statement.

        Returns the number of rows changed; 0 means the trainer was missing or
        was no longer in ``from_status``.
        """
        try:
            return (
                self.db.query(Trainer)
                .filter(Trainer.id == trainer_id, Trainer.status == from_status.value)
                .update(
                    {
                        Trainer.status: to_status.value,
                        Trainer.feedback: feedback,
                        Trainer.decided_at: datetime.now(timezone.utc),
                    },
                    synchronize_session="fetch",
                )
            )
        except SQLAlchemyError as e:
            self.logger.error(f"Error updating status of trainer {trainer_id}: {str(e)}")
            raise RepositoryException(f"Failed to update trainer status: {str(e)}")

    def count_by_status(self) -> Dict[str, int]:
        try:
            rows = (
                self.db.query(Trainer.status, func.count(Trainer.id))
                .group_by(Trainer.status)
                .all()
            )
            counts = {status.value: 0 for status in TrainerStatus}
            counts.update({status: int(total) for status, total in rows})
            return counts
        except SQLAlchemyError as e:
            self.logger.error(f"Error counting trainers: {str(e)}")
            raise RepositoryException(f"Failed to count trainers: {str(e)}")
