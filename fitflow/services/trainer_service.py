# fitflow/services/trainer_service.py
"""
Trainer Service for the FitFlow platform.

Covers the application lifecycle and slot management:

    pending --(admin accepts)--> accepted   (user role -> trainer)
    pending --(admin rejects)--> rejected   (user role -> member)

Both decisions are terminal. The status change and the role change commit
together so a trainer is never accepted without the matching role.
"""

from dataclasses import dataclass, field
import logging
from typing import List, Optional, Tuple

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ..core.enums import TrainerStatus, UserRole
from ..core.exceptions import (
    ConflictException,
    ForbiddenException,
    InvalidStatusTransitionException,
    NotFoundException,
    ValidationException,
)
from ..models.trainer import Trainer, TrainerSlot
from ..principal import Principal
from ..repositories.slot_repository import SlotRepository
from ..repositories.trainer_repository import TrainerRepository
from ..repositories.user_repository import UserRepository
from .base import BaseService

logger = logging.getLogger(__name__)

_ROLE_FOR_DECISION = {
    TrainerStatus.ACCEPTED: UserRole.TRAINER,
    TrainerStatus.REJECTED: UserRole.MEMBER,
}


@dataclass
class TrainerApplication:
    name: str
    age: Optional[int] = None
    photo_url: Optional[str] = None
    experience_years: int = 0
    skills: List[str] = field(default_factory=list)
    available_days: List[str] = field(default_factory=list)
    available_time: Optional[str] = None
    bio: Optional[str] = None


@dataclass
class SlotSpec:
    name: str
    time: str
    days: List[str]
    duration_minutes: int
    max_participants: int
    class_name: Optional[str] = None


class TrainerService(BaseService):
    def __init__(
        self,
        db: Session,
        trainer_repository: Optional[TrainerRepository] = None,
        slot_repository: Optional[SlotRepository] = None,
        user_repository: Optional[UserRepository] = None,
    ):
        super().__init__(db)
        self.repository = trainer_repository or TrainerRepository(db)
        self.slot_repository = slot_repository or SlotRepository(db)
        self.user_repository = user_repository or UserRepository(db)

    # Applications

    @BaseService.measure_operation("apply")
    def apply(self, principal: Principal, application: TrainerApplication) -> Trainer:
        """Submit a trainer application for the calling principal."""
        try:
            with self.transaction():
                existing = self.repository.get_by_email(principal.email)
                if existing is not None:
                    raise ConflictException(
                        f"An application already exists with status '{existing.status}'",
                        code="APPLICATION_EXISTS",
                        details={"trainer_id": existing.id, "status": existing.status},
                    )
                trainer = self.repository.create(
                    email=principal.email,
                    name=application.name,
                    age=application.age,
                    photo_url=application.photo_url,
                    experience_years=application.experience_years,
                    skills=list(application.skills),
                    available_days=list(application.available_days),
                    available_time=application.available_time,
                    bio=application.bio,
                    status=TrainerStatus.PENDING.value,
                )
        except IntegrityError:
            raise ConflictException("An application already exists", code="APPLICATION_EXISTS")

        self.log_operation("apply", trainer_id=trainer.id, email=principal.email)
        return trainer

    def list_accepted(self) -> List[Trainer]:
        return self.repository.list_by_status(TrainerStatus.ACCEPTED)

    def list_applications(self) -> List[Trainer]:
        return self.repository.list_by_status(TrainerStatus.PENDING)

    def get_my_application(self, principal: Principal) -> Trainer:
        trainer = self.repository.get_by_email(principal.email)
        if trainer is None:
            raise NotFoundException("No trainer application found", code="APPLICATION_NOT_FOUND")
        return trainer

    def get_trainer(self, trainer_id: str) -> Trainer:
        trainer = self.repository.get_with_slots(trainer_id)
        if trainer is None:
            raise NotFoundException("Trainer not found", code="TRAINER_NOT_FOUND")
        return trainer

    @BaseService.measure_operation("decide_application")
    def decide(
        self, trainer_id: str, decision: TrainerStatus, feedback: Optional[str] = None
    ) -> Trainer:
        """
        Accept or reject a pending application.

        Raises:
            ValidationException: ``decision`` is not accepted/rejected
            NotFoundException: unknown trainer
            InvalidStatusTransitionException: trainer is not pending
        """
        if not decision.is_terminal:
            raise ValidationException(
                "Status must be 'accepted' or 'rejected'", code="INVALID_STATUS"
            )

        with self.transaction():
            trainer = self.repository.get_by_id(trainer_id)
            if trainer is None:
                raise NotFoundException("Trainer not found", code="TRAINER_NOT_FOUND")

            changed = self.repository.transition_status(
                trainer_id,
                from_status=TrainerStatus.PENDING,
                to_status=decision,
                feedback=feedback,
            )
            if changed == 0:
                raise InvalidStatusTransitionException(trainer.status, decision.value)
            # The bulk UPDATE bypasses the identity map
            self.db.refresh(trainer)

            role = _ROLE_FOR_DECISION[decision]
            if self.user_repository.set_role(trainer.email, role.value) == 0:
                self.logger.warning(
                    f"Trainer {trainer_id} decided but no user exists for {trainer.email}"
                )

        self.log_operation(
            "decide_application", trainer_id=trainer_id, status=decision.value, role=role.value
        )
        return trainer

    # Slots

    def _own_trainer(self, principal: Principal) -> Trainer:
        trainer = self.repository.get_by_email(principal.email)
        if trainer is None:
            raise NotFoundException("Trainer profile not found", code="TRAINER_NOT_FOUND")
        return trainer

    def list_my_slots(self, principal: Principal) -> List[TrainerSlot]:
        trainer = self._own_trainer(principal)
        return self.slot_repository.list_for_trainer(trainer.id)

    @BaseService.measure_operation("add_slot")
    def add_slot(self, principal: Principal, slot_spec: SlotSpec) -> TrainerSlot:
        if slot_spec.max_participants < 1:
            raise ValidationException("max_participants must be at least 1", code="INVALID_CAPACITY")

        with self.transaction():
            trainer = self._own_trainer(principal)
            if not trainer.is_accepted:
                raise ForbiddenException(
                    "Only accepted trainers can publish slots", code="TRAINER_NOT_ACCEPTED"
                )
            slot = self.slot_repository.create(
                trainer_id=trainer.id,
                name=slot_spec.name,
                time=slot_spec.time,
                days=list(slot_spec.days),
                duration_minutes=slot_spec.duration_minutes,
                max_participants=slot_spec.max_participants,
                class_name=slot_spec.class_name,
                booking_count=0,
                is_booked=False,
            )

        self.log_operation("add_slot", slot_id=slot.id, trainer_id=trainer.id)
        return slot

    @BaseService.measure_operation("delete_slot")
    def delete_slot(self, principal: Principal, slot_id: str) -> None:
        """Remove a slot and its roster. Bookings made against it are kept."""
        with self.transaction():
            slot = self.slot_repository.get_by_id(slot_id)
            if slot is None:
                raise NotFoundException("Slot not found", code="SLOT_NOT_FOUND")
            owner = self.repository.get_by_id(slot.trainer_id)
            if owner is None or owner.email != principal.email:
                raise ForbiddenException("You can only delete your own slots", code="NOT_SLOT_OWNER")
            self.slot_repository.delete(slot_id)

        self.log_operation("delete_slot", slot_id=slot_id, trainer_id=slot.trainer_id)

    def get_slot_detail(self, trainer_id: str, slot_id: str) -> Tuple[Trainer, TrainerSlot]:
        trainer = self.repository.get_by_id(trainer_id)
        if trainer is None:
            raise NotFoundException("Trainer not found", code="TRAINER_NOT_FOUND")
        slot = self.slot_repository.get_for_trainer(trainer_id, slot_id)
        if slot is None:
            raise NotFoundException("Slot not found", code="SLOT_NOT_FOUND")
        return trainer, slot
