"""Trainer application lifecycle and slot ownership."""

import pytest

from fitflow.core.enums import TrainerStatus, UserRole
from fitflow.core.exceptions import (
    ConflictException,
    ForbiddenException,
    InvalidStatusTransitionException,
    NotFoundException,
    ValidationException,
)
from fitflow.models.user import User
from fitflow.principal import Principal
from fitflow.services.trainer_service import SlotSpec, TrainerApplication, TrainerService
from tests.factories import member


def _role_of(database, email):
    with database.session_scope() as session:
        return session.query(User.role).filter(User.email == email).scalar()


def _slot_spec(**overrides):
    values = dict(
        name="Evening Yoga", time="18:00", days=["Tuesday"], duration_minutes=60, max_participants=8
    )
    values.update(overrides)
    return SlotSpec(**values)


def test_accepting_an_application_grants_trainer_role(db, database, make_user):
    make_user("pat@example.com", display_name="Pat")
    service = TrainerService(db)

    trainer = service.apply(member("pat@example.com"), TrainerApplication(name="Pat Lee"))
    assert trainer.status == TrainerStatus.PENDING.value

    decided = service.decide(trainer.id, TrainerStatus.ACCEPTED, "Welcome aboard")
    assert decided.status == TrainerStatus.ACCEPTED.value
    assert decided.feedback == "Welcome aboard"
    assert decided.decided_at is not None
    assert _role_of(database, "pat@example.com") == UserRole.TRAINER.value


def test_rejection_is_terminal(db, database, make_user):
    make_user("pat@example.com")
    service = TrainerService(db)
    trainer = service.apply(member("pat@example.com"), TrainerApplication(name="Pat Lee"))

    service.decide(trainer.id, TrainerStatus.REJECTED, "Needs certification")
    assert _role_of(database, "pat@example.com") == UserRole.MEMBER.value

    with pytest.raises(InvalidStatusTransitionException) as exc_info:
        service.decide(trainer.id, TrainerStatus.ACCEPTED)
    assert exc_info.value.code == "INVALID_STATUS_TRANSITION"

    with pytest.raises(ConflictException):
        service.apply(member("pat@example.com"), TrainerApplication(name="Pat Again"))


def test_duplicate_application_is_a_conflict(db):
    service = TrainerService(db)
    service.apply(member("pat@example.com"), TrainerApplication(name="Pat Lee"))

    with pytest.raises(ConflictException) as exc_info:
        service.apply(member("pat@example.com"), TrainerApplication(name="Pat Lee"))
    assert exc_info.value.code == "APPLICATION_EXISTS"


def test_pending_is_not_a_decision(db):
    service = TrainerService(db)
    trainer = service.apply(member("pat@example.com"), TrainerApplication(name="Pat Lee"))

    with pytest.raises(ValidationException):
        service.decide(trainer.id, TrainerStatus.PENDING)
    with pytest.raises(NotFoundException):
        service.decide("01ARZ3NDEKTSV4RRFFQ69G5FAV", TrainerStatus.ACCEPTED)


def test_only_accepted_trainers_publish_slots(db, make_trainer):
    make_trainer("newbie@example.com", "Nia Newbie", TrainerStatus.PENDING)
    accepted = make_trainer()
    service = TrainerService(db)

    with pytest.raises(ForbiddenException) as exc_info:
        service.add_slot(Principal("newbie@example.com", UserRole.TRAINER), _slot_spec())
    assert exc_info.value.code == "TRAINER_NOT_ACCEPTED"

    slot = service.add_slot(Principal("coach@example.com", UserRole.TRAINER), _slot_spec())
    assert slot.trainer_id == accepted.id
    assert (slot.booking_count, slot.is_booked, slot.seats_left) == (0, False, 8)


def test_slots_can_only_be_deleted_by_their_owner(db, make_trainer, make_slot):
    owner = make_trainer()
    make_trainer("rival@example.com", "Rita Rival")
    slot = make_slot(owner.id)
    service = TrainerService(db)

    with pytest.raises(ForbiddenException) as exc_info:
        service.delete_slot(Principal("rival@example.com", UserRole.TRAINER), slot.id)
    assert exc_info.value.code == "NOT_SLOT_OWNER"

    service.delete_slot(Principal("coach@example.com", UserRole.TRAINER), slot.id)
    with pytest.raises(NotFoundException):
        service.delete_slot(Principal("coach@example.com", UserRole.TRAINER), slot.id)
