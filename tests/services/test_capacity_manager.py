"""CapacityManager: seats are never oversold and failed reservations leave no booking."""

from datetime import timedelta
import logging
import threading

import pytest
from sqlalchemy import update

from fitflow.core.enums import TrainerStatus
from fitflow.core.exceptions import (
    BookingConflictException,
    ForbiddenException,
    NotFoundException,
    RepositoryException,
    SlotFullException,
    ValidationException,
)
from fitflow.models.booking import Booking
from fitflow.models.trainer import SlotMember, Trainer, TrainerSlot
from fitflow.repositories.booking_repository import BookingRepository
from fitflow.services.capacity_manager import CapacityManager
from tests.factories import booking_details, member


def _slot_state(database, slot_id):
    with database.session_scope() as session:
        slot = session.get(TrainerSlot, slot_id)
        members = session.query(SlotMember).filter(SlotMember.slot_id == slot_id).count()
        bookings = session.query(Booking).filter(Booking.slot_id == slot_id).count()
        return slot.booking_count, slot.is_booked, members, bookings


def test_reserve_slot_records_booking_and_roster(db, database, make_trainer, make_slot):
    trainer = make_trainer()
    slot = make_slot(trainer.id, max_participants=2)

    booking = CapacityManager(db).reserve_slot(
        member("mia@example.com"), trainer.id, slot.id, booking_details("mia@example.com")
    )

    assert booking.id
    assert booking.slot_name == "Morning HIIT"
    assert booking.payment_status == "paid"
    assert _slot_state(database, slot.id) == (1, False, 1, 1)


def test_last_seat_marks_slot_booked_and_next_is_rejected(db, database, make_trainer, make_slot):
    trainer = make_trainer()
    slot = make_slot(trainer.id, max_participants=2)
    manager = CapacityManager(db)

    for i in range(2):
        email = f"m{i}@example.com"
        manager.reserve_slot(member(email), trainer.id, slot.id, booking_details(email, f"pi_{i}"))

    with pytest.raises(SlotFullException) as exc_info:
        manager.reserve_slot(
            member("late@example.com"), trainer.id, slot.id, booking_details("late@example.com")
        )

    assert exc_info.value.code == "SLOT_FULL"
    assert _slot_state(database, slot.id) == (2, True, 2, 2)


def test_concurrent_reservations_never_exceed_capacity(database, make_trainer, make_slot):
    trainer = make_trainer()
    capacity = 3
    workers = 8
    slot = make_slot(trainer.id, max_participants=capacity)

    barrier = threading.Barrier(workers)
    outcomes = []
    outcomes_lock = threading.Lock()

    def reserve(index: int) -> None:
        email = f"racer{index}@example.com"
        session = database.session()
        try:
            manager = CapacityManager(session)
            barrier.wait()
            try:
                manager.reserve_slot(
                    member(email), trainer.id, slot.id, booking_details(email, f"pi_race_{index}")
                )
                outcome = "booked"
            except SlotFullException:
                outcome = "full"
            except Exception as exc:  # surfaced through the assertion below
                outcome = f"error: {exc!r}"
        finally:
            session.close()
        with outcomes_lock:
            outcomes.append(outcome)

    threads = [threading.Thread(target=reserve, args=(i,)) for i in range(workers)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join(timeout=60)

    assert sorted(outcomes) == sorted(["booked"] * capacity + ["full"] * (workers - capacity))
    assert _slot_state(database, slot.id) == (capacity, True, capacity, capacity)


def test_booking_for_someone_else_is_forbidden(db, make_trainer, make_slot):
    trainer = make_trainer()
    slot = make_slot(trainer.id)

    with pytest.raises(ForbiddenException) as exc_info:
        CapacityManager(db).reserve_slot(
            member("mia@example.com"), trainer.id, slot.id, booking_details("bob@example.com")
        )
    assert exc_info.value.code == "SELF_BOOKING_ONLY"


def test_rejects_missing_transaction_and_bad_price(db, make_trainer, make_slot):
    trainer = make_trainer()
    slot = make_slot(trainer.id)
    manager = CapacityManager(db)

    with pytest.raises(ValidationException) as missing:
        manager.reserve_slot(
            member("mia@example.com"),
            trainer.id,
            slot.id,
            booking_details("mia@example.com", transaction_id="  "),
        )
    assert missing.value.code == "MISSING_TRANSACTION_ID"

    with pytest.raises(ValidationException) as price:
        manager.reserve_slot(
            member("mia@example.com"),
            trainer.id,
            slot.id,
            booking_details("mia@example.com", price="0"),
        )
    assert price.value.code == "INVALID_PRICE"


def test_unknown_slot_and_unaccepted_trainer(db, database, make_trainer, make_slot):
    accepted = make_trainer()
    pending = make_trainer("newbie@example.com", "Nia Newbie", TrainerStatus.PENDING)
    pending_slot = make_slot(pending.id)
    manager = CapacityManager(db)

    with pytest.raises(NotFoundException) as missing:
        manager.reserve_slot(
            member("mia@example.com"), accepted.id, "01ARZ3NDEKTSV4RRFFQ69G5FAV",
            booking_details("mia@example.com"),
        )
    assert missing.value.code == "SLOT_NOT_FOUND"

    with pytest.raises(ForbiddenException) as not_accepted:
        manager.reserve_slot(
            member("mia@example.com"), pending.id, pending_slot.id,
            booking_details("mia@example.com"),
        )
    assert not_accepted.value.code == "TRAINER_NOT_ACCEPTED"

    with database.session_scope() as session:
        assert session.query(Booking).count() == 0


def test_slot_filled_between_phases_is_compensated(db, database, make_trainer, make_slot):
    trainer = make_trainer()
    slot = make_slot(trainer.id, max_participants=1)

    class FilledByOthers(CapacityManager):
        def _before_slot_update(self, booking):
            with database.session_scope() as other:
                other.execute(
                    update(TrainerSlot)
                    .where(TrainerSlot.id == slot.id)
                    .values(booking_count=1, is_booked=True)
                )

    with pytest.raises(SlotFullException):
        FilledByOthers(db).reserve_slot(
            member("mia@example.com"), trainer.id, slot.id, booking_details("mia@example.com")
        )

    count, is_booked, members, bookings = _slot_state(database, slot.id)
    assert (count, is_booked, members) == (1, True, 0)
    assert bookings == 0


def test_slot_deleted_between_phases_is_a_conflict(db, database, make_trainer, make_slot):
    trainer = make_trainer()
    slot = make_slot(trainer.id)

    class SlotVanishes(CapacityManager):
        def _after_booking_inserted(self, booking):
            with database.session_scope() as other:
                other.query(TrainerSlot).filter(TrainerSlot.id == slot.id).delete(
                    synchronize_session=False
                )

    with pytest.raises(BookingConflictException) as exc_info:
        SlotVanishes(db).reserve_slot(
            member("mia@example.com"), trainer.id, slot.id, booking_details("mia@example.com")
        )

    assert exc_info.value.code == "BOOKING_CONFLICT"
    with database.session_scope() as session:
        assert session.query(Booking).count() == 0


def test_trainer_deleted_between_phases_is_compensated(db, database, make_trainer, make_slot):
    trainer = make_trainer()
    slot = make_slot(trainer.id)

    class TrainerVanishes(CapacityManager):
        def _after_booking_inserted(self, booking):
            with database.session_scope() as other:
                other.query(Trainer).filter(Trainer.id == trainer.id).delete(
                    synchronize_session=False
                )

    with pytest.raises(BookingConflictException) as exc_info:
        TrainerVanishes(db).reserve_slot(
            member("mia@example.com"), trainer.id, slot.id, booking_details("mia@example.com")
        )

    assert exc_info.value.code == "BOOKING_CONFLICT"
    with database.session_scope() as session:
        assert session.get(TrainerSlot, slot.id) is None
        assert session.query(Booking).count() == 0
        assert session.query(SlotMember).count() == 0


def test_failed_compensation_is_logged_and_reported(
    db, database, make_trainer, make_slot, monkeypatch, caplog
):
    trainer = make_trainer()
    slot = make_slot(trainer.id, max_participants=1)

    class FilledByOthers(CapacityManager):
        def _before_slot_update(self, booking):
            with database.session_scope() as other:
                other.execute(
                    update(TrainerSlot)
                    .where(TrainerSlot.id == slot.id)
                    .values(booking_count=1, is_booked=True)
                )

    def broken_delete(self, booking_id):
        raise RepositoryException("storage unavailable")

    monkeypatch.setattr(BookingRepository, "delete_by_id", broken_delete)

    with caplog.at_level(logging.WARNING):
        with pytest.raises(SlotFullException):
            FilledByOthers(db).reserve_slot(
                member("mia@example.com"),
                trainer.id,
                slot.id,
                booking_details("mia@example.com", transaction_id="pi_orphan"),
            )

    assert any("orphaned booking" in record.getMessage() for record in caplog.records)

    orphans = CapacityManager(db).reconcile_orphaned_bookings(timedelta(0))
    assert [o.transaction_id for o in orphans] == ["pi_orphan"]
    db.rollback()


def test_reconcile_ignores_bookings_with_roster_entry(db, make_trainer, make_slot):
    trainer = make_trainer()
    slot = make_slot(trainer.id)
    manager = CapacityManager(db)
    manager.reserve_slot(
        member("mia@example.com"), trainer.id, slot.id, booking_details("mia@example.com")
    )

    assert manager.reconcile_orphaned_bookings(timedelta(0)) == []
    db.rollback()
