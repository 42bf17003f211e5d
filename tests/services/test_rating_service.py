import pytest

from fitflow.core.enums import TrainerStatus
from fitflow.core.exceptions import (
    DuplicateRatingException,
    ForbiddenException,
    NotFoundException,
    ValidationException,
)
from fitflow.models.trainer import Trainer
from fitflow.services.rating_service import RatingService
from tests.factories import member


def test_average_tracks_every_rating(db, database, make_trainer):
    trainer = make_trainer()
    service = RatingService(db)

    for index, value in enumerate([3, 5, 4]):
        summary = service.submit_rating(member(f"r{index}@example.com"), trainer.id, value)

    assert summary.total_ratings == 3
    assert summary.average_rating == pytest.approx(4.0)

    db.rollback()
    with database.session_scope() as session:
        stored = session.get(Trainer, trainer.id)
        assert stored.rating == pytest.approx(4.0)
        assert stored.rating_count == 3


def test_second_rating_from_same_principal_is_rejected(db, make_trainer):
    trainer = make_trainer()
    service = RatingService(db)
    service.submit_rating(member("fan@example.com"), trainer.id, 5)

    with pytest.raises(DuplicateRatingException) as exc_info:
        service.submit_rating(member("fan@example.com"), trainer.id, 1)

    assert exc_info.value.code == "DUPLICATE_RATING"
    summary = service.get_summary(trainer.id)
    assert (summary.average_rating, summary.total_ratings) == (5.0, 1)
    db.rollback()


def test_average_is_rounded_to_two_places(db, make_trainer):
    trainer = make_trainer()
    service = RatingService(db)
    for index, value in enumerate([5, 4, 4]):
        service.submit_rating(member(f"r{index}@example.com"), trainer.id, value)

    assert service.get_summary(trainer.id).average_rating == 4.33
    db.rollback()


@pytest.mark.parametrize("value", [0, 6, True])
def test_out_of_range_values_are_rejected(db, make_trainer, value):
    trainer = make_trainer()
    with pytest.raises(ValidationException) as exc_info:
        RatingService(db).submit_rating(member("fan@example.com"), trainer.id, value)
    assert exc_info.value.code == "INVALID_RATING"


def test_only_accepted_trainers_can_be_rated(db, make_trainer):
    pending = make_trainer("newbie@example.com", "Nia Newbie", TrainerStatus.PENDING)
    service = RatingService(db)

    with pytest.raises(ForbiddenException):
        service.submit_rating(member("fan@example.com"), pending.id, 4)
    with pytest.raises(NotFoundException):
        service.submit_rating(member("fan@example.com"), "01ARZ3NDEKTSV4RRFFQ69G5FAV", 4)
