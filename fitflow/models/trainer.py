# fitflow/models/trainer.py
"""
Trainer document and the records it owns.

Design notes:
- ULID string IDs everywhere (26 chars)
- A trainer owns its slots, slot rosters and ratings by composition; they are
  cascade-deleted with the trainer and have no lifecycle of their own
- ``rating`` and ``rating_count`` are derived from ``trainer_ratings`` and are
  only ever written by the recompute statement in the rating repository
- ``booking_count <= max_participants`` is enforced by the database as well as
  by the conditional increment in the slot repository
"""

from datetime import datetime, timezone

from sqlalchemy import (
    JSON,
    Boolean,
    CheckConstraint,
    Column,
    DateTime,
    Float,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import relationship

from ..core.enums import TrainerStatus
from ..core.ulid_helper import generate_ulid
from ..database import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Trainer(Base):
    """Trainer application and, once accepted, public trainer profile."""

    __tablename__ = "trainers"

    id = Column(String(26), primary_key=True, default=generate_ulid)
    email = Column(String(255), unique=True, index=True, nullable=False)
    name = Column(String(120), nullable=False)
    age = Column(Integer, nullable=True)
    photo_url = Column(String(500), nullable=True)
    experience_years = Column(Integer, nullable=False, default=0)
    skills = Column(JSON, nullable=False, default=list)
    available_days = Column(JSON, nullable=False, default=list)
    available_time = Column(String(120), nullable=True)
    bio = Column(Text, nullable=True)

    status = Column(String(20), nullable=False, default=TrainerStatus.PENDING.value, index=True)
    feedback = Column(Text, nullable=True)

    rating = Column(Float, nullable=False, default=0.0)
    rating_count = Column(Integer, nullable=False, default=0)

    applied_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow)
    decided_at = Column(DateTime(timezone=True), nullable=True)

    slots = relationship(
        "TrainerSlot",
        back_populates="trainer",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="TrainerSlot.created_at",
    )
    ratings = relationship(
        "TrainerRating",
        back_populates="trainer",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="TrainerRating.created_at",
    )

    __table_args__ = (
        CheckConstraint("experience_years >= 0", name="ck_trainers_experience_non_negative"),
        CheckConstraint("rating_count >= 0", name="ck_trainers_rating_count_non_negative"),
    )

    @property
    def is_accepted(self) -> bool:
        return self.status == TrainerStatus.ACCEPTED.value

    def __repr__(self) -> str:
        return f"<Trainer(id={self.id}, email='{self.email}', status='{self.status}')>"


class TrainerSlot(Base):
    """Bookable class/session slot owned by one trainer."""

    __tablename__ = "trainer_slots"

    id = Column(String(26), primary_key=True, default=generate_ulid)
    trainer_id = Column(
        String(26), ForeignKey("trainers.id", ondelete="CASCADE"), nullable=False, index=True
    )
    name = Column(String(120), nullable=False)
    time = Column(String(64), nullable=False)
    days = Column(JSON, nullable=False, default=list)
    duration_minutes = Column(Integer, nullable=False, default=60)
    class_name = Column(String(120), nullable=True)

    max_participants = Column(Integer, nullable=False)
    booking_count = Column(Integer, nullable=False, default=0)
    is_booked = Column(Boolean, nullable=False, default=False)

    created_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow)

    trainer = relationship("Trainer", back_populates="slots")
    members = relationship(
        "SlotMember",
        back_populates="slot",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="SlotMember.joined_at",
    )

    __table_args__ = (
        CheckConstraint("max_participants >= 1", name="ck_trainer_slots_capacity_positive"),
        CheckConstraint("booking_count >= 0", name="ck_trainer_slots_count_non_negative"),
        CheckConstraint(
            "booking_count <= max_participants", name="ck_trainer_slots_count_within_capacity"
        ),
        CheckConstraint("duration_minutes > 0", name="ck_trainer_slots_duration_positive"),
    )

    @property
    def seats_left(self) -> int:
        return max(0, (self.max_participants or 0) - (self.booking_count or 0))

    def __repr__(self) -> str:
        return (
            f"<TrainerSlot(id={self.id}, trainer_id={self.trainer_id}, "
            f"count={self.booking_count}/{self.max_participants})>"
        )


class SlotMember(Base):
    """Roster entry appended when a reservation commits against a slot."""

    __tablename__ = "slot_members"

    id = Column(String(26), primary_key=True, default=generate_ulid)
    slot_id = Column(
        String(26), ForeignKey("trainer_slots.id", ondelete="CASCADE"), nullable=False, index=True
    )
    booking_id = Column(String(26), nullable=False, index=True)
    name = Column(String(120), nullable=True)
    email = Column(String(255), nullable=False)
    package = Column(String(60), nullable=True)
    joined_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow)

    slot = relationship("TrainerSlot", back_populates="members")

    __table_args__ = (UniqueConstraint("booking_id", name="uq_slot_members_booking"),)


class TrainerRating(Base):
    """One star rating per (trainer, rater)."""

    __tablename__ = "trainer_ratings"

    id = Column(String(26), primary_key=True, default=generate_ulid)
    trainer_id = Column(
        String(26), ForeignKey("trainers.id", ondelete="CASCADE"), nullable=False
    )
    rater_email = Column(String(255), nullable=False)
    rater_name = Column(String(120), nullable=True)
    value = Column(Integer, nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow)

    trainer = relationship("Trainer", back_populates="ratings")

    __table_args__ = (
        UniqueConstraint("trainer_id", "rater_email", name="uq_trainer_ratings_rater"),
        CheckConstraint("value >= 1 AND value <= 5", name="ck_trainer_ratings_range"),
        Index("idx_trainer_ratings_trainer", "trainer_id"),
    )
