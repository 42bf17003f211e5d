# fitflow/models/booking.py
"""
Booking model for the FitFlow platform.

One booking is one seat reservation in one trainer slot, plus the payment
reference handed over by the payment processor.

Architecture: bookings store trainer, slot and package data directly and
carry no foreign key to the trainer document. A booking therefore survives
its trainer, which is what lets the reservation saga detect and compensate
a slot that disappeared between the two phases.
"""

from datetime import datetime, timezone

from sqlalchemy import Boolean, CheckConstraint, Column, DateTime, Index, Numeric, String

from ..core.enums import PaymentStatus
from ..core.ulid_helper import generate_ulid
from ..database import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Booking(Base):
    __tablename__ = "bookings"

    id = Column(String(26), primary_key=True, default=generate_ulid)

    user_email = Column(String(255), nullable=False, index=True)
    user_name = Column(String(120), nullable=True)
    trainer_id = Column(String(26), nullable=False, index=True)
    slot_id = Column(String(26), nullable=False, index=True)

    # Snapshot of what was booked
    slot_name = Column(String(120), nullable=True)
    package_name = Column(String(60), nullable=True)
    price = Column(Numeric(10, 2), nullable=False)

    # Payment linkage
    transaction_id = Column(String(255), nullable=False)
    payment_status = Column(String(20), nullable=False, default=PaymentStatus.PAID.value)

    has_reviewed = Column(Boolean, nullable=False, default=False)

    created_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=True, onupdate=_utcnow)

    __table_args__ = (
        CheckConstraint("price > 0", name="ck_bookings_price_positive"),
        Index("idx_bookings_trainer_slot", "trainer_id", "slot_id"),
        Index("idx_bookings_created_at", "created_at"),
    )

    def __repr__(self) -> str:
        return (
            f"<Booking(id={self.id}, user='{self.user_email}', trainer={self.trainer_id}, "
            f"slot={self.slot_id}, payment='{self.payment_status}')>"
        )
