# fitflow/core/enums.py
"""
Core enums for the FitFlow platform.

Values are stored verbatim in the database and returned verbatim by the API.
"""

from enum import Enum


class UserRole(str, Enum):
    """Role attached to every principal."""

    MEMBER = "member"
    TRAINER = "trainer"
    ADMIN = "admin"


class TrainerStatus(str, Enum):
    """Trainer application lifecycle: pending -> accepted | rejected."""

    PENDING = "pending"
    ACCEPTED = "accepted"
    REJECTED = "rejected"

    @property
    def is_terminal(self) -> bool:
        return self is not TrainerStatus.PENDING


class PaymentStatus(str, Enum):
    """Payment state of a booking."""

    PENDING = "pending"
    PAID = "paid"
    COMPLETED = "Completed"  # value used by the payment confirmation page
    FAILED = "failed"

    @classmethod
    def settled(cls) -> tuple["PaymentStatus", ...]:
        return (cls.PAID, cls.COMPLETED)


class VoteType(str, Enum):
    """Forum vote direction."""

    LIKE = "like"
    DISLIKE = "dislike"
