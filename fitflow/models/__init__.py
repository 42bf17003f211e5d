"""SQLAlchemy models for the FitFlow platform."""

from .booking import Booking
from .forum import ForumComment, ForumPost, ForumVote
from .newsletter import NewsletterSubscriber
from .review import Review
from .trainer import SlotMember, Trainer, TrainerRating, TrainerSlot
from .user import User

__all__ = [
    "Booking",
    "ForumComment",
    "ForumPost",
    "ForumVote",
    "NewsletterSubscriber",
    "Review",
    "SlotMember",
    "Trainer",
    "TrainerRating",
    "TrainerSlot",
    "User",
]
