"""
Repository layer for the FitFlow platform.

Repositories own every query and conditional statement; services own the
transaction boundaries.
"""

from .base_repository import BaseRepository
from .booking_repository import BookingRepository
from .forum_repository import ForumRepository
from .newsletter_repository import NewsletterRepository
from .rating_repository import RatingRepository
from .review_repository import ReviewRepository
from .slot_repository import SlotRepository
from .trainer_repository import TrainerRepository
from .user_repository import UserRepository

__all__ = [
    "BaseRepository",
    "BookingRepository",
    "ForumRepository",
    "NewsletterRepository",
    "RatingRepository",
    "ReviewRepository",
    "SlotRepository",
    "TrainerRepository",
    "UserRepository",
]
