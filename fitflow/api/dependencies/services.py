# fitflow/api/dependencies/services.py
"""
Service layer dependencies for dependency injection.

Each factory builds a request-scoped service on the request's session.
"""

from fastapi import Depends, Request
from sqlalchemy.orm import Session

from ...database import get_db
from ...integrations.payment_gateway import PaymentGateway
from ...services.admin_service import AdminService
from ...services.booking_service import BookingService
from ...services.capacity_manager import CapacityManager
from ...services.forum_service import ForumService
from ...services.newsletter_service import NewsletterService
from ...services.payment_service import PaymentService
from ...services.rating_service import RatingService
from ...services.review_service import ReviewService
from ...services.trainer_service import TrainerService
from ...services.user_service import UserService


def get_user_service(db: Session = Depends(get_db)) -> UserService:
    return UserService(db)


def get_trainer_service(db: Session = Depends(get_db)) -> TrainerService:
    return TrainerService(db)


def get_capacity_manager(db: Session = Depends(get_db)) -> CapacityManager:
    return CapacityManager(db)


def get_booking_service(db: Session = Depends(get_db)) -> BookingService:
    return BookingService(db)


def get_rating_service(db: Session = Depends(get_db)) -> RatingService:
    return RatingService(db)


def get_review_service(db: Session = Depends(get_db)) -> ReviewService:
    return ReviewService(db)


def get_forum_service(db: Session = Depends(get_db)) -> ForumService:
    return ForumService(db)


def get_newsletter_service(db: Session = Depends(get_db)) -> NewsletterService:
    return NewsletterService(db)


def get_admin_service(db: Session = Depends(get_db)) -> AdminService:
    return AdminService(db)


def get_payment_gateway(request: Request) -> PaymentGateway:
    return request.app.state.payment_gateway


def get_payment_service(
    request: Request,
    db: Session = Depends(get_db),
    gateway: PaymentGateway = Depends(get_payment_gateway),
) -> PaymentService:
    return PaymentService(db, gateway, currency=request.app.state.settings.payment_currency)
