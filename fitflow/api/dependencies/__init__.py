"""
Central export point for all dependencies.
"""

from ...database import get_db
from .auth import (
    get_current_principal,
    get_identity_verifier,
    get_login_verifier,
    get_settings,
    require_admin,
    require_roles,
    require_trainer,
    require_trainer_or_admin,
)
from .services import (
    get_admin_service,
    get_booking_service,
    get_capacity_manager,
    get_forum_service,
    get_newsletter_service,
    get_payment_gateway,
    get_payment_service,
    get_rating_service,
    get_review_service,
    get_trainer_service,
    get_user_service,
)

__all__ = [
    # Auth
    "get_current_principal",
    "get_identity_verifier",
    "get_login_verifier",
    "get_settings",
    "require_admin",
    "require_roles",
    "require_trainer",
    "require_trainer_or_admin",
    # Database
    "get_db",
    # Services
    "get_admin_service",
    "get_booking_service",
    "get_capacity_manager",
    "get_forum_service",
    "get_newsletter_service",
    "get_payment_gateway",
    "get_payment_service",
    "get_rating_service",
    "get_review_service",
    "get_trainer_service",
    "get_user_service",
]
