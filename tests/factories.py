"""Plain builders shared by service and API tests."""

from datetime import datetime, timedelta, timezone
from decimal import Decimal
from typing import Any, Optional

import jwt

from fitflow.core.config import Settings
from fitflow.core.enums import PaymentStatus, UserRole
from fitflow.principal import Principal
from fitflow.services.capacity_manager import BookingDetails


def member(email: str, display_name: Optional[str] = None) -> Principal:
    return Principal(email=email, role=UserRole.MEMBER, display_name=display_name)


def booking_details(
    email: str, transaction_id: str = "pi_test_1", price: str = "49.99"
) -> BookingDetails:
    return BookingDetails(
        email=email,
        name=email.split("@")[0].title(),
        package_name="Standard",
        price=Decimal(price),
        transaction_id=transaction_id,
        payment_status=PaymentStatus.PAID,
    )


def id_token(settings: Settings, email: str, **claims: Any) -> str:
    """An ID token as the identity provider would sign it."""
    payload = {
        "sub": email,
        "email": email,
        "email_verified": True,
        "aud": settings.identity_provider_audience,
        "exp": datetime.now(timezone.utc) + timedelta(minutes=5),
    }
    payload.update(claims)
    key = settings.identity_provider_secret or settings.secret_key
    return jwt.encode(payload, key.get_secret_value(), algorithm=settings.algorithm)
