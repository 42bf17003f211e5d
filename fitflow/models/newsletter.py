# fitflow/models/newsletter.py
from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, String

from ..core.ulid_helper import generate_ulid
from ..database import Base


class NewsletterSubscriber(Base):
    __tablename__ = "newsletter_subscribers"

    id = Column(String(26), primary_key=True, default=generate_ulid)
    name = Column(String(120), nullable=False)
    email = Column(String(255), unique=True, index=True, nullable=False)
    subscribed_at = Column(
        DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc)
    )
