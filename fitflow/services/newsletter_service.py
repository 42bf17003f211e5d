# fitflow/services/newsletter_service.py
import logging
from typing import List, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ..core.exceptions import ConflictException
from ..models.newsletter import NewsletterSubscriber
from ..repositories.newsletter_repository import NewsletterRepository
from .base import BaseService

logger = logging.getLogger(__name__)


class NewsletterService(BaseService):
    def __init__(self, db: Session, repository: Optional[NewsletterRepository] = None):
        super().__init__(db)
        self.repository = repository or NewsletterRepository(db)

    @BaseService.measure_operation("subscribe")
    def subscribe(self, name: str, email: str) -> NewsletterSubscriber:
        duplicate = ConflictException("This email is already subscribed", code="ALREADY_SUBSCRIBED")
        try:
            with self.transaction():
                if self.repository.exists(email=email):
                    raise duplicate
                subscriber = self.repository.create(name=name, email=email)
        except IntegrityError:
            raise duplicate
        return subscriber

    def list_subscribers(self) -> List[NewsletterSubscriber]:
        return self.repository.list_subscribers()
