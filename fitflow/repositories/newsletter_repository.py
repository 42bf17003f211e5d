# fitflow/repositories/newsletter_repository.py
import logging
from typing import List

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..core.exceptions import RepositoryException
from ..models.newsletter import NewsletterSubscriber
from .base_repository import BaseRepository

logger = logging.getLogger(__name__)


class NewsletterRepository(BaseRepository[NewsletterSubscriber]):
    def __init__(self, db: Session):
        super().__init__(db, NewsletterSubscriber)

    def list_subscribers(self) -> List[NewsletterSubscriber]:
        try:
            return (
                self.db.query(NewsletterSubscriber)
                .order_by(NewsletterSubscriber.subscribed_at.desc(), NewsletterSubscriber.id.desc())
                .all()
            )
        except SQLAlchemyError as e:
            self.logger.error(f"Error listing subscribers: {str(e)}")
            raise RepositoryException(f"Failed to list subscribers: {str(e)}")
