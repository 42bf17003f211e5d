# fitflow/services/admin_service.py
"""Read-side aggregates for the admin dashboard."""

from dataclasses import dataclass
from decimal import Decimal
import logging
from typing import Dict, List, Optional

from sqlalchemy.orm import Session

from ..core.constants import RECENT_TRANSACTIONS_LIMIT
from ..models.booking import Booking
from ..repositories.booking_repository import BookingRepository
from ..repositories.newsletter_repository import NewsletterRepository
from ..repositories.trainer_repository import TrainerRepository
from .base import BaseService

logger = logging.getLogger(__name__)


@dataclass
class AdminOverview:
    total_revenue: Decimal
    recent_transactions: List[Booking]
    subscriber_count: int
    paid_member_count: int
    trainer_counts: Dict[str, int]


class AdminService(BaseService):
    def __init__(
        self,
        db: Session,
        booking_repository: Optional[BookingRepository] = None,
        newsletter_repository: Optional[NewsletterRepository] = None,
        trainer_repository: Optional[TrainerRepository] = None,
    ):
        super().__init__(db)
        self.booking_repository = booking_repository or BookingRepository(db)
        self.newsletter_repository = newsletter_repository or NewsletterRepository(db)
        self.trainer_repository = trainer_repository or TrainerRepository(db)

    @BaseService.measure_operation("overview")
    def overview(self) -> AdminOverview:
        return AdminOverview(
            total_revenue=self.booking_repository.total_settled_revenue(),
            recent_transactions=list(self.booking_repository.recent(RECENT_TRANSACTIONS_LIMIT)),
            subscriber_count=self.newsletter_repository.count(),
            paid_member_count=self.booking_repository.count_paid_members(),
            trainer_counts=self.trainer_repository.count_by_status(),
        )
