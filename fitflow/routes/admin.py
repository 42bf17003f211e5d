# fitflow/routes/admin.py
"""Admin dashboards. Read-side aggregates only."""

from datetime import timedelta

from fastapi import APIRouter, Depends, Query

from ..api.dependencies import get_admin_service, get_capacity_manager, require_admin
from ..principal import Principal
from ..schemas.admin import AdminOverviewResponse, OrphanedBookingsResponse
from ..schemas.booking import BookingResponse
from ..services.admin_service import AdminService
from ..services.capacity_manager import CapacityManager

router = APIRouter(prefix="/admin", tags=["admin"])

# A reservation normally finishes both phases within seconds
DEFAULT_ORPHAN_AGE_MINUTES = 15


@router.get("/overview", response_model=AdminOverviewResponse)
def overview(
    _: Principal = Depends(require_admin),
    service: AdminService = Depends(get_admin_service),
) -> AdminOverviewResponse:
    data = service.overview()
    return AdminOverviewResponse(
        total_revenue=float(data.total_revenue),
        recent_transactions=[BookingResponse.model_validate(b) for b in data.recent_transactions],
        subscriber_count=data.subscriber_count,
        paid_member_count=data.paid_member_count,
        trainer_counts=data.trainer_counts,
    )


@router.get("/orphaned-bookings", response_model=OrphanedBookingsResponse)
def orphaned_bookings(
    older_than_minutes: int = Query(DEFAULT_ORPHAN_AGE_MINUTES, ge=0),
    _: Principal = Depends(require_admin),
    manager: CapacityManager = Depends(get_capacity_manager),
) -> OrphanedBookingsResponse:
    orphans = manager.reconcile_orphaned_bookings(timedelta(minutes=older_than_minutes))
    return OrphanedBookingsResponse(
        older_than_minutes=older_than_minutes,
        count=len(orphans),
        bookings=[BookingResponse.model_validate(b) for b in orphans],
    )
