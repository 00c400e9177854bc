"""
Dashboard Routes - attendance and customers dashboards for a branch
"""

from fastapi import APIRouter, Depends, Query
from typing import Optional
from models.attendance import ISO_DATE_PATTERN
from models.dashboard import AttendanceDashboard, CustomersDashboard
from services.auth_service import require_branch_access
from services.dashboard_service import get_attendance_dashboard, get_customers_dashboard

router = APIRouter(prefix="/api/branches/{branch_id}/dashboard", tags=["Dashboard"])


@router.get("/attendance", response_model=AttendanceDashboard)
async def attendance_dashboard(
    branch_id: str,
    current_user: dict = Depends(require_branch_access)
):
    """Staff count, today's headcount, top/low attendee and per-staff attendance rates."""
    return await get_attendance_dashboard(branch_id)


@router.get("/customers", response_model=CustomersDashboard)
async def customers_dashboard(
    branch_id: str,
    start_date: Optional[str] = Query(default=None, pattern=ISO_DATE_PATTERN),
    end_date: Optional[str] = Query(default=None, pattern=ISO_DATE_PATTERN),
    current_user: dict = Depends(require_branch_access)
):
    """
    Walk-in totals for an inclusive date range.
    Both bounds default to today.
    """
    return await get_customers_dashboard(branch_id, start_date, end_date)
