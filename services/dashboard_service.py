"""
Dashboard Service - Aggregates branch data for the attendance and customers dashboards.
Fetches the raw records, hands them to the core aggregators and shapes the response.
"""

import logging
from typing import Optional

from core import timewindow
from core.attendance_stats import present_today, top_and_bottom_performers, staff_attendance_summary
from core.visit_stats import totals, top_therapist, therapist_loads
from models.dashboard import (
    AttendanceDashboard,
    CustomersDashboard,
    NamedCount,
    StaffAttendanceRow,
    TherapistLoadRow,
)
from services.attendance_service import AttendanceService
from services.customers_service import CustomersService
from services.staff_service import StaffService

logger = logging.getLogger(__name__)


async def get_attendance_dashboard(branch_id: str) -> AttendanceDashboard:
    """Staff totals, today's headcount, best/worst attendance and per-staff rates."""
    today = timewindow.today_iso()

    staff = await StaffService().get_staff(branch_id)
    records = await AttendanceService().get_attendance(branch_id)

    performers = top_and_bottom_performers(staff, records)
    summary = staff_attendance_summary(staff, records)

    return AttendanceDashboard(
        success=True,
        date=today,
        total_staff=len(staff),
        present_today=present_today(records, today),
        top_attendee=NamedCount(name=performers.top.name, count=performers.top.count),
        low_attendee=NamedCount(name=performers.bottom.name, count=performers.bottom.count),
        staff=[
            StaffAttendanceRow(
                staff_id=row.staff.id,
                name=row.staff.display_name,
                nickname=row.staff.nickname,
                role=row.staff.role,
                present_days=row.present_days,
                total_days=row.total_days,
                percentage=row.percentage,
            )
            for row in summary
        ],
    )


async def get_customers_dashboard(
    branch_id: str,
    start_date: Optional[str] = None,
    end_date: Optional[str] = None,
) -> CustomersDashboard:
    """Visit totals, top therapist and per-therapist load for a date range (today by default)."""
    today = timewindow.today_iso()
    start_date = start_date or today
    end_date = end_date or today

    staff = await StaffService().get_staff(branch_id)
    visits = await CustomersService().get_customers_between(branch_id, start_date, end_date)

    visit_totals = totals(visits)
    top = top_therapist(visits, staff)
    logger.info(f"Customers dashboard for {branch_id}: {visit_totals.total} visits {start_date}..{end_date}")

    return CustomersDashboard(
        success=True,
        start_date=start_date,
        end_date=end_date,
        total_customers=visit_totals.total,
        new_customers=visit_totals.new_count,
        regular_customers=visit_totals.regular_count,
        top_therapist=NamedCount(name=top.name, count=top.count),
        therapists=[
            TherapistLoadRow(
                staff_id=load.staff.id,
                name=load.staff.display_name,
                nickname=load.staff.nickname,
                count=load.count,
                percentage=load.percentage,
            )
            for load in therapist_loads(visits, staff)
        ],
    )
