import logging
from dataclasses import dataclass
from typing import Optional, Dict, Any, List
from database.supabase_client import get_supabase
from database.rows import parse_rows
from core import timewindow
from core.availability import (
    AvailabilitySnapshot,
    present_staff_ids,
    partition,
    assignable_therapists,
    validate_assignment,
)
from core.exceptions import NotFoundError
from core.visit_stats import within_range
from models.customers import CustomerVisit
from models.staff import StaffRecord
from services.attendance_service import AttendanceService
from services.staff_service import StaffService

logger = logging.getLogger(__name__)


@dataclass
class TherapistAvailability:
    date: str
    snapshot: AvailabilitySnapshot
    assignable: List[StaffRecord]


class CustomersService:
    def __init__(self):
        self.supabase = get_supabase()
        self.staff_service = StaffService()
        self.attendance_service = AttendanceService()

    async def get_customers(self, branch_id: str, visit_date: Optional[str] = None) -> List[CustomerVisit]:
        """Walk-ins for a branch on one day (today by default)"""
        visit_date = visit_date or timewindow.today_iso()
        try:
            result = self.supabase.table("customers") \
                .select("*") \
                .eq("branch_id", branch_id) \
                .eq("date", visit_date) \
                .order("check_in_time") \
                .execute()

            return parse_rows(CustomerVisit, result.data)

        except Exception as e:
            logger.error(f"Get customers error: {e}")
            raise e

    async def get_customers_between(self, branch_id: str, start_date: str, end_date: str) -> List[CustomerVisit]:
        """Walk-ins for a branch with start_date <= date <= end_date"""
        try:
            result = self.supabase.table("customers") \
                .select("*") \
                .eq("branch_id", branch_id) \
                .execute()

            return within_range(parse_rows(CustomerVisit, result.data), start_date, end_date)

        except Exception as e:
            logger.error(f"Get customers error: {e}")
            raise e

    async def get_availability(self, branch_id: str) -> TherapistAvailability:
        """Busy/free therapists today and who can take the next walk-in"""
        today = timewindow.today_iso()

        therapists = await self.staff_service.get_therapists(branch_id)
        attendance = await self.attendance_service.get_attendance(branch_id, today)
        visits = await self.get_customers(branch_id, today)

        present = present_staff_ids(attendance) & {t.id for t in therapists}
        snapshot = partition(present, visits)
        assignable = assignable_therapists(therapists, snapshot.busy, present)

        return TherapistAvailability(date=today, snapshot=snapshot, assignable=assignable)

    async def add_customer(self, branch_id: str, customer_data: Dict[str, Any]) -> CustomerVisit:
        """
        Register a walk-in and start its service window.

        The therapist must be present today and not already with an active
        customer; otherwise RejectedAssignmentError is raised before anything
        is written.
        """
        duration = timewindow.validate_duration(customer_data["therapy_duration"])
        check_out_time = timewindow.compute_checkout(customer_data["check_in_time"], duration)

        availability = await self.get_availability(branch_id)
        therapist = validate_assignment(customer_data["therapist_id"], availability.assignable)

        try:
            payload = {
                "name": customer_data["name"],
                "phone": customer_data["phone"],
                "type": customer_data["type"],
                "check_in_time": customer_data["check_in_time"],
                "therapy_duration": duration,
                "check_out_time": check_out_time,
                "therapist_id": therapist.id,
                "therapist_name": therapist.nickname,
                "date": availability.date,
                "branch_id": branch_id,
                "amount": customer_data.get("amount", 0),
                "is_active": True
            }

            result = self.supabase.table("customers").insert(payload).execute()

            if result.data and len(result.data) > 0:
                logger.info(
                    f"Walk-in {payload['name']} assigned to {therapist.nickname} "
                    f"({payload['check_in_time']}-{check_out_time})"
                )
                return CustomerVisit(**result.data[0])
            else:
                raise Exception("Insert returned no data")

        except Exception as e:
            logger.error(f"Add customer error: {e}")
            raise e

    async def close_visit(self, branch_id: str, customer_id: str) -> CustomerVisit:
        """End a visit's service window so its therapist becomes free again"""
        try:
            result = self.supabase.table("customers") \
                .update({"is_active": False}) \
                .eq("id", customer_id) \
                .eq("branch_id", branch_id) \
                .execute()

        except Exception as e:
            logger.error(f"Close visit error: {e}")
            raise e

        if not result.data:
            raise NotFoundError(f"Customer {customer_id} not found")

        logger.info(f"Visit {customer_id} closed")
        return CustomerVisit(**result.data[0])
