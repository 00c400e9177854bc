import logging
from typing import Optional, Dict, Any, List
from database.supabase_client import get_supabase
from database.rows import parse_rows
from core import timewindow
from core.exceptions import DuplicateAttendanceError, NotFoundError
from models.attendance import AttendanceRecord

logger = logging.getLogger(__name__)


class AttendanceService:
    def __init__(self):
        self.supabase = get_supabase()

    async def get_attendance(
        self,
        branch_id: str,
        attendance_date: Optional[str] = None
    ) -> List[AttendanceRecord]:
        """Attendance for a branch, for one date or the whole history"""
        try:
            query = self.supabase.table("attendances") \
                .select("*") \
                .eq("branch_id", branch_id)

            if attendance_date:
                query = query.eq("date", attendance_date)

            result = query.order("date").execute()
            return parse_rows(AttendanceRecord, result.data)

        except Exception as e:
            logger.error(f"Get attendance error: {e}")
            raise e

    async def get_attendance_for_staff_and_date(
        self,
        branch_id: str,
        staff_id: str,
        attendance_date: str
    ) -> Optional[Dict[str, Any]]:
        try:
            result = self.supabase.table("attendances") \
                .select("*") \
                .eq("branch_id", branch_id) \
                .eq("staff_id", staff_id) \
                .eq("date", attendance_date) \
                .execute()

            if result.data and len(result.data) > 0:
                return result.data[0]
            return None

        except Exception as e:
            logger.error(f"Get attendance error: {e}")
            raise e

    async def mark_attendance(self, branch_id: str, mark: Dict[str, Any]) -> AttendanceRecord:
        """
        Record attendance for a staff member.
        The entry time is the current clock time; only one record per staff per date.
        """
        attendance_date = mark.get("date") or timewindow.today_iso()

        existing = await self.get_attendance_for_staff_and_date(
            branch_id, mark["staff_id"], attendance_date
        )
        if existing:
            raise DuplicateAttendanceError("Attendance already marked for this staff on this date")

        try:
            payload = {
                "staff_id": mark["staff_id"],
                "date": attendance_date,
                "entry_time": timewindow.now_local().strftime("%H:%M:%S"),
                "exit_time": "",
                "status": mark["status"],
                "branch_id": branch_id
            }

            result = self.supabase.table("attendances").insert(payload).execute()

            if result.data and len(result.data) > 0:
                logger.info(f"Attendance marked: staff {mark['staff_id']} {mark['status']} on {attendance_date}")
                return AttendanceRecord(**result.data[0])
            else:
                raise Exception("Insert returned no data")

        except Exception as e:
            logger.error(f"Mark attendance error: {e}")
            raise e

    async def update_attendance(
        self,
        branch_id: str,
        attendance_id: str,
        update_data: Dict[str, Any]
    ) -> AttendanceRecord:
        """Correct entry/exit time or status"""
        for field in ("entry_time", "exit_time"):
            if update_data.get(field):
                timewindow.parse_hhmm(update_data[field])

        payload = {
            "entry_time": update_data["entry_time"],
            "exit_time": update_data.get("exit_time") or "",
            "status": update_data["status"]
        }

        try:
            result = self.supabase.table("attendances") \
                .update(payload) \
                .eq("id", attendance_id) \
                .eq("branch_id", branch_id) \
                .execute()

        except Exception as e:
            logger.error(f"Update attendance error: {e}")
            raise e

        if not result.data:
            raise NotFoundError(f"Attendance {attendance_id} not found")

        logger.info(f"Attendance {attendance_id} updated: {payload['status']}")
        return AttendanceRecord(**result.data[0])
