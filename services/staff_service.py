import logging
from datetime import datetime, timezone
from typing import List, Dict, Any, Optional
from database.supabase_client import get_supabase
from database.rows import parse_rows
from core.exceptions import NotFoundError
from models.staff import StaffRecord

logger = logging.getLogger(__name__)


def matches_search(staff: StaffRecord, term: str) -> bool:
    """Case-insensitive substring match on first name, last name or nickname"""
    needle = term.strip().lower()
    if not needle:
        return True
    return (
        needle in staff.first_name.lower()
        or needle in staff.last_name.lower()
        or needle in staff.nickname.lower()
    )


class StaffService:
    def __init__(self):
        self.supabase = get_supabase()

    async def get_staff(
        self,
        branch_id: str,
        role: Optional[str] = None,
        search: Optional[str] = None
    ) -> List[StaffRecord]:
        """Roster for a branch in creation order"""
        try:
            query = self.supabase.table("staffs") \
                .select("*") \
                .eq("branch_id", branch_id)

            if role:
                query = query.eq("role", role)

            result = query.order("created_at").execute()
            staff = parse_rows(StaffRecord, result.data)

            if search:
                staff = [s for s in staff if matches_search(s, search)]
            return staff

        except Exception as e:
            logger.error(f"Get staff error: {e}")
            raise e

    async def get_therapists(self, branch_id: str) -> List[StaffRecord]:
        return await self.get_staff(branch_id, role="therapist")

    async def create_staff(self, branch_id: str, staff_data: Dict[str, Any]) -> StaffRecord:
        """Add a staff member to a branch"""
        try:
            payload = {
                **staff_data,
                "branch_id": branch_id,
                "created_at": datetime.now(timezone.utc).isoformat()
            }

            result = self.supabase.table("staffs").insert(payload).execute()

            if result.data and len(result.data) > 0:
                logger.info(f"Staff created in branch {branch_id}: {staff_data.get('nickname')}")
                return StaffRecord(**result.data[0])
            else:
                raise Exception("Insert returned no data")

        except Exception as e:
            logger.error(f"Create staff error: {e}")
            raise e

    async def update_staff(
        self,
        branch_id: str,
        staff_id: str,
        staff_data: Dict[str, Any]
    ) -> StaffRecord:
        """Update an existing staff member"""
        try:
            result = self.supabase.table("staffs") \
                .update(staff_data) \
                .eq("id", staff_id) \
                .eq("branch_id", branch_id) \
                .execute()

            if not result.data:
                raise NotFoundError(f"Staff member {staff_id} not found")

            logger.info(f"Staff {staff_id} updated in branch {branch_id}")
            return StaffRecord(**result.data[0])

        except NotFoundError:
            raise
        except Exception as e:
            logger.error(f"Update staff error: {e}")
            raise e

    async def delete_staff(self, branch_id: str, staff_id: str) -> None:
        try:
            result = self.supabase.table("staffs") \
                .delete() \
                .eq("id", staff_id) \
                .eq("branch_id", branch_id) \
                .execute()

            if not result.data:
                raise NotFoundError(f"Staff member {staff_id} not found")

            logger.info(f"Staff {staff_id} deleted from branch {branch_id}")

        except NotFoundError:
            raise
        except Exception as e:
            logger.error(f"Delete staff error: {e}")
            raise e
