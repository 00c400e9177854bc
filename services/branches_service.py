import logging
from datetime import datetime, timezone
from typing import Optional, Dict, Any, List
from database.supabase_client import get_supabase
from database.rows import parse_rows, parse_row
from models.branches import Branch

logger = logging.getLogger(__name__)


class BranchesService:
    def __init__(self):
        self.supabase = get_supabase()

    async def get_branches(
        self,
        branch_type: Optional[str] = None,
        hide_salon: bool = False
    ) -> List[Branch]:
        """List branches, optionally of one type. Salons are left out when hidden in settings."""
        try:
            query = self.supabase.table("branches").select("*")

            if branch_type:
                query = query.eq("type", branch_type)

            result = query.order("name").execute()
            branches = parse_rows(Branch, result.data)

            if hide_salon:
                branches = [b for b in branches if b.type != "salon"]
            return branches

        except Exception as e:
            logger.error(f"Get branches error: {e}")
            raise e

    async def get_branch(self, branch_id: str) -> Optional[Branch]:
        try:
            result = self.supabase.table("branches") \
                .select("*") \
                .eq("id", branch_id) \
                .execute()

            if result.data and len(result.data) > 0:
                return parse_row(Branch, result.data[0])
            return None

        except Exception as e:
            logger.error(f"Get branch error: {e}")
            raise e

    async def create_branch(self, branch_data: Dict[str, Any]) -> Branch:
        """Create a new spa or salon branch"""
        try:
            payload = {
                "name": branch_data["name"].strip(),
                "type": branch_data["type"],
                "created_at": datetime.now(timezone.utc).isoformat()
            }

            result = self.supabase.table("branches").insert(payload).execute()

            if result.data and len(result.data) > 0:
                logger.info(f"Branch created: {payload['name']} ({payload['type']})")
                return Branch(**result.data[0])
            else:
                raise Exception("Insert returned no data")

        except Exception as e:
            logger.error(f"Create branch error: {e}")
            raise e
