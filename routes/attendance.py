from fastapi import APIRouter, Depends, HTTPException, status, Query
from typing import Dict, Any, List, Optional
from core.exceptions import DomainError
from models.attendance import AttendanceRecord, AttendanceMark, AttendanceUpdate, ISO_DATE_PATTERN
from services.auth_service import require_branch_access
from services.attendance_service import AttendanceService

router = APIRouter(prefix="/api/branches/{branch_id}/attendance", tags=["attendance"])


@router.get("", response_model=List[AttendanceRecord])
async def get_attendance(
    branch_id: str,
    date: Optional[str] = Query(default=None, pattern=ISO_DATE_PATTERN),
    current_user: Dict[str, Any] = Depends(require_branch_access)
):
    """
    Attendance rows for one date.
    Omit date to get the branch's full history.
    """
    service = AttendanceService()
    return await service.get_attendance(branch_id, date)


@router.post("", response_model=AttendanceRecord, status_code=status.HTTP_201_CREATED)
async def mark_attendance(
    branch_id: str,
    mark: AttendanceMark,
    current_user: Dict[str, Any] = Depends(require_branch_access)
):
    """
    Mark a staff member present, absent or half-day.
    One record per staff member per day; a second one is refused with 409.
    """
    service = AttendanceService()

    try:
        return await service.mark_attendance(branch_id, mark.model_dump())
    except DomainError:
        raise
    except Exception as e:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to mark attendance: {str(e)}"
        )


@router.put("/{attendance_id}", response_model=AttendanceRecord)
async def update_attendance(
    branch_id: str,
    attendance_id: str,
    update: AttendanceUpdate,
    current_user: Dict[str, Any] = Depends(require_branch_access)
):
    service = AttendanceService()
    return await service.update_attendance(branch_id, attendance_id, update.model_dump())
