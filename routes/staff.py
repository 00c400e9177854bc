from fastapi import APIRouter, Depends, HTTPException, status, Query
from typing import Dict, Any, Optional
from core.exceptions import DomainError
from models.staff import StaffCreate, StaffUpdate, StaffListResponse
from services.auth_service import require_branch_access
from services.staff_service import StaffService

router = APIRouter(prefix="/api/branches/{branch_id}/staff", tags=["staff"])


@router.get("", response_model=StaffListResponse)
async def list_staff(
    branch_id: str,
    search: Optional[str] = Query(default=None),
    role: Optional[str] = Query(default=None, pattern="^(therapist|receptionist|manager|other)$"),
    current_user: Dict[str, Any] = Depends(require_branch_access)
):
    """Get the branch roster, optionally filtered by role or a name search"""
    service = StaffService()
    staff = await service.get_staff(branch_id, role=role, search=search)

    return {
        "success": True,
        "staff": staff
    }


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_staff(
    branch_id: str,
    staff_data: StaffCreate,
    current_user: Dict[str, Any] = Depends(require_branch_access)
):
    """Create new staff member"""
    service = StaffService()

    try:
        staff = await service.create_staff(branch_id, staff_data.model_dump())
    except Exception as e:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to add staff: {str(e)}"
        )

    return {
        "success": True,
        "message": f"{staff_data.nickname} has been added successfully",
        "staff": staff
    }


@router.put("/{staff_id}")
async def update_staff(
    branch_id: str,
    staff_id: str,
    staff_data: StaffUpdate,
    current_user: Dict[str, Any] = Depends(require_branch_access)
):
    """Update existing staff member"""
    service = StaffService()

    try:
        staff = await service.update_staff(branch_id, staff_id, staff_data.model_dump())
    except DomainError:
        raise
    except Exception as e:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to update staff: {str(e)}"
        )

    return {
        "success": True,
        "message": f"{staff_data.nickname}'s information has been updated",
        "staff": staff
    }


@router.delete("/{staff_id}")
async def delete_staff(
    branch_id: str,
    staff_id: str,
    current_user: Dict[str, Any] = Depends(require_branch_access)
):
    """Remove a staff member from the branch"""
    service = StaffService()
    await service.delete_staff(branch_id, staff_id)

    return {
        "success": True,
        "message": "Staff member has been deleted"
    }
