from fastapi import APIRouter, Depends, HTTPException, status, Query
from typing import List, Optional
from core.session import AppSession
from models.branches import Branch, BranchCreate
from services.auth_service import get_session
from services.branches_service import BranchesService

router = APIRouter(prefix="/api/branches", tags=["branches"])


@router.get("", response_model=List[Branch])
async def list_branches(
    type: Optional[str] = Query(default=None, pattern="^(spa|salon)$"),
    session: AppSession = Depends(get_session)
):
    """
    Branches to pick from before logging in.
    Salon branches are left out while the hide_salon setting is on.
    """
    service = BranchesService()
    return await service.get_branches(type, hide_salon=session.settings.hide_salon)


@router.post("", response_model=Branch, status_code=status.HTTP_201_CREATED)
async def create_branch(branch: BranchCreate):
    """Add a spa or salon branch"""
    service = BranchesService()

    try:
        return await service.create_branch(branch.model_dump())
    except Exception as e:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to create branch: {str(e)}"
        )


@router.get("/{branch_id}", response_model=Branch)
async def get_branch(branch_id: str):
    service = BranchesService()
    branch = await service.get_branch(branch_id)

    if not branch:
        raise HTTPException(status_code=404, detail="Branch not found")
    return branch
