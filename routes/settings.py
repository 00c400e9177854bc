from fastapi import APIRouter, Depends
from typing import Dict, Any
from core.session import AppSession, AppSettings
from services.auth_service import get_session, verify_jwt_token

router = APIRouter(prefix="/api/settings", tags=["settings"])


@router.get("", response_model=AppSettings)
async def get_settings(session: AppSession = Depends(get_session)):
    return session.settings


@router.put("", response_model=AppSettings)
async def update_settings(
    settings: AppSettings,
    session: AppSession = Depends(get_session),
    current_user: Dict[str, Any] = Depends(verify_jwt_token)
):
    """Save settings; any logged-in branch may change them"""
    return session.update_settings(settings)
