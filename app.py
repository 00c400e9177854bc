import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Dict, Any
from fastapi import FastAPI, Depends, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from config.settings import ALLOWED_ORIGINS, LOG_LEVEL, SETTINGS_FILE
from core.exceptions import DomainError
from core.session import AppSession, SettingsStore
from database.supabase_client import get_supabase
from services.auth_service import check_credentials, create_jwt_token, get_session, verify_jwt_token
from routes import branches, staff, attendance, customers, dashboard, settings


# Configure logging
logging.basicConfig(level=LOG_LEVEL)
logger = logging.getLogger(__name__)

DOMAIN_ERROR_STATUS = {
    "INVALID_INPUT": 400,
    "NOT_FOUND": 404,
    "DUPLICATE_ATTENDANCE": 409,
    "REJECTED_ASSIGNMENT": 409,
}


@asynccontextmanager
async def lifespan(app: FastAPI):
    session = AppSession(SettingsStore(SETTINGS_FILE))
    session.init()
    app.state.session = session
    yield


# Initialize FastAPI
app = FastAPI(
    title="Spa & Salon Branch Manager API",
    description="Branch staff, attendance and walk-in management",
    version="1.0.0",
    lifespan=lifespan
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(DomainError)
async def domain_error_handler(request: Request, exc: DomainError):
    status_code = DOMAIN_ERROR_STATUS.get(exc.code, 400)
    logger.info(f"{request.method} {request.url.path} -> {status_code} {exc.code}: {exc.message}")
    return JSONResponse(
        status_code=status_code,
        content={"detail": exc.message, "code": exc.code}
    )


# Pydantic models
class LoginRequest(BaseModel):
    branch_id: str
    username: str
    password: str


# ===== ROUTES =====
app.include_router(branches.router)
app.include_router(staff.router)
app.include_router(attendance.router)
app.include_router(customers.router)
app.include_router(dashboard.router)
app.include_router(settings.router)


@app.get("/")
async def root():
    return {
        "message": "Spa & Salon Branch Manager API v1.0",
        "status": "running"
    }


@app.get("/health")
async def health_check():
    """Health check endpoint"""
    try:
        result = get_supabase().table('branches').select('id').limit(1).execute()
        db_status = "connected" if result.data is not None else "disconnected"

        return {
            "status": "healthy",
            "database": db_status,
            "timestamp": datetime.now(timezone.utc).isoformat()
        }
    except Exception as e:
        logger.error(f"Health check failed: {e}")
        return {
            "status": "unhealthy",
            "database": "disconnected",
            "error": str(e)
        }


@app.post("/auth/login")
async def login(request: LoginRequest):
    """Branch login with the shared credentials"""
    if not check_credentials(request.username, request.password):
        logger.info(f"Failed login for branch {request.branch_id}")
        return {
            "success": False,
            "error": "Invalid credentials"
        }

    token = create_jwt_token(request.username, request.branch_id)
    logger.info(f"Login successful for branch {request.branch_id}")

    return {
        "success": True,
        "token": token,
        "branch_id": request.branch_id,
        "redirect_url": f"/dashboard/{request.branch_id}"
    }


@app.get("/auth/me")
async def get_current_user(current_user: Dict[str, Any] = Depends(verify_jwt_token)):
    """Get current login info"""
    return {
        "success": True,
        "user": current_user
    }


@app.post("/auth/logout")
async def logout(
    current_user: Dict[str, Any] = Depends(verify_jwt_token),
    session: AppSession = Depends(get_session)
):
    """Logout: the token is refused from now on"""
    session.clear(current_user.get("jti", ""), current_user["exp"])
    return {
        "success": True,
        "message": "Logged out successfully"
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
