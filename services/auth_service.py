import logging
import uuid
import jwt
import bcrypt
from datetime import datetime, timedelta, timezone
from typing import Dict, Any, Optional
from fastapi import HTTPException, Request, status, Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from config.settings import (
    JWT_SECRET,
    JWT_ALGORITHM,
    JWT_EXPIRATION_HOURS,
    ADMIN_USERNAME,
    ADMIN_PASSWORD,
    ADMIN_PASSWORD_HASH,
)
from core.session import AppSession

logger = logging.getLogger(__name__)

security = HTTPBearer()

_admin_password_hash: Optional[str] = ADMIN_PASSWORD_HASH


def hash_password(password: str) -> str:
    """Hash password using bcrypt"""
    salt = bcrypt.gensalt()
    hashed = bcrypt.hashpw(password.encode('utf-8'), salt)
    return hashed.decode('utf-8')


def verify_password(password: str, hashed: str) -> bool:
    """Verify password against hash"""
    return bcrypt.checkpw(password.encode('utf-8'), hashed.encode('utf-8'))


def get_admin_password_hash() -> str:
    """Configured hash, or one derived from the plain ADMIN_PASSWORD on first use"""
    global _admin_password_hash
    if not _admin_password_hash:
        logger.warning("ADMIN_PASSWORD_HASH not set, hashing ADMIN_PASSWORD at start-up")
        _admin_password_hash = hash_password(ADMIN_PASSWORD)
    return _admin_password_hash


def check_credentials(username: str, password: str) -> bool:
    """Single shared branch login"""
    if username != ADMIN_USERNAME:
        return False
    return verify_password(password, get_admin_password_hash())


def create_jwt_token(username: str, branch_id: str) -> str:
    """Create JWT token scoped to one branch"""
    now = datetime.now(timezone.utc)
    payload = {
        "sub": username,
        "branch_id": branch_id,
        "jti": uuid.uuid4().hex,
        "exp": now + timedelta(hours=JWT_EXPIRATION_HOURS),
        "iat": now
    }
    return jwt.encode(payload, JWT_SECRET, algorithm=JWT_ALGORITHM)


def get_session(request: Request) -> AppSession:
    """The AppSession created at start-up"""
    return request.app.state.session


def verify_jwt_token(
    credentials: HTTPAuthorizationCredentials = Depends(security),
    session: AppSession = Depends(get_session)
) -> Dict[str, Any]:
    """Verify JWT token and return payload"""
    return decode_token(credentials.credentials, session)


def decode_token(token: str, session: AppSession) -> Dict[str, Any]:
    """Decode a bearer token, refusing expired or logged-out ones"""
    try:
        payload = jwt.decode(token, JWT_SECRET, algorithms=[JWT_ALGORITHM])
    except jwt.ExpiredSignatureError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Token has expired"
        )
    except jwt.PyJWTError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Could not validate credentials"
        )

    if session.is_revoked(payload.get("jti", "")):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Session has been logged out"
        )
    return payload


def require_branch_access(
    branch_id: str,
    current_user: Dict[str, Any] = Depends(verify_jwt_token)
) -> Dict[str, Any]:
    """Require the token to belong to the branch in the path"""
    if current_user.get("branch_id") != branch_id:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Access denied"
        )
    return current_user
