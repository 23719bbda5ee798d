"""
Core dependencies for route protection and role checking
"""

from fastapi import Depends, HTTPException, Request, Security, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from app.core.security import decode_access_token
from typing import Optional, Dict, Any
import jwt
import logging

logger = logging.getLogger(__name__)

# auto_error=False so a missing header is a 401 rather than FastAPI's default 403
security = HTTPBearer(auto_error=False)


def get_current_user(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Security(security),
) -> Dict[str, Any]:
    """Verify the bearer token and attach its payload to request.state.user"""
    if credentials is None or not credentials.credentials:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated. Token not found",
            headers={"WWW-Authenticate": "Bearer"},
        )
    try:
        payload = decode_access_token(credentials.credentials)
    except jwt.PyJWTError as e:
        logger.info(f"Rejected token: {e}")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired token",
            headers={"WWW-Authenticate": "Bearer"},
        ) from e

    if not payload.get("id"):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid token subject",
            headers={"WWW-Authenticate": "Bearer"},
        )

    request.state.user = payload
    return payload


def require_roles(*roles: str):
    """Factory function to create a role check dependency"""
    allowed = set(roles)

    def check_role(user_data: dict = Depends(get_current_user)) -> dict:
        role = user_data.get("role")
        if role not in allowed:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"Role '{role}' is not allowed to access this resource"
            )
        return user_data
    return check_role


def is_admin(user_data: dict) -> bool:
    return user_data.get("role") == "admin"


def ensure_owner_or_admin(owner_id: Optional[str], user_data: dict, action: str = "modify") -> dict:
    """Allow if the caller owns the resource or is an admin"""
    if is_admin(user_data):
        return user_data
    if owner_id is not None and str(owner_id) == str(user_data.get("id")):
        return user_data
    raise HTTPException(
        status_code=status.HTTP_403_FORBIDDEN,
        detail=f"You do not have permission to {action} this resource"
    )
