from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Mapping

import jwt
from passlib.context import CryptContext

from app.config.settings import settings

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(password: str, hashed: str) -> bool:
    return pwd_context.verify(password, hashed)


def create_access_token(user: Mapping[str, Any], expires_days: int | None = None) -> str:
    """Sign a token carrying the user's id, email and role."""
    now = datetime.now(timezone.utc)
    expire = now + timedelta(days=expires_days or settings.jwt_expires_days)
    payload = {
        "id": str(user["id"]),
        "email": user["email"],
        "role": user.get("role", "student"),
        "iat": now,
        "exp": expire,
    }
    return jwt.encode(payload, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def decode_access_token(token: str) -> Dict[str, Any]:
    return jwt.decode(token, settings.jwt_secret, algorithms=[settings.jwt_algorithm])
