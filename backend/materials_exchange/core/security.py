"""
Security utilities
Decoding of the viewer tokens issued by the identity service
"""
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Optional

from jose import JWTError, jwt

from .config import settings


def create_access_token(
    tenant_key: str,
    warehouses: Optional[List[Any]] = None,
    subject: Optional[str] = None,
    is_admin: bool = False,
    expires_delta: Optional[timedelta] = None,
) -> str:
    """Create a viewer token (used by scripts and tests)"""
    expire = datetime.now(timezone.utc) + (
        expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    )
    to_encode = {
        "sub": subject or tenant_key,
        "tenant_key": tenant_key,
        "warehouses": list(warehouses or []),
        "is_admin": is_admin,
        "exp": expire,
    }
    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def decode_access_token(token: str) -> Optional[Dict[str, Any]]:
    """Verify a viewer token and return its claims, None if invalid"""
    try:
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    except JWTError:
        return None
    if payload.get("sub") is None:
        return None
    return payload
