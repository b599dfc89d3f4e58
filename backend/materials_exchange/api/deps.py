"""
API Dependencies
Common dependencies for API endpoints
"""
from typing import Any, Dict, Optional

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from materials_exchange.core.database import get_db
from materials_exchange.core.security import decode_access_token
from materials_exchange.services.catalog import Viewer
from materials_exchange.services.ingestion import ReplaceJournal
from materials_exchange.services.store import SqlRecordStore

# Security scheme
security = HTTPBearer()


def get_current_claims(
    credentials: HTTPAuthorizationCredentials = Depends(security),
) -> Dict[str, Any]:
    """
    Claims of the bearer token.

    Tokens are issued by the identity service; only the signature and
    expiry are checked here.
    """
    claims = decode_access_token(credentials.credentials)
    if not claims:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Could not validate credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return claims


def get_current_viewer(claims: Dict[str, Any] = Depends(get_current_claims)) -> Viewer:
    """Viewing tenant with its warehouse addresses"""
    return Viewer.from_claims(claims)


def get_store(db: Session = Depends(get_db)) -> SqlRecordStore:
    return SqlRecordStore(db)


def get_journal(db: Session = Depends(get_db)) -> ReplaceJournal:
    return ReplaceJournal(db)


def resolve_target_tenant(
    tenant_key: Optional[str] = None,
    claims: Dict[str, Any] = Depends(get_current_claims),
) -> str:
    """
    Tenant a write is aimed at: the viewer's own unless an admin names
    another one.
    """
    own = (claims.get("tenant_key") or "").strip()
    target = (tenant_key or "").strip() or own
    if target != own and not claims.get("is_admin"):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Not enough permissions",
        )
    if not target:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Token carries no tenant key",
        )
    return target
