from typing import Optional
from fastapi import Depends, Header, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from pydantic import BaseModel
from supabase import Client

from core.config import settings
from core.permission_store import load_permission_record
from core.supabase_client import get_supabase_client
from models.permission import UserPermissionRecord


bearer_scheme = HTTPBearer()


# ============================================================
# Current User Model (identity only - permissions live elsewhere)
# ============================================================
class CurrentUser(BaseModel):
    id: str                         # Supabase Auth UID
    email: Optional[str] = None
    full_name: Optional[str] = None


# ============================================================
# AUTH DECODING (Supabase validates the JWT)
# ============================================================
def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(bearer_scheme),
) -> CurrentUser:

    token = credentials.credentials

    unauthorized = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Invalid or expired authentication token",
        headers={"WWW-Authenticate": "Bearer"},
    )

    client: Client = get_supabase_client()
    if not client:
        raise HTTPException(500, "Supabase client not configured")

    try:
        auth_resp = client.auth.get_user(token)
    except Exception:
        raise unauthorized

    if not auth_resp or not auth_resp.user:
        raise unauthorized

    auth_user = auth_resp.user
    metadata = auth_user.user_metadata or {}

    return CurrentUser(
        id=auth_user.id,
        email=auth_user.email,
        full_name=metadata.get("full_name") or metadata.get("name"),
    )


# ============================================================
# PERMISSION RECORD OF THE CALLER
# ============================================================
def get_current_permissions(
    current_user: CurrentUser = Depends(get_current_user),
) -> Optional[UserPermissionRecord]:
    """
    Effective permission record of the caller, None when there is none.
    Resolver checks treat None as deny-all.
    """
    return load_permission_record(current_user.id, current_user.email)


# ============================================================
# PORTAL ADMIN PASSWORD
# ============================================================
def check_admin_password(password: Optional[str]) -> bool:
    """Plain string compare against the shared portal password."""
    expected = settings.PORTAL_ADMIN_PASSWORD
    if not expected or password is None:
        return False
    return password == expected


def requires_portal_admin(
    x_admin_password: Optional[str] = Header(None),
):
    if not check_admin_password(x_admin_password):
        raise HTTPException(
            status_code=401,
            detail="Admin password required",
        )
    return True
