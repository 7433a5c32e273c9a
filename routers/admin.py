# routers/admin.py

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel

from core.logging_config import logger
from dependencies.auth import check_admin_password, requires_portal_admin


router = APIRouter(
    prefix="/admin",
    tags=["Admin"],
)


class AdminLoginRequest(BaseModel):
    password: str


# -----------------------------------------------------
# POST /admin/login
# Shared-password gate for the portal's admin panel
# -----------------------------------------------------
@router.post("/login", summary="Check the portal admin password")
def admin_login(payload: AdminLoginRequest):
    if not check_admin_password(payload.password):
        logger.warning("Portal admin login failed")
        raise HTTPException(status_code=401, detail="Invalid admin password")

    return {"success": True}


# -----------------------------------------------------
# GET /admin/session
# Lets the panel confirm a stored password is still valid
# -----------------------------------------------------
@router.get(
    "/session",
    summary="Verify the X-Admin-Password header",
    dependencies=[Depends(requires_portal_admin)],
)
def admin_session():
    return {"success": True, "is_admin": True}
