# routers/permissions.py

from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException

from core.permission_helpers import (
    PermissionFlags,
    accessible_systems,
    can_access_branch,
    requires_system_permission,
    resolve_all,
)
from core.permission_store import (
    delete_permission_record,
    fetch_permission_record,
    list_permission_records,
    upsert_permission_record,
)
from core.permissions import (
    PERMISSION_TEXT,
    ROLE_DESCRIPTIONS,
    ROLE_TEXT,
    SYSTEM_PERMISSIONS,
)
from dependencies.auth import get_current_permissions
from models.enums import Role, PermissionLevel, SystemId
from models.permission import (
    BranchAccessRead,
    MyPermissionsRead,
    PermissionUpdate,
    SystemPermission,
    UserPermissionRecord,
)

router = APIRouter(
    prefix="/permissions",
    tags=["Permissions"],
)


manage_read = requires_system_permission(SystemId.permission_management, PermissionLevel.read)
manage_admin = requires_system_permission(SystemId.permission_management, PermissionLevel.admin)


# ============================================================
# Catalog
# ============================================================
@router.get(
    "/systems",
    response_model=List[SystemPermission],
    summary="System catalog with default and required levels",
)
def list_systems():
    return list(SYSTEM_PERMISSIONS.values())


@router.get("/roles", summary="Roles and levels with display text")
def list_roles():
    return {
        "roles": [
            {"role": role, "text": ROLE_TEXT[role], "description": ROLE_DESCRIPTIONS[role]}
            for role in Role
        ],
        "levels": [
            {"level": level, "text": PERMISSION_TEXT[level]}
            for level in PermissionLevel
        ],
    }


# ============================================================
# Caller's own view
# ============================================================
@router.get("/me", response_model=MyPermissionsRead, summary="Resolved permissions of the caller")
def read_my_permissions(
    record: Optional[UserPermissionRecord] = Depends(get_current_permissions),
):
    return MyPermissionsRead(
        permission=record,
        flags=PermissionFlags.from_record(record),
        levels=resolve_all(record),
        accessible_systems=accessible_systems(record),
    )


@router.get(
    "/me/branches/{branch_id}",
    response_model=BranchAccessRead,
    summary="Can the caller see this branch",
)
def read_my_branch_access(
    branch_id: str,
    record: Optional[UserPermissionRecord] = Depends(get_current_permissions),
):
    return BranchAccessRead(branch_id=branch_id, allowed=can_access_branch(record, branch_id))


# ============================================================
# Admin management
# ============================================================
@router.get(
    "",
    response_model=List[UserPermissionRecord],
    summary="List all permission records",
    dependencies=[Depends(manage_admin)],
)
def list_permissions():
    return list_permission_records()


@router.get(
    "/{user_id}",
    summary="Get a user's permission record",
    dependencies=[Depends(manage_read)],
)
def get_permissions(user_id: str):
    record = fetch_permission_record(user_id)
    if record is None:
        raise HTTPException(404, "Permission record not found")

    return {"success": True, "permission": record}


@router.put(
    "/{user_id}",
    summary="Create or update a user's permission record",
    dependencies=[Depends(manage_admin)],
)
def put_permissions(user_id: str, payload: PermissionUpdate):
    try:
        record = upsert_permission_record(user_id, payload)
    except ValueError:
        raise HTTPException(400, "Either permissions or role is required")

    return {
        "success": True,
        "message": "Permissions updated",
        "permission": record,
    }


@router.delete(
    "/{user_id}",
    summary="Delete a user's permission record",
    dependencies=[Depends(manage_admin)],
)
def delete_permissions(user_id: str):
    if not delete_permission_record(user_id):
        raise HTTPException(404, "Permission record not found")

    return {"success": True, "message": "Permissions deleted"}
