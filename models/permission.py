# models/permission.py

from typing import Dict, List, Optional
from datetime import datetime, timezone
from pydantic import BaseModel, ConfigDict, Field

from models.enums import Role, PermissionLevel, SystemId


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


# ===============================================================
# STORED RECORD (table: user_permissions)
# ===============================================================

class UserPermissionRecord(BaseModel):
    """
    One row of user_permissions, keyed by the auth subject id.

    allowed_branches = [] means "every branch", not "no branch".
    """
    model_config = ConfigDict(frozen=True)

    user_id: str
    email: Optional[str] = None
    name: Optional[str] = None
    role: Role = Role.user
    permissions: Dict[SystemId, PermissionLevel] = Field(default_factory=dict)
    allowed_branches: List[str] = Field(default_factory=list)
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)


class SystemPermission(BaseModel):
    """Catalog entry describing one system's default and required level."""
    model_config = ConfigDict(frozen=True)

    system_id: SystemId
    default_permission: PermissionLevel
    required_permission: PermissionLevel


# ===============================================================
# PAYLOADS
# ===============================================================

class PermissionUpdate(BaseModel):
    """
    Admin write to a permission record. Only provided fields change.
    At least one of permissions / role must be present.
    """
    permissions: Optional[Dict[SystemId, PermissionLevel]] = None
    role: Optional[Role] = None
    name: Optional[str] = None
    email: Optional[str] = None
    allowed_branches: Optional[List[str]] = None


class PermissionFlagsRead(BaseModel):
    is_super_admin: bool = False
    is_master: bool = False
    is_deputy_master: bool = False
    is_branch_manager: bool = False
    is_admin: bool = False


class MyPermissionsRead(BaseModel):
    """Resolved view of the caller, returned by GET /permissions/me."""
    permission: Optional[UserPermissionRecord] = None
    flags: PermissionFlagsRead
    levels: Dict[SystemId, PermissionLevel]
    accessible_systems: List[SystemId]


class BranchAccessRead(BaseModel):
    branch_id: str
    allowed: bool
