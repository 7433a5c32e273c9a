from typing import Dict, Iterable, List, Optional

from fastapi import Depends, HTTPException

from core.permissions import (
    ADMIN_OR_HIGHER_ROLES,
    ALL_BRANCH_ROLES,
    MASTER_ROLES,
    NEAR_TOTAL_ROLES,
    SYSTEM_PERMISSIONS,
    level_satisfies,
)
from models.enums import Role, PermissionLevel, SystemId
from models.permission import PermissionFlagsRead, UserPermissionRecord


# -----------------------------------------------------
# Bootstrap identity
# -----------------------------------------------------
def is_bootstrap_identity(email: Optional[str], bootstrap_email: Optional[str]) -> bool:
    if not email or not bootstrap_email:
        return False
    return email.strip().lower() == bootstrap_email.strip().lower()


def effective_record(
    record: Optional[UserPermissionRecord],
    bootstrap_email: Optional[str],
    identity_email: Optional[str] = None,
) -> Optional[UserPermissionRecord]:
    """
    The bootstrap identity always resolves to master, whatever the stored role.
    identity_email (from the auth provider) wins over the record's own email.
    """
    if record is None:
        return None

    email = identity_email or record.email
    if is_bootstrap_identity(email, bootstrap_email) and record.role != Role.master:
        return record.model_copy(update={"role": Role.master})

    return record


# -----------------------------------------------------
# System permission evaluation
# -----------------------------------------------------
def has_system_permission(
    record: Optional[UserPermissionRecord],
    system_id: SystemId,
    required_level: PermissionLevel = PermissionLevel.read,
) -> bool:
    if record is None:
        return False

    if record.role in MASTER_ROLES:
        return True

    stored = record.permissions.get(system_id)

    # admin / deputy_master: everything except an explicit opt-out
    if record.role in NEAR_TOTAL_ROLES:
        return stored != PermissionLevel.none

    return level_satisfies(stored, required_level)


def get_user_permission(
    record: Optional[UserPermissionRecord],
    system_id: SystemId,
) -> PermissionLevel:
    """Resolved level for display. Same precedence as has_system_permission."""
    if record is None:
        return PermissionLevel.none

    if record.role in MASTER_ROLES:
        return PermissionLevel.admin

    stored = record.permissions.get(system_id)

    if record.role in NEAR_TOTAL_ROLES:
        return PermissionLevel.none if stored == PermissionLevel.none else PermissionLevel.admin

    return stored or PermissionLevel.none


def resolve_all(record: Optional[UserPermissionRecord]) -> Dict[SystemId, PermissionLevel]:
    return {sid: get_user_permission(record, sid) for sid in SYSTEM_PERMISSIONS}


def accessible_systems(record: Optional[UserPermissionRecord]) -> List[SystemId]:
    """Systems whose catalog-required level the record satisfies."""
    return [
        sid
        for sid, entry in SYSTEM_PERMISSIONS.items()
        if has_system_permission(record, sid, entry.required_permission)
    ]


# -----------------------------------------------------
# Branch evaluation
# -----------------------------------------------------
def can_access_branch(record: Optional[UserPermissionRecord], branch_id: str) -> bool:
    if record is None:
        return False

    # deputy_master sees every branch; plain admin is still filtered
    if record.role in ALL_BRANCH_ROLES:
        return True

    # Empty list = all branches
    if not record.allowed_branches:
        return True

    return branch_id in record.allowed_branches


def filter_branches(record: Optional[UserPermissionRecord], branch_ids: Iterable[str]) -> List[str]:
    return [b for b in branch_ids if can_access_branch(record, b)]


# -----------------------------------------------------
# Derived flags
# -----------------------------------------------------
class PermissionFlags(PermissionFlagsRead):
    """Role flags, computed once per record update."""

    @classmethod
    def from_record(cls, record: Optional[UserPermissionRecord]) -> "PermissionFlags":
        if record is None:
            return cls()
        role = record.role
        return cls(
            is_super_admin=role == Role.super_admin,
            is_master=role == Role.master,
            is_deputy_master=role == Role.deputy_master,
            is_branch_manager=role == Role.branch_manager,
            is_admin=role in ADMIN_OR_HIGHER_ROLES,
        )


# -----------------------------------------------------
# FastAPI dependency wrappers
# -----------------------------------------------------
def requires_system_permission(
    system_id: SystemId,
    level: PermissionLevel = PermissionLevel.read,
):
    """
    Usage:
        @router.put("/{user_id}", dependencies=[Depends(
            requires_system_permission(SystemId.permission_management, PermissionLevel.admin)
        )])
    """
    from dependencies.auth import get_current_permissions

    def dependency(
        record: Optional[UserPermissionRecord] = Depends(get_current_permissions),
    ) -> Optional[UserPermissionRecord]:
        if not has_system_permission(record, system_id, level):
            raise HTTPException(
                status_code=403,
                detail=f"Insufficient permissions: '{system_id}' at '{level}' required",
            )
        return record

    return dependency


def require_branch_access(record: Optional[UserPermissionRecord], branch_id: str):
    """Raise 403 unless the record may see branch_id."""
    if not can_access_branch(record, branch_id):
        raise HTTPException(
            status_code=403,
            detail="You do not have permission to access this branch.",
        )
