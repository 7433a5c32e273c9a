# ============================================
# SYSTEM CATALOG + PERMISSION LEVEL ORDERING
# ============================================
from typing import Dict, Optional

from models.enums import Role, PermissionLevel, SystemId
from models.permission import SystemPermission


# =====================================================
# LEVEL ORDER - none < read < write < admin
# =====================================================
LEVEL_ORDER: Dict[PermissionLevel, int] = {
    PermissionLevel.none: 0,
    PermissionLevel.read: 1,
    PermissionLevel.write: 2,
    PermissionLevel.admin: 3,
}


# =====================================================
# ROLE TIERS
# =====================================================
# Maximal everywhere
MASTER_ROLES = frozenset({Role.master, Role.super_admin})

# Maximal unless a system is explicitly set to none
NEAR_TOTAL_ROLES = frozenset({Role.admin, Role.deputy_master})

# Unconditional branch access (admin is NOT in here)
ALL_BRANCH_ROLES = frozenset({Role.master, Role.super_admin, Role.deputy_master})

# "admin or higher"
ADMIN_OR_HIGHER_ROLES = MASTER_ROLES | NEAR_TOTAL_ROLES


# =====================================================
# SYSTEM CATALOG
# =====================================================
def _entry(system_id: SystemId, default: PermissionLevel, required: PermissionLevel) -> SystemPermission:
    return SystemPermission(
        system_id=system_id,
        default_permission=default,
        required_permission=required,
    )


SYSTEM_PERMISSIONS: Dict[SystemId, SystemPermission] = {
    SystemId.work_schedule: _entry(SystemId.work_schedule, PermissionLevel.none, PermissionLevel.read),
    SystemId.purchase: _entry(SystemId.purchase, PermissionLevel.read, PermissionLevel.read),
    SystemId.naver_ranking: _entry(SystemId.naver_ranking, PermissionLevel.read, PermissionLevel.read),
    SystemId.naver_refund: _entry(SystemId.naver_refund, PermissionLevel.read, PermissionLevel.read),
    SystemId.ranking_tracker: _entry(SystemId.ranking_tracker, PermissionLevel.read, PermissionLevel.read),
    SystemId.manual_management: _entry(SystemId.manual_management, PermissionLevel.read, PermissionLevel.read),
    SystemId.chatbot_management: _entry(SystemId.chatbot_management, PermissionLevel.none, PermissionLevel.read),
    SystemId.system_login: _entry(SystemId.system_login, PermissionLevel.none, PermissionLevel.read),
    SystemId.permission_management: _entry(SystemId.permission_management, PermissionLevel.none, PermissionLevel.admin),
}


def level_satisfies(level: Optional[PermissionLevel], required: PermissionLevel) -> bool:
    """True if level (missing = none) is at least required."""
    return LEVEL_ORDER[level or PermissionLevel.none] >= LEVEL_ORDER[required]


# =====================================================
# DISPLAY TEXT
# =====================================================
PERMISSION_TEXT = {
    PermissionLevel.none: "No access",
    PermissionLevel.read: "View",
    PermissionLevel.write: "Edit",
    PermissionLevel.admin: "Manage",
}

ROLE_TEXT = {
    Role.master: "Master",
    Role.deputy_master: "Deputy master",
    Role.branch_manager: "Branch manager",
    Role.super_admin: "Super admin",
    Role.admin: "Admin",
    Role.user: "User",
}

ROLE_DESCRIPTIONS = {
    Role.master: "Full access to every system and every branch.",
    Role.deputy_master: "Close to master; manages most systems and sees every branch.",
    Role.branch_manager: "Manages the branches assigned to them.",
    Role.super_admin: "Super admin - every system.",
    Role.admin: "Admin - most systems, limited to assigned branches.",
    Role.user: "User - checked system by system.",
}
