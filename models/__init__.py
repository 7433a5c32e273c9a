# -------------------------
# Enums
# -------------------------
from .enums import (
    Role,
    PermissionLevel,
    SystemId,
)

# -------------------------
# Permission Models
# -------------------------
from .permission import (
    UserPermissionRecord,
    SystemPermission,
    PermissionUpdate,
    PermissionFlagsRead,
    MyPermissionsRead,
    BranchAccessRead,
)

__all__ = [
    # enums
    "Role",
    "PermissionLevel",
    "SystemId",

    # permissions
    "UserPermissionRecord",
    "SystemPermission",
    "PermissionUpdate",
    "PermissionFlagsRead",
    "MyPermissionsRead",
    "BranchAccessRead",
]
