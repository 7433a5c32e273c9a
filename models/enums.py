from enum import Enum


class BaseStrEnum(str, Enum):
    """
    Base enum that serializes cleanly to a string
    and provides a .list() method for UI dropdowns.
    """

    def __str__(self):
        return str(self.value)

    @classmethod
    def list(cls):
        return [item.value for item in cls]

    @classmethod
    def parse(cls, value, default=None):
        """Return the member for value, or default when value is unknown."""
        try:
            return cls(value)
        except ValueError:
            return default


# -----------------------------------------------------
# ROLE
# -----------------------------------------------------
class Role(BaseStrEnum):
    """Account-wide role stored on a permission record."""

    user = "user"
    branch_manager = "branch_manager"
    admin = "admin"
    deputy_master = "deputy_master"
    master = "master"
    super_admin = "super_admin"


# -----------------------------------------------------
# PERMISSION LEVEL
# -----------------------------------------------------
class PermissionLevel(BaseStrEnum):
    """Capability level for one system. Ordered none < read < write < admin."""

    none = "none"
    read = "read"
    write = "write"
    admin = "admin"


# -----------------------------------------------------
# SYSTEM ID
# -----------------------------------------------------
class SystemId(BaseStrEnum):
    """Sub-systems of the portal that carry their own permission."""

    work_schedule = "work-schedule"
    purchase = "purchase"
    naver_ranking = "naver-ranking"
    naver_refund = "naver-refund"
    ranking_tracker = "ranking-tracker"
    manual_management = "manual-management"
    chatbot_management = "chatbot-management"
    system_login = "system-login"
    permission_management = "permission-management"
