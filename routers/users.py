# routers/users.py

from fastapi import APIRouter, Depends, HTTPException

from core.errors import handle_supabase_error
from core.logging_config import logger
from core.permission_helpers import requires_system_permission
from core.permission_store import delete_permission_record
from core.supabase_client import get_supabase_client
from models.enums import PermissionLevel, SystemId
from models.permission import utcnow

router = APIRouter(
    prefix="/users",
    tags=["Users"],
)


# -----------------------------------------------------
# POST /users/{user_id}/delete
# Withdraw a user from the portal:
#   1. drop the permission record
#   2. unlink employee rows from the auth account
#   3. reject any pending sign-up approvals
# The auth account itself is left alone.
# -----------------------------------------------------
@router.post(
    "/{user_id}/delete",
    summary="Withdraw a user",
    dependencies=[Depends(
        requires_system_permission(SystemId.permission_management, PermissionLevel.admin)
    )],
)
def withdraw_user(user_id: str):
    client = get_supabase_client()
    if not client:
        raise HTTPException(500, "Supabase client not configured")

    permission_deleted = delete_permission_record(user_id)
    now = utcnow().isoformat()

    try:
        employees = (
            client.table("employees")
            .select("id")
            .eq("auth_user_id", user_id)
            .execute()
        )
        employee_ids = [row["id"] for row in (employees.data or [])]
        for employee_id in employee_ids:
            client.table("employees").update({
                "auth_user_id": None,
                "updated_at": now,
            }).eq("id", employee_id).execute()
            logger.info(f"Unlinked employee {employee_id} from {user_id}")

        approvals = (
            client.table("user_approvals")
            .select("id")
            .eq("auth_user_id", user_id)
            .execute()
        )
        approval_ids = [row["id"] for row in (approvals.data or [])]
        for approval_id in approval_ids:
            client.table("user_approvals").update({
                "status": "rejected",
                "rejection_reason": "Withdrawn from the system",
                "rejected_at": now,
            }).eq("id", approval_id).execute()
            logger.info(f"Rejected approval {approval_id} for {user_id}")

    except Exception as e:
        raise handle_supabase_error(e, "Failed to withdraw user")

    return {
        "success": True,
        "message": "User withdrawn",
        "permission_deleted": permission_deleted,
        "employees_unlinked": len(employee_ids),
        "approvals_rejected": len(approval_ids),
    }
