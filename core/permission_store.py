# core/permission_store.py

from typing import List, Optional

from fastapi import HTTPException

from core.cache import MISS, cache_delete, cache_get, cache_set
from core.config import settings
from core.errors import handle_supabase_error
from core.logging_config import logger
from core.permission_helpers import effective_record, is_bootstrap_identity
from core.permission_watch import Subscription, get_watcher
from core.supabase_client import get_supabase_client
from models.enums import Role, PermissionLevel, SystemId
from models.permission import PermissionUpdate, UserPermissionRecord, utcnow


TABLE = "user_permissions"


# =================================================================
#  ROW <-> RECORD
# =================================================================
# Stored rows are written by older clients too: unknown roles
# (e.g. "employee") read as user, unknown systems/levels are dropped.
# =================================================================

def row_to_record(row: dict) -> UserPermissionRecord:
    raw_permissions = row.get("permissions") or {}
    permissions = {}
    for key, value in raw_permissions.items():
        system_id = SystemId.parse(key)
        level = PermissionLevel.parse(value)
        if system_id is not None and level is not None:
            permissions[system_id] = level

    branches = row.get("allowed_branches") or []

    return UserPermissionRecord(
        user_id=str(row["user_id"]),
        email=row.get("email") or None,
        name=row.get("name") or None,
        role=Role.parse(row.get("role"), Role.user),
        permissions=permissions,
        allowed_branches=[str(b) for b in branches],
        created_at=row.get("created_at") or utcnow(),
        updated_at=row.get("updated_at") or utcnow(),
    )


def _serialize_permissions(permissions: dict) -> dict:
    return {str(k): str(v) for k, v in permissions.items()}


def _cache_key(user_id: str) -> str:
    return f"permissions:{user_id}"


def _require_client():
    client = get_supabase_client()
    if not client:
        raise HTTPException(500, "Supabase client not configured")
    return client


def _fetch_row(client, user_id: str) -> Optional[dict]:
    result = (
        client.table(TABLE)
        .select("*")
        .eq("user_id", user_id)
        .limit(1)
        .execute()
    )
    rows = result.data or []
    return rows[0] if rows else None


def _publish(user_id: str, record: Optional[UserPermissionRecord]):
    get_watcher().publish(
        user_id, effective_record(record, settings.BOOTSTRAP_MASTER_EMAIL)
    )


# =================================================================
#  READS
# =================================================================
# The resolver path fails closed: any error resolves to "no record".
# fetch_permission_record is the strict variant for admin views.
# =================================================================

def _lookup(user_id: str):
    """Stored record, None if confirmed absent, MISS if the store is unreadable."""
    cached = cache_get(_cache_key(user_id))
    if cached is not MISS:
        return cached

    client = get_supabase_client()
    if not client:
        logger.error(f"Permission lookup skipped for {user_id}: Supabase client not configured")
        return MISS

    try:
        row = _fetch_row(client, user_id)
    except Exception as e:
        logger.error(f"Permission lookup failed for {user_id}: {e}")
        return MISS

    record = row_to_record(row) if row else None
    cache_set(_cache_key(user_id), record, settings.PERMISSION_CACHE_TTL_SECONDS)
    return record


def get_permission_record(user_id: str) -> Optional[UserPermissionRecord]:
    """Stored record for user_id, or None if absent or unreadable."""
    record = _lookup(user_id)
    return None if record is MISS else record


def fetch_permission_record(user_id: str) -> Optional[UserPermissionRecord]:
    """Stored record for user_id, bypassing the cache. Store errors raise."""
    client = _require_client()

    try:
        row = _fetch_row(client, user_id)
    except Exception as e:
        raise handle_supabase_error(e, "Failed to fetch permissions")

    return row_to_record(row) if row else None


def load_permission_record(user_id: str, email: Optional[str]) -> Optional[UserPermissionRecord]:
    """
    Effective record for an authenticated identity.

    The bootstrap identity gets a master record created on first load,
    and resolves to master even if its stored role says otherwise.
    The record is only created once the store confirms there is none;
    an unreadable store resolves to no record.
    """
    record = _lookup(user_id)
    if record is MISS:
        return None

    if record is None and is_bootstrap_identity(email, settings.BOOTSTRAP_MASTER_EMAIL):
        record = create_bootstrap_record(user_id, email)

    return effective_record(record, settings.BOOTSTRAP_MASTER_EMAIL, email)


def list_permission_records() -> List[UserPermissionRecord]:
    client = _require_client()

    try:
        result = client.table(TABLE).select("*").execute()
    except Exception as e:
        raise handle_supabase_error(e, "Failed to list permissions")

    return [row_to_record(row) for row in (result.data or [])]


# =================================================================
#  WRITES
# =================================================================

def create_bootstrap_record(user_id: str, email: str) -> UserPermissionRecord:
    """
    Lazily create the master record for the bootstrap identity.
    If the insert fails the in-memory record is still returned.
    """
    now = utcnow()
    record = UserPermissionRecord(
        user_id=user_id,
        email=email,
        role=Role.master,
        created_at=now,
        updated_at=now,
    )

    client = get_supabase_client()
    if client:
        try:
            client.table(TABLE).insert({
                "user_id": user_id,
                "email": email,
                "name": "",
                "permissions": {},
                "role": Role.master.value,
                "allowed_branches": [],
                "created_at": now.isoformat(),
                "updated_at": now.isoformat(),
            }).execute()
            logger.info(f"Created bootstrap master record for {user_id}")
        except Exception as e:
            logger.warning(f"Could not persist bootstrap record for {user_id}: {e}")

    cache_delete(_cache_key(user_id))
    _publish(user_id, record)
    return record


def upsert_permission_record(user_id: str, update: PermissionUpdate) -> UserPermissionRecord:
    """
    Create or update a record. Only provided fields change; updated_at
    always moves. Raises ValueError when neither permissions nor role is set.
    """
    if update.permissions is None and update.role is None:
        raise ValueError("permissions or role is required")

    client = _require_client()
    now = utcnow().isoformat()

    update_data = {"updated_at": now}
    if update.permissions is not None:
        update_data["permissions"] = _serialize_permissions(update.permissions)
    if update.role is not None:
        update_data["role"] = update.role.value
    if update.name:
        update_data["name"] = update.name
    if update.email:
        update_data["email"] = update.email
    if update.allowed_branches is not None:
        update_data["allowed_branches"] = list(update.allowed_branches)

    try:
        existing = _fetch_row(client, user_id)

        if existing:
            result = (
                client.table(TABLE)
                .update(update_data)
                .eq("user_id", user_id)
                .execute()
            )
            merged = {**existing, **update_data}
        else:
            merged = {
                "user_id": user_id,
                "email": "",
                "name": "",
                "permissions": {},
                "role": Role.user.value,
                "allowed_branches": [],
                "created_at": now,
                **update_data,
            }
            result = client.table(TABLE).insert(merged).execute()

    except Exception as e:
        raise handle_supabase_error(e, "Failed to update permissions")

    row = result.data[0] if result.data else merged
    record = row_to_record(row)

    cache_delete(_cache_key(user_id))
    _publish(user_id, record)
    logger.info(f"Permissions {'updated' if existing else 'created'} for {user_id}")
    return record


def delete_permission_record(user_id: str) -> bool:
    """Remove the whole record. Returns False if there was none."""
    client = _require_client()

    try:
        if not _fetch_row(client, user_id):
            return False
        client.table(TABLE).delete().eq("user_id", user_id).execute()
    except Exception as e:
        raise handle_supabase_error(e, "Failed to delete permissions")

    cache_delete(_cache_key(user_id))
    _publish(user_id, None)
    logger.info(f"Permissions deleted for {user_id}")
    return True


# =================================================================
#  SUBSCRIPTIONS
# =================================================================

def watch_permission_record(user_id: str, email: Optional[str], listener) -> Subscription:
    """
    Subscribe to a user's record. The listener is called once with the
    current effective record, then again on every write or delete.
    """
    def deliver(record):
        listener(effective_record(record, settings.BOOTSTRAP_MASTER_EMAIL, email))

    # Load before subscribing so a lazily created bootstrap record is
    # not delivered twice.
    current = load_permission_record(user_id, email)

    watcher = get_watcher()
    subscription = watcher.subscribe(user_id, deliver)
    watcher.remember(user_id, current)
    listener(current)
    return subscription
