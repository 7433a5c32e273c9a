# tests/test_permissions_api.py

"""
Tests for the permission record endpoints.
"""

from fastapi.testclient import TestClient
from unittest.mock import patch

from models.enums import Role, PermissionLevel, SystemId


def test_systems_catalog_is_public(client: TestClient):
    response = client.get("/permissions/systems")

    assert response.status_code == 200
    catalog = {entry["system_id"]: entry for entry in response.json()}
    assert len(catalog) == len(SystemId)
    assert catalog["permission-management"]["required_permission"] == "admin"
    assert catalog["purchase"]["default_permission"] == "read"


def test_roles_and_levels(client: TestClient):
    data = client.get("/permissions/roles").json()

    assert [r["role"] for r in data["roles"]] == Role.list()
    assert [l["level"] for l in data["levels"]] == ["none", "read", "write", "admin"]


def test_me_without_record_is_fully_unprivileged(client: TestClient, as_record):
    as_record(None)

    response = client.get("/permissions/me")

    assert response.status_code == 200
    data = response.json()
    assert data["permission"] is None
    assert not any(data["flags"].values())
    assert set(data["levels"].values()) == {"none"}
    assert data["accessible_systems"] == []


def test_me_resolves_levels_and_flags(client: TestClient, as_record, make_record):
    as_record(make_record(
        role=Role.admin,
        permissions={SystemId.system_login: PermissionLevel.none},
        allowed_branches=["b1"],
    ))

    data = client.get("/permissions/me").json()

    assert data["flags"]["is_admin"] is True
    assert data["flags"]["is_deputy_master"] is False
    assert data["levels"]["system-login"] == "none"
    assert data["levels"]["chatbot-management"] == "admin"
    assert "system-login" not in data["accessible_systems"]


def test_my_branch_access(client: TestClient, as_record, make_record):
    as_record(make_record(role=Role.admin, allowed_branches=["b1"]))

    assert client.get("/permissions/me/branches/b1").json() == {"branch_id": "b1", "allowed": True}
    assert client.get("/permissions/me/branches/b2").json() == {"branch_id": "b2", "allowed": False}


def test_plain_user_cannot_manage(client: TestClient, as_record, make_record):
    as_record(make_record(permissions={SystemId.permission_management: PermissionLevel.write}))

    assert client.get("/permissions").status_code == 403
    assert client.put("/permissions/u2", json={"role": "admin"}).status_code == 403
    assert client.delete("/permissions/u2").status_code == 403


def test_admin_with_management_opt_out_is_denied(client: TestClient, as_record, make_record):
    as_record(make_record(
        role=Role.admin,
        permissions={SystemId.permission_management: PermissionLevel.none},
    ))

    assert client.get("/permissions/u2").status_code == 403


def test_get_missing_record_returns_404(client: TestClient, as_record, make_record):
    as_record(make_record(role=Role.master))

    with patch("routers.permissions.fetch_permission_record", return_value=None):
        response = client.get("/permissions/u2")

    assert response.status_code == 404


def test_get_record(client: TestClient, as_record, make_record):
    as_record(make_record(role=Role.master))
    stored = make_record(user_id="u2", permissions={SystemId.purchase: PermissionLevel.read})

    with patch("routers.permissions.fetch_permission_record", return_value=stored):
        response = client.get("/permissions/u2")

    assert response.status_code == 200
    data = response.json()
    assert data["success"] is True
    assert data["permission"]["user_id"] == "u2"
    assert data["permission"]["permissions"] == {"purchase": "read"}


def test_put_requires_permissions_or_role(client: TestClient, as_record, make_record):
    as_record(make_record(role=Role.super_admin))

    response = client.put("/permissions/u2", json={"name": "Lee"})

    assert response.status_code == 400


def test_put_rejects_unknown_level(client: TestClient, as_record, make_record):
    as_record(make_record(role=Role.super_admin))

    response = client.put("/permissions/u2", json={"permissions": {"purchase": "owner"}})

    assert response.status_code == 422


def test_put_upserts(client: TestClient, as_record, make_record):
    as_record(make_record(role=Role.deputy_master))
    saved = make_record(user_id="u2", role=Role.branch_manager, allowed_branches=["b1"])

    with patch("routers.permissions.upsert_permission_record", return_value=saved) as mock_upsert:
        response = client.put(
            "/permissions/u2",
            json={"role": "branch_manager", "allowed_branches": ["b1"]},
        )

    assert response.status_code == 200
    assert response.json()["success"] is True
    user_id, payload = mock_upsert.call_args[0]
    assert user_id == "u2"
    assert payload.role == Role.branch_manager
    assert payload.allowed_branches == ["b1"]
    assert payload.permissions is None


def test_delete(client: TestClient, as_record, make_record):
    as_record(make_record(role=Role.master))

    with patch("routers.permissions.delete_permission_record", return_value=True):
        assert client.delete("/permissions/u2").status_code == 200

    with patch("routers.permissions.delete_permission_record", return_value=False):
        assert client.delete("/permissions/u2").status_code == 404


def test_list(client: TestClient, as_record, make_record):
    as_record(make_record(role=Role.master))
    records = [make_record(user_id="u1"), make_record(user_id="u2")]

    with patch("routers.permissions.list_permission_records", return_value=records):
        response = client.get("/permissions")

    assert response.status_code == 200
    assert [r["user_id"] for r in response.json()] == ["u1", "u2"]


def test_get_record_reports_store_outage(client: TestClient, as_record, make_record, mock_supabase_client):
    as_record(make_record(role=Role.master))
    mock_supabase_client.table.side_effect = Exception("connection reset")

    with patch("core.permission_store.get_supabase_client", return_value=mock_supabase_client):
        response = client.get("/permissions/u2")

    assert response.status_code == 500


def test_get_record_without_client_is_500(client: TestClient, as_record, make_record):
    as_record(make_record(role=Role.master))

    with patch("core.permission_store.get_supabase_client", return_value=None):
        response = client.get("/permissions/u2")

    assert response.status_code == 500
