"""Integration tests for the /admin/users endpoints.

The store and the session provider are swapped through dependency
overrides (see conftest.py); everything between them is the real app.
"""

import pytest
from botocore.exceptions import ClientError
from fastapi.testclient import TestClient

from admin_api.api.deps import get_current_session
from admin_api.main import app


class TestListEndpoint:
    """Test GET /admin/users."""

    def test_list_users(self, test_client):
        response = test_client.get("/admin/users")

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert "error" not in body
        users = body["data"]["users"]
        assert [u["id"] for u in users] == ["u2", "u3", "u1"]
        assert users[0] == {
            "id": "u2",
            "email": "b@x.com",
            "role": "user",
            "createdAt": "2024-03-15T12:30:00+00:00",
        }

    def test_list_never_exposes_password(self, test_client):
        response = test_client.get("/admin/users")
        assert "password" not in response.text
        assert "hash-of" not in response.text

    def test_unrecognised_stored_role_is_listed_as_is(self, test_client, fake_dao):
        """Records written elsewhere may carry roles this service never assigns."""
        fake_dao.items["u3"]["role"] = "moderator"

        response = test_client.get("/admin/users")

        assert response.status_code == 200
        users = {u["id"]: u for u in response.json()["data"]["users"]}
        assert users["u3"]["role"] == "moderator"
        assert users["u2"]["role"] == "user"

    def test_non_admin_gets_401(self, test_client, user_session, fake_dao):
        app.dependency_overrides[get_current_session] = lambda: user_session

        response = test_client.get("/admin/users")

        assert response.status_code == 401
        assert response.json() == {"success": False, "error": "Unauthorized"}
        assert fake_dao.calls == []

    def test_store_failure_is_500(self, test_client, fake_dao, caplog):
        fake_dao.fail_with = ClientError(
            {"Error": {"Code": "InternalServerError", "Message": "table on fire"}},
            "Query",
        )

        response = test_client.get("/admin/users")

        assert response.status_code == 500
        assert response.json() == {"success": False, "error": "Internal server error"}
        assert "table on fire" not in response.text
        assert any("GET /admin/users failed" in r.getMessage() for r in caplog.records)


class TestUpdateRoleEndpoint:
    """Test PUT /admin/users."""

    def test_promote_user(self, test_client, fake_dao):
        response = test_client.put("/admin/users", json={"userId": "u2", "role": "admin"})

        assert response.status_code == 200
        assert response.json() == {"success": True, "message": "User role updated to admin"}
        assert fake_dao.items["u2"]["role"] == "admin"

    def test_cannot_change_own_role(self, test_client, fake_dao):
        response = test_client.put("/admin/users", json={"userId": "u1", "role": "user"})

        assert response.status_code == 400
        assert response.json() == {"success": False, "error": "Cannot change your own role"}
        assert fake_dao.items["u1"]["role"] == "admin"

    def test_invalid_role(self, test_client, fake_dao):
        response = test_client.put("/admin/users", json={"userId": "u2", "role": "owner"})

        assert response.status_code == 400
        assert response.json()["error"] == "Invalid role"
        assert fake_dao.items["u2"]["role"] == "user"

    @pytest.mark.parametrize("payload", [{}, {"userId": "u2"}, {"role": "admin"}, {"userId": "", "role": "admin"}])
    def test_missing_fields(self, test_client, payload):
        response = test_client.put("/admin/users", json=payload)

        assert response.status_code == 400
        assert response.json()["error"] == "User ID and role are required"

    @pytest.mark.parametrize("raw", ["not json", "", "[1, 2]", "\"admin\""])
    def test_unusable_body_counts_as_missing_fields(self, test_client, raw):
        response = test_client.put(
            "/admin/users", content=raw, headers={"Content-Type": "application/json"}
        )

        assert response.status_code == 400
        assert response.json()["error"] == "User ID and role are required"

    def test_unknown_user(self, test_client):
        response = test_client.put("/admin/users", json={"userId": "u9", "role": "admin"})

        assert response.status_code == 404
        assert response.json() == {"success": False, "error": "User not found"}

    def test_store_failure_is_500(self, test_client, fake_dao):
        fake_dao.fail_with = ClientError(
            {"Error": {"Code": "InternalServerError", "Message": "table on fire"}},
            "GetItem",
        )

        response = test_client.put("/admin/users", json={"userId": "u2", "role": "admin"})

        assert response.status_code == 500
        assert response.json() == {"success": False, "error": "Internal server error"}
        assert "table on fire" not in response.text

    def test_unauthorized_before_body_is_read(self, test_client, fake_dao):
        app.dependency_overrides[get_current_session] = lambda: None

        response = test_client.put(
            "/admin/users", content="{broken", headers={"Content-Type": "application/json"}
        )

        assert response.status_code == 401
        assert response.headers["WWW-Authenticate"] == "Bearer"
        assert fake_dao.calls == []


class TestDeleteEndpoint:
    """Test DELETE /admin/users?userId=."""

    def test_delete_user(self, test_client, fake_dao):
        response = test_client.delete("/admin/users", params={"userId": "u3"})

        assert response.status_code == 200
        assert response.json() == {"success": True, "message": "User deleted successfully"}
        assert "u3" not in fake_dao.items

    def test_missing_user_id(self, test_client):
        response = test_client.delete("/admin/users")

        assert response.status_code == 400
        assert response.json()["error"] == "User ID is required"

    def test_unknown_user(self, test_client):
        response = test_client.delete("/admin/users", params={"userId": "u9"})

        assert response.status_code == 404
        assert response.json()["error"] == "User not found"

    def test_cannot_delete_self(self, test_client, fake_dao):
        response = test_client.delete("/admin/users", params={"userId": "u1"})

        assert response.status_code == 400
        assert response.json()["error"] == "Cannot delete your own account"
        assert "u1" in fake_dao.items

    def test_store_failure_is_500(self, test_client, fake_dao):
        fake_dao.fail_with = ClientError(
            {"Error": {"Code": "InternalServerError", "Message": "table on fire"}},
            "GetItem",
        )

        response = test_client.delete("/admin/users", params={"userId": "u3"})

        assert response.status_code == 500
        assert response.json() == {"success": False, "error": "Internal server error"}
        assert "table on fire" not in response.text

    def test_non_admin_cannot_delete(self, test_client, user_session, fake_dao):
        app.dependency_overrides[get_current_session] = lambda: user_session

        response = test_client.delete("/admin/users", params={"userId": "u3"})

        assert response.status_code == 401
        assert "u3" in fake_dao.items


class TestUnexpectedErrors:
    """Test the last-resort handler for non-store failures."""

    def test_unexpected_exception_is_enveloped(self, user_service, admin_session):
        def explode(session):
            raise RuntimeError("secret internals")

        user_service.list_users = explode
        from admin_api.api.routes.users import _svc

        app.dependency_overrides[_svc] = lambda: user_service
        app.dependency_overrides[get_current_session] = lambda: admin_session
        try:
            with TestClient(app, raise_server_exceptions=False) as client:
                response = client.get("/admin/users")
        finally:
            app.dependency_overrides.clear()

        assert response.status_code == 500
        assert response.json() == {"success": False, "error": "Internal server error"}
        assert "secret internals" not in response.text


def test_health():
    with TestClient(app) as client:
        response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "ok"
