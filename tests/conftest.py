"""Pytest fixtures and configuration for admin user directory tests."""

import os

# Dev-decode mode for session tokens; must be set before settings are read.
os.environ["COGNITO_USER_POOL_ID"] = ""

import pytest
from fastapi.testclient import TestClient

from admin_api.core.config import get_settings
from admin_api.dao.user_dao import PUBLIC_ATTRIBUTES
from admin_api.models.session import Session, SessionUser
from admin_api.models.user import UserRole

get_settings.cache_clear()


class FakeUserDAO:
    """In-memory stand-in for UserDAO with the same public methods.

    Stored items carry a password and entityType like real DynamoDB items;
    reads project PUBLIC_ATTRIBUTES exactly as the real DAO does. Every call
    is recorded in ``calls`` so tests can assert the store was not touched.
    """

    def __init__(self, items=None):
        self.items = {item["userId"]: dict(item) for item in (items or [])}
        self.calls = []
        self.fail_with = None

    def _record(self, name):
        self.calls.append(name)
        if self.fail_with is not None:
            raise self.fail_with

    @staticmethod
    def _project(item):
        return {k: item[k] for k in PUBLIC_ATTRIBUTES if k in item}

    def list_all(self):
        self._record("list_all")
        items = sorted(self.items.values(), key=lambda i: i["createdAt"], reverse=True)
        return [self._project(item) for item in items]

    def get(self, user_id):
        self._record("get")
        item = self.items.get(user_id)
        return self._project(item) if item else None

    def update_role(self, user_id, role):
        self._record("update_role")
        self.items[user_id]["role"] = role.value

    def delete(self, user_id):
        self._record("delete")
        del self.items[user_id]


def _user(user_id, email, role, created_at):
    return {
        "userId": user_id,
        "email": email,
        "role": role,
        "password": f"$2b$12$hash-of-{user_id}",
        "entityType": "USER",
        "createdAt": created_at,
        "updatedAt": created_at,
    }


@pytest.fixture
def stored_users():
    """Three users; u1 is the acting admin's own account."""
    return [
        _user("u1", "a@x.com", "admin", "2024-01-01T09:00:00+00:00"),
        _user("u2", "b@x.com", "user", "2024-03-15T12:30:00+00:00"),
        _user("u3", "c@x.com", "user", "2024-02-10T08:00:00+00:00"),
    ]


@pytest.fixture
def fake_dao(stored_users):
    return FakeUserDAO(stored_users)


@pytest.fixture
def admin_session():
    """Admin session for a@x.com, whose own record is u1."""
    return Session(user=SessionUser(id="u1", email="a@x.com", role=UserRole.ADMIN))


@pytest.fixture
def user_session():
    """Authenticated but non-admin session."""
    return Session(user=SessionUser(id="u2", email="b@x.com", role=UserRole.USER))


@pytest.fixture
def user_service(fake_dao):
    from admin_api.services.user_service import UserService

    return UserService(dao=fake_dao)


@pytest.fixture
def current_session(admin_session):
    """Session the test client authenticates as; override per test module."""
    return admin_session


@pytest.fixture
def test_client(user_service, current_session):
    """FastAPI test client with the store and the session provider overridden."""
    from admin_api.api.deps import get_current_session
    from admin_api.api.routes.users import _svc
    from admin_api.main import app

    app.dependency_overrides[_svc] = lambda: user_service
    app.dependency_overrides[get_current_session] = lambda: current_session

    with TestClient(app) as client:
        yield client

    app.dependency_overrides.clear()
