"""
UserService — admin user directory: list, update role, delete.

Every operation takes the caller's Session explicitly and starts with
require_admin(); nothing is read or written for a non-admin caller.

Guards run in a fixed order per operation (input → existence → self-target)
so the error a client sees is deterministic.  An admin can never change the
role of, or delete, the account whose email matches their own session.
"""

from __future__ import annotations

import logging
from typing import Any

from botocore.exceptions import ClientError
from fastapi import HTTPException, status

from admin_api.dao.user_dao import UserDAO
from admin_api.models.session import Session
from admin_api.models.user import UserRole

logger = logging.getLogger(__name__)


def require_admin(session: Session | None) -> Session:
    """Raise 401 unless the session belongs to an admin."""
    if session is None or not session.is_admin:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Unauthorized",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return session


def _bad_request(message: str) -> HTTPException:
    return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=message)


def _user_not_found() -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")


def _to_summary(item: dict[str, Any]) -> dict[str, Any]:
    return {
        "id": item["userId"],
        "email": item["email"],
        "role": item["role"],
        "createdAt": item["createdAt"],
    }


class UserService:

    def __init__(self, dao: UserDAO | None = None) -> None:
        self._dao = dao if dao is not None else UserDAO()

    # ── Helpers ───────────────────────────────────────────────────────────────

    def _get_or_404(self, user_id: str) -> dict[str, Any]:
        user = self._dao.get(user_id)
        if not user:
            raise _user_not_found()
        return user

    @staticmethod
    def _is_self(user: dict[str, Any], session: Session) -> bool:
        return user.get("email") == session.user.email

    # ── Queries ───────────────────────────────────────────────────────────────

    def list_users(self, session: Session | None) -> list[dict[str, Any]]:
        """All users as {id, email, role, createdAt}, newest first."""
        require_admin(session)
        users = [_to_summary(item) for item in self._dao.list_all()]
        # No-op for GSI-ordered input
        users.sort(key=lambda u: u["createdAt"], reverse=True)
        return users

    # ── Mutations ─────────────────────────────────────────────────────────────

    def update_role(
        self, session: Session | None, user_id: Any, role: Any
    ) -> UserRole:
        """Change another user's role; returns the role that was written."""
        session = require_admin(session)

        if not user_id or not role:
            raise _bad_request("User ID and role are required")

        new_role = UserRole.parse(role)
        if new_role is None:
            raise _bad_request("Invalid role")

        user_id = str(user_id)
        user = self._get_or_404(user_id)
        if self._is_self(user, session):
            raise _bad_request("Cannot change your own role")

        try:
            self._dao.update_role(user_id, new_role)
        except ClientError as exc:
            if exc.response["Error"]["Code"] == "ConditionalCheckFailedException":
                # Deleted between the read and the write
                raise _user_not_found()
            raise

        logger.info(
            "Admin %s set role of user %s to %s",
            session.user.email, user_id, new_role.value,
        )
        return new_role

    def delete_user(self, session: Session | None, user_id: Any) -> None:
        """Permanently delete another user's account."""
        session = require_admin(session)

        if not user_id:
            raise _bad_request("User ID is required")

        user_id = str(user_id)
        user = self._get_or_404(user_id)
        if self._is_self(user, session):
            raise _bad_request("Cannot delete your own account")

        self._dao.delete(user_id)
        logger.info("Admin %s deleted user %s", session.user.email, user_id)
