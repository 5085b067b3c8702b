"""
Pydantic schemas for the admin User Directory.

password is stored on the user item but never appears in any schema here,
so no response can leak it.
"""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel


class UserRole(str, Enum):
    ADMIN = "admin"
    USER = "user"

    @classmethod
    def parse(cls, value: Any) -> UserRole | None:
        """Return the matching role, or None for anything unrecognised."""
        if isinstance(value, cls):
            return value
        if not isinstance(value, str):
            return None
        try:
            return cls(value)
        except ValueError:
            return None


# ── Envelope ──────────────────────────────────────────────────────────────────

class Envelope(BaseModel):
    """
    Uniform response wrapper for every /admin/users response.
    Routes render it with exclude_none, so unset keys are omitted.
    """
    success: bool
    data: Any = None
    message: str | None = None
    error: str | None = None


# ── Responses ─────────────────────────────────────────────────────────────────

class UserSummary(BaseModel):
    id: str
    email: str
    # Stored value as-is; records written elsewhere may predate UserRole
    role: str
    createdAt: str


class UserListData(BaseModel):
    users: list[UserSummary]


class UserListEnvelope(Envelope):
    data: UserListData


# ── Request bodies ────────────────────────────────────────────────────────────

class UserRoleUpdateRequest(BaseModel):
    """
    PUT /admin/users body.  Fields are untyped here; UserService validates
    them in order and reports each failure with its own message.
    """
    userId: Any = None
    role: Any = None
