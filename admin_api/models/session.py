"""
Session schemas — the verified identity of the caller.
"""

from __future__ import annotations

from pydantic import BaseModel

from admin_api.models.user import UserRole


class SessionUser(BaseModel):
    id: str
    email: str
    # None when the token carries no recognisable role claim
    role: UserRole | None = None


class Session(BaseModel):
    user: SessionUser

    @property
    def is_admin(self) -> bool:
        return self.user.role is UserRole.ADMIN
