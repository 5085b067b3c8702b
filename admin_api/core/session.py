"""
admin_api/core/session.py

Turns a verified Cognito token into a Session.

Role resolution
---------------
1. The claim named by ROLE_CLAIM (default "custom:role"), when present.
2. Otherwise the "cognito:groups" claim: membership of ADMIN_GROUP gives
   "admin", membership of any other group gives "user".

A role value outside {admin, user} resolves to role=None, which the
service treats exactly like a non-admin caller.
"""

from __future__ import annotations

import logging
from typing import Any

from jwt import PyJWTError

from admin_api.core.cognito import verify_token
from admin_api.core.config import Settings, get_settings
from admin_api.models.session import Session, SessionUser
from admin_api.models.user import UserRole

logger = logging.getLogger(__name__)


def _role_from_claims(claims: dict[str, Any], settings: Settings) -> UserRole | None:
    raw = claims.get(settings.role_claim)
    if raw is not None:
        return UserRole.parse(raw)

    groups = claims.get("cognito:groups") or []
    if isinstance(groups, str):
        groups = [groups]
    if not isinstance(groups, (list, tuple)):
        return None
    if settings.admin_group in groups:
        return UserRole.ADMIN
    if groups:
        return UserRole.USER
    return None


def session_from_claims(
    claims: dict[str, Any], settings: Settings | None = None
) -> Session | None:
    """
    Build a Session from verified claims.

    Returns None when the token has no subject or no email: without an
    email the self-targeting guard cannot be applied.
    """
    settings = settings or get_settings()
    user_id = claims.get("sub")
    email = claims.get("email")
    if not user_id or not email:
        return None
    return Session(
        user=SessionUser(
            id=str(user_id),
            email=str(email),
            role=_role_from_claims(claims, settings),
        )
    )


def resolve_session(token: str | None) -> Session | None:
    """Verify a raw token and return its Session; never raises on bad tokens."""
    if not token:
        return None
    try:
        claims = verify_token(token)
    except PyJWTError as exc:
        logger.info("Rejected session token: %s", exc)
        return None
    return session_from_claims(claims)
