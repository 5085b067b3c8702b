"""
FastAPI dependency functions shared across all route modules.
"""

from __future__ import annotations

from typing import Annotated

from fastapi import Depends, Header, Request

from admin_api.core.config import get_settings
from admin_api.core.session import resolve_session
from admin_api.models.session import Session
from admin_api.services.user_service import require_admin


def _extract_token(request: Request, authorization: str | None) -> str | None:
    """Bearer header first, then the session cookie."""
    if authorization:
        scheme, _, token = authorization.partition(" ")
        if scheme.lower() == "bearer" and token.strip():
            return token.strip()
    return request.cookies.get(get_settings().session_cookie_name) or None


def get_current_session(
    request: Request,
    authorization: Annotated[str | None, Header()] = None,
) -> Session | None:
    """
    Resolve the caller's Session, or None.

    Never raises: whether a missing session is an error is the
    operation's decision (see require_admin).
    """
    return resolve_session(_extract_token(request, authorization))


def get_admin_session(
    session: Annotated[Session | None, Depends(get_current_session)],
) -> Session:
    """401 unless the caller is an admin. Runs before the body is read."""
    return require_admin(session)


# ── Convenient type aliases for route signatures ───────────────────────────────

CurrentSession = Annotated[Session | None, Depends(get_current_session)]

AdminSession = Annotated[Session, Depends(get_admin_session)]
