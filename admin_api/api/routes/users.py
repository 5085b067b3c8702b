"""
Admin users router — mounted at /admin/users

All three endpoints require an admin session.  Responses use the shared
envelope {success, data?, message?, error?}; errors are shaped by the
handlers in admin_api.core.errors.

PUT reads its JSON body by hand, after AdminSession has resolved, so an
unauthorised caller gets 401 even when the body is malformed.
"""

from typing import Annotated, Any

from fastapi import APIRouter, Depends, Query, Request
from fastapi.concurrency import run_in_threadpool

from admin_api.api.deps import AdminSession
from admin_api.models.user import (
    Envelope,
    UserListData,
    UserListEnvelope,
    UserRoleUpdateRequest,
)
from admin_api.services.user_service import UserService

router = APIRouter()


def _svc() -> UserService:
    return UserService()


UserServiceDep = Annotated[UserService, Depends(_svc)]


async def _read_role_update(request: Request) -> UserRoleUpdateRequest:
    """Parse the PUT body; anything but a JSON object counts as empty."""
    try:
        payload: Any = await request.json()
    except ValueError:
        payload = {}
    if not isinstance(payload, dict):
        payload = {}
    return UserRoleUpdateRequest.model_validate(payload)


# ── GET /admin/users  ─────────────────────────────────────────────────────────

@router.get(
    "",
    response_model=UserListEnvelope,
    response_model_exclude_none=True,
    summary="List users",
)
def list_users(
    session: AdminSession,
    svc: UserServiceDep,
) -> UserListEnvelope:
    """Return every user (without password), newest first."""
    users = svc.list_users(session)
    return UserListEnvelope(success=True, data=UserListData(users=users))


# ── PUT /admin/users  ─────────────────────────────────────────────────────────

@router.put(
    "",
    response_model=Envelope,
    response_model_exclude_none=True,
    summary="Update user role",
)
async def update_user_role(
    request: Request,
    session: AdminSession,
    svc: UserServiceDep,
) -> Envelope:
    """
    Set another user's role to "admin" or "user".
    An admin cannot change their own role.
    """
    body = await _read_role_update(request)
    role = await run_in_threadpool(svc.update_role, session, body.userId, body.role)
    return Envelope(success=True, message=f"User role updated to {role.value}")


# ── DELETE /admin/users?userId=  ──────────────────────────────────────────────

@router.delete(
    "",
    response_model=Envelope,
    response_model_exclude_none=True,
    summary="Delete user",
)
def delete_user(
    session: AdminSession,
    svc: UserServiceDep,
    user_id: Annotated[str | None, Query(alias="userId")] = None,
) -> Envelope:
    """Permanently delete another user's account."""
    svc.delete_user(session, user_id)
    return Envelope(success=True, message="User deleted successfully")
