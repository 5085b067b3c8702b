"""
admin_api/core/cognito.py

Cognito JWT verification using RS256 + JWKS.

Behaviour
---------
* COGNITO_USER_POOL_ID is set  →  full RS256 + claims verification via JWKS.
* COGNITO_USER_POOL_ID is empty →  dev/test mode: base64-decode without
  signature verification.  A warning is logged the first time this happens.

Only ID tokens (token_use=id) carry the email claim that the admin
directory compares against.  Access tokens verify fine but resolve to no
session further up (see admin_api.core.session).

PyJWKClient caches the JWKS in memory and re-fetches only when a kid is
not found in the local cache.
"""

from __future__ import annotations

import base64
import json
import logging
from typing import Any

import jwt
from jwt import PyJWKClient, PyJWTError

from admin_api.core.config import Settings, get_settings

logger = logging.getLogger(__name__)

# Module-level singleton — initialised lazily on first token verification.
_jwks_client: PyJWKClient | None = None
_dev_mode_warned = False


def _issuer(settings: Settings) -> str:
    return (
        f"https://cognito-idp.{settings.cognito_region}.amazonaws.com"
        f"/{settings.cognito_user_pool_id}"
    )


def _get_jwks_client() -> PyJWKClient:
    global _jwks_client
    if _jwks_client is None:
        _jwks_client = PyJWKClient(f"{_issuer(get_settings())}/.well-known/jwks.json")
    return _jwks_client


def verify_token(token: str) -> dict[str, Any]:
    """
    Verify a Cognito JWT and return its decoded claims.

    Raises jwt.PyJWTError (or a subclass) on any failure:
      - expired token
      - invalid signature
      - wrong issuer / audience / token_use
      - malformed token
    """
    global _dev_mode_warned
    settings = get_settings()

    if not settings.cognito_user_pool_id:
        if not _dev_mode_warned:
            logger.warning(
                "COGNITO_USER_POOL_ID is not set; session tokens are decoded "
                "WITHOUT signature verification. Never run this in production."
            )
            _dev_mode_warned = True
        return _dev_decode(token)

    return _verify_with_jwks(token, settings)


def _verify_with_jwks(token: str, settings: Settings) -> dict[str, Any]:
    signing_key = _get_jwks_client().get_signing_key_from_jwt(token)

    # Access tokens have no 'aud'; client binding is checked by hand below.
    claims: dict[str, Any] = jwt.decode(
        token,
        signing_key.key,
        algorithms=["RS256"],
        issuer=_issuer(settings),
        options={"verify_aud": False},
    )

    token_use = claims.get("token_use")
    if token_use not in ("access", "id"):
        raise PyJWTError(f"Unexpected token_use: {token_use!r}")

    if settings.cognito_client_id:
        audience = claims.get("client_id") if token_use == "access" else claims.get("aud")
        if audience != settings.cognito_client_id:
            raise PyJWTError(f"{token_use} token was not issued for this app client")

    return claims


def _dev_decode(token: str) -> dict[str, Any]:
    """Decode the JWT payload WITHOUT signature verification."""
    parts = token.split(".")
    if len(parts) != 3:
        raise PyJWTError("Malformed JWT: expected 3 dot-separated segments")
    padded = parts[1] + "=" * (-len(parts[1]) % 4)
    try:
        claims = json.loads(base64.urlsafe_b64decode(padded))
    except ValueError as exc:
        raise PyJWTError(f"Cannot decode token payload: {exc}") from exc
    if not isinstance(claims, dict):
        raise PyJWTError("Token payload is not a JSON object")
    return claims
