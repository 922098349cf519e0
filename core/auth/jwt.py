"""JWT bearer authentication for the HTTP API.

Tokens are HS256-signed with the ``MY_AUTH_TOKEN`` secret and carry the
caller id (``id``) plus an optional ``role``. The role becomes the usage
ledger's subject type, so admin tools and end users are billed separately.
Tokens without a role claim are treated as ``user``.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from functools import lru_cache
from typing import Annotated, Any, Dict, TypedDict

from fastapi import Header
from jose import ExpiredSignatureError, JWTError, jwt
from starlette import status

from core.utils.env import get_env

_ALGORITHM = "HS256"
_ALLOWED_ROLES = {"admin", "user"}
DEFAULT_ROLE = "admin"
UNSPECIFIED_ROLE = "user"


class AuthContext(TypedDict, total=False):
    """Context extracted from a validated authentication token."""

    subject_id: str
    subject_type: str
    email: str | None
    token: str
    payload: Dict[str, Any]


@dataclass(slots=True)
class AuthenticationError(Exception):
    """Raised when a request carries no usable bearer token."""

    message: str
    reason: str
    code: int = status.HTTP_401_UNAUTHORIZED

    def __str__(self) -> str:  # pragma: no cover - dataclass repr fallback
        return self.message


@lru_cache(maxsize=1)
def _get_secret() -> str:
    secret = get_env("MY_AUTH_TOKEN")
    if not secret:
        raise AuthenticationError("Authentication secret is not configured", reason="configuration")
    return secret


def create_auth_token(
    subject_id: str | int,
    *,
    role: str = DEFAULT_ROLE,
    email: str | None = None,
    expires_delta: timedelta = timedelta(days=30),
) -> str:
    """Issue a signed token for ``subject_id`` with the given ``role``."""

    if role not in _ALLOWED_ROLES:
        raise ValueError(f"Unsupported role: {role}")
    payload: Dict[str, Any] = {
        "id": str(subject_id),
        "role": role,
        "email": email,
        "exp": datetime.now(timezone.utc) + expires_delta,
    }
    return jwt.encode(payload, _get_secret(), algorithm=_ALGORITHM)


def _extract_bearer_token(authorization: str | None) -> str | None:
    if not authorization:
        return None
    scheme, _, credentials = authorization.strip().partition(" ")
    if scheme.lower() != "bearer":
        return None
    return credentials.strip() or None


def authenticate_bearer_token(authorization: str | None) -> AuthContext:
    """Validate an ``Authorization: Bearer`` header and return the caller context."""

    token = _extract_bearer_token(authorization)
    if not token:
        raise AuthenticationError("Missing authentication token", reason="token_missing")

    try:
        payload: Dict[str, Any] = jwt.decode(token, _get_secret(), algorithms=[_ALGORITHM])
    except ExpiredSignatureError as exc:
        raise AuthenticationError("Authentication token has expired", reason="token_expired") from exc
    except JWTError as exc:
        raise AuthenticationError("Invalid authentication token", reason="token_invalid") from exc

    subject_id = payload.get("id")
    if subject_id in (None, ""):
        raise AuthenticationError("Authentication token missing subject id", reason="token_invalid")

    role = payload.get("role") or UNSPECIFIED_ROLE
    if role not in _ALLOWED_ROLES:
        raise AuthenticationError(f"Unsupported role in token: {role}", reason="token_invalid")

    return {
        "subject_id": str(subject_id),
        "subject_type": role,
        "email": payload.get("email"),
        "token": token,
        "payload": payload,
    }


def require_auth_context(
    authorization: Annotated[str | None, Header(alias="Authorization")] = None,
) -> AuthContext:
    """FastAPI dependency returning the authentication context."""

    return authenticate_bearer_token(authorization)


__all__ = [
    "AuthContext",
    "AuthenticationError",
    "DEFAULT_ROLE",
    "UNSPECIFIED_ROLE",
    "authenticate_bearer_token",
    "create_auth_token",
    "require_auth_context",
]
