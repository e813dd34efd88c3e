"""
Wildwood Zoo Backend — Password Hashing & Bearer-Token Gate
=============================================================

What:  Password hashing (werkzeug), JWT issue/verify (PyJWT), and the FastAPI
       dependencies that turn an `Authorization: Bearer <token>` header into a
       `Principal`.
Who:   AuthService issues tokens; `get_current_principal` guards every
       protected route (usually through policy.Authorize).

Gate contract:
    no bearer token            → 401 "Access denied"
    bad signature / expired    → 403 "Invalid token"
    otherwise                  → Principal attached to the request

Token claims:
    id, username, role ('visitor' | 'staff'), staffRole, staffType, exp, iat
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

import jwt
from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from werkzeug.security import check_password_hash, generate_password_hash

from wildwood.config import settings
from wildwood.exceptions import AuthenticationError, PermissionDeniedError

logger = logging.getLogger(__name__)

VISITOR = "visitor"
STAFF = "staff"

# auto_error=False: a missing header must surface as our 401, not FastAPI's
bearer_scheme = HTTPBearer(auto_error=False)


@dataclass(frozen=True)
class Principal:
    """Decoded identity of the caller."""
    id: int
    username: str
    role: str
    staff_role: Optional[str] = None
    staff_type: Optional[str] = None

    @property
    def is_staff(self) -> bool:
        return self.role == STAFF

    @property
    def is_visitor(self) -> bool:
        return self.role == VISITOR

    @property
    def is_manager(self) -> bool:
        return self.is_staff and self.staff_role == "Manager"


# ── Passwords ─────────────────────────────────────────────────────────────
def hash_password(password: str) -> str:
    return generate_password_hash(password)


def verify_password(password_hash: str, password: str) -> bool:
    return check_password_hash(password_hash, password)


# ── Tokens ────────────────────────────────────────────────────────────────
def create_access_token(principal: Principal, now: Optional[datetime] = None) -> str:
    """Sign a token for `principal` that expires after the configured lifetime."""
    now = now or datetime.now(timezone.utc)
    payload: Dict[str, Any] = {
        "id": principal.id,
        "username": principal.username,
        "role": principal.role,
        "iat": now,
        "exp": now + timedelta(minutes=settings.jwt_expires_minutes),
    }
    if principal.staff_role is not None:
        payload["staffRole"] = principal.staff_role
    if principal.staff_type is not None:
        payload["staffType"] = principal.staff_type
    return jwt.encode(payload, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def decode_access_token(token: str) -> Principal:
    """
    Verify signature and expiry, then build a Principal.

    Raises:
        PermissionDeniedError("Invalid token"): for any verification failure,
        including a well-signed token that is missing required claims.
    """
    try:
        payload = jwt.decode(token, settings.jwt_secret, algorithms=[settings.jwt_algorithm])
        return Principal(
            id=int(payload["id"]),
            username=str(payload.get("username", "")),
            role=str(payload["role"]),
            staff_role=payload.get("staffRole"),
            staff_type=payload.get("staffType"),
        )
    except jwt.PyJWTError as e:
        logger.info("Rejected bearer token: %s", e)
        raise PermissionDeniedError(message="Invalid token")
    except (KeyError, TypeError, ValueError):
        logger.info("Rejected bearer token: malformed claims")
        raise PermissionDeniedError(message="Invalid token")


# ── FastAPI Dependencies ──────────────────────────────────────────────────
async def get_optional_principal(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> Optional[Principal]:
    """Principal if a bearer token was sent, None otherwise. Bad tokens still 403."""
    if credentials is None or not credentials.credentials:
        return None
    principal = decode_access_token(credentials.credentials)
    request.state.principal = principal
    return principal


async def get_current_principal(
    principal: Optional[Principal] = Depends(get_optional_principal),
) -> Principal:
    """Principal of an authenticated caller; 401 when no token was presented."""
    if principal is None:
        raise AuthenticationError(message="Access denied")
    return principal
