"""
Bearer Token Security

Issues and verifies the signed bearer tokens used to guard routes, and
checks admin rights against the user collection.

Flow for a guarded route:
    1. get_current_claims() reads "Authorization: Bearer <token>" and
       verifies the signature and expiry.
    2. require_admin() looks up the caller's user record by the email in
       the claims and requires role == "admin".

Claims travel through FastAPI dependencies as plain values; nothing is
stashed on the request.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Any, Optional

from fastapi import Depends, Header
from jose import JWTError, jwt

from bistro.core.config import get_settings
from bistro.core.exceptions import Forbidden, InvalidCredential, MissingCredential
from bistro.database import BistroDatabase, get_db

logger = logging.getLogger(__name__)

ADMIN_ROLE = "admin"


@dataclass
class Claims:
    """
    Decoded bearer token payload.

    Attributes:
        email: Caller identity used by the authorization checks
        payload: Every field of the decoded token, including exp/iat
    """
    email: Optional[str]
    payload: dict[str, Any] = field(default_factory=dict)


# =============================================================================
# TOKEN ISSUE / VERIFY
# =============================================================================

def issue_token(claims: dict[str, Any], expires_delta: Optional[timedelta] = None) -> str:
    """
    Sign a caller-supplied payload with the server secret.

    Args:
        claims: Arbitrary JSON payload (normally contains ``email``)
        expires_delta: Token lifetime, defaults to ACCESS_TOKEN_EXPIRE_MINUTES

    Returns:
        str: Encoded JWT
    """
    settings = get_settings()
    now = datetime.now(timezone.utc)
    if expires_delta is None:
        expires_delta = timedelta(minutes=settings.access_token_expire_minutes)

    to_encode = dict(claims)
    to_encode.update({"iat": now, "exp": now + expires_delta})
    return jwt.encode(to_encode, settings.access_token_secret, algorithm=settings.jwt_algorithm)


def verify_token(authorization: Optional[str]) -> Claims:
    """
    Validate an Authorization header value.

    Raises:
        MissingCredential: No header was sent
        InvalidCredential: Malformed header, bad signature or expired token
    """
    if not authorization:
        raise MissingCredential()

    parts = authorization.split()
    if len(parts) != 2 or parts[0].lower() != "bearer":
        raise InvalidCredential()

    settings = get_settings()
    try:
        payload = jwt.decode(
            parts[1],
            settings.access_token_secret,
            algorithms=[settings.jwt_algorithm],
        )
    except JWTError as e:
        logger.info(f"Rejected bearer token: {e}")
        raise InvalidCredential()

    return Claims(email=payload.get("email"), payload=payload)


# =============================================================================
# AUTHORIZATION
# =============================================================================

async def authorize(claims: Claims, db: BistroDatabase) -> dict:
    """
    Require the caller to be an admin.

    Returns:
        dict: The caller's user record

    Raises:
        Forbidden: Unknown email or role other than admin
    """
    user = None
    if claims.email:
        user = await db.users.find_one({"email": claims.email})

    if not user or user.get("role") != ADMIN_ROLE:
        logger.warning(f"Admin access denied for {claims.email!r}")
        raise Forbidden()

    return user


def self_or_deny(requested_email: str, claims: Claims) -> None:
    """Deny lookups of any identity other than the caller's own."""
    if requested_email != claims.email:
        logger.warning(
            f"Identity mismatch: {claims.email!r} requested {requested_email!r}"
        )
        raise Forbidden()


# =============================================================================
# FASTAPI DEPENDENCIES
# =============================================================================

async def get_current_claims(authorization: Optional[str] = Header(None)) -> Claims:
    return verify_token(authorization)


async def require_admin(
    claims: Claims = Depends(get_current_claims),
    db: BistroDatabase = Depends(get_db),
) -> Claims:
    await authorize(claims, db)
    return claims
