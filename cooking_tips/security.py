"""
Cooking Tips Backend — Identity Provider
==========================================

What:  Resolves the caller of a request to a stable user id.
Why:   Mutating endpoints need to know who is acting. The id is resolved
       once here and then passed explicitly to the Tip Service.
How:   `Authorization: Bearer <JWT>` verified with PyJWT against
       JWT_SECRET_KEY; the `sub` claim is the user id.

Failure modes (all → AuthenticationError → 401):
    - no Authorization header / not a bearer token
    - bad signature, malformed token
    - expired token (`exp` in the past)
    - token without a `sub` claim
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Optional

import jwt
from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from cooking_tips.config import settings
from cooking_tips.exceptions import AuthenticationError

logger = logging.getLogger(__name__)

# auto_error=False: missing credentials go through our own 401 handler
bearer_scheme = HTTPBearer(auto_error=False)


def create_access_token(subject: str, expires_minutes: Optional[int] = None) -> str:
    """
    Issue a signed access token for `subject`.

    Used by local tooling and tests; production tokens come from the
    authentication service, signed with the same key.
    """
    lifetime = expires_minutes if expires_minutes is not None else settings.access_token_expire_minutes
    now = datetime.now(timezone.utc)
    payload = {
        "sub": subject,
        "iat": now,
        "exp": now + timedelta(minutes=lifetime),
    }
    return jwt.encode(payload, settings.jwt_secret_key, algorithm=settings.jwt_algorithm)


def decode_caller_id(token: str) -> str:
    """Verify `token` and return its subject."""
    try:
        payload = jwt.decode(
            token,
            settings.jwt_secret_key,
            algorithms=[settings.jwt_algorithm],
        )
    except jwt.ExpiredSignatureError:
        raise AuthenticationError(message="Token has expired")
    except jwt.InvalidTokenError as e:
        logger.info("Rejected bearer token: %s", str(e))
        raise AuthenticationError(message="Could not validate credentials")

    subject = payload.get("sub")
    if not subject:
        raise AuthenticationError(message="Token has no subject")
    return str(subject)


async def get_caller_id(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> str:
    """
    FastAPI dependency: the authenticated caller's user id.

    Example usage in a route:
        @router.post("/api/tips")
        async def create_tip(body: TipCreate, caller_id: str = Depends(get_caller_id)):
            ...
    """
    if credentials is None:
        raise AuthenticationError()
    return decode_caller_id(credentials.credentials)
