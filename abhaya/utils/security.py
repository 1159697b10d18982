"""
Caller identity for route handlers.

Tokens are issued by Firebase Authentication on the client; this module only
verifies them and hands an explicit AuthenticatedUser to the routes that need
one. Point FIREBASE_AUTH_EMULATOR_HOST at the Auth emulator for local work.
"""

import logging
from typing import Any, Dict, Optional

from fastapi import Depends, Header, HTTPException, status
from firebase_admin import auth

from abhaya.config.firebase import initialize_app_if_needed
from abhaya.core.settings import settings
from abhaya.models.user import AuthenticatedUser

logger = logging.getLogger(__name__)


class InvalidTokenError(Exception):
    """The caller's ID token was rejected by the identity provider."""


def verify_id_token(id_token: str) -> Dict[str, Any]:
    """
    Verify a Firebase ID token and return its decoded claims.

    Raises:
        InvalidTokenError: token is malformed, expired, revoked or otherwise invalid
        ValueError: the Firebase app is misconfigured (e.g. no project ID)
    """
    initialize_app_if_needed()
    try:
        return auth.verify_id_token(id_token)
    except (auth.InvalidIdTokenError, auth.ExpiredIdTokenError, auth.RevokedIdTokenError) as e:
        raise InvalidTokenError(f"Invalid ID token: {e}")


def user_from_claims(claims: Dict[str, Any]) -> AuthenticatedUser:
    email = claims.get("email")
    provider = (claims.get("firebase") or {}).get("sign_in_provider")
    return AuthenticatedUser(
        uid=claims.get("uid") or claims.get("sub") or "",
        email=email,
        is_anonymous=provider == "anonymous",
        is_authority=bool(email) and email.lower() in settings.authority_emails(),
    )


def _bearer_token(authorization: Optional[str]) -> Optional[str]:
    if not authorization:
        return None
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()


async def get_optional_user(authorization: Optional[str] = Header(None)) -> Optional[AuthenticatedUser]:
    """Identity if a valid bearer token was sent, otherwise None."""
    token = _bearer_token(authorization)
    if token is None:
        return None
    try:
        return user_from_claims(verify_id_token(token))
    except InvalidTokenError as e:
        logger.warning(f"Rejected ID token: {e}")
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid authentication token")
    except ValueError as e:
        logger.error(f"ID token verification is misconfigured: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Authentication service unavailable"
        )


async def get_current_user(user: Optional[AuthenticatedUser] = Depends(get_optional_user)) -> AuthenticatedUser:
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="You must be logged in",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return user


async def require_authority(user: AuthenticatedUser = Depends(get_current_user)) -> AuthenticatedUser:
    if not user.is_authority:
        logger.warning(f"Non-authority account {user.uid} attempted an authority action")
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Authority access required")
    return user
