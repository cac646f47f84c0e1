"""
verify.py
---------
Purpose:
    JWT verification using Supabase JWKS (ES256) plus the admin gate used by
    the booking calendar endpoints.

Notes:
    - Fetches JWKS from Supabase and caches keys.
    - `auth_dependency` for any signed-in user, `admin_dependency` for
      profiles flagged `is_admin`.
"""

import jwt
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jwt import PyJWKClient

from app.config import settings
from app.db.helpers import DatabaseError
from app.dependencies import get_profile_repository
from app.infrastructure.observability.logging import get_logger
from app.repositories.profile_repository import ProfileRepository

logger = get_logger(__name__)

SUPABASE_AUDIENCE = "authenticated"

_jwk_client = PyJWKClient(settings.jwks_url())
_security = HTTPBearer()


def verify_jwt(token: str) -> dict:
    try:
        signing_key = _jwk_client.get_signing_key_from_jwt(token)
        decoded = jwt.decode(
            token,
            signing_key.key,
            algorithms=["ES256"],
            audience=SUPABASE_AUDIENCE,
            options={"verify_exp": True},
        )
        return decoded
    except Exception as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=f"Invalid authentication token: {e}",
            headers={"WWW-Authenticate": "Bearer"},
        ) from e


def auth_dependency(credentials: HTTPAuthorizationCredentials = Depends(_security)) -> dict:
    token = credentials.credentials
    return verify_jwt(token)


async def admin_dependency(
    claims: dict = Depends(auth_dependency),
    profiles: ProfileRepository = Depends(get_profile_repository),
) -> dict:
    user_id = claims.get("sub")
    if not user_id:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid token")

    try:
        is_admin = await profiles.is_admin(user_id)
    except DatabaseError as e:
        logger.error("Failed to verify admin status", user_id=user_id, error=str(e))
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to verify admin status",
        ) from e

    if not is_admin:
        logger.warning("Non-admin attempted admin access", user_id=user_id)
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN, detail="Unauthorized: Admin access required"
        )

    return claims
