"""
FastAPI Authentication Dependencies

Two gates for the HTTP surface:
- require_admin: rejects with 401 unless a valid admin token is presented
- optional_admin: tries the token if present, never rejects
"""

import logging
from typing import Optional

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials

from src.auth.jwt import verify_token, AuthError
from src.auth.models import AdminClaims

logger = logging.getLogger(__name__)

# HTTP Bearer token extraction
security = HTTPBearer(auto_error=False)


async def require_admin(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> AdminClaims:
    """
    Require a valid admin token.

    On success the claims are also stored on ``request.state.user``.

    Raises:
        HTTPException 401: If no token is presented or verification fails
    """
    if request.headers.get("Authorization") is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authorization header required",
            headers={"WWW-Authenticate": "Bearer"},
        )

    if not credentials or not credentials.credentials:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Token required",
            headers={"WWW-Authenticate": "Bearer"},
        )

    try:
        claims = verify_token(credentials.credentials)
    except AuthError as e:
        logger.warning(f"JWT validation failed: {e}")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=str(e),
            headers={"WWW-Authenticate": "Bearer"},
        )

    request.state.user = claims
    return claims


async def optional_admin(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> Optional[AdminClaims]:
    """
    Get the admin claims if a valid token is present, None otherwise.

    Public read endpoints use this: a garbage or expired token degrades to an
    anonymous request instead of an error.
    """
    if not credentials or not credentials.credentials:
        return None

    try:
        claims = verify_token(credentials.credentials)
    except AuthError:
        return None

    request.state.user = claims
    return claims
