"""
JWT Token Issuing and Validation

Signs and verifies the bearer tokens handed to the admin after login.
Tokens are symmetric (HS256 by default) and signed with JWT_SECRET.
"""

import logging
from typing import Optional, Dict, Any
from datetime import datetime, timedelta, timezone

import jwt
from jwt import PyJWTError

from src.auth.config import AuthConfig, get_auth_config
from src.auth.models import AdminClaims, UserRole

logger = logging.getLogger(__name__)


class AuthError(Exception):
    """Base class for every authentication failure (rendered as 401)."""
    pass


class MalformedTokenError(AuthError):
    """Token cannot be decoded or its signature does not verify."""
    pass


class ExpiredTokenError(AuthError):
    """Token is past its validity window."""
    pass


class IdentityMismatchError(AuthError):
    """Token is valid but was issued for a different identity."""
    pass


def issue_token(
    username: str,
    config: Optional[AuthConfig] = None,
    now: Optional[datetime] = None,
) -> str:
    """
    Sign a token for the admin identity.

    Claims: username, role ("admin"), iat, exp (iat + jwt_expires_hours).
    """
    config = config or get_auth_config()
    if not config.jwt_secret:
        logger.error("JWT_SECRET not configured, refusing to issue token")
        raise AuthError("Authentication is not configured")

    issued_at = now or datetime.now(timezone.utc)
    payload = {
        "username": username,
        "role": UserRole.ADMIN.value,
        "iat": int(issued_at.timestamp()),
        "exp": int((issued_at + timedelta(hours=config.jwt_expires_hours)).timestamp()),
    }
    return jwt.encode(payload, config.jwt_secret, algorithm=config.jwt_algorithm)


def verify_token(token: str, config: Optional[AuthConfig] = None) -> AdminClaims:
    """
    Verify and decode an admin token.

    Args:
        token: The JWT from the Authorization header

    Returns:
        AdminClaims for the configured admin identity

    Raises:
        MalformedTokenError: Bad signature, bad encoding, missing claims
        ExpiredTokenError: Past its exp claim
        IdentityMismatchError: Issued for someone other than the admin
    """
    config = config or get_auth_config()

    if not config.jwt_secret:
        logger.error("JWT_SECRET not configured, rejecting token")
        raise MalformedTokenError("Authentication is not configured")

    try:
        payload = jwt.decode(
            token,
            config.jwt_secret,
            algorithms=[config.jwt_algorithm],
            options={"require": ["exp", "iat"]},
        )
    except jwt.ExpiredSignatureError:
        raise ExpiredTokenError("Token expired")
    except jwt.InvalidSignatureError:
        raise MalformedTokenError("Invalid token")
    except jwt.DecodeError:
        raise MalformedTokenError("Invalid token")
    except PyJWTError as e:
        raise MalformedTokenError(f"Invalid token: {str(e)}")

    username = payload.get("username")
    if not username:
        raise MalformedTokenError("Token missing 'username' claim")

    if username != config.admin_username:
        raise IdentityMismatchError("Invalid credentials")

    return _claims_from_payload(payload)


def _claims_from_payload(payload: Dict[str, Any]) -> AdminClaims:
    try:
        role = UserRole(payload.get("role", UserRole.ADMIN.value))
    except ValueError:
        raise MalformedTokenError("Token carries an unknown role")

    return AdminClaims(
        username=payload["username"],
        role=role,
        issued_at=datetime.fromtimestamp(payload["iat"], tz=timezone.utc),
        expires_at=datetime.fromtimestamp(payload["exp"], tz=timezone.utc),
    )
