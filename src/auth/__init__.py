"""
Authentication Module

Single-admin JWT authentication:
- One admin identity configured through ADMIN_USERNAME / ADMIN_PASSWORD
- Tokens signed with JWT_SECRET, valid for 24 hours
- No user table; the system is single-tenant by design

Usage:
    # Mutations require the admin
    @router.post("/certificates")
    async def create(claims: AdminClaims = Depends(require_admin)):
        ...

    # Public reads accept (but never require) a token
    @router.get("/certificates")
    async def list_all(claims: Optional[AdminClaims] = Depends(optional_admin)):
        ...
"""

from .config import AuthConfig, get_auth_config
from .jwt import (
    issue_token,
    verify_token,
    AuthError,
    MalformedTokenError,
    ExpiredTokenError,
    IdentityMismatchError,
)
from .credentials import login, InvalidCredentialsError, get_admin_identity
from .models import AdminClaims, AdminIdentity, LoginResult, UserRole
from .dependencies import require_admin, optional_admin

__all__ = [
    # Config
    "AuthConfig",
    "get_auth_config",
    # Tokens
    "issue_token",
    "verify_token",
    "AuthError",
    "MalformedTokenError",
    "ExpiredTokenError",
    "IdentityMismatchError",
    # Login
    "login",
    "InvalidCredentialsError",
    "get_admin_identity",
    # Models
    "AdminClaims",
    "AdminIdentity",
    "LoginResult",
    "UserRole",
    # FastAPI dependencies
    "require_admin",
    "optional_admin",
]
