"""
Admin Credential Verification

Checks a login attempt against the single configured admin identity and
issues a token on success. The failure message never says which field was
wrong.
"""

import hashlib
import hmac
import logging
from typing import Optional

from src.auth.config import AuthConfig, get_auth_config
from src.auth.jwt import AuthError, issue_token
from src.auth.models import AdminIdentity, LoginResult

logger = logging.getLogger(__name__)


class InvalidCredentialsError(AuthError):
    """Identity or secret did not match the configured admin."""

    def __init__(self, message: str = "Invalid credentials"):
        super().__init__(message)


def get_admin_identity(config: Optional[AuthConfig] = None) -> Optional[AdminIdentity]:
    """Build the admin identity from configuration, or None if unset."""
    config = config or get_auth_config()
    if not config.admin_username or not config.admin_password:
        return None
    return AdminIdentity(
        identity=config.admin_username,
        secret_hash=config.admin_password_hash,
    )


def check_credentials(identity: str, secret: str, admin: AdminIdentity) -> bool:
    """Constant-time comparison of both identity and secret."""
    identity_ok = hmac.compare_digest(
        identity.encode("utf-8"),
        admin.identity.encode("utf-8"),
    )
    secret_hash = hashlib.sha256(secret.encode("utf-8")).hexdigest()
    secret_ok = hmac.compare_digest(secret_hash, admin.secret_hash)
    return identity_ok and secret_ok


def login(identity: str, secret: str, config: Optional[AuthConfig] = None) -> LoginResult:
    """
    Authenticate the admin and issue a 24-hour token.

    Raises:
        InvalidCredentialsError: On any mismatch, or if no admin is configured
    """
    config = config or get_auth_config()
    if not config.is_configured:
        logger.error("Admin credentials or JWT_SECRET not configured, login disabled")
        raise InvalidCredentialsError()

    admin = get_admin_identity(config)
    if not check_credentials(identity, secret, admin):
        logger.warning("Failed admin login attempt")
        raise InvalidCredentialsError()

    token = issue_token(admin.identity, config)
    logger.info(f"Admin {admin.identity} logged in")
    return LoginResult(token=token, username=admin.identity)
