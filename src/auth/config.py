"""
Authentication Configuration

Settings for the single admin identity and JWT signing.
"""

import hashlib
from functools import lru_cache
from pydantic_settings import BaseSettings


class AuthConfig(BaseSettings):
    """Authentication configuration loaded from environment."""

    # Admin identity (the only principal in the system)
    admin_username: str = ""
    admin_password: str = ""

    # JWT Settings
    jwt_secret: str = ""
    jwt_algorithm: str = "HS256"
    jwt_expires_hours: int = 24

    class Config:
        env_prefix = ""
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"

    @property
    def admin_password_hash(self) -> str:
        """SHA-256 of the configured admin password."""
        return hashlib.sha256(self.admin_password.encode("utf-8")).hexdigest()

    @property
    def is_configured(self) -> bool:
        """Check if auth is properly configured."""
        return bool(
            self.admin_username and
            self.admin_password and
            self.jwt_secret
        )


@lru_cache()
def get_auth_config() -> AuthConfig:
    """Get cached auth configuration."""
    return AuthConfig()
