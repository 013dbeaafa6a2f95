"""
Authentication Models

The admin identity, the claims carried in its tokens, and the login result.

There is no user table: the system has exactly one privileged principal,
configured through the environment (single-tenant trust model).
"""

import enum
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict


class UserRole(enum.Enum):
    """Role embedded in issued tokens."""
    ADMIN = "admin"


@dataclass(frozen=True)
class AdminIdentity:
    """
    The statically configured admin principal.

    Only a hash of the secret is kept in memory; login compares hashes in
    constant time.
    """
    identity: str
    secret_hash: str


@dataclass(frozen=True)
class AdminClaims:
    """Verified token claims attached to an authenticated request."""
    username: str
    role: UserRole
    issued_at: datetime
    expires_at: datetime

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN

    def to_dict(self) -> Dict[str, Any]:
        return {
            "username": self.username,
            "role": self.role.value,
            "iat": int(self.issued_at.timestamp()),
            "exp": int(self.expires_at.timestamp()),
        }

    def __repr__(self):
        return f"<AdminClaims {self.username} ({self.role.value})>"


@dataclass(frozen=True)
class LoginResult:
    """Successful login: a signed token plus the public user view."""
    token: str
    username: str
    role: UserRole = UserRole.ADMIN

    @property
    def user(self) -> Dict[str, str]:
        return {"username": self.username, "role": self.role.value}
