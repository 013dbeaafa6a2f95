"""
Authentication API: /api/auth

- POST /login    exchange admin username/password for a 24-hour token
- POST /verify   check a token (requires it)
- POST /logout   stateless; the client discards its token
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from src.auth.credentials import login
from src.auth.dependencies import require_admin
from src.auth.models import AdminClaims
from src.services.errors import ValidationError

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/auth", tags=["Auth"])


class LoginRequest(BaseModel):
    """Login body. ``identity``/``secret`` are accepted as aliases."""
    username: Optional[str] = None
    password: Optional[str] = None
    identity: Optional[str] = None
    secret: Optional[str] = None


@router.post("/login")
async def login_admin(body: LoginRequest):
    username = body.username or body.identity
    password = body.password or body.secret
    if not username or not password:
        raise ValidationError("Username and password are required")

    result = login(username, password)
    return {
        "message": "Login successful",
        "token": result.token,
        "user": result.user,
    }


@router.post("/verify")
async def verify(claims: AdminClaims = Depends(require_admin)):
    return {"valid": True, "user": claims.to_dict()}


@router.post("/logout")
async def logout():
    return {"message": "Logged out successfully"}
