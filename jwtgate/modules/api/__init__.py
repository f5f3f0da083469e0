"""
API Module - Black Box Interface

Purpose: HTTP routing for token issuance
Interface: create_auth_router(), request/response models
Hidden: Body decoding, response shaping

The API module only orchestrates - it contains no token logic.
All logic is delegated to the auth module.
"""

from .models import IdentityResponse, LoginRequest, TokenResponse
from .routes import LOGIN_PATH, REFRESH_PATH, create_auth_router

__all__ = [
    "IdentityResponse",
    "LOGIN_PATH",
    "LoginRequest",
    "REFRESH_PATH",
    "TokenResponse",
    "create_auth_router",
]
