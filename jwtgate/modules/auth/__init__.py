"""
Authentication Module - Black Box Interface

Purpose: Issue, verify and refresh signed bearer tokens
Interface: AuthGate.authenticate(), TokenService.login(), TokenService.refresh()
Hidden: Token format, signing library, claim layout

This module can be replaced with any other token implementation without
affecting the HTTP layer, as long as it raises the same AuthError family.
"""

from .codec import TokenCodec, decode_token, encode_token
from .errors import AuthError, TokenCreationError
from .gate import AuthGate, extract_bearer_token
from .interfaces import AuthContext
from .service import TokenService

__all__ = [
    "AuthContext",
    "AuthError",
    "AuthGate",
    "TokenCodec",
    "TokenCreationError",
    "TokenService",
    "decode_token",
    "encode_token",
    "extract_bearer_token",
]
