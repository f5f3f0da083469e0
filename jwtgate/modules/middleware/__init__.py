"""
Authentication Middleware Module - Black Box Interface

Purpose: Guard a FastAPI application with the bearer-token gate
Interface: JWTAuthMiddleware, unauthorized_response(), request accessors
Hidden: Header extraction, token verification, challenge formatting

Can be used by any FastAPI app or sub-app that needs authentication.
"""

import logging
from types import MappingProxyType
from typing import Any, Dict, List, Mapping, Optional

from fastapi import Request
from fastapi.responses import PlainTextResponse, Response

from ...logging_config import AUDIT_LOGGER_NAME
from ..auth.errors import AuthError, MissingAuthError
from ..auth.gate import AuthGate
from ..auth.interfaces import AuthContext

logger = logging.getLogger(__name__)
audit_logger = logging.getLogger(AUDIT_LOGGER_NAME)

AUTH_CONTEXT_KEY = "auth_context"
UNAUTHORIZED_MESSAGE = "Unauthorized"

_EMPTY_CLAIMS: Mapping[str, Any] = MappingProxyType({})


def challenge_headers(realm: str) -> Dict[str, str]:
    """WWW-Authenticate challenge for the configured realm."""
    return {"WWW-Authenticate": f"JWT realm={realm}"}


def unauthorized_response(realm: str) -> Response:
    """
    Build the 401 returned for every rejected request.

    The body is the same whatever check failed, so callers cannot probe
    which step rejected them.
    """
    return PlainTextResponse(
        UNAUTHORIZED_MESSAGE,
        status_code=401,
        headers=challenge_headers(realm),
    )


def log_rejection(request: Request, error: AuthError) -> None:
    """Record why a request was rejected, at a level matching who caused it."""
    if error.client_error:
        audit_logger.warning(
            f"Rejected {request.method} {request.url.path}: {error.code} ({error.message})"
        )
    else:
        audit_logger.error(
            f"Server-side failure on {request.method} {request.url.path}: "
            f"{error.code} ({error.message})"
        )


class JWTAuthMiddleware:
    """
    Bearer token middleware for FastAPI applications.

    Register with::

        app.middleware("http")(JWTAuthMiddleware(gate, skip_paths={...}))
    """

    def __init__(
        self,
        gate: AuthGate,
        skip_paths: Optional[Dict[str, List[str]]] = None,
        log_attempts: bool = True,
    ):
        """
        Initialize authentication middleware.

        Args:
            gate: Gate that makes the pass/reject decision
            skip_paths: Dict of {path: [methods]} to skip authentication
            log_attempts: Whether to log authentication attempts
        """
        self.gate = gate
        self.realm = gate.config.realm
        self.skip_paths = skip_paths or {}
        self.log_attempts = log_attempts

    def should_skip_auth(self, request: Request) -> bool:
        """Check if authentication should be skipped for this request."""
        path = str(request.url.path)
        method = request.method.upper()

        if path in self.skip_paths:
            allowed_methods = self.skip_paths[path]
            if "*" in allowed_methods or method in allowed_methods:
                return True

        return False

    async def __call__(self, request: Request, call_next):
        """Process the request through the authentication gate."""
        if self.should_skip_auth(request):
            if self.log_attempts:
                logger.debug(f"Skipping auth for {request.method} {request.url.path}")
            return await call_next(request)

        try:
            context = await self.gate.authenticate(request)
        except AuthError as e:
            if self.log_attempts:
                log_rejection(request, e)
            return unauthorized_response(self.realm)
        except Exception as e:
            logger.error(f"Error during authentication: {e}")
            return PlainTextResponse("Internal error during authentication", status_code=500)

        if self.log_attempts:
            logger.debug(f"Request authenticated for user: {context.identity}")

        setattr(request.state, AUTH_CONTEXT_KEY, context)
        return await call_next(request)


def get_auth_context(request: Request) -> AuthContext:
    """
    FastAPI dependency returning the caller's verified identity.

    Raises:
        MissingAuthError: The route is not behind JWTAuthMiddleware
    """
    context = getattr(request.state, AUTH_CONTEXT_KEY, None)
    if context is None:
        raise MissingAuthError("No authentication context on request")
    return context


def get_remote_user(request: Request) -> Optional[str]:
    """Subject id of the authenticated caller, if any."""
    context = getattr(request.state, AUTH_CONTEXT_KEY, None)
    return context.identity if context else None


def extract_claims(request: Request) -> Mapping[str, Any]:
    """Verified claims of the caller; an empty mapping when there are none."""
    context = getattr(request.state, AUTH_CONTEXT_KEY, None)
    if context is None:
        return _EMPTY_CLAIMS
    return context.claims


__all__ = [
    "AUTH_CONTEXT_KEY",
    "JWTAuthMiddleware",
    "challenge_headers",
    "extract_claims",
    "get_auth_context",
    "get_remote_user",
    "log_rejection",
    "unauthorized_response",
]
