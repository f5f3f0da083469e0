"""
Token Service Facade following Black Box Design principles.

This module provides:
- Login: credential check followed by token issuance
- Refresh: re-issuance of a still-valid token inside the refresh window
"""

import logging
from datetime import UTC, datetime
from typing import Any, Callable, Dict, Optional

from ...config.provider import JWTConfig
from .claims import CLAIM_ORIG_IAT, build_new_claims, build_refreshed_claims
from .errors import (
    MalformedTokenError,
    NotAuthenticatedError,
    RefreshDisabledError,
    RefreshWindowExpiredError,
    SigningError,
    TokenCreationError,
)
from .gate import AuthGate, run_callback

logger = logging.getLogger(__name__)


def utc_now() -> datetime:
    return datetime.now(UTC)


class TokenService:
    """
    Issues and refreshes tokens for the login and refresh endpoints.

    Stateless: everything needed to refresh a token lives in the token
    itself, so no session table is kept.
    """

    def __init__(
        self,
        config: JWTConfig,
        gate: Optional[AuthGate] = None,
        clock: Callable[[], datetime] = utc_now,
    ):
        """
        Initialize with injected dependencies.

        Args:
            config: Token configuration
            gate: Gate used to decode presented tokens (built from config if omitted)
            clock: Source of the current time
        """
        self.config = config
        self.gate = gate or AuthGate(config)
        self.codec = self.gate.codec
        self._clock = clock

    def _sign(self, claims: Dict[str, Any]) -> str:
        try:
            return self.codec.encode(claims)
        except SigningError as e:
            logger.error(f"Token creation failed: {e}")
            raise TokenCreationError() from e

    async def login(self, user_id: str, password: str) -> str:
        """
        Authenticate credentials and issue a new token.

        Args:
            user_id: User identifier (the login "email" field)
            password: Plain password handed to the authenticator

        Returns:
            Signed token string

        Raises:
            NotAuthenticatedError: Authenticator rejected the credentials
            TokenCreationError: Signing failed (server misconfiguration)
        """
        if not await run_callback(self.config.authenticator, user_id, password):
            raise NotAuthenticatedError()

        payload = None
        if self.config.payload_func is not None:
            payload = await run_callback(self.config.payload_func, user_id)

        claims = build_new_claims(
            user_id,
            self.config.timeout,
            include_orig_iat=self.config.refresh_enabled,
            payload=payload,
            now=self._clock(),
        )

        token = self._sign(claims)
        logger.info(f"Issued token for user: {user_id}")
        return token

    async def refresh(self, authorization: Optional[str]) -> str:
        """
        Exchange a valid token for a new one with a fresh expiry.

        Args:
            authorization: Authorization header carrying the current token

        Returns:
            Signed token string

        Raises:
            AuthError: Token invalid, refresh disabled, or window expired
            TokenCreationError: Signing failed
        """
        claims = self.gate.verify(authorization)

        if not self.config.refresh_enabled:
            raise RefreshDisabledError()

        orig_iat = claims.get(CLAIM_ORIG_IAT)
        if isinstance(orig_iat, bool) or not isinstance(orig_iat, (int, float)):
            raise MalformedTokenError("Token has no orig_iat claim")

        now = self._clock()
        window_start = int((now - self.config.max_refresh).timestamp())
        if orig_iat < window_start:
            raise RefreshWindowExpiredError()

        token = self._sign(build_refreshed_claims(claims, self.config.timeout, now=now))
        logger.info(f"Refreshed token for user: {claims.get('id')}")
        return token

