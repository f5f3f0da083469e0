"""
Authentication gate: the per-request pass/reject decision.

Steps for each request:
1. Extract the bearer token from the Authorization header
2. Verify it with the token codec (algorithm, signature, expiry)
3. Read the subject id from the verified claims
4. Ask the authorizator whether the subject may proceed

Every step fails closed with an AuthError; there are no retries.
"""

import inspect
import logging
from typing import Any, Callable, Dict, Optional

from fastapi.concurrency import run_in_threadpool

from ...config.provider import JWTConfig
from .claims import CLAIM_ID
from .codec import TokenCodec
from .errors import (
    MalformedAuthError,
    MalformedTokenError,
    MissingAuthError,
    PermissionDeniedError,
)
from .interfaces import AuthContext, TokenCodecProtocol

logger = logging.getLogger(__name__)

BEARER_SCHEME = "Bearer"


async def run_callback(callback: Callable[..., Any], *args: Any) -> Any:
    """
    Invoke a user-supplied callback without blocking the event loop.

    Coroutine functions are awaited; plain functions run in the threadpool
    since they may hit a database or another blocking store.
    """
    if inspect.iscoroutinefunction(callback):
        return await callback(*args)
    result = await run_in_threadpool(callback, *args)
    if inspect.isawaitable(result):
        result = await result
    return result


def extract_bearer_token(authorization: Optional[str]) -> str:
    """
    Pull the token out of an Authorization header value.

    The header must be exactly "Bearer <token>" with a single space.

    Raises:
        MissingAuthError: Header absent or empty
        MalformedAuthError: Wrong scheme or wrong number of segments
    """
    if not authorization:
        raise MissingAuthError()

    parts = authorization.split(" ")
    if len(parts) != 2 or parts[0] != BEARER_SCHEME or not parts[1]:
        raise MalformedAuthError()

    return parts[1]


class AuthGate:
    """
    Verifies bearer tokens and applies the authorizator.

    Holds only the immutable configuration and codec, so a single instance is
    shared by all concurrent requests.
    """

    def __init__(self, config: JWTConfig, codec: Optional[TokenCodecProtocol] = None):
        """
        Initialize the gate with injected config.

        Args:
            config: Token configuration
            codec: Token codec (defaults to one bound to the config's algorithm and key)
        """
        self.config = config
        self.codec = codec or TokenCodec(config.signing_algorithm, config.key)

    def verify(self, authorization: Optional[str]) -> Dict[str, Any]:
        """
        Extract and verify the bearer token from a header value.

        Returns:
            Verified claims

        Raises:
            AuthError: Any extraction or verification failure
        """
        token = extract_bearer_token(authorization)
        return self.codec.decode(token)

    @staticmethod
    def subject(claims: Dict[str, Any]) -> str:
        """Return the subject id of a verified claim set."""
        identity = claims.get(CLAIM_ID)
        if not isinstance(identity, str):
            raise MalformedTokenError("Token has no string id claim")
        return identity

    async def authenticate(self, request: Any) -> AuthContext:
        """
        Run the full gate for a request.

        Args:
            request: Incoming request; must expose a ``headers`` mapping

        Returns:
            AuthContext for the verified subject

        Raises:
            AuthError: Rejected at any step
        """
        claims = self.verify(request.headers.get("Authorization"))
        identity = self.subject(claims)

        if not await run_callback(self.config.authorizator, identity, request):
            logger.warning(f"Authorization denied for user: {identity}")
            raise PermissionDeniedError()

        return AuthContext(identity=identity, claims=claims)
