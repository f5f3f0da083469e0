"""
Authentication error taxonomy.

Every request-time failure is an AuthError with a stable code. The HTTP layer
collapses all of them into the same 401 challenge; the code only shows up in
logs so operators can tell which check failed.
"""

from typing import Optional


class SigningError(Exception):
    """Token could not be signed with the configured key and algorithm."""


class AuthError(Exception):
    """Base class for request-time authentication failures."""

    code = "AUTH_ERROR"
    client_error = True

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.__class__.__doc__.strip()
        super().__init__(self.message)


class MissingAuthError(AuthError):
    """Auth header empty"""

    code = "MISSING_AUTH"


class MalformedAuthError(AuthError):
    """Invalid auth header"""

    code = "MALFORMED_AUTH"


class InvalidTokenError(AuthError):
    """Invalid token"""

    code = "INVALID_TOKEN"


class AlgorithmMismatchError(InvalidTokenError):
    """Invalid signing algorithm"""

    code = "ALGORITHM_MISMATCH"


class InvalidSignatureError(InvalidTokenError):
    """Signature verification failed"""

    code = "INVALID_SIGNATURE"


class TokenExpiredError(InvalidTokenError):
    """Token is expired"""

    code = "EXPIRED"


class MalformedTokenError(InvalidTokenError):
    """Token is malformed"""

    code = "MALFORMED"


class PermissionDeniedError(AuthError):
    """Permission Denied"""

    code = "PERMISSION_DENIED"


class NotAuthenticatedError(AuthError):
    """Not Authenticated"""

    code = "NOT_AUTHENTICATED"


class BadRequestError(AuthError):
    """Error Reading Login Values"""

    code = "BAD_REQUEST"


class RefreshWindowExpiredError(AuthError):
    """Refresh window expired"""

    code = "REFRESH_WINDOW_EXPIRED"


class RefreshDisabledError(AuthError):
    """Token refresh is disabled"""

    code = "REFRESH_DISABLED"


class TokenCreationError(AuthError):
    """Error creating token"""

    code = "TOKEN_CREATION_FAILED"
    client_error = False
