"""
Token codec: signed compact JWTs for the HMAC algorithm family.

This module is a black box that:
- Signs claim sets with the configured algorithm and key
- Verifies tokens, insisting on the configured algorithm
- Translates PyJWT failures into the gate's error taxonomy
"""

import logging
from typing import Any, Dict, Mapping, Union

import jwt

from ...config.provider import SigningAlgorithm
from .errors import (
    AlgorithmMismatchError,
    InvalidSignatureError,
    MalformedTokenError,
    SigningError,
    TokenExpiredError,
)

logger = logging.getLogger(__name__)

# Only the signature and exp are interpreted; everything else in the claim set
# is caller payload and passes through untouched.
DECODE_OPTIONS = {
    "verify_signature": True,
    "verify_exp": True,
    "verify_nbf": False,
    "verify_iat": False,
    "verify_aud": False,
    "verify_iss": False,
    "verify_sub": False,
    "verify_jti": False,
    "require": [],
}


def encode_token(
    claims: Mapping[str, Any],
    algorithm: Union[SigningAlgorithm, str],
    key: bytes,
) -> str:
    """
    Sign a claim set into a compact token string.

    Args:
        claims: Claim set to sign
        algorithm: HMAC signing algorithm
        key: Shared secret

    Returns:
        Compact JWS string

    Raises:
        SigningError: If the key is unusable with the algorithm or the claims
            cannot be serialized
    """
    algorithm = SigningAlgorithm(algorithm).value
    try:
        return jwt.encode(dict(claims), key, algorithm=algorithm)
    except (jwt.PyJWTError, TypeError, ValueError) as e:
        raise SigningError(f"Unable to sign token with {algorithm}: {e}") from e


def decode_token(
    token: str,
    expected_algorithm: Union[SigningAlgorithm, str],
    key: bytes,
) -> Dict[str, Any]:
    """
    Verify a token and return its claims.

    The algorithm declared in the token header must equal the expected one
    exactly. This check runs before any key material is used.

    Args:
        token: Compact JWS string
        expected_algorithm: Algorithm the service is configured with
        key: Shared secret

    Returns:
        Verified claims dictionary

    Raises:
        MalformedTokenError: Token cannot be parsed
        AlgorithmMismatchError: Header declares a different algorithm
        InvalidSignatureError: Signature does not match
        TokenExpiredError: exp is not in the future
    """
    expected = SigningAlgorithm(expected_algorithm).value

    try:
        header = jwt.get_unverified_header(token)
    except jwt.PyJWTError as e:
        raise MalformedTokenError(f"Invalid token header: {e}") from e

    declared = header.get("alg")
    if declared != expected:
        logger.debug(f"Rejected token declaring alg={declared!r}, expected {expected}")
        raise AlgorithmMismatchError()

    try:
        claims = jwt.decode(token, key, algorithms=[expected], options=DECODE_OPTIONS)
    except jwt.ExpiredSignatureError as e:
        raise TokenExpiredError() from e
    except jwt.InvalidSignatureError as e:
        raise InvalidSignatureError() from e
    except jwt.InvalidAlgorithmError as e:
        raise AlgorithmMismatchError() from e
    except jwt.PyJWTError as e:
        raise MalformedTokenError(f"Invalid token: {e}") from e

    if not isinstance(claims, dict):
        raise MalformedTokenError("Token payload is not a JSON object")

    return claims


class TokenCodec:
    """Codec bound to one algorithm and key."""

    def __init__(self, algorithm: Union[SigningAlgorithm, str], key: bytes):
        self.algorithm = SigningAlgorithm(algorithm)
        self._key = key

    def encode(self, claims: Mapping[str, Any]) -> str:
        return encode_token(claims, self.algorithm, self._key)

    def decode(self, token: str) -> Dict[str, Any]:
        return decode_token(token, self.algorithm, self._key)
