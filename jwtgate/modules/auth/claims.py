"""Claim set construction for issued and refreshed tokens."""

from datetime import UTC, datetime, timedelta
from typing import Any, Dict, Mapping, Optional

CLAIM_ID = "id"
CLAIM_EXP = "exp"
CLAIM_ORIG_IAT = "orig_iat"

RESERVED_CLAIMS = frozenset({CLAIM_ID, CLAIM_EXP, CLAIM_ORIG_IAT})


def _timestamp(moment: datetime) -> int:
    return int(moment.timestamp())


def build_new_claims(
    user_id: str,
    timeout: timedelta,
    include_orig_iat: bool,
    payload: Optional[Mapping[str, Any]] = None,
    now: Optional[datetime] = None,
) -> Dict[str, Any]:
    """
    Build the claim set for a freshly authenticated user.

    Payload fields are applied first and the reserved claims last, so a
    payload can never override id, exp or orig_iat.

    Args:
        user_id: Subject identifier
        timeout: Validity of the token from now
        include_orig_iat: Stamp orig_iat so the token can be refreshed later
        payload: Extra caller-supplied claims
        now: Issuance instant (defaults to current UTC time)

    Returns:
        New claims dictionary
    """
    now = now or datetime.now(UTC)

    claims: Dict[str, Any] = dict(payload or {})
    claims[CLAIM_ID] = user_id
    claims[CLAIM_EXP] = _timestamp(now + timeout)
    if include_orig_iat:
        claims[CLAIM_ORIG_IAT] = _timestamp(now)
    else:
        claims.pop(CLAIM_ORIG_IAT, None)

    return claims


def build_refreshed_claims(
    old_claims: Mapping[str, Any],
    timeout: timedelta,
    now: Optional[datetime] = None,
) -> Dict[str, Any]:
    """
    Copy a verified claim set with a new expiry.

    orig_iat is carried over verbatim, which caps the lifetime of a token
    chain at max_refresh + timeout however often it is refreshed.
    """
    now = now or datetime.now(UTC)

    claims = dict(old_claims)
    claims[CLAIM_EXP] = _timestamp(now + timeout)
    return claims
