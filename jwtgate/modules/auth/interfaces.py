"""Authentication interfaces following Black Box Design principles."""
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Dict, Mapping, Protocol


class TokenCodecProtocol(Protocol):
    """Protocol for token codecs - allows swappable implementations."""

    def encode(self, claims: Mapping[str, Any]) -> str:
        """
        Sign a claim set.

        Args:
            claims: Claims to sign

        Returns:
            Compact token string
        """
        ...

    def decode(self, token: str) -> Dict[str, Any]:
        """
        Verify a token.

        Args:
            token: Compact token string

        Returns:
            Verified claims dictionary
        """
        ...


@dataclass(frozen=True)
class AuthContext:
    """Verified identity of the caller, handed to downstream handlers."""
    identity: str
    claims: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        object.__setattr__(self, "claims", MappingProxyType(dict(self.claims)))
