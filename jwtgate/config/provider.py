"""Configuration provider following Black Box Design principles."""
import os
from dataclasses import dataclass
from datetime import timedelta
from enum import Enum
from typing import Any, Awaitable, Callable, Dict, Mapping, Optional, Protocol, Union


# Callbacks may be plain functions or coroutine functions.
Authenticator = Callable[[str, str], Union[bool, Awaitable[bool]]]
Authorizator = Callable[[str, Any], Union[bool, Awaitable[bool]]]
PayloadFunc = Callable[[str], Union[Mapping[str, Any], Awaitable[Mapping[str, Any]]]]

DEFAULT_TIMEOUT = timedelta(hours=1)


class ConfigurationError(ValueError):
    """Invalid startup configuration. Fatal, never raised per request."""


class SigningAlgorithm(str, Enum):
    """Supported HMAC signing algorithms."""

    HS256 = "HS256"
    HS384 = "HS384"
    HS512 = "HS512"


def allow_all(user_id: str, request: Any) -> bool:
    """Default authorizator: every authenticated user is authorized."""
    return True


@dataclass(frozen=True)
class JWTConfig:
    """
    Token issuance and verification settings.

    Built once at startup and shared read-only by every request. Invalid
    values raise ConfigurationError from the constructor so a misconfigured
    service never starts.
    """
    realm: str
    key: bytes
    authenticator: Authenticator
    signing_algorithm: SigningAlgorithm = SigningAlgorithm.HS256
    timeout: timedelta = DEFAULT_TIMEOUT
    max_refresh: timedelta = timedelta(0)
    authorizator: Authorizator = allow_all
    payload_func: Optional[PayloadFunc] = None

    def __post_init__(self):
        if not self.realm:
            raise ConfigurationError("Realm is required")

        key = self.key
        if isinstance(key, str):
            key = key.encode("utf-8")
        elif not isinstance(key, (bytes, bytearray)):
            raise ConfigurationError("Key must be bytes or str")
        if not key:
            raise ConfigurationError("Key required")
        object.__setattr__(self, "key", bytes(key))

        if self.authenticator is None:
            raise ConfigurationError("Authenticator is required")

        algorithm = self.signing_algorithm or SigningAlgorithm.HS256
        try:
            algorithm = SigningAlgorithm(algorithm)
        except ValueError:
            supported = ", ".join(a.value for a in SigningAlgorithm)
            raise ConfigurationError(
                f"Unsupported signing algorithm {algorithm!r}; expected one of {supported}"
            )
        object.__setattr__(self, "signing_algorithm", algorithm)

        if self.timeout is not None and not isinstance(self.timeout, timedelta):
            raise ConfigurationError("Timeout must be a timedelta")
        # Zero means "use the default", as with an unset timeout
        if not self.timeout:
            object.__setattr__(self, "timeout", DEFAULT_TIMEOUT)
        if self.timeout < timedelta(0):
            raise ConfigurationError("Timeout must be positive")

        if self.max_refresh is None:
            object.__setattr__(self, "max_refresh", timedelta(0))
        elif not isinstance(self.max_refresh, timedelta):
            raise ConfigurationError("MaxRefresh must be a timedelta")
        if self.max_refresh < timedelta(0):
            raise ConfigurationError("MaxRefresh must not be negative")

        if self.authorizator is None:
            object.__setattr__(self, "authorizator", allow_all)

    @property
    def refresh_enabled(self) -> bool:
        """Whether tokens carry orig_iat and may be refreshed."""
        return self.max_refresh > timedelta(0)


@dataclass
class APIConfig:
    """API configuration."""
    host: str
    port: int
    log_level: str


class ConfigProvider(Protocol):
    """Protocol for configuration providers."""

    def get_jwt_config(
        self,
        authenticator: Authenticator,
        authorizator: Optional[Authorizator] = None,
        payload_func: Optional[PayloadFunc] = None,
    ) -> JWTConfig:
        """Get token configuration."""
        ...

    def get_api_config(self) -> APIConfig:
        """Get API configuration."""
        ...

    def get_user_credentials(self) -> Dict[str, str]:
        """Get the user table for the bundled authenticator."""
        ...


class EnvConfigProvider:
    """Environment-based configuration provider."""

    def __init__(self, environ: Optional[Mapping[str, str]] = None):
        self._environ = os.environ if environ is None else environ

    def _get(self, name: str, default: Optional[str] = None) -> Optional[str]:
        return self._environ.get(name, default)

    def _get_seconds(self, name: str, default: int) -> timedelta:
        raw = self._get(name)
        if raw is None or raw.strip() == "":
            return timedelta(seconds=default)
        try:
            return timedelta(seconds=int(raw))
        except ValueError:
            raise ConfigurationError(f"{name} must be an integer number of seconds, got {raw!r}")

    def get_jwt_config(
        self,
        authenticator: Authenticator,
        authorizator: Optional[Authorizator] = None,
        payload_func: Optional[PayloadFunc] = None,
    ) -> JWTConfig:
        """
        Build the token configuration from environment variables.

        Args:
            authenticator: Credential check callback
            authorizator: Optional per-request authorization callback
            payload_func: Optional callback adding claims at login

        Returns:
            Validated JWTConfig

        Raises:
            ConfigurationError: If JWT_REALM or JWT_SECRET_KEY is missing or
                any value is invalid
        """
        return JWTConfig(
            realm=self._get("JWT_REALM", ""),
            key=self._get("JWT_SECRET_KEY", ""),
            authenticator=authenticator,
            signing_algorithm=self._get("JWT_SIGNING_ALGORITHM") or SigningAlgorithm.HS256,
            timeout=self._get_seconds("JWT_TIMEOUT_SECONDS", 3600),
            max_refresh=self._get_seconds("JWT_MAX_REFRESH_SECONDS", 0),
            authorizator=authorizator,
            payload_func=payload_func,
        )

    def get_api_config(self) -> APIConfig:
        """Get API configuration from environment variables."""
        return APIConfig(
            host=self._get("API_HOST", "0.0.0.0"),
            port=int(self._get("API_PORT", "8080")),
            log_level=self._get("LOG_LEVEL", "INFO").upper(),
        )

    def get_user_credentials(self) -> Dict[str, str]:
        """
        Load the user:password table used by the bundled authenticator.

        Format: JWT_USERS="alice:secret1,bob:secret2"

        Raises:
            ValueError: If JWT_USERS is not configured
        """
        users_env = self._get("JWT_USERS")
        if not users_env:
            raise ValueError(
                "JWT_USERS environment variable is required. "
                "Format: user:password,user:password"
            )

        users = {}
        for entry in users_env.split(","):
            entry = entry.strip()
            if not entry:
                continue
            if ":" not in entry:
                raise ValueError(f"Invalid JWT_USERS entry {entry!r}: expected user:password")
            user, password = entry.split(":", 1)
            users[user.strip()] = password

        return users
