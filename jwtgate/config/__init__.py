"""Configuration for jwtgate."""

from .provider import (
    APIConfig,
    ConfigProvider,
    ConfigurationError,
    EnvConfigProvider,
    JWTConfig,
    SigningAlgorithm,
)

__all__ = [
    "APIConfig",
    "ConfigProvider",
    "ConfigurationError",
    "EnvConfigProvider",
    "JWTConfig",
    "SigningAlgorithm",
]
