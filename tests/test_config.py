"""
Unit tests for configuration validation and the environment provider.
"""

import dataclasses
from datetime import timedelta

import pytest

from jwtgate.config.provider import (
    ConfigurationError,
    EnvConfigProvider,
    JWTConfig,
    SigningAlgorithm,
    allow_all,
)


def deny(user_id, password):
    return False


def test_defaults(make_config):
    """Test optional settings fall back to their defaults."""
    config = make_config()

    assert config.signing_algorithm is SigningAlgorithm.HS256
    assert config.timeout == timedelta(hours=1)
    assert config.max_refresh == timedelta(0)
    assert config.refresh_enabled is False
    assert config.authorizator is allow_all
    assert config.payload_func is None
    assert config.authorizator("anyone", object()) is True


def test_string_key_is_encoded():
    """Test a str key is stored as UTF-8 bytes."""
    config = JWTConfig(realm="api", key="secret", authenticator=deny)

    assert config.key == b"secret"


@pytest.mark.parametrize("algorithm", ["HS256", "HS384", "HS512"])
def test_string_algorithm_is_accepted(algorithm):
    """Test algorithms may be given by name."""
    config = JWTConfig(realm="api", key="secret", authenticator=deny, signing_algorithm=algorithm)

    assert config.signing_algorithm is SigningAlgorithm(algorithm)


@pytest.mark.parametrize("algorithm", ["none", "RS256", "hs256", "ES256"])
def test_unsupported_algorithm_is_rejected(algorithm):
    """Test only the HMAC family is accepted."""
    with pytest.raises(ConfigurationError):
        JWTConfig(realm="api", key="secret", authenticator=deny, signing_algorithm=algorithm)


def test_empty_algorithm_defaults_to_hs256():
    """Test an unset algorithm means HS256."""
    config = JWTConfig(realm="api", key="secret", authenticator=deny, signing_algorithm="")

    assert config.signing_algorithm is SigningAlgorithm.HS256


@pytest.mark.parametrize(
    "overrides",
    [
        {"realm": ""},
        {"key": b""},
        {"key": ""},
        {"authenticator": None},
        {"timeout": timedelta(seconds=-1)},
        {"max_refresh": timedelta(seconds=-1)},
        {"key": 32},
        {"key": ["secret"]},
        {"timeout": 3600},
        {"max_refresh": 300},
    ],
)
def test_invalid_configuration_is_fatal(make_config, overrides):
    """Test misconfiguration is detected at construction time."""
    with pytest.raises(ConfigurationError):
        make_config(**overrides)


def test_configuration_error_is_value_error():
    """Test ConfigurationError can be handled as a ValueError."""
    assert issubclass(ConfigurationError, ValueError)


def test_zero_timeout_uses_default(make_config):
    """Test a zero timeout falls back to one hour."""
    assert make_config(timeout=timedelta(0)).timeout == timedelta(hours=1)


def test_missing_authorizator_allows_all(make_config):
    """Test authorizator=None falls back to allowing everyone."""
    assert make_config(authorizator=None).authorizator is allow_all


def test_refresh_enabled(make_config):
    """Test refresh is enabled by a positive max_refresh."""
    assert make_config(max_refresh=timedelta(seconds=1)).refresh_enabled is True


def test_config_is_immutable(jwt_config):
    """Test configuration cannot be changed after startup."""
    with pytest.raises(dataclasses.FrozenInstanceError):
        jwt_config.realm = "other"


# Environment provider


@pytest.fixture
def environ():
    """Complete environment for the provider."""
    return {
        "JWT_REALM": "api",
        "JWT_SECRET_KEY": "env-secret",
        "JWT_SIGNING_ALGORITHM": "HS512",
        "JWT_TIMEOUT_SECONDS": "600",
        "JWT_MAX_REFRESH_SECONDS": "86400",
        "JWT_USERS": "alice:wonderland, bob:builder:with:colons",
        "API_HOST": "127.0.0.1",
        "API_PORT": "9000",
        "LOG_LEVEL": "debug",
    }


def test_env_jwt_config(environ):
    """Test token settings are read from the environment."""
    config = EnvConfigProvider(environ).get_jwt_config(deny)

    assert config.realm == "api"
    assert config.key == b"env-secret"
    assert config.signing_algorithm is SigningAlgorithm.HS512
    assert config.timeout == timedelta(minutes=10)
    assert config.max_refresh == timedelta(days=1)
    assert config.authenticator is deny
    assert config.authorizator is allow_all


def test_env_jwt_config_defaults():
    """Test optional environment variables have defaults."""
    config = EnvConfigProvider({"JWT_REALM": "api", "JWT_SECRET_KEY": "k"}).get_jwt_config(deny)

    assert config.signing_algorithm is SigningAlgorithm.HS256
    assert config.timeout == timedelta(hours=1)
    assert config.max_refresh == timedelta(0)


@pytest.mark.parametrize("missing", ["JWT_REALM", "JWT_SECRET_KEY"])
def test_env_jwt_config_requires_realm_and_key(environ, missing):
    """Test missing required variables prevent startup."""
    del environ[missing]

    with pytest.raises(ConfigurationError):
        EnvConfigProvider(environ).get_jwt_config(deny)


def test_env_jwt_config_rejects_bad_seconds(environ):
    """Test non-integer durations are configuration errors."""
    environ["JWT_TIMEOUT_SECONDS"] = "1h"

    with pytest.raises(ConfigurationError):
        EnvConfigProvider(environ).get_jwt_config(deny)


def test_env_api_config(environ):
    """Test API settings are read from the environment."""
    api_config = EnvConfigProvider(environ).get_api_config()

    assert api_config.host == "127.0.0.1"
    assert api_config.port == 9000
    assert api_config.log_level == "DEBUG"


def test_env_api_config_defaults():
    """Test API settings defaults."""
    api_config = EnvConfigProvider({}).get_api_config()

    assert api_config.host == "0.0.0.0"
    assert api_config.port == 8080
    assert api_config.log_level == "INFO"


def test_env_user_credentials(environ):
    """Test the user table is parsed from JWT_USERS."""
    users = EnvConfigProvider(environ).get_user_credentials()

    assert users == {"alice": "wonderland", "bob": "builder:with:colons"}


def test_env_user_credentials_required():
    """Test JWT_USERS must be configured."""
    with pytest.raises(ValueError, match="JWT_USERS"):
        EnvConfigProvider({}).get_user_credentials()


def test_env_user_credentials_rejects_entry_without_password():
    """Test entries must be user:password."""
    with pytest.raises(ValueError):
        EnvConfigProvider({"JWT_USERS": "alice"}).get_user_credentials()
