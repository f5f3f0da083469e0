"""
Shared pytest fixtures for jwtgate tests.

This module provides common fixtures including:
- Token configuration factory with sensible test defaults
- A fixed clock for refresh-window arithmetic
- FastAPI test client utilities
"""

import time
from datetime import UTC, datetime, timedelta
from typing import Any, Callable, Dict

import pytest
from fastapi.testclient import TestClient

from jwtgate.config.provider import JWTConfig
from jwtgate.main import build_password_authenticator, create_app

TEST_REALM = "test-realm"
TEST_KEY = b"test-secret-key-0123456789abcdef-0123456789abcdef-0123456789abcd"
OTHER_KEY = b"another-secret-key-0123456789abcdef-0123456789abcdef-0123456789a"
TEST_USERS = {
    "admin": "admin-password",
    "test@example.com": "hunter2",
}


@pytest.fixture
def users() -> Dict[str, str]:
    """User table accepted by the test authenticator."""
    return dict(TEST_USERS)


@pytest.fixture
def make_config(users) -> Callable[..., JWTConfig]:
    """Factory building a JWTConfig; keyword arguments override defaults."""
    def factory(**overrides: Any) -> JWTConfig:
        values = {
            "realm": TEST_REALM,
            "key": TEST_KEY,
            "authenticator": build_password_authenticator(users),
        }
        values.update(overrides)
        return JWTConfig(**values)

    return factory


@pytest.fixture
def jwt_config(make_config) -> JWTConfig:
    """Default configuration: HS256, one hour timeout, refresh disabled."""
    return make_config()


@pytest.fixture
def refreshable_config(make_config) -> JWTConfig:
    """Configuration with a five minute refresh window."""
    return make_config(max_refresh=timedelta(minutes=5))


@pytest.fixture
def now() -> datetime:
    """Current time truncated to whole seconds."""
    return datetime.fromtimestamp(int(time.time()), UTC)


@pytest.fixture
def make_client() -> Callable[[JWTConfig], TestClient]:
    """Factory building a TestClient around create_app."""
    def factory(config: JWTConfig) -> TestClient:
        return TestClient(create_app(config))

    return factory


@pytest.fixture
def client(make_client, jwt_config) -> TestClient:
    """Test client for the default configuration."""
    return make_client(jwt_config)
