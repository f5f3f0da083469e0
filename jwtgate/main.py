#!/usr/bin/env python3
"""
jwtgate - Main Entry Point

This is the thin orchestration layer that:
1. Loads configuration
2. Builds the gate, token service and routes
3. Runs the API server

All token logic is in the modules, following black box principles.
"""

import logging
import secrets
from typing import Dict, List, Optional

import uvicorn
from fastapi import FastAPI, Request

from jwtgate import __version__
from jwtgate.config.provider import (
    Authenticator,
    ConfigProvider,
    ConfigurationError,
    EnvConfigProvider,
    JWTConfig,
)
from jwtgate.logging_config import configure_logging, get_logging_config
from jwtgate.modules.api import LOGIN_PATH, create_auth_router
from jwtgate.modules.auth import AuthError, AuthGate, TokenService
from jwtgate.modules.middleware import JWTAuthMiddleware, log_rejection, unauthorized_response

logger = logging.getLogger(__name__)

HEALTH_PATH = "/health"

DEFAULT_SKIP_PATHS: Dict[str, List[str]] = {
    HEALTH_PATH: ["GET"],
    LOGIN_PATH: ["POST"],
}


def build_password_authenticator(users: Dict[str, str]) -> Authenticator:
    """
    Authenticator backed by a static user:password table.

    Args:
        users: Mapping of user id to password

    Returns:
        Callback suitable for JWTConfig.authenticator
    """
    def authenticate(user_id: str, password: str) -> bool:
        expected = users.get(user_id)
        if expected is None:
            return False
        # Use constant-time comparison for security
        return secrets.compare_digest(password.encode("utf-8"), expected.encode("utf-8"))

    return authenticate


def quiet_access_paths(skip_paths: Dict[str, List[str]]) -> List[str]:
    """Public paths polled with GET, whose access lines are not worth logging."""
    return sorted(path for path, methods in skip_paths.items() if "GET" in methods)


def create_app(
    jwt_config: JWTConfig,
    skip_paths: Optional[Dict[str, List[str]]] = None,
) -> FastAPI:
    """
    Assemble the FastAPI application.

    Args:
        jwt_config: Validated token configuration
        skip_paths: Extra unauthenticated paths {"/path": ["GET"]}

    Returns:
        Application with the gate installed and token routes mounted
    """
    gate = AuthGate(jwt_config)
    token_service = TokenService(jwt_config, gate=gate)

    app = FastAPI(title="jwtgate", version=__version__)

    paths = dict(DEFAULT_SKIP_PATHS)
    if skip_paths:
        paths.update(skip_paths)
    app.middleware("http")(JWTAuthMiddleware(gate, skip_paths=paths))

    app.include_router(create_auth_router(token_service))

    @app.get(HEALTH_PATH)
    async def health():
        """Liveness probe."""
        return {"status": "ok"}

    @app.exception_handler(AuthError)
    async def auth_error_handler(request: Request, exc: AuthError):
        """Turn any authentication failure into the realm challenge."""
        log_rejection(request, exc)
        return unauthorized_response(jwt_config.realm)

    logger.info(
        f"jwtgate ready: realm={jwt_config.realm} algorithm={jwt_config.signing_algorithm.value} "
        f"timeout={jwt_config.timeout} max_refresh={jwt_config.max_refresh}"
    )
    return app


def create_app_from_env(config_provider: Optional[ConfigProvider] = None) -> FastAPI:
    """
    Build the application from environment variables.

    Raises:
        ConfigurationError: Token settings are missing or invalid
        ValueError: JWT_USERS is missing or malformed
    """
    config_provider = config_provider or EnvConfigProvider()
    users = config_provider.get_user_credentials()
    jwt_config = config_provider.get_jwt_config(build_password_authenticator(users))
    return create_app(jwt_config)


def main() -> None:
    """Run the API server."""
    config_provider = EnvConfigProvider()
    api_config = config_provider.get_api_config()
    configure_logging(api_config.log_level, quiet_access_paths(DEFAULT_SKIP_PATHS))

    try:
        app = create_app_from_env(config_provider)
    except (ConfigurationError, ValueError) as e:
        logger.critical(f"Invalid configuration, refusing to start: {e}")
        raise SystemExit(1)

    uvicorn.run(
        app,
        host=api_config.host,
        port=api_config.port,
        log_level=api_config.log_level.lower(),
        log_config=get_logging_config(
            api_config.log_level, quiet_access_paths(DEFAULT_SKIP_PATHS)
        ),
    )


if __name__ == "__main__":
    main()
