"""
Token endpoints for the jwtgate API

This module provides the login and refresh endpoints plus a sample
protected route. Authentication failures are raised as AuthError and turned
into the 401 challenge by the application's exception handler.
"""

import json
import logging

from fastapi import APIRouter, Depends, Request
from pydantic import ValidationError

from ..auth.errors import BadRequestError
from ..auth.interfaces import AuthContext
from ..auth.service import TokenService
from ..middleware import get_auth_context
from .models import IdentityResponse, LoginRequest, TokenResponse

logger = logging.getLogger(__name__)

LOGIN_PATH = "/login"
REFRESH_PATH = "/refresh_token"


async def read_login_request(request: Request) -> LoginRequest:
    """
    Decode the login body.

    Raises:
        BadRequestError: Body is not JSON or does not match LoginRequest
    """
    try:
        body = await request.json()
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise BadRequestError() from e

    if not isinstance(body, dict):
        raise BadRequestError()

    try:
        return LoginRequest.model_validate(body)
    except ValidationError as e:
        raise BadRequestError() from e


def create_auth_router(token_service: TokenService) -> APIRouter:
    """
    Create the token router with an injected token service.

    The refresh endpoint must be mounted behind JWTAuthMiddleware.

    Args:
        token_service: Service issuing and refreshing tokens

    Returns:
        FastAPI router with login, refresh and sample endpoints
    """
    router = APIRouter(tags=["auth"])

    @router.post(LOGIN_PATH, response_model=TokenResponse)
    async def login(request: Request) -> TokenResponse:
        """Exchange credentials for a token."""
        credentials = await read_login_request(request)
        token = await token_service.login(credentials.email, credentials.password)
        return TokenResponse(token=token)

    @router.get(REFRESH_PATH, response_model=TokenResponse)
    async def refresh_token(request: Request) -> TokenResponse:
        """Exchange a still-valid token for one with a later expiry."""
        token = await token_service.refresh(request.headers.get("Authorization"))
        return TokenResponse(token=token)

    @router.get("/hello", response_model=IdentityResponse)
    async def hello(auth: AuthContext = Depends(get_auth_context)) -> IdentityResponse:
        """Sample protected endpoint echoing the caller's identity."""
        return IdentityResponse(user_id=auth.identity, claims=dict(auth.claims))

    return router
