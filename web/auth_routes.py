"""
FastAPI routes for authentication.

Prefix: /api/auth

Tokens are returned in the body and also set as an httpOnly cookie;
clients can send them back either way.
"""

from __future__ import annotations

from typing import Any, Dict

from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import JSONResponse

from recordhub.app import RecordHubApp
from recordhub.models import AuthUser
from recordhub.utils.exceptions import RecordHubError
from recordhub.utils.logger import get_logger
from .auth_deps import TOKEN_COOKIE_NAME, get_current_user, get_hub, to_http_exception
from .models import AuthResponse, LoginRequest, SignupRequest, UserPublic

logger = get_logger(__name__)

router = APIRouter(prefix="/api/auth", tags=["auth"])


def _auth_response(hub: RecordHubApp, user: AuthUser, status_code: int = status.HTTP_200_OK) -> JSONResponse:
    body = AuthResponse(token=user.token, user=UserPublic.from_auth_user(user))
    response = JSONResponse(status_code=status_code, content=body.model_dump())
    response.set_cookie(
        key=TOKEN_COOKIE_NAME,
        value=user.token,
        max_age=hub.settings.auth.token_expiry_hours * 60 * 60,
        httponly=True,
        secure=hub.settings.app.environment == "production",
        samesite="lax",
    )
    return response


@router.post("/signup", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
async def signup(body: SignupRequest, hub: RecordHubApp = Depends(get_hub)) -> Any:
    """Register a new user and log them in"""
    try:
        user = hub.auth.register(body.model_dump())
    except RecordHubError as e:
        logger.warning("Signup rejected", error=str(e), error_type=type(e).__name__)
        raise to_http_exception(e)
    return _auth_response(hub, user, status_code=status.HTTP_201_CREATED)


@router.post("/login", response_model=AuthResponse)
async def login(body: LoginRequest, hub: RecordHubApp = Depends(get_hub)) -> Any:
    """Log in with email and password"""
    try:
        user = hub.auth.authenticate(body.email, body.password)
    except RecordHubError as e:
        logger.warning("Login rejected", error=str(e), error_type=type(e).__name__)
        raise to_http_exception(e)
    return _auth_response(hub, user)


@router.post("/logout")
async def logout(request: Request) -> Dict[str, str]:
    """Tokens are stateless; logging out only clears the cookie"""
    response = JSONResponse({"status": "success", "message": "Logged out"})
    response.delete_cookie(key=TOKEN_COOKIE_NAME)
    return response


@router.get("/me", response_model=UserPublic)
async def me(
    current_user: AuthUser = Depends(get_current_user),
    hub: RecordHubApp = Depends(get_hub),
) -> UserPublic:
    stored = hub.users.find_by_id(current_user.id)
    if stored is not None:
        current_user = current_user.model_copy(update={"name": stored.name})
    return UserPublic.from_auth_user(current_user)
