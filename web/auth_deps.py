"""
FastAPI dependencies for authentication and authorization.
"""

from typing import Optional

from fastapi import Depends, HTTPException, Request, status

from recordhub.app import RecordHubApp
from recordhub.auth.tokens import validate_token
from recordhub.models import AuthUser
from recordhub.utils.exceptions import (
    AuthenticationError,
    ConflictError,
    NotFoundError,
    RecordHubError,
    ValidationError,
)

TOKEN_COOKIE_NAME = "auth_token"


def get_hub(request: Request) -> RecordHubApp:
    """Dependency returning the RecordHubApp attached to the FastAPI app"""
    hub = getattr(request.app.state, "hub", None)
    if hub is None:
        raise HTTPException(status_code=500, detail="Application not initialized")
    return hub


def get_session_token(request: Request) -> Optional[str]:
    """Extract token from request (Authorization header or cookie)"""
    auth_header = request.headers.get("Authorization")
    if auth_header and auth_header.lower().startswith("bearer "):
        return auth_header[7:].strip()
    return request.cookies.get(TOKEN_COOKIE_NAME)


async def get_current_user(request: Request) -> AuthUser:
    """Resolve the caller from the bearer header or session cookie; 401 otherwise"""
    token = get_session_token(request)
    if not token:
        raise to_http_exception(AuthenticationError("Not authenticated"))
    user = validate_token(token)
    if user is None:
        raise to_http_exception(AuthenticationError("Invalid or expired token"))
    return user


def require_role(role: str):
    """Dependency factory for role-based access control"""
    async def role_checker(current_user: AuthUser = Depends(get_current_user)) -> AuthUser:
        if current_user.role != role:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"Requires {role} role",
            )
        return current_user

    return role_checker


# Pre-configured dependencies
require_admin = require_role("admin")
require_auth = get_current_user


_STATUS_BY_ERROR = [
    (ValidationError, status.HTTP_400_BAD_REQUEST),
    (AuthenticationError, status.HTTP_401_UNAUTHORIZED),
    (NotFoundError, status.HTTP_404_NOT_FOUND),
    (ConflictError, status.HTTP_409_CONFLICT),
]


def to_http_exception(error: RecordHubError) -> HTTPException:
    """Map a RecordHubError to the matching HTTP status"""
    for error_type, status_code in _STATUS_BY_ERROR:
        if not isinstance(error, error_type):
            continue
        if isinstance(error, ValidationError):
            return HTTPException(status_code=status_code, detail=error.errors)
        if isinstance(error, AuthenticationError):
            return HTTPException(
                status_code=status_code,
                detail=str(error),
                headers={"WWW-Authenticate": "Bearer"},
            )
        return HTTPException(status_code=status_code, detail=str(error))
    return HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(error))
