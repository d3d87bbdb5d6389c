"""Authentication: users, password hashes, tokens and the session flow."""

from .passwords import PasswordManager, hash_password, verify_password
from .service import (
    AuthService,
    SessionState,
    has_admin_access,
    has_user_access,
    initialize_app,
    require_auth,
)
from .tokens import AuthStorage, generate_token, validate_token
from .users import UserManager

__all__ = [
    "AuthService",
    "AuthStorage",
    "PasswordManager",
    "SessionState",
    "UserManager",
    "generate_token",
    "has_admin_access",
    "has_user_access",
    "hash_password",
    "initialize_app",
    "require_auth",
    "validate_token",
    "verify_password",
]
