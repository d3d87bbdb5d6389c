"""
Authentication flow and process-wide session.

AuthService composes UserManager and PasswordManager:
- register/authenticate raise RecordHubError subclasses (used by the web layer)
- signup/login wrap them, returning True/False and keeping last_error
- the session token is persisted through AuthStorage and mirrored in .user
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Dict, Optional, Union

from pydantic import ValidationError as PydanticValidationError

from ..models import AuthUser, LoginForm, SignupForm, User, validation_messages
from ..utils.config import AuthSettings
from ..utils.exceptions import (
    AuthenticationError,
    ConflictError,
    RecordHubError,
    ValidationError,
)
from ..utils.logger import get_logger
from .passwords import PasswordManager
from .tokens import AuthStorage, generate_token
from .users import UserManager

logger = get_logger(__name__)

INVALID_CREDENTIALS = "Invalid email or password"


class SessionState(str, Enum):
    ANONYMOUS = "anonymous"
    AUTHENTICATING = "authenticating"
    AUTHENTICATED = "authenticated"


def has_admin_access(user: Optional[AuthUser]) -> bool:
    return user is not None and user.role == "admin"


def has_user_access(user: Optional[AuthUser], resource_user_id: Optional[str] = None) -> bool:
    """Admins reach everything; others only resources they own"""
    if user is None:
        return False
    if user.role == "admin":
        return True
    if resource_user_id:
        return user.id == resource_user_id
    return True


def require_auth(user: Optional[AuthUser]) -> bool:
    return user is not None


def initialize_app(
    users: UserManager,
    passwords: PasswordManager,
    settings: Optional[AuthSettings] = None,
) -> Optional[User]:
    """
    Seed a default admin when no users exist yet.

    Default credentials (override with ADMIN_EMAIL / ADMIN_PASSWORD):
        email:    admin@example.com
        password: admin123
    """
    if users.get_users():
        return None
    settings = settings or AuthSettings()
    admin = users.add_user(
        SignupForm(
            name=settings.admin_name,
            email=settings.admin_email,
            password=settings.admin_password,
            confirm_password=settings.admin_password,
        )
    )
    passwords.save_password(admin.id, settings.admin_password)
    logger.warning("Default admin user created", email=admin.email, user_id=admin.id)
    return admin


def _to_auth_user(user: User, token: str) -> AuthUser:
    return AuthUser(id=user.id, email=user.email, name=user.name, role=user.role, token=token)


class AuthService:
    """Single active session: anonymous -> authenticating -> authenticated"""

    def __init__(
        self,
        users: UserManager,
        passwords: PasswordManager,
        storage: AuthStorage,
        settings: Optional[AuthSettings] = None,
    ):
        self.users = users
        self.passwords = passwords
        self.storage = storage
        self.settings = settings or AuthSettings()
        self.user: Optional[AuthUser] = None
        self.state = SessionState.ANONYMOUS
        self.last_error: Optional[str] = None

    @property
    def loading(self) -> bool:
        return self.state == SessionState.AUTHENTICATING

    def initialize(self) -> Optional[AuthUser]:
        """Seed the admin if needed and restore a persisted session"""
        initialize_app(self.users, self.passwords, self.settings)
        return self.restore()

    def restore(self) -> Optional[AuthUser]:
        saved = self.storage.get_user()
        if saved is None:
            self.user = None
            self.state = SessionState.ANONYMOUS
            return None
        stored = self.users.find_by_id(saved.id)
        if stored is not None:
            saved = saved.model_copy(update={"name": stored.name})
        self.user = saved
        self.state = SessionState.AUTHENTICATED
        return saved

    def issue_token(self, user: User) -> str:
        return generate_token(user, expiry_hours=self.settings.token_expiry_hours)

    def authenticate(self, email: str, password: str) -> AuthUser:
        """Check credentials and return an identity with a fresh token"""
        try:
            form = LoginForm(email=email, password=password)
        except PydanticValidationError as e:
            messages = validation_messages(e)
            raise ValidationError(messages[0], messages)

        user = self.users.find_by_email(form.email)
        if user is None or not self.passwords.verify_user_password(user.id, form.password):
            raise AuthenticationError(INVALID_CREDENTIALS)

        return _to_auth_user(user, self.issue_token(user))

    def register(self, data: Union[SignupForm, Dict[str, Any]]) -> AuthUser:
        """Create an account (role per first-user rule) and return its identity"""
        if isinstance(data, SignupForm):
            form = data
        else:
            try:
                form = SignupForm(**data)
            except PydanticValidationError as e:
                messages = validation_messages(e)
                raise ValidationError(messages[0], messages)

        if self.users.find_by_email(form.email) is not None:
            raise ConflictError("User with this email already exists")

        user = self.users.add_user(form)
        self.passwords.save_password(user.id, form.password)
        return _to_auth_user(user, self.issue_token(user))

    def login(self, email: str, password: str) -> bool:
        return self._start_session(lambda: self.authenticate(email, password), "Login")

    def signup(self, data: Union[SignupForm, Dict[str, Any]]) -> bool:
        return self._start_session(lambda: self.register(data), "Signup")

    def logout(self) -> None:
        self.storage.remove_token()
        if self.user is not None:
            logger.info("User logged out", user_id=self.user.id)
        self.user = None
        self.state = SessionState.ANONYMOUS

    def _start_session(self, action, label: str) -> bool:
        previous_user, previous_state = self.user, self.state
        self.state = SessionState.AUTHENTICATING
        self.last_error = None
        try:
            auth_user = action()
        except RecordHubError as e:
            self.last_error = str(e)
            self.user, self.state = previous_user, previous_state
            logger.warning(f"{label} failed", error=str(e), error_type=type(e).__name__)
            return False

        self.storage.set_token(auth_user.token)
        self.user = auth_user
        self.state = SessionState.AUTHENTICATED
        logger.info(f"{label} succeeded", user_id=auth_user.id, role=auth_user.role)
        return True
