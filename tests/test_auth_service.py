"""Tests for the login/signup/logout flow and the seeded admin"""

import pytest

from recordhub.app import RecordHubApp
from recordhub.auth.service import (
    SessionState,
    has_admin_access,
    has_user_access,
    initialize_app,
    require_auth,
)
from recordhub.models import AuthUser
from recordhub.utils.exceptions import AuthenticationError, ConflictError, ValidationError
from conftest import signup_data


def test_initialize_app_seeds_single_admin(hub):
    admin = initialize_app(hub.users, hub.passwords, hub.settings.auth)
    users = hub.users.get_users()
    assert len(users) == 1
    assert users[0].email == "admin@example.com"
    assert users[0].role == "admin"
    assert admin == users[0]

    assert hub.auth.login("admin@example.com", "admin123") is True
    assert hub.auth.user.role == "admin"


def test_initialize_app_is_noop_when_users_exist(hub):
    hub.users.add_user(signup_data())
    assert initialize_app(hub.users, hub.passwords, hub.settings.auth) is None
    assert len(hub.users.get_users()) == 1


def test_signup_role_follows_first_user_rule(hub):
    assert hub.auth.signup(signup_data(email="first@example.com")) is True
    assert hub.auth.signup(signup_data(email="second@example.com")) is True
    assert hub.users.find_by_email("first@example.com").role == "admin"
    assert hub.users.find_by_email("second@example.com").role == "user"


def test_signup_logs_user_in(hub):
    assert hub.auth.signup(signup_data()) is True
    assert hub.auth.state == SessionState.AUTHENTICATED
    assert hub.auth.user.email == "alice@example.com"
    assert hub.auth.user.name == "Alice Smith"
    assert hub.storage.get_token() == hub.auth.user.token


def test_signup_duplicate_email_fails(hub):
    assert hub.auth.signup(signup_data()) is True
    hub.auth.logout()
    assert hub.auth.signup(signup_data(name="Other Alice")) is False
    assert "already exists" in hub.auth.last_error
    assert hub.auth.state == SessionState.ANONYMOUS
    assert len(hub.users.get_users()) == 1


@pytest.mark.parametrize(
    "data",
    [
        signup_data(name="A"),
        signup_data(email="nope"),
        signup_data(password="short"),
        signup_data(confirm="mismatch1"),
    ],
)
def test_signup_validation_failures(hub, data):
    assert hub.auth.signup(data) is False
    assert hub.users.get_users() == []
    assert hub.storage.get_token() is None


def test_register_raises_typed_errors(hub):
    hub.auth.register(signup_data())
    with pytest.raises(ConflictError):
        hub.auth.register(signup_data())
    with pytest.raises(ValidationError):
        hub.auth.register(signup_data(email="x@example.com", confirm="other123"))


def test_login_wrong_password_and_unknown_email(hub):
    hub.auth.register(signup_data())
    with pytest.raises(AuthenticationError, match="Invalid email or password"):
        hub.auth.authenticate("alice@example.com", "wrongpass")
    with pytest.raises(AuthenticationError, match="Invalid email or password"):
        hub.auth.authenticate("ghost@example.com", "secret123")

    assert hub.auth.login("alice@example.com", "wrongpass") is False
    assert hub.auth.last_error == "Invalid email or password"
    assert hub.auth.user is None


def test_login_short_password_is_validation_error(hub):
    with pytest.raises(ValidationError):
        hub.auth.authenticate("alice@example.com", "123")


def test_failed_login_keeps_existing_session(hub):
    hub.auth.signup(signup_data())
    current = hub.auth.user
    assert hub.auth.login("alice@example.com", "wrongpass") is False
    assert hub.auth.user == current
    assert hub.auth.state == SessionState.AUTHENTICATED


def test_logout_clears_session(hub):
    hub.auth.signup(signup_data())
    hub.auth.logout()
    assert hub.auth.user is None
    assert hub.auth.state == SessionState.ANONYMOUS
    assert hub.storage.get_token() is None


def test_initialize_restores_persisted_session(settings, store):
    first = RecordHubApp(settings=settings, store=store)
    first.auth.initialize()
    assert first.auth.login("admin@example.com", "admin123")

    second = RecordHubApp(settings=settings, store=store)
    restored = second.auth.initialize()
    assert restored is not None
    assert restored.email == "admin@example.com"
    assert restored.name == "Admin User"
    assert second.auth.state == SessionState.AUTHENTICATED
    assert len(second.users.get_users()) == 1


def test_access_helpers():
    admin = AuthUser(id="1", email="a@example.com", role="admin", token="t")
    user = AuthUser(id="2", email="u@example.com", role="user", token="t")

    assert has_admin_access(admin) and not has_admin_access(user)
    assert not has_admin_access(None)

    assert has_user_access(admin, "2")
    assert has_user_access(user, "2")
    assert not has_user_access(user, "1")
    assert has_user_access(user)
    assert not has_user_access(None, "2")

    assert require_auth(user)
    assert not require_auth(None)
