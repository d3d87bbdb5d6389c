"""Tests for the admin dashboard service"""

import pytest

from recordhub.utils.exceptions import ConflictError, NotFoundError
from conftest import record_data, signup_data


@pytest.fixture
def populated(hub):
    admin = hub.users.add_user(signup_data(name="Admin", email="admin@example.com"))
    hub.passwords.save_password(admin.id, "admin123")
    user = hub.users.add_user(signup_data(name="Member", email="member@example.com"))
    hub.passwords.save_password(user.id, "member123")
    hub.records.add_record(admin.id, record_data(title="Admin A"))
    hub.records.add_record(user.id, record_data(title="User A"))
    hub.records.add_record(user.id, record_data(title="User B", status="inactive"))
    return admin, user


def test_admin_stats(hub, populated):
    stats = hub.admin.get_admin_stats()
    assert stats.total_users == 2
    assert stats.total_records == 3
    assert stats.active_records == 2
    assert stats.inactive_records == 1


def test_users_listed_with_record_counts(hub, populated):
    admin, user = populated
    counts = {row["id"]: row["record_count"] for row in hub.admin.list_users_with_counts()}
    assert counts == {admin.id: 1, user.id: 2}


def test_delete_user_cascades(hub, populated):
    admin, user = populated
    assert hub.admin.delete_user(user.id) == 2
    assert hub.users.find_by_id(user.id) is None
    assert hub.records.get_user_record_count(user.id) == 0
    assert user.id not in hub.passwords.get_passwords()
    assert hub.records.get_user_record_count(admin.id) == 1


def test_cannot_delete_or_demote_last_admin(hub, populated):
    admin, _ = populated
    with pytest.raises(ConflictError):
        hub.admin.delete_user(admin.id)
    with pytest.raises(ConflictError):
        hub.admin.set_role(admin.id, "user")
    assert hub.users.find_by_id(admin.id).role == "admin"


def test_promote_then_demote(hub, populated):
    admin, user = populated
    assert hub.admin.set_role(user.id, "admin") is True
    assert hub.admin.set_role(admin.id, "user") is True
    assert hub.users.find_by_id(admin.id).role == "user"
    assert hub.users.find_by_id(user.id).role == "admin"


def test_delete_unknown_user(hub, populated):
    with pytest.raises(NotFoundError):
        hub.admin.delete_user("missing")


def test_update_user_is_all_or_nothing(hub, populated):
    admin, user = populated
    with pytest.raises(ConflictError):
        hub.admin.update_user(user.id, {"role": "admin", "email": "admin@example.com"})
    stored = hub.users.find_by_id(user.id)
    assert stored.role == "user"
    assert stored.email == "member@example.com"

    assert hub.admin.update_user(user.id, {"role": "admin", "name": "Promoted"}) is True
    stored = hub.users.find_by_id(user.id)
    assert (stored.role, stored.name) == ("admin", "Promoted")
