"""Tests for password hashing and PasswordManager"""

from recordhub.auth.passwords import PasswordManager, hash_password, verify_password


def test_hash_is_salted_and_verifies():
    first = hash_password("secret123", rounds=4)
    second = hash_password("secret123", rounds=4)
    assert first != second
    assert "secret123" not in first
    assert verify_password("secret123", first)
    assert not verify_password("secret124", first)


def test_verify_with_malformed_hash_is_false():
    assert verify_password("secret123", "not-a-bcrypt-hash") is False


def test_long_passwords_hash_without_error():
    long_password = "x" * 200
    assert verify_password(long_password, hash_password(long_password, rounds=4))


def test_save_verify_delete(store):
    passwords = PasswordManager(store, rounds=4)
    passwords.save_password("u1", "secret123")
    passwords.save_password("u2", "hunter22")

    assert passwords.verify_user_password("u1", "secret123")
    assert not passwords.verify_user_password("u1", "hunter22")
    assert not passwords.verify_user_password("unknown", "secret123")

    passwords.delete_password("u1")
    assert not passwords.verify_user_password("u1", "secret123")
    assert passwords.verify_user_password("u2", "hunter22")
    assert set(passwords.get_passwords()) == {"u2"}


def test_save_password_overwrites(store):
    passwords = PasswordManager(store, rounds=4)
    passwords.save_password("u1", "secret123")
    passwords.save_password("u1", "newpass99")
    assert passwords.verify_user_password("u1", "newpass99")
    assert not passwords.verify_user_password("u1", "secret123")
