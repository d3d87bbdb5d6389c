"""
Password hashing and the user-id -> hash collection.

Hashes are kept apart from user records; deleting a user leaves its entry
in place unless the caller deletes it explicitly.
"""

from typing import Dict

import bcrypt

from ..store import PASSWORDS_KEY, KeyValueStore
from ..utils.logger import get_logger

logger = get_logger(__name__)

DEFAULT_ROUNDS = 12

# bcrypt only looks at the first 72 bytes
BCRYPT_MAX_BYTES = 72


def _password_bytes(password: str) -> bytes:
    return password.encode("utf-8")[:BCRYPT_MAX_BYTES]


def hash_password(password: str, rounds: int = DEFAULT_ROUNDS) -> str:
    """Hash a password using bcrypt"""
    salt = bcrypt.gensalt(rounds=rounds)
    return bcrypt.hashpw(_password_bytes(password), salt).decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    """Verify a password against its hash"""
    try:
        return bcrypt.checkpw(_password_bytes(password), password_hash.encode("utf-8"))
    except ValueError:
        # Malformed hash
        return False


class PasswordManager:
    """CRUD over the password-hash map stored under PASSWORDS_KEY"""

    def __init__(self, store: KeyValueStore, rounds: int = DEFAULT_ROUNDS):
        self.store = store
        self.rounds = rounds

    def get_passwords(self) -> Dict[str, str]:
        return self.store.get(PASSWORDS_KEY) or {}

    def save_password(self, user_id: str, password: str) -> None:
        """Hash and upsert the password for user_id"""
        password_hash = hash_password(password, self.rounds)
        with self.store.lock(PASSWORDS_KEY):
            passwords = self.get_passwords()
            passwords[user_id] = password_hash
            self.store.set(PASSWORDS_KEY, passwords)
        logger.info("Password saved", user_id=user_id)

    def verify_user_password(self, user_id: str, password: str) -> bool:
        stored_hash = self.get_passwords().get(user_id)
        if not stored_hash:
            return False
        return verify_password(password, stored_hash)

    def delete_password(self, user_id: str) -> None:
        with self.store.lock(PASSWORDS_KEY):
            passwords = self.get_passwords()
            if passwords.pop(user_id, None) is not None:
                self.store.set(PASSWORDS_KEY, passwords)
