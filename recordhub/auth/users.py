"""
User storage over the users collection.

Every operation loads the full list, changes it in memory and writes the
whole list back under the collection lock.
"""

from typing import Any, Dict, List, Optional, Union

from pydantic import ValidationError as PydanticValidationError

from ..models import SignupForm, User, next_timestamp_id, touch, utcnow, validation_messages
from ..store import USERS_KEY, KeyValueStore
from ..utils.exceptions import ConflictError, StorageError, ValidationError
from ..utils.logger import get_logger

logger = get_logger(__name__)

# Fields a caller may not overwrite through update_user
_PROTECTED_FIELDS = {"id", "created_at", "updated_at"}


class UserManager:
    """CRUD over users; the first account ever added becomes admin"""

    def __init__(self, store: KeyValueStore):
        self.store = store

    def get_users(self) -> List[User]:
        """Load all users from storage"""
        raw = self.store.get(USERS_KEY) or []
        try:
            return [User(**item) for item in raw]
        except (PydanticValidationError, TypeError) as e:
            raise StorageError(f"Failed to load users: {str(e)}")

    def _write(self, users: List[User]) -> None:
        self.store.set(USERS_KEY, [u.model_dump(mode="json") for u in users])

    def add_user(self, data: Union[SignupForm, Dict[str, Any]]) -> User:
        """
        Create a user from signup data.

        Role is admin when the collection is empty, user otherwise. Raises
        ConflictError when the email is already registered.
        """
        form = self._signup_form(data)
        with self.store.lock(USERS_KEY):
            users = self.get_users()
            if any(u.email == form.email for u in users):
                raise ConflictError("User with this email already exists")
            now = utcnow()
            user = User(
                id=next_timestamp_id(u.id for u in users),
                name=form.name,
                email=form.email,
                role="admin" if not users else "user",
                created_at=now,
                updated_at=now,
            )
            users.append(user)
            self._write(users)

        logger.info("User created", user_id=user.id, role=user.role)
        return user

    def find_by_email(self, email: str) -> Optional[User]:
        """Exact, case-sensitive match"""
        return next((u for u in self.get_users() if u.email == email), None)

    def find_by_id(self, user_id: str) -> Optional[User]:
        return next((u for u in self.get_users() if u.id == user_id), None)

    def update_user(self, user_id: str, updates: Dict[str, Any]) -> bool:
        """Merge updates into the user and refresh updated_at; False if missing"""
        with self.store.lock(USERS_KEY):
            users = self.get_users()
            for i, user in enumerate(users):
                if user.id != user_id:
                    continue
                user_dict = user.model_dump()
                user_dict.update({k: v for k, v in updates.items() if k not in _PROTECTED_FIELDS})
                user_dict["updated_at"] = touch(user.updated_at)
                try:
                    updated = User(**user_dict)
                except PydanticValidationError as e:
                    messages = validation_messages(e)
                    raise ValidationError(messages[0], messages)
                # Compare the normalized address, not the raw input
                if any(u.email == updated.email and u.id != user_id for u in users):
                    raise ConflictError(f"Email '{updated.email}' already exists")
                users[i] = updated
                self._write(users)
                logger.info("User updated", user_id=user_id, fields=sorted(updates))
                return True
        return False

    def delete_user(self, user_id: str) -> bool:
        with self.store.lock(USERS_KEY):
            users = self.get_users()
            remaining = [u for u in users if u.id != user_id]
            if len(remaining) == len(users):
                return False
            self._write(remaining)
        logger.info("User deleted", user_id=user_id)
        return True

    @staticmethod
    def _signup_form(data: Union[SignupForm, Dict[str, Any]]) -> SignupForm:
        if isinstance(data, SignupForm):
            return data
        try:
            return SignupForm(**data)
        except PydanticValidationError as e:
            messages = validation_messages(e)
            raise ValidationError(messages[0], messages)
