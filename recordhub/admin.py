"""
Admin dashboard operations: overall statistics, the user list with record
counts, role changes and deletes that cascade to a user's data.
"""

from __future__ import annotations

from typing import Any, Dict, List

from .auth.passwords import PasswordManager
from .auth.users import UserManager
from .data.manager import DataManager
from .data.utils import DataUtils
from .models import AdminStats, UserRole
from .utils.exceptions import ConflictError, NotFoundError
from .utils.logger import get_logger

logger = get_logger(__name__)


class AdminService:

    def __init__(self, users: UserManager, passwords: PasswordManager, records: DataManager):
        self.users = users
        self.passwords = passwords
        self.records = records

    def get_admin_stats(self) -> AdminStats:
        stats = DataUtils.get_record_stats(self.records.get_records())
        return AdminStats(
            total_users=len(self.users.get_users()),
            total_records=stats.total,
            active_records=stats.active,
            inactive_records=stats.inactive,
        )

    def list_users_with_counts(self) -> List[Dict[str, Any]]:
        counts: Dict[str, int] = {}
        for record in self.records.get_records():
            counts[record.user_id] = counts.get(record.user_id, 0) + 1
        return [
            {**user.model_dump(mode="json"), "record_count": counts.get(user.id, 0)}
            for user in self.users.get_users()
        ]

    def _ensure_not_last_admin(self, user_id: str) -> None:
        users = self.users.get_users()
        target = next((u for u in users if u.id == user_id), None)
        if target is None:
            raise NotFoundError(f"User with ID '{user_id}' not found")
        admins = [u for u in users if u.role == "admin"]
        if target.role == "admin" and len(admins) == 1:
            raise ConflictError("Cannot remove the last admin user")

    def set_role(self, user_id: str, role: UserRole) -> bool:
        return self.update_user(user_id, {"role": role})

    def update_user(self, user_id: str, updates: Dict[str, Any]) -> bool:
        """
        Apply role, name and email changes in a single write.
        Demoting the last admin raises ConflictError before anything is saved.
        """
        role = updates.get("role")
        if role is not None and role != "admin":
            self._ensure_not_last_admin(user_id)
        return self.users.update_user(user_id, updates)

    def delete_user(self, user_id: str) -> int:
        """
        Delete a user together with its records and password entry.
        Returns the number of records removed.
        """
        self._ensure_not_last_admin(user_id)
        removed = self.records.delete_records_by_user_id(user_id)
        self.passwords.delete_password(user_id)
        self.users.delete_user(user_id)
        logger.info("User deleted with data", user_id=user_id, records_removed=removed)
        return removed
