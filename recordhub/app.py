"""Application wiring: settings, logging, store and managers."""

from typing import Optional

from .admin import AdminService
from .auth.passwords import PasswordManager
from .auth.service import AuthService
from .auth.tokens import AuthStorage
from .auth.users import UserManager
from .data.manager import DataManager
from .store import JsonFileStore, KeyValueStore
from .utils.config import Settings, load_settings
from .utils.logger import get_logger, setup_logger

logger = get_logger(__name__)


class RecordHubApp:
    """Holds one set of managers sharing a store"""

    def __init__(self, settings: Optional[Settings] = None, store: Optional[KeyValueStore] = None):
        self.settings = settings or load_settings()
        self.store = store if store is not None else JsonFileStore(self.settings.data_dir)
        self.users = UserManager(self.store)
        self.passwords = PasswordManager(self.store, rounds=self.settings.auth.bcrypt_rounds)
        self.records = DataManager(self.store)
        self.storage = AuthStorage(self.store)
        self.auth = AuthService(self.users, self.passwords, self.storage, self.settings.auth)
        self.admin = AdminService(self.users, self.passwords, self.records)

    def initialize(self, configure_logging: bool = True) -> "RecordHubApp":
        """Set up logging, seed the default admin and restore any session"""
        if configure_logging:
            log = self.settings.logging
            setup_logger(
                log_level=log.level,
                log_format=log.format,
                file_path=log.file_path,
                max_bytes=log.max_bytes,
                backup_count=log.backup_count,
            )
        self.auth.initialize()
        logger.info(
            "RecordHub initialized",
            app_name=self.settings.app.name,
            version=self.settings.app.version,
            environment=self.settings.app.environment,
            user_count=len(self.users.get_users()),
        )
        return self
