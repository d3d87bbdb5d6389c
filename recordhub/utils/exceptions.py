"""Custom exceptions for RecordHub"""

from typing import List, Optional


class RecordHubError(Exception):
    """Base exception for RecordHub"""
    pass


class ValidationError(RecordHubError):
    """Input failed a schema rule (missing or malformed field)"""

    def __init__(self, message: str, errors: Optional[List[str]] = None):
        self.errors = errors or [message]
        super().__init__(message)


class NotFoundError(RecordHubError):
    """Lookup by id missed"""
    pass


class ConflictError(RecordHubError):
    """Entity already exists (e.g. duplicate email)"""
    pass


class AuthenticationError(RecordHubError):
    """Bad credentials or missing/expired/malformed token"""
    pass


class StorageError(RecordHubError):
    """Persistent store could not be read or written"""
    pass
