"""
Data models for users, sessions and business data records.

Entities (User, DataRecord) are what the store persists; the *Form models
carry validated user input; the rest describe queries and results.
"""

from __future__ import annotations

import time
from datetime import datetime, timedelta, timezone
from typing import Iterable, List, Literal, Optional

from pydantic import BaseModel, EmailStr, Field, field_validator, model_validator
from pydantic import ValidationError as PydanticValidationError

UserRole = Literal["admin", "user"]
RecordStatus = Literal["active", "inactive"]
SortOrder = Literal["asc", "desc"]


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def as_utc(value: datetime) -> datetime:
    """Treat naive datetimes as UTC"""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def next_timestamp_id(existing_ids: Iterable[str]) -> str:
    """Millisecond timestamp id, bumped past any id already taken"""
    taken = set(existing_ids)
    candidate = int(time.time() * 1000)
    while str(candidate) in taken:
        candidate += 1
    return str(candidate)


def touch(previous: datetime) -> datetime:
    """New updated_at, strictly after previous even on a coarse clock"""
    now = utcnow()
    previous = as_utc(previous)
    if now <= previous:
        now = previous + timedelta(microseconds=1)
    return now


def validation_messages(exc: PydanticValidationError) -> List[str]:
    """Flatten pydantic errors into 'field: message' strings"""
    messages = []
    for err in exc.errors():
        loc = ".".join(str(part) for part in err.get("loc", ()))
        msg = err.get("msg", "Invalid value")
        messages.append(f"{loc}: {msg}" if loc else msg)
    return messages


# --- Entities ---

class User(BaseModel):
    """Account record. Password hashes live in a separate collection."""
    id: str
    email: EmailStr
    name: str
    role: UserRole = "user"
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)


class AuthUser(BaseModel):
    """Identity carried by a session token"""
    id: str
    email: str
    name: str = ""
    role: UserRole
    token: str


class DataForm(BaseModel):
    """User-editable fields of a data record"""
    title: str = Field(..., min_length=1, max_length=100)
    description: str = Field(..., min_length=1, max_length=500)
    category: str = Field(..., min_length=1)
    value: float = Field(..., ge=0, allow_inf_nan=False)
    status: RecordStatus


class DataRecord(DataForm):
    """Business data entry owned (advisorily) by user_id"""
    id: str
    user_id: str
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)


# --- Forms ---

class LoginForm(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=6)


class SignupForm(BaseModel):
    name: str = Field(..., min_length=2)
    email: EmailStr
    password: str = Field(..., min_length=6)
    confirm_password: str

    @model_validator(mode="after")
    def passwords_match(self) -> "SignupForm":
        if self.password != self.confirm_password:
            raise ValueError("Passwords don't match")
        return self


# --- Queries ---

class DateRange(BaseModel):
    start: datetime
    end: datetime

    @field_validator("start", "end")
    @classmethod
    def _to_utc(cls, value: datetime) -> datetime:
        return as_utc(value)


class SortConfig(BaseModel):
    key: str = "created_at"
    direction: SortOrder = "asc"

    @field_validator("key")
    @classmethod
    def _known_field(cls, value: str) -> str:
        if value not in DataRecord.model_fields:
            raise ValueError(f"Cannot sort by unknown field '{value}'")
        return value


class FilterConfig(BaseModel):
    category: Optional[str] = None
    status: Optional[RecordStatus] = None
    date_range: Optional[DateRange] = None
    search: Optional[str] = None


class ExportOptions(BaseModel):
    include_inactive: bool = True
    date_range: Optional[DateRange] = None
    categories: Optional[List[str]] = None


# --- Results ---

class RecordStats(BaseModel):
    total: int
    active: int
    inactive: int
    total_value: float
    avg_value: float


class AdminStats(BaseModel):
    total_users: int
    total_records: int
    active_records: int
    inactive_records: int


class ImportResult(BaseModel):
    success: bool
    imported: int
    errors: List[str] = Field(default_factory=list)
    duplicates: int = 0
