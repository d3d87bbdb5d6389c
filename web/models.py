"""API request/response models"""

from typing import Any, List, Optional

from pydantic import BaseModel, Field

from recordhub.models import AuthUser


class LoginRequest(BaseModel):
    email: str
    password: str


class SignupRequest(BaseModel):
    name: str
    email: str
    password: str
    confirm_password: str


class UserPublic(BaseModel):
    id: str
    email: str
    name: str
    role: str

    @classmethod
    def from_auth_user(cls, user: AuthUser) -> "UserPublic":
        return cls(id=user.id, email=user.email, name=user.name, role=user.role)


class AuthResponse(BaseModel):
    token: str
    user: UserPublic


class RecordRequest(BaseModel):
    """Record body; fields are validated by the record manager"""
    title: Any = None
    description: Any = None
    category: Any = None
    value: Any = None
    status: Any = None


class UserUpdateRequest(BaseModel):
    name: Optional[str] = None
    email: Optional[str] = None
    role: Optional[str] = None


class ImportRequest(BaseModel):
    rows: List[List[Any]] = Field(default_factory=list)


class ExportResponse(BaseModel):
    rows: List[List[Any]]
