"""
Session tokens.

A token is base64-encoded JSON {id, email, role, exp} with exp in
milliseconds since the epoch. Tokens are unsigned: anyone holding a
well-formed unexpired token is treated as that user.
"""

import base64
import json
import time
from typing import Optional

from ..models import AuthUser, User
from ..store import TOKEN_KEY, KeyValueStore

TOKEN_EXPIRY_HOURS = 24


def _now_ms() -> int:
    return int(time.time() * 1000)


def generate_token(
    user: User,
    expiry_hours: int = TOKEN_EXPIRY_HOURS,
    now_ms: Optional[int] = None,
) -> str:
    issued = _now_ms() if now_ms is None else now_ms
    payload = {
        "id": user.id,
        "email": user.email,
        "role": user.role,
        "exp": issued + expiry_hours * 60 * 60 * 1000,
    }
    raw = json.dumps(payload, separators=(",", ":")).encode("utf-8")
    return base64.b64encode(raw).decode("ascii")


def validate_token(token: str, now_ms: Optional[int] = None) -> Optional[AuthUser]:
    """Decode token; None when malformed or expired"""
    if not token:
        return None
    try:
        payload = json.loads(base64.b64decode(token.encode("ascii"), validate=True))
        exp = payload["exp"]
        if not isinstance(exp, (int, float)) or isinstance(exp, bool):
            return None
        now = _now_ms() if now_ms is None else now_ms
        if exp < now:
            return None
        return AuthUser(
            id=payload["id"],
            email=payload["email"],
            name=payload.get("name") or "",
            role=payload["role"],
            token=token,
        )
    # binascii.Error, JSONDecodeError, UnicodeError and pydantic's
    # ValidationError all derive from ValueError
    except (ValueError, TypeError, KeyError, AttributeError):
        return None


class AuthStorage:
    """The persisted session token"""

    def __init__(self, store: KeyValueStore):
        self.store = store

    def get_token(self) -> Optional[str]:
        token = self.store.get(TOKEN_KEY)
        return token if isinstance(token, str) else None

    def set_token(self, token: str) -> None:
        self.store.set(TOKEN_KEY, token)

    def remove_token(self) -> None:
        self.store.remove(TOKEN_KEY)

    def get_user(self) -> Optional[AuthUser]:
        token = self.get_token()
        return validate_token(token) if token else None
