"""
Configuration management with schema validation.
Settings come from an optional settings.yaml, then environment variables.
"""

import os
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, Field

from .exceptions import StorageError

# Load environment variables
load_dotenv()

DEFAULT_DATA_DIR = "data"
SETTINGS_FILE_NAME = "settings.yaml"


class AppSettings(BaseModel):
    name: str = "RecordHub"
    version: str = "1.0.0"
    environment: str = "development"
    host: str = "127.0.0.1"
    port: int = 8000
    cors_origins: List[str] = Field(default_factory=lambda: ["*"])


class AuthSettings(BaseModel):
    token_expiry_hours: int = 24
    bcrypt_rounds: int = Field(default=12, ge=4, le=31)
    admin_email: str = "admin@example.com"
    admin_password: str = "admin123"
    admin_name: str = "Admin User"


class LoggingSettings(BaseModel):
    level: str = "INFO"
    format: str = "json"
    file_path: Optional[str] = None
    max_bytes: int = 10485760
    backup_count: int = 5


class Settings(BaseModel):
    data_dir: Path = Path(DEFAULT_DATA_DIR)
    app: AppSettings = Field(default_factory=AppSettings)
    auth: AuthSettings = Field(default_factory=AuthSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)


# (section, field, env var, caster)
_ENV_OVERRIDES = [
    ("app", "environment", "ENVIRONMENT", str),
    ("app", "host", "HOST", str),
    ("app", "port", "PORT", int),
    ("app", "cors_origins", "CORS_ORIGINS", lambda v: [o.strip() for o in v.split(",") if o.strip()]),
    ("auth", "token_expiry_hours", "TOKEN_EXPIRY_HOURS", int),
    ("auth", "bcrypt_rounds", "BCRYPT_ROUNDS", int),
    ("auth", "admin_email", "ADMIN_EMAIL", str),
    ("auth", "admin_password", "ADMIN_PASSWORD", str),
    ("auth", "admin_name", "ADMIN_NAME", str),
    ("logging", "level", "LOG_LEVEL", str),
    ("logging", "format", "LOG_FORMAT", str),
    ("logging", "file_path", "LOG_FILE", str),
]


def _substitute_env_vars(value: Any) -> Any:
    """Recursively substitute ${VAR} and ${VAR:default} strings"""
    if isinstance(value, str):
        if value.startswith("${") and value.endswith("}"):
            var_expr = value[2:-1]
            if ":" in var_expr:
                var_name, default = var_expr.split(":", 1)
                return os.getenv(var_name.strip(), default.strip())
            return os.getenv(var_expr, value)
    elif isinstance(value, dict):
        return {k: _substitute_env_vars(v) for k, v in value.items()}
    elif isinstance(value, list):
        return [_substitute_env_vars(item) for item in value]
    return value


def _load_yaml(path: Path) -> Dict[str, Any]:
    try:
        with open(path, "r", encoding="utf-8") as f:
            raw_data = yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError) as e:
        raise StorageError(f"Failed to read settings from {path}: {str(e)}")
    if not isinstance(raw_data, dict):
        raise StorageError(f"Settings file {path} must contain a mapping")
    return _substitute_env_vars(raw_data)


def load_settings(settings_path: Optional[Path] = None) -> Settings:
    """
    Build Settings from YAML (if present) and environment overrides.

    Lookup order for the YAML file: explicit argument, RECORDHUB_SETTINGS,
    then settings.yaml inside the data directory.
    """
    data_dir = Path(os.getenv("RECORDHUB_DATA_DIR", DEFAULT_DATA_DIR))

    if settings_path is None:
        env_path = os.getenv("RECORDHUB_SETTINGS")
        settings_path = Path(env_path) if env_path else data_dir / SETTINGS_FILE_NAME

    raw: Dict[str, Any] = {}
    if settings_path.exists():
        raw = _load_yaml(settings_path)

    raw.setdefault("data_dir", str(data_dir))
    for section, field, env_var, caster in _ENV_OVERRIDES:
        value = os.getenv(env_var)
        if value is None or value == "":
            continue
        raw.setdefault(section, {})[field] = caster(value)

    return Settings(**raw)
