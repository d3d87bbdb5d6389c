import pytest

from recordhub.app import RecordHubApp
from recordhub.store import MemoryStore
from recordhub.utils.config import AuthSettings, Settings


@pytest.fixture
def settings(tmp_path):
    """Isolated data dir and cheap bcrypt rounds"""
    return Settings(data_dir=tmp_path, auth=AuthSettings(bcrypt_rounds=4))


@pytest.fixture
def store():
    return MemoryStore()


@pytest.fixture
def hub(settings, store):
    return RecordHubApp(settings=settings, store=store)


def signup_data(name="Alice Smith", email="alice@example.com", password="secret123", confirm=None):
    return {
        "name": name,
        "email": email,
        "password": password,
        "confirm_password": password if confirm is None else confirm,
    }


def record_data(title="Report", value=10, status="active", category="Finance", description="Quarterly numbers"):
    return {
        "title": title,
        "description": description,
        "category": category,
        "value": value,
        "status": status,
    }
