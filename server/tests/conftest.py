"""
Shared pytest fixtures for server tests.

Every test gets its own SQLite file and upload directory, a fixed signing
key, no conversion delay and cheap bcrypt rounds.
"""

from pathlib import Path
from typing import Callable, Dict

import pytest
from fastapi.testclient import TestClient

from server.config import Settings
from server.main import create_app

TEST_SECRET = "test-secret-key-0123456789abcdef"


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    return Settings(
        secret_key=TEST_SECRET,
        bcrypt_rounds=4,
        database_url=f"sqlite:///{tmp_path / 'test.db'}",
        upload_dir=str(tmp_path / "uploads"),
        conversion_delay=0.0,
        conversion_timeout=5.0,
    )


@pytest.fixture
def app(settings: Settings):
    return create_app(settings)


@pytest.fixture
def client(app):
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def upload_dir(settings: Settings) -> Path:
    return Path(settings.upload_dir)


@pytest.fixture
def signup(client: TestClient) -> Callable[..., Dict]:
    """Create an account and return the response body."""

    def _signup(email: str = "a@x.com", password: str = "secret1", name: str = None) -> Dict:
        payload = {"email": email, "password": password}
        if name is not None:
            payload["name"] = name
        response = client.post("/api/auth/signup", json=payload)
        assert response.status_code == 200, response.text
        return response.json()

    return _signup


def auth_header(token: str) -> Dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


def pdf_upload(name: str = "report.pdf", content: bytes = b"%PDF-1.4\n%test\n", media_type: str = "application/pdf"):
    return {"pdf": (name, content, media_type)}
