"""
Pytest configuration and fixtures.
"""

import os
import sys
from pathlib import Path

import pytest

# Add project root to Python path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

# Set test environment
os.environ.setdefault("ENVIRONMENT", "development")
os.environ.setdefault("DEBUG", "true")
os.environ.setdefault("STORAGE_BACKEND", "memory")

from fastapi.testclient import TestClient  # noqa: E402

from api.server import create_app  # noqa: E402
from core.config import Settings  # noqa: E402
from core.storage.memory import MemoryRecordStore  # noqa: E402
from core.uploads import LocalUploadStorage  # noqa: E402


@pytest.fixture
def store():
    """Fresh in-memory record store."""
    return MemoryRecordStore()


@pytest.fixture
def uploads(tmp_path):
    """Upload storage writing into a temporary directory."""
    storage = LocalUploadStorage(tmp_path / "uploads")
    storage.setup()
    return storage


@pytest.fixture
def settings(tmp_path):
    return Settings(
        storage_backend="memory",
        upload_dir=str(tmp_path / "uploads"),
        public_dir=str(tmp_path / "public"),
        debug=True,
    )


@pytest.fixture
def app(settings, store):
    """Application wired to the in-memory store."""
    return create_app(settings=settings, store=store)


@pytest.fixture
def client(app):
    """Test client with the lifespan running."""
    with TestClient(app) as test_client:
        yield test_client
