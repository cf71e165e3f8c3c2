"""
Shared fixtures for the K-Guardian API tests.

The environment is prepared before ``kguardian`` is imported because settings
and the engine are created at import time.
"""

import asyncio
import os
import tempfile
from datetime import datetime, timezone
from types import SimpleNamespace

_db_dir = tempfile.mkdtemp(prefix="kguardian-tests-")
os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{_db_dir}/test.db"
os.environ["SECRET_KEY"] = "test-secret"
os.environ["JWT_AUDIENCE"] = "authenticated"
os.environ["REDIS_URL"] = "redis://localhost:6379/15"

import pytest
from fastapi.testclient import TestClient

from kguardian.core.database import AsyncSessionLocal, Base, engine
from kguardian.core.events import get_publisher
from kguardian.core.exceptions import StorageError
from kguardian.core.security import create_access_token
from kguardian.core.storage import get_media_storage
from kguardian.main import app


# =============================================================
# Fakes for external collaborators
# =============================================================

class FakePublisher:
    def __init__(self):
        self.published = []

    async def incident_reported(self, incident):
        self.published.append(incident.id)
        return True


class FakeStorage:
    def __init__(self):
        self.uploads = []
        self.fail = False

    async def upload(self, filename, data, content_type):
        if self.fail:
            raise StorageError("Image upload failed. Please try again.")
        self.uploads.append((filename, len(data), content_type))
        return f"http://media.test/kguardian/{filename}"


# =============================================================
# Helpers
# =============================================================

def make_incident(**overrides):
    """Plain attribute bag shaped like an Incident row."""
    values = {
        "id": "3f2b8c1e-0000-4000-8000-000000000000",
        "title": "Gate left open",
        "description": "The side gate was left open overnight near the hostel.",
        "incident_type": "unauthorized-entry",
        "location": "Main Gate",
        "media_url": None,
        "status": "Pending",
        "reported_by": "user-1",
        "created_at": datetime(2026, 10, 1, 9, 30, tzinfo=timezone.utc),
    }
    values.update(overrides)
    return SimpleNamespace(**values)


def seed(*incidents):
    """Insert ORM incidents directly, bypassing the API."""
    async def _seed():
        async with AsyncSessionLocal() as session:
            session.add_all(incidents)
            await session.commit()
    asyncio.run(_seed())


async def _reset_schema():
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
        await conn.run_sync(Base.metadata.create_all)


# =============================================================
# Fixtures
# =============================================================

@pytest.fixture
def publisher():
    return FakePublisher()


@pytest.fixture
def storage():
    return FakeStorage()


@pytest.fixture
def client(publisher, storage):
    asyncio.run(_reset_schema())
    app.dependency_overrides[get_publisher] = lambda: publisher
    app.dependency_overrides[get_media_storage] = lambda: storage
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def token_for():
    def _token_for(user_id="user-1", email="asha@example.edu", full_name="Asha Menon"):
        claims = {"sub": user_id, "email": email}
        if full_name is not None:
            claims["user_metadata"] = {"full_name": full_name}
        return create_access_token(claims)
    return _token_for


@pytest.fixture
def auth_headers(token_for):
    return {"Authorization": f"Bearer {token_for()}"}
