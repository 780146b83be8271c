"""
Pytest configuration and fixtures for School Timeline tests.

The environment is pointed at a throwaway SQLite file and upload directory
before any timeline module reads its settings.
"""
import os
import tempfile
from pathlib import Path
from typing import AsyncGenerator, Dict

_TEST_ROOT = Path(tempfile.mkdtemp(prefix="timeline-tests-"))
os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{_TEST_ROOT / 'test.db'}"
os.environ["UPLOAD_DIR"] = str(_TEST_ROOT / "uploads")
os.environ["JWT_SECRET_KEY"] = "test-secret"
os.environ["LOG_DIR"] = ""

import httpx  # noqa: E402
import pytest  # noqa: E402

import timeline.models  # noqa: E402,F401
from timeline.database import Base, engine  # noqa: E402
from timeline.main import app  # noqa: E402
from timeline.services.storage import get_storage_service  # noqa: E402

# Smallest valid PNG (1x1 pixel)
PNG_BYTES = bytes.fromhex(
    "89504e470d0a1a0a0000000d49484452000000010000000108060000001f15c489"
    "0000000d49444154789c6360000002000154a24f5d0000000049454e44ae426082"
)


@pytest.fixture(autouse=True)
async def reset_database() -> AsyncGenerator[None, None]:
    """Recreate all tables for every test."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
        await conn.run_sync(Base.metadata.create_all)
    yield


@pytest.fixture
def upload_dir() -> Path:
    return get_storage_service().root


@pytest.fixture
async def client() -> AsyncGenerator[httpx.AsyncClient, None]:
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


async def register_and_login(client: httpx.AsyncClient, username: str, password: str = "password123") -> Dict:
    """Register a user and return its id and bearer headers."""
    response = await client.post("/auth/register", json={"username": username, "password": password})
    assert response.status_code == 201, response.text
    user_id = response.json()["id"]

    response = await client.post("/auth/login", json={"username": username, "password": password})
    assert response.status_code == 200, response.text
    token = response.json()["access_token"]
    return {"id": user_id, "token": token, "headers": {"Authorization": f"Bearer {token}"}}


@pytest.fixture
async def alice(client: httpx.AsyncClient) -> Dict:
    return await register_and_login(client, "alice")


@pytest.fixture
async def bob(client: httpx.AsyncClient) -> Dict:
    return await register_and_login(client, "bob")


@pytest.fixture
def png_bytes() -> bytes:
    return PNG_BYTES
