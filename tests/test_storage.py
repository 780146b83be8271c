"""Tests for local file storage."""
import pytest

from timeline.exceptions import InvalidFilenameError
from timeline.services.storage import LocalFileStorage


@pytest.fixture
def storage(tmp_path):
    return LocalFileStorage(str(tmp_path / "files"))


async def test_save_keeps_extension_and_content(storage):
    name = await storage.save(b"image-bytes", "Class Photo.JPG")

    assert name.endswith(".jpg")
    assert "Class Photo" not in name
    assert await storage.read(name) == b"image-bytes"
    assert await storage.exists(name)


async def test_saved_names_are_unique(storage):
    first = await storage.save(b"a", "same.png")
    second = await storage.save(b"b", "same.png")

    assert first != second


async def test_delete(storage):
    name = await storage.save(b"a", "a.png")

    assert await storage.delete(name) is True
    assert not await storage.exists(name)
    assert await storage.delete(name) is False


async def test_read_missing(storage):
    with pytest.raises(FileNotFoundError):
        await storage.read("missing.png")


@pytest.mark.parametrize("name", ["", "..", "../secret.txt", "a/b.png", "..\\win.ini", "a\x00b.png"])
def test_resolve_rejects_paths(storage, name):
    with pytest.raises(InvalidFilenameError):
        storage.resolve(name)


async def test_uploads_route_rejects_traversal(client):
    response = await client.get("/uploads/..%2Fpyproject.toml")

    assert response.status_code == 404


async def test_uploads_route_rejects_null_byte(client):
    response = await client.get("/uploads/a%00b.png")

    assert response.status_code == 404
