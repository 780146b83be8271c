"""Tests for the async API client and its command line."""
import httpx
import pytest

from timeline.client import TimelineClient, TimelineClientError, _build_parser
from timeline.main import app


@pytest.fixture
async def timeline_client():
    client = TimelineClient("http://test", transport=httpx.ASGITransport(app=app))
    yield client
    await client.aclose()


async def logged_in(username: str) -> TimelineClient:
    client = TimelineClient("http://test", transport=httpx.ASGITransport(app=app))
    await client.register(username, "password123")
    await client.login(username, "password123")
    return client


async def test_login_loads_current_user(timeline_client):
    await timeline_client.register("erin", "password123")

    user = await timeline_client.login("erin", "password123")

    assert user["username"] == "erin"
    assert timeline_client.current_user == user
    assert timeline_client.token


async def test_feed_is_cached_until_a_mutation(png_bytes):
    client = await logged_in("frank")
    try:
        assert await client.get_feed() == []
        assert client.feed_is_cached

        photo = await client.upload_file(png_bytes, "Science fair projects", filename="fair.png")
        assert not client.feed_is_cached

        feed = await client.get_feed()
        assert [p["id"] for p in feed] == [photo["id"]]

        await client.like(photo["id"])
        assert not client.feed_is_cached
        assert (await client.get_feed())[0]["likes"] == 1

        await client.delete(photo["id"])
        assert await client.get_feed() == []
    finally:
        await client.aclose()


async def test_upload_url_uses_json(timeline_client):
    await timeline_client.register("gina", "password123")
    await timeline_client.login("gina", "password123")

    photo = await timeline_client.upload_url("https://images.example.com/trip.jpg", "Field trip")

    assert photo["image_url"] == "https://images.example.com/trip.jpg"
    assert photo["filename"] is None


async def test_upload_file_from_path(timeline_client, png_bytes, tmp_path):
    path = tmp_path / "sports-day.png"
    path.write_bytes(png_bytes)
    await timeline_client.register("hank", "password123")
    await timeline_client.login("hank", "password123")

    photo = await timeline_client.upload_file(path, "Sports day")

    assert photo["filename"].endswith(".png")


async def test_delete_control_only_for_owner(png_bytes):
    owner = await logged_in("ivy")
    other = await logged_in("jack")
    try:
        await owner.upload_file(png_bytes, "Art class", filename="art.png")

        owner_card = owner.render_card((await owner.get_feed())[0])
        other_card = other.render_card((await other.get_feed())[0])

        assert "[delete]" in owner_card
        assert "[delete]" not in other_card
        assert "Art class" in other_card
        assert "ivy" in other_card
        assert "likes: 0" in other_card
    finally:
        await owner.aclose()
        await other.aclose()


async def test_errors_raise_client_error(png_bytes):
    owner = await logged_in("kate")
    other = await logged_in("leo")
    try:
        photo = await owner.upload_file(png_bytes, "Choir", filename="choir.png")

        with pytest.raises(TimelineClientError) as excinfo:
            await other.delete(photo["id"])

        assert excinfo.value.status_code == 404
        assert excinfo.value.detail == "Photo not found"
    finally:
        await owner.aclose()
        await other.aclose()


async def test_unauthenticated_feed(timeline_client):
    with pytest.raises(TimelineClientError) as excinfo:
        await timeline_client.get_feed()

    assert excinfo.value.status_code == 401


def test_render_card_prefers_taken_at():
    client = TimelineClient("http://test")
    photo = {
        "id": 3,
        "user_id": 2,
        "username": "usuario2",
        "description": "Science fair projects",
        "image_url": "/uploads/abc.jpg",
        "likes": 15,
        "taken_at": "2024-01-20T00:00:00",
        "created_at": "2024-03-01T12:00:00",
    }

    card = client.render_card(photo)

    assert card.splitlines()[0] == "#3 usuario2 - 2024-01-20"
    assert "likes: 15" in card
    assert "[delete]" not in card


def test_cli_parser():
    args = _build_parser().parse_args(["--token", "t", "upload", "photo.jpg", "Graduation", "--taken-at", "2024-01-15"])

    assert args.command == "upload"
    assert args.source == "photo.jpg"
    assert args.description == "Graduation"
    assert args.taken_at.year == 2024
    assert args.token == "t"


async def test_error_body_that_is_not_an_object():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(502, json=["upstream", "unavailable"])

    client = TimelineClient("http://test", token="t", transport=httpx.MockTransport(handler))
    try:
        with pytest.raises(TimelineClientError) as excinfo:
            await client.get_feed()
    finally:
        await client.aclose()

    assert excinfo.value.status_code == 502
    assert isinstance(excinfo.value.detail, str)
    assert "upstream" in excinfo.value.detail
