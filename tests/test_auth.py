"""Tests for registration, login and the bearer-token gate."""
from datetime import timedelta

from timeline.utils.security import create_access_token


class TestRegister:

    async def test_register_returns_user_without_password(self, client):
        response = await client.post("/auth/register", json={"username": "carol", "password": "password123"})

        assert response.status_code == 201
        body = response.json()
        assert body["username"] == "carol"
        assert isinstance(body["id"], int)
        assert "password" not in body
        assert "hashed_password" not in body

    async def test_duplicate_username_rejected(self, client, alice):
        response = await client.post("/auth/register", json={"username": "alice", "password": "another-password"})

        assert response.status_code == 400
        assert response.json()["detail"] == "Username already taken"

    async def test_users_get_distinct_ids(self, alice, bob):
        assert alice["id"] != bob["id"]

    async def test_short_password_rejected(self, client):
        response = await client.post("/auth/register", json={"username": "dave", "password": "short"})

        assert response.status_code == 400
        assert "password" in response.json()["detail"]


class TestLogin:

    async def test_wrong_password(self, client, alice):
        response = await client.post("/auth/login", json={"username": "alice", "password": "wrong-password"})

        assert response.status_code == 401

    async def test_unknown_user(self, client):
        response = await client.post("/auth/login", json={"username": "nobody", "password": "password123"})

        assert response.status_code == 401

    async def test_me(self, client, alice):
        response = await client.get("/auth/me", headers=alice["headers"])

        assert response.status_code == 200
        assert response.json()["id"] == alice["id"]
        assert response.json()["username"] == "alice"

    async def test_expired_token_rejected(self, client, alice):
        token = create_access_token(alice["id"], expires_delta=timedelta(seconds=-10))

        response = await client.get("/photos", headers={"Authorization": f"Bearer {token}"})

        assert response.status_code == 401

    async def test_token_for_unknown_user_rejected(self, client):
        token = create_access_token(4242)

        response = await client.get("/photos", headers={"Authorization": f"Bearer {token}"})

        assert response.status_code == 401
