"""HTTP tests for /api/user/profile."""

import pytest

from tests.shared.fixtures.api import auth_header, register


class TestGetProfile:
    @pytest.mark.asyncio
    async def test_returns_own_profile(self, client, ava_token):
        response = await client.get("/api/user/profile", headers=auth_header(ava_token))

        assert response.status_code == 200
        assert response.json()["user"]["email"] == "ava@example.com"

    @pytest.mark.asyncio
    async def test_requires_token(self, client):
        response = await client.get("/api/user/profile")

        assert response.status_code == 401
        assert response.json() == {"error": "No token provided"}


class TestUpdateProfile:
    """PUT /api/user/profile"""

    @pytest.mark.asyncio
    async def test_updates_given_fields_only(self, client, ava_token):
        response = await client.put(
            "/api/user/profile",
            headers=auth_header(ava_token),
            json={
                "bio": "Drum and bass all day",
                "favoriteArtists": ["Noisia", "Calibre"],
                "profilePicture": "https://cdn.example.com/ava.png",
            },
        )

        assert response.status_code == 200
        user = response.json()["user"]
        assert user["bio"] == "Drum and bass all day"
        assert user["favoriteArtists"] == ["Noisia", "Calibre"]
        assert user["profilePicture"] == "https://cdn.example.com/ava.png"
        assert user["name"] == "Ava"
        assert user["username"] == "ava"

    @pytest.mark.asyncio
    async def test_changes_are_persisted(self, client, ava_token):
        await client.put(
            "/api/user/profile",
            headers=auth_header(ava_token),
            json={"name": "Ava B", "username": "ava_b"},
        )

        response = await client.get("/api/auth/me", headers=auth_header(ava_token))

        assert response.json()["user"]["name"] == "Ava B"
        assert response.json()["user"]["username"] == "ava_b"

    @pytest.mark.asyncio
    async def test_taken_username_rejected(self, client, ava_token):
        await register(client, email="bob@example.com", name="Bob")

        response = await client.put(
            "/api/user/profile",
            headers=auth_header(ava_token),
            json={"username": "bob"},
        )

        assert response.status_code == 400
        assert response.json() == {"error": "Username is already taken"}

    @pytest.mark.asyncio
    async def test_keeping_own_username_is_allowed(self, client, ava_token):
        response = await client.put(
            "/api/user/profile",
            headers=auth_header(ava_token),
            json={"username": "ava", "bio": "same name"},
        )

        assert response.status_code == 200

    @pytest.mark.asyncio
    async def test_requires_valid_token(self, client):
        response = await client.put(
            "/api/user/profile",
            headers=auth_header("garbage"),
            json={"bio": "x"},
        )

        assert response.status_code == 401
