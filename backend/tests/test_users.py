"""Tests for user endpoints: register, update, me."""

from datetime import timedelta

import pytest
from httpx import AsyncClient

from squawk.core.tokens import make_jwt


async def _access_token(client: AsyncClient, email: str = "a@b.com", password: str = "secret1") -> str:
    resp = await client.post("/api/v1/auth/login", json={"email": email, "password": password})
    assert resp.status_code == 200
    return resp.json()["access_token"]


@pytest.mark.asyncio
async def test_register(client: AsyncClient):
    resp = await client.post("/api/v1/users", json={"email": "New@Test.com", "password": "securepass123"})
    assert resp.status_code == 201
    data = resp.json()
    assert data["email"] == "new@test.com"
    assert data["is_premium"] is False
    assert "hashed_password" not in data


@pytest.mark.asyncio
async def test_register_duplicate_email(client: AsyncClient, test_user):
    resp = await client.post("/api/v1/users", json={"email": "a@b.com", "password": "other"})
    assert resp.status_code == 409


@pytest.mark.asyncio
async def test_register_then_login(client: AsyncClient):
    await client.post("/api/v1/users", json={"email": "c@d.com", "password": "pw"})
    assert await _access_token(client, "c@d.com", "pw")


@pytest.mark.asyncio
async def test_update_credentials(client: AsyncClient, test_user):
    token = await _access_token(client)
    resp = await client.put(
        "/api/v1/users",
        json={"email": "changed@b.com", "password": "secret2"},
        headers={"Authorization": f"Bearer {token}"},
    )
    assert resp.status_code == 200
    assert resp.json()["email"] == "changed@b.com"
    assert resp.json()["id"] == str(test_user.id)
    assert await _access_token(client, "changed@b.com", "secret2")


@pytest.mark.asyncio
async def test_update_requires_token(client: AsyncClient, test_user):
    resp = await client.put("/api/v1/users", json={"email": "x@b.com", "password": "pw"})
    assert resp.status_code == 400
    resp = await client.put(
        "/api/v1/users",
        json={"email": "x@b.com", "password": "pw"},
        headers={"Authorization": "Bearer not-a-jwt"},
    )
    assert resp.status_code == 401


@pytest.mark.asyncio
async def test_update_to_taken_email(client: AsyncClient, store, hasher, test_user):
    await store.create_user("taken@b.com", hasher.hash("pw"))
    token = await _access_token(client)
    resp = await client.put(
        "/api/v1/users",
        json={"email": "taken@b.com", "password": "pw"},
        headers={"Authorization": f"Bearer {token}"},
    )
    assert resp.status_code == 409


@pytest.mark.asyncio
async def test_me(client: AsyncClient, test_user):
    token = await _access_token(client)
    resp = await client.get("/api/v1/users/me", headers={"Authorization": f"Bearer {token}"})
    assert resp.status_code == 200
    assert resp.json()["email"] == "a@b.com"


@pytest.mark.asyncio
async def test_me_with_token_signed_by_another_secret(client: AsyncClient, test_user):
    token = make_jwt(test_user.id, "some-other-secret", timedelta(hours=1))
    resp = await client.get("/api/v1/users/me", headers={"Authorization": f"Bearer {token}"})
    assert resp.status_code == 401
