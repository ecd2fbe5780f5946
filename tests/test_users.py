"""
User and auth endpoint tests: registration, login, profile, password
change, avatar upload and account deletion.
"""
import json

import pytest
from httpx import AsyncClient

PASSWORD = "password123"


async def _register(client: AsyncClient, email: str, role: str = "USER") -> tuple[str, str]:
    resp = await client.post("/register", json={
        "username": email,
        "password": PASSWORD,
        "first_name": "Ivan",
        "last_name": "Petrov",
        "phone": "+7 (999) 123-45-67",
        "role": role,
    })
    assert resp.status_code == 201
    return email, PASSWORD


# ---------------------------------------------------------------------------
# Register / login
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
async def test_register_and_login(async_client: AsyncClient):
    email, password = await _register(async_client, "user@example.com")

    resp = await async_client.post("/login", json={"username": email, "password": password})
    assert resp.status_code == 200

    resp = await async_client.post("/login", json={"username": email, "password": "wrongpass1"})
    assert resp.status_code == 401


@pytest.mark.asyncio
async def test_register_duplicate_returns_400(async_client: AsyncClient):
    await _register(async_client, "user@example.com")
    resp = await async_client.post("/register", json={
        "username": "user@example.com",
        "password": "otherpass1",
        "first_name": "Other",
        "last_name": "Person",
        "phone": "+79990000000",
    })
    assert resp.status_code == 400


@pytest.mark.asyncio
async def test_register_invalid_phone_returns_422(async_client: AsyncClient):
    resp = await async_client.post("/register", json={
        "username": "user@example.com",
        "password": PASSWORD,
        "first_name": "Ivan",
        "last_name": "Petrov",
        "phone": "12345",
    })
    assert resp.status_code == 422


# ---------------------------------------------------------------------------
# Profile
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
async def test_get_me(async_client: AsyncClient):
    auth = await _register(async_client, "user@example.com")
    resp = await async_client.get("/users/me", auth=auth)
    assert resp.status_code == 200
    me = resp.json()
    assert me["email"] == "user@example.com"
    assert me["role"] == "USER"
    assert me["image"] is None
    assert "password" not in me


@pytest.mark.asyncio
async def test_update_me(async_client: AsyncClient):
    auth = await _register(async_client, "user@example.com")
    payload = {"first_name": "Sergei", "last_name": "Ivanov", "phone": "+79990000000"}
    resp = await async_client.patch("/users/me", json=payload, auth=auth)
    assert resp.status_code == 200
    assert resp.json() == payload

    me = (await async_client.get("/users/me", auth=auth)).json()
    assert me["first_name"] == "Sergei"
    assert me["phone"] == "+79990000000"


@pytest.mark.asyncio
async def test_set_password(async_client: AsyncClient):
    email, password = await _register(async_client, "user@example.com")

    resp = await async_client.post(
        "/users/set_password",
        json={"current_password": "wrongpass1", "new_password": "newpass123"},
        auth=(email, password),
    )
    assert resp.status_code == 403

    resp = await async_client.post(
        "/users/set_password",
        json={"current_password": password, "new_password": "newpass123"},
        auth=(email, password),
    )
    assert resp.status_code == 200
    assert (await async_client.get("/users/me", auth=(email, password))).status_code == 401
    assert (await async_client.get("/users/me", auth=(email, "newpass123"))).status_code == 200


# ---------------------------------------------------------------------------
# Avatar
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
async def test_upload_avatar_twice(async_client: AsyncClient, images_dir):
    auth = await _register(async_client, "user@example.com")

    resp = await async_client.patch(
        "/users/me/image", files={"image": ("me.png", b"first", "image/png")}, auth=auth
    )
    assert resp.status_code == 200
    first = (await async_client.get("/users/me", auth=auth)).json()["image"]

    resp = await async_client.patch(
        "/users/me/image", files={"image": ("me.png", b"second", "image/png")}, auth=auth
    )
    assert resp.status_code == 200
    second = (await async_client.get("/users/me", auth=auth)).json()["image"]

    assert first != second
    assert (await async_client.get(first, auth=auth)).status_code == 404
    assert (await async_client.get(second, auth=auth)).content == b"second"
    assert len(list(images_dir.iterdir())) == 1


@pytest.mark.asyncio
async def test_upload_empty_avatar_returns_400(async_client: AsyncClient):
    auth = await _register(async_client, "user@example.com")
    resp = await async_client.patch(
        "/users/me/image", files={"image": ("me.png", b"", "image/png")}, auth=auth
    )
    assert resp.status_code == 400


@pytest.mark.asyncio
async def test_missing_image_returns_404(async_client: AsyncClient):
    auth = await _register(async_client, "user@example.com")
    resp = await async_client.get("/images/does-not-exist.png", auth=auth)
    assert resp.status_code == 404


# ---------------------------------------------------------------------------
# Account deletion
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
async def test_delete_account_cascades(async_client: AsyncClient, images_dir):
    seller = await _register(async_client, "seller@example.com")
    other = await _register(async_client, "other@example.com")
    admin = await _register(async_client, "admin@example.com", role="ADMIN")
    resp = await async_client.post(
        "/ads",
        data={"properties": json.dumps({"title": "Old sofa", "price": 10, "description": "Comfortable sofa"})},
        files={"image": ("sofa.png", b"sofa", "image/png")},
        auth=seller,
    )
    assert resp.status_code == 201
    seller_id = (await async_client.get("/users/me", auth=seller)).json()["id"]

    assert (await async_client.delete(f"/users/{seller_id}", auth=other)).status_code == 403
    assert (await async_client.delete(f"/users/{seller_id}", auth=admin)).status_code == 204
    assert (await async_client.delete(f"/users/{seller_id}", auth=admin)).status_code == 404

    assert (await async_client.get("/ads", auth=admin)).json()["count"] == 0
    assert list(images_dir.iterdir()) == []
    assert (await async_client.get("/users/me", auth=seller)).status_code == 401
