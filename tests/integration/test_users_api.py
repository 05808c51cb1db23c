"""Integration tests for the users API."""
from __future__ import annotations

from uuid import uuid4

import pytest
from httpx import AsyncClient

pytestmark = pytest.mark.integration


async def test_create_user_lowercases_email(client: AsyncClient):
    response = await client.post(
        "/api/v1/users",
        json={"email": "Jane@Example.COM", "first_name": "Jane", "last_name": "Doe"},
    )

    assert response.status_code == 201
    body = response.json()
    assert body["email"] == "jane@example.com"

    fetched = await client.get(f"/api/v1/users/{body['id']}")
    assert fetched.json()["first_name"] == "Jane"


async def test_duplicate_email_conflicts(client: AsyncClient, user):
    response = await client.post(
        "/api/v1/users",
        json={"email": user.email, "first_name": "Other", "last_name": "Person"},
    )

    assert response.status_code == 409
    assert response.json()["type"] == "user-exists"


async def test_invalid_email(client: AsyncClient):
    response = await client.post(
        "/api/v1/users",
        json={"email": "not-an-email", "first_name": "A", "last_name": "B"},
    )

    assert response.status_code == 422


async def test_list_users(client: AsyncClient, user, other_user):
    response = await client.get("/api/v1/users")

    assert response.status_code == 200
    emails = sorted(u["email"] for u in response.json())
    assert emails == ["ada@example.com", "grace@example.com"]


async def test_missing_user(client: AsyncClient):
    response = await client.get(f"/api/v1/users/{uuid4()}")

    assert response.status_code == 404
