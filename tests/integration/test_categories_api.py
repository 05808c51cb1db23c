"""Integration tests for the categories API."""
from __future__ import annotations

from uuid import uuid4

import pytest
from httpx import AsyncClient

pytestmark = pytest.mark.integration


async def _create(client: AsyncClient, name: str, description: str | None = None) -> dict:
    response = await client.post(
        "/api/v1/categories", json={"name": name, "description": description}
    )
    assert response.status_code == 201
    return response.json()


async def test_create_and_get(client: AsyncClient):
    created = await _create(client, "Technology", "Software")

    response = await client.get(f"/api/v1/categories/{created['id']}")

    assert response.status_code == 200
    assert response.json()["name"] == "Technology"
    assert response.json()["description"] == "Software"


async def test_duplicate_name_conflicts(client: AsyncClient):
    await _create(client, "Travel")

    response = await client.post("/api/v1/categories", json={"name": "Travel"})

    assert response.status_code == 409
    assert response.json()["type"] == "category-exists"


async def test_list_filters_by_name(client: AsyncClient):
    await _create(client, "Technology")
    await _create(client, "Travel")
    await _create(client, "Business")

    response = await client.get("/api/v1/categories", params={"name": "t"})

    names = sorted(c["name"] for c in response.json())
    assert names == ["Technology", "Travel"]


async def test_list_pagination(client: AsyncClient):
    for name in ("One", "Two", "Three"):
        await _create(client, name)

    response = await client.get("/api/v1/categories", params={"limit": 2, "offset": 1})

    assert response.status_code == 200
    assert len(response.json()) == 2


async def test_update(client: AsyncClient):
    created = await _create(client, "Lifestyle")

    response = await client.patch(
        f"/api/v1/categories/{created['id']}", json={"description": "Living well"}
    )

    assert response.status_code == 200
    assert response.json()["name"] == "Lifestyle"
    assert response.json()["description"] == "Living well"


async def test_update_to_taken_name_conflicts(client: AsyncClient):
    await _create(client, "Health")
    other = await _create(client, "Fitness")

    response = await client.patch(f"/api/v1/categories/{other['id']}", json={"name": "Health"})

    assert response.status_code == 409


async def test_delete(client: AsyncClient):
    created = await _create(client, "Ephemeral")

    response = await client.delete(f"/api/v1/categories/{created['id']}")

    assert response.status_code == 204
    assert (await client.get(f"/api/v1/categories/{created['id']}")).status_code == 404


async def test_delete_category_with_posts_conflicts(client: AsyncClient, make_post, category):
    await make_post()

    response = await client.delete(f"/api/v1/categories/{category.id}")

    assert response.status_code == 409
    assert response.json()["type"] == "category-in-use"


async def test_missing_category(client: AsyncClient):
    response = await client.get(f"/api/v1/categories/{uuid4()}")

    assert response.status_code == 404
    assert response.json()["type"] == "category-not-found"
