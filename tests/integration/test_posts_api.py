"""Integration tests for the posts API."""
from __future__ import annotations

import base64
import os
from datetime import UTC, datetime, timedelta
from uuid import uuid4

import pytest
from httpx import AsyncClient

pytestmark = pytest.mark.integration

T = datetime(2025, 1, 15, 12, 0, tzinfo=UTC)


def _caller(user) -> dict[str, str]:
    return {"X-User-Id": str(user.id)}


class TestListPosts:
    async def test_pages_follow_next_cursor(self, client: AsyncClient, make_post):
        created = [await make_post(title=f"post {i}", created_at=T - timedelta(minutes=i)) for i in range(5)]

        seen = []
        cursor = None
        while True:
            params = {"limit": 2}
            if cursor:
                params["cursor"] = cursor
            response = await client.get("/api/v1/posts", params=params)
            assert response.status_code == 200
            body = response.json()
            assert body["total"] == 5
            assert body["limit"] == 2
            seen.extend(item["id"] for item in body["items"])
            assert (body["next_cursor"] is not None) == body["has_more"]
            if not body["has_more"]:
                break
            cursor = body["next_cursor"]

        assert seen == [str(p.id) for p in created]

    async def test_response_shape(self, client: AsyncClient, make_post, user, category):
        post = await make_post(title="Hello", content="World", tags=["b", "a"])

        response = await client.get("/api/v1/posts")

        item = response.json()["items"][0]
        assert item["id"] == str(post.id)
        assert item["title"] == "Hello"
        assert item["content"] == "World"
        assert sorted(item["tags"]) == ["a", "b"]
        assert item["owner_id"] == str(user.id)
        assert item["category_id"] == str(category.id)
        assert item["category"] == {"id": str(category.id), "name": "Technology"}
        assert item["owner"] == {
            "id": str(user.id),
            "email": "ada@example.com",
            "first_name": "Ada",
            "last_name": "Lovelace",
        }

    async def test_default_limit(self, client: AsyncClient, make_post):
        for i in range(12):
            await make_post(created_at=T - timedelta(minutes=i))

        body = (await client.get("/api/v1/posts")).json()

        assert body["limit"] == 10
        assert len(body["items"]) == 10
        assert body["has_more"] is True

    async def test_filters_and_sort(self, client: AsyncClient, make_post):
        await make_post(title="b python", tags=["python"], created_at=T)
        await make_post(title="a python", tags=["python"], created_at=T - timedelta(minutes=1))
        await make_post(title="c rust", tags=["rust"], created_at=T - timedelta(minutes=2))

        response = await client.get(
            "/api/v1/posts",
            params={"q": "PYTHON", "tags": ["python", "go"], "sort_by": "title", "sort_order": "asc"},
        )

        assert response.status_code == 200
        assert [item["title"] for item in response.json()["items"]] == ["a python", "b python"]

    async def test_include_total_false(self, client: AsyncClient, make_post):
        await make_post()

        body = (await client.get("/api/v1/posts", params={"include_total": "false"})).json()

        assert body["total"] is None

    async def test_mine_only(self, client: AsyncClient, make_post, user, other_user):
        mine = await make_post(owner_id=user.id)
        await make_post(owner_id=other_user.id)

        response = await client.get(
            "/api/v1/posts", params={"mine_only": "true"}, headers=_caller(user)
        )

        assert [item["id"] for item in response.json()["items"]] == [str(mine.id)]

    async def test_mine_only_without_identity(self, client: AsyncClient):
        response = await client.get("/api/v1/posts", params={"mine_only": "true"})

        assert response.status_code == 400
        body = response.json()
        assert body["type"] == "invalid-filter"
        assert body["field"] == "mine_only"

    async def test_random_cursor(self, client: AsyncClient, make_post):
        await make_post()
        cursor = base64.urlsafe_b64encode(os.urandom(32)).rstrip(b"=").decode()

        response = await client.get("/api/v1/posts", params={"cursor": cursor})

        assert response.status_code == 400
        body = response.json()
        assert body["type"] == "invalid-cursor"
        assert body["status"] == 400
        assert "reason" in body

    @pytest.mark.parametrize(
        ("params", "field"),
        [
            ({"category_id": "nope"}, "category_id"),
            ({"owner_id": "nope"}, "owner_id"),
            ({"sort_by": "content"}, "sort_by"),
            ({"sort_order": "up"}, "sort_order"),
            ({"limit": 101}, "limit"),
        ],
    )
    async def test_invalid_filters(self, client: AsyncClient, params, field):
        response = await client.get("/api/v1/posts", params=params)

        assert response.status_code == 400
        body = response.json()
        assert body["type"] == "invalid-filter"
        assert body["field"] == field

    async def test_limit_below_one_fails_validation(self, client: AsyncClient):
        response = await client.get("/api/v1/posts", params={"limit": 0})

        assert response.status_code == 422
        assert response.json()["type"] == "validation-error"

    async def test_store_failure_is_503(self, client: AsyncClient, database):
        await database.drop_all()

        response = await client.get("/api/v1/posts")

        assert response.status_code == 503
        body = response.json()
        assert body["type"] == "store-unavailable"
        assert body["retryable"] is True


class TestWritePosts:
    async def test_create_post(self, client: AsyncClient, user, category):
        response = await client.post(
            "/api/v1/posts",
            json={
                "title": "  Keyset pagination ",
                "content": "Why OFFSET does not scale",
                "category_id": str(category.id),
                "tags": ["db", " api", "db"],
            },
            headers=_caller(user),
        )

        assert response.status_code == 201
        body = response.json()
        assert body["title"] == "Keyset pagination"
        assert sorted(body["tags"]) == ["api", "db"]
        assert body["owner"] == {
            "id": str(user.id),
            "email": "ada@example.com",
            "first_name": "Ada",
            "last_name": "Lovelace",
        }
        assert body["category"] == {"id": str(category.id), "name": "Technology"}

        listed = (await client.get("/api/v1/posts")).json()
        assert [item["id"] for item in listed["items"]] == [body["id"]]

    async def test_create_requires_identity(self, client: AsyncClient, category):
        response = await client.post(
            "/api/v1/posts",
            json={"title": "t", "content": "c", "category_id": str(category.id)},
        )

        assert response.status_code == 401

    async def test_create_with_unknown_user(self, client: AsyncClient, category):
        response = await client.post(
            "/api/v1/posts",
            json={"title": "t", "content": "c", "category_id": str(category.id)},
            headers={"X-User-Id": str(uuid4())},
        )

        assert response.status_code == 401
        assert response.json()["type"] == "unknown-user"

    async def test_malformed_identity_header(self, client: AsyncClient):
        response = await client.get("/api/v1/posts", headers={"X-User-Id": "bogus"})

        assert response.status_code == 401
        assert response.json()["type"] == "invalid-identity"

    async def test_create_with_unknown_category(self, client: AsyncClient, user):
        response = await client.post(
            "/api/v1/posts",
            json={"title": "t", "content": "c", "category_id": str(uuid4())},
            headers=_caller(user),
        )

        assert response.status_code == 404
        assert response.json()["type"] == "category-not-found"

    async def test_create_validates_payload(self, client: AsyncClient, user, category):
        response = await client.post(
            "/api/v1/posts",
            json={"title": "", "content": "c", "category_id": str(category.id)},
            headers=_caller(user),
        )

        assert response.status_code == 422
        fields = [error["field"] for error in response.json()["errors"]]
        assert "body.title" in fields

    async def test_get_post(self, client: AsyncClient, make_post):
        post = await make_post(title="Detail")

        response = await client.get(f"/api/v1/posts/{post.id}")

        assert response.status_code == 200
        body = response.json()
        assert body["title"] == "Detail"
        assert body["category"]["name"] == "Technology"
        assert body["owner"]["first_name"] == "Ada"

    async def test_get_missing_post(self, client: AsyncClient):
        response = await client.get(f"/api/v1/posts/{uuid4()}")

        assert response.status_code == 404
        assert response.json()["type"] == "post-not-found"

    async def test_partial_update(self, client: AsyncClient, make_post, user):
        post = await make_post(title="Old", content="Body", tags=["keep"])

        response = await client.patch(
            f"/api/v1/posts/{post.id}", json={"title": "New"}, headers=_caller(user)
        )

        assert response.status_code == 200
        body = response.json()
        assert body["title"] == "New"
        assert body["content"] == "Body"
        assert body["tags"] == ["keep"]

    async def test_update_replaces_tags(self, client: AsyncClient, make_post, user):
        post = await make_post(tags=["a", "b"])

        response = await client.patch(
            f"/api/v1/posts/{post.id}", json={"tags": ["b", "c"]}, headers=_caller(user)
        )

        assert sorted(response.json()["tags"]) == ["b", "c"]

    async def test_update_by_other_user_is_not_found(self, client: AsyncClient, make_post, other_user):
        post = await make_post()

        response = await client.patch(
            f"/api/v1/posts/{post.id}", json={"title": "Hijack"}, headers=_caller(other_user)
        )

        assert response.status_code == 404

    async def test_delete_post(self, client: AsyncClient, make_post, user):
        post = await make_post()

        response = await client.delete(f"/api/v1/posts/{post.id}", headers=_caller(user))

        assert response.status_code == 204
        assert (await client.get(f"/api/v1/posts/{post.id}")).status_code == 404
        assert (await client.get("/api/v1/posts")).json()["total"] == 0

    async def test_delete_by_other_user_is_not_found(self, client: AsyncClient, make_post, other_user):
        post = await make_post()

        response = await client.delete(f"/api/v1/posts/{post.id}", headers=_caller(other_user))

        assert response.status_code == 404
