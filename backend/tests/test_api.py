"""API tests over the ASGI app with the test database."""

from uuid import UUID, uuid4

from sqlalchemy import func, select

from dealboard.models import Deal, DealVote, User
from dealboard.models.deal import STATUS_PENDING
from dealboard.voting.reconciler import SIGN_IN_MESSAGE, VOTE_FAILED_MESSAGE
from dealboard.voting.store import SqlVoteStore
from dealboard.core.exceptions import PersistenceError


class TestHealth:
    async def test_health(self, client):
        response = await client.get("/api/v1/health")

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "ok"
        assert body["database"] == "ok"
        assert body["environment"] == "test"

    async def test_cache_outage_is_degraded(self, client, fake_cache, monkeypatch):
        async def unreachable():
            return False

        monkeypatch.setattr(fake_cache, "health_check", unreachable)

        response = await client.get("/api/v1/health")

        assert response.json()["status"] == "degraded"
        assert response.json()["cache"] == "unreachable"


class TestAuthApi:
    async def test_register_login_me(self, client):
        response = await client.post(
            "/api/v1/auth/register",
            json={"email": "dave@example.com", "username": "dave", "password": "hunter2hunter"},
        )
        assert response.status_code == 201

        response = await client.post(
            "/api/v1/auth/login",
            json={"email": "dave@example.com", "password": "hunter2hunter"},
        )
        assert response.status_code == 200
        token = response.json()["data"]["token"]["access_token"]

        response = await client.get("/api/v1/auth/me", headers={"Authorization": f"Bearer {token}"})
        assert response.status_code == 200
        assert response.json()["data"]["username"] == "dave"
        assert response.json()["data"]["role"] == "user"

    async def test_update_own_profile(self, client, sample_user: User, auth_headers):
        response = await client.patch(
            "/api/v1/auth/me",
            json={"full_name": "Alice Liddell"},
            headers=auth_headers(sample_user),
        )

        assert response.status_code == 200
        assert response.json()["data"]["full_name"] == "Alice Liddell"
        assert response.json()["data"]["role"] == "user"

    async def test_bad_login(self, client, sample_user: User):
        response = await client.post(
            "/api/v1/auth/login",
            json={"email": "alice@example.com", "password": "not-the-password1"},
        )
        assert response.status_code == 401


class TestDealsApi:
    async def test_list_deals(self, client, sample_deal: Deal):
        response = await client.get("/api/v1/deals")

        assert response.status_code == 200
        body = response.json()
        assert body["meta"]["limit"] == 12
        assert body["meta"]["total"] == 1
        assert body["data"][0]["heat"]["tier"] == "neutral"

    async def test_list_deals_rejects_unknown_sort(self, client):
        response = await client.get("/api/v1/deals", params={"sort_by": "random"})
        assert response.status_code == 422

    async def test_detail_counts_views(self, client, sample_deal: Deal):
        await client.get(f"/api/v1/deals/{sample_deal.id}")
        response = await client.get(f"/api/v1/deals/{sample_deal.id}")

        data = response.json()["data"]
        assert data["views"] == 2
        assert data["poster"]["username"] == "alice"
        assert data["category"]["slug"] == "electronics"

    async def test_detail_missing(self, client):
        response = await client.get(f"/api/v1/deals/{uuid4()}")
        assert response.status_code == 404

    async def test_post_deal_requires_auth(self, client):
        response = await client.post("/api/v1/deals", json={"title": "Free stuff"})
        assert response.status_code == 401

    async def test_post_deal_is_pending(self, client, sample_user: User, auth_headers, session_factory):
        response = await client.post(
            "/api/v1/deals",
            json={"title": "Cheap monitor", "original_price": "200", "discounted_price": "150"},
            headers=auth_headers(sample_user),
        )

        assert response.status_code == 201
        data = response.json()["data"]
        assert data["status"] == STATUS_PENDING
        assert data["discount_percentage"] == 25

        listing = await client.get("/api/v1/deals")
        assert listing.json()["meta"]["total"] == 0


class TestVoteApi:
    async def test_vote_requires_sign_in(self, client, sample_deal: Deal, session_factory):
        response = await client.post(
            f"/api/v1/deals/{sample_deal.id}/vote", json={"vote_type": "up"}
        )

        assert response.status_code == 401
        body = response.json()
        assert body["status"] == "error"
        assert body["error"]["message"] == SIGN_IN_MESSAGE
        assert body["data"]["upvotes"] == 0

        async with session_factory() as session:
            count = await session.execute(select(func.count(DealVote.id)))
            assert count.scalar() == 0

    async def test_vote_unknown_deal(self, client, sample_user: User, auth_headers):
        response = await client.post(
            f"/api/v1/deals/{uuid4()}/vote",
            json={"vote_type": "up"},
            headers=auth_headers(sample_user),
        )
        assert response.status_code == 404
        assert response.json()["error"]["code"] == "not_found"

    async def test_vote_on_pending_deal_not_found(
        self, client, sample_user: User, auth_headers, session_factory
    ):
        created = await client.post(
            "/api/v1/deals", json={"title": "Awaiting review"}, headers=auth_headers(sample_user)
        )
        deal_id = created.json()["data"]["id"]

        response = await client.post(
            f"/api/v1/deals/{deal_id}/vote",
            json={"vote_type": "up"},
            headers=auth_headers(sample_user),
        )

        assert response.status_code == 404
        async with session_factory() as session:
            count = await session.execute(select(func.count(DealVote.id)))
            assert count.scalar() == 0
            deal = await session.get(Deal, UUID(deal_id))
            assert deal.heat_score == 0

    async def test_vote_toggle(self, client, sample_deal: Deal, sample_user: User, auth_headers, session_factory):
        headers = auth_headers(sample_user)
        url = f"/api/v1/deals/{sample_deal.id}/vote"

        response = await client.post(url, json={"vote_type": "up"}, headers=headers)
        assert response.status_code == 200
        data = response.json()["data"]
        assert data["user_vote"] == "up"
        assert data["operation"] == "insert"
        assert data["upvotes"] == 1

        status = await client.get(url, headers=headers)
        assert status.json()["data"]["user_vote"] == "up"

        response = await client.post(url, json={"vote_type": "down"}, headers=headers)
        data = response.json()["data"]
        assert data["operation"] == "update"
        assert (data["upvotes"], data["downvotes"]) == (0, 1)

        response = await client.post(url, json={"vote_type": "down"}, headers=headers)
        data = response.json()["data"]
        assert data["user_vote"] is None
        assert data["operation"] == "delete"

        async with session_factory() as session:
            deal = await session.get(Deal, sample_deal.id)
            assert (deal.upvotes, deal.downvotes, deal.heat_score) == (0, 0, 0)

    async def test_vote_persisted_aggregate(
        self, client, sample_deal: Deal, sample_user: User, other_user: User, auth_headers, session_factory
    ):
        url = f"/api/v1/deals/{sample_deal.id}/vote"
        await client.post(url, json={"vote_type": "up"}, headers=auth_headers(sample_user))
        await client.post(url, json={"vote_type": "up"}, headers=auth_headers(other_user))

        async with session_factory() as session:
            deal = await session.get(Deal, sample_deal.id)
            assert (deal.upvotes, deal.heat_score) == (2, 4)

    async def test_vote_store_failure_returns_503(
        self, client, sample_deal: Deal, sample_user: User, auth_headers, monkeypatch
    ):
        async def broken_insert(self, record):
            raise PersistenceError("insert", "connection reset")

        monkeypatch.setattr(SqlVoteStore, "insert", broken_insert)

        response = await client.post(
            f"/api/v1/deals/{sample_deal.id}/vote",
            json={"vote_type": "up"},
            headers=auth_headers(sample_user),
        )

        assert response.status_code == 503
        body = response.json()
        assert body["error"]["message"] == VOTE_FAILED_MESSAGE
        assert body["data"]["upvotes"] == 0
        assert body["data"]["user_vote"] is None
        assert body["data"]["notification"]["retryable"] is True

    async def test_vote_invalidates_listing_cache(
        self, client, sample_deal: Deal, sample_user: User, auth_headers, fake_cache
    ):
        await client.get("/api/v1/deals")
        assert any(key.startswith("deals:") for key in fake_cache.store)

        await client.post(
            f"/api/v1/deals/{sample_deal.id}/vote",
            json={"vote_type": "up"},
            headers=auth_headers(sample_user),
        )

        assert not any(key.startswith("deals:") for key in fake_cache.store)
        listing = await client.get("/api/v1/deals")
        assert listing.json()["data"][0]["upvotes"] == 1

    async def test_vote_status_requires_auth(self, client, sample_deal: Deal):
        response = await client.get(f"/api/v1/deals/{sample_deal.id}/vote")
        assert response.status_code == 401


class TestCommentsApi:
    async def test_comment_thread(self, client, sample_deal: Deal, sample_user: User, auth_headers):
        headers = auth_headers(sample_user)
        url = f"/api/v1/deals/{sample_deal.id}/comments"

        parent = await client.post(url, json={"content": "Nice find"}, headers=headers)
        assert parent.status_code == 201
        parent_id = parent.json()["data"]["id"]

        await client.post(url, json={"content": "Still live", "parent_id": parent_id}, headers=headers)

        response = await client.get(url)
        data = response.json()["data"]
        assert len(data) == 1
        assert data[0]["replies"][0]["content"] == "Still live"

    async def test_edit_by_other_user_forbidden(
        self, client, sample_deal: Deal, sample_user: User, other_user: User, auth_headers
    ):
        url = f"/api/v1/deals/{sample_deal.id}/comments"
        created = await client.post(url, json={"content": "Mine"}, headers=auth_headers(sample_user))
        comment_id = created.json()["data"]["id"]

        response = await client.put(
            f"{url}/{comment_id}", json={"content": "Not yours"}, headers=auth_headers(other_user)
        )
        assert response.status_code == 403


class TestAdminApi:
    async def test_regular_user_forbidden(self, client, sample_user: User, auth_headers):
        response = await client.get("/api/v1/admin/deals", headers=auth_headers(sample_user))

        assert response.status_code == 403
        assert response.json()["error"]["code"] == "permission_denied"

    async def test_anonymous_unauthorized(self, client):
        response = await client.get("/api/v1/admin/deals")
        assert response.status_code == 401

    async def test_moderation_flow(self, client, sample_user: User, admin_user: User, auth_headers):
        created = await client.post(
            "/api/v1/deals", json={"title": "Pending deal"}, headers=auth_headers(sample_user)
        )
        deal_id = created.json()["data"]["id"]
        headers = auth_headers(admin_user)

        pending = await client.get("/api/v1/admin/deals", params={"status": "pending"}, headers=headers)
        assert [d["id"] for d in pending.json()["data"]] == [deal_id]

        response = await client.patch(
            f"/api/v1/admin/deals/{deal_id}/status", json={"status": "approved"}, headers=headers
        )
        assert response.status_code == 200

        listing = await client.get("/api/v1/deals")
        assert listing.json()["meta"]["total"] == 1

    async def test_featured_management(self, client, sample_deal: Deal, admin_user: User, auth_headers):
        headers = auth_headers(admin_user)

        response = await client.post(
            "/api/v1/admin/featured", json={"deal_id": str(sample_deal.id)}, headers=headers
        )
        assert response.status_code == 201

        top = await client.get("/api/v1/featured/deal-of-the-day")
        assert top.json()["data"]["deal"]["id"] == str(sample_deal.id)

        duplicate = await client.post(
            "/api/v1/admin/featured", json={"deal_id": str(sample_deal.id)}, headers=headers
        )
        assert duplicate.status_code == 409

    async def test_settings_update_changes_currency(self, client, admin_user: User, auth_headers):
        before = await client.get("/api/v1/settings/currency")
        assert before.json()["data"]["code"] == "USD"

        response = await client.put(
            "/api/v1/admin/settings",
            json={"settings": {"site_currency": "EUR"}},
            headers=auth_headers(admin_user),
        )
        assert response.status_code == 200

        after = await client.get("/api/v1/settings/currency")
        assert after.json()["data"]["symbol"] == "€"

    async def test_admin_cannot_use_root_surface(self, client, admin_user: User, auth_headers):
        response = await client.get("/api/v1/root/users", headers=auth_headers(admin_user))
        assert response.status_code == 403


class TestRootApi:
    async def test_root_manages_users(self, client, root_user: User, sample_user: User, auth_headers):
        headers = auth_headers(root_user)

        users = await client.get("/api/v1/root/users", headers=headers)
        assert {u["username"] for u in users.json()["data"]} == {"root", "alice"}

        response = await client.patch(
            f"/api/v1/root/users/{sample_user.id}", json={"role": "admin"}, headers=headers
        )
        assert response.status_code == 200
        assert response.json()["data"]["role"] == "admin"

    async def test_root_blog_and_pages(self, client, root_user: User, auth_headers):
        headers = auth_headers(root_user)

        await client.post(
            "/api/v1/root/blog",
            json={"slug": "hello", "title": "Hello", "status": "published"},
            headers=headers,
        )
        await client.post("/api/v1/root/blog", json={"slug": "draft", "title": "Draft"}, headers=headers)
        await client.post(
            "/api/v1/root/pages", json={"slug": "about", "title": "About"}, headers=headers
        )

        posts = await client.get("/api/v1/blog")
        assert [p["slug"] for p in posts.json()["data"]] == ["hello"]

        page = await client.get("/api/v1/pages/about")
        assert page.json()["data"]["title"] == "About"

        missing = await client.get("/api/v1/blog/draft")
        assert missing.status_code == 404


class TestCatalogApi:
    async def test_categories_and_shops(self, client, sample_deal: Deal):
        categories = await client.get("/api/v1/categories")
        assert categories.json()["data"][0]["deal_count"] == 1

        shop = await client.get("/api/v1/shops/test-shop")
        assert shop.status_code == 200
        assert shop.json()["data"]["coupons"] == []

        deals = await client.get("/api/v1/shops/test-shop/deals")
        assert deals.json()["meta"]["total"] == 1

        missing = await client.get("/api/v1/categories/nope/deals")
        assert missing.status_code == 404
