"""API endpoint tests."""
import pytest
from httpx import AsyncClient, ASGITransport

from api.dependencies import get_identity_gate, get_session
from api.main import app
from database.connection import get_db
from tests.factories import ADMIN_EMAIL, make_article, make_category, make_navigation, resolved_session


ARTICLE_PAYLOAD = {
    "title": "CSS Grid in Practice",
    "excerpt": "Two-dimensional layouts",
    "content": "## Grid\n\n`display: grid;`",
    "category": "CSS",
    "tags": "css, layout",
    "published": True
}


def sign_in_as(address):
    """Resolve every request's session to the given address (None for anonymous)."""
    async def override():
        return await resolved_session(address)
    app.dependency_overrides[get_session] = override


@pytest.fixture
def client(fake_db):
    """HTTP client against the app with the in-memory database."""
    app.dependency_overrides[get_db] = lambda: fake_db
    sign_in_as(None)
    yield AsyncClient(transport=ASGITransport(app=app), base_url="http://test")
    app.dependency_overrides.clear()


class TestHealth:

    @pytest.mark.asyncio
    async def test_health(self, client):
        async with client:
            response = await client.get("/health")

        assert response.status_code == 200
        assert response.json() == {"status": "healthy"}


class TestArticleEndpoints:
    """Tests for /articles."""

    @pytest.mark.asyncio
    async def test_list_hides_drafts(self, client, fake_db):
        fake_db.articles.add(make_article(title="Visible"))
        fake_db.articles.add(make_article(title="Draft", published=False))

        async with client:
            response = await client.get("/articles")

        assert response.status_code == 200
        assert [a["title"] for a in response.json()] == ["Visible"]
        assert "content" not in response.json()[0]

    @pytest.mark.asyncio
    async def test_create_requires_sign_in(self, client, fake_db):
        async with client:
            response = await client.post("/articles", json=ARTICLE_PAYLOAD)

        assert response.status_code == 401
        assert fake_db.articles.all() == []

    @pytest.mark.asyncio
    async def test_create_requires_admin(self, client, fake_db):
        sign_in_as("reader@example.com")

        async with client:
            response = await client.post("/articles", json=ARTICLE_PAYLOAD)

        assert response.status_code == 403
        assert fake_db.articles.all() == []

    @pytest.mark.asyncio
    async def test_admin_creates_article(self, client, fake_db):
        sign_in_as(ADMIN_EMAIL)

        async with client:
            response = await client.post("/articles", json=ARTICLE_PAYLOAD)

        assert response.status_code == 201
        data = response.json()
        assert data["author"] == ADMIN_EMAIL
        assert data["tags"] == ["css", "layout"]
        assert data["views"] == 0
        assert len(fake_db.articles.all()) == 1

    @pytest.mark.asyncio
    async def test_invalid_article_is_rejected(self, client, fake_db):
        sign_in_as(ADMIN_EMAIL)

        async with client:
            response = await client.post("/articles", json={**ARTICLE_PAYLOAD, "title": "t" * 201})

        assert response.status_code == 400
        assert response.json()["field"] == "title"
        assert fake_db.articles.all() == []

    @pytest.mark.asyncio
    async def test_read_counts_view(self, client, fake_db):
        article = fake_db.articles.add(make_article(views=1))

        async with client:
            response = await client.get(f"/articles/{article['_id']}")

        assert response.status_code == 200
        assert response.json()["content"].startswith("# React Hooks")
        stored = await fake_db.articles.find_one({"_id": article["_id"]})
        assert stored["views"] == 2

    @pytest.mark.asyncio
    async def test_draft_visible_to_admin_only(self, client, fake_db):
        draft = fake_db.articles.add(make_article(published=False))

        async with client:
            anonymous = await client.get(f"/articles/{draft['_id']}")
            sign_in_as(ADMIN_EMAIL)
            admin = await client.get(f"/articles/{draft['_id']}")

        assert anonymous.status_code == 404
        assert admin.status_code == 200

    @pytest.mark.asyncio
    async def test_toggle_and_delete(self, client, fake_db):
        article = fake_db.articles.add(make_article(published=True))
        sign_in_as(ADMIN_EMAIL)

        async with client:
            toggled = await client.post(f"/articles/{article['_id']}/toggle-publish")
            deleted = await client.delete(f"/articles/{article['_id']}")
            missing = await client.delete(f"/articles/{article['_id']}")

        assert toggled.json()["published"] is False
        assert deleted.status_code == 200
        assert missing.status_code == 404


class TestCategoryEndpoints:
    """Tests for /categories."""

    @pytest.mark.asyncio
    async def test_list_with_counts(self, client, fake_db):
        fake_db.categories.add(make_category())
        fake_db.articles.add(make_article())

        async with client:
            response = await client.get("/categories")

        assert response.json()[0]["name"] == "React"
        assert response.json()[0]["article_count"] == 1

    @pytest.mark.asyncio
    async def test_category_page(self, client, fake_db):
        fake_db.categories.add(make_category())
        fake_db.articles.add(make_article())

        async with client:
            page = await client.get("/categories/react/articles")
            unknown = await client.get("/categories/unknown/articles")

        assert page.status_code == 200
        assert len(page.json()["articles"]) == 1
        assert unknown.status_code == 404

    @pytest.mark.asyncio
    async def test_name_with_slash_filters_articles(self, client, fake_db):
        sign_in_as(ADMIN_EMAIL)

        async with client:
            created = await client.post("/categories", json={"name": "C/C++"})
            await client.post("/articles", json={**ARTICLE_PAYLOAD, "category": "C/C++"})
            listing = await client.get("/articles", params={"category": "C/C++"})
            page = await client.get(f"/categories/{created.json()['slug']}/articles")

        assert created.json()["slug"] == "c-c"
        assert len(listing.json()) == 1
        assert len(page.json()["articles"]) == 1

    @pytest.mark.asyncio
    async def test_duplicate_name_conflicts(self, client, fake_db):
        fake_db.categories.add(make_category())
        sign_in_as(ADMIN_EMAIL)

        async with client:
            response = await client.post("/categories", json={"name": "React"})

        assert response.status_code == 409

    @pytest.mark.asyncio
    async def test_delete_needs_confirmation(self, client, fake_db):
        category = fake_db.categories.add(make_category())
        fake_db.articles.add(make_article())
        fake_db.articles.add(make_article())
        sign_in_as(ADMIN_EMAIL)

        async with client:
            first = await client.delete(f"/categories/{category['_id']}")
            confirmed = await client.delete(f"/categories/{category['_id']}", params={"confirm": "true"})

        assert first.status_code == 409
        assert first.json()["requires_confirmation"] is True
        assert first.json()["article_count"] == 2
        assert confirmed.status_code == 200
        assert confirmed.json()["updated_count"] == 2
        assert await fake_db.articles.count_documents({"category": ""}) == 2


class TestNavigationEndpoints:
    """Tests for /navigation."""

    @pytest.mark.asyncio
    async def test_default_menu_when_empty(self, client):
        async with client:
            response = await client.get("/navigation/menu")

        data = response.json()
        assert data["is_default"] is True
        assert [item["path"] for item in data["items"]][0] == "/"

    @pytest.mark.asyncio
    async def test_configured_menu_hides_disabled(self, client, fake_db):
        fake_db.navigation.add(make_navigation(title="About"))
        fake_db.navigation.add(make_navigation(title="Hidden", path="/hidden", enabled=False))

        async with client:
            response = await client.get("/navigation/menu")

        data = response.json()
        assert data["is_default"] is False
        assert [item["title"] for item in data["items"]] == ["About"]

    @pytest.mark.asyncio
    async def test_invalid_entry_rejected(self, client, fake_db):
        sign_in_as(ADMIN_EMAIL)

        async with client:
            response = await client.post(
                "/navigation",
                json={"title": "Docs", "path": "docs.example.com", "type": "external"}
            )

        assert response.status_code == 400
        assert response.json()["field"] == "path"


class TestAdminAndSeoEndpoints:
    """Tests for dashboard and crawler endpoints."""

    @pytest.mark.asyncio
    async def test_stats_require_admin(self, client, fake_db):
        fake_db.articles.add(make_article(views=3))

        async with client:
            anonymous = await client.get("/admin/stats")
            sign_in_as(ADMIN_EMAIL)
            admin = await client.get("/admin/stats")

        assert anonymous.status_code == 401
        assert admin.json()["total_views"] == 3

    @pytest.mark.asyncio
    async def test_sitemap_and_robots(self, client, fake_db):
        fake_db.articles.add(make_article())

        async with client:
            sitemap = await client.get("/sitemap.xml")
            robots = await client.get("/robots.txt")

        assert sitemap.headers["content-type"].startswith("application/xml")
        assert "<urlset" in sitemap.text
        assert robots.text.startswith("User-agent: *")


class TestAuthEndpoints:
    """Tests for /auth with a real identity gate over fake Redis."""

    @pytest.mark.asyncio
    async def test_sign_in_me_sign_out(self, client, identity_gate):
        app.dependency_overrides.pop(get_session)
        app.dependency_overrides[get_identity_gate] = lambda: identity_gate

        async with client:
            signed_in = await client.post(
                "/auth/sign-in",
                json={"email": ADMIN_EMAIL, "password": "correct horse"}
            )
            token = signed_in.json()["token"]
            headers = {"Authorization": f"Bearer {token}"}
            me = await client.get("/auth/me", headers=headers)
            signed_out = await client.post("/auth/sign-out", headers=headers)
            after = await client.get("/auth/me", headers=headers)

        assert signed_in.status_code == 200
        assert signed_in.json()["state"] == "AUTHENTICATED"
        assert me.json()["is_admin"] is True
        assert signed_out.json()["state"] == "ANONYMOUS"
        assert after.json()["identity"] is None

    @pytest.mark.asyncio
    async def test_malformed_address(self, client, identity_gate):
        app.dependency_overrides[get_identity_gate] = lambda: identity_gate

        async with client:
            response = await client.post("/auth/sign-in", json={"email": "admin", "password": "x"})

        assert response.status_code == 401
        assert response.json()["kind"] == "malformed-address"
