"""Category consistency manager tests."""
import pytest
from unittest.mock import AsyncMock
from bson import ObjectId

from api.schemas.requests import CategoryInput
from api.services.categories import UNCATEGORIZED, CategoryManager
from shared.exceptions import DuplicateName, NotFound, PartialFailure, ValidationError
from tests.factories import make_article, make_category


@pytest.fixture
def manager(fake_db):
    return CategoryManager(fake_db)


def seed_category_with_articles(db, count, name="React"):
    category = db.categories.add(make_category(name=name, slug=name.lower()))
    articles = [db.articles.add(make_article(title=f"Post {i}", category=name)) for i in range(count)]
    db.articles.add(make_article(title="Unrelated", category="CSS"))
    return category, articles


class TestCreateCategory:
    """Tests for category creation."""

    @pytest.mark.asyncio
    async def test_slug_derived_from_name(self, manager):
        category = await manager.create_category(CategoryInput(name="React 入門"))

        assert category.slug == "react-入門"
        assert category.icon == "📝"
        assert category.color == "#3b82f6"

    @pytest.mark.asyncio
    async def test_explicit_slug_used_verbatim(self, manager):
        category = await manager.create_category(CategoryInput(name="JavaScript", slug="js"))

        assert category.slug == "js"

    @pytest.mark.asyncio
    async def test_duplicate_name_rejected(self, manager, fake_db):
        fake_db.categories.add(make_category(name="React"))

        with pytest.raises(DuplicateName):
            await manager.create_category(CategoryInput(name="React"))

        assert len(fake_db.categories.all()) == 1

    @pytest.mark.asyncio
    async def test_unique_index_race_maps_to_duplicate_name(self, manager, fake_db):
        await fake_db.categories.create_index("name", unique=True)
        fake_db.categories.add(make_category(name="React"))
        # The pre-check misses a concurrent insert; the index still refuses it
        manager.category_repo.find_by_name = AsyncMock(return_value=None)

        with pytest.raises(DuplicateName):
            await manager.create_category(CategoryInput(name="React"))

    @pytest.mark.asyncio
    async def test_invalid_color(self, manager):
        with pytest.raises(ValidationError) as exc_info:
            await manager.create_category(CategoryInput(name="CSS", color="teal"))

        assert exc_info.value.field == "color"


class TestUpdateCategory:
    """Tests for category edits."""

    @pytest.mark.asyncio
    async def test_keeping_own_name_is_allowed(self, manager, fake_db):
        category = fake_db.categories.add(make_category(name="React"))

        updated = await manager.update_category(
            str(category["_id"]),
            CategoryInput(name="React", description="Components and hooks")
        )

        assert updated.description == "Components and hooks"

    @pytest.mark.asyncio
    async def test_taking_another_name_is_rejected(self, manager, fake_db):
        fake_db.categories.add(make_category(name="CSS", slug="css"))
        category = fake_db.categories.add(make_category(name="React"))

        with pytest.raises(DuplicateName):
            await manager.update_category(str(category["_id"]), CategoryInput(name="CSS"))

    @pytest.mark.asyncio
    async def test_rename_moves_articles(self, manager, fake_db):
        category, articles = seed_category_with_articles(fake_db, 3)

        updated = await manager.update_category(str(category["_id"]), CategoryInput(name="React.js"))

        assert updated.slug == "react-js"
        assert await fake_db.articles.count_documents({"category": "React"}) == 0
        assert await fake_db.articles.count_documents({"category": "React.js"}) == 3
        assert await fake_db.articles.count_documents({"category": "CSS"}) == 1

    @pytest.mark.asyncio
    async def test_missing_category(self, manager):
        with pytest.raises(NotFound):
            await manager.update_category(str(ObjectId()), CategoryInput(name="React"))


class TestDeleteCategory:
    """Tests for deletion and article cleanup."""

    @pytest.mark.asyncio
    async def test_unconfirmed_delete_reports_count(self, manager, fake_db):
        category, _ = seed_category_with_articles(fake_db, 3)

        result = await manager.delete_category(str(category["_id"]))

        assert result.requires_confirmation
        assert not result.deleted
        assert result.article_count == 3
        assert len(fake_db.categories.all()) == 1
        assert await fake_db.articles.count_documents({"category": "React"}) == 3

    @pytest.mark.asyncio
    async def test_confirmed_delete_uncategorizes_articles(self, manager, fake_db):
        category, articles = seed_category_with_articles(fake_db, 3)

        result = await manager.delete_category(str(category["_id"]), confirm=True)

        assert result.deleted
        assert result.updated_count == 3
        assert fake_db.categories.all() == []
        assert await fake_db.articles.count_documents({"category": "React"}) == 0
        for article in articles:
            stored = await fake_db.articles.find_one({"_id": article["_id"]})
            assert stored["category"] == UNCATEGORIZED
        assert await fake_db.articles.count_documents({"category": "CSS"}) == 1

    @pytest.mark.asyncio
    async def test_delete_without_articles_issues_no_updates(self, manager, fake_db):
        category = fake_db.categories.add(make_category(name="Empty", slug="empty"))
        manager.article_repo.set_article_category = AsyncMock(return_value=True)

        result = await manager.delete_category(str(category["_id"]))

        assert result.deleted
        assert result.updated_count == 0
        manager.article_repo.set_article_category.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_partial_failure_reports_failed_ids(self, manager, fake_db):
        category, articles = seed_category_with_articles(fake_db, 3)
        failing_id = articles[1]["_id"]
        real_update = manager.article_repo.set_article_category

        async def flaky(article_id, name):
            if article_id == failing_id:
                raise RuntimeError("write conflict")
            return await real_update(article_id, name)

        manager.article_repo.set_article_category = flaky

        with pytest.raises(PartialFailure) as exc_info:
            await manager.delete_category(str(category["_id"]), confirm=True)

        assert exc_info.value.updated_count == 2
        assert exc_info.value.failed_ids == [str(failing_id)]
        assert fake_db.categories.all() == []
        stored = await fake_db.articles.find_one({"_id": failing_id})
        assert stored["category"] == "React"

    @pytest.mark.asyncio
    async def test_missing_category(self, manager):
        with pytest.raises(NotFound):
            await manager.delete_category(str(ObjectId()), confirm=True)


class TestLookups:
    """Tests for listing and slug resolution."""

    @pytest.mark.asyncio
    async def test_list_sorted_with_counts(self, manager, fake_db):
        seed_category_with_articles(fake_db, 2, name="React")
        fake_db.categories.add(make_category(name="CSS", slug="css"))

        categories = await manager.list_categories()
        counts = await manager.article_counts(categories)

        assert [c.name for c in categories] == ["CSS", "React"]
        assert counts == {"CSS": 1, "React": 2}

    @pytest.mark.asyncio
    async def test_get_by_slug(self, manager, fake_db):
        fake_db.categories.add(make_category(name="CSS", slug="css"))

        category = await manager.get_by_slug("css")

        assert category.name == "CSS"
        with pytest.raises(NotFound):
            await manager.get_by_slug("unknown")
