"""Publication workflow: visibility, view counting and article lifecycle."""
import logging
from typing import Any, Dict, List, Optional
from motor.motor_asyncio import AsyncIOMotorDatabase

from database.repositories.article_repo import ArticleRepository
from database.repositories.category_repo import CategoryRepository
from api.models import ArticleModel
from api.schemas.requests import ArticleInput
from shared.config import settings
from shared.exceptions import IndexUnavailable, NotFound, ValidationError
from shared.validation import (
    sanitize_list,
    sanitize_text,
    validate_category_name,
    validate_content,
    validate_excerpt,
    validate_image_url,
    validate_tags,
    validate_title
)

logger = logging.getLogger(__name__)


def sort_newest_first(articles: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """Order documents like the store does: created_at desc, then _id asc."""
    ordered = sorted(articles, key=lambda article: article["_id"])
    # sort() is stable, so equal timestamps keep the identifier order
    ordered.sort(key=lambda article: article["created_at"], reverse=True)
    return ordered


def validate_article(data: ArticleInput):
    """Raise ValidationError for the first field that breaks an article rule."""
    checks = [
        ("title", validate_title(data.title)),
        ("excerpt", validate_excerpt(data.excerpt)),
        ("content", validate_content(data.content)),
        ("tags", validate_tags(data.tags)),
        ("cover_image", validate_image_url(data.cover_image)),
    ]
    if data.category:
        checks.append(("category", validate_category_name(data.category)))

    for field, result in checks:
        if not result.valid:
            raise ValidationError(field, result.error)


def article_fields(data: ArticleInput) -> Dict[str, Any]:
    """Build the stored representation; the markdown body is kept verbatim."""
    return {
        "title": sanitize_text(data.title),
        "excerpt": sanitize_text(data.excerpt),
        "content": data.content,
        "category": sanitize_text(data.category),
        "tags": sanitize_list(data.tags),
        "cover_image": data.cover_image or None,
        "published": data.published
    }


class PublicationWorkflow:
    """Business rules for reading and publishing articles."""

    def __init__(self, db: AsyncIOMotorDatabase):
        self.article_repo = ArticleRepository(db)
        self.category_repo = CategoryRepository(db)
        self.category_index = settings.article_category_index

    async def list_published(self, category: Optional[str] = None) -> List[ArticleModel]:
        """
        List published articles, newest first.

        With a category, the composite index is used; when the store reports
        it missing, all published articles are filtered in memory instead.
        Categories are matched by name, never by slug. Stored labels are
        escaped, so the filter is escaped the same way.
        """
        if category is not None:
            category = sanitize_text(category)

        if category is None:
            articles = await self.article_repo.list_published()
        else:
            try:
                articles = await self.article_repo.list_published_in_category(
                    category, self.category_index
                )
            except IndexUnavailable as e:
                logger.warning(f"{e.message}, filtering category {category!r} in memory")
                published = await self.article_repo.list_published()
                articles = sort_newest_first([
                    article for article in published
                    if article.get("category") == category
                ])

        return [ArticleModel(**article) for article in articles]

    async def list_all(self) -> List[ArticleModel]:
        """List every article, drafts included."""
        articles = await self.article_repo.list_articles()
        return [ArticleModel(**article) for article in articles]

    async def get_detail(self, article_id: str, include_drafts: bool = False) -> ArticleModel:
        """
        Fetch one article and count the view.

        The returned article carries the view count read before this view
        was added, so it is one lower than the stored counter.
        """
        article = await self.article_repo.get_article(article_id)
        if article is None or (not article.get("published") and not include_drafts):
            raise NotFound("Article", article_id)

        model = ArticleModel(**article)
        await self._record_view(model.id)
        return model

    async def _record_view(self, article_id: str):
        # A lost view is acceptable; a failed page is not
        try:
            counted = await self.article_repo.increment_views(article_id)
            if not counted:
                logger.warning(f"View not counted for article {article_id}: no longer exists")
        except Exception as e:
            logger.warning(f"View not counted for article {article_id}: {e}")

    async def create_article(self, data: ArticleInput, author: Optional[str] = None) -> ArticleModel:
        """Validate and store a new article."""
        validate_article(data)

        fields = article_fields(data)
        fields["author"] = author or "Anonymous"
        article = await self.article_repo.create_article(fields)

        logger.info(f"Created article {article['_id']} ({'published' if data.published else 'draft'})")
        return ArticleModel(**article)

    async def update_article(self, article_id: str, data: ArticleInput) -> ArticleModel:
        """Validate and apply an edit. Concurrent edits are last-write-wins."""
        validate_article(data)

        article = await self.article_repo.update_article(article_id, article_fields(data))
        if article is None:
            raise NotFound("Article", article_id)
        return ArticleModel(**article)

    async def toggle_published(self, article_id: str) -> ArticleModel:
        """Flip the published flag. Calling twice restores the original state."""
        current = await self.article_repo.get_article(article_id)
        if current is None:
            raise NotFound("Article", article_id)

        article = await self.article_repo.update_article(
            article_id,
            {"published": not current.get("published", False)}
        )
        if article is None:
            raise NotFound("Article", article_id)

        logger.info(f"Article {article_id} is now {'published' if article['published'] else 'a draft'}")
        return ArticleModel(**article)

    async def delete_article(self, article_id: str):
        """Hard-delete an article."""
        deleted = await self.article_repo.delete_article(article_id)
        if not deleted:
            raise NotFound("Article", article_id)
        logger.info(f"Deleted article {article_id}")

    async def dashboard_stats(self) -> Dict[str, int]:
        """Counters for the admin dashboard."""
        articles = await self.article_repo.list_articles()
        return {
            "total_articles": len(articles),
            "published_articles": sum(1 for article in articles if article.get("published")),
            "total_views": sum(article.get("views", 0) for article in articles),
            "total_categories": await self.category_repo.count_categories()
        }
