"""Category consistency manager.

Keeps article category labels in step with the categories collection when a
category is renamed or removed.
"""
import asyncio
import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional
from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo.errors import DuplicateKeyError

from database.repositories.article_repo import ArticleRepository
from database.repositories.category_repo import CategoryRepository
from api.models import CategoryModel
from api.schemas.requests import CategoryInput
from shared.exceptions import DuplicateName, NotFound, PartialFailure, ValidationError
from shared.utils import generate_slug
from shared.validation import (
    sanitize_text,
    validate_category_name,
    validate_color,
    validate_description
)

logger = logging.getLogger(__name__)

UNCATEGORIZED = ""


@dataclass
class CategoryDeletion:
    """Result of a delete request."""
    category: CategoryModel
    article_count: int
    deleted: bool
    requires_confirmation: bool = False
    updated_count: int = 0


class CategoryManager:
    """Service for category CRUD and article reference upkeep."""

    def __init__(self, db: AsyncIOMotorDatabase):
        self.category_repo = CategoryRepository(db)
        self.article_repo = ArticleRepository(db)

    async def list_categories(self) -> List[CategoryModel]:
        categories = await self.category_repo.list_categories()
        return [CategoryModel(**category) for category in categories]

    async def article_counts(self, categories: List[CategoryModel]) -> Dict[str, int]:
        """Map each category name to the number of articles using it."""
        counts = await asyncio.gather(*(
            self.article_repo.count_by_category(category.name) for category in categories
        ))
        return {category.name: count for category, count in zip(categories, counts)}

    async def get_category(self, category_id: str) -> CategoryModel:
        category = await self.category_repo.get_category(category_id)
        if category is None:
            raise NotFound("Category", category_id)
        return CategoryModel(**category)

    async def get_by_slug(self, slug: str) -> CategoryModel:
        category = await self.category_repo.get_category_by_slug(slug)
        if category is None:
            raise NotFound("Category", slug)
        return CategoryModel(**category)

    def _validate(self, data: CategoryInput):
        checks = [
            ("name", validate_category_name(data.name)),
            ("description", validate_description(data.description)),
            ("color", validate_color(data.color)),
        ]
        for field, result in checks:
            if not result.valid:
                raise ValidationError(field, result.error)

    def _fields(self, data: CategoryInput) -> Dict[str, Any]:
        # An explicit slug wins; otherwise it follows the name
        slug = data.slug.strip() if data.slug and data.slug.strip() else generate_slug(data.name)
        return {
            "name": sanitize_text(data.name),
            "description": sanitize_text(data.description),
            "icon": data.icon,
            "color": data.color,
            "slug": slug
        }

    async def _check_unique(self, name: str, exclude_id: Optional[str] = None):
        existing = await self.category_repo.find_by_name(name, exclude_id=exclude_id)
        if existing is not None:
            raise DuplicateName(name)

    async def create_category(self, data: CategoryInput) -> CategoryModel:
        """Create a category, rejecting names already in use."""
        self._validate(data)
        fields = self._fields(data)
        await self._check_unique(fields["name"])

        try:
            category = await self.category_repo.create_category(fields)
        except DuplicateKeyError as e:
            raise DuplicateName(fields["name"]) from e

        logger.info(f"Created category {fields['name']!r} ({fields['slug']})")
        return CategoryModel(**category)

    async def update_category(self, category_id: str, data: CategoryInput) -> CategoryModel:
        """Edit a category; a rename moves every referencing article along."""
        current = await self.category_repo.get_category(category_id)
        if current is None:
            raise NotFound("Category", category_id)

        self._validate(data)
        fields = self._fields(data)
        await self._check_unique(fields["name"], exclude_id=category_id)

        try:
            category = await self.category_repo.update_category(category_id, fields)
        except DuplicateKeyError as e:
            raise DuplicateName(fields["name"]) from e
        if category is None:
            raise NotFound("Category", category_id)

        if current["name"] != category["name"]:
            moved = await self._reassign_articles(current["name"], category["name"])
            logger.info(f"Renamed category {current['name']!r} to {category['name']!r}, moved {moved} articles")

        return CategoryModel(**category)

    async def delete_category(self, category_id: str, confirm: bool = False) -> CategoryDeletion:
        """
        Delete a category and clear it from its articles.

        When articles still reference the category and the caller has not
        confirmed, nothing is written and the count is returned instead.
        """
        current = await self.category_repo.get_category(category_id)
        if current is None:
            raise NotFound("Category", category_id)
        category = CategoryModel(**current)

        article_count = await self.article_repo.count_by_category(category.name)
        if article_count > 0 and not confirm:
            return CategoryDeletion(
                category=category,
                article_count=article_count,
                deleted=False,
                requires_confirmation=True
            )

        deleted = await self.category_repo.delete_category(current["_id"])
        if not deleted:
            raise NotFound("Category", category_id)

        updated_count = 0
        if article_count > 0:
            updated_count = await self._reassign_articles(category.name, UNCATEGORIZED)

        logger.info(f"Deleted category {category.name!r}, {updated_count} articles now uncategorized")
        return CategoryDeletion(
            category=category,
            article_count=article_count,
            deleted=True,
            updated_count=updated_count
        )

    async def _reassign_articles(self, old_name: str, new_name: str) -> int:
        """
        Point every article labelled old_name at new_name.

        Updates are issued concurrently and independently. Raises
        PartialFailure when some of them did not apply.
        """
        article_ids = await self.article_repo.get_ids_by_category(old_name)
        if not article_ids:
            return 0

        results = await asyncio.gather(
            *(self.article_repo.set_article_category(article_id, new_name) for article_id in article_ids),
            return_exceptions=True
        )

        failed_ids = []
        for article_id, result in zip(article_ids, results):
            if result is not True:
                if isinstance(result, Exception):
                    logger.error(f"Failed to update category of article {article_id}: {result}")
                failed_ids.append(str(article_id))

        updated_count = len(article_ids) - len(failed_ids)
        if failed_ids:
            raise PartialFailure(updated_count, failed_ids)
        return updated_count
