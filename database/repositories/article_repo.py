"""Article repository for CRUD operations on Articles collection."""
from typing import Optional, List, Dict, Any
from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo import ASCENDING, DESCENDING, ReturnDocument
from pymongo.errors import OperationFailure
from shared.exceptions import IndexUnavailable
from shared.utils import get_utc_now, to_object_id


# Newest first; ties broken by store identifier so listings are deterministic
NEWEST_FIRST = [("created_at", DESCENDING), ("_id", ASCENDING)]

# MongoDB answers a hint on a missing index with BadValue and a "hint provided
# does not correspond to an existing index" message
_BAD_VALUE = 2


def is_missing_index_error(error: OperationFailure) -> bool:
    """Check whether a query failed because its hinted index does not exist."""
    message = str(error).lower()
    return "hint" in message and (error.code == _BAD_VALUE or "index" in message)


class ArticleRepository:
    """Repository for Article CRUD operations."""

    def __init__(self, db: AsyncIOMotorDatabase):
        self.collection = db.articles

    async def create_article(self, fields: Dict[str, Any]) -> Dict[str, Any]:
        """Insert a new article; the store assigns the identifier."""
        now = get_utc_now()
        article = {
            **fields,
            "views": 0,
            "created_at": now,
            "updated_at": now
        }
        result = await self.collection.insert_one(article)
        article["_id"] = result.inserted_id
        return article

    async def get_article(self, article_id: str) -> Optional[Dict[str, Any]]:
        """Get an article by ID."""
        oid = to_object_id(article_id)
        if oid is None:
            return None
        return await self.collection.find_one({"_id": oid})

    async def list_articles(self) -> List[Dict[str, Any]]:
        """List every article, drafts included, newest first."""
        cursor = self.collection.find({}).sort(NEWEST_FIRST)
        return await cursor.to_list(length=None)

    async def list_published(self) -> List[Dict[str, Any]]:
        """List published articles, newest first."""
        cursor = self.collection.find({"published": True}).sort(NEWEST_FIRST)
        return await cursor.to_list(length=None)

    async def list_published_in_category(
        self,
        category: str,
        index_name: str
    ) -> List[Dict[str, Any]]:
        """
        List published articles of one category through the composite index.

        Raises IndexUnavailable when the hinted index does not exist.
        """
        cursor = (
            self.collection
            .find({"category": category, "published": True})
            .sort(NEWEST_FIRST)
            .hint(index_name)
        )
        try:
            return await cursor.to_list(length=None)
        except OperationFailure as e:
            if is_missing_index_error(e):
                raise IndexUnavailable(index_name) from e
            raise

    async def update_article(
        self,
        article_id: str,
        fields: Dict[str, Any]
    ) -> Optional[Dict[str, Any]]:
        """Apply a partial update and return the updated document."""
        oid = to_object_id(article_id)
        if oid is None:
            return None
        return await self.collection.find_one_and_update(
            {"_id": oid},
            {"$set": {**fields, "updated_at": get_utc_now()}},
            return_document=ReturnDocument.AFTER
        )

    async def increment_views(self, article_id: str) -> bool:
        """Atomically add one to the article's view counter."""
        oid = to_object_id(article_id)
        if oid is None:
            return False
        result = await self.collection.update_one(
            {"_id": oid},
            {"$inc": {"views": 1}}
        )
        return result.matched_count > 0

    async def set_article_category(self, article_id: Any, category: str) -> bool:
        """Point a single article at another category label."""
        oid = to_object_id(article_id)
        if oid is None:
            return False
        result = await self.collection.update_one(
            {"_id": oid},
            {"$set": {"category": category}}
        )
        return result.matched_count > 0

    async def delete_article(self, article_id: str) -> bool:
        """Hard-delete an article."""
        oid = to_object_id(article_id)
        if oid is None:
            return False
        result = await self.collection.delete_one({"_id": oid})
        return result.deleted_count > 0

    async def count_by_category(self, category: str) -> int:
        """Count articles whose category label equals the given name."""
        return await self.collection.count_documents({"category": category})

    async def get_ids_by_category(self, category: str) -> List[Any]:
        """Get the IDs of every article referencing a category label."""
        cursor = self.collection.find({"category": category}, {"_id": 1})
        articles = await cursor.to_list(length=None)
        return [article["_id"] for article in articles]
