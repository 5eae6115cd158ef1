"""Category repository for CRUD operations on Categories collection."""
from typing import Optional, List, Dict, Any
from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo import ASCENDING, ReturnDocument
from shared.utils import get_utc_now, to_object_id


class CategoryRepository:
    """Repository for Category CRUD operations."""

    def __init__(self, db: AsyncIOMotorDatabase):
        self.collection = db.categories

    async def create_category(self, fields: Dict[str, Any]) -> Dict[str, Any]:
        """Insert a new category record."""
        now = get_utc_now()
        category = {**fields, "created_at": now, "updated_at": now}
        result = await self.collection.insert_one(category)
        category["_id"] = result.inserted_id
        return category

    async def get_category(self, category_id: str) -> Optional[Dict[str, Any]]:
        """Get a category by ID."""
        oid = to_object_id(category_id)
        if oid is None:
            return None
        return await self.collection.find_one({"_id": oid})

    async def get_category_by_slug(self, slug: str) -> Optional[Dict[str, Any]]:
        """Get a category by its slug."""
        return await self.collection.find_one({"slug": slug})

    async def find_by_name(
        self,
        name: str,
        exclude_id: Optional[str] = None
    ) -> Optional[Dict[str, Any]]:
        """Find a category with this exact name, optionally ignoring one record."""
        query: Dict[str, Any] = {"name": name}
        if exclude_id is not None:
            oid = to_object_id(exclude_id)
            if oid is not None:
                query["_id"] = {"$ne": oid}
        return await self.collection.find_one(query)

    async def list_categories(self) -> List[Dict[str, Any]]:
        """List all categories ordered by name."""
        cursor = self.collection.find({}).sort([("name", ASCENDING)])
        return await cursor.to_list(length=None)

    async def update_category(
        self,
        category_id: str,
        fields: Dict[str, Any]
    ) -> Optional[Dict[str, Any]]:
        """Update a category and return the new document."""
        oid = to_object_id(category_id)
        if oid is None:
            return None
        return await self.collection.find_one_and_update(
            {"_id": oid},
            {"$set": {**fields, "updated_at": get_utc_now()}},
            return_document=ReturnDocument.AFTER
        )

    async def delete_category(self, category_id: Any) -> bool:
        """Delete a category record."""
        oid = to_object_id(category_id)
        if oid is None:
            return False
        result = await self.collection.delete_one({"_id": oid})
        return result.deleted_count > 0

    async def count_categories(self) -> int:
        return await self.collection.count_documents({})
