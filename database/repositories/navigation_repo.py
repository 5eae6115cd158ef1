"""Navigation repository for the site menu entries."""
from typing import Optional, List, Dict, Any
from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo import ASCENDING, ReturnDocument
from shared.utils import get_utc_now, to_object_id


class NavigationRepository:
    """Repository for NavigationEntry CRUD operations."""

    def __init__(self, db: AsyncIOMotorDatabase):
        self.collection = db.navigation

    async def create_entry(self, fields: Dict[str, Any]) -> Dict[str, Any]:
        now = get_utc_now()
        entry = {**fields, "created_at": now, "updated_at": now}
        result = await self.collection.insert_one(entry)
        entry["_id"] = result.inserted_id
        return entry

    async def list_entries(self) -> List[Dict[str, Any]]:
        """List every entry, disabled ones included, in menu order."""
        cursor = self.collection.find({}).sort([("order", ASCENDING), ("_id", ASCENDING)])
        return await cursor.to_list(length=None)

    async def update_entry(
        self,
        entry_id: str,
        fields: Dict[str, Any]
    ) -> Optional[Dict[str, Any]]:
        oid = to_object_id(entry_id)
        if oid is None:
            return None
        return await self.collection.find_one_and_update(
            {"_id": oid},
            {"$set": {**fields, "updated_at": get_utc_now()}},
            return_document=ReturnDocument.AFTER
        )

    async def delete_entry(self, entry_id: str) -> bool:
        oid = to_object_id(entry_id)
        if oid is None:
            return False
        result = await self.collection.delete_one({"_id": oid})
        return result.deleted_count > 0
