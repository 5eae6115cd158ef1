"""Navigation resolver and menu entry management."""
import logging
from typing import List
from motor.motor_asyncio import AsyncIOMotorDatabase

from database.repositories.navigation_repo import NavigationRepository
from api.models import NavigationEntryModel
from api.schemas.requests import NavigationInput
from shared.exceptions import NotFound, ValidationError
from shared.validation import sanitize_text, validate_navigation_path, validate_title

logger = logging.getLogger(__name__)


def visible_menu(entries: List[NavigationEntryModel]) -> List[NavigationEntryModel]:
    """Entries a reader should see; disabled ones stay admin-only."""
    return [entry for entry in entries if entry.enabled]


class NavigationResolver:
    """Reads and edits the configurable site menu."""

    def __init__(self, db: AsyncIOMotorDatabase):
        self.navigation_repo = NavigationRepository(db)

    async def resolve_menu(self) -> List[NavigationEntryModel]:
        """
        All entries in menu order, disabled ones included.

        An empty list means nothing is configured; callers fall back to
        their default menu.
        """
        entries = await self.navigation_repo.list_entries()
        return [NavigationEntryModel(**entry) for entry in entries]

    def _validate(self, data: NavigationInput):
        title_check = validate_title(data.title)
        if not title_check.valid:
            raise ValidationError("title", title_check.error)

        path_check = validate_navigation_path(data.path, data.type.value)
        if not path_check.valid:
            raise ValidationError("path", path_check.error)

    def _fields(self, data: NavigationInput) -> dict:
        return {
            "title": sanitize_text(data.title),
            "path": data.path,
            "type": data.type.value,
            "order": data.order,
            "enabled": data.enabled
        }

    async def create_entry(self, data: NavigationInput) -> NavigationEntryModel:
        self._validate(data)
        entry = await self.navigation_repo.create_entry(self._fields(data))
        logger.info(f"Added navigation entry {entry['title']!r} -> {entry['path']}")
        return NavigationEntryModel(**entry)

    async def update_entry(self, entry_id: str, data: NavigationInput) -> NavigationEntryModel:
        self._validate(data)
        entry = await self.navigation_repo.update_entry(entry_id, self._fields(data))
        if entry is None:
            raise NotFound("Navigation entry", entry_id)
        return NavigationEntryModel(**entry)

    async def delete_entry(self, entry_id: str):
        deleted = await self.navigation_repo.delete_entry(entry_id)
        if not deleted:
            raise NotFound("Navigation entry", entry_id)
        logger.info(f"Deleted navigation entry {entry_id}")
