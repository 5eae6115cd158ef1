"""Navigation routes for the REST API."""
from typing import List
from fastapi import APIRouter, Depends, status

from api.dependencies import get_navigation, require_admin
from api.services.identity import SessionContext
from api.services.navigation import NavigationResolver, visible_menu
from api.schemas.requests import NavigationInput
from api.schemas.responses import DeleteResponse, MenuResponse, NavigationEntryResponse


router = APIRouter(prefix="/navigation", tags=["navigation"])

# Served when no entries are configured
DEFAULT_MENU = [
    NavigationEntryResponse(title="Home", path="/", type="internal", order=0, enabled=True),
    NavigationEntryResponse(title="React", path="/category/react", type="category", order=1, enabled=True),
    NavigationEntryResponse(title="JavaScript", path="/category/javascript", type="category", order=2, enabled=True),
    NavigationEntryResponse(title="CSS", path="/category/css", type="category", order=3, enabled=True),
]


@router.get("/menu", response_model=MenuResponse)
async def get_menu(resolver: NavigationResolver = Depends(get_navigation)):
    """Enabled menu entries for readers, or the default menu when none exist."""
    entries = await resolver.resolve_menu()
    if not entries:
        return MenuResponse(items=DEFAULT_MENU, is_default=True)

    return MenuResponse(
        items=[NavigationEntryResponse.from_model(entry) for entry in visible_menu(entries)],
        is_default=False
    )


@router.get("", response_model=List[NavigationEntryResponse])
async def list_entries(
    session: SessionContext = Depends(require_admin),
    resolver: NavigationResolver = Depends(get_navigation)
):
    """Every entry, disabled ones included, for the admin preview."""
    entries = await resolver.resolve_menu()
    return [NavigationEntryResponse.from_model(entry) for entry in entries]


@router.post("", response_model=NavigationEntryResponse, status_code=status.HTTP_201_CREATED)
async def create_entry(
    request: NavigationInput,
    session: SessionContext = Depends(require_admin),
    resolver: NavigationResolver = Depends(get_navigation)
):
    entry = await resolver.create_entry(request)
    return NavigationEntryResponse.from_model(entry)


@router.put("/{entry_id}", response_model=NavigationEntryResponse)
async def update_entry(
    entry_id: str,
    request: NavigationInput,
    session: SessionContext = Depends(require_admin),
    resolver: NavigationResolver = Depends(get_navigation)
):
    entry = await resolver.update_entry(entry_id, request)
    return NavigationEntryResponse.from_model(entry)


@router.delete("/{entry_id}", response_model=DeleteResponse)
async def delete_entry(
    entry_id: str,
    session: SessionContext = Depends(require_admin),
    resolver: NavigationResolver = Depends(get_navigation)
):
    await resolver.delete_entry(entry_id)
    return DeleteResponse(id=entry_id, message="Navigation entry deleted")
