"""Category routes for the REST API."""
from typing import List
from fastapi import APIRouter, Depends, Response, status

from api.dependencies import get_category_manager, get_publication, require_admin
from api.services.categories import CategoryManager
from api.services.identity import SessionContext
from api.services.publication import PublicationWorkflow
from api.schemas.requests import CategoryInput
from api.schemas.responses import (
    ArticleSummary,
    CategoryArticlesResponse,
    CategoryDeleteResponse,
    CategoryResponse
)


router = APIRouter(prefix="/categories", tags=["categories"])


@router.get("", response_model=List[CategoryResponse])
async def list_categories(manager: CategoryManager = Depends(get_category_manager)):
    """List categories by name with their article counts."""
    categories = await manager.list_categories()
    counts = await manager.article_counts(categories)
    return [
        CategoryResponse.from_model(category, article_count=counts.get(category.name, 0))
        for category in categories
    ]


@router.get("/{slug}/articles", response_model=CategoryArticlesResponse)
async def category_page(
    slug: str,
    manager: CategoryManager = Depends(get_category_manager),
    workflow: PublicationWorkflow = Depends(get_publication)
):
    """Resolve a slug to its category, then list that category's articles by name."""
    category = await manager.get_by_slug(slug)
    articles = await workflow.list_published(category.name)
    return CategoryArticlesResponse(
        category=CategoryResponse.from_model(category, article_count=len(articles)),
        articles=[ArticleSummary.from_model(article) for article in articles]
    )


@router.post("", response_model=CategoryResponse, status_code=status.HTTP_201_CREATED)
async def create_category(
    request: CategoryInput,
    session: SessionContext = Depends(require_admin),
    manager: CategoryManager = Depends(get_category_manager)
):
    category = await manager.create_category(request)
    return CategoryResponse.from_model(category, article_count=0)


@router.put("/{category_id}", response_model=CategoryResponse)
async def update_category(
    category_id: str,
    request: CategoryInput,
    session: SessionContext = Depends(require_admin),
    manager: CategoryManager = Depends(get_category_manager)
):
    category = await manager.update_category(category_id, request)
    return CategoryResponse.from_model(category)


@router.delete("/{category_id}", response_model=CategoryDeleteResponse)
async def delete_category(
    category_id: str,
    response: Response,
    confirm: bool = False,
    session: SessionContext = Depends(require_admin),
    manager: CategoryManager = Depends(get_category_manager)
):
    """
    Delete a category.

    If articles still use it, the first call answers 409 with the article
    count; repeat with confirm=true to delete and uncategorize them.
    """
    result = await manager.delete_category(category_id, confirm=confirm)
    if result.requires_confirmation:
        response.status_code = status.HTTP_409_CONFLICT

    return CategoryDeleteResponse(
        id=result.category.id,
        name=result.category.name,
        deleted=result.deleted,
        requires_confirmation=result.requires_confirmation,
        article_count=result.article_count,
        updated_count=result.updated_count
    )
