"""Article routes for the REST API."""
from typing import List, Optional
from fastapi import APIRouter, Depends, status

from api.dependencies import get_publication, get_session, require_admin
from api.services.identity import SessionContext
from api.services.publication import PublicationWorkflow
from api.schemas.requests import ArticleInput
from api.schemas.responses import ArticleSummary, ArticleResponse, DeleteResponse


router = APIRouter(prefix="/articles", tags=["articles"])


@router.get("", response_model=List[ArticleSummary])
async def list_articles(
    category: Optional[str] = None,
    workflow: PublicationWorkflow = Depends(get_publication)
):
    """List published articles, newest first, optionally for one category name."""
    articles = await workflow.list_published(category)
    return [ArticleSummary.from_model(article) for article in articles]


@router.get("/{article_id}", response_model=ArticleResponse)
async def get_article(
    article_id: str,
    session: SessionContext = Depends(get_session),
    workflow: PublicationWorkflow = Depends(get_publication)
):
    """
    Read an article and count the view.

    Drafts are only visible to the administrator.
    """
    article = await workflow.get_detail(article_id, include_drafts=session.is_admin())
    return ArticleResponse.from_model(article)


@router.post("", response_model=ArticleResponse, status_code=status.HTTP_201_CREATED)
async def create_article(
    request: ArticleInput,
    session: SessionContext = Depends(require_admin),
    workflow: PublicationWorkflow = Depends(get_publication)
):
    """Create an article authored by the signed-in administrator."""
    article = await workflow.create_article(request, author=session.current_identity().address)
    return ArticleResponse.from_model(article)


@router.put("/{article_id}", response_model=ArticleResponse)
async def update_article(
    article_id: str,
    request: ArticleInput,
    session: SessionContext = Depends(require_admin),
    workflow: PublicationWorkflow = Depends(get_publication)
):
    """Replace an article's editable fields."""
    article = await workflow.update_article(article_id, request)
    return ArticleResponse.from_model(article)


@router.post("/{article_id}/toggle-publish", response_model=ArticleResponse)
async def toggle_publish(
    article_id: str,
    session: SessionContext = Depends(require_admin),
    workflow: PublicationWorkflow = Depends(get_publication)
):
    """Publish a draft or take a published article down."""
    article = await workflow.toggle_published(article_id)
    return ArticleResponse.from_model(article)


@router.delete("/{article_id}", response_model=DeleteResponse)
async def delete_article(
    article_id: str,
    session: SessionContext = Depends(require_admin),
    workflow: PublicationWorkflow = Depends(get_publication)
):
    """Permanently delete an article."""
    await workflow.delete_article(article_id)
    return DeleteResponse(id=article_id, message="Article deleted")
