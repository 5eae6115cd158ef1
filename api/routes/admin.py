"""Admin dashboard routes."""
from typing import List
from fastapi import APIRouter, Depends

from api.dependencies import get_publication, require_admin
from api.services.identity import SessionContext
from api.services.publication import PublicationWorkflow
from api.schemas.responses import ArticleSummary, DashboardStatsResponse


router = APIRouter(prefix="/admin", tags=["admin"])


@router.get("/articles", response_model=List[ArticleSummary])
async def list_all_articles(
    session: SessionContext = Depends(require_admin),
    workflow: PublicationWorkflow = Depends(get_publication)
):
    """Every article, drafts included, newest first."""
    articles = await workflow.list_all()
    return [ArticleSummary.from_model(article) for article in articles]


@router.get("/stats", response_model=DashboardStatsResponse)
async def dashboard_stats(
    session: SessionContext = Depends(require_admin),
    workflow: PublicationWorkflow = Depends(get_publication)
):
    stats = await workflow.dashboard_stats()
    return DashboardStatsResponse(**stats)
