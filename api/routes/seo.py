"""SEO document routes."""
from typing import Any, Dict
from fastapi import APIRouter, Depends, Response
from fastapi.responses import PlainTextResponse

from api.dependencies import get_seo
from api.services.seo import SeoService


router = APIRouter(tags=["seo"])


@router.get("/sitemap.xml")
async def sitemap(seo: SeoService = Depends(get_seo)):
    """Sitemap built from the current articles, categories and menu."""
    return Response(content=await seo.generate_sitemap(), media_type="application/xml")


@router.get("/robots.txt", response_class=PlainTextResponse)
async def robots(seo: SeoService = Depends(get_seo)):
    return seo.generate_robots_txt()


@router.get("/seo/articles/{article_id}")
async def article_metadata(article_id: str, seo: SeoService = Depends(get_seo)) -> Dict[str, Any]:
    """Head metadata (Open Graph, Twitter, JSON-LD) for a published article."""
    return await seo.article_metadata(article_id)
