"""Search engine artifacts: sitemap, robots policy and page metadata."""
import logging
import xml.etree.ElementTree as ET
from datetime import date
from typing import Any, Dict, List, Optional
from motor.motor_asyncio import AsyncIOMotorDatabase

from database.repositories.article_repo import ArticleRepository
from database.repositories.category_repo import CategoryRepository
from database.repositories.navigation_repo import NavigationRepository
from api.models import ArticleModel, CategoryModel, NavigationEntryModel, NavigationTypeEnum
from shared.config import settings
from shared.exceptions import NotFound
from shared.utils import format_date, format_datetime, generate_slug

logger = logging.getLogger(__name__)

SITEMAP_NAMESPACE = "http://www.sitemaps.org/schemas/sitemap/0.9"
ROBOTS_DISALLOW = ("/admin", "/login", "/create", "/edit")


def _add_url(urlset: ET.Element, loc: str, lastmod: str, changefreq: str, priority: str):
    url = ET.SubElement(urlset, "url")
    ET.SubElement(url, "loc").text = loc
    ET.SubElement(url, "lastmod").text = lastmod
    ET.SubElement(url, "changefreq").text = changefreq
    ET.SubElement(url, "priority").text = priority


def build_sitemap(
    base_url: str,
    articles: List[ArticleModel],
    categories: List[CategoryModel],
    navigation: List[NavigationEntryModel],
    today: Optional[date] = None
) -> str:
    """Render the sitemap document for the given store contents."""
    base_url = base_url.rstrip("/")
    today_str = (today or date.today()).isoformat()

    urlset = ET.Element("urlset", xmlns=SITEMAP_NAMESPACE)
    _add_url(urlset, base_url, today_str, "daily", "1.0")

    for article in articles:
        if not article.published:
            continue
        lastmod = format_date(article.updated_at) if article.updated_at else today_str
        _add_url(urlset, f"{base_url}/article/{article.id}", lastmod, "monthly", "0.8")

    for category in categories:
        slug = category.slug or generate_slug(category.name)
        _add_url(urlset, f"{base_url}/category/{slug}", today_str, "weekly", "0.6")

    for entry in navigation:
        # The homepage is already listed
        if entry.type == NavigationTypeEnum.INTERNAL and entry.enabled and entry.path != "/":
            _add_url(urlset, f"{base_url}{entry.path}", today_str, "monthly", "0.7")

    body = ET.tostring(urlset, encoding="unicode")
    return f'<?xml version="1.0" encoding="UTF-8"?>\n{body}\n'


def build_robots_txt(base_url: str, crawl_delay: int) -> str:
    """Allow everything except the admin-only pages."""
    lines = [
        "User-agent: *",
        "Allow: /",
        "",
        f"Sitemap: {base_url.rstrip('/')}/sitemap.xml",
        "",
        f"Crawl-delay: {crawl_delay}",
        "",
    ]
    lines.extend(f"Disallow: {path}" for path in ROBOTS_DISALLOW)
    return "\n".join(lines) + "\n"


def build_article_metadata(article: ArticleModel, base_url: str, site_name: str) -> Dict[str, Any]:
    """Head metadata for an article page (title, Open Graph, Twitter, JSON-LD)."""
    base_url = base_url.rstrip("/")
    full_title = f"{article.title} | {site_name}"
    description = article.excerpt or settings.site_description
    image = article.cover_image or f"{base_url}/logo192.png"
    url = f"{base_url}/article/{article.id}"
    keywords = ", ".join(article.tags)

    return {
        "title": full_title,
        "description": description,
        "keywords": keywords,
        "canonical_url": url,
        "open_graph": {
            "og:type": "article",
            "og:title": full_title,
            "og:description": description,
            "og:image": image,
            "og:url": url,
            "og:site_name": site_name
        },
        "twitter": {
            "twitter:card": "summary_large_image",
            "twitter:title": full_title,
            "twitter:description": description,
            "twitter:image": image
        },
        "article": {
            "article:author": article.author,
            "article:published_time": format_datetime(article.created_at),
            "article:modified_time": format_datetime(article.updated_at),
            "article:section": article.category,
            "article:tag": list(article.tags)
        },
        "json_ld": {
            "@context": "https://schema.org",
            "@type": "Article",
            "name": full_title,
            "headline": article.title,
            "description": description,
            "image": image,
            "url": url,
            "publisher": {
                "@type": "Organization",
                "name": site_name,
                "logo": {"@type": "ImageObject", "url": f"{base_url}/logo192.png"}
            },
            "author": {"@type": "Person", "name": article.author},
            "datePublished": format_datetime(article.created_at),
            "dateModified": format_datetime(article.updated_at),
            "articleSection": article.category,
            "keywords": keywords
        }
    }


class SeoService:
    """Builds SEO documents from the current store contents."""

    def __init__(self, db: AsyncIOMotorDatabase):
        self.article_repo = ArticleRepository(db)
        self.category_repo = CategoryRepository(db)
        self.navigation_repo = NavigationRepository(db)
        self.base_url = settings.site_base_url
        self.site_name = settings.site_name

    async def generate_sitemap(self, today: Optional[date] = None) -> str:
        articles = [ArticleModel(**a) for a in await self.article_repo.list_published()]
        categories = [CategoryModel(**c) for c in await self.category_repo.list_categories()]
        navigation = [NavigationEntryModel(**n) for n in await self.navigation_repo.list_entries()]

        logger.info(
            f"Generating sitemap: {len(articles)} articles, {len(categories)} categories, "
            f"{len(navigation)} navigation entries"
        )
        return build_sitemap(self.base_url, articles, categories, navigation, today=today)

    def generate_robots_txt(self) -> str:
        return build_robots_txt(self.base_url, settings.robots_crawl_delay)

    async def article_metadata(self, article_id: str) -> Dict[str, Any]:
        """Metadata for a published article. Reading it does not count a view."""
        article = await self.article_repo.get_article(article_id)
        if article is None or not article.get("published"):
            raise NotFound("Article", article_id)
        return build_article_metadata(ArticleModel(**article), self.base_url, self.site_name)
