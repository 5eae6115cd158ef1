"""Response schemas for API endpoints."""
from typing import List, Optional
from datetime import datetime
from pydantic import BaseModel, Field

from api.models import ArticleModel, CategoryModel, NavigationEntryModel


class ArticleSummary(BaseModel):
    """Listing view of an article, without the body."""
    id: str = Field(..., description="Store-assigned article identifier")
    title: str
    excerpt: str
    category: str
    tags: List[str]
    cover_image: Optional[str] = None
    published: bool
    views: int
    author: str
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_model(cls, article: ArticleModel) -> "ArticleSummary":
        return cls(**article.model_dump(exclude={"content"}))


class ArticleResponse(ArticleSummary):
    """Full article including the markdown body."""
    content: str

    @classmethod
    def from_model(cls, article: ArticleModel) -> "ArticleResponse":
        return cls(**article.model_dump())


class DeleteResponse(BaseModel):
    id: str
    message: str


class CategoryResponse(BaseModel):
    """Response schema for a category."""
    id: str
    name: str
    slug: str
    description: str
    icon: str
    color: str
    article_count: Optional[int] = Field(None, description="Articles referencing this category")
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_model(cls, category: CategoryModel, article_count: Optional[int] = None) -> "CategoryResponse":
        return cls(**category.model_dump(), article_count=article_count)


class CategoryArticlesResponse(BaseModel):
    """Category page: the category and its published articles."""
    category: CategoryResponse
    articles: List[ArticleSummary] = Field(default_factory=list)


class CategoryDeleteResponse(BaseModel):
    """Outcome of a category deletion request."""
    id: str
    name: str
    deleted: bool
    requires_confirmation: bool = Field(
        False,
        description="True when articles reference the category and confirm was not set"
    )
    article_count: int = Field(..., description="Articles that referenced the category")
    updated_count: int = Field(0, description="Articles moved to uncategorized")


class NavigationEntryResponse(BaseModel):
    """Response schema for a navigation entry."""
    id: Optional[str] = None
    title: str
    path: str
    type: str
    order: int
    enabled: bool

    @classmethod
    def from_model(cls, entry: NavigationEntryModel) -> "NavigationEntryResponse":
        return cls(
            id=entry.id,
            title=entry.title,
            path=entry.path,
            type=entry.type.value,
            order=entry.order,
            enabled=entry.enabled
        )


class MenuResponse(BaseModel):
    """Menu served to readers."""
    items: List[NavigationEntryResponse]
    is_default: bool = Field(..., description="True when no entries are configured")


class IdentityResponse(BaseModel):
    uid: str
    address: str


class SessionResponse(BaseModel):
    """Current session state."""
    state: str
    identity: Optional[IdentityResponse] = None
    is_admin: bool = False


class SignInResponse(SessionResponse):
    token: str
    expires_in: int


class DashboardStatsResponse(BaseModel):
    """Admin dashboard counters."""
    total_articles: int
    published_articles: int
    total_views: int
    total_categories: int
