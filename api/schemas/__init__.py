# Schemas module
from .requests import ArticleInput, CategoryInput, NavigationInput, SignInRequest
from .responses import (
    ArticleSummary,
    ArticleResponse,
    DeleteResponse,
    CategoryResponse,
    CategoryArticlesResponse,
    CategoryDeleteResponse,
    NavigationEntryResponse,
    MenuResponse,
    IdentityResponse,
    SessionResponse,
    SignInResponse,
    DashboardStatsResponse
)

__all__ = [
    "ArticleInput",
    "CategoryInput",
    "NavigationInput",
    "SignInRequest",
    "ArticleSummary",
    "ArticleResponse",
    "DeleteResponse",
    "CategoryResponse",
    "CategoryArticlesResponse",
    "CategoryDeleteResponse",
    "NavigationEntryResponse",
    "MenuResponse",
    "IdentityResponse",
    "SessionResponse",
    "SignInResponse",
    "DashboardStatsResponse"
]
