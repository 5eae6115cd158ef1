# Routes module
from .admin import router as admin_router
from .articles import router as articles_router
from .auth import router as auth_router
from .categories import router as categories_router
from .navigation import router as navigation_router
from .seo import router as seo_router

__all__ = [
    "admin_router",
    "articles_router",
    "auth_router",
    "categories_router",
    "navigation_router",
    "seo_router"
]
