# Models module
from .article import ArticleModel
from .category import CategoryModel, DEFAULT_ICON, DEFAULT_COLOR
from .navigation import NavigationEntryModel, NavigationTypeEnum

__all__ = [
    "ArticleModel",
    "CategoryModel",
    "DEFAULT_ICON",
    "DEFAULT_COLOR",
    "NavigationEntryModel",
    "NavigationTypeEnum"
]
