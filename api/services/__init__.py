# Services module
from .identity import IdentityGate, Identity, SessionContext, SessionState
from .publication import PublicationWorkflow
from .categories import CategoryManager, CategoryDeletion
from .navigation import NavigationResolver, visible_menu
from .seo import SeoService

__all__ = [
    "IdentityGate",
    "Identity",
    "SessionContext",
    "SessionState",
    "PublicationWorkflow",
    "CategoryManager",
    "CategoryDeletion",
    "NavigationResolver",
    "visible_menu",
    "SeoService"
]
