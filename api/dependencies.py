"""FastAPI dependencies for sessions, access control and services."""
from typing import Optional
from fastapi import Depends, Header
from motor.motor_asyncio import AsyncIOMotorDatabase
import redis.asyncio as redis

from database.connection import get_db, get_redis
from api.services.identity import IdentityGate, SessionContext
from api.services.publication import PublicationWorkflow
from api.services.categories import CategoryManager
from api.services.navigation import NavigationResolver
from api.services.seo import SeoService
from shared.exceptions import AuthenticationRequired, PermissionDenied


def bearer_token(authorization: Optional[str]) -> Optional[str]:
    """Extract the token from an "Authorization: Bearer ..." header."""
    if not authorization:
        return None
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()


async def get_identity_gate(redis_client: redis.Redis = Depends(get_redis)) -> IdentityGate:
    return IdentityGate(redis_client)


async def get_session(
    authorization: Optional[str] = Header(default=None),
    gate: IdentityGate = Depends(get_identity_gate)
) -> SessionContext:
    """Resolve the caller's session before the handler runs."""
    return await gate.open_session(bearer_token(authorization))


async def require_admin(session: SessionContext = Depends(get_session)) -> SessionContext:
    """Gate for every mutating route."""
    if session.current_identity() is None:
        raise AuthenticationRequired()
    if not session.is_admin():
        raise PermissionDenied()
    return session


def get_publication(db: AsyncIOMotorDatabase = Depends(get_db)) -> PublicationWorkflow:
    return PublicationWorkflow(db)


def get_category_manager(db: AsyncIOMotorDatabase = Depends(get_db)) -> CategoryManager:
    return CategoryManager(db)


def get_navigation(db: AsyncIOMotorDatabase = Depends(get_db)) -> NavigationResolver:
    return NavigationResolver(db)


def get_seo(db: AsyncIOMotorDatabase = Depends(get_db)) -> SeoService:
    return SeoService(db)
