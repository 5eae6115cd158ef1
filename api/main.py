"""Main FastAPI application."""
import asyncio
import logging
from contextlib import asynccontextmanager
from typing import Optional
from fastapi import FastAPI, WebSocket, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pymongo.errors import ConnectionFailure
from redis.exceptions import ConnectionError as RedisConnectionError

from database.connection import DatabaseConnection, get_redis
from api.routes import (
    admin_router,
    articles_router,
    auth_router,
    categories_router,
    navigation_router,
    seo_router
)
from api.services.identity import IdentityGate
from api.websocket import websocket_endpoint, redis_subscriber
from shared.config import settings
from shared.exceptions import BlogServiceError

logging.basicConfig(
    level=settings.log_level.upper(),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


# Background task for Redis subscriber
subscriber_task = None


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""
    global subscriber_task

    # Startup
    await DatabaseConnection.init_mongo()
    await DatabaseConnection.init_redis()

    # Forward session sign-outs to WebSocket observers
    redis_client = await get_redis()
    subscriber_task = asyncio.create_task(redis_subscriber(redis_client))
    logger.info("Blog content service started")

    yield

    # Shutdown
    if subscriber_task:
        subscriber_task.cancel()
        try:
            await subscriber_task
        except asyncio.CancelledError:
            pass

    await DatabaseConnection.close_connections()


# Create FastAPI app
app = FastAPI(
    title="Blog Content Service",
    description="Articles, categories and navigation for a single-admin blog",
    version="1.0.0",
    lifespan=lifespan
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Exception handlers
@app.exception_handler(BlogServiceError)
async def blog_error_handler(request: Request, exc: BlogServiceError):
    """Turn domain errors into JSON responses with their status code."""
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


@app.exception_handler(ConnectionFailure)
@app.exception_handler(RedisConnectionError)
async def store_unavailable_handler(request: Request, exc: Exception):
    """Backing store outages surface once, without retries."""
    logger.error(f"{request.method} {request.url.path}: store unavailable: {exc}")
    return JSONResponse(
        status_code=503,
        content={"error": "Store unavailable", "detail": str(exc)}
    )


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Global exception handler."""
    logger.exception(f"Unhandled error on {request.method} {request.url.path}")
    return JSONResponse(
        status_code=500,
        content={"error": "Internal server error", "detail": str(exc)}
    )


# Include routers
app.include_router(auth_router)
app.include_router(articles_router)
app.include_router(categories_router)
app.include_router(navigation_router)
app.include_router(admin_router)
app.include_router(seo_router)


# WebSocket endpoint
@app.websocket("/ws/session")
async def websocket_session(websocket: WebSocket, token: Optional[str] = None):
    """WebSocket endpoint for session state changes."""
    gate = IdentityGate(await get_redis())
    await websocket_endpoint(websocket, gate, token)


# Health check endpoint
@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy"}


@app.get("/")
async def root():
    """Root endpoint with API info."""
    return {
        "name": "Blog Content Service",
        "version": "1.0.0",
        "docs": "/docs",
        "health": "/health"
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "api.main:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.api_debug
    )
