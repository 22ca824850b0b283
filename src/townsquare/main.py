# src/townsquare/main.py
"""Main entry point for the Townsquare application."""

from __future__ import annotations

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware

from townsquare.api import auth_router, communities_router, posts_router
from townsquare.api.error_handlers import register_error_handlers
from townsquare.core.settings import settings
from townsquare.db.session import SessionLocal, create_tables
from townsquare.services.session_store import DatabaseSessionStore

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

# Initialize FastAPI app
app = FastAPI(
    title="Townsquare API",
    description="Communities, memberships and posts",
    version=settings.app_version,
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=settings.cors_allow_credentials,
    allow_methods=settings.cors_allow_methods,
    allow_headers=settings.cors_allow_headers,
)

# Add GZip middleware for compression
app.add_middleware(GZipMiddleware)

register_error_handlers(app)

# Include API routers
app.include_router(auth_router, prefix="/api")
app.include_router(communities_router, prefix="/api")
app.include_router(posts_router, prefix="/api")


@app.on_event("startup")
async def on_startup() -> None:
    if settings.auto_create_tables:
        create_tables()
    with SessionLocal() as db:
        store = DatabaseSessionStore(db)
        store.create_table_if_missing()
        store.prune_expired()
    logger.info("%s %s ready", settings.app_name, settings.app_version)


@app.get("/health")
async def health_check() -> dict[str, str]:
    """Health check endpoint to verify the service is running."""
    return {"status": "ok"}


@app.get("/")
async def root() -> dict[str, str]:
    """Root endpoint with basic information about the API."""
    return {
        "name": "Townsquare API",
        "version": settings.app_version,
        "description": "Communities, memberships and posts",
        "docs": "/docs",
        "redoc": "/redoc"
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("townsquare.main:app", host="0.0.0.0", port=8000, reload=settings.debug)
