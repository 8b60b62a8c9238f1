# src/mapdrop/main.py
"""Main entry point for the MapDrop application."""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse

from mapdrop.api.v1 import (
    admin_router,
    auth_router,
    badges_router,
    locations_router,
    users_router,
    votes_router,
)
from mapdrop.core.settings import settings
from mapdrop.services.errors import MapDropError

logger = logging.getLogger(__name__)

# Initialize FastAPI app
app = FastAPI(
    title="MapDrop API",
    description="Geotagged posts, votes and badges",
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

# Include API routers
app.include_router(auth_router, prefix="/api/v1")
app.include_router(users_router, prefix="/api/v1")
app.include_router(locations_router, prefix="/api/v1")
app.include_router(votes_router, prefix="/api/v1")
app.include_router(badges_router, prefix="/api/v1")
app.include_router(admin_router, prefix="/api/v1")


@app.exception_handler(MapDropError)
async def handle_service_error(request: Request, exc: MapDropError) -> JSONResponse:
    """Translate typed service failures into JSON error responses."""
    if exc.status_code >= 500:
        logger.error("Unhandled service failure on %s: %s", request.url.path, exc.detail)
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.detail})


@app.get("/health")
async def health_check() -> dict[str, str]:
    """Health check endpoint to verify the service is running."""
    return {"status": "ok"}


@app.get("/")
async def root() -> dict[str, str]:
    """Root endpoint with basic information about the API."""
    return {
        "name": "MapDrop API",
        "version": settings.app_version,
        "docs": "/docs",
        "redoc": "/redoc",
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("mapdrop.main:app", host="0.0.0.0", port=8000, reload=settings.debug)
