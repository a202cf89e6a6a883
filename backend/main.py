"""
SiteCraft FastAPI application.

Entry point for the API server.
"""

from __future__ import annotations

import logging

from fastapi import FastAPI

from backend.config import settings
from backend.routes import ai as ai_routes
from backend.routes import pages as pages_routes
from backend.routes import published as published_routes

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

app = FastAPI(
    title="SiteCraft",
    docs_url=None,
    redoc_url=None,
)

# Register routes
app.include_router(pages_routes.router)
app.include_router(ai_routes.router)
app.include_router(published_routes.router)


@app.get("/health")
async def health():
    """Health check endpoint for uptime monitoring."""
    return {"status": "ok"}
