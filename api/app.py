"""
Shorts Factory REST API

FastAPI application exposing generation, connection check and provider
settings via HTTP endpoints.

Usage:
    uvicorn api.app:app --reload --port 8000
"""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from api.config import APIConfig
from api.routers import connection, generate, health, settings
from shorts_factory import __version__
from shorts_factory.utils.logging_config import configure_logging

config = APIConfig.load()
configure_logging("debug" if config.debug else None)

app = FastAPI(
    title="Shorts Factory API",
    description="REST API for generating narrated vertical short-video scripts with Gemini or OpenAI.",
    version=__version__,
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=config.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Register routers under /api/v1 prefix
PREFIX = "/api/v1"
app.include_router(health.router, prefix=PREFIX, tags=["Health"])
app.include_router(connection.router, prefix=PREFIX, tags=["Providers"])
app.include_router(settings.router, prefix=PREFIX, tags=["Providers"])
app.include_router(generate.router, prefix=PREFIX, tags=["Generation"])


@app.get("/")
async def root():
    """Root endpoint with API info."""
    return {
        "name": "Shorts Factory API",
        "version": __version__,
        "docs": "/docs",
        "health": "/api/v1/health",
    }
