"""Health and info endpoints."""

from fastapi import APIRouter

from api.models import HealthResponse
from shorts_factory import __version__
from shorts_factory.models import ProviderId

router = APIRouter()

PROVIDERS = [p.value for p in ProviderId]
VERSION = __version__


@router.get("/health", response_model=HealthResponse)
async def health():
    """Health check endpoint."""
    return HealthResponse(status="ok", version=VERSION, providers=PROVIDERS)


@router.get("/version")
async def version():
    """Return API version."""
    return {"version": VERSION}
