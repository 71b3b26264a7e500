"""Connection check of the active provider."""

from fastapi import APIRouter, Depends

from api.auth import verify_api_key
from api.dependencies import get_context
from api.models import ConnectionResponse

router = APIRouter()


@router.get("/connection", response_model=ConnectionResponse)
async def connection(_key=Depends(verify_api_key), context=Depends(get_context)):
    """Ping the active provider with its stored key."""
    result = await context.prober.check_connection()
    return ConnectionResponse(success=result.success, latency_ms=result.latency_ms, message=result.message)
