"""Generation endpoints.

One orchestrator serves the whole process: a new request cancels the
request in flight, and ``/generate/cancel`` cancels it explicitly.
"""

import logging

from fastapi import APIRouter, Depends, HTTPException

from api.auth import verify_api_key
from api.dependencies import get_context
from api.models import CancelResponse, GenerateRequest, GenerateResponse
from shorts_factory.errors import (
    ConfigurationError,
    GenerationCancelled,
    ProviderError,
    ScriptValidationError,
)
from shorts_factory.render import build_render_command, resolve_music_track, total_duration_in_frames

logger = logging.getLogger(__name__)

router = APIRouter()

# Client closed request; the generation was cancelled rather than failed.
STATUS_CANCELLED = 499


@router.post("/generate", response_model=GenerateResponse)
async def generate(request: GenerateRequest, _key=Depends(verify_api_key), context=Depends(get_context)):
    """Generate a script with per-scene images and narration."""
    topic = request.topic.strip()
    if not topic:
        raise HTTPException(status_code=422, detail="Topic cannot be empty")

    try:
        script = await context.orchestrator.generate(
            topic,
            request.language,
            provider_id=request.provider,
        )
    except GenerationCancelled as e:
        raise HTTPException(status_code=STATUS_CANCELLED, detail=str(e))
    except ConfigurationError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except (ScriptValidationError, ProviderError) as e:
        logger.error(f"Generation failed: {e}")
        raise HTTPException(status_code=502, detail=str(e))

    render_config = context.config.render
    return GenerateResponse(
        script=script.to_renderer_dict(),
        duration_in_frames=total_duration_in_frames(script, render_config.fps),
        fps=render_config.fps,
        width=render_config.width,
        height=render_config.height,
        music_track=resolve_music_track(script.background_music_mood),
        render_command=build_render_command(script, topic, render_config),
    )


@router.post("/generate/cancel", response_model=CancelResponse)
async def cancel(_key=Depends(verify_api_key), context=Depends(get_context)):
    """Cancel the generation in flight, if any."""
    return CancelResponse(cancelled=context.orchestrator.cancel())
