"""Pydantic request/response models for the REST API."""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

from shorts_factory.models import ProviderId, VideoLanguage


# --- Response Models ---

class HealthResponse(BaseModel):
    status: str = "ok"
    version: str
    providers: List[str]


class ConnectionResponse(BaseModel):
    success: bool
    latency_ms: int = Field(..., serialization_alias="latencyMs")
    message: str


class ProviderKeyStatus(BaseModel):
    provider: ProviderId
    configured: bool
    masked_key: Optional[str] = None


class SettingsResponse(BaseModel):
    provider: ProviderId
    keys: List[ProviderKeyStatus]


class GenerateResponse(BaseModel):
    """Generated script in renderer form plus hand-off helpers."""
    script: Dict[str, Any]
    duration_in_frames: int
    fps: int
    width: int
    height: int
    music_track: str
    render_command: str


class CancelResponse(BaseModel):
    cancelled: bool


# --- Request Models ---

class ProviderRequest(BaseModel):
    provider: ProviderId


class ApiKeyRequest(BaseModel):
    key: str = Field(..., description="API key; an empty value removes the stored key")


class GenerateRequest(BaseModel):
    topic: str = Field(..., min_length=1, description="Free-text topic of the video")
    language: VideoLanguage = VideoLanguage.PT_BR
    provider: Optional[ProviderId] = Field(None, description="Override the stored provider for this request")
