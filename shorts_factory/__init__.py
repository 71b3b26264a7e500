"""
Shorts Factory

Turns a text topic into a vertical short-video script with generated
narration and images, ready for an external renderer. Two AI providers
(Gemini and OpenAI) share one orchestration: script, then per-scene
image and narration, with retry on rate limits, image tier fallback,
cooperative cancellation and progress reporting.
"""

__version__ = "0.1.0"

from shorts_factory.cancellation import CancellationToken
from shorts_factory.config import AppConfig
from shorts_factory.connection import ConnectionProber, ConnectionResult
from shorts_factory.errors import (
    ConfigurationError,
    GenerationCancelled,
    ProviderError,
    RateLimitError,
    ScriptValidationError,
    ShortsFactoryError,
)
from shorts_factory.factory import ProviderFactory
from shorts_factory.models import ProviderId, Scene, VideoLanguage, VideoScript
from shorts_factory.orchestrator import GenerationOrchestrator, GenerationState
from shorts_factory.retry import with_retry
from shorts_factory.settings import MemorySettingsBackend, ProviderSettings, YamlSettingsBackend

__all__ = [
    "CancellationToken",
    "AppConfig",
    "ConnectionProber",
    "ConnectionResult",
    "ConfigurationError",
    "GenerationCancelled",
    "ProviderError",
    "RateLimitError",
    "ScriptValidationError",
    "ShortsFactoryError",
    "ProviderFactory",
    "ProviderId",
    "Scene",
    "VideoLanguage",
    "VideoScript",
    "GenerationOrchestrator",
    "GenerationState",
    "with_retry",
    "MemorySettingsBackend",
    "ProviderSettings",
    "YamlSettingsBackend",
]
