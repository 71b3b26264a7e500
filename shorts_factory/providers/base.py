"""
Base Generation Provider Protocol

Defines the abstract base class every AI provider implements. The
orchestration shape is the same for all providers; only the wire calls
differ. Providers are selected by ProviderId through ProviderFactory.

Providers perform exactly one network request per method call. Retry,
tier fallback, storage and cancellation are handled by the callers
(ScriptGenerator, AssetGenerator, ConnectionProber).
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional, Tuple

from shorts_factory.audio import SpeechPayload
from shorts_factory.models import ProviderId, VideoLanguage


@dataclass(frozen=True)
class ImageTier:
    """One image model tier.

    Attributes:
        model: Provider model identifier
        max_attempts: Retry budget for this tier
        initial_delay_ms: Base backoff delay for this tier
        size: Optional provider-specific size hint
    """
    model: str
    max_attempts: int = 3
    initial_delay_ms: int = 2000
    size: Optional[str] = None


@dataclass
class GeneratedImage:
    """Image bytes returned by a provider."""
    data: bytes
    mime_type: str = "image/png"


class BaseGenerationProvider(ABC):
    """Abstract base class for AI provider implementations.

    The provider is responsible for:
    - Requesting a schema-constrained script document
    - Generating one vertical image for a prompt with a given model tier
    - Synthesizing narration with a fixed voice
    - Answering a lightweight liveness request

    Errors are raised as ProviderError subclasses (RateLimitError for
    throttling) carrying the provider's own message.
    """

    provider_id: ProviderId

    @property
    def display_name(self) -> str:
        return self.provider_id.display_name

    @property
    @abstractmethod
    def image_tiers(self) -> Tuple[ImageTier, ...]:
        """Image model tiers, cheapest/fastest first."""
        pass

    @property
    def pacing_delay(self) -> float:
        """Seconds to wait between scenes; 0 for providers without per-key pacing."""
        return 0.0

    @abstractmethod
    def describe_models(self) -> str:
        """Short human readable model summary used in progress messages."""
        pass

    @abstractmethod
    async def generate_script_json(self, topic: str, language: VideoLanguage) -> str:
        """Request a structured script and return the raw JSON text.

        Raises:
            ProviderError: If the API call fails
        """
        pass

    @abstractmethod
    async def generate_image(self, prompt: str, tier: ImageTier) -> GeneratedImage:
        """Generate one 9:16 image with the model of ``tier``.

        Raises:
            ProviderError: If the call fails or returns no image data
        """
        pass

    @abstractmethod
    async def synthesize_speech(self, text: str) -> SpeechPayload:
        """Synthesize ``text`` with the provider's narrator voice.

        Raises:
            ProviderError: If the call fails or returns no audio
        """
        pass

    @abstractmethod
    async def ping(self) -> str:
        """Issue one minimal request; return a connection message on success.

        Raises:
            ProviderError: If the provider cannot be reached with this key
        """
        pass
