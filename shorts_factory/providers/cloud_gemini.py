"""
Cloud Gemini Provider

Google Gemini provider: structured script generation with a response
schema, two-tier image generation (Flash Image, then Pro Image) and
Gemini TTS returning raw 24kHz PCM.

File naming follows pattern: cloud_{service}.py
Provider ID: gemini
"""

import base64
import logging
from typing import Any, Optional, Tuple

from shorts_factory.audio import SpeechPayload, sample_rate_from_mime
from shorts_factory.config import GeminiConfig
from shorts_factory.errors import ProviderError, classify_provider_error
from shorts_factory.models import SCRIPT_RESPONSE_SCHEMA, ProviderId, VideoLanguage
from shorts_factory.prompts import gemini_script_prompt
from shorts_factory.providers.base import BaseGenerationProvider, GeneratedImage, ImageTier

logger = logging.getLogger(__name__)


class CloudGeminiProvider(BaseGenerationProvider):
    """Cloud Gemini provider.

    Uses the google-genai async client (``client.aio.models``). The client
    is created lazily so that constructing the provider never touches the
    network.

    Example:
        >>> provider = CloudGeminiProvider(api_key, GeminiConfig())
        >>> raw = await provider.generate_script_json("5 facts about Mars", VideoLanguage.EN_US)
    """

    provider_id = ProviderId.GEMINI
    NAME = "Gemini"

    def __init__(self, api_key: str, config: Optional[GeminiConfig] = None):
        self.api_key = api_key
        self.config = config or GeminiConfig()
        self._client = None
        self._types = None

    @property
    def client(self):
        """Lazy-load the google-genai client."""
        if self._client is None:
            from google import genai
            self._client = genai.Client(api_key=self.api_key)
        return self._client

    @property
    def types(self):
        if self._types is None:
            from google.genai import types
            self._types = types
        return self._types

    @property
    def image_tiers(self) -> Tuple[ImageTier, ...]:
        models = self.config.image_models
        tiers = [ImageTier(model=models[0], max_attempts=3, initial_delay_ms=2000)]
        for model in models[1:]:
            tiers.append(ImageTier(
                model=model,
                max_attempts=2,
                initial_delay_ms=3000,
                size=self.config.pro_image_size,
            ))
        return tuple(tiers)

    @property
    def pacing_delay(self) -> float:
        return self.config.pacing_delay

    def describe_models(self) -> str:
        return f"Gemini ({self.config.script_model})"

    async def generate_script_json(self, topic: str, language: VideoLanguage) -> str:
        types = self.types
        try:
            response = await self.client.aio.models.generate_content(
                model=self.config.script_model,
                contents=gemini_script_prompt(topic, language),
                config=types.GenerateContentConfig(
                    response_mime_type="application/json",
                    response_schema=SCRIPT_RESPONSE_SCHEMA,
                ),
            )
        except Exception as e:
            raise classify_provider_error(e, self.NAME) from e

        text = getattr(response, "text", None)
        if not text:
            raise ProviderError("Gemini returned an empty script response")
        return text

    async def generate_image(self, prompt: str, tier: ImageTier) -> GeneratedImage:
        types = self.types
        if tier.size:
            image_config = types.ImageConfig(aspect_ratio="9:16", image_size=tier.size)
        else:
            image_config = types.ImageConfig(aspect_ratio="9:16")
        try:
            response = await self.client.aio.models.generate_content(
                model=tier.model,
                contents=prompt,
                config=types.GenerateContentConfig(image_config=image_config),
            )
        except Exception as e:
            raise classify_provider_error(e, self.NAME) from e

        data, mime_type = _first_inline_data(response)
        if data is None:
            raise ProviderError(f"Gemini model {tier.model} returned no image data")
        return GeneratedImage(data=data, mime_type=mime_type or "image/png")

    async def synthesize_speech(self, text: str) -> SpeechPayload:
        types = self.types
        try:
            response = await self.client.aio.models.generate_content(
                model=self.config.tts_model,
                contents=text,
                config=types.GenerateContentConfig(
                    response_modalities=["AUDIO"],
                    speech_config=types.SpeechConfig(
                        voice_config=types.VoiceConfig(
                            prebuilt_voice_config=types.PrebuiltVoiceConfig(
                                voice_name=self.config.voice,
                            )
                        )
                    ),
                ),
            )
        except Exception as e:
            raise classify_provider_error(e, self.NAME) from e

        data, mime_type = _first_inline_data(response)
        if data is None:
            raise ProviderError("Gemini TTS returned no audio data")
        # Gemini TTS answers with headerless PCM, sometimes without a MIME type.
        mime_type = mime_type or f"audio/L16;codec=pcm;rate={self.config.sample_rate}"
        return SpeechPayload(
            data=data,
            mime_type=mime_type,
            sample_rate=sample_rate_from_mime(mime_type, self.config.sample_rate),
        )

    async def ping(self) -> str:
        try:
            await self.client.aio.models.generate_content(
                model=self.config.ping_model,
                contents="Ping",
            )
        except Exception as e:
            raise classify_provider_error(e, self.NAME) from e
        return f"Connected to Gemini ({self.config.ping_model})"


def _first_inline_data(response: Any):
    """Return (bytes, mime_type) of the first inline part, or (None, None)."""
    for candidate in getattr(response, "candidates", None) or []:
        content = getattr(candidate, "content", None)
        for part in getattr(content, "parts", None) or []:
            inline_data = getattr(part, "inline_data", None)
            if not inline_data or not getattr(inline_data, "data", None):
                continue
            data = inline_data.data
            if isinstance(data, str):
                data = base64.b64decode(data)
            return data, getattr(inline_data, "mime_type", None)
    return None, None
