"""
Cloud OpenAI Provider

OpenAI provider: GPT-4o script generation in JSON mode, DALL-E 3 vertical
images (a single tier) and tts-1 narration.

File naming follows pattern: cloud_{service}.py
Provider ID: openai
"""

import base64
import logging
from typing import Optional, Tuple

from shorts_factory.audio import SpeechPayload
from shorts_factory.config import OpenAIConfig
from shorts_factory.errors import ProviderError, classify_provider_error
from shorts_factory.models import ProviderId, VideoLanguage
from shorts_factory.prompts import openai_system_prompt, openai_user_prompt
from shorts_factory.providers.base import BaseGenerationProvider, GeneratedImage, ImageTier

logger = logging.getLogger(__name__)

_TTS_MIME_TYPES = {
    "mp3": "audio/mpeg",
    "opus": "audio/opus",
    "aac": "audio/aac",
    "flac": "audio/flac",
    "wav": "audio/wav",
    "pcm": "audio/pcm",
}


class CloudOpenAIProvider(BaseGenerationProvider):
    """Cloud OpenAI provider.

    Configuration is loaded from:
    1. Environment variables (OPENAI_SCRIPT_MODEL, OPENAI_VOICE, etc.)
    2. Config file (config.yaml openai section)
    3. Defaults (gpt-4o, dall-e-3, tts-1 / onyx)

    Example:
        >>> provider = CloudOpenAIProvider(api_key, OpenAIConfig())
        >>> speech = await provider.synthesize_speech("Hello there")
    """

    provider_id = ProviderId.OPENAI
    NAME = "OpenAI"

    def __init__(self, api_key: str, config: Optional[OpenAIConfig] = None):
        self.api_key = api_key
        self.config = config or OpenAIConfig()
        self._client = None

    @property
    def client(self):
        """Lazy-load the async OpenAI client."""
        if self._client is None:
            import openai
            self._client = openai.AsyncOpenAI(
                api_key=self.api_key,
                timeout=self.config.timeout,
                # Retries are owned by shorts_factory.retry.
                max_retries=0,
            )
        return self._client

    @property
    def image_tiers(self) -> Tuple[ImageTier, ...]:
        return (ImageTier(model=self.config.image_model, max_attempts=3, initial_delay_ms=2000),)

    def describe_models(self) -> str:
        return f"OpenAI ({self.config.script_model} + {self.config.image_model})"

    async def generate_script_json(self, topic: str, language: VideoLanguage) -> str:
        try:
            response = await self.client.chat.completions.create(
                model=self.config.script_model,
                messages=[
                    {"role": "system", "content": openai_system_prompt(language)},
                    {"role": "user", "content": openai_user_prompt(topic)},
                ],
                response_format={"type": "json_object"},
            )
        except Exception as e:
            raise classify_provider_error(e, self.NAME) from e

        content = response.choices[0].message.content if response.choices else None
        if not content:
            raise ProviderError("OpenAI returned an empty script response")
        return content

    async def generate_image(self, prompt: str, tier: ImageTier) -> GeneratedImage:
        try:
            response = await self.client.images.generate(
                model=tier.model,
                prompt=prompt,
                n=1,
                size=tier.size or self.config.image_size,
                response_format="b64_json",
                quality=self.config.image_quality,
            )
        except Exception as e:
            raise classify_provider_error(e, self.NAME) from e

        b64 = response.data[0].b64_json if response.data else None
        if not b64:
            raise ProviderError(f"OpenAI model {tier.model} returned no image data")
        return GeneratedImage(data=base64.b64decode(b64), mime_type="image/png")

    async def synthesize_speech(self, text: str) -> SpeechPayload:
        fmt = self.config.tts_format
        try:
            response = await self.client.audio.speech.create(
                model=self.config.tts_model,
                voice=self.config.voice,
                input=text,
                response_format=fmt,
            )
        except Exception as e:
            raise classify_provider_error(e, self.NAME) from e

        data = response.content
        if not data:
            raise ProviderError("OpenAI TTS returned no audio data")
        return SpeechPayload(
            data=data,
            mime_type=_TTS_MIME_TYPES.get(fmt, "application/octet-stream"),
            sample_rate=self.config.sample_rate,
        )

    async def ping(self) -> str:
        try:
            await self.client.models.list()
        except Exception as e:
            raise classify_provider_error(e, self.NAME) from e
        return f"Connected to OpenAI ({self.config.script_model})"
