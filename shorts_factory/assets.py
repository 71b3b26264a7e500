"""
Asset Generator

Per-scene image and narration generation. Each sub-operation goes
through the retry policy independently. Failures are recoverable at the
scene level: they are logged and turned into "no image" / "no audio".
Cancellation is the only condition that propagates.

Persistence: generated bytes are uploaded to the storage collaborator.
When the upload fails the asset is returned inline as a data URI, which
the in-browser preview can play but a server-side renderer cannot.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from shorts_factory.audio import extension_for_mime, pcm_duration_seconds, pcm_to_wav
from shorts_factory.cancellation import CancellationToken, check_cancelled
from shorts_factory.errors import GenerationCancelled, StorageError
from shorts_factory.models import Scene, VideoScript
from shorts_factory.prompts import scene_image_prompt
from shorts_factory.providers.base import BaseGenerationProvider, GeneratedImage
from shorts_factory.retry import with_retry
from shorts_factory.storage import StorageBackend, asset_filename, to_data_uri

logger = logging.getLogger(__name__)

SPEECH_MAX_ATTEMPTS = 3
SPEECH_INITIAL_DELAY_MS = 2000

_IMAGE_EXTENSIONS = {"image/png": "png", "image/jpeg": "jpg", "image/webp": "webp"}


@dataclass
class AudioAsset:
    """Narration for one scene.

    Attributes:
        url: Public URL (or data URI fallback)
        duration_seconds: Measured duration; None when the provider returned
            an encoded format whose length is not measured
    """
    url: str
    duration_seconds: Optional[float] = None


class AssetGenerator:
    """Generates and stores the image and narration of each scene.

    Args:
        provider: Active generation provider
        storage: Upload collaborator
        owner_id: Optional user identifier; scopes object names in storage
    """

    def __init__(
        self,
        provider: BaseGenerationProvider,
        storage: StorageBackend,
        owner_id: Optional[str] = None,
    ):
        self.provider = provider
        self.storage = storage
        self.owner_id = owner_id

    async def generate_image(
        self,
        script: VideoScript,
        scene: Scene,
        index: int,
        token: Optional[CancellationToken] = None,
    ) -> Optional[str]:
        """Generate the scene image, trying each model tier in order.

        Returns:
            URL of the stored image, a data URI if storage failed, or None
            if every tier failed
        """
        check_cancelled(token)
        prompt = scene_image_prompt(script.character_description, scene.image_prompt)

        image = None
        for tier in self.provider.image_tiers:
            try:
                image = await with_retry(
                    lambda: self.provider.generate_image(prompt, tier),
                    max_attempts=tier.max_attempts,
                    initial_delay_ms=tier.initial_delay_ms,
                    token=token,
                    label=f"image scene {index} ({tier.model})",
                )
                break
            except GenerationCancelled:
                raise
            except Exception as e:
                logger.warning(f"{self.provider.display_name} image tier {tier.model} failed for scene {index}: {e}")

        if image is None:
            logger.error(f"Image generation failed for scene {index}; scene will use a fallback visual")
            return None

        return await self._persist_image(image, index)

    async def generate_audio(
        self,
        scene: Scene,
        index: int,
        token: Optional[CancellationToken] = None,
    ) -> Optional[AudioAsset]:
        """Synthesize and store the scene narration.

        Raw PCM is wrapped into WAV and measured exactly; encoded formats
        are stored as returned and their duration is left unknown.

        Returns:
            AudioAsset, or None if synthesis failed
        """
        check_cancelled(token)
        try:
            speech = await with_retry(
                lambda: self.provider.synthesize_speech(scene.text),
                max_attempts=SPEECH_MAX_ATTEMPTS,
                initial_delay_ms=SPEECH_INITIAL_DELAY_MS,
                token=token,
                label=f"narration scene {index}",
            )
        except GenerationCancelled:
            raise
        except Exception as e:
            logger.error(f"{self.provider.display_name} TTS failed for scene {index}: {e}; scene will be silent")
            return None

        if speech.is_raw_pcm:
            duration = pcm_duration_seconds(speech.data, speech.sample_rate)
            data, mime_type, ext = pcm_to_wav(speech.data, speech.sample_rate), "audio/wav", "wav"
        else:
            duration = None
            data, mime_type, ext = speech.data, speech.mime_type, extension_for_mime(speech.mime_type)

        url = await self._persist(data, asset_filename("audio", index, ext), mime_type)
        return AudioAsset(url=url, duration_seconds=duration)

    async def _persist_image(self, image: GeneratedImage, index: int) -> str:
        ext = _IMAGE_EXTENSIONS.get(image.mime_type, "png")
        return await self._persist(image.data, asset_filename("image", index, ext), image.mime_type)

    async def _persist(self, data: bytes, filename: str, mime_type: str) -> str:
        try:
            return await self.storage.upload(data, filename, mime_type, self.owner_id)
        except StorageError as e:
            logger.error(f"Failed to upload {filename}: {e}")
            logger.warning("Using inline data URI as fallback (will not work for server-side rendering)")
            return to_data_uri(data, mime_type)
