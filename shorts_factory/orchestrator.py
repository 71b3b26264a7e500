"""
Generation Orchestrator

Coordinates one generation request end to end:

    Idle -> Initializing -> WritingScript -> GeneratingAssets(i) -> Done
                                                                +-> Cancelled | Failed

Only one request is active per orchestrator. Starting a new request
cancels the previous token before anything else happens. Scenes are
processed strictly in order; per-scene asset failures degrade that scene
only, while configuration, script and cancellation errors unwind to the
caller and the partial script is discarded.
"""

import logging
import time
from enum import Enum
from typing import Callable, List, Optional

from shorts_factory.assets import AssetGenerator, AudioAsset
from shorts_factory.cancellation import CancellationToken
from shorts_factory.errors import GenerationCancelled
from shorts_factory.factory import ProviderFactory
from shorts_factory.models import ProviderId, Scene, VideoLanguage, VideoScript
from shorts_factory.script_generator import ScriptGenerator
from shorts_factory.settings import ProviderSettings, mask_key
from shorts_factory.storage import StorageBackend
from shorts_factory.utils.logging_config import log_operation_timing

logger = logging.getLogger(__name__)

AUDIO_PADDING_SECONDS = 0.5
MIN_ENCODED_AUDIO_SECONDS = 2.0

PROGRESS_INITIALIZING = 5
PROGRESS_WRITING_SCRIPT = 8
PROGRESS_ASSETS_START = 10
PROGRESS_ASSETS_SPAN = 90
PROGRESS_DONE = 100

ProgressCallback = Callable[[int, str], None]


class GenerationState(str, Enum):
    IDLE = "idle"
    INITIALIZING = "initializing"
    WRITING_SCRIPT = "writing_script"
    GENERATING_ASSETS = "generating_assets"
    DONE = "done"
    CANCELLED = "cancelled"
    FAILED = "failed"


def reconcile_duration(estimate: float, audio: Optional[AudioAsset]) -> float:
    """Scene duration after narration is known.

    Measured audio stretches the scene to cover it plus padding. Encoded
    audio of unknown length only gets a minimal floor. Without audio the
    estimate stands.
    """
    if audio is None:
        return estimate
    if audio.duration_seconds is None:
        return max(estimate, MIN_ENCODED_AUDIO_SECONDS)
    return max(estimate, audio.duration_seconds + AUDIO_PADDING_SECONDS)


def scene_progress(index: int, total: int) -> int:
    return int(PROGRESS_ASSETS_START + (index / total) * PROGRESS_ASSETS_SPAN)


class ProgressReporter:
    """Forwards progress to a callback, never moving backwards.

    A report at or below the last emitted percentage is dropped, except
    for the reset to 0 at the start of a request.
    """

    def __init__(self, callback: Optional[ProgressCallback] = None):
        self.callback = callback
        self.last = -1

    def reset(self, message: str = "") -> None:
        self.last = -1
        self.report(0, message)

    def report(self, percentage: int, message: str) -> None:
        if percentage <= self.last:
            logger.debug(f"Dropping non-increasing progress {percentage}% (last {self.last}%)")
            return
        self.last = percentage
        if self.callback is not None:
            self.callback(percentage, message)


class GenerationOrchestrator:
    """Runs generation requests against the active provider.

    Args:
        settings: Provider selection and API keys
        factory: Provider factory
        storage: Upload collaborator for generated assets
        owner_id: Optional user identifier scoping stored assets

    Example:
        >>> orchestrator = GenerationOrchestrator(settings, ProviderFactory(config), storage)
        >>> script = await orchestrator.generate("5 facts about Mars", VideoLanguage.EN_US)
    """

    def __init__(
        self,
        settings: ProviderSettings,
        factory: ProviderFactory,
        storage: StorageBackend,
        owner_id: Optional[str] = None,
    ):
        self.settings = settings
        self.factory = factory
        self.storage = storage
        self.owner_id = owner_id
        self.state = GenerationState.IDLE
        self._active_token: Optional[CancellationToken] = None

    @property
    def active_token(self) -> Optional[CancellationToken]:
        return self._active_token

    def cancel(self) -> bool:
        """Cancel the active request. Returns False when nothing was running."""
        token = self._active_token
        if token is None or token.cancelled:
            return False
        token.cancel()
        logger.info("Generation cancellation requested")
        return True

    async def generate(
        self,
        topic: str,
        language: VideoLanguage,
        on_progress: Optional[ProgressCallback] = None,
        token: Optional[CancellationToken] = None,
        provider_id: Optional[ProviderId] = None,
    ) -> VideoScript:
        """Generate a complete script with assets.

        ``provider_id`` overrides the stored provider selection for this
        request only.

        Raises:
            GenerationCancelled: If the token is cancelled at a checkpoint
            ConfigurationError: If the active provider has no API key
            ScriptValidationError: If the script response is unusable
            ProviderError: If script generation fails after retries
        """
        if self._active_token is not None:
            self._active_token.cancel()
        token = token or CancellationToken()
        self._active_token = token

        progress = ProgressReporter(on_progress)
        progress.reset()
        start_time = time.time()

        try:
            script = await self._run(topic, VideoLanguage(language), token, progress, provider_id)
        except GenerationCancelled:
            self._finish(token, GenerationState.CANCELLED)
            logger.info("Generation cancelled")
            raise
        except Exception:
            self._finish(token, GenerationState.FAILED)
            raise

        self._finish(token, GenerationState.DONE)
        progress.report(PROGRESS_DONE, "Done")
        log_operation_timing(
            f"Generation of {len(script.scenes)} scenes ({script.total_duration_seconds:.1f}s of video)",
            time.time() - start_time,
            logger,
        )
        return script

    async def _run(
        self,
        topic: str,
        language: VideoLanguage,
        token: CancellationToken,
        progress: ProgressReporter,
        provider_id: Optional[ProviderId] = None,
    ) -> VideoScript:
        self.state = GenerationState.INITIALIZING
        token.raise_if_cancelled()

        provider_id = ProviderId(provider_id) if provider_id else self.settings.get_provider()
        api_key = self.settings.get_api_key(provider_id)
        provider = self.factory.create_provider(provider_id, api_key)
        progress.report(
            PROGRESS_INITIALIZING,
            f"Initializing {provider.display_name} (Key: {mask_key(api_key)})",
        )

        self.state = GenerationState.WRITING_SCRIPT
        token.raise_if_cancelled()
        progress.report(PROGRESS_WRITING_SCRIPT, f"Writing script with {provider.describe_models()}...")
        script = await ScriptGenerator(provider).generate_script(topic, language, token)

        self.state = GenerationState.GENERATING_ASSETS
        assets = AssetGenerator(provider, self.storage, self.owner_id)
        total = len(script.scenes)
        scenes: List[Scene] = []

        for index, scene in enumerate(script.scenes):
            token.raise_if_cancelled()
            progress.report(
                scene_progress(index, total),
                f"Generating assets for scene {index + 1}/{total} with {provider.display_name}...",
            )

            image_url = await assets.generate_image(script, scene, index, token)
            token.raise_if_cancelled()
            audio = await assets.generate_audio(scene, index, token)

            scenes.append(scene.with_assets(
                image_url=image_url,
                audio_url=audio.url if audio else None,
                duration_in_seconds=reconcile_duration(scene.duration_in_seconds, audio),
            ))

            if index < total - 1 and provider.pacing_delay > 0:
                await token.sleep(provider.pacing_delay)

        token.raise_if_cancelled()
        return script.with_scenes(scenes)

    def _finish(self, token: CancellationToken, state: GenerationState) -> None:
        # A newer request may already own the slot.
        if self._active_token is token:
            self._active_token = None
            self.state = state
