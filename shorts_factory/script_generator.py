"""
Script Generator

Turns a topic and target language into a VideoScript (assets not yet
populated). The provider call goes through the retry policy; the JSON
response is validated against the VideoScript schema and any parse or
validation failure is fatal to the request.
"""

import json
import logging
from typing import Optional

from pydantic import ValidationError

from shorts_factory.cancellation import CancellationToken, check_cancelled
from shorts_factory.errors import ScriptValidationError
from shorts_factory.models import VideoLanguage, VideoScript
from shorts_factory.providers.base import BaseGenerationProvider
from shorts_factory.retry import with_retry

logger = logging.getLogger(__name__)

SCRIPT_MAX_ATTEMPTS = 3
SCRIPT_INITIAL_DELAY_MS = 2000


def parse_script(raw: str) -> VideoScript:
    """Deserialize a provider response into a VideoScript.

    Asset URLs present in the response are dropped; they are only ever set
    by asset generation.

    Raises:
        ScriptValidationError: If the text is not JSON or misses required fields
    """
    try:
        data = json.loads(raw)
    except (TypeError, json.JSONDecodeError) as e:
        raise ScriptValidationError(f"Script response is not valid JSON: {e}") from e

    if not isinstance(data, dict):
        raise ScriptValidationError("Script response must be a JSON object")

    scenes = data.get("scenes")
    if isinstance(scenes, list):
        data["scenes"] = [
            {k: v for k, v in scene.items() if k not in ("imageUrl", "audioUrl")}
            if isinstance(scene, dict) else scene
            for scene in scenes
        ]

    try:
        return VideoScript.model_validate(data)
    except ValidationError as e:
        raise ScriptValidationError(f"Script response failed validation: {e}") from e


class ScriptGenerator:
    """Generates the script document with the given provider.

    Example:
        >>> generator = ScriptGenerator(provider)
        >>> script = await generator.generate_script("5 facts about Mars", VideoLanguage.EN_US, token)
    """

    def __init__(
        self,
        provider: BaseGenerationProvider,
        max_attempts: int = SCRIPT_MAX_ATTEMPTS,
        initial_delay_ms: int = SCRIPT_INITIAL_DELAY_MS,
    ):
        self.provider = provider
        self.max_attempts = max_attempts
        self.initial_delay_ms = initial_delay_ms

    async def generate_script(
        self,
        topic: str,
        language: VideoLanguage,
        token: Optional[CancellationToken] = None,
    ) -> VideoScript:
        topic = (topic or "").strip()
        if not topic:
            raise ValueError("Topic cannot be empty")
        language = VideoLanguage(language)

        logger.info(
            f"Writing script in {language.display_name} with {self.provider.describe_models()}"
        )
        raw = await with_retry(
            lambda: self.provider.generate_script_json(topic, language),
            max_attempts=self.max_attempts,
            initial_delay_ms=self.initial_delay_ms,
            token=token,
            label=f"{self.provider.display_name} script generation",
        )
        check_cancelled(token)

        script = parse_script(raw)
        logger.info(
            f"Script ready: {len(script.scenes)} scenes, "
            f"{script.total_duration_seconds:.1f}s estimated, mood '{script.background_music_mood}'"
        )
        return script
