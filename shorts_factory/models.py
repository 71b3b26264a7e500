"""
Video Script Schema

Data models for the document handed to the external renderer. Python
attributes are snake_case; the serialized form uses the renderer's
camelCase field names (characterDescription, scenes, backgroundMusicMood,
text, durationInSeconds, imagePrompt, imageUrl, audioUrl).

Scenes are immutable. Asset generation produces new Scene instances via
Scene.with_assets() and a new VideoScript via VideoScript.with_scenes().
"""

from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class ProviderId(str, Enum):
    """AI providers supplying script, image and speech generation."""
    GEMINI = "gemini"
    OPENAI = "openai"

    @property
    def display_name(self) -> str:
        return "OpenAI" if self is ProviderId.OPENAI else "Gemini"


DEFAULT_PROVIDER = ProviderId.GEMINI


class VideoLanguage(str, Enum):
    """Target languages for narration text."""
    PT_BR = "pt-BR"
    EN_US = "en-US"
    ES_ES = "es-ES"

    @property
    def display_name(self) -> str:
        """Language name used inside generation prompts."""
        return _LANGUAGE_NAMES[self]


_LANGUAGE_NAMES = {
    VideoLanguage.PT_BR: "Portuguese (Brazil)",
    VideoLanguage.EN_US: "English (USA)",
    VideoLanguage.ES_ES: "Spanish",
}


class Scene(BaseModel):
    """One narrated, timed segment of the video.

    Attributes:
        text: First-person narration line in the target language
        duration_in_seconds: Authoritative scene length; never below the
            script estimate
        image_prompt: Visual description, always in English
        image_url: Public URL (or inline data URI) of the scene image
        audio_url: Public URL (or inline data URI) of the narration
    """
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    text: str = Field(..., min_length=1)
    duration_in_seconds: float = Field(..., gt=0, alias="durationInSeconds")
    image_prompt: str = Field(..., min_length=1, alias="imagePrompt")
    image_url: Optional[str] = Field(None, alias="imageUrl")
    audio_url: Optional[str] = Field(None, alias="audioUrl")

    def with_assets(
        self,
        image_url: Optional[str],
        audio_url: Optional[str],
        duration_in_seconds: float,
    ) -> "Scene":
        """Return a copy carrying generated asset URLs and the final duration."""
        return self.model_copy(update={
            "image_url": image_url,
            "audio_url": audio_url,
            "duration_in_seconds": duration_in_seconds,
        })


class VideoScript(BaseModel):
    """Root document consumed by the renderer.

    Attributes:
        character_description: English description of the recurring subject,
            reused in every image prompt
        scenes: Ordered scenes; list order is playback order
        background_music_mood: Free-text mood, matched to a track library
    """
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    character_description: str = Field(..., min_length=1, alias="characterDescription")
    scenes: List[Scene] = Field(..., min_length=1)
    background_music_mood: str = Field(..., min_length=1, alias="backgroundMusicMood")

    @property
    def total_duration_seconds(self) -> float:
        return sum(scene.duration_in_seconds for scene in self.scenes)

    def with_scenes(self, scenes: List[Scene]) -> "VideoScript":
        """Return a new script with ``scenes`` replacing the current ones."""
        return self.model_copy(update={"scenes": list(scenes)})

    def to_renderer_dict(self) -> Dict[str, Any]:
        """Serialize using renderer field names; absent URLs are omitted."""
        return self.model_dump(by_alias=True, exclude_none=True)

    def to_renderer_json(self, indent: Optional[int] = None) -> str:
        return self.model_dump_json(by_alias=True, exclude_none=True, indent=indent)


# JSON schema handed to providers that support schema-constrained output.
# Asset URLs are deliberately absent: they are filled in after generation.
SCRIPT_RESPONSE_SCHEMA = {
    "type": "OBJECT",
    "properties": {
        "characterDescription": {"type": "STRING"},
        "scenes": {
            "type": "ARRAY",
            "items": {
                "type": "OBJECT",
                "properties": {
                    "text": {"type": "STRING"},
                    "durationInSeconds": {"type": "NUMBER"},
                    "imagePrompt": {"type": "STRING"},
                },
                "required": ["text", "durationInSeconds", "imagePrompt"],
            },
        },
        "backgroundMusicMood": {"type": "STRING"},
    },
    "required": ["scenes", "backgroundMusicMood", "characterDescription"],
}
