"""
Generation prompts.

Narration must come back in the target language while image prompts and
the character description stay in English; every prompt states both
requirements explicitly.
"""

from shorts_factory.models import VideoLanguage


def gemini_script_prompt(topic: str, language: VideoLanguage) -> str:
    lang_name = language.display_name
    return f"""Create a viral short-form video script (TikTok/Reels) about: "{topic}". 15-30s.

CRITICAL:
1. Define a generic main character, described in ENGLISH ("characterDescription").
2. The Narration Text ("text") MUST BE IN **{lang_name}**. First person, max 15 words per scene.
3. Image Prompts ("imagePrompt") MUST BE IN ENGLISH (for generator compatibility).
4. Pick one background music mood ("backgroundMusicMood"), e.g. Happy, Inspirational, Sad, Epic, Chill, Dark.

Return JSON: {{ characterDescription, scenes: [{{ text, durationInSeconds, imagePrompt }}], backgroundMusicMood }}"""


def openai_system_prompt(language: VideoLanguage) -> str:
    lang_name = language.display_name
    return f"""You are an expert viral video scripter for TikTok/Reels.
Output strictly in JSON format.

CRITICAL LANGUAGE REQUIREMENT:
The "text" field for narration MUST be written in **{lang_name}**.

Structure requirements:
{{
  "characterDescription": "string (in English for image gen compatibility)",
  "backgroundMusicMood": "string",
  "scenes": [
    {{
      "text": "string (First person narration in {lang_name}, max 15 words)",
      "durationInSeconds": number (min 2),
      "imagePrompt": "string (Visual description in English)"
    }}
  ]
}}"""


def openai_user_prompt(topic: str) -> str:
    return f'Create a viral short video script about: "{topic}". 15-30 seconds total. Keep character generic.'


def scene_image_prompt(character_description: str, image_prompt: str) -> str:
    """Compose the per-scene image prompt shared by all providers."""
    return (
        "Vertical aspect ratio 9:16. Photorealistic, cinematic 4k lighting. "
        f"Main Character: {character_description}. "
        f"Action: {image_prompt}. "
        "High detail, no text overlays."
    )
