"""
AI provider implementations.

Providers:
    - CloudGeminiProvider: Google Gemini (script, two image tiers, PCM TTS)
    - CloudOpenAIProvider: OpenAI (GPT-4o, DALL-E 3, tts-1)
"""

from shorts_factory.providers.base import BaseGenerationProvider, GeneratedImage, ImageTier
from shorts_factory.providers.cloud_gemini import CloudGeminiProvider
from shorts_factory.providers.cloud_openai import CloudOpenAIProvider

__all__ = [
    "BaseGenerationProvider",
    "GeneratedImage",
    "ImageTier",
    "CloudGeminiProvider",
    "CloudOpenAIProvider",
]
