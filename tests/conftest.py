"""
Pytest configuration, test doubles and fixtures.

Providers and storage are replaced by in-memory fakes so no test touches
the network. Backoff sleeps are patched out where timing matters.
"""
import json
import os
from typing import Callable, List, Optional

import pytest

from shorts_factory.audio import SpeechPayload
from shorts_factory.errors import StorageError
from shorts_factory.factory import ProviderFactory
from shorts_factory.models import ProviderId, VideoLanguage
from shorts_factory.providers.base import BaseGenerationProvider, GeneratedImage, ImageTier
from shorts_factory.settings import MemorySettingsBackend, ProviderSettings
from shorts_factory.storage import StorageBackend


SCRIPT_DOCUMENTS = {
    VideoLanguage.EN_US: {
        "characterDescription": "A curious young astronaut with a silver helmet and an orange suit",
        "backgroundMusicMood": "Inspirational",
        "scenes": [
            {
                "text": "Did you know Mars has the tallest volcano in the solar system?",
                "durationInSeconds": 5,
                "imagePrompt": "Astronaut standing before the giant Olympus Mons volcano",
            },
            {
                "text": "A single day on Mars lasts a little longer than ours.",
                "durationInSeconds": 4,
                "imagePrompt": "Astronaut watching a blue sunset over red dunes",
            },
            {
                "text": "And its red color comes from rusty iron dust everywhere.",
                "durationInSeconds": 5,
                "imagePrompt": "Astronaut holding a handful of red dust close to the camera",
            },
        ],
    },
    VideoLanguage.PT_BR: {
        "characterDescription": "A cheerful chef with a white hat and a blue apron",
        "backgroundMusicMood": "Happy",
        "scenes": [
            {
                "text": "Você sabia que o pão de queijo nasceu em Minas Gerais?",
                "durationInSeconds": 5,
                "imagePrompt": "Chef holding a basket of warm cheese bread in a rustic kitchen",
            },
            {
                "text": "A receita usa polvilho, queijo e muito carinho na cozinha.",
                "durationInSeconds": 5,
                "imagePrompt": "Chef mixing tapioca flour and cheese in a wooden bowl",
            },
        ],
    },
    VideoLanguage.ES_ES: {
        "characterDescription": "An elderly fisherman with a grey beard and a yellow raincoat",
        "backgroundMusicMood": "Chill",
        "scenes": [
            {
                "text": "¿Sabías que el pulpo tiene tres corazones y sangre azul?",
                "durationInSeconds": 5,
                "imagePrompt": "Fisherman on a small boat looking at an octopus in the water",
            },
            {
                "text": "Además, puede cambiar de color en menos de un segundo.",
                "durationInSeconds": 4,
                "imagePrompt": "Close-up of an octopus changing color next to the fisherman's hand",
            },
        ],
    },
}

PNG_BYTES = b"\x89PNG\r\n\x1a\nfake-image"
# One second of 24kHz 16-bit mono silence
PCM_ONE_SECOND = b"\x00\x00" * 24000


class FakeProvider(BaseGenerationProvider):
    """Scriptable provider double.

    Each ``*_effects`` list is consumed one item per call: an Exception is
    raised, anything else is returned. When a list runs out the default
    result is returned.
    """

    provider_id = ProviderId.GEMINI

    def __init__(
        self,
        provider_id: ProviderId = ProviderId.GEMINI,
        script: Optional[dict] = None,
        tiers=None,
        pacing_delay: float = 0.0,
        speech: Optional[SpeechPayload] = None,
    ):
        self.provider_id = provider_id
        self.script = script or SCRIPT_DOCUMENTS[VideoLanguage.EN_US]
        self._tiers = tiers or (
            ImageTier("fast-image", max_attempts=3, initial_delay_ms=2000),
            ImageTier("pro-image", max_attempts=2, initial_delay_ms=3000, size="1K"),
        )
        self._pacing_delay = pacing_delay
        self.speech = speech or SpeechPayload(PCM_ONE_SECOND, "audio/L16;codec=pcm;rate=24000", 24000)
        self.script_effects: List = []
        self.ping_effects: List = []
        self.speech_effects: List = []
        self.image_handler: Optional[Callable] = None
        self.calls: List[tuple] = []

    @property
    def image_tiers(self):
        return self._tiers

    @property
    def pacing_delay(self) -> float:
        return self._pacing_delay

    def describe_models(self) -> str:
        return "Fake (fake-model)"

    def _next(self, effects, default):
        if effects:
            effect = effects.pop(0)
            if isinstance(effect, Exception):
                raise effect
            return effect
        return default

    async def generate_script_json(self, topic, language):
        self.calls.append(("script", topic, language))
        return self._next(self.script_effects, json.dumps(self.script))

    async def generate_image(self, prompt, tier):
        self.calls.append(("image", prompt, tier.model))
        if self.image_handler is not None:
            return self.image_handler(prompt, tier)
        return GeneratedImage(PNG_BYTES, "image/png")

    async def synthesize_speech(self, text):
        self.calls.append(("speech", text))
        return self._next(self.speech_effects, self.speech)

    async def ping(self):
        self.calls.append(("ping",))
        return self._next(self.ping_effects, "Connected to Fake")

    def count(self, kind: str) -> int:
        return sum(1 for call in self.calls if call[0] == kind)


class FakeStorage(StorageBackend):
    """In-memory storage returning predictable URLs."""

    def __init__(self, fail: bool = False):
        self.fail = fail
        self.uploads: List[dict] = []

    async def upload(self, data, filename, content_type, owner_id=None):
        if self.fail:
            raise StorageError("bucket unavailable")
        path = f"{owner_id}/{filename}" if owner_id else filename
        self.uploads.append({
            "path": path,
            "content_type": content_type,
            "size": len(data),
            "data": data,
        })
        return f"https://cdn.test/{path}"


@pytest.fixture(autouse=True)
def isolate_tests(tmp_path, monkeypatch):
    """
    Automatically isolate each test:
    1. Provider keys and config overrides are removed from the environment
    2. The persisted settings file points into the temporary directory
    """
    for var in list(os.environ):
        if var.startswith(("GEMINI_", "OPENAI_", "STORAGE_", "SUPABASE_", "RENDER_", "VIDEO_", "API_")):
            monkeypatch.delenv(var, raising=False)
    monkeypatch.delenv("SHORTS_FACTORY_CONFIG", raising=False)
    monkeypatch.setenv("SHORTS_FACTORY_SETTINGS", str(tmp_path / "settings.yaml"))
    yield


@pytest.fixture
def fake_provider():
    return FakeProvider()


@pytest.fixture
def make_provider():
    """Factory fixture for FakeProvider instances."""
    return FakeProvider


@pytest.fixture
def fake_storage():
    return FakeStorage()


@pytest.fixture
def failing_storage():
    return FakeStorage(fail=True)


@pytest.fixture
def settings():
    """Settings with a Gemini key and an empty environment."""
    store = ProviderSettings(MemorySettingsBackend(), environ={})
    store.set_api_key(ProviderId.GEMINI, "gm-test-key-1234")
    return store


@pytest.fixture
def factory(fake_provider):
    """Provider factory whose builders all return ``fake_provider``."""
    provider_factory = ProviderFactory()
    for provider_id in ProviderId:
        provider_factory.register(provider_id, lambda key: fake_provider)
    return provider_factory


@pytest.fixture
def no_sleep(monkeypatch):
    """Record backoff delays instead of sleeping."""
    delays = []

    async def fake_sleep(seconds):
        delays.append(seconds)

    monkeypatch.setattr("shorts_factory.retry.sleep", fake_sleep)
    return delays


@pytest.fixture
def script_document():
    return json.loads(json.dumps(SCRIPT_DOCUMENTS[VideoLanguage.EN_US]))


@pytest.fixture
def script_documents():
    return SCRIPT_DOCUMENTS
