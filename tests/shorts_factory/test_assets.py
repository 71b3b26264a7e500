"""
Tests for shorts_factory.assets

Covers image tier fallback, storage upload with inline fallback, PCM to
WAV conversion with measured duration, encoded audio, and cancellation.
"""

import io
import wave

import pytest

from shorts_factory.assets import AssetGenerator
from shorts_factory.audio import SpeechPayload
from shorts_factory.cancellation import CancellationToken
from shorts_factory.errors import (
    AuthenticationError,
    GenerationCancelled,
    ProviderError,
    RateLimitError,
)
from shorts_factory.models import VideoScript
from shorts_factory.providers.base import GeneratedImage


@pytest.fixture
def script(script_document):
    return VideoScript.model_validate(script_document)


class TestGenerateImage:
    @pytest.mark.asyncio
    async def test_first_tier_success(self, fake_provider, fake_storage, script):
        assets = AssetGenerator(fake_provider, fake_storage)
        url = await assets.generate_image(script, script.scenes[0], 0)

        assert url.startswith("https://cdn.test/image_scene0_")
        assert url.endswith(".png")
        assert fake_storage.uploads[0]["content_type"] == "image/png"
        assert [c[2] for c in fake_provider.calls if c[0] == "image"] == ["fast-image"]

    @pytest.mark.asyncio
    async def test_prompt_combines_character_and_scene(self, fake_provider, fake_storage, script):
        await AssetGenerator(fake_provider, fake_storage).generate_image(script, script.scenes[1], 1)
        prompt = fake_provider.calls[0][1]
        assert script.character_description in prompt
        assert script.scenes[1].image_prompt in prompt
        assert "9:16" in prompt
        assert "no text" in prompt.lower()

    @pytest.mark.asyncio
    async def test_falls_back_to_second_tier(self, fake_provider, fake_storage, script, no_sleep):
        def handler(prompt, tier):
            if tier.model == "fast-image":
                raise ProviderError("model overloaded")
            return GeneratedImage(b"pro", "image/png")

        fake_provider.image_handler = handler
        url = await AssetGenerator(fake_provider, fake_storage).generate_image(script, script.scenes[0], 0)

        assert url is not None
        assert [c[2] for c in fake_provider.calls if c[0] == "image"] == ["fast-image", "pro-image"]
        assert fake_storage.uploads[0]["data"] == b"pro"

    @pytest.mark.asyncio
    async def test_tier_retry_budgets(self, fake_provider, fake_storage, script, no_sleep):
        def handler(prompt, tier):
            raise RateLimitError("429")

        fake_provider.image_handler = handler
        url = await AssetGenerator(fake_provider, fake_storage).generate_image(script, script.scenes[0], 0)

        assert url is None
        models = [c[2] for c in fake_provider.calls if c[0] == "image"]
        assert models == ["fast-image"] * 3 + ["pro-image"] * 2
        assert no_sleep == [2.0, 4.0, 3.0]

    @pytest.mark.asyncio
    async def test_all_tiers_fail_returns_none(self, fake_provider, fake_storage, script):
        def handler(prompt, tier):
            raise AuthenticationError("bad key")

        fake_provider.image_handler = handler
        url = await AssetGenerator(fake_provider, fake_storage).generate_image(script, script.scenes[0], 0)
        assert url is None
        assert fake_storage.uploads == []

    @pytest.mark.asyncio
    async def test_storage_failure_returns_data_uri(self, fake_provider, failing_storage, script):
        url = await AssetGenerator(fake_provider, failing_storage).generate_image(script, script.scenes[0], 0)
        assert url.startswith("data:image/png;base64,")

    @pytest.mark.asyncio
    async def test_owner_folder(self, fake_provider, fake_storage, script):
        url = await AssetGenerator(fake_provider, fake_storage, owner_id="user-42").generate_image(
            script, script.scenes[2], 2
        )
        assert url.startswith("https://cdn.test/user-42/image_scene2_")

    @pytest.mark.asyncio
    async def test_cancelled_before_generation(self, fake_provider, fake_storage, script):
        token = CancellationToken()
        token.cancel()
        with pytest.raises(GenerationCancelled):
            await AssetGenerator(fake_provider, fake_storage).generate_image(script, script.scenes[0], 0, token)
        assert fake_provider.calls == []

    @pytest.mark.asyncio
    async def test_cancellation_during_tier_propagates(self, fake_provider, fake_storage, script, monkeypatch):
        token = CancellationToken()

        async def cancel_during_backoff(seconds):
            token.cancel()

        monkeypatch.setattr("shorts_factory.retry.sleep", cancel_during_backoff)

        def handler(prompt, tier):
            raise RateLimitError("429")

        fake_provider.image_handler = handler
        with pytest.raises(GenerationCancelled):
            await AssetGenerator(fake_provider, fake_storage).generate_image(script, script.scenes[0], 0, token)
        # The second tier is never attempted once cancelled
        assert [c[2] for c in fake_provider.calls if c[0] == "image"] == ["fast-image"]


class TestGenerateAudio:
    @pytest.mark.asyncio
    async def test_pcm_is_wrapped_and_measured(self, fake_provider, fake_storage, script):
        audio = await AssetGenerator(fake_provider, fake_storage).generate_audio(script.scenes[0], 0)

        assert audio.duration_seconds == pytest.approx(1.0)
        assert audio.url.startswith("https://cdn.test/audio_scene0_")
        assert audio.url.endswith(".wav")

        upload = fake_storage.uploads[0]
        assert upload["content_type"] == "audio/wav"
        with wave.open(io.BytesIO(upload["data"]), "rb") as wav:
            assert wav.getframerate() == 24000
            assert wav.getnchannels() == 1
            assert wav.getsampwidth() == 2
            assert wav.getnframes() == 24000

    @pytest.mark.asyncio
    async def test_narration_text_sent(self, fake_provider, fake_storage, script):
        await AssetGenerator(fake_provider, fake_storage).generate_audio(script.scenes[1], 1)
        assert fake_provider.calls == [("speech", script.scenes[1].text)]

    @pytest.mark.asyncio
    async def test_encoded_audio_not_measured(self, make_provider, fake_storage, script):
        provider = make_provider(speech=SpeechPayload(b"ID3mp3data", "audio/mpeg"))
        audio = await AssetGenerator(provider, fake_storage).generate_audio(script.scenes[0], 0)

        assert audio.duration_seconds is None
        assert audio.url.endswith(".mp3")
        assert fake_storage.uploads[0]["content_type"] == "audio/mpeg"
        assert fake_storage.uploads[0]["data"] == b"ID3mp3data"

    @pytest.mark.asyncio
    async def test_synthesis_failure_returns_none(self, fake_provider, fake_storage, script):
        fake_provider.speech_effects = [ProviderError("voice unavailable")]
        audio = await AssetGenerator(fake_provider, fake_storage).generate_audio(script.scenes[0], 0)
        assert audio is None
        assert fake_storage.uploads == []

    @pytest.mark.asyncio
    async def test_rate_limited_speech_retried(self, fake_provider, fake_storage, script, no_sleep):
        fake_provider.speech_effects = [RateLimitError("429")]
        audio = await AssetGenerator(fake_provider, fake_storage).generate_audio(script.scenes[0], 0)
        assert audio is not None
        assert fake_provider.count("speech") == 2
        assert no_sleep == [2.0]

    @pytest.mark.asyncio
    async def test_storage_failure_keeps_duration(self, fake_provider, failing_storage, script):
        audio = await AssetGenerator(fake_provider, failing_storage).generate_audio(script.scenes[0], 0)
        assert audio.url.startswith("data:audio/wav;base64,")
        assert audio.duration_seconds == pytest.approx(1.0)

    @pytest.mark.asyncio
    async def test_cancelled_before_synthesis(self, fake_provider, fake_storage, script):
        token = CancellationToken()
        token.cancel()
        with pytest.raises(GenerationCancelled):
            await AssetGenerator(fake_provider, fake_storage).generate_audio(script.scenes[0], 0, token)
        assert fake_provider.calls == []
