"""
Tests for shorts_factory.render

Frame math, music track lookup, the shell-quoted render command and the
render server client (driven through httpx.MockTransport).
"""

import json

import httpx
import pytest

from shorts_factory.config import RenderConfig
from shorts_factory.models import VideoScript
from shorts_factory.render import (
    DEFAULT_DURATION_IN_FRAMES,
    MUSIC_TRACKS,
    RenderClient,
    RenderError,
    build_render_command,
    build_render_script,
    output_name,
    render_props_json,
    render_script_filename,
    resolve_music_track,
    total_duration_in_frames,
)


@pytest.fixture
def script(script_document):
    return VideoScript.model_validate(script_document)


class TestFrames:
    def test_total_frames(self, script):
        assert total_duration_in_frames(script) == 14 * 30

    def test_fractional_seconds_round_up(self, script):
        scenes = [s.with_assets(None, None, 1.01) for s in script.scenes]
        assert total_duration_in_frames(script.with_scenes(scenes)) == 91

    def test_missing_script_uses_default(self):
        assert total_duration_in_frames(None) == DEFAULT_DURATION_IN_FRAMES


class TestMusicTrack:
    @pytest.mark.parametrize("mood,track", [
        ("Happy", "Happy"),
        ("inspirational and uplifting", "Inspirational"),
        ("Sadness", "Sad"),
        ("EPIC", "Epic"),
        ("chill lofi", "Chill"),
        ("Dark", "Dark"),
    ])
    def test_substring_match(self, mood, track):
        assert resolve_music_track(mood) == MUSIC_TRACKS[track]

    def test_unknown_mood_uses_default(self):
        assert resolve_music_track("Mysterious") == MUSIC_TRACKS["Default"]
        assert resolve_music_track("") == MUSIC_TRACKS["Default"]


class TestRenderCommand:
    def test_output_name(self):
        assert output_name("  5 facts about   Mars ") == "5_facts_about_Mars"

    def test_command_shape(self, script):
        command = build_render_command(script, "Mars facts")
        assert command.startswith("npx remotion render src/index.tsx VideoComposition out/Mars_facts.mp4 --props='")
        assert command.endswith("'")

    def test_props_are_compact_renderer_json(self, script):
        props = json.loads(render_props_json(script))
        assert props["script"]["backgroundMusicMood"] == "Inspirational"
        assert "imageUrl" not in props["script"]["scenes"][0]
        assert ", " not in render_props_json(script)

    def test_single_quotes_are_escaped(self, script):
        scenes = [script.scenes[0].model_copy(update={"text": "It's huge"})]
        command = build_render_command(script.with_scenes(scenes), "Mars")
        assert "It'\\''s huge" in command

    def test_custom_composition(self, script):
        config = RenderConfig(composition_id="Shorts", entry_point="remotion/index.ts")
        assert "render remotion/index.ts Shorts " in build_render_command(script, "x", config)

    def test_render_script(self, script):
        body = build_render_script(script, "Mars facts", "gemini", "en-US")
        lines = body.splitlines()
        assert lines[0] == "#!/bin/bash"
        assert "# Engine: GEMINI" in lines
        assert "# Language: en-US" in lines
        assert "npm install" in lines
        assert any(line.startswith("npx remotion render") for line in lines)

    def test_render_script_filename(self):
        assert render_script_filename("Mars Facts") == "render_mars_facts.sh"


class TestRenderClient:
    @pytest.mark.asyncio
    async def test_render_writes_video(self, script, tmp_path):
        seen = {}

        def handler(request):
            seen["path"] = request.url.path
            seen["body"] = json.loads(request.content)
            return httpx.Response(200, content=b"MP4DATA", headers={"Content-Type": "video/mp4"})

        client = RenderClient("http://render.test/", transport=httpx.MockTransport(handler))
        output = await client.render(script, "Mars facts", tmp_path / "out" / "mars.mp4")

        assert output.read_bytes() == b"MP4DATA"
        assert seen["path"] == "/render-video"
        assert seen["body"]["title"] == "Mars facts"
        assert len(seen["body"]["script"]["scenes"]) == 3

    @pytest.mark.asyncio
    async def test_server_error_message(self, script, tmp_path):
        transport = httpx.MockTransport(
            lambda request: httpx.Response(500, json={"error": "Render failed", "message": "Chromium crashed"})
        )
        client = RenderClient("http://render.test", transport=transport)

        with pytest.raises(RenderError, match="Chromium crashed"):
            await client.render(script, "Mars", tmp_path / "mars.mp4")

    @pytest.mark.asyncio
    async def test_unreachable_server(self, script, tmp_path):
        def handler(request):
            raise httpx.ConnectError("refused", request=request)

        client = RenderClient("http://render.test", transport=httpx.MockTransport(handler))
        with pytest.raises(RenderError, match="request failed"):
            await client.render(script, "Mars", tmp_path / "mars.mp4")

    @pytest.mark.asyncio
    async def test_health(self):
        ok = RenderClient("http://render.test", transport=httpx.MockTransport(
            lambda request: httpx.Response(200, json={"status": "ok"})
        ))
        down = RenderClient("http://render.test", transport=httpx.MockTransport(
            lambda request: httpx.Response(503, json={"status": "starting"})
        ))
        assert await ok.health() is True
        assert await down.health() is False

    @pytest.mark.asyncio
    @pytest.mark.parametrize("response", [
        httpx.Response(200, text="OK"),
        httpx.Response(200, json=["ok"]),
        httpx.Response(200, json={"status": "starting"}),
    ])
    async def test_health_rejects_unexpected_bodies(self, response):
        client = RenderClient("http://render.test", transport=httpx.MockTransport(lambda request: response))
        assert await client.health() is False

    @pytest.mark.asyncio
    async def test_unreachable_health(self):
        def handler(request):
            raise httpx.ConnectError("refused", request=request)

        client = RenderClient("http://render.test", transport=httpx.MockTransport(handler))
        assert await client.health() is False

    @pytest.mark.asyncio
    async def test_render_when_healthy(self, script, tmp_path):
        def handler(request):
            if request.url.path == "/health":
                return httpx.Response(200, json={"status": "ok"})
            return httpx.Response(200, content=b"MP4DATA")

        client = RenderClient("http://render.test", transport=httpx.MockTransport(handler))
        output = await client.render_when_healthy(script, "Mars", tmp_path / "mars.mp4")
        assert output.read_bytes() == b"MP4DATA"

    @pytest.mark.asyncio
    async def test_render_when_unhealthy_skips_post(self, script, tmp_path):
        paths = []

        def handler(request):
            paths.append(request.url.path)
            return httpx.Response(503, text="starting")

        client = RenderClient("http://render.test", transport=httpx.MockTransport(handler))
        with pytest.raises(RenderError, match="not available"):
            await client.render_when_healthy(script, "Mars", tmp_path / "mars.mp4")
        assert paths == ["/health"]
        assert not (tmp_path / "mars.mp4").exists()

    @pytest.mark.asyncio
    async def test_server_error_with_non_object_body(self, script, tmp_path):
        transport = httpx.MockTransport(lambda request: httpx.Response(500, json=["crashed"]))
        client = RenderClient("http://render.test", transport=transport)
        with pytest.raises(RenderError, match="500"):
            await client.render(script, "Mars", tmp_path / "mars.mp4")
