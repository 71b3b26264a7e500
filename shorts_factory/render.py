"""
Renderer Hand-off

Everything the external renderer needs besides the script document:
fixed frame parameters, the total frame count, the background music
track for a mood, the one-line render command for operators, and a small
client for the render server.
"""

import json
import logging
import math
import re
from pathlib import Path
from typing import Optional, Union

import httpx

from shorts_factory.config import RenderConfig
from shorts_factory.errors import ShortsFactoryError
from shorts_factory.models import VideoScript

logger = logging.getLogger(__name__)

VIDEO_FPS = 30
DEFAULT_DURATION_IN_FRAMES = 150  # 5 seconds at 30fps for an empty script

RENDER_TIMEOUT_SECONDS = 600.0

MUSIC_TRACKS = {
    "Happy": "https://cdn.pixabay.com/audio/2022/05/27/audio_1808fbf07a.mp3",
    "Inspirational": "https://cdn.pixabay.com/audio/2022/10/25/audio_544e3328ce.mp3",
    "Sad": "https://cdn.pixabay.com/audio/2021/11/24/audio_c3e1e69507.mp3",
    "Epic": "https://cdn.pixabay.com/audio/2022/03/09/audio_c8c8a73467.mp3",
    "Chill": "https://cdn.pixabay.com/audio/2022/01/18/audio_d0a13f69d2.mp3",
    "Dark": "https://cdn.pixabay.com/audio/2022/04/27/audio_67bcf729cf.mp3",
    "Default": "https://cdn.pixabay.com/audio/2022/05/27/audio_1808fbf07a.mp3",
}


class RenderError(ShortsFactoryError):
    """Render server rejected the request or could not be reached."""
    pass


def resolve_music_track(mood: str) -> str:
    """Pick the first track whose name appears in ``mood`` (case-insensitive).

    "Sadness" matches "Sad"; anything unmatched gets the default track.
    """
    mood = (mood or "").lower()
    for name, url in MUSIC_TRACKS.items():
        if name.lower() in mood:
            return url
    return MUSIC_TRACKS["Default"]


def total_duration_in_frames(script: Optional[VideoScript], fps: int = VIDEO_FPS) -> int:
    if script is None or not script.scenes:
        return DEFAULT_DURATION_IN_FRAMES
    return math.ceil(fps * script.total_duration_seconds)


def render_props_json(script: VideoScript) -> str:
    """Compact ``{"script": ...}`` props document passed to the renderer."""
    return json.dumps({"script": script.to_renderer_dict()}, separators=(",", ":"), ensure_ascii=False)


def output_name(topic: str) -> str:
    return re.sub(r"\s+", "_", topic.strip())


def build_render_command(script: VideoScript, topic: str, config: Optional[RenderConfig] = None) -> str:
    """One-line render invocation with the props quoted for a POSIX shell."""
    config = config or RenderConfig()
    safe_props = render_props_json(script).replace("'", "'\\''")
    return (
        f"npx remotion render {config.entry_point} {config.composition_id} "
        f"out/{output_name(topic)}.mp4 --props='{safe_props}'"
    )


def build_render_script(
    script: VideoScript,
    topic: str,
    provider: str,
    language: str,
    config: Optional[RenderConfig] = None,
) -> str:
    """Standalone bash script that installs the renderer and runs the command."""
    command = build_render_command(script, topic, config)
    return (
        "#!/bin/bash\n"
        "# Shorts Factory Render Script\n"
        f"# Topic: {topic}\n"
        f"# Engine: {provider.upper()}\n"
        f"# Language: {language}\n"
        "# ----------------------------------------\n"
        f'echo "Starting Render for: {topic}..."\n'
        "npm install\n"
        f"{command}\n"
        "echo \"Render Complete! Check the 'out' folder.\"\n"
    )


def render_script_filename(topic: str) -> str:
    return f"render_{output_name(topic).lower()}.sh"


class RenderClient:
    """Client for the render server (``POST /render-video``, ``GET /health``).

    Example:
        >>> client = RenderClient(config.render.server_url)
        >>> await client.render(script, "Mars facts", "out/mars.mp4")
    """

    def __init__(self, base_url: str, timeout: float = RENDER_TIMEOUT_SECONDS, transport=None):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._transport = transport

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(base_url=self.base_url, timeout=self.timeout, transport=self._transport)

    async def health(self) -> bool:
        """True when the server answers ``GET /health`` with ``{"status": "ok"}``."""
        try:
            async with self._client() as client:
                response = await client.get("/health")
        except httpx.HTTPError as e:
            logger.warning(f"Render server unreachable at {self.base_url}: {e}")
            return False
        if response.status_code != 200:
            return False
        try:
            body = response.json()
        except ValueError:
            logger.warning(f"Render server health response is not JSON: {response.text[:100]}")
            return False
        return isinstance(body, dict) and body.get("status") == "ok"

    async def render_when_healthy(self, script: VideoScript, title: str, output_path: Union[str, Path]) -> Path:
        """Check ``/health`` first so a missing server fails fast."""
        if not await self.health():
            raise RenderError(f"Render server is not available at {self.base_url}")
        return await self.render(script, title, output_path)

    async def render(self, script: VideoScript, title: str, output_path: Union[str, Path]) -> Path:
        """Render ``script`` on the server and write the MP4 to ``output_path``.

        Raises:
            RenderError: If the script has no scenes or the server fails
        """
        if script is None or not script.scenes:
            raise RenderError("Invalid script provided")

        payload = {"script": script.to_renderer_dict(), "title": title}
        logger.info(f"Requesting render of '{title}' ({total_duration_in_frames(script)} frames)")
        try:
            async with self._client() as client:
                response = await client.post("/render-video", json=payload)
        except httpx.HTTPError as e:
            raise RenderError(f"Render server request failed: {e}") from e

        if response.status_code != 200:
            try:
                body = response.json()
                detail = body.get("message") or body.get("error")
            except (ValueError, AttributeError):
                detail = response.text
            raise RenderError(f"Render failed ({response.status_code}): {detail}")

        output_path = Path(output_path)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_bytes(response.content)
        logger.info(f"Rendered video saved to {output_path}")
        return output_path
