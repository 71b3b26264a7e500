"""Audio payload helpers: raw PCM detection, WAV wrapping and duration."""

import io
import wave
from dataclasses import dataclass
from typing import Optional

DEFAULT_SAMPLE_RATE = 24000
SAMPLE_WIDTH_BYTES = 2  # 16-bit mono

RAW_PCM_MIME_TYPES = ("audio/pcm", "audio/l16")

_EXTENSIONS = {
    "audio/wav": "wav",
    "audio/x-wav": "wav",
    "audio/mpeg": "mp3",
    "audio/mp3": "mp3",
    "audio/ogg": "ogg",
    "audio/opus": "opus",
    "audio/aac": "aac",
    "audio/flac": "flac",
}


@dataclass
class SpeechPayload:
    """Speech returned by a provider.

    Attributes:
        data: Raw bytes, either 16-bit mono PCM or an encoded container
        mime_type: MIME type reported by (or known for) the provider
        sample_rate: Sample rate, only meaningful for raw PCM
    """
    data: bytes
    mime_type: str
    sample_rate: int = DEFAULT_SAMPLE_RATE

    @property
    def is_raw_pcm(self) -> bool:
        return parse_mime(self.mime_type)[0] in RAW_PCM_MIME_TYPES


def parse_mime(mime_type: Optional[str]):
    """Split ``audio/L16;codec=pcm;rate=24000`` into base type and params."""
    if not mime_type:
        return None, {}
    parts = [part.strip() for part in mime_type.split(";") if part.strip()]
    base = parts[0].lower() if parts else None
    params = {}
    for part in parts[1:]:
        if "=" in part:
            key, value = part.split("=", 1)
            params[key.strip().lower()] = value.strip()
    return base, params


def sample_rate_from_mime(mime_type: Optional[str], default: int = DEFAULT_SAMPLE_RATE) -> int:
    _, params = parse_mime(mime_type)
    try:
        return int(params.get("rate", default))
    except ValueError:
        return default


def extension_for_mime(mime_type: Optional[str]) -> str:
    return _EXTENSIONS.get(parse_mime(mime_type)[0], "bin")


def pcm_duration_seconds(pcm: bytes, sample_rate: int = DEFAULT_SAMPLE_RATE) -> float:
    """Duration of 16-bit mono PCM: byte length / (sample rate * 2)."""
    return len(pcm) / (sample_rate * SAMPLE_WIDTH_BYTES)


def pcm_to_wav(pcm: bytes, sample_rate: int = DEFAULT_SAMPLE_RATE) -> bytes:
    """Wrap 16-bit mono PCM in a RIFF/WAV container."""
    usable = len(pcm) - (len(pcm) % SAMPLE_WIDTH_BYTES)
    buffer = io.BytesIO()
    with wave.open(buffer, "wb") as wav:
        wav.setnchannels(1)
        wav.setsampwidth(SAMPLE_WIDTH_BYTES)
        wav.setframerate(sample_rate)
        wav.writeframes(pcm[:usable])
    return buffer.getvalue()
