"""
Shorts Factory Configuration Management

This module provides centralized configuration loading for providers,
storage and the renderer hand-off. Configuration is loaded with the
following precedence:
1. Environment variables (highest priority)
2. Config file values (.shorts-factory/config.yaml)
3. Default values (lowest priority)

API keys are not part of this configuration; they live in the provider
settings store (see shorts_factory.settings).

Usage:
    >>> from shorts_factory.config import AppConfig
    >>>
    >>> config = AppConfig.load_from_yaml('.shorts-factory/config.yaml')
    >>> print(config.gemini.script_model)
    >>> print(config.storage.backend)
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional, Tuple
import os

import yaml


DEFAULT_CONFIG_PATH = ".shorts-factory/config.yaml"


@dataclass
class GeminiConfig:
    """Configuration for the Gemini provider.

    Attributes:
        script_model: Model used for structured script generation
        image_models: Image model tiers, cheapest first
        pro_image_size: Image size hint sent to the fallback tier
        tts_model: Text-to-speech model
        voice: Prebuilt narrator voice
        sample_rate: Sample rate of the raw PCM returned by the TTS model
        pacing_delay: Seconds to wait between scenes (per-key rate limits)
        ping_model: Model used by the connection check
    """
    script_model: str = "gemini-3-flash-preview"
    image_models: Tuple[str, ...] = ("gemini-2.5-flash-image", "gemini-3-pro-image-preview")
    pro_image_size: str = "1K"
    tts_model: str = "gemini-2.5-flash-preview-tts"
    voice: str = "Kore"
    sample_rate: int = 24000
    pacing_delay: float = 1.5
    ping_model: str = "gemini-3-flash-preview"


@dataclass
class OpenAIConfig:
    """Configuration for the OpenAI provider.

    Attributes:
        script_model: Chat model used for script generation
        image_model: Image generation model
        image_size: Vertical size accepted by the image model
        image_quality: "standard" or "hd"
        tts_model: Text-to-speech model
        voice: Narrator voice
        tts_format: "mp3" (encoded, duration estimated) or "pcm" (measured)
        sample_rate: Sample rate of "pcm" speech output
        timeout: Request timeout in seconds
    """
    script_model: str = "gpt-4o"
    image_model: str = "dall-e-3"
    image_size: str = "1024x1792"
    image_quality: str = "standard"
    tts_model: str = "tts-1"
    voice: str = "onyx"
    tts_format: str = "mp3"
    sample_rate: int = 24000
    timeout: int = 60


@dataclass
class StorageConfig:
    """Configuration for the asset storage collaborator.

    Attributes:
        backend: "supabase" or "local"
        supabase_url: Project URL, e.g. https://xyz.supabase.co
        supabase_key: Service or anon key used for uploads
        bucket: Storage bucket for images and narration
        local_dir: Directory used by the local backend
        public_base_url: Optional URL prefix under which local_dir is served
    """
    backend: str = "local"
    supabase_url: str = ""
    supabase_key: str = ""
    bucket: str = "video-assets"
    local_dir: str = ".shorts-factory/assets"
    public_base_url: Optional[str] = None


@dataclass
class RenderConfig:
    """Fixed parameters of the external renderer.

    Attributes:
        fps: Frames per second
        width: Frame width in pixels
        height: Frame height in pixels
        composition_id: Name of the composition the renderer selects
        entry_point: Renderer project entry point used in the CLI command
        server_url: Base URL of the render server
    """
    fps: int = 30
    width: int = 1080
    height: int = 1920
    composition_id: str = "VideoComposition"
    entry_point: str = "src/index.tsx"
    server_url: str = "http://localhost:3001"


@dataclass
class AppConfig:
    """Complete application configuration.

    Attributes:
        gemini: Gemini provider configuration
        openai: OpenAI provider configuration
        storage: Storage collaborator configuration
        render: Renderer configuration
        settings_path: File backing the persisted provider/key settings
    """
    gemini: GeminiConfig = field(default_factory=GeminiConfig)
    openai: OpenAIConfig = field(default_factory=OpenAIConfig)
    storage: StorageConfig = field(default_factory=StorageConfig)
    render: RenderConfig = field(default_factory=RenderConfig)
    settings_path: str = str(Path.home() / ".shorts-factory" / "settings.yaml")

    @classmethod
    def load_from_yaml(cls, config_path: Optional[str] = None) -> 'AppConfig':
        """Load configuration from a YAML file.

        A missing file is not an error; defaults and environment variables
        still apply.

        Args:
            config_path: Path to config YAML file (default: .shorts-factory/config.yaml)

        Returns:
            AppConfig instance
        """
        data = {}
        config_file = Path(config_path or DEFAULT_CONFIG_PATH)
        if config_file.exists():
            with open(config_file, 'r', encoding='utf-8') as f:
                data = yaml.safe_load(f) or {}

        return cls.load_from_dict(data)

    @classmethod
    def load_from_dict(cls, data: Dict[str, Any]) -> 'AppConfig':
        """Load configuration from a dictionary.

        Configuration precedence (highest to lowest):
        1. Environment variables
        2. Dict values
        3. Default values

        Args:
            data: Dictionary with optional gemini/openai/storage/render sections

        Returns:
            AppConfig instance
        """
        gemini_section = data.get('gemini', {}) or {}
        openai_section = data.get('openai', {}) or {}
        storage_section = data.get('storage', {}) or {}
        render_section = data.get('render', {}) or {}
        resolve = cls._resolve_value

        gemini_defaults = GeminiConfig()
        image_models = gemini_section.get('image_models')
        gemini = GeminiConfig(
            script_model=resolve(gemini_section.get('script_model'), 'GEMINI_SCRIPT_MODEL', gemini_defaults.script_model),
            image_models=tuple(image_models) if image_models else gemini_defaults.image_models,
            pro_image_size=resolve(gemini_section.get('pro_image_size'), 'GEMINI_PRO_IMAGE_SIZE', gemini_defaults.pro_image_size),
            tts_model=resolve(gemini_section.get('tts_model'), 'GEMINI_TTS_MODEL', gemini_defaults.tts_model),
            voice=resolve(gemini_section.get('voice'), 'GEMINI_VOICE', gemini_defaults.voice),
            sample_rate=int(resolve(gemini_section.get('sample_rate'), 'GEMINI_SAMPLE_RATE', gemini_defaults.sample_rate)),
            pacing_delay=float(resolve(gemini_section.get('pacing_delay'), 'GEMINI_PACING_DELAY', gemini_defaults.pacing_delay)),
            ping_model=resolve(gemini_section.get('ping_model'), 'GEMINI_PING_MODEL', gemini_defaults.ping_model),
        )

        openai_defaults = OpenAIConfig()
        openai = OpenAIConfig(
            script_model=resolve(openai_section.get('script_model'), 'OPENAI_SCRIPT_MODEL', openai_defaults.script_model),
            image_model=resolve(openai_section.get('image_model'), 'OPENAI_IMAGE_MODEL', openai_defaults.image_model),
            image_size=resolve(openai_section.get('image_size'), 'OPENAI_IMAGE_SIZE', openai_defaults.image_size),
            image_quality=resolve(openai_section.get('image_quality'), 'OPENAI_IMAGE_QUALITY', openai_defaults.image_quality),
            tts_model=resolve(openai_section.get('tts_model'), 'OPENAI_TTS_MODEL', openai_defaults.tts_model),
            voice=resolve(openai_section.get('voice'), 'OPENAI_VOICE', openai_defaults.voice),
            tts_format=resolve(openai_section.get('tts_format'), 'OPENAI_TTS_FORMAT', openai_defaults.tts_format),
            sample_rate=int(resolve(openai_section.get('sample_rate'), 'OPENAI_SAMPLE_RATE', openai_defaults.sample_rate)),
            timeout=int(resolve(openai_section.get('timeout'), 'OPENAI_TIMEOUT', openai_defaults.timeout)),
        )

        storage_defaults = StorageConfig()
        storage = StorageConfig(
            backend=resolve(storage_section.get('backend'), 'STORAGE_BACKEND', storage_defaults.backend),
            supabase_url=resolve(storage_section.get('supabase_url'), 'SUPABASE_URL', storage_defaults.supabase_url),
            supabase_key=resolve(storage_section.get('supabase_key'), 'SUPABASE_KEY', storage_defaults.supabase_key),
            bucket=resolve(storage_section.get('bucket'), 'STORAGE_BUCKET', storage_defaults.bucket),
            local_dir=resolve(storage_section.get('local_dir'), 'STORAGE_LOCAL_DIR', storage_defaults.local_dir),
            public_base_url=resolve(storage_section.get('public_base_url'), 'STORAGE_PUBLIC_BASE_URL', None),
        )

        render_defaults = RenderConfig()
        render = RenderConfig(
            fps=int(resolve(render_section.get('fps'), 'VIDEO_FPS', render_defaults.fps)),
            width=int(resolve(render_section.get('width'), 'VIDEO_WIDTH', render_defaults.width)),
            height=int(resolve(render_section.get('height'), 'VIDEO_HEIGHT', render_defaults.height)),
            composition_id=resolve(render_section.get('composition_id'), 'RENDER_COMPOSITION_ID', render_defaults.composition_id),
            entry_point=resolve(render_section.get('entry_point'), 'RENDER_ENTRY_POINT', render_defaults.entry_point),
            server_url=resolve(render_section.get('server_url'), 'RENDER_SERVER_URL', render_defaults.server_url),
        )

        settings_path = resolve(data.get('settings_path'), 'SHORTS_FACTORY_SETTINGS', cls().settings_path)

        return cls(
            gemini=gemini,
            openai=openai,
            storage=storage,
            render=render,
            settings_path=settings_path,
        )

    @staticmethod
    def _resolve_value(config_value: Any, env_var: str, default: Any) -> Any:
        """Resolve configuration value with precedence: ENV > Config > Default.

        Args:
            config_value: Value from config file (may be None)
            env_var: Environment variable name to check
            default: Default value to use if neither env nor config is set

        Returns:
            Resolved configuration value

        Example:
            >>> # With GEMINI_VOICE="Puck" in environment
            >>> _resolve_value('Kore', 'GEMINI_VOICE', 'Kore')
            'Puck'
        """
        env_value = os.getenv(env_var)
        if env_value is not None:
            return env_value

        if config_value is not None:
            return config_value

        return default
