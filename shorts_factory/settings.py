"""
Provider Key/Preference Store

Holds the active provider and per-provider API keys. The store is an
explicit object owned by the composition root (CLI or API app) and passed
by reference to the orchestrator and the connection prober. Persistence
is delegated to a SettingsBackend; the YAML backend keeps settings across
restarts.

Usage:
    >>> from shorts_factory.settings import ProviderSettings, YamlSettingsBackend
    >>>
    >>> settings = ProviderSettings(YamlSettingsBackend("~/.shorts-factory/settings.yaml"))
    >>> settings.set_provider(ProviderId.OPENAI)
    >>> settings.set_api_key(ProviderId.OPENAI, ' "sk-..." ')
    >>> settings.get_api_key()
    'sk-...'
"""

import logging
import os
import re
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Dict, Mapping, Optional, Union

import yaml

from shorts_factory.models import DEFAULT_PROVIDER, ProviderId

logger = logging.getLogger(__name__)

PROVIDER_KEY = "ai_provider_selection"
API_KEY_NAMES = {
    ProviderId.GEMINI: "gemini_custom_api_key",
    ProviderId.OPENAI: "openai_custom_api_key",
}

# Only Gemini has a deployment-supplied key to fall back on.
ENV_FALLBACK_VARS = {
    ProviderId.GEMINI: ("GEMINI_API_KEY", "API_KEY"),
}

_SURROUNDING_QUOTES = re.compile(r"""^["']|["']$""")


def normalize_api_key(key: Optional[str]) -> str:
    """Trim whitespace and strip one surrounding quote character on each side."""
    return _SURROUNDING_QUOTES.sub("", (key or "").strip())


def mask_key(key: str) -> str:
    """Render a key for display, keeping only the last four characters."""
    if not key:
        return ""
    return f"...{key[-4:]}"


class SettingsBackend(ABC):
    """Key-value persistence behind ProviderSettings."""

    @abstractmethod
    def get(self, key: str) -> Optional[str]:
        pass

    @abstractmethod
    def set(self, key: str, value: str) -> None:
        pass

    @abstractmethod
    def remove(self, key: str) -> None:
        pass


class MemorySettingsBackend(SettingsBackend):
    """Process-local backend, used by tests and ephemeral sessions."""

    def __init__(self, initial: Optional[Mapping[str, str]] = None):
        self._values: Dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self._values.get(key)

    def set(self, key: str, value: str) -> None:
        self._values[key] = value

    def remove(self, key: str) -> None:
        self._values.pop(key, None)


class YamlSettingsBackend(SettingsBackend):
    """Backend persisting settings to a YAML file.

    The file is re-read on every access so that changes made by another
    process (e.g. the CLI while the API server runs) are picked up.
    Writes are last-writer-wins.
    """

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path).expanduser()

    def _load(self) -> Dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            logger.warning(f"Ignoring unreadable settings file {self.path}: {e}")
            return {}
        if not isinstance(data, dict):
            logger.warning(f"Ignoring malformed settings file {self.path}")
            return {}
        return {str(k): str(v) for k, v in data.items() if v is not None}

    def _save(self, data: Dict[str, str]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.path, "w", encoding="utf-8") as f:
            yaml.safe_dump(data, f, default_flow_style=False)
        try:
            os.chmod(self.path, 0o600)
        except OSError as e:
            logger.debug(f"Could not restrict permissions on {self.path}: {e}")

    def get(self, key: str) -> Optional[str]:
        return self._load().get(key)

    def set(self, key: str, value: str) -> None:
        data = self._load()
        data[key] = value
        self._save(data)

    def remove(self, key: str) -> None:
        data = self._load()
        if key in data:
            del data[key]
            self._save(data)


class ProviderSettings:
    """Active provider selection and per-provider API keys.

    Keys are stored per provider; switching providers never touches the
    other provider's key.

    Args:
        backend: Persistence backend
        environ: Environment mapping used for the Gemini key fallback
            (defaults to os.environ)
    """

    def __init__(self, backend: SettingsBackend, environ: Optional[Mapping[str, str]] = None):
        self.backend = backend
        self._environ = environ

    @property
    def environ(self) -> Mapping[str, str]:
        return os.environ if self._environ is None else self._environ

    def get_provider(self) -> ProviderId:
        """Return the active provider, defaulting to Gemini when unset."""
        stored = self.backend.get(PROVIDER_KEY)
        if not stored:
            return DEFAULT_PROVIDER
        try:
            return ProviderId(stored)
        except ValueError:
            logger.warning(f"Unknown provider '{stored}' in settings, using {DEFAULT_PROVIDER.value}")
            return DEFAULT_PROVIDER

    def set_provider(self, provider: Union[ProviderId, str]) -> None:
        provider = ProviderId(provider)
        self.backend.set(PROVIDER_KEY, provider.value)
        logger.info(f"Active provider set to {provider.display_name}")

    def get_api_key(self, provider: Union[ProviderId, str, None] = None) -> str:
        """Return the normalized key for ``provider`` (or the active one).

        Gemini falls back to GEMINI_API_KEY, then API_KEY, when no key was
        stored by the user.
        """
        provider = ProviderId(provider) if provider else self.get_provider()
        key = self.backend.get(API_KEY_NAMES[provider]) or ""
        if not key:
            for var in ENV_FALLBACK_VARS.get(provider, ()):
                key = self.environ.get(var) or ""
                if key:
                    break
        return normalize_api_key(key)

    def set_api_key(self, provider: Union[ProviderId, str], key: str) -> None:
        """Store a normalized key. An empty key removes the stored one."""
        provider = ProviderId(provider)
        clean_key = normalize_api_key(key)
        if clean_key:
            self.backend.set(API_KEY_NAMES[provider], clean_key)
            logger.info(f"Stored {provider.display_name} API key ({mask_key(clean_key)})")
        else:
            self.remove_api_key(provider)

    def remove_api_key(self, provider: Union[ProviderId, str]) -> None:
        provider = ProviderId(provider)
        self.backend.remove(API_KEY_NAMES[provider])
        logger.info(f"Removed {provider.display_name} API key")
