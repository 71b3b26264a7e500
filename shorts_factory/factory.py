"""
Provider Factory

Selects a provider implementation from a ProviderId through a lookup
table. A missing API key is a configuration error raised here, before
any network call is made.
"""

import logging
from typing import Callable, Dict, Optional, Union

from shorts_factory.config import AppConfig
from shorts_factory.errors import ConfigurationError
from shorts_factory.models import ProviderId
from shorts_factory.providers.base import BaseGenerationProvider
from shorts_factory.providers.cloud_gemini import CloudGeminiProvider
from shorts_factory.providers.cloud_openai import CloudOpenAIProvider

logger = logging.getLogger(__name__)

MISSING_KEY_MESSAGES = {
    ProviderId.GEMINI: "Gemini API Key is missing.",
    ProviderId.OPENAI: "OpenAI API Key missing. Please set it in Settings.",
}


class ProviderFactory:
    """Factory for creating generation providers.

    Example:
        >>> factory = ProviderFactory(AppConfig())
        >>> provider = factory.create_provider(ProviderId.GEMINI, api_key)
    """

    def __init__(self, config: Optional[AppConfig] = None):
        self.config = config or AppConfig()
        self._builders: Dict[ProviderId, Callable[[str], BaseGenerationProvider]] = {
            ProviderId.GEMINI: lambda key: CloudGeminiProvider(key, self.config.gemini),
            ProviderId.OPENAI: lambda key: CloudOpenAIProvider(key, self.config.openai),
        }

    def create_provider(self, provider_id: Union[ProviderId, str], api_key: str) -> BaseGenerationProvider:
        """Instantiate the provider registered for ``provider_id``.

        Raises:
            ConfigurationError: If the id is unknown or the key is empty
        """
        try:
            provider_id = ProviderId(provider_id)
        except ValueError:
            raise ConfigurationError(
                f"Unknown provider '{provider_id}'. "
                f"Available providers: {', '.join(p.value for p in ProviderId)}"
            )

        if not api_key:
            raise ConfigurationError(MISSING_KEY_MESSAGES[provider_id])

        logger.debug(f"Creating provider {provider_id.value}")
        return self._builders[provider_id](api_key)

    def register(self, provider_id: Union[ProviderId, str], builder: Callable[[str], BaseGenerationProvider]) -> None:
        """Replace the builder used for ``provider_id`` (key -> provider)."""
        self._builders[ProviderId(provider_id)] = builder

    def get_available_providers(self):
        return [p.value for p in self._builders]
