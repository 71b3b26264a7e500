"""
Composition root shared by the CLI and the REST API.

Builds the settings store, provider factory, storage collaborator and
orchestrator from one AppConfig so both surfaces wire things the same way.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from shorts_factory.config import AppConfig
from shorts_factory.connection import ConnectionProber
from shorts_factory.factory import ProviderFactory
from shorts_factory.orchestrator import GenerationOrchestrator
from shorts_factory.settings import ProviderSettings, SettingsBackend, YamlSettingsBackend
from shorts_factory.storage import StorageBackend, create_storage
from shorts_factory.utils.logging_config import log_app_config

logger = logging.getLogger(__name__)


@dataclass
class AppContext:
    config: AppConfig
    settings: ProviderSettings
    factory: ProviderFactory
    storage: StorageBackend
    orchestrator: GenerationOrchestrator
    prober: ConnectionProber

    @classmethod
    def build(
        cls,
        config: Optional[AppConfig] = None,
        settings_backend: Optional[SettingsBackend] = None,
        storage: Optional[StorageBackend] = None,
        owner_id: Optional[str] = None,
    ) -> "AppContext":
        config = config or AppConfig.load_from_yaml()
        log_app_config(config, logger)
        settings = ProviderSettings(settings_backend or YamlSettingsBackend(config.settings_path))
        factory = ProviderFactory(config)
        storage = storage or create_storage(config.storage)
        logger.debug(f"Storage backend: {type(storage).__name__}")
        return cls(
            config=config,
            settings=settings,
            factory=factory,
            storage=storage,
            orchestrator=GenerationOrchestrator(settings, factory, storage, owner_id),
            prober=ConnectionProber(settings, factory),
        )
