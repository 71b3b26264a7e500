"""
Connection Prober

Diagnostic check of the active provider and its API key. Nothing is
persisted, so it is safe to call repeatedly.
"""

import logging
import time
from dataclasses import dataclass

from shorts_factory.errors import ConfigurationError, GenerationCancelled
from shorts_factory.factory import ProviderFactory
from shorts_factory.models import ProviderId
from shorts_factory.retry import with_retry
from shorts_factory.settings import ProviderSettings

logger = logging.getLogger(__name__)

# Model-ping probes retry briefly so one transient 429 does not read as "disconnected".
PING_RETRY_ATTEMPTS = {
    ProviderId.GEMINI: 2,
    ProviderId.OPENAI: 1,
}
PING_INITIAL_DELAY_MS = 1000


@dataclass
class ConnectionResult:
    """Outcome of a connection check."""
    success: bool
    latency_ms: int
    message: str

    def to_dict(self):
        return {"success": self.success, "latencyMs": self.latency_ms, "message": self.message}


class ConnectionProber:
    """Checks that the active provider answers with the stored key.

    Example:
        >>> result = await ConnectionProber(settings, factory).check_connection()
        >>> result.success, result.latency_ms
    """

    def __init__(self, settings: ProviderSettings, factory: ProviderFactory):
        self.settings = settings
        self.factory = factory

    async def check_connection(self) -> ConnectionResult:
        provider_id = self.settings.get_provider()
        api_key = self.settings.get_api_key(provider_id)
        if not api_key:
            return ConnectionResult(
                success=False,
                latency_ms=0,
                message=f"No API Key found for {provider_id.value.upper()}",
            )

        try:
            provider = self.factory.create_provider(provider_id, api_key)
        except ConfigurationError as e:
            return ConnectionResult(success=False, latency_ms=0, message=str(e))

        start = time.perf_counter()
        try:
            message = await with_retry(
                provider.ping,
                max_attempts=PING_RETRY_ATTEMPTS.get(provider_id, 1),
                initial_delay_ms=PING_INITIAL_DELAY_MS,
                label=f"{provider.display_name} connection check",
            )
        except GenerationCancelled:
            raise
        except Exception as e:
            logger.warning(f"{provider.display_name} connection check failed: {e}")
            return ConnectionResult(success=False, latency_ms=0, message=str(e) or "Connection failed")

        latency_ms = int(round((time.perf_counter() - start) * 1000))
        logger.info(f"{provider.display_name} reachable in {latency_ms}ms")
        return ConnectionResult(success=True, latency_ms=latency_ms, message=message)
