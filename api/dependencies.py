"""Application-wide collaborators injected into the routers.

The API process owns exactly one AppContext, hence one orchestrator: a new
generate request cancels the one in flight.
"""

from functools import lru_cache

from api.config import APIConfig
from shorts_factory.app_context import AppContext
from shorts_factory.config import AppConfig


@lru_cache(maxsize=1)
def get_context() -> AppContext:
    return AppContext.build(AppConfig.load_from_yaml(APIConfig.load().config_path))
