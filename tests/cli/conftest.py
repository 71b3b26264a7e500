"""CLI test fixtures."""

import pytest
from click.testing import CliRunner
from unittest.mock import patch

from shorts_factory.app_context import AppContext
from shorts_factory.config import AppConfig
from shorts_factory.models import ProviderId
from shorts_factory.settings import MemorySettingsBackend


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def cli_context(fake_provider, fake_storage):
    """AppContext wired to the fakes, with a Gemini key stored."""
    ctx = AppContext.build(AppConfig.load_from_dict({}), MemorySettingsBackend(), fake_storage)
    for provider_id in ProviderId:
        ctx.factory.register(provider_id, lambda key: fake_provider)
    ctx.settings.set_api_key(ProviderId.GEMINI, "gm-cli-key-4321")
    return ctx


@pytest.fixture
def patched_context(cli_context):
    with patch("shorts_factory.app_context.AppContext.build", return_value=cli_context):
        yield cli_context
