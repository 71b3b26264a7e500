"""API test fixtures: the app with a fake-backed AppContext injected."""

import pytest
from fastapi.testclient import TestClient

from api.app import app
from api.dependencies import get_context
from shorts_factory.app_context import AppContext
from shorts_factory.config import AppConfig
from shorts_factory.models import ProviderId
from shorts_factory.settings import MemorySettingsBackend


@pytest.fixture
def context(fake_provider, fake_storage):
    ctx = AppContext.build(AppConfig.load_from_dict({}), MemorySettingsBackend(), fake_storage)
    for provider_id in ProviderId:
        ctx.factory.register(provider_id, lambda key: fake_provider)
    return ctx


@pytest.fixture
def client(context):
    app.dependency_overrides[get_context] = lambda: context
    yield TestClient(app)
    app.dependency_overrides.clear()
