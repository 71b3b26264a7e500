"""
Settings Subcommand Module

Shows and edits the persisted provider selection and API keys. Keys are
only ever displayed masked.
"""

import click

from shorts_factory.config import AppConfig
from shorts_factory.models import ProviderId
from shorts_factory.settings import ProviderSettings, YamlSettingsBackend, mask_key

from .help_texts import SETTINGS_HELP
from .shared_options import config_option, provider_argument


def _load_settings(config_path) -> ProviderSettings:
    config = AppConfig.load_from_yaml(config_path)
    return ProviderSettings(YamlSettingsBackend(config.settings_path))


@click.group(help=SETTINGS_HELP)
def settings():
    pass


@settings.command(help="Show the active provider and which keys are set.")
@config_option()
def show(config):
    store = _load_settings(config)
    active = store.get_provider()
    click.echo(f"Active provider: {active.value} ({active.display_name})")
    for provider in ProviderId:
        key = store.get_api_key(provider)
        status = mask_key(key) if key else "not set"
        marker = "*" if provider == active else " "
        click.echo(f" {marker} {provider.value:<8} {status}")


@settings.command(help="Select the active provider.")
@provider_argument()
@config_option()
def provider(provider, config):
    store = _load_settings(config)
    store.set_provider(ProviderId(provider.lower()))
    click.echo(f"Active provider: {ProviderId(provider.lower()).display_name}")


@settings.command(name="set-key", help="Store the API key of a provider.")
@provider_argument()
@click.argument('key')
@config_option()
def set_key(provider, key, config):
    store = _load_settings(config)
    provider_id = ProviderId(provider.lower())
    store.set_api_key(provider_id, key)
    stored = store.get_api_key(provider_id)
    if stored:
        click.echo(f"{provider_id.display_name} API key saved ({mask_key(stored)})")
    else:
        click.echo(f"{provider_id.display_name} API key removed")


@settings.command(name="remove-key", help="Remove the stored API key of a provider.")
@provider_argument()
@config_option()
def remove_key(provider, config):
    store = _load_settings(config)
    provider_id = ProviderId(provider.lower())
    store.remove_api_key(provider_id)
    click.echo(f"{provider_id.display_name} API key removed")
