"""
Check Subcommand Module

Connection check of the active provider. Exits non-zero when the
provider cannot be reached so it can be used in scripts.
"""

import asyncio
import sys

import click

from shorts_factory.app_context import AppContext
from shorts_factory.config import AppConfig
from shorts_factory.errors import ShortsFactoryError
from shorts_factory.utils.logging_config import logging_config

from .errors import fail
from .help_texts import CHECK_HELP, ExitCodes
from .shared_options import config_option, log_level_option


@click.command(help=CHECK_HELP)
@config_option()
@log_level_option()
def check(config, log_level):
    """
    Check connectivity of the active provider.

    Examples:
        shorts-factory check
    """
    if log_level:
        logging_config.set_level(log_level)

    try:
        app = AppContext.build(AppConfig.load_from_yaml(config))
        result = asyncio.run(app.prober.check_connection())
    except ShortsFactoryError as e:
        fail(e)
        return

    provider = app.settings.get_provider()
    if result.success:
        click.echo(f"[OK] {provider.display_name}: {result.message} ({result.latency_ms}ms)")
    else:
        click.echo(f"[FAIL] {provider.display_name}: {result.message}", err=True)
        sys.exit(ExitCodes.NETWORK_ERROR)
