"""
Shared CLI Option Decorators

This module provides reusable Click decorators for common CLI options,
ensuring consistency across subcommands and following DRY principles.
"""

import click

from shorts_factory.models import ProviderId, VideoLanguage

from .help_texts import (
    CONFIG_HELP,
    GENERATE_LANGUAGE_HELP,
    GENERATE_PROVIDER_HELP,
    LOG_LEVEL_HELP,
)

PROVIDER_CHOICES = [p.value for p in ProviderId]
LANGUAGE_CHOICES = [lang.value for lang in VideoLanguage]


def provider_argument():
    """Decorator for a positional provider id."""
    def decorator(f):
        return click.argument(
            'provider',
            type=click.Choice(PROVIDER_CHOICES, case_sensitive=False),
        )(f)
    return decorator


def provider_option(help=None):
    """Decorator for an optional provider override."""
    def decorator(f):
        return click.option(
            '--provider', '-p',
            default=None,
            type=click.Choice(PROVIDER_CHOICES, case_sensitive=False),
            help=help or GENERATE_PROVIDER_HELP
        )(f)
    return decorator


def language_option(help=None):
    """Decorator for the narration language."""
    def decorator(f):
        return click.option(
            '--language', '-l',
            default=VideoLanguage.PT_BR.value,
            show_default=True,
            type=click.Choice(LANGUAGE_CHOICES),
            help=help or GENERATE_LANGUAGE_HELP
        )(f)
    return decorator


def config_option(help=None):
    """Decorator for configuration file options."""
    def decorator(f):
        return click.option(
            '--config',
            default=None,
            type=click.Path(),
            help=help or CONFIG_HELP
        )(f)
    return decorator


def log_level_option(help=None):
    """Decorator for logging level options."""
    def decorator(f):
        return click.option(
            '--log-level',
            default=None,
            type=click.Choice(['DEBUG', 'INFO', 'WARNING', 'ERROR'], case_sensitive=False),
            help=help or LOG_LEVEL_HELP
        )(f)
    return decorator
