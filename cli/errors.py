"""
Error-to-exit-code mapping shared by the subcommands.
"""

import sys

import click

from shorts_factory.errors import (
    AuthenticationError,
    ConfigurationError,
    GenerationCancelled,
    NetworkError,
    ProviderError,
    ScriptValidationError,
    TimeoutError,
)
from shorts_factory.render import RenderError

from .help_texts import CANCELLED_MESSAGE, MISSING_KEY_HINT, ExitCodes


def exit_code_for(error: Exception) -> int:
    if isinstance(error, GenerationCancelled):
        return ExitCodes.CANCELLED
    if isinstance(error, ConfigurationError):
        return ExitCodes.INVALID_CONFIGURATION
    if isinstance(error, AuthenticationError):
        return ExitCodes.AUTHENTICATION_ERROR
    if isinstance(error, (NetworkError, TimeoutError)):
        return ExitCodes.NETWORK_ERROR
    if isinstance(error, ScriptValidationError):
        return ExitCodes.INVALID_SCRIPT
    if isinstance(error, ProviderError):
        return ExitCodes.PROVIDER_ERROR
    if isinstance(error, RenderError):
        return ExitCodes.RENDER_ERROR
    return ExitCodes.GENERAL_ERROR


def fail(error: Exception) -> None:
    """Report ``error`` and exit with its code.

    Cancellation is reported as a neutral status rather than an error.
    """
    code = exit_code_for(error)
    if code == ExitCodes.CANCELLED:
        click.echo(CANCELLED_MESSAGE, err=True)
    else:
        click.echo(f"Error: {error}", err=True)
        if isinstance(error, ConfigurationError) and "API Key" in str(error):
            click.echo(MISSING_KEY_HINT, err=True)
    sys.exit(code)
