"""
CLI Package for Shorts Factory

This package provides a modular CLI architecture using Click groups and subcommands.
Each subcommand is implemented in its own module for better maintainability and testing.

The main entry point is the main() function which creates a Click group and registers
all available subcommands. The cli() function serves as the console script entry point
for setup.py.
"""

import os
import click
from dotenv import load_dotenv
from shorts_factory.utils.logging_config import configure_logging

# Load environment variables from .env files
# Priority: .env.dev (if exists) overrides .env
if os.path.exists('.env.dev'):
    load_dotenv('.env.dev')
elif os.path.exists('.env'):
    load_dotenv('.env')
from .generate import generate
from .check import check
from .settings import settings
from .render import render

# Configure logging when CLI package is imported
configure_logging()

@click.group()
@click.version_option(version='0.1.0', prog_name='shorts-factory')
def main():
    """Shorts Factory CLI - Turn a topic into a narrated vertical video script.

    Generates the script, one image and one narration track per scene with
    Gemini or OpenAI, and hands the result off to the renderer.
    """
    pass

# Register subcommands
main.add_command(generate)
main.add_command(check)
main.add_command(settings)
main.add_command(render)

# Entry point for setup.py console script
def cli():
    """Console script entry point.

    This function is called when the shorts-factory command is executed
    from the command line after installation via pip.
    """
    main()
