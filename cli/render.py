"""
Render Subcommand Module

Hands a generated script to the renderer: either prints the one-line
render command, writes a standalone render script, or asks the render
server for the MP4.
"""

import asyncio
import json
import sys
from pathlib import Path

import click
from pydantic import ValidationError

from shorts_factory.config import AppConfig
from shorts_factory.models import VideoScript
from shorts_factory.render import (
    RenderClient,
    RenderError,
    build_render_command,
    output_name,
)

from .errors import fail
from .help_texts import (
    RENDER_COMMAND_ONLY_HELP,
    RENDER_HELP,
    RENDER_OUTPUT_HELP,
    RENDER_SCRIPT_HELP,
    RENDER_TITLE_HELP,
    ExitCodes,
)
from .shared_options import config_option


@click.command(help=RENDER_HELP)
@click.option('--script', '-s', 'script_path', required=True, type=click.Path(exists=True), help=RENDER_SCRIPT_HELP)
@click.option('--title', default=None, help=RENDER_TITLE_HELP)
@click.option('--command-only', is_flag=True, help=RENDER_COMMAND_ONLY_HELP)
@click.option('--output', '-o', type=click.Path(), default=None, help=RENDER_OUTPUT_HELP)
@config_option()
def render(script_path, title, command_only, output, config):
    """
    Render a generated script.

    Examples:
        # Print the render command
        shorts-factory render --script mars.json --command-only

        # Render through the render server
        shorts-factory render --script mars.json --output out/mars.mp4
    """
    app_config = AppConfig.load_from_yaml(config)
    title = title or Path(script_path).stem

    try:
        with open(script_path, 'r', encoding='utf-8') as f:
            script = VideoScript.model_validate(json.load(f))
    except (json.JSONDecodeError, ValidationError) as e:
        click.echo(f"Error: {script_path} is not a valid script: {e}", err=True)
        sys.exit(ExitCodes.INVALID_SCRIPT)

    if command_only:
        click.echo(build_render_command(script, title, app_config.render))
        return

    output_path = output or f"out/{output_name(title)}.mp4"
    client = RenderClient(app_config.render.server_url)
    try:
        saved = asyncio.run(client.render_when_healthy(script, title, output_path))
    except RenderError as e:
        fail(e)
        return
    click.echo(f"Video saved: {saved}")
