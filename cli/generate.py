"""
Generate Subcommand Module

Runs one generation request: script, then per-scene images and narration,
with a progress bar on stderr. Ctrl+C cancels cooperatively at the next
checkpoint and exits with the cancellation code.
"""

import asyncio
import logging
import signal
import sys
from pathlib import Path
from typing import Optional

import click

from shorts_factory.app_context import AppContext
from shorts_factory.cancellation import CancellationToken
from shorts_factory.config import AppConfig
from shorts_factory.errors import ShortsFactoryError
from shorts_factory.models import VideoLanguage
from shorts_factory.render import (
    build_render_command,
    build_render_script,
    output_name,
    render_script_filename,
    total_duration_in_frames,
)
from shorts_factory.utils.logging_config import ProgressIndicator, logging_config

from .errors import fail
from .help_texts import (
    ExitCodes,
    GENERATE_HELP,
    GENERATE_OUTPUT_HELP,
    GENERATE_OWNER_HELP,
    GENERATE_RENDER_COMMAND_HELP,
    GENERATE_RENDER_SCRIPT_HELP,
    GENERATE_TOPIC_HELP,
)
from .shared_options import config_option, language_option, log_level_option, provider_option

logger = logging.getLogger(__name__)


@click.command(help=GENERATE_HELP)
@click.option('--topic', '-t', required=True, help=GENERATE_TOPIC_HELP)
@language_option()
@provider_option()
@click.option('--output', '-o', type=click.Path(), default=None, help=GENERATE_OUTPUT_HELP)
@click.option('--owner', default=None, help=GENERATE_OWNER_HELP)
@click.option('--print-render-command', is_flag=True, help=GENERATE_RENDER_COMMAND_HELP)
@click.option('--render-script', is_flag=True, help=GENERATE_RENDER_SCRIPT_HELP)
@config_option()
@log_level_option()
def generate(topic, language, provider, output, owner, print_render_command, render_script, config, log_level):
    """
    Generate a video script with narration and images.

    Examples:
        # Portuguese narration with the stored provider
        shorts-factory generate --topic "5 curiosidades sobre Marte"

        # English narration with OpenAI for this run only
        shorts-factory generate -t "5 facts about Mars" -l en-US -p openai -o mars.json
    """
    if log_level:
        logging_config.set_level(log_level)

    if not topic.strip():
        click.echo("Error: --topic cannot be empty", err=True)
        sys.exit(ExitCodes.MISSING_REQUIRED_OPTION)

    try:
        app = AppContext.build(AppConfig.load_from_yaml(config), owner_id=owner)
        script = asyncio.run(_run_generation(app, topic, VideoLanguage(language), provider))
    except ShortsFactoryError as e:
        fail(e)
        return

    output_path = Path(output or f"{output_name(topic)}.json")
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(script.to_renderer_json(indent=2), encoding="utf-8")

    missing_images = sum(1 for s in script.scenes if not s.image_url)
    missing_audio = sum(1 for s in script.scenes if not s.audio_url)
    click.echo(f"Script saved: {output_path}")
    click.echo(
        f"  {len(script.scenes)} scenes, {script.total_duration_seconds:.1f}s "
        f"({total_duration_in_frames(script, app.config.render.fps)} frames), "
        f"mood: {script.background_music_mood}"
    )
    if missing_images or missing_audio:
        click.echo(
            f"  Warning: {missing_images} scene(s) without image, {missing_audio} without narration",
            err=True,
        )

    if print_render_command:
        click.echo(build_render_command(script, topic, app.config.render))

    if render_script:
        provider_name = provider or app.settings.get_provider().value
        script_file = output_path.parent / render_script_filename(topic)
        script_file.write_text(
            build_render_script(script, topic, provider_name, language, app.config.render),
            encoding="utf-8",
        )
        script_file.chmod(0o755)
        click.echo(f"Render script saved: {script_file}")


async def _run_generation(app: AppContext, topic: str, language: VideoLanguage, provider: Optional[str]):
    token = CancellationToken()
    loop = asyncio.get_running_loop()
    handles_sigint = True
    try:
        loop.add_signal_handler(signal.SIGINT, token.cancel)
    except (NotImplementedError, RuntimeError):
        handles_sigint = False
        # Windows event loops have no signal handlers; Ctrl+C aborts instead.
        logger.debug("Cooperative Ctrl+C cancellation unavailable on this platform")

    progress = ProgressIndicator("Generating")
    try:
        script = await app.orchestrator.generate(
            topic,
            language,
            on_progress=progress.update,
            token=token,
            provider_id=provider,
        )
    except ShortsFactoryError:
        progress.finish("Generation stopped")
        raise
    finally:
        if handles_sigint:
            loop.remove_signal_handler(signal.SIGINT)

    progress.finish("Generation completed")
    return script
