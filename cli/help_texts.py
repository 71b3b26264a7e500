"""
Centralized Help Text Constants

This module provides all CLI help text constants for commands and options,
ensuring consistency across subcommands, plus the exit codes used when a
command fails.
"""

# Exit codes for different error types
class ExitCodes:
    SUCCESS = 0
    GENERAL_ERROR = 1
    MISSING_REQUIRED_OPTION = 2
    INVALID_CONFIGURATION = 3
    PROVIDER_ERROR = 4
    AUTHENTICATION_ERROR = 5
    FILE_NOT_FOUND = 6
    INVALID_SCRIPT = 7
    NETWORK_ERROR = 8
    RENDER_ERROR = 9
    CANCELLED = 130

# Command help texts
GENERATE_HELP = "Generate a short-video script with narration and images for a topic."
CHECK_HELP = "Check that the active AI provider is reachable with the stored API key."
SETTINGS_HELP = "Show or change the active AI provider and its API keys."
RENDER_HELP = "Hand a generated script off to the renderer."

# Option help texts - Generate command
GENERATE_TOPIC_HELP = (
    "Free-text topic of the video, e.g. '5 facts about Mars'."
)

GENERATE_LANGUAGE_HELP = (
    "Narration language: pt-BR (Portuguese, Brazil), en-US (English, USA) or es-ES (Spanish). "
    "Image prompts and the character description are always written in English."
)

GENERATE_PROVIDER_HELP = (
    "AI provider for this run. Overrides the stored selection without changing it:\n"
    "  gemini: Gemini script model, Flash Image with Pro Image fallback, Gemini TTS\n"
    "  openai: GPT-4o, DALL-E 3, tts-1"
)

GENERATE_OUTPUT_HELP = (
    "Path for the script JSON consumed by the renderer (default: <topic>.json)."
)

GENERATE_OWNER_HELP = (
    "Owner identifier. Uploaded assets are stored under a folder with this name."
)

GENERATE_RENDER_COMMAND_HELP = (
    "Print the one-line render command for the generated script."
)

# Option help texts - Render command
RENDER_SCRIPT_HELP = "Path to a script JSON produced by 'generate'."
RENDER_COMMAND_ONLY_HELP = "Only print the render command instead of calling the render server."
RENDER_OUTPUT_HELP = "Path for the rendered MP4 (default: out/<title>.mp4)."
RENDER_TITLE_HELP = "Video title; defaults to the script file name."
GENERATE_RENDER_SCRIPT_HELP = "Also write a standalone bash render script (render_<topic>.sh)."

# Shared option help texts
CONFIG_HELP = "Path to configuration file (default: .shorts-factory/config.yaml)."
LOG_LEVEL_HELP = "Logging level."

# Error messages
MISSING_KEY_HINT = (
    "Set a key with 'shorts-factory settings set-key <provider> <key>'"
    " or the GEMINI_API_KEY environment variable."
)

CANCELLED_MESSAGE = "Generation cancelled"
