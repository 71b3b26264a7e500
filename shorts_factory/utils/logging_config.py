"""
Logging Configuration and Progress Reporting

Console/file logging for the CLI and API processes plus the progress
display used while a generation request runs.

- Level and optional rotating log file, overridable through
  SHORTS_FACTORY_LOG_LEVEL and SHORTS_FACTORY_LOG_FILE
- Percentage progress display driven by orchestrator callbacks
- Configuration summaries with secrets masked
"""

import logging
import logging.handlers
import os
import sys
import time
from dataclasses import asdict
from pathlib import Path
from typing import Optional

LOG_LEVEL_ENV = "SHORTS_FACTORY_LOG_LEVEL"
LOG_FILE_ENV = "SHORTS_FACTORY_LOG_FILE"

LEVELS = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warning": logging.WARNING,
    "error": logging.ERROR,
}

# Third-party loggers that log every HTTP exchange at INFO
NOISY_LOGGERS = ("httpx", "httpcore", "google_genai", "openai")

SECRET_FIELDS = ("key", "secret", "token")

CONSOLE_FORMAT = "%(asctime)s - %(levelname)s - %(message)s"
DEBUG_CONSOLE_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
FILE_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def parse_level(level: Optional[str]) -> int:
    """Map a level name to its logging constant; unknown names mean INFO."""
    return LEVELS.get((level or "").lower(), logging.INFO)


class ProgressIndicator:
    """
    Percentage progress indicator for a generation request.

    Designed to be passed as the orchestrator's ``on_progress`` callback:

        progress = ProgressIndicator("Generating")
        await orchestrator.generate(topic, language, on_progress=progress.update)
    """

    def __init__(self, description: str, stream=None, min_interval: float = 0.0):
        self.description = description
        self.stream = stream or sys.stderr
        self.min_interval = min_interval
        self.percentage = 0
        self.message = description
        self.start_time = time.time()
        self._last_update = 0.0

    def update(self, percentage: int, message: Optional[str] = None):
        """Record and display a progress update."""
        self.percentage = percentage
        if message:
            self.message = message

        current_time = time.time()
        if percentage < 100 and current_time - self._last_update < self.min_interval:
            return
        self._last_update = current_time

        elapsed = current_time - self.start_time
        bar = self._create_progress_bar(percentage)
        self.stream.write(f"\r{bar} {percentage:3d}% {self.message} [{elapsed:.1f}s]\033[K")
        self.stream.flush()

    def finish(self, message: Optional[str] = None):
        """Complete the progress indicator."""
        elapsed = time.time() - self.start_time
        final_message = message or f"{self.description} completed"
        self.stream.write(f"\r{final_message} [{elapsed:.1f}s]\033[K\n")
        self.stream.flush()

    def _create_progress_bar(self, percentage: float, width: int = 20) -> str:
        """Create a text-based progress bar."""
        filled = int(width * max(0, min(percentage, 100)) / 100)
        bar = "#" * filled + "-" * (width - filled)
        return f"[{bar}]"


class LoggingConfig:
    """
    Root logger setup shared by the CLI and the API.

    Configuration happens once per process; later calls only change the
    level through set_level().
    """

    def __init__(self):
        self._configured = False
        self._console_handler: Optional[logging.Handler] = None
        self._file_handler: Optional[logging.Handler] = None

    @property
    def configured(self) -> bool:
        return self._configured

    def configure_logging(
        self,
        level: Optional[str] = None,
        log_file: Optional[str] = None,
        max_log_file_size: int = 10 * 1024 * 1024,
        backup_count: int = 5,
    ) -> None:
        """
        Configure the root logger.

        Args:
            level: debug, info, warning or error (default: SHORTS_FACTORY_LOG_LEVEL or info)
            log_file: Optional log file path (default: SHORTS_FACTORY_LOG_FILE)
            max_log_file_size: Size in bytes before the log file rotates
            backup_count: Number of rotated files kept
        """
        if self._configured:
            return

        level = level or os.environ.get(LOG_LEVEL_ENV, "info")
        log_file = log_file or os.environ.get(LOG_FILE_ENV)
        log_level = parse_level(level)
        debug_mode = log_level == logging.DEBUG

        root_logger = logging.getLogger()
        root_logger.setLevel(log_level)
        root_logger.handlers.clear()

        self._console_handler = logging.StreamHandler(sys.stderr)
        self._console_handler.setLevel(log_level)
        self._console_handler.setFormatter(logging.Formatter(
            DEBUG_CONSOLE_FORMAT if debug_mode else CONSOLE_FORMAT,
            datefmt="%Y-%m-%d %H:%M:%S" if debug_mode else "%H:%M:%S",
        ))
        root_logger.addHandler(self._console_handler)

        if log_file:
            self._add_file_handler(log_file, log_level, max_log_file_size, backup_count)

        self._quiet_third_party(log_level)
        self._configured = True
        logging.getLogger(__name__).debug(f"Logging configured: level={level}, file={log_file}")

    def _add_file_handler(self, log_file: str, log_level: int, max_size: int, backup_count: int) -> None:
        try:
            Path(log_file).parent.mkdir(parents=True, exist_ok=True)
            handler = logging.handlers.RotatingFileHandler(
                log_file, maxBytes=max_size, backupCount=backup_count, encoding="utf-8"
            )
        except OSError as e:
            # Console logging still works
            logging.getLogger(__name__).warning(f"Failed to set up log file {log_file}: {e}")
            return

        handler.setLevel(log_level)
        handler.setFormatter(logging.Formatter(FILE_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
        logging.getLogger().addHandler(handler)
        self._file_handler = handler

    def _quiet_third_party(self, log_level: int) -> None:
        for name in NOISY_LOGGERS:
            logging.getLogger(name).setLevel(max(log_level, logging.WARNING))

    def set_level(self, level: str) -> None:
        """Change the level of the configured handlers."""
        log_level = parse_level(level)
        logging.getLogger().setLevel(log_level)
        for handler in (self._console_handler, self._file_handler):
            if handler is not None:
                handler.setLevel(log_level)
        self._quiet_third_party(log_level)


def mask_secrets(values: dict) -> dict:
    """Copy of ``values`` with secret-looking fields replaced, recursively."""
    masked = {}
    for name, value in values.items():
        if isinstance(value, dict):
            masked[name] = mask_secrets(value)
        elif any(word in name.lower() for word in SECRET_FIELDS):
            masked[name] = "***MASKED***" if value else value
        else:
            masked[name] = value
    return masked


def log_app_config(config, logger: Optional[logging.Logger] = None) -> None:
    """Log an AppConfig dataclass at debug level with secrets masked."""
    logger = logger or logging.getLogger(__name__)
    if not logger.isEnabledFor(logging.DEBUG):
        return
    for section, values in mask_secrets(asdict(config)).items():
        logger.debug(f"config.{section}: {values}")


def log_operation_timing(operation: str, duration: float, logger: Optional[logging.Logger] = None) -> None:
    """Log how long an operation took; sub-second timings go to debug."""
    logger = logger or logging.getLogger(__name__)
    if duration < 1.0:
        logger.debug(f"{operation} completed in {duration * 1000:.0f}ms")
    else:
        logger.info(f"{operation} completed in {duration:.1f}s")


# Global logging configuration instance
logging_config = LoggingConfig()


def configure_logging(level: Optional[str] = None, log_file: Optional[str] = None) -> None:
    """Configure the process-wide logging once (see LoggingConfig.configure_logging)."""
    logging_config.configure_logging(level=level, log_file=log_file)
