"""
Logging configuration for scfg.

The library only emits records under the ``scfg`` logger. Applications
(and the command line driver) call :func:`setup_logging` to route them to
stderr and, optionally, to a rotating log file.
"""

import logging
import logging.handlers
import sys
from dataclasses import dataclass
from pathlib import Path


ROOT_LOGGER = "scfg"

RESET = "\033[0m"

# Level name colors for terminal output
LEVEL_COLORS = {
    logging.DEBUG: "\033[2;36m",
    logging.INFO: "\033[32m",
    logging.WARNING: "\033[33m",
    logging.ERROR: "\033[31m",
    logging.CRITICAL: "\033[1;91m",
}


class LevelColorFormatter(logging.Formatter):
    """Formatter that colors the level name when writing to a terminal."""

    def __init__(self, fmt: str | None = None, datefmt: str | None = None, use_colors: bool = True):
        super().__init__(fmt, datefmt)
        self.use_colors = use_colors

    def format(self, record: logging.LogRecord) -> str:
        # Work on a copy so other handlers see the record unchanged
        record = logging.makeLogRecord(record.__dict__)
        record.levelname = f"{record.levelname:8}"
        if self.use_colors and record.levelno in LEVEL_COLORS:
            record.levelname = f"{LEVEL_COLORS[record.levelno]}{record.levelname}{RESET}"
        return super().format(record)


@dataclass
class LogConfig:
    """Logging configuration."""

    console_level: str = "WARNING"
    console_colors: bool = True

    # Rotating file output (--log-file)
    file_path: str | None = None
    file_level: str = "DEBUG"
    file_max_bytes: int = 1024 * 1024
    file_backup_count: int = 3

    format: str = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
    date_format: str = "%Y-%m-%d %H:%M:%S"


def setup_logging(config: LogConfig | None = None) -> None:
    """
    Configure the ``scfg`` logger.

    Args:
        config: Logging configuration (uses defaults if None)
    """
    if config is None:
        config = LogConfig()

    root_logger = logging.getLogger(ROOT_LOGGER)
    root_logger.setLevel(logging.DEBUG)  # Capture all, filter at handlers
    root_logger.handlers.clear()

    # stdout is reserved for document output
    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(config.console_level.upper())
    use_colors = config.console_colors and sys.stderr.isatty()
    console_handler.setFormatter(
        LevelColorFormatter(config.format, config.date_format, use_colors=use_colors)
    )
    root_logger.addHandler(console_handler)

    if config.file_path:
        Path(config.file_path).parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.handlers.RotatingFileHandler(
            config.file_path,
            maxBytes=config.file_max_bytes,
            backupCount=config.file_backup_count,
        )
        file_handler.setLevel(config.file_level.upper())
        file_handler.setFormatter(
            LevelColorFormatter(config.format, config.date_format, use_colors=False)
        )
        root_logger.addHandler(file_handler)


def setup_logging_from_args(
    verbose: bool = False,
    debug: bool = False,
    quiet: bool = False,
    colors: bool = True,
    log_file: str | None = None,
) -> LogConfig:
    """
    Setup logging from command-line flags.

    Returns:
        The configuration that was applied
    """
    config = LogConfig(console_colors=colors, file_path=log_file)

    if debug:
        config.console_level = "DEBUG"
    elif verbose:
        config.console_level = "INFO"
    elif quiet:
        config.console_level = "ERROR"

    setup_logging(config)
    return config


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger for a component.

    Args:
        name: Component name (will be prefixed with scfg)
    """
    if name == ROOT_LOGGER or name.startswith(f"{ROOT_LOGGER}."):
        return logging.getLogger(name)
    return logging.getLogger(f"{ROOT_LOGGER}.{name}")
