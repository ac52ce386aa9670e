"""Logging configuration using Loguru."""

import sys
from pathlib import Path

from loguru import logger

# Records logged without get_logger() fall back to this module name
DEFAULT_MODULE = "quicknotes"

CONSOLE_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | "
    "<cyan>{extra[module]}</cyan> - <level>{message}</level>"
)
FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {extra[module]}:{function}:{line} - {message}"


def setup_logging(
    level: str = "INFO",
    log_to_file: bool = False,
    log_dir: str = "logs",
    file_rotation: str = "10 MB",
    file_retention: str = "7 days",
    compression: str = "zip",
    serialize: bool = True,
) -> None:
    """
    Configure Loguru sinks for the notes service.

    Console output is always on. With log_to_file, records are also written
    to log_dir/quicknotes_<date>.log, serialized as JSON unless serialize is
    False. Calling it again replaces the previous sinks.
    """
    logger.remove()
    logger.configure(extra={"module": DEFAULT_MODULE})

    logger.add(
        sys.stderr,
        level=level,
        format=CONSOLE_FORMAT,
        colorize=True,
        serialize=False,
    )

    if log_to_file:
        log_path = Path(log_dir)
        log_path.mkdir(parents=True, exist_ok=True)

        logger.add(
            log_path / "quicknotes_{time:YYYY-MM-DD}.log",
            level=level,
            format=FILE_FORMAT,
            rotation=file_rotation,
            retention=file_retention,
            compression=compression,
            serialize=serialize,
            enqueue=True,
        )

    logger.bind(module=__name__).debug(
        "Logging configured (level={}, file={})", level, log_to_file
    )


def get_logger(name: str):
    """Get a logger bound to a module name, shown in every record."""
    return logger.bind(module=name)
