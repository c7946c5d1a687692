"""
Logging configuration for the server and the CLI.

stdout carries the language server protocol stream, so log records always
go to stderr and optionally to a file.
"""

import logging
import sys
from pathlib import Path
from typing import List, Optional, TextIO, Union

from config.defaults import DEFAULT_SETTINGS

LOG_FORMAT = DEFAULT_SETTINGS["logging"]["format"]
DEFAULT_LEVEL = DEFAULT_SETTINGS["logging"]["level"]


def setup_logging(
    level: str = DEFAULT_LEVEL,
    log_file: Optional[Union[str, Path]] = None,
    stream: Optional[TextIO] = None
) -> None:
    """
    Configure root logging.

    Args:
        level: Level name such as "DEBUG" or "info"
        log_file: Optional file receiving the same records
        stream: Console stream, stderr by default
    """
    numeric_level = getattr(logging, level.upper(), None)
    if not isinstance(numeric_level, int):
        raise ValueError(f"Unknown log level: {level}")

    handlers: List[logging.Handler] = [logging.StreamHandler(stream or sys.stderr)]
    if log_file:
        log_path = Path(log_file).expanduser()
        log_path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_path, encoding="utf-8"))

    logging.basicConfig(level=numeric_level, format=LOG_FORMAT, handlers=handlers, force=True)
