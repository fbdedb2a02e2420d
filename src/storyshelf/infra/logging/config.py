from __future__ import annotations

"""
Logging Configuration Models.

The CLI is quiet by default: only warnings and errors reach stderr, so the
stdout of 'list --json' or 'show' stays machine readable. '--debug' lowers
the level and '--log-file' adds a rotating file with timestamps. Record
formats are fixed for the whole tool.
"""

import logging
from dataclasses import dataclass
from typing import Dict, Optional

_LEVEL_MAP: Dict[str, int] = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "WARN": logging.WARNING,
    "ERROR": logging.ERROR,
    "CRITICAL": logging.CRITICAL,
}

CONSOLE_FORMAT = "storyshelf %(levelname)s [%(name)s] %(message)s"
FILE_FORMAT = "%(asctime)s %(levelname)-8s [%(name)s] %(message)s"
DATE_FORMAT = "%Y-%m-%dT%H:%M:%S"

DEFAULT_LEVEL = "WARNING"
DEBUG_LEVEL = "DEBUG"


@dataclass(frozen=True)
class LoggingConfig:
    """
    Immutable settings for the logging subsystem initialization.

    Attributes:
        level: Minimum severity level to capture.
        console: Flag to enable stderr stream output.
        log_file: Optional path of the rotating log file.
        max_bytes: Size of the log file before it rotates.
        backup_count: Rotated log files to keep.
    """
    level: str = DEFAULT_LEVEL
    console: bool = True
    log_file: Optional[str] = None

    max_bytes: int = 512 * 1024
    backup_count: int = 2

    @classmethod
    def for_cli(cls, debug: bool = False, log_file: Optional[str] = None) -> "LoggingConfig":
        """Settings derived from the global '--debug' and '--log-file' flags."""
        return cls(level=DEBUG_LEVEL if debug else DEFAULT_LEVEL, console=True, log_file=log_file)
