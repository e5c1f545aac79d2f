"""Logging configuration for RepoKit.

Every module logs through ``logging.getLogger(__name__)`` below the
``repokit`` logger; this module only decides where those records go.
"""

import logging
from pathlib import Path
from typing import Optional, Union

from rich.console import Console
from rich.logging import RichHandler

ROOT_LOGGER = "repokit"

CONSOLE_FORMAT = "%(message)s"
CONSOLE_DATE_FORMAT = "[%X]"
FILE_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
FILE_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def _level_number(level: Union[int, str]) -> int:
    if isinstance(level, int):
        return level
    number = logging.getLevelName(level.upper())
    if not isinstance(number, int):
        raise ValueError(f"Unknown log level: {level}")
    return number


def _console_handler(level: int, verbose: bool) -> logging.Handler:
    # Git output can contain square brackets, so markup stays off.
    handler = RichHandler(
        console=Console(stderr=True),
        show_time=True,
        show_path=verbose,
        rich_tracebacks=True,
        tracebacks_show_locals=verbose,
        markup=False,
    )
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(CONSOLE_FORMAT, datefmt=CONSOLE_DATE_FORMAT))
    return handler


def _file_handler(log_file: Path) -> logging.Handler:
    log_file.parent.mkdir(parents=True, exist_ok=True)
    handler = logging.FileHandler(log_file, encoding="utf-8")
    handler.setLevel(logging.DEBUG)
    handler.setFormatter(logging.Formatter(FILE_FORMAT, datefmt=FILE_DATE_FORMAT))
    return handler


def setup_logging(
    level: Union[int, str] = logging.WARNING,
    log_file: Optional[Path] = None,
    verbose: bool = False,
) -> logging.Logger:
    """Route RepoKit log records to stderr and, optionally, a file.

    Args:
        level: Console level, as a number or a name such as "INFO"
        log_file: File that receives every record down to DEBUG
        verbose: Force DEBUG on the console and show source locations

    Returns:
        The ``repokit`` logger
    """
    console_level = logging.DEBUG if verbose else _level_number(level)

    logger = logging.getLogger(ROOT_LOGGER)
    logger.handlers.clear()
    logger.addHandler(_console_handler(console_level, verbose))

    if log_file:
        logger.addHandler(_file_handler(log_file))
        logger.setLevel(logging.DEBUG)
    else:
        logger.setLevel(console_level)

    return logger


class LogCapture:
    """Context manager collecting records from a RepoKit logger."""

    def __init__(self, logger_name: str = ROOT_LOGGER, level: int = logging.DEBUG):
        self.logger_name = logger_name
        self.level = level
        self.records: list[logging.LogRecord] = []
        self._handler: Optional[logging.Handler] = None
        self._previous_level: Optional[int] = None

    def __enter__(self) -> "LogCapture":
        logger = logging.getLogger(self.logger_name)
        self._handler = _ListHandler(self.records)
        self._previous_level = logger.level
        logger.setLevel(self.level)
        logger.addHandler(self._handler)
        return self

    def __exit__(self, *args) -> None:
        logger = logging.getLogger(self.logger_name)
        if self._handler:
            logger.removeHandler(self._handler)
        if self._previous_level is not None:
            logger.setLevel(self._previous_level)

    @property
    def messages(self) -> list[str]:
        return [record.getMessage() for record in self.records]

    def has_message(self, substring: str) -> bool:
        """Check if any captured message contains the substring."""
        return any(substring in msg for msg in self.messages)


class _ListHandler(logging.Handler):
    def __init__(self, records: list[logging.LogRecord]):
        super().__init__()
        self.records = records

    def emit(self, record: logging.LogRecord) -> None:
        self.records.append(record)
