"""
Logging setup with optional contact redaction.

In redaction mode every record that reaches the package handler, and every
line printed through ``SafeConsole``, has email and phone substrings
replaced before it is written anywhere.
"""

import logging
from typing import Any, Optional
from rich.console import Console
from rich.logging import RichHandler
from .contacts import redact

PACKAGE_LOGGER = "loadboard"


class RedactingFilter(logging.Filter):
    """Rewrites the formatted message and exception text of each record."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.msg = redact(record.getMessage())
        record.args = None
        if record.exc_info and not record.exc_text:
            record.exc_text = logging.Formatter().formatException(record.exc_info)
        if record.exc_text:
            record.exc_text = redact(record.exc_text)
        return True


def configure_logging(
    level: str = "INFO",
    redact_output: bool = False,
    console: Optional[Console] = None,
) -> logging.Logger:
    """Attach a rich handler to the package logger, replacing any earlier one."""
    logger = logging.getLogger(PACKAGE_LOGGER)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)

    handler = RichHandler(console=console or Console(stderr=True), show_path=False)
    handler.setFormatter(logging.Formatter("%(message)s"))
    if redact_output:
        handler.addFilter(RedactingFilter())

    logger.addHandler(handler)
    logger.setLevel(level.upper())
    logger.propagate = False
    return logger


class SafeConsole:
    """rich Console wrapper that redacts plain-text output when asked to."""

    def __init__(self, console: Optional[Console] = None, redact_output: bool = False):
        self.console = console or Console()
        self.redact_output = redact_output

    def clean(self, text: Optional[str]) -> Optional[str]:
        return redact(text) if self.redact_output else text

    def print(self, *objects: Any, **kwargs: Any) -> None:
        objects = tuple(self.clean(obj) if isinstance(obj, str) else obj for obj in objects)
        self.console.print(*objects, **kwargs)
