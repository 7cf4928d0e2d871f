"""
Logging for resultpager.

Everything logs under the ``resultpager`` logger namespace. Records about a
call carry the call id (and, where it matters, state, page and buffer) as
extra attributes; the console handler shows the call id as a prefix and the
JSON file formatter writes those attributes as fields.
"""

from __future__ import annotations

import logging
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import TYPE_CHECKING, Any

import orjson
from rich.text import Text

if TYPE_CHECKING:
    from rich.console import Console

ROOT_LOGGER = "resultpager"

# Extra record attributes written to JSON log lines
CONTEXT_FIELDS = ("call_id", "state", "page", "bufnr")

PLAIN_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"

LEVEL_STYLES = {
    logging.DEBUG: "dim",
    logging.INFO: "default",
    logging.WARNING: "yellow",
    logging.ERROR: "red",
    logging.CRITICAL: "bold red",
}


def _level(name: str) -> int:
    return getattr(logging, name.upper())


# =============================================================================
# Formatters and Handlers
# =============================================================================


class JSONFormatter(logging.Formatter):
    """One JSON object per record, timestamped when the record was created."""

    def format(self, record: logging.LogRecord) -> str:
        data: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        data.update({key: getattr(record, key) for key in CONTEXT_FIELDS if hasattr(record, key)})
        if record.exc_info:
            data["exception"] = self.formatException(record.exc_info)
        return orjson.dumps(data, default=str).decode("utf-8")


class RichConsoleHandler(logging.Handler):
    """Writes records to a Rich console, colored by level.

    Messages are printed as ``Text`` so brackets in them (row ranges, for
    one) are never read as markup.
    """

    def __init__(self, console: "Console | None" = None, level: int = logging.INFO):
        super().__init__(level)
        if console is None:
            from rich.console import Console
            console = Console(stderr=True)
        self.console = console

    def emit(self, record: logging.LogRecord) -> None:
        try:
            line = Text()
            call_id = getattr(record, "call_id", None)
            if call_id:
                line.append(f"[{call_id}] ", style="cyan")
            line.append(self.format(record), style=LEVEL_STYLES.get(record.levelno, "default"))
            self.console.print(line, highlight=False)
            if record.exc_info:
                self.console.print_exception()
        except Exception:
            self.handleError(record)


def _console_handler(level: int, rich_console: bool) -> logging.Handler:
    handler: logging.Handler
    if rich_console:
        handler = RichConsoleHandler(level=level)
        handler.setFormatter(logging.Formatter("%(message)s"))
    else:
        handler = logging.StreamHandler(sys.stderr)
        handler.setLevel(level)
        handler.setFormatter(logging.Formatter(PLAIN_FORMAT))
    return handler


def _file_handler(log_file: Path | str, json_format: bool) -> logging.Handler:
    path = Path(log_file)
    path.parent.mkdir(parents=True, exist_ok=True)

    handler = logging.FileHandler(path, encoding="utf-8")
    handler.setLevel(logging.DEBUG)  # file gets everything the logger lets through
    if json_format:
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(logging.Formatter(PLAIN_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
    return handler


def setup_logging(
    level: str = "INFO",
    log_file: Path | str | None = None,
    json_format: bool = True,
    rich_console: bool = True,
) -> logging.Logger:
    """Configure the ``resultpager`` logger, replacing earlier handlers.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR)
        log_file: Also log to this file when given
        json_format: Write the file as JSON lines
        rich_console: Use Rich for console output

    Returns:
        The ``resultpager`` logger
    """
    logger = logging.getLogger(ROOT_LOGGER)
    logger.setLevel(_level(level))
    logger.handlers.clear()

    logger.addHandler(_console_handler(_level(level), rich_console))
    if log_file:
        logger.addHandler(_file_handler(log_file, json_format))
    return logger


def get_logger(name: str | None = None) -> logging.Logger:
    """Logger ``resultpager.<name>``, or the package logger without a name."""
    return logging.getLogger(f"{ROOT_LOGGER}.{name}" if name else ROOT_LOGGER)


# =============================================================================
# Call Context
# =============================================================================


class ContextualLogger(logging.LoggerAdapter):
    """Adds the tracked call id to every record.

    Per-call ``extra`` values are merged over the bound context.
    """

    def __init__(self, logger: logging.Logger, call_id: str | None = None):
        super().__init__(logger, {"call_id": call_id} if call_id else {})

    @property
    def call_id(self) -> str | None:
        return self.extra.get("call_id")

    def process(self, msg: str, kwargs: dict[str, Any]) -> tuple[str, dict[str, Any]]:
        kwargs["extra"] = {**self.extra, **kwargs.get("extra", {})}
        return msg, kwargs

    def with_context(self, call_id: str | None = None) -> "ContextualLogger":
        """Same logger bound to another call."""
        return ContextualLogger(self.logger, call_id=call_id or self.call_id)


def get_contextual_logger(name: str | None = None, call_id: str | None = None) -> ContextualLogger:
    return ContextualLogger(get_logger(name), call_id=call_id)
