"""Structured logging for levelforge.

Every module logs snake_case events with key-value context through a
structlog bound logger; events are rendered by stdlib logging handlers:

- Console: rich handler on stderr. ``-v`` shows INFO, ``-vv`` shows DEBUG
  with source paths and traceback locals.
- File: with ``--log DIR`` every event, at any level, is appended to
  ``DIR/debug.jsonl`` as one JSON object per line.
"""

from __future__ import annotations

import json
import logging
from typing import TYPE_CHECKING, Any

import structlog
from rich.console import Console
from rich.logging import RichHandler

if TYPE_CHECKING:
    from pathlib import Path

    from structlog.typing import Processor

JSONL_FILENAME = "debug.jsonl"

_VERBOSITY_LEVELS = (logging.WARNING, logging.INFO, logging.DEBUG)

# Module-level state
_configured = False
_file_handler: logging.FileHandler | None = None


class JSONLFileHandler(logging.FileHandler):
    """Append each record as one JSON line.

    Records produced by structlog carry the event dict in ``record.msg``;
    its keys become top-level fields next to ``timestamp``, ``level``,
    ``logger`` and ``message`` (the event name). Plain stdlib records only
    get the formatted message.
    """

    def _entry(self, record: logging.LogRecord) -> dict[str, Any]:
        if not isinstance(record.msg, dict):
            return {
                "timestamp": self._fallback_timestamp(record),
                "level": record.levelname,
                "logger": record.name,
                "message": record.getMessage(),
            }

        event = dict(record.msg)
        event.pop("level", None)
        entry: dict[str, Any] = {
            "timestamp": event.pop("timestamp", None) or self._fallback_timestamp(record),
            "level": record.levelname,
            "logger": record.name,
            "message": event.pop("event", ""),
        }
        entry.update(event)
        return entry

    @staticmethod
    def _fallback_timestamp(record: logging.LogRecord) -> str:
        return logging.Formatter().formatTime(record, "%Y-%m-%dT%H:%M:%S")

    def emit(self, record: logging.LogRecord) -> None:
        # Closed by close_file_logging() while still attached to the root logger
        if self.stream is None:
            return
        try:
            self.stream.write(json.dumps(self._entry(record), default=str) + "\n")
            self.stream.flush()
        except Exception:
            self.handleError(record)


def _console_handler(verbosity: int) -> RichHandler:
    level = _VERBOSITY_LEVELS[min(max(verbosity, 0), len(_VERBOSITY_LEVELS) - 1)]
    return RichHandler(
        console=Console(stderr=True),
        level=level,
        rich_tracebacks=True,
        tracebacks_show_locals=verbosity >= 2,
        show_time=verbosity >= 1,
        show_path=verbosity >= 2,
        markup=False,
    )


def _open_file_handler(log_dir: Path) -> JSONLFileHandler:
    log_dir.mkdir(parents=True, exist_ok=True)
    handler = JSONLFileHandler(str(log_dir / JSONL_FILENAME), mode="a", encoding="utf-8")
    handler.setLevel(logging.DEBUG)
    return handler


def configure_logging(
    verbosity: int = 0,
    log_to_file: bool = False,
    log_dir: Path | None = None,
) -> None:
    """Configure console and file logging.

    Safe to call repeatedly; a previously opened log file is closed first.

    Args:
        verbosity: 0=WARNING (default), 1=INFO, 2+=DEBUG on the console.
        log_to_file: Also write every event to ``log_dir/debug.jsonl``.
        log_dir: Directory for the JSONL file. Required if log_to_file=True.

    Raises:
        ValueError: If log_to_file=True but log_dir is not provided.
    """
    global _configured, _file_handler

    if log_to_file and log_dir is None:
        raise ValueError("log_dir is required when log_to_file=True")

    close_file_logging()

    handlers: list[logging.Handler] = [_console_handler(verbosity)]
    if log_to_file and log_dir is not None:
        _file_handler = _open_file_handler(log_dir)
        handlers.append(_file_handler)

    # Root stays open to DEBUG whenever a handler wants more than WARNING;
    # each handler applies its own threshold.
    root_level = logging.DEBUG if (verbosity > 0 or log_to_file) else logging.WARNING
    logging.basicConfig(level=root_level, format="%(message)s", handlers=handlers, force=True)

    processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
    ]
    structlog.configure(
        processors=processors,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.make_filtering_bound_logger(root_level),
        cache_logger_on_first_use=True,
    )

    _configured = True


def get_logger(name: str | None = None) -> structlog.typing.FilteringBoundLogger:
    """Get a structured logger, configuring defaults on first use.

    Args:
        name: Logger name (typically __name__).
    """
    if not _configured:
        configure_logging()

    logger: structlog.typing.FilteringBoundLogger = structlog.get_logger(name)
    return logger


def close_file_logging() -> None:
    """Close the JSONL file handler, if one is open."""
    global _file_handler
    if _file_handler is not None:
        _file_handler.close()
        _file_handler = None
