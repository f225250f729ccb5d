"""
Logging setup for deepresearch.

Console output goes through rich; pass the console that also drives a live
progress display so log lines render above the bar instead of through it.
Run-scoped messages carry their context as a ``[key=value ...]`` prefix.
"""

import logging
from collections.abc import MutableMapping
from pathlib import Path
from typing import Any

from rich.console import Console
from rich.logging import RichHandler

# Chatty client libraries, held at WARNING unless http_debug is set
NOISY_LOGGERS = ("httpx", "httpcore", "anthropic", "tavily")

FILE_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logging(
    level: str = "INFO",
    log_file: Path | None = None,
    console: Console | None = None,
    show_path: bool = False,
    http_debug: bool = False,
) -> logging.Logger:
    """
    Configure the root logger.

    Args:
        level: Log level name (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file: Also append plain-text records to this file
        console: Rich console to log to (stderr when omitted)
        show_path: Show source locations in console records
        http_debug: Let client libraries log at the configured level

    Returns:
        Root logger instance
    """
    numeric_level = logging.getLevelName(level.upper())
    if not isinstance(numeric_level, int):
        numeric_level = logging.INFO

    root_logger = logging.getLogger()
    root_logger.setLevel(numeric_level)
    for handler in list(root_logger.handlers):
        root_logger.removeHandler(handler)
        handler.close()

    rich_handler = RichHandler(
        console=console or Console(stderr=True),
        rich_tracebacks=True,
        show_path=show_path,
        markup=False,
        log_time_format="[%H:%M:%S]",
    )
    rich_handler.setLevel(numeric_level)
    root_logger.addHandler(rich_handler)

    if log_file:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(numeric_level)
        file_handler.setFormatter(logging.Formatter(FILE_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
        root_logger.addHandler(file_handler)

    quiet_level = numeric_level if http_debug else max(numeric_level, logging.WARNING)
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(quiet_level)

    return root_logger


class StructuredLogger(logging.LoggerAdapter):
    """
    Logger that prefixes every message with bound context.

    Usage:
        log = StructuredLogger("deepresearch.orchestrator.core", run_id="a1b2")
        log.bind(area="Market").warning("search failed")
        # Output: [run_id=a1b2 area=Market] search failed
    """

    def __init__(self, name: str, **context: Any):
        super().__init__(logging.getLogger(name), context)

    def process(self, msg: Any, kwargs: MutableMapping[str, Any]) -> tuple[Any, MutableMapping[str, Any]]:
        if not self.extra:
            return msg, kwargs
        prefix = " ".join(f"{k}={v}" for k, v in self.extra.items())
        return f"[{prefix}] {msg}", kwargs

    def bind(self, **context: Any) -> "StructuredLogger":
        """Return a logger with additional context."""
        return StructuredLogger(self.logger.name, **{**self.extra, **context})
