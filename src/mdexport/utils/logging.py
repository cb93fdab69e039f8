"""Structured logging setup for mdexport.

Library modules create their loggers with get_logger(__name__) at import
time. Those loggers are lazy, so a host application can call
configure_logging later and still have every module's events routed to
the JSON log file.
"""

import os
from pathlib import Path
from typing import Any, Optional

import structlog
from structlog._config import BoundLoggerLazyProxy

LOG_LEVEL_ENV = "MDEXPORT_LOG_LEVEL"
DEFAULT_LOG_FILE = Path.home() / ".cache" / "mdexport" / "logs" / "mdexport.log"
VALID_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")


def resolve_level(level: Optional[str] = None) -> str:
    """Explicit level, else MDEXPORT_LOG_LEVEL, else INFO. Unknown names give INFO."""
    value = (level or os.environ.get(LOG_LEVEL_ENV, "INFO")).upper()
    return value if value in VALID_LEVELS else "INFO"


def configure_logging(log_file: Optional[Path] = None, level: Optional[str] = None) -> None:
    """
    Configure structlog for JSON logging to a file.

    Events go to ~/.cache/mdexport/logs/mdexport.log unless log_file is
    given. Each line carries level, ISO timestamp and the emitting module
    under "logger".

    Log levels:
    - DEBUG: Parser block counts, pagination decisions, font fallbacks
    - INFO: Exports written, history commits
    - WARNING: Malformed persisted history, unknown history ids
    - ERROR: Storage write failures

    Args:
        log_file: Destination file; parent directories are created
        level: Minimum level; overrides MDEXPORT_LOG_LEVEL when set

    Example:
        MDEXPORT_LOG_LEVEL=DEBUG python -m your_host_app
        tail -f ~/.cache/mdexport/logs/mdexport.log | jq 'select(.logger == "mdexport.history.store")'
    """
    log_file = log_file or DEFAULT_LOG_FILE
    log_file.parent.mkdir(parents=True, exist_ok=True)

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(resolve_level(level)),
        context_class=dict,
        logger_factory=structlog.WriteLoggerFactory(file=open(log_file, "a")),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> Any:
    """
    Get a lazy structured logger that tags events with `name`.

    Example:
        >>> logger = get_logger(__name__)
        >>> logger.info("export_written", format="html", path="/tmp/export.html")
    """
    # "logger" collides with wrap_logger's first parameter when passed as a
    # keyword, so build the same lazy proxy with the context as a dict.
    return BoundLoggerLazyProxy(None, initial_values={"logger": name})
