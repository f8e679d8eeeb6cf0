"""
Logging configuration — central setup for the CLI entrypoint.

Called once at startup by main.py.  Every module that does
``logger = logging.getLogger(__name__)`` inherits this config.

Levels are resolved in precedence order:
    CLI flag  >  METABUILD_LOG_LEVEL env var  >  WARNING (default)

Optional file output via METABUILD_LOG_FILE / METABUILD_LOG_FILE_LEVEL.
"""

from __future__ import annotations

import logging
import os
import sys

LOG_LEVEL_ENV = "METABUILD_LOG_LEVEL"
LOG_FILE_ENV = "METABUILD_LOG_FILE"
LOG_FILE_LEVEL_ENV = "METABUILD_LOG_FILE_LEVEL"

# (highest console level, format, datefmt), most verbose first
_CONSOLE_FORMATS = (
    (logging.DEBUG, "%(asctime)s %(levelname)-5s %(name)s:%(lineno)d — %(message)s", "%H:%M:%S"),
    (logging.INFO, "%(asctime)s [%(name)s] %(message)s", "%H:%M:%S"),
)
_FMT_MINIMAL = "%(message)s"

# File output always carries file:line and a full date
_FMT_FILE = "%(asctime)s %(levelname)-5s %(name)s:%(lineno)d — %(message)s"
_DATEFMT_FILE = "%Y-%m-%d %H:%M:%S"

# Libraries that get chatty below WARNING
_NOISY_LOGGERS = ("pydantic", "yaml")


def resolve_level(debug: bool = False, verbose: bool = False, quiet: bool = False) -> str:
    """Pick the console level from CLI flags, falling back to the env var."""
    if debug:
        return "DEBUG"
    if verbose:
        return "INFO"
    if quiet:
        return "ERROR"
    return os.environ.get(LOG_LEVEL_ENV, "WARNING")


def setup_logging_from_env(level: str, quiet_third_party: bool = True) -> None:
    """``setup_logging`` with file output taken from the environment."""
    setup_logging(
        level=level,
        log_file=os.environ.get(LOG_FILE_ENV),
        log_file_level=os.environ.get(LOG_FILE_LEVEL_ENV),
        quiet_third_party=quiet_third_party,
    )


def _console_formatter(numeric_level: int) -> logging.Formatter:
    for threshold, fmt, datefmt in _CONSOLE_FORMATS:
        if numeric_level <= threshold:
            return logging.Formatter(fmt, datefmt=datefmt)
    return logging.Formatter(_FMT_MINIMAL)


def _make_handler(handler: logging.Handler, level: int, formatter: logging.Formatter) -> logging.Handler:
    handler.setLevel(level)
    handler.setFormatter(formatter)
    return handler


def setup_logging(
    level: str = "WARNING",
    log_file: str | None = None,
    log_file_level: str | None = None,
    quiet_third_party: bool = True,
) -> None:
    """Replace the root logger's handlers with a stderr handler and,
    optionally, a file handler.

    The root level is the lower of the two handler levels, so a
    DEBUG log file still receives records while the console stays at
    WARNING. Noisy third-party loggers are pinned to WARNING unless the
    console itself is at DEBUG.
    """
    console_level = _parse_level(level)
    handlers = [
        _make_handler(logging.StreamHandler(sys.stderr), console_level, _console_formatter(console_level)),
    ]

    if log_file:
        file_level = _parse_level(log_file_level) if log_file_level else console_level
        handlers.append(_make_handler(
            logging.FileHandler(log_file, encoding="utf-8"),
            file_level,
            logging.Formatter(_FMT_FILE, datefmt=_DATEFMT_FILE),
        ))

    root = logging.getLogger()
    root.handlers.clear()
    for handler in handlers:
        root.addHandler(handler)
    root.setLevel(min(h.level for h in handlers))

    if quiet_third_party and console_level > logging.DEBUG:
        for name in _NOISY_LOGGERS:
            logging.getLogger(name).setLevel(logging.WARNING)

    logging.raiseExceptions = False


def _parse_level(level: str | None) -> int:
    """Level name to numeric level; unknown names mean WARNING."""
    numeric = logging.getLevelName(level.upper()) if level else None
    return numeric if isinstance(numeric, int) else logging.WARNING
