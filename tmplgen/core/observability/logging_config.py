"""
Logging configuration for the ``tmplgen`` package logger.

Called once at startup by main.py. Every module logs through
``logging.getLogger(__name__)``, so everything lands under the
``tmplgen`` logger configured here; the root logger is left alone for
whatever host embeds the driver.

Levels are resolved in precedence order:
    CLI flag  >  TMPLGEN_LOG_LEVEL env var  >  WARNING (default)

Optional file output via TMPLGEN_LOG_FILE / TMPLGEN_LOG_FILE_LEVEL.
"""

from __future__ import annotations

import logging
import sys

PACKAGE_LOGGER = "tmplgen"

# Console format per level; anything above INFO prints the bare message
# so build logs show "Generating ... at path ..." lines as-is.
_CONSOLE_FORMATS: dict[int, tuple[str, str | None]] = {
    logging.DEBUG: ("%(asctime)s %(levelname)-5s %(name)s:%(lineno)d  %(message)s", "%H:%M:%S"),
    logging.INFO: ("%(asctime)s %(message)s", "%H:%M:%S"),
}
_FILE_FORMAT = ("%(asctime)s %(levelname)-5s %(name)s  %(message)s", "%Y-%m-%d %H:%M:%S")


def setup_logging(
    level: str = "WARNING",
    log_file: str | None = None,
    log_file_level: str | None = None,
) -> logging.Logger:
    """Configure the ``tmplgen`` logger. Safe to call more than once.

    Args:
        level: Console level name (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        log_file: Optional path to a log file.
        log_file_level: Level for the log file; defaults to ``level``.

    Returns:
        The configured package logger.
    """
    console_level = parse_level(level)
    package_logger = logging.getLogger(PACKAGE_LOGGER)

    for handler in package_logger.handlers[:]:
        package_logger.removeHandler(handler)
        handler.close()

    fmt, datefmt = _CONSOLE_FORMATS.get(console_level, ("%(message)s", None))
    console = logging.StreamHandler(sys.stderr)
    console.setLevel(console_level)
    console.setFormatter(logging.Formatter(fmt, datefmt=datefmt))
    package_logger.addHandler(console)

    effective_level = console_level
    if log_file:
        file_level = parse_level(log_file_level) if log_file_level else console_level
        effective_level = min(effective_level, file_level)

        fh = logging.FileHandler(log_file, encoding="utf-8")
        fh.setLevel(file_level)
        fh.setFormatter(logging.Formatter(*_FILE_FORMAT))
        package_logger.addHandler(fh)

    package_logger.setLevel(effective_level)
    package_logger.propagate = False

    # A closed console stream must not break generation
    logging.raiseExceptions = False
    return package_logger


def parse_level(level: str | None) -> int:
    """Convert a level name to its numeric constant, WARNING if unknown."""
    numeric = getattr(logging, level.upper(), None) if level else None
    return numeric if isinstance(numeric, int) else logging.WARNING
