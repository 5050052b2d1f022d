"""
Staleness check — decide whether a template must be regenerated.

Purely timestamp based: the output is stale when it is missing or
older than its template. Content is never hashed, so a copy that
preserves timestamps (or clock skew) can hide a change.
"""

from __future__ import annotations

import logging
from pathlib import Path

logger = logging.getLogger(__name__)


def needs_regeneration(input_path: str | Path, output_path: str | Path) -> bool:
    """Return True if ``output_path`` is missing or older than ``input_path``."""
    output = Path(output_path)
    if not output.exists():
        return True

    input_mtime = Path(input_path).stat().st_mtime_ns
    output_mtime = output.stat().st_mtime_ns
    stale = input_mtime > output_mtime
    logger.debug(
        "%s: input mtime %d, output mtime %d → %s",
        input_path,
        input_mtime,
        output_mtime,
        "stale" if stale else "up to date",
    )
    return stale
