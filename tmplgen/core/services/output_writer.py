"""
Output writer — byte layout and whole-file writes for generated code.

Generated files are always UTF-8 with a byte-order mark. Downstream
tools sniff the BOM, so the layout is fixed: ``EF BB BF`` followed by
the UTF-8 body.

Writes go to a temp file in the target directory which then replaces
the target, so a reader never sees a half-written file.
"""

from __future__ import annotations

import codecs
import logging
from pathlib import Path

logger = logging.getLogger(__name__)


def encode(text: str) -> bytes:
    """Encode generated text as BOM + UTF-8."""
    return codecs.BOM_UTF8 + text.encode("utf-8")


def decode(data: bytes) -> str:
    """Decode bytes written by :func:`encode`."""
    if data.startswith(codecs.BOM_UTF8):
        data = data[len(codecs.BOM_UTF8):]
    return data.decode("utf-8")


def ensure_directory(file_path: str | Path) -> None:
    """Create the parent directory of ``file_path`` if it is missing."""
    Path(file_path).parent.mkdir(parents=True, exist_ok=True)


def write(path: str | Path, data: bytes) -> None:
    """Replace ``path`` with ``data`` in full.

    Args:
        path: Target file. Parent directories are created.
        data: Complete file content.
    """
    target = Path(path)
    ensure_directory(target)

    tmp = target.with_name(f".{target.name}.tmp")
    try:
        tmp.write_bytes(data)
        tmp.replace(target)
    except Exception:
        tmp.unlink(missing_ok=True)
        raise

    logger.debug("Wrote %d bytes to %s", len(data), target)


def write_text(path: str | Path, text: str) -> bytes:
    """Encode ``text`` and write it to ``path``. Returns the bytes written."""
    data = encode(text)
    write(path, data)
    return data
