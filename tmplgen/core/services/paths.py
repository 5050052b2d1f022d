"""
Path mapping — project-relative paths and generation-cache output paths.

Pure string functions: no filesystem access, no hidden state. The
relative path keeps its leading separator (``/Views/Home/Index.tmpl``)
because the namespace deriver and the backends both expect it that way.
"""

from __future__ import annotations

import os

SEPARATORS = os.sep + (os.altsep or "")
"""Characters treated as directory separators on this platform."""


def project_relative_path(absolute_path: str, project_root: str) -> str:
    """Strip the project root prefix from an absolute path.

    The comparison ignores case. A path outside the project root is
    returned unchanged.
    """
    prefix = absolute_path[: len(project_root)]
    if prefix.lower() == project_root.lower():
        return absolute_path[len(project_root):]
    return absolute_path


def output_path(
    relative_path: str,
    cache_directory: str,
    extension: str,
    template_extension: str = ".tmpl",
    generated_marker: str = ".generated",
) -> str:
    """Compute where the generated file for ``relative_path`` lives.

    Example:
        >>> output_path("/Views/Home/Index.tmpl", "/proj/obj/gen", ".py")
        '/proj/obj/gen/Views/Home/Index.generated.py'
    """
    # A drive or leading separator would make os.path.join drop the cache dir
    _drive, tail = os.path.splitdrive(relative_path)
    tail = tail.replace(template_extension, generated_marker)

    # ".." and "." never leave the cache directory: they are dropped
    parts = [p for p in _split(tail) if p not in ("", ".", "..")]
    if not parts:
        raise ValueError(f"No file name left in relative path {relative_path!r}")
    return os.path.join(cache_directory, *parts) + extension


def _split(path: str) -> list[str]:
    for sep in SEPARATORS[1:]:
        path = path.replace(sep, SEPARATORS[0])
    return path.split(SEPARATORS[0])
