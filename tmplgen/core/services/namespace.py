"""
Namespace derivation — turn a file's folder into a dotted identifier.

    Views/Home/Index.tmpl           → Views.Home
    2019/my-reports/Summary.tmpl    → _2019.my_reports
    (root_namespace="App")          → App.Views.Home

Rules:
    - An explicit override is returned verbatim.
    - A file at the project root gets the root namespace as-is (may be None).
    - Separators become ``.``; anything that is not a Unicode letter or
      decimal digit becomes ``_``.
    - A segment starting with a digit gets a ``_`` prefix.
    - Empty segments (``a//b``) are dropped, so ``a//b`` → ``a.b``.
"""

from __future__ import annotations

import os

from tmplgen.core.services.paths import SEPARATORS


def derive_namespace(
    explicit_override: str | None,
    relative_path: str,
    root_namespace: str | None = None,
) -> str | None:
    """Compute the namespace for a template at ``relative_path``.

    Args:
        explicit_override: Caller-supplied namespace; wins when non-empty.
        relative_path: Project-relative path of the template file.
        root_namespace: Optional prefix for every derived namespace.

    Returns:
        The dotted namespace, or ``root_namespace`` unchanged for files
        that sit directly in the project root.
    """
    if explicit_override:
        return explicit_override

    directory = os.path.dirname(relative_path).strip(SEPARATORS)
    if not directory:
        return root_namespace

    namespace = ".".join(
        _identifier(segment)
        for segment in _split_segments(directory)
    )

    if root_namespace:
        namespace = f"{root_namespace}.{namespace}"
    return namespace


def _split_segments(directory: str) -> list[str]:
    segments: list[str] = []
    current: list[str] = []
    for char in directory:
        if char in SEPARATORS:
            if current:
                segments.append("".join(current))
            current = []
        else:
            current.append(char)
    if current:
        segments.append("".join(current))
    return segments


def _identifier(segment: str) -> str:
    chars = [c if _is_letter_or_digit(c) else "_" for c in segment]
    if chars[0].isdecimal():
        chars.insert(0, "_")
    return "".join(chars)


def _is_letter_or_digit(char: str) -> bool:
    """Unicode letter (L*) or decimal digit (Nd)."""
    return char.isalpha() or char.isdecimal()
