"""
Python template backend — compile ``string.Template`` files to modules.

Each template becomes an importable module:

    NAMESPACE     — the derived namespace of the template
    SOURCE        — the template text
    PLACEHOLDERS  — placeholder names, in order of first use
    render(**ctx) — substitute the placeholders

Malformed placeholders (``$`` not followed by an identifier, ``{`` or
another ``$``) are reported as structured errors with line and column.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from string import Template

from tmplgen.adapters.base import BackendContext, GenerationBackend, Generator
from tmplgen.core.models.generation import GenerationError
from tmplgen.core.services.paths import SEPARATORS

logger = logging.getLogger(__name__)

_MODULE_TEMPLATE = '''\
# <auto-generated>
#     Generated by tmplgen from {source}.
#     Changes to this file are lost when the template is regenerated.
# </auto-generated>
from string import Template

NAMESPACE = {namespace!r}
SOURCE = {text!r}
PLACEHOLDERS = {placeholders!r}

_TEMPLATE = Template(SOURCE)


def render(**context):
    """Render the template. Missing placeholders raise KeyError."""
    return _TEMPLATE.substitute(context)
'''


def scan_placeholders(text: str) -> tuple[list[str], list[GenerationError]]:
    """Return placeholder names and errors for invalid ``$`` sequences."""
    names: list[str] = []
    errors: list[GenerationError] = []

    for match in Template.pattern.finditer(text):
        name = match.group("named") or match.group("braced")
        if name:
            if name not in names:
                names.append(name)
            continue
        if match.group("invalid") is not None:
            start = match.start()
            line = text.count("\n", 0, start) + 1
            column = start - text.rfind("\n", 0, start)
            errors.append(
                GenerationError(
                    message="Invalid placeholder: '$' must be followed by an identifier, '{' or '$'",
                    code="TG001",
                    line=line,
                    column=column,
                )
            )

    return names, errors


class PythonTemplateGenerator(Generator):
    def generate(self, errors: list[GenerationError]) -> str:
        text = Path(self.absolute_path).read_text(encoding="utf-8-sig")
        placeholders, problems = scan_placeholders(text)
        errors.extend(problems)

        source = self.relative_path.lstrip(SEPARATORS).replace(os.sep, "/")
        return _MODULE_TEMPLATE.format(
            source=source,
            namespace=self.namespace,
            text=text,
            placeholders=tuple(placeholders),
        )


class PythonTemplateContext(BackendContext):
    def __init__(self, project_root: str):
        super().__init__(project_root)
        self.generators_created = 0

    def create_generator(
        self,
        absolute_path: str,
        relative_path: str,
        namespace: str | None,
    ) -> Generator:
        self.generators_created += 1
        return PythonTemplateGenerator(absolute_path, relative_path, namespace)

    def close(self) -> None:
        if not self.closed:
            logger.debug(
                "Closing python template context for %s (%d generator(s))",
                self.project_root,
                self.generators_created,
            )
        super().close()


class PythonTemplateBackend(GenerationBackend):
    """Generates one Python module per ``string.Template`` file."""

    @property
    def name(self) -> str:
        return "python"

    def output_extension(self, file_name: str) -> str:
        return ".py"

    def create_context(self, project_root: str) -> BackendContext:
        return PythonTemplateContext(project_root)
