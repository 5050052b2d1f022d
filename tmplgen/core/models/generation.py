"""
Generation models — the per-file and per-batch contract.

Inputs describe what to generate, outcomes describe what the backend
produced for one file, and output descriptors describe what landed on
disk. The session never raises across the batch boundary: everything
that happens to a file is captured in these models.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


class InputDescriptor(BaseModel):
    """One template file supplied to a batch.

    ``namespace`` is an explicit override; when set it wins over the
    namespace derived from the file's folder.
    """

    model_config = ConfigDict(frozen=True)

    path: str                       # absolute path of the template
    namespace: str | None = None    # explicit namespace override


class ProjectContext(BaseModel):
    """Batch-wide settings, read-only once the batch starts."""

    model_config = ConfigDict(frozen=True)

    project_root: str = ""          # empty = current working directory
    cache_directory: str
    root_namespace: str | None = None
    template_extension: str = ".tmpl"
    generated_marker: str = ".generated"


class OutputDescriptor(BaseModel):
    """A generated file produced by a batch.

    Created once per successfully regenerated input and never
    mutated afterwards.
    """

    model_config = ConfigDict(frozen=True)

    output_path: str
    auto_generated: Literal[True] = True
    dependent_upon: str             # file name of the template
    source_path: str = ""
    namespace: str | None = None


class GenerationError(BaseModel):
    """A structured error reported by a backend for one file."""

    message: str
    code: str = ""
    line: int | None = None
    column: int | None = None

    def __str__(self) -> str:
        if self.line is not None:
            col = f":{self.column}" if self.column is not None else ""
            return f"({self.line}{col}) {self.message}"
        return self.message


class GenerationOutcome(BaseModel):
    """Result of invoking the backend for one input: text or errors."""

    status: Literal["ok", "failed"] = "ok"
    text: str = ""
    errors: list[GenerationError] = Field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.status == "ok"

    @property
    def failed(self) -> bool:
        return self.status == "failed"

    @classmethod
    def success(cls, text: str) -> GenerationOutcome:
        """Create a success outcome."""
        return cls(status="ok", text=text)

    @classmethod
    def failure(cls, errors: list[GenerationError]) -> GenerationOutcome:
        """Create a failure outcome."""
        return cls(status="failed", errors=list(errors))


class FileResult(BaseModel):
    """What happened to one input during a batch."""

    source_path: str
    relative_path: str = ""
    output_path: str = ""
    namespace: str | None = None
    status: Literal["ok", "skipped", "failed"] = "ok"
    errors: list[GenerationError] = Field(default_factory=list)
