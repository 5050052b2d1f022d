"""
Generator configuration model — the schema of tmplgen.yml.
"""

from __future__ import annotations

from pydantic import BaseModel, Field, field_validator


class InputRef(BaseModel):
    """An input entry: a file path or glob, with an optional namespace."""

    path: str
    namespace: str | None = None


class GeneratorConfig(BaseModel):
    """Root configuration, loaded from tmplgen.yml.

    Relative paths are resolved against the directory holding the
    config file by the loader, not here.
    """

    version: int = 1

    project_root: str = "."
    cache_directory: str = "obj/tmplgen"
    root_namespace: str | None = None
    template_extension: str = ".tmpl"
    generated_marker: str = ".generated"
    backend: str = "python"
    continue_on_error: bool = False

    inputs: list[InputRef] = Field(default_factory=list)

    @field_validator("inputs", mode="before")
    @classmethod
    def _coerce_inputs(cls, value: object) -> object:
        # Plain strings are shorthand for {path: ...}
        if isinstance(value, list):
            return [{"path": v} if isinstance(v, str) else v for v in value]
        return value

    @field_validator("template_extension", "generated_marker")
    @classmethod
    def _non_empty(cls, value: str) -> str:
        if not value:
            raise ValueError("must not be empty")
        return value
