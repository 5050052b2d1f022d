"""
Generation session — the per-batch orchestration loop.

A session owns one batch run. It acquires a backend context for the
project root, walks the inputs in order, and for each one:

    relative path → output path → namespace → staleness gate
        → generate (errors collected) → write BOM + UTF-8 → descriptor

State machine:

    idle → running → completed | failed

Failure handling:
    - Structured errors from the backend fail the file (nothing is
      written) and the batch. Processing stops after that file unless
      ``continue_on_error`` is set.
    - An exception from the backend aborts the batch immediately.
    - Anything else that goes wrong is caught once at the top level.
      ``run`` never raises for batch problems; it returns a report.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Iterable
from dataclasses import dataclass, field
from enum import Enum

from tmplgen.adapters.base import BackendContext, GenerationBackend, Generator
from tmplgen.core.models.generation import (
    FileResult,
    GenerationError,
    GenerationOutcome,
    InputDescriptor,
    OutputDescriptor,
    ProjectContext,
)
from tmplgen.core.services import output_writer
from tmplgen.core.services.namespace import derive_namespace
from tmplgen.core.services.paths import output_path, project_relative_path
from tmplgen.core.services.staleness import needs_regeneration

logger = logging.getLogger(__name__)


class SessionState(str, Enum):
    IDLE = "idle"
    RUNNING = "running"
    COMPLETED = "completed"
    FAILED = "failed"


@dataclass
class GenerationReport:
    """Result of one batch."""

    success: bool = False
    state: SessionState = SessionState.IDLE
    outputs: list[OutputDescriptor] = field(default_factory=list)
    files: list[FileResult] = field(default_factory=list)
    messages: list[str] = field(default_factory=list)
    error: str | None = None

    @property
    def generated(self) -> int:
        return sum(1 for f in self.files if f.status == "ok")

    @property
    def skipped(self) -> int:
        return sum(1 for f in self.files if f.status == "skipped")

    @property
    def failed(self) -> int:
        return sum(1 for f in self.files if f.status == "failed")

    @property
    def status(self) -> str:
        if self.success:
            return "ok"
        if self.generated > 0:
            return "partial"
        return "failed"

    def to_dict(self) -> dict:
        return {
            "success": self.success,
            "status": self.status,
            "state": self.state.value,
            "generated": self.generated,
            "skipped": self.skipped,
            "failed": self.failed,
            "error": self.error,
            "outputs": [o.model_dump(mode="json") for o in self.outputs],
            "files": [f.model_dump(mode="json") for f in self.files],
            "messages": self.messages,
        }


class GenerationSession:
    """Runs one batch of templates through a backend.

    Usage:
        session = GenerationSession(backend, ProjectContext(...))
        report = session.run(inputs)
    """

    def __init__(
        self,
        backend: GenerationBackend,
        context: ProjectContext,
        continue_on_error: bool = False,
    ):
        self.backend = backend
        self.context = context
        self.continue_on_error = continue_on_error
        self._state = SessionState.IDLE
        self._report = GenerationReport()

    @property
    def state(self) -> SessionState:
        return self._state

    def run(self, inputs: Iterable[InputDescriptor]) -> GenerationReport:
        """Process the batch and return the report.

        Raises:
            RuntimeError: If the session has already been run.
        """
        if self._state is not SessionState.IDLE:
            raise RuntimeError(f"Session already {self._state.value}; create a new one per batch")

        self._state = SessionState.RUNNING
        report = self._report
        report.state = self._state

        try:
            self._log("tmplgen starting")
            success = self._run(list(inputs))
        except Exception as e:
            self._log(str(e), level=logging.ERROR)
            report.error = str(e)
            success = False

        report.success = success
        self._state = SessionState.COMPLETED if success else SessionState.FAILED
        report.state = self._state
        return report

    # ── Batch ────────────────────────────────────────────────────

    def _run(self, inputs: list[InputDescriptor]) -> bool:
        if not inputs:
            return True

        project_root = self.context.project_root or os.getcwd()
        seen_outputs: set[str] = set()
        success = True

        with self.backend.create_context(project_root) as backend_context:
            for item in inputs:
                result = self._process(backend_context, item, project_root, seen_outputs)
                if result is None:
                    # Hard failure: abort the rest of the batch
                    return False
                if result.status == "failed":
                    success = False
                    if not self.continue_on_error:
                        return False

        return success

    # ── Per file ─────────────────────────────────────────────────

    def _process(
        self,
        backend_context: BackendContext,
        item: InputDescriptor,
        project_root: str,
        seen_outputs: set[str],
    ) -> FileResult | None:
        """Process one input. Returns None on a hard failure."""
        ctx = self.context
        # Relative inputs resolve against the project root; ".." is folded away
        file_path = os.path.normpath(os.path.abspath(os.path.join(project_root, item.path)))
        file_name = os.path.basename(file_path)

        relative_path = project_relative_path(file_path, project_root)
        namespace = derive_namespace(item.namespace, relative_path, ctx.root_namespace)
        target = output_path(
            relative_path,
            ctx.cache_directory,
            self.backend.output_extension(file_name),
            template_extension=ctx.template_extension,
            generated_marker=ctx.generated_marker,
        )

        result = FileResult(
            source_path=file_path,
            relative_path=relative_path,
            output_path=target,
            namespace=namespace,
            status="failed",
        )
        self._report.files.append(result)

        key = os.path.normcase(os.path.abspath(target))
        if key in seen_outputs:
            result.errors.append(
                GenerationError(message=f"Output path {target} is already produced by another input")
            )
            self._log(f"Duplicate output path {target} for {file_path}", level=logging.ERROR)
            return None
        seen_outputs.add(key)

        if not needs_regeneration(file_path, target):
            result.status = "skipped"
            self._log(f"Skipping file {file_path} since {target} is already up to date")
            return result

        output_writer.ensure_directory(target)

        self._log(f"Generating {file_path} at path {target}")
        generator = backend_context.create_generator(file_path, relative_path, namespace)

        errors: list[GenerationError] = []
        try:
            outcome = self._generate(generator, errors)
            if outcome.ok:
                output_writer.write_text(target, outcome.text)
        except Exception as e:
            # Keep whatever the backend reported before it raised
            result.errors.extend(errors)
            result.errors.append(GenerationError(message=str(e), code="exception"))
            self._log(f"{file_path}: {e}", level=logging.ERROR)
            return None

        if outcome.failed:
            result.errors.extend(outcome.errors)
            for error in outcome.errors:
                self._log(f"{file_path}: {error}", level=logging.ERROR)
            return result

        self._report.outputs.append(
            OutputDescriptor(
                output_path=target,
                dependent_upon=file_name,
                source_path=file_path,
                namespace=namespace,
            )
        )
        result.status = "ok"
        return result

    @staticmethod
    def _generate(generator: Generator, errors: list[GenerationError]) -> GenerationOutcome:
        text = generator.generate(errors)
        if errors:
            return GenerationOutcome.failure(errors)
        return GenerationOutcome.success(text)

    def _log(self, message: str, level: int = logging.INFO) -> None:
        self._report.messages.append(message)
        logger.log(level, message)


def run_batch(
    backend: GenerationBackend,
    context: ProjectContext,
    inputs: Iterable[InputDescriptor],
    continue_on_error: bool = False,
) -> GenerationReport:
    """Convenience wrapper: run one batch in a fresh session."""
    session = GenerationSession(backend, context, continue_on_error=continue_on_error)
    return session.run(inputs)
