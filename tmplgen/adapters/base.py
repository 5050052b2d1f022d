"""
Backend base — the protocol contract between the session and a generator.

The session only talks to backends through this protocol:

    backend.create_context(project_root)        → BackendContext (scoped)
    context.create_generator(path, rel, ns)     → Generator
    generator.generate(errors)                  → text

Errors are collected into the list passed to ``generate``. Raising
from ``generate`` is a hard failure and aborts the whole batch.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from types import TracebackType

from tmplgen.core.models.generation import GenerationError


class Generator(ABC):
    """Generates code for one template file."""

    def __init__(self, absolute_path: str, relative_path: str, namespace: str | None):
        self.absolute_path = absolute_path
        self.relative_path = relative_path
        self.namespace = namespace

    @abstractmethod
    def generate(self, errors: list[GenerationError]) -> str:
        """Generate code for the template.

        Structured problems (syntax errors in the template, unknown
        directives, ...) are appended to ``errors``; generation should
        still run to completion. The returned text is discarded by the
        session when ``errors`` is non-empty.
        """

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} {self.relative_path!r} ns={self.namespace!r}>"


class BackendContext(ABC):
    """A backend session scoped to one project root and one batch.

    Use as a context manager; ``close`` runs on every exit path.
    """

    def __init__(self, project_root: str):
        self.project_root = project_root
        self.closed = False

    @abstractmethod
    def create_generator(
        self,
        absolute_path: str,
        relative_path: str,
        namespace: str | None,
    ) -> Generator:
        """Create a generator for one template file."""

    def close(self) -> None:
        """Release backend resources. Safe to call twice."""
        self.closed = True

    def __enter__(self) -> BackendContext:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()


class GenerationBackend(ABC):
    """Abstract base class for all generation backends.

    To create a new backend:
        1. Subclass GenerationBackend, BackendContext and Generator
        2. Implement name, output_extension, create_context
        3. Register it in the BackendRegistry
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """The backend identifier (e.g., 'python', 'mock')."""

    def is_available(self) -> bool:
        """Check if the backend can run here. Should be fast and never raise."""
        return True

    @abstractmethod
    def output_extension(self, file_name: str) -> str:
        """File extension of generated code for template ``file_name`` (e.g. '.py')."""

    @abstractmethod
    def create_context(self, project_root: str) -> BackendContext:
        """Acquire a backend context for one batch."""

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} name={self.name!r}>"
