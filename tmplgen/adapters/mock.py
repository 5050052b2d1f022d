"""
Mock backend — universal test double for generation.

Used in mock mode (``tmplgen generate --mock``) and in tests to drive
the session without a real template engine. Configurable per template
to return custom text, report structured errors, or raise.

Templates are keyed by their project-relative path without the
leading separator, using ``/``: ``Views/Home/Index.tmpl``.
"""

from __future__ import annotations

import os

from tmplgen.adapters.base import BackendContext, GenerationBackend, Generator
from tmplgen.core.models.generation import GenerationError
from tmplgen.core.services.paths import SEPARATORS


def _key(relative_path: str) -> str:
    return relative_path.lstrip(SEPARATORS).replace(os.sep, "/")


class MockGenerator(Generator):
    def __init__(self, backend: MockBackend, absolute_path: str, relative_path: str, namespace: str | None):
        super().__init__(absolute_path, relative_path, namespace)
        self._backend = backend

    def generate(self, errors: list[GenerationError]) -> str:
        backend = self._backend
        backend.call_log.append(self)
        key = _key(self.relative_path)

        errors.extend(backend._errors.get(key, []))

        if key in backend._exceptions:
            raise backend._exceptions[key]

        if key in backend._outputs:
            return backend._outputs[key]
        return backend.default_output.format(
            path=key,
            namespace=self.namespace or "",
        )


class MockContext(BackendContext):
    def __init__(self, backend: MockBackend, project_root: str):
        super().__init__(project_root)
        self._backend = backend

    def create_generator(
        self,
        absolute_path: str,
        relative_path: str,
        namespace: str | None,
    ) -> Generator:
        return MockGenerator(self._backend, absolute_path, relative_path, namespace)

    def close(self) -> None:
        if not self.closed:
            self._backend.contexts_closed += 1
        super().close()


class MockBackend(GenerationBackend):
    """Universal mock backend for testing.

    By default every template generates a one-line comment. Can be
    configured with custom output, errors, or exceptions per template.
    """

    def __init__(
        self,
        backend_name: str = "mock",
        available: bool = True,
        extension: str = ".txt",
        default_output: str = "// generated from {path} (namespace: {namespace})\n",
    ):
        self._name = backend_name
        self._available = available
        self.extension = extension
        self.default_output = default_output
        self._outputs: dict[str, str] = {}
        self._errors: dict[str, list[GenerationError]] = {}
        self._exceptions: dict[str, Exception] = {}
        self.call_log: list[MockGenerator] = []
        self.contexts_opened = 0
        self.contexts_closed = 0
        self.last_project_root: str | None = None

    @property
    def name(self) -> str:
        return self._name

    @property
    def call_count(self) -> int:
        """Number of times generate has been called."""
        return len(self.call_log)

    def is_available(self) -> bool:
        return self._available

    def output_extension(self, file_name: str) -> str:
        return self.extension

    def create_context(self, project_root: str) -> BackendContext:
        self.contexts_opened += 1
        self.last_project_root = project_root
        return MockContext(self, project_root)

    def set_output(self, relative_path: str, text: str) -> None:
        """Set the generated text for a specific template."""
        self._outputs[_key(relative_path)] = text

    def set_errors(self, relative_path: str, *messages: str | GenerationError) -> None:
        """Configure a specific template to report structured errors."""
        self._errors[_key(relative_path)] = [
            m if isinstance(m, GenerationError) else GenerationError(message=m)
            for m in messages
        ]

    def set_exception(self, relative_path: str, exc: Exception) -> None:
        """Configure a specific template to raise during generation."""
        self._exceptions[_key(relative_path)] = exc

    def reset(self) -> None:
        """Clear call log and custom responses."""
        self.call_log.clear()
        self._outputs.clear()
        self._errors.clear()
        self._exceptions.clear()
        self.contexts_opened = 0
        self.contexts_closed = 0
