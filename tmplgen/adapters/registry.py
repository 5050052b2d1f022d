"""
Backend registry — central lookup for generation backends.

The registry is the single point of backend management. It handles
registration, lookup and mock mode. Use cases resolve backends by
name through the registry, never by importing them directly.
"""

from __future__ import annotations

import logging
from typing import Any

from tmplgen.adapters.base import GenerationBackend

logger = logging.getLogger(__name__)


class BackendRegistry:
    """Central registry for generation backends.

    Features:
        - Register/unregister backends by name
        - Mock mode: resolve every name to a mock backend
        - Query backend availability
    """

    def __init__(self, mock_mode: bool = False):
        self._backends: dict[str, GenerationBackend] = {}
        self._mock_mode = mock_mode
        self._mock_backend: GenerationBackend | None = None

    @property
    def mock_mode(self) -> bool:
        return self._mock_mode

    def set_mock_mode(self, enabled: bool, mock_backend: GenerationBackend | None = None) -> None:
        """Enable or disable mock mode.

        Args:
            enabled: Whether to use mock mode.
            mock_backend: Optional custom mock backend. If None, a
                default MockBackend is created on first use.
        """
        self._mock_mode = enabled
        self._mock_backend = mock_backend

    def register(self, backend: GenerationBackend) -> None:
        """Register a backend under its name."""
        name = backend.name
        if name in self._backends:
            logger.warning("Overwriting existing backend: %s", name)
        self._backends[name] = backend
        logger.debug("Registered backend: %s", name)

    def unregister(self, name: str) -> None:
        """Remove a backend from the registry."""
        self._backends.pop(name, None)

    def get(self, name: str) -> GenerationBackend | None:
        """Look up a backend by name, honouring mock mode."""
        if self._mock_mode:
            if self._mock_backend is None:
                from tmplgen.adapters.mock import MockBackend

                self._mock_backend = MockBackend()
            return self._mock_backend
        return self._backends.get(name)

    def list_backends(self) -> list[str]:
        """List all registered backend names."""
        return list(self._backends.keys())

    def backend_status(self) -> dict[str, dict[str, Any]]:
        """Get availability status of all registered backends."""
        status = {}
        for name, backend in self._backends.items():
            try:
                available = backend.is_available()
            except Exception:
                available = False
            status[name] = {
                "name": name,
                "available": available,
                "type": backend.__class__.__name__,
            }
        return status


def default_registry(mock_mode: bool = False) -> BackendRegistry:
    """Create a registry with the built-in backends registered."""
    from tmplgen.adapters.templates.python import PythonTemplateBackend

    registry = BackendRegistry(mock_mode=mock_mode)
    registry.register(PythonTemplateBackend())
    return registry
