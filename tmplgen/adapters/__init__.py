"""Backends — bindings for template generation engines.

Public re-exports for convenient access.
"""

from tmplgen.adapters.base import BackendContext, GenerationBackend, Generator
from tmplgen.adapters.mock import MockBackend
from tmplgen.adapters.registry import BackendRegistry, default_registry

__all__ = [
    "BackendContext",
    "BackendRegistry",
    "GenerationBackend",
    "Generator",
    "MockBackend",
    "default_registry",
]
