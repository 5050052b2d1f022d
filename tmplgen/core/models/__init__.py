"""
Domain models — Pydantic types for the generation driver.

All models are re-exported here for convenient access:

    from tmplgen.core.models import InputDescriptor, ProjectContext, OutputDescriptor
"""

from tmplgen.core.models.config import GeneratorConfig, InputRef
from tmplgen.core.models.generation import (
    FileResult,
    GenerationError,
    GenerationOutcome,
    InputDescriptor,
    OutputDescriptor,
    ProjectContext,
)

__all__ = [
    # generation.py
    "FileResult",
    "GenerationError",
    "GenerationOutcome",
    # config.py
    "GeneratorConfig",
    "InputDescriptor",
    "InputRef",
    "OutputDescriptor",
    "ProjectContext",
]
