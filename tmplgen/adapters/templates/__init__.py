"""Built-in template backends."""

from tmplgen.adapters.templates.python import PythonTemplateBackend

__all__ = ["PythonTemplateBackend"]
