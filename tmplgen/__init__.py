"""tmplgen — incremental template code generation driver."""

__version__ = "0.1.0"
