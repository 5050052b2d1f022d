"""
Shared test fixtures and configuration.
"""

import os
import time
from collections.abc import Callable
from pathlib import Path

import pytest

from tmplgen.adapters.mock import MockBackend


@pytest.fixture
def project_dir(tmp_path: Path) -> Path:
    """Return an empty project root directory."""
    root = tmp_path / "proj"
    root.mkdir()
    return root


@pytest.fixture
def cache_dir(project_dir: Path) -> Path:
    """Return the generation cache directory (not created)."""
    return project_dir / "obj" / "gen"


@pytest.fixture
def make_template(project_dir: Path) -> Callable[..., Path]:
    """Create a template file under the project root.

    The file's mtime is pushed an hour into the past so that outputs
    written during the test are always newer.
    """

    def _make(relative: str, content: str = "Hello $name\n") -> Path:
        path = project_dir / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
        past = time.time() - 3600
        os.utime(path, (past, past))
        return path

    return _make


@pytest.fixture
def mock_backend() -> MockBackend:
    """Return a mock backend producing '.cs' files."""
    return MockBackend(extension=".cs")
