"""
Generate use case — resolve configuration and run one batch.

This is the top-level entry point for callers: it loads tmplgen.yml
(when present), merges explicit overrides, expands the input list,
resolves the backend and hands everything to a GenerationSession.

    config + overrides → ProjectContext + inputs → session → report
"""

from __future__ import annotations

import glob
import logging
from dataclasses import dataclass
from pathlib import Path

from tmplgen.adapters.registry import BackendRegistry, default_registry
from tmplgen.core.config.loader import ConfigError, config_root, find_config_file, load_config
from tmplgen.core.engine.session import GenerationReport, GenerationSession
from tmplgen.core.models.config import GeneratorConfig, InputRef
from tmplgen.core.models.generation import InputDescriptor, ProjectContext

logger = logging.getLogger(__name__)


@dataclass
class GenerateResult:
    """Result of a generate run."""

    report: GenerationReport | None = None
    config_path: Path | None = None
    project_root: Path | None = None
    cache_directory: Path | None = None
    backend: str = ""
    inputs: int = 0
    error: str | None = None

    @property
    def success(self) -> bool:
        return self.error is None and self.report is not None and self.report.success

    def to_dict(self) -> dict:
        result: dict = {"success": self.success}
        if self.error:
            result["error"] = self.error
            return result

        result["config_path"] = str(self.config_path) if self.config_path else None
        result["project_root"] = str(self.project_root)
        result["cache_directory"] = str(self.cache_directory)
        result["backend"] = self.backend
        result["inputs"] = self.inputs

        if self.report:
            result["report"] = self.report.to_dict()

        return result


def expand_inputs(refs: list[InputRef], base_dir: Path) -> list[InputDescriptor]:
    """Turn config input entries into descriptors.

    Entries with glob characters are expanded (sorted, ``**`` allowed);
    plain paths are kept even when the file does not exist yet so the
    session reports them.
    """
    inputs: list[InputDescriptor] = []
    for ref in refs:
        pattern = Path(ref.path)
        if not pattern.is_absolute():
            pattern = base_dir / pattern

        if glob.has_magic(str(pattern)):
            matches = sorted(glob.glob(str(pattern), recursive=True))
            if not matches:
                logger.warning("Input pattern matched no files: %s", ref.path)
            paths = [Path(m) for m in matches if Path(m).is_file()]
        else:
            paths = [pattern]

        for path in paths:
            inputs.append(InputDescriptor(path=str(path.resolve()), namespace=ref.namespace))
    return inputs


def _resolve(value: str, base_dir: Path) -> Path:
    path = Path(value)
    if not path.is_absolute():
        path = base_dir / path
    return path.resolve()


def run_generate(
    files: list[str] | None = None,
    config_path: Path | None = None,
    project_root: str | None = None,
    cache_directory: str | None = None,
    root_namespace: str | None = None,
    namespace: str | None = None,
    backend: str | None = None,
    continue_on_error: bool | None = None,
    mock_mode: bool = False,
    registry: BackendRegistry | None = None,
) -> GenerateResult:
    """Generate code for a batch of templates.

    Explicit arguments win over tmplgen.yml values. Relative paths given
    as arguments resolve against the current directory; relative paths
    from the config file resolve against the config file's directory.

    Args:
        files: Template files to process. None = the config's inputs.
        config_path: Explicit path to tmplgen.yml (default: auto-detect).
        project_root: Project root override.
        cache_directory: Generation cache directory override.
        root_namespace: Root namespace override.
        namespace: Explicit namespace applied to every file in ``files``.
        backend: Backend name override.
        continue_on_error: Keep going after a file reports errors.
        mock_mode: Use the mock backend instead of a real one.
        registry: Optional pre-configured backend registry.

    Returns:
        GenerateResult with the batch report, or an error.
    """
    result = GenerateResult()

    # ── Load config ──────────────────────────────────────────────
    try:
        if config_path is None:
            config_path = find_config_file()
        if config_path is not None:
            config = load_config(config_path)
            base_dir = config_root(config_path)
            result.config_path = config_path
        else:
            config = GeneratorConfig()
            base_dir = Path.cwd().resolve()
    except ConfigError as e:
        result.error = str(e)
        return result

    cwd = Path.cwd()
    root = _resolve(project_root, cwd) if project_root else _resolve(config.project_root, base_dir)
    cache = _resolve(cache_directory, cwd) if cache_directory else _resolve(config.cache_directory, base_dir)
    result.project_root = root
    result.cache_directory = cache

    # ── Inputs ───────────────────────────────────────────────────
    if files:
        inputs = [
            InputDescriptor(path=str(_resolve(f, cwd)), namespace=namespace or None)
            for f in files
        ]
    else:
        inputs = expand_inputs(config.inputs, base_dir)
    result.inputs = len(inputs)

    # ── Backend ──────────────────────────────────────────────────
    backend_name = backend or config.backend
    result.backend = backend_name
    if registry is None:
        registry = default_registry(mock_mode=mock_mode)
    elif mock_mode:
        registry.set_mock_mode(True)

    generation_backend = registry.get(backend_name)
    if generation_backend is None:
        available = ", ".join(sorted(registry.list_backends())) or "none"
        result.error = f"Unknown backend '{backend_name}'. Available: {available}"
        return result
    if not generation_backend.is_available():
        result.error = f"Backend '{backend_name}' is not available"
        return result

    # ── Run ──────────────────────────────────────────────────────
    context = ProjectContext(
        project_root=str(root),
        cache_directory=str(cache),
        root_namespace=root_namespace if root_namespace is not None else config.root_namespace,
        template_extension=config.template_extension,
        generated_marker=config.generated_marker,
    )
    if continue_on_error is None:
        continue_on_error = config.continue_on_error

    session = GenerationSession(generation_backend, context, continue_on_error=continue_on_error)
    result.report = session.run(inputs)

    logger.info(
        "Generated %d, skipped %d, failed %d (%s)",
        result.report.generated,
        result.report.skipped,
        result.report.failed,
        result.report.status,
    )
    return result
