"""
Config check use case — validate tmplgen.yml and report issues.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from tmplgen.adapters.registry import BackendRegistry, default_registry
from tmplgen.core.config.loader import ConfigError, config_root, find_config_file, load_config
from tmplgen.core.models.config import GeneratorConfig
from tmplgen.core.use_cases.generate import expand_inputs


@dataclass
class ConfigCheckResult:
    """Result of configuration validation."""

    valid: bool = False
    config: GeneratorConfig | None = None
    config_path: Path | None = None
    input_count: int = 0
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "valid": self.valid,
            "config_path": str(self.config_path) if self.config_path else None,
            "errors": self.errors,
            "warnings": self.warnings,
            "backend": self.config.backend if self.config else None,
            "input_count": self.input_count,
        }


def check_config(
    config_path: Path | None = None,
    registry: BackendRegistry | None = None,
) -> ConfigCheckResult:
    """Validate generator configuration and report issues.

    Args:
        config_path: Optional explicit path to tmplgen.yml.
        registry: Registry used to check the backend name.

    Returns:
        ConfigCheckResult with validation status and any issues.
    """
    result = ConfigCheckResult()

    if config_path is None:
        config_path = find_config_file()
    if config_path is None:
        result.errors.append("No tmplgen.yml found.")
        return result
    result.config_path = config_path

    try:
        config = load_config(config_path)
        result.config = config
    except ConfigError as e:
        result.errors.append(str(e))
        return result

    base_dir = config_root(config_path)

    if registry is None:
        registry = default_registry()
    if registry.get(config.backend) is None:
        result.errors.append(
            f"Unknown backend '{config.backend}'. "
            f"Available: {', '.join(sorted(registry.list_backends())) or 'none'}"
        )

    project_root = (base_dir / config.project_root).resolve()
    if not project_root.is_dir():
        result.errors.append(f"Project root does not exist: {config.project_root}")

    if not config.inputs:
        result.warnings.append("No inputs defined. Pass template files on the command line.")

    paths: list[str] = []
    for ref in config.inputs:
        matched = expand_inputs([ref], base_dir)
        if not any(Path(i.path).is_file() for i in matched):
            result.warnings.append(f"Input matches no files: {ref.path}")
        paths.extend(i.path for i in matched)
    result.input_count = len(paths)

    # Two inputs writing the same output is fatal at generate time
    dupes = {p for p in paths if paths.count(p) > 1}
    if dupes:
        result.errors.append(f"Duplicate inputs: {', '.join(sorted(dupes))}")

    result.valid = len(result.errors) == 0
    return result
