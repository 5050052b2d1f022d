"""
tmplgen — CLI entrypoint.

Usage:
    python -m tmplgen.main --help
    python -m tmplgen.main generate Views/Home/Index.tmpl
    python -m tmplgen.main config check
"""

from __future__ import annotations

import json
import os
import sys
from pathlib import Path

import click

from tmplgen import __version__
from tmplgen.core.observability.logging_config import setup_logging


@click.group()
@click.version_option(version=__version__, prog_name="tmplgen")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output.")
@click.option("--quiet", "-q", is_flag=True, help="Suppress non-essential output.")
@click.option("--debug", is_flag=True, help="Enable debug logging (very verbose).")
@click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(exists=False),
    default=None,
    help="Path to tmplgen.yml (default: auto-detect).",
)
@click.pass_context
def cli(
    ctx: click.Context,
    verbose: bool,
    quiet: bool,
    debug: bool,
    config_path: str | None,
) -> None:
    """tmplgen — incremental template code generation."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["quiet"] = quiet
    ctx.obj["config_path"] = Path(config_path) if config_path else None

    if debug:
        level = "DEBUG"
    elif verbose:
        level = "INFO"
    elif quiet:
        level = "ERROR"
    else:
        level = os.environ.get("TMPLGEN_LOG_LEVEL", "WARNING")

    setup_logging(
        level=level,
        log_file=os.environ.get("TMPLGEN_LOG_FILE"),
        log_file_level=os.environ.get("TMPLGEN_LOG_FILE_LEVEL"),
    )


@cli.command()
@click.argument("files", nargs=-1, type=click.Path())
@click.option("--project-root", default=None, help="Project root (default: config or cwd).")
@click.option("--cache-dir", "cache_directory", default=None, help="Generation cache directory.")
@click.option("--root-namespace", default=None, help="Prefix for derived namespaces.")
@click.option("--namespace", default=None, help="Explicit namespace for every FILE.")
@click.option("--backend", default=None, help="Generation backend (default: config or 'python').")
@click.option("--mock", is_flag=True, help="Use the mock backend (no real generation).")
@click.option("--continue-on-error", is_flag=True, help="Keep going after a file reports errors.")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def generate(
    ctx: click.Context,
    files: tuple[str, ...],
    project_root: str | None,
    cache_directory: str | None,
    root_namespace: str | None,
    namespace: str | None,
    backend: str | None,
    mock: bool,
    continue_on_error: bool,
    as_json: bool,
) -> None:
    """Generate code for stale templates.

    Examples:

        tmplgen generate

        tmplgen generate Views/Home/Index.tmpl --root-namespace App

        tmplgen generate --cache-dir obj/gen --backend python
    """
    from tmplgen.core.use_cases.generate import run_generate

    result = run_generate(
        files=list(files) if files else None,
        config_path=ctx.obj.get("config_path"),
        project_root=project_root,
        cache_directory=cache_directory,
        root_namespace=root_namespace,
        namespace=namespace,
        backend=backend,
        continue_on_error=continue_on_error or None,  # unset → config value
        mock_mode=mock,
    )

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
        sys.exit(0 if result.success else 1)

    if result.error:
        click.secho(f"❌ {result.error}", fg="red")
        sys.exit(1)

    report = result.report
    assert report is not None
    quiet = ctx.obj.get("quiet", False)

    if not quiet:
        mode_label = "[mock] " if mock else ""
        click.secho(f"\n⚙️  {mode_label}tmplgen — {result.backend}", fg="cyan", bold=True)
        click.echo(f"   Project: {result.project_root}")
        click.echo(f"   Cache:   {result.cache_directory}")
        click.echo()

    for file in report.files:
        if file.status == "ok":
            click.secho("   ✓ ", fg="green", nl=False)
            click.echo(f"{file.relative_path}  → {file.output_path}")
        elif file.status == "skipped":
            if not quiet:
                click.secho("   ⊘ ", fg="yellow", nl=False)
                click.echo(f"{file.relative_path} (up to date)")
        else:
            click.secho(f"   ✗ {file.relative_path}", fg="red")
            for error in file.errors:
                click.echo(f"     │ {error}")

    if report.error:
        click.secho(f"   {report.error}", fg="red")

    click.echo()
    status_color = {"ok": "green", "partial": "yellow", "failed": "red"}.get(report.status, "white")
    click.secho(
        f"   Result: {report.generated} generated, {report.skipped} up to date, {report.failed} failed",
        fg=status_color,
        bold=True,
    )
    click.echo()

    if not report.success:
        sys.exit(1)


@cli.group()
def config() -> None:
    """Generator configuration commands."""


@config.command("check")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def config_check(ctx: click.Context, as_json: bool) -> None:
    """Validate tmplgen.yml configuration."""
    from tmplgen.core.use_cases.config_check import check_config

    result = check_config(config_path=ctx.obj.get("config_path"))

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
        sys.exit(0 if result.valid else 1)

    if result.valid:
        assert result.config is not None
        click.secho("✅ Configuration is valid", fg="green", bold=True)
        click.echo(f"   Backend: {result.config.backend}")
        click.echo(f"   Inputs:  {result.input_count}")
    else:
        click.secho("❌ Configuration errors:", fg="red", bold=True)
        for err in result.errors:
            click.echo(f"   • {err}")

    if result.warnings:
        click.echo()
        click.secho("⚠️  Warnings:", fg="yellow")
        for warn in result.warnings:
            click.echo(f"   • {warn}")

    click.echo()
    if not result.valid:
        sys.exit(1)


@cli.command()
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
def backends(as_json: bool) -> None:
    """List registered generation backends."""
    from tmplgen.adapters.registry import default_registry

    status = default_registry().backend_status()

    if as_json:
        click.echo(json.dumps(status, indent=2))
        return

    click.secho("\n🔌 Backends:", fg="cyan", bold=True)
    for name, info in status.items():
        if info["available"]:
            click.secho(f"   ✓ {name}", fg="green", nl=False)
        else:
            click.secho(f"   ✗ {name}", fg="red", nl=False)
        click.echo(f"  ({info['type']})")
    click.echo()


if __name__ == "__main__":
    cli()
