"""
installcheck — CLI entrypoint.

Usage:
    python -m installcheck.main --help
    python -m installcheck.main run npm /tmp/install-check /tmp/install-check.log
    python -m installcheck.main pkgs names
    python -m installcheck.main contributors update
"""

from __future__ import annotations

import json
import os
import sys
from pathlib import Path

import click

from installcheck import __version__
from installcheck.core.observability.logging_config import (
    ENV_DEBUG_LOG,
    ENV_DEBUG_LOG_LEVEL,
    resolve_level,
    setup_logging,
)


@click.group()
@click.version_option(version=__version__, prog_name="installcheck")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output.")
@click.option("--quiet", "-q", is_flag=True, help="Suppress non-essential output.")
@click.option("--debug", is_flag=True, help="Enable debug logging (very verbose).")
@click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(exists=False),
    default=None,
    help="Path to installcheck.yml (default: auto-detect).",
)
@click.pass_context
def cli(
    ctx: click.Context,
    verbose: bool,
    quiet: bool,
    debug: bool,
    config_path: str | None,
) -> None:
    """installcheck — verify a published package installs and runs."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["quiet"] = quiet
    ctx.obj["debug"] = debug
    ctx.obj["config_path"] = Path(config_path) if config_path else None

    # ── Logging setup (once, at process start) ──────────────────
    setup_logging(
        level=resolve_level(debug=debug, verbose=verbose, quiet=quiet),
        log_file=os.environ.get(ENV_DEBUG_LOG),
        log_file_level=os.environ.get(ENV_DEBUG_LOG_LEVEL),
    )


def load_settings_or_exit(ctx: click.Context):
    """Load settings for a command, exiting 1 on configuration errors."""
    from installcheck.core.config.loader import ConfigError, load_settings

    try:
        return load_settings(ctx.obj.get("config_path"))
    except ConfigError as e:
        click.secho(f"❌ {e}", fg="red", err=True)
        sys.exit(1)


@cli.command()
@click.argument("package_manager")
@click.argument("install_dir", type=click.Path(file_okay=False))
@click.argument("log_file", type=click.Path(dir_okay=False))
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.option("--mock", is_flag=True, help="Use mock adapters (no npm/node execution).")
@click.pass_context
def run(
    ctx: click.Context,
    package_manager: str,
    install_dir: str,
    log_file: str,
    as_json: bool,
    mock: bool,
) -> None:
    """Install the target package through every channel and verify it.

    PACKAGE_MANAGER selects the package manager (currently only 'npm').
    INSTALL_DIR is created and removed by each scenario.  LOG_FILE
    receives the transcript of every command (appended).

    Examples:

        installcheck run npm /tmp/install-check /tmp/install-check.log

        installcheck run npm ./tmp ./install.log --mock
    """
    from installcheck.core.use_cases.run import run_install_check

    settings = load_settings_or_exit(ctx)

    result = run_install_check(
        package_manager=package_manager,
        install_dir=Path(install_dir),
        log_file=Path(log_file),
        settings=settings,
        mock_mode=mock,
    )

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
        sys.exit(result.exit_code)

    quiet = ctx.obj.get("quiet", False)
    if not quiet:
        mode_label = "[mock] " if mock else ""
        click.secho(
            f"\n📦 {mode_label}install check — {settings.target.package} ({package_manager})",
            fg="cyan",
            bold=True,
            err=True,
        )
        for scenario in result.scenarios:
            retries = f" after {scenario.attempts} attempts" if scenario.attempts > 1 else ""
            if scenario.ok:
                click.secho(f"   ✓ {scenario.name}{retries}", fg="green", err=True)
            else:
                click.secho(f"   ✗ {scenario.name}: {scenario.reason}{retries}", fg="red", err=True)
        click.echo(err=True)

    if result.error:
        click.secho(f"❌ {result.error}", fg="red", err=True)
        click.echo(f"   Log: {log_file}", err=True)
        sys.exit(result.exit_code)

    click.secho("✅ Install check passed", fg="green", bold=True, err=True)


@cli.group()
def config() -> None:
    """Configuration commands."""


@config.command("show")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def config_show(ctx: click.Context, as_json: bool) -> None:
    """Show the resolved configuration."""
    import yaml

    settings = load_settings_or_exit(ctx)
    data = settings.model_dump(mode="json")

    if as_json:
        click.echo(json.dumps(data, indent=2))
        return

    click.echo(yaml.safe_dump(data, sort_keys=False).rstrip())


# ── Register sub-command groups from installcheck/ui/cli/ ─────────

from installcheck.ui.cli.contributors import contributors
from installcheck.ui.cli.pkgs import pkgs

cli.add_command(pkgs)
cli.add_command(contributors)


if __name__ == "__main__":
    cli()
