"""
CLI commands for the contributors list.

Thin wrappers over ``installcheck.core.services.contributors``.
"""

from __future__ import annotations

import json
import sys
from pathlib import Path

import click


@click.group()
def contributors() -> None:
    """Contributors — regenerate the list and open a pull request."""


@contributors.command()
@click.option(
    "--repo",
    "repo_dir",
    type=click.Path(file_okay=False, exists=True),
    default=".",
    help="Repository root (default: current directory).",
)
@click.option("--dry-run", is_flag=True, help="Detect changes but don't commit or open a PR.")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def update(ctx: click.Context, repo_dir: str, dry_run: bool, as_json: bool) -> None:
    """Run the contributors Make target; open a PR if the list changed."""
    from installcheck.core.config.loader import ConfigError, load_settings
    from installcheck.core.services.contributors import update_contributors

    try:
        settings = load_settings(ctx.obj.get("config_path"))
    except ConfigError as e:
        click.secho(f"❌ {e}", fg="red", err=True)
        sys.exit(1)

    result = update_contributors(
        Path(repo_dir).resolve(),
        settings=settings.contributors,
        dry_run=dry_run,
    )

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
        sys.exit(0 if result.ok else 1)

    if not result.ok:
        click.secho(f"❌ {result.error}", fg="red", err=True)
        sys.exit(1)

    if not result.changed:
        click.echo("No changes to commit.")
        return

    click.secho(f"📝 Contributors changed ({len(result.files)} file(s))", fg="cyan", bold=True)
    for line in result.files:
        click.echo(f"   {line}")

    if dry_run:
        click.secho("   [dry-run] No pull request opened", fg="yellow")
        return

    click.secho(
        f"   ✅ Pull request {result.pr_number or ''} {result.pr_operation}",
        fg="green",
    )
    if result.pr_url:
        click.echo(f"   🔗 {result.pr_url}")
