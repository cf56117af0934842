"""
CLI commands for package tooling.

Thin wrappers over ``installcheck.core.services.package_names``.
"""

from __future__ import annotations

import json
import sys
from pathlib import Path

import click


@click.group()
def pkgs() -> None:
    """Packages — list package names in the source tree."""


@pkgs.command()
@click.argument("root_dir", required=False, type=click.Path(file_okay=False))
@click.option("--tool", default=None, help="Path to the names CLI (default: from config).")
@click.option("--flag", "flags", multiple=True, help="Extra flag passed to the tool (repeatable).")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def names(
    ctx: click.Context,
    root_dir: str | None,
    tool: str | None,
    flags: tuple[str, ...],
    as_json: bool,
) -> None:
    """Print all package names found beneath ROOT_DIR.

    Examples:

        installcheck pkgs names

        installcheck pkgs names lib/node_modules/@stdlib/utils
    """
    from installcheck.core.config.loader import ConfigError, config_root, load_settings
    from installcheck.core.services.package_names import list_package_names

    try:
        settings = load_settings(ctx.obj.get("config_path"))
    except ConfigError as e:
        click.secho(f"❌ {e}", fg="red", err=True)
        sys.exit(1)

    project_root = config_root(ctx.obj.get("config_path"))
    tools = settings.tools

    tool_path = Path(tool or tools.list_pkgs_names)
    if not tool_path.is_absolute():
        tool_path = project_root / tool_path
    search_dir = Path(root_dir or tools.list_pkgs_names_dir)
    if not search_dir.is_absolute():
        search_dir = (Path.cwd() if root_dir else project_root) / search_dir

    result = list_package_names(
        tool=tool_path,
        root_dir=search_dir,
        flags=[*tools.list_pkgs_names_flags, *flags],
        node_path=tools.node_path,
        node=tools.node,
    )

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
        sys.exit(0 if result.ok else 1)

    if not result.ok:
        click.secho(f"❌ {result.error}", fg="red", err=True)
        sys.exit(1)

    for name in result.names:
        click.echo(name)
