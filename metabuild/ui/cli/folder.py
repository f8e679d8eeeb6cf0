"""
CLI commands for build folders.

Thin wrappers over ``metabuild.core.use_cases.folders``.
"""

from __future__ import annotations

import json
import sys

import click


@click.group()
def folder() -> None:
    """Build folders — create and list."""


@folder.command("create")
@click.argument("name")
@click.option("--generator", "-G", default=None, help="CMake generator (default: from metabuild.yml).")
@click.option("--platform", "-A", default=None, help="CMake platform (-A).")
@click.option("--toolset", "-T", default=None, help="CMake toolset (-T).")
@click.option("--build-type", default=None, help="Default build type (e.g. Debug).")
@click.option("--bootstrap", is_flag=True, help="Generate relocatable paths.")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def create(
    ctx: click.Context,
    name: str,
    generator: str | None,
    platform: str | None,
    toolset: str | None,
    build_type: str | None,
    bootstrap: bool,
    as_json: bool,
) -> None:
    """Create a new build folder."""
    from metabuild.core.use_cases.folders import create_build_folder

    result = create_build_folder(
        name,
        config_path=ctx.obj.get("config_path"),
        generator=generator,
        platform=platform,
        toolset=toolset,
        build_type=build_type,
        for_bootstrap=bootstrap,
    )

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
        return

    if result.error:
        click.secho(f"❌ {result.error}", fg="red")
        sys.exit(1)

    assert result.folder is not None
    options = result.folder.generator
    click.secho(f"✅ Created build folder '{result.folder.name}'", fg="green", bold=True)
    click.echo(f"   Path: {result.folder_dir}")
    click.echo(f"   Generator: {options.generator} ({options.build_type})")


@folder.command("list")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def list_cmd(ctx: click.Context, as_json: bool) -> None:
    """List build folders in the workspace."""
    from metabuild.core.use_cases.folders import list_folders

    result = list_folders(config_path=ctx.obj.get("config_path"))

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
        return

    if result.error:
        click.secho(f"❌ {result.error}", fg="red")
        sys.exit(1)

    if not result.folders:
        click.secho("No build folders. Run 'metabuild folder create <name>'.", fg="yellow")
        return

    current = ctx.obj.get("folder_name")
    click.echo("Build folders:")
    for name in result.folders:
        marker = " ← current" if name == current else ""
        click.echo(f"    {name}{marker}")
