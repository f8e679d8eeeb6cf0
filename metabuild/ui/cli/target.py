"""
CLI commands for a build folder's root targets.

Thin wrappers over ``metabuild.core.use_cases.targets``.
"""

from __future__ import annotations

import json
import sys

import click


def _fail(message: str) -> None:
    click.secho(f"❌ {message}", fg="red")
    sys.exit(1)


@click.group()
def target() -> None:
    """Root targets — list, add, remove, graph."""


@target.command("list")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def list_cmd(ctx: click.Context, as_json: bool) -> None:
    """List the root targets of the current build folder."""
    from metabuild.core.use_cases.targets import list_root_targets

    result = list_root_targets(ctx.obj.get("folder_name"), ctx.obj.get("config_path"))

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
        return
    if result.error:
        _fail(result.error)

    click.echo(f"List of root targets in build folder '{result.folder_name}':")
    for root in result.roots:
        suffix = "" if root["found"] else " (not found)"
        shared = " [shared]" if root["shared"] else ""
        click.echo(f"    {root['display']}{shared}{suffix}")


@target.command("add")
@click.argument("name")
@click.option("--shared", is_flag=True, help="Build this root as a shared library.")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def add(ctx: click.Context, name: str, shared: bool, as_json: bool) -> None:
    """Add a root target to the current build folder."""
    from metabuild.core.use_cases.targets import add_root_target

    result = add_root_target(
        ctx.obj.get("folder_name"), name, shared=shared, config_path=ctx.obj.get("config_path"),
    )

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
        return
    if result.error:
        _fail(result.error)
    click.echo(result.message)


@target.command("remove")
@click.argument("name")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def remove(ctx: click.Context, name: str, as_json: bool) -> None:
    """Remove a root target from the current build folder."""
    from metabuild.core.use_cases.targets import remove_root_target

    result = remove_root_target(ctx.obj.get("folder_name"), name, ctx.obj.get("config_path"))

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
        return
    if result.error:
        _fail(result.error)
    click.echo(result.message)


@target.command("graph")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def graph(ctx: click.Context, as_json: bool) -> None:
    """Show the dependency graph of the current build folder."""
    from metabuild.core.use_cases.targets import dependency_graph

    result = dependency_graph(ctx.obj.get("folder_name"), ctx.obj.get("config_path"))

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
        return
    if result.error:
        _fail(result.error)

    click.echo(f"Dependency graph for folder '{result.folder_name}':")
    click.echo(result.graph, nl=False)
