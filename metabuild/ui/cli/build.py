"""
CLI commands for generating and building a folder.

    metabuild generate       write CMakeLists.txt, run the configure step
    metabuild build          run cmake --build
    metabuild output-path    print where a target's artifact lands
"""

from __future__ import annotations

import json
import sys

import click

from metabuild.core.errors import PreconditionError


def _print_errors(errors: list[str]) -> None:
    for message in errors:
        click.secho(f"❌ {message}", fg="red", err=True)


@click.command("generate")
@click.option("--no-cmake", is_flag=True, help="Only write CMakeLists.txt.")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def generate(ctx: click.Context, no_cmake: bool, as_json: bool) -> None:
    """Generate the build system for the current folder."""
    from metabuild.core.use_cases.build import generate_folder

    try:
        result = generate_folder(
            ctx.obj.get("folder_name"),
            ctx.obj.get("config_path"),
            run_cmake=not no_cmake,
        )
    except PreconditionError as e:
        click.secho(f"❌ {e}", fg="red")
        sys.exit(1)

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
        if not result.ok:
            sys.exit(1)
        return

    if result.error:
        click.secho(f"❌ {result.error}", fg="red")
        sys.exit(1)

    state = "written" if result.cmake_lists_written else "unchanged"
    if not ctx.obj.get("quiet"):
        click.echo(f"📝 {result.cmake_lists_path} ({state}, {result.target_count} targets)")

    if result.return_code is None:
        return
    if result.output and (ctx.obj.get("verbose") or result.return_code != 0):
        click.echo(result.output, nl=not result.output.endswith("\n"))
    if result.return_code != 0:
        _print_errors(result.errors)
        sys.exit(1)
    click.secho(f"✅ Generated build folder '{result.folder_name}'", fg="green", bold=True)


@click.command("build")
@click.option("--config-type", "-t", "build_type", default="", help="Build type (multi-config generators).")
@click.option("--no-capture", is_flag=True, help="Let the build tool write straight to the terminal.")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def build(ctx: click.Context, build_type: str, no_capture: bool, as_json: bool) -> None:
    """Build the current folder."""
    from metabuild.core.use_cases.build import build_folder

    on_output = None
    if not as_json and not no_capture:
        on_output = lambda line: click.echo(line, nl=False)  # noqa: E731

    try:
        result = build_folder(
            ctx.obj.get("folder_name"),
            ctx.obj.get("config_path"),
            build_type=build_type,
            capture_output=not no_capture,
            on_output=on_output,
        )
    except PreconditionError as e:
        click.secho(f"❌ {e}", fg="red")
        sys.exit(1)

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
        if not result.ok:
            sys.exit(1)
        return

    if result.error:
        click.secho(f"❌ {result.error}", fg="red")
        sys.exit(1)
    if result.return_code != 0:
        _print_errors(result.errors)
        sys.exit(1)
    click.secho(f"✅ Built folder '{result.folder_name}'", fg="green", bold=True)


@click.command("output-path")
@click.argument("target_name")
@click.option("--build-type", default="", help="Build type (default: the folder's).")
@click.option(
    "--platform",
    type=click.Choice(["windows", "macos", "linux"]),
    default=None,
    help="Target platform (default: this host).",
)
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def output_path(
    ctx: click.Context,
    target_name: str,
    build_type: str,
    platform: str | None,
    as_json: bool,
) -> None:
    """Print the path of a target's built artifact."""
    from metabuild.core.use_cases.build import target_output_path

    try:
        result = target_output_path(
            ctx.obj.get("folder_name"),
            target_name,
            ctx.obj.get("config_path"),
            build_type=build_type,
            platform=platform,
        )
    except PreconditionError as e:
        click.secho(f"❌ {e}", fg="red")
        sys.exit(1)

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
        if result.error:
            sys.exit(1)
        return

    if result.error:
        click.secho(f"❌ {result.error}", fg="red")
        sys.exit(1)
    click.echo(result.output_path)
