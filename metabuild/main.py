"""
metabuild — CLI entrypoint.

Usage:
    python -m metabuild.main --help
    metabuild folder create dev
    metabuild --folder dev target add app
    metabuild --folder dev generate
    metabuild --folder dev build
"""

from __future__ import annotations

from pathlib import Path

import click

from metabuild import __version__
from metabuild.core.observability.logging_config import resolve_level, setup_logging_from_env


@click.group()
@click.version_option(version=__version__, prog_name="metabuild")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output.")
@click.option("--quiet", "-q", is_flag=True, help="Suppress non-essential output.")
@click.option("--debug", is_flag=True, help="Enable debug logging (very verbose).")
@click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(exists=False),
    default=None,
    help="Path to metabuild.yml (default: auto-detect).",
)
@click.option(
    "--folder",
    "-f",
    "folder_name",
    envvar="METABUILD_FOLDER",
    default=None,
    help="Build folder to operate on (default: $METABUILD_FOLDER).",
)
@click.pass_context
def cli(
    ctx: click.Context,
    verbose: bool,
    quiet: bool,
    debug: bool,
    config_path: str | None,
    folder_name: str | None,
) -> None:
    """metabuild — generate and build CMake projects from a target catalog."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["quiet"] = quiet
    ctx.obj["debug"] = debug
    ctx.obj["config_path"] = Path(config_path) if config_path else None
    ctx.obj["folder_name"] = folder_name

    # ── Logging setup (once, at process start) ──────────────────
    setup_logging_from_env(
        resolve_level(debug=debug, verbose=verbose, quiet=quiet),
        quiet_third_party=not debug,
    )


# ── Register sub-commands from metabuild/ui/cli/ ──────────────────

from metabuild.ui.cli.build import build, generate, output_path  # noqa: E402
from metabuild.ui.cli.folder import folder  # noqa: E402
from metabuild.ui.cli.target import target  # noqa: E402

cli.add_command(folder)
cli.add_command(target)
cli.add_command(generate)
cli.add_command(build)
cli.add_command(output_path)


if __name__ == "__main__":
    cli()
