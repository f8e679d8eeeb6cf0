"""
Build use cases — the vertical slice from a build folder to an artifact.

    generate_folder()     catalog → Targets → CMakeLists.txt → cmake configure
    build_folder()        cmake --build
    target_output_path()  where the built artifact lands

Tool failures come back in the result (``return_code``, ``errors``),
never as exceptions. Precondition violations (e.g. asking a
single-config folder for another build type) propagate.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path

from metabuild.core.config.loader import ConfigError
from metabuild.core.models.folder import ProjectFolder
from metabuild.core.models.target import Target
from metabuild.core.persistence.build_folder_file import FolderError, write_if_changed
from metabuild.core.services.catalog import CatalogError
from metabuild.core.services.cmake_ops import (
    OutputCallback,
    build_cmake_project,
    cmake_available,
    generate_cmake_project,
)
from metabuild.core.services.generators.cmake_lists import generate_cmake_lists
from metabuild.core.services.output_path import get_target_output_path
from metabuild.core.services.paths import as_folder_path
from metabuild.core.use_cases.folders import (
    FolderContext,
    load_folder_context,
    missing_roots,
)

logger = logging.getLogger(__name__)


@dataclass
class BuildResult:
    """Result of generating or building a folder."""

    folder_name: str = ""
    folder_dir: Path | None = None
    cmake_lists_path: Path | None = None
    cmake_lists_written: bool = False
    target_count: int = 0
    return_code: int | None = None
    output: str = ""
    output_path: str = ""
    output_exists: bool = False
    errors: list[str] = field(default_factory=list)
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None and self.return_code in (None, 0)

    def to_dict(self) -> dict:
        result: dict = {}
        if self.error:
            result["error"] = self.error
            return result
        result["folder"] = self.folder_name
        result["ok"] = self.ok
        if self.cmake_lists_path is not None:
            result["cmake_lists"] = str(self.cmake_lists_path)
            result["cmake_lists_written"] = self.cmake_lists_written
            result["targets"] = self.target_count
        if self.return_code is not None:
            result["return_code"] = self.return_code
            result["output"] = self.output
        if self.output_path:
            result["output_path"] = self.output_path
            result["output_exists"] = self.output_exists
        if self.errors:
            result["errors"] = self.errors
        return result


def _load(folder_name: str | None, config_path: Path | None, result: BuildResult) -> FolderContext | None:
    try:
        ctx = load_folder_context(folder_name, config_path)
    except (ConfigError, FolderError, CatalogError) as e:
        result.error = str(e)
        return None
    result.folder_name = ctx.folder.name
    result.folder_dir = ctx.folder_dir
    return ctx


def _instantiate(ctx: FolderContext, result: BuildResult) -> list[Target] | None:
    missing = missing_roots(ctx)
    if missing:
        result.error = f"Root target(s) not found in catalog: {', '.join(missing)}"
        return None
    try:
        return ctx.catalog.instantiate(ctx.folder.root_targets, ctx.folder.make_shared)
    except CatalogError as e:
        result.error = str(e)
        return None


def _require_cmake(ctx: FolderContext, result: BuildResult) -> bool:
    cli = cmake_available(ctx.config.cmake)
    if not cli.get("available"):
        result.error = f"cmake CLI not available ('{ctx.config.cmake}')"
        return False
    logger.debug("Using cmake %s", cli["version"])
    return True


def make_project_folder(ctx: FolderContext, targets: list[Target]) -> ProjectFolder:
    """The generator's view of a loaded build folder."""
    source_prefix = ""
    if ctx.config.source_prefix:
        source_prefix = as_folder_path(str(ctx.config.workspace_folder / ctx.config.source_prefix))
    return ProjectFolder(
        root_path=as_folder_path(str(ctx.folder_dir)),
        solution_name=ctx.folder.effective_solution_name,
        targets=targets,
        for_bootstrap=ctx.folder.for_bootstrap,
        source_prefix=source_prefix,
        workspace_folder=str(ctx.config.workspace_folder),
        bootstrap_tool=ctx.folder.bootstrap_tool,
    )


def generate_folder(
    folder_name: str | None,
    config_path: Path | None = None,
    run_cmake: bool = True,
) -> BuildResult:
    """Write the folder's CMakeLists.txt and run the CMake configure step.

    The file is only rewritten when its content changes.

    Args:
        folder_name: Build folder to generate.
        config_path: Explicit metabuild.yml (default: search upward).
        run_cmake: If False, only write CMakeLists.txt.
    """
    result = BuildResult()
    ctx = _load(folder_name, config_path, result)
    if ctx is None:
        return result

    targets = _instantiate(ctx, result)
    if targets is None:
        return result

    generated = generate_cmake_lists(make_project_folder(ctx, targets))
    cmake_lists_path = ctx.folder_dir / generated.path
    result.cmake_lists_path = cmake_lists_path
    result.target_count = len(targets)
    result.cmake_lists_written = write_if_changed(cmake_lists_path, generated.content)
    if result.cmake_lists_written:
        logger.info("Wrote %s (%d targets)", cmake_lists_path, len(targets))
    else:
        logger.info("%s is up to date", cmake_lists_path)

    if not run_cmake:
        return result
    if not _require_cmake(ctx, result):
        return result

    rc, output = generate_cmake_project(
        ctx.folder_dir,
        ctx.folder.generator,
        lambda message: result.errors.append(message.rstrip()),
        cmake=ctx.config.cmake,
    )
    result.return_code = rc
    result.output = output
    return result


def build_folder(
    folder_name: str | None,
    config_path: Path | None = None,
    build_type: str = "",
    capture_output: bool = True,
    on_output: OutputCallback | None = None,
) -> BuildResult:
    """Run ``cmake --build`` for a generated folder."""
    result = BuildResult()
    ctx = _load(folder_name, config_path, result)
    if ctx is None:
        return result
    if not _require_cmake(ctx, result):
        return result

    rc, output = build_cmake_project(
        ctx.folder_dir,
        ctx.folder.generator,
        build_type,
        capture_output,
        cmake=ctx.config.cmake,
        on_output=on_output,
    )
    result.return_code = rc
    result.output = output
    if rc != 0:
        result.errors.append(f"Build failed for folder '{ctx.folder.name}' (exit code {rc})")
    return result


def target_output_path(
    folder_name: str | None,
    target_name: str,
    config_path: Path | None = None,
    build_type: str = "",
    platform: str | None = None,
) -> BuildResult:
    """Locate the artifact a folder produces for one of its targets.

    Raises:
        PreconditionError: If the generator, platform or target kind has no
            known output naming, or the build type can't exist in the folder.
    """
    result = BuildResult()
    ctx = _load(folder_name, config_path, result)
    if ctx is None:
        return result

    spec = ctx.catalog.find(target_name)
    if spec is None:
        result.error = f"Can't find target '{target_name}'"
        return result

    targets = _instantiate(ctx, result)
    if targets is None:
        return result

    target = next((t for t in targets if t.name == ctx.catalog.short_name(spec)), None)
    if target is None:
        result.error = f"Target '{target_name}' is not built by folder '{ctx.folder.name}'"
        return result

    result.output_path = get_target_output_path(
        target,
        str(ctx.folder_dir),
        ctx.folder.generator,
        build_type,
        platform,
    )
    result.output_exists = Path(result.output_path).exists()
    return result
