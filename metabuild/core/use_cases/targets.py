"""
Target use cases — list, add and remove a folder's root targets, and
render its dependency graph.

Unknown names are reported here, at the boundary; the tree builder and
the generator only ever see names that resolve.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path

from metabuild.core.config.loader import ConfigError
from metabuild.core.persistence.build_folder_file import FolderError, save_build_folder
from metabuild.core.services.catalog import CatalogError
from metabuild.core.services.dep_tree import build_dep_tree, render_dep_tree
from metabuild.core.use_cases.folders import (
    FolderContext,
    load_folder_context,
    missing_roots,
)

logger = logging.getLogger(__name__)


@dataclass
class TargetsResult:
    """Result of a root-target operation."""

    folder_name: str = ""
    roots: list[dict] = field(default_factory=list)
    message: str = ""
    graph: str = ""
    error: str | None = None

    def to_dict(self) -> dict:
        result: dict = {}
        if self.error:
            result["error"] = self.error
            return result
        result["folder"] = self.folder_name
        result["roots"] = self.roots
        if self.message:
            result["message"] = self.message
        if self.graph:
            result["graph"] = self.graph
        return result


def _load(folder_name: str | None, config_path: Path | None, result: TargetsResult) -> FolderContext | None:
    try:
        ctx = load_folder_context(folder_name, config_path)
    except (ConfigError, FolderError, CatalogError) as e:
        result.error = str(e)
        return None
    result.folder_name = ctx.folder.name
    return ctx


def _describe_roots(ctx: FolderContext) -> list[dict]:
    roots = []
    for name in ctx.folder.root_targets:
        spec = ctx.catalog.find(name)
        roots.append({
            "name": name,
            "display": ctx.catalog.short_name(spec) if spec else name,
            "found": spec is not None,
            "shared": name in ctx.folder.make_shared,
        })
    return roots


def list_root_targets(folder_name: str | None, config_path: Path | None = None) -> TargetsResult:
    """Root targets of a build folder, flagging ones the catalog lost."""
    result = TargetsResult()
    ctx = _load(folder_name, config_path, result)
    if ctx is None:
        return result
    result.roots = _describe_roots(ctx)
    return result


def _save(ctx: FolderContext, result: TargetsResult) -> bool:
    try:
        save_build_folder(ctx.folder, ctx.folder_dir)
    except OSError as e:
        result.error = f"Can't save build folder '{ctx.folder.name}': {e}"
        return False
    return True


def add_root_target(
    folder_name: str | None,
    target_name: str,
    shared: bool = False,
    config_path: Path | None = None,
) -> TargetsResult:
    """Add a root target (idempotent) and save the folder."""
    result = TargetsResult()
    ctx = _load(folder_name, config_path, result)
    if ctx is None:
        return result

    spec = ctx.catalog.find(target_name)
    if spec is None:
        result.error = f"Can't find target '{target_name}'"
        return result

    ctx.folder.add_root_target(ctx.catalog.qualified_name(spec), shared=shared)
    if not _save(ctx, result):
        return result
    logger.info("Added root %s to %s", spec.qualified_name, ctx.folder.name)

    result.message = (
        f"Added root target '{ctx.catalog.short_name(spec)}' "
        f"to build folder '{ctx.folder.name}'."
    )
    result.roots = _describe_roots(ctx)
    return result


def remove_root_target(
    folder_name: str | None,
    target_name: str,
    config_path: Path | None = None,
) -> TargetsResult:
    """Remove a root target and save the folder."""
    result = TargetsResult()
    ctx = _load(folder_name, config_path, result)
    if ctx is None:
        return result

    spec = ctx.catalog.find(target_name)
    if spec is None:
        result.error = f"Can't find target '{target_name}'"
        return result

    short = ctx.catalog.short_name(spec)
    if not ctx.folder.remove_root_target(ctx.catalog.qualified_name(spec)):
        result.error = f"Folder '{ctx.folder.name}' does not have root target '{short}'"
        return result

    if not _save(ctx, result):
        return result
    logger.info("Removed root %s from %s", spec.qualified_name, ctx.folder.name)

    result.message = f"Removed root target '{short}' from build folder '{ctx.folder.name}'."
    result.roots = _describe_roots(ctx)
    return result


def dependency_graph(folder_name: str | None, config_path: Path | None = None) -> TargetsResult:
    """Render the folder's dependency tree as ASCII text."""
    result = TargetsResult()
    ctx = _load(folder_name, config_path, result)
    if ctx is None:
        return result

    missing = missing_roots(ctx)
    if missing:
        result.error = f"Root target(s) not found in catalog: {', '.join(missing)}"
        return result

    tree = build_dep_tree(ctx.folder, ctx.catalog)
    result.roots = _describe_roots(ctx)
    result.graph = render_dep_tree(tree)
    return result
