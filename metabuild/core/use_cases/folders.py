"""
Folder use cases — create and list build folders, and load the
workspace/folder/catalog triple the other use cases work on.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path

from metabuild.core.config.catalog_loader import load_catalog
from metabuild.core.config.loader import ConfigError, load_workspace
from metabuild.core.models.folder import BuildFolder, GeneratorOptions
from metabuild.core.models.workspace import WorkspaceConfig
from metabuild.core.persistence.build_folder_file import (
    FolderError,
    folder_info_path,
    list_build_folders,
    load_build_folder,
    save_build_folder,
)
from metabuild.core.services.catalog import CatalogError, TargetCatalog

logger = logging.getLogger(__name__)


@dataclass
class FolderContext:
    """A loaded workspace, one of its build folders, and the catalog."""

    config: WorkspaceConfig
    folder: BuildFolder
    folder_dir: Path
    catalog: TargetCatalog


def load_folder_context(folder_name: str | None, config_path: Path | None = None) -> FolderContext:
    """Load everything needed to operate on a build folder.

    Raises:
        ConfigError: No/invalid metabuild.yml, or no folder selected.
        FolderError: The folder doesn't exist or is unreadable.
        CatalogError: The catalog is missing or inconsistent.
    """
    if not folder_name:
        raise ConfigError("No build folder selected. Use --folder or set METABUILD_FOLDER.")
    config = load_workspace(config_path)
    folder_dir = config.folder_dir(folder_name)
    folder = load_build_folder(folder_dir)
    catalog = load_catalog(config.catalog_path, config.workspace_folder)
    return FolderContext(config=config, folder=folder, folder_dir=folder_dir, catalog=catalog)


def missing_roots(ctx: FolderContext) -> list[str]:
    """Root targets of the folder that the catalog can't resolve."""
    return [name for name in ctx.folder.root_targets if ctx.catalog.find(name) is None]


@dataclass
class FolderResult:
    """Result of a folder create/list operation."""

    folders: list[str] = field(default_factory=list)
    folder: BuildFolder | None = None
    folder_dir: Path | None = None
    error: str | None = None

    def to_dict(self) -> dict:
        result: dict = {}
        if self.error:
            result["error"] = self.error
            return result
        if self.folder is not None:
            result["folder"] = self.folder.model_dump(mode="json")
            result["path"] = str(self.folder_dir)
        else:
            result["folders"] = self.folders
        return result


def create_build_folder(
    name: str,
    config_path: Path | None = None,
    generator: str | None = None,
    platform: str | None = None,
    toolset: str | None = None,
    build_type: str | None = None,
    for_bootstrap: bool = False,
) -> FolderResult:
    """Create a new, empty build folder.

    Generator options default to the workspace's ``generator`` section;
    any argument given here overrides the corresponding field.
    """
    result = FolderResult()
    try:
        config = load_workspace(config_path)
    except ConfigError as e:
        result.error = str(e)
        return result

    folder_dir = config.folder_dir(name)
    if folder_info_path(folder_dir).exists():
        result.error = f"Build folder '{name}' already exists"
        return result

    defaults = config.generator
    options = GeneratorOptions(
        generator=generator if generator is not None else defaults.generator,
        platform=platform if platform is not None else defaults.platform,
        toolset=toolset if toolset is not None else defaults.toolset,
        build_type=build_type or defaults.build_type,
    )
    if not options.is_valid():
        result.error = "A CMake generator is required (set generator.generator or pass --generator)"
        return result

    folder = BuildFolder(name=name, generator=options, for_bootstrap=for_bootstrap)
    try:
        save_build_folder(folder, folder_dir)
    except OSError as e:
        result.error = f"Can't create build folder '{name}': {e}"
        return result

    logger.info("Created build folder '%s' at %s", name, folder_dir)
    result.folder = folder
    result.folder_dir = folder_dir
    return result


def list_folders(config_path: Path | None = None) -> FolderResult:
    """Names of all build folders in the workspace."""
    result = FolderResult()
    try:
        config = load_workspace(config_path)
    except ConfigError as e:
        result.error = str(e)
        return result
    result.folders = list_build_folders(config.folders_dir)
    return result


__all__ = [
    "CatalogError",
    "ConfigError",
    "FolderContext",
    "FolderError",
    "FolderResult",
    "create_build_folder",
    "list_folders",
    "load_folder_context",
    "missing_roots",
]
