"""
Workspace model — the settings loaded from metabuild.yml.

``workspace`` is relative to the directory holding metabuild.yml;
``catalog``, ``folders`` and ``source_prefix`` are relative to the
workspace folder.
"""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, Field

from metabuild.core.models.folder import GeneratorOptions


class WorkspaceConfig(BaseModel):
    """Root workspace settings."""

    workspace: str = "."
    catalog: str = "targets.yml"
    folders: str = "data/build"
    source_prefix: str = ""
    cmake: str = "cmake"
    generator: GeneratorOptions = Field(
        default_factory=lambda: GeneratorOptions(generator="Unix Makefiles")
    )

    # Set by the loader, not read from YAML
    config_dir: Path = Field(default_factory=Path.cwd, exclude=True)

    @property
    def workspace_folder(self) -> Path:
        return (self.config_dir / self.workspace).resolve()

    @property
    def catalog_path(self) -> Path:
        return self.workspace_folder / self.catalog

    @property
    def folders_dir(self) -> Path:
        return self.workspace_folder / self.folders

    def folder_dir(self, name: str) -> Path:
        """Directory of the build folder called *name*."""
        return self.folders_dir / name
