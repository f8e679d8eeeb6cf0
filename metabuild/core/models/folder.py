"""
Folder models — generator options, the generated project and the
persisted build folder.

A BuildFolder is what the user manages (which root targets, which
generator). A ProjectFolder is what the generator consumes: the same
folder with its targets already instantiated from the catalog.
"""

from __future__ import annotations

from pydantic import BaseModel, Field

from metabuild.core.models.target import Target


class GeneratorOptions(BaseModel):
    """How CMake should generate the build system.

    ``generator`` is the CMake generator name (``-G``). Options without
    a generator are invalid and rejected by every generate/build call.
    """

    generator: str = ""
    platform: str = ""           # -A, e.g. x64
    toolset: str = ""            # -T, e.g. v142
    build_type: str = "Debug"

    def is_valid(self) -> bool:
        return bool(self.generator)


class ProjectFolder(BaseModel):
    """Everything needed to write one CMakeLists.txt.

    ``root_path`` must be absolute, normalized and end with a path
    separator; the build output lands in ``<root_path>build``.
    """

    root_path: str
    solution_name: str = "Project"
    targets: list[Target] = Field(default_factory=list)
    for_bootstrap: bool = False
    source_prefix: str = ""      # empty = <workspace_folder>/src/
    workspace_folder: str = ""
    bootstrap_tool: str = ""     # target copied into the workspace in bootstrap mode


class BuildFolder(BaseModel):
    """A persisted build folder: the root target selection plus options.

    Root targets are stored by fully qualified name, in the order they
    were added. ``make_shared`` lists roots to be built as shared libs.
    """

    name: str
    solution_name: str = ""
    root_targets: list[str] = Field(default_factory=list)
    make_shared: list[str] = Field(default_factory=list)
    generator: GeneratorOptions = Field(default_factory=GeneratorOptions)
    for_bootstrap: bool = False
    bootstrap_tool: str = ""

    @property
    def effective_solution_name(self) -> str:
        return self.solution_name or self.name

    def add_root_target(self, qualified_name: str, shared: bool = False) -> bool:
        """Add a root target. Returns False if it was already present."""
        added = False
        if qualified_name not in self.root_targets:
            self.root_targets.append(qualified_name)
            added = True
        if shared and qualified_name not in self.make_shared:
            self.make_shared.append(qualified_name)
        return added

    def remove_root_target(self, qualified_name: str) -> bool:
        """Remove a root target. Returns False if it was not present."""
        if qualified_name not in self.root_targets:
            return False
        self.root_targets.remove(qualified_name)
        if qualified_name in self.make_shared:
            self.make_shared.remove(qualified_name)
        return True
