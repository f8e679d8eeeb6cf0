"""
Domain models — Pydantic types for the build engine.

All models are re-exported here for convenient access:

    from metabuild.core.models import Target, TargetKind, ProjectFolder, BuildFolder
"""

from metabuild.core.models.catalog import Catalog, TargetSpec
from metabuild.core.models.folder import BuildFolder, GeneratorOptions, ProjectFolder
from metabuild.core.models.target import (
    Define,
    PrecompiledHeader,
    ResourceCopyFolder,
    SourceGroup,
    Target,
    TargetKind,
    is_object_lib_ref,
    object_lib_ref,
)
from metabuild.core.models.template import GeneratedFile
from metabuild.core.models.tree import DependencyTree
from metabuild.core.models.workspace import WorkspaceConfig

__all__ = [
    # folder.py
    "BuildFolder",
    "GeneratorOptions",
    "ProjectFolder",
    # catalog.py
    "Catalog",
    "TargetSpec",
    # target.py
    "Define",
    "PrecompiledHeader",
    "ResourceCopyFolder",
    "SourceGroup",
    "Target",
    "TargetKind",
    "is_object_lib_ref",
    "object_lib_ref",
    # tree.py
    "DependencyTree",
    # template.py
    "GeneratedFile",
    # workspace.py
    "WorkspaceConfig",
]
