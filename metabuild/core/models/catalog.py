"""
Catalog models — target declarations as written in targets.yml.

A TargetSpec is the declaration; catalog instantiation turns it (plus
its dependencies) into a concrete Target with absolute paths and
accumulated include dirs, link libs and DLLs.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field, field_validator

from metabuild.core.models.target import PrecompiledHeader, ResourceCopyFolder, TargetKind

DEFAULT_MODULE = "local"


class TargetSpec(BaseModel):
    """One entry of targets.yml.

    Paths are relative to the workspace folder. ``include_dirs`` are
    public (dependents see them too); ``private_include_dirs`` are not.
    """

    name: str
    module: str = DEFAULT_MODULE
    kind: TargetKind = TargetKind.STATIC_LIB
    description: str = ""

    root: str = ""
    sources: list[str] = Field(default_factory=list)
    include_dirs: list[str] = Field(default_factory=list)
    private_include_dirs: list[str] = Field(default_factory=list)
    defines: dict[str, str] = Field(default_factory=dict)
    libs: list[str] = Field(default_factory=list)
    frameworks: list[str] = Field(default_factory=list)
    dlls: list[str] = Field(default_factory=list)
    resources: list[ResourceCopyFolder] = Field(default_factory=list)
    precompiled_header: PrecompiledHeader | None = None
    flags: list[str] = Field(default_factory=list)
    deps: list[str] = Field(default_factory=list)

    @field_validator("defines", mode="before")
    @classmethod
    def _stringify_defines(cls, value: Any) -> Any:
        # YAML turns `FOO: 1` into an int
        if isinstance(value, dict):
            return {str(k): "" if v is None else str(v) for k, v in value.items()}
        return value

    @property
    def qualified_name(self) -> str:
        return f"{self.module}.{self.name}"


class Catalog(BaseModel):
    """Root of targets.yml."""

    targets: list[TargetSpec] = Field(default_factory=list)
