"""
Target model — one buildable unit.

Targets are produced by catalog instantiation and consumed by the
CMakeLists generator and the output path resolver. They are frozen:
nothing may change a target while a project is being generated.
"""

from __future__ import annotations

from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field

# Prefix of a link-lib entry that refers to another target's compiled objects
OBJECT_LIB_REF_PREFIX = "$<TARGET_OBJECTS"

# Abstract flag that turns on C++ exceptions
EXCEPTIONS_FLAG = "exceptions"


class TargetKind(StrEnum):
    """Closed set of target kinds.

    Every consumer dispatches on this with an explicit branch per member,
    so adding a member must touch the generator and the output resolver.
    """

    HEADER_ONLY = "header_only"
    STATIC_LIB = "static_lib"
    OBJECT_LIB = "object_lib"
    SHARED_LIB = "shared_lib"
    EXECUTABLE = "executable"

    @property
    def is_linked(self) -> bool:
        """Whether this kind runs a final link step (shared libs, executables)."""
        return self in (TargetKind.SHARED_LIB, TargetKind.EXECUTABLE)


class SourceGroup(BaseModel):
    """A root folder plus source files relative to it."""

    model_config = ConfigDict(frozen=True)

    root: str
    rel_files: list[str] = Field(default_factory=list)


class Define(BaseModel):
    """A private preprocessor definition (``key=value``)."""

    model_config = ConfigDict(frozen=True)

    key: str
    value: str = ""


class ResourceCopyFolder(BaseModel):
    """A folder copied next to the build output after every build."""

    model_config = ConfigDict(frozen=True)

    source: str
    destination: str


class PrecompiledHeader(BaseModel):
    """Source file that generates the PCH, and the header it precompiles."""

    model_config = ConfigDict(frozen=True)

    generator_source: str
    include: str


class Target(BaseModel):
    """A buildable unit: library, executable or header-only aggregate.

    List fields that come out of dependency resolution (``include_dirs``,
    ``link_libs``, ``copy_dlls``) are stored deepest-dependency-first;
    the generator reverses them before emission.
    """

    model_config = ConfigDict(frozen=True)

    name: str
    kind: TargetKind
    source_groups: list[SourceGroup] = Field(default_factory=list)
    include_dirs: list[str] = Field(default_factory=list)
    defines: list[Define] = Field(default_factory=list)
    link_libs: list[str] = Field(default_factory=list)
    frameworks: list[str] = Field(default_factory=list)
    copy_dlls: list[str] = Field(default_factory=list)
    resource_copy_folders: list[ResourceCopyFolder] = Field(default_factory=list)
    precompiled_header: PrecompiledHeader | None = None
    abstract_flags: list[str] = Field(default_factory=list)

    @property
    def exceptions_enabled(self) -> bool:
        return EXCEPTIONS_FLAG in self.abstract_flags


def object_lib_ref(target_name: str) -> str:
    """Link-lib entry that pulls every object of *target_name* into the link."""
    return f"{OBJECT_LIB_REF_PREFIX}:{target_name}>"


def is_object_lib_ref(lib: str) -> bool:
    """Whether a link-lib entry refers to an object library's compiled objects."""
    return lib.startswith(OBJECT_LIB_REF_PREFIX)
