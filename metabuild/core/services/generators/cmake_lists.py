"""
CMakeLists.txt generator — translate instantiated targets into CMake.

Pure function of a ProjectFolder: the same folder always produces the
same bytes, so regenerating an unchanged folder leaves the file (and
CMake's cache) untouched.

Per-target block, in this order (later lines reference variables set by
earlier ones):

    # name
    SetSourceFolders(NAME_SOURCES ...)        one per source group
    add_library / add_executable / ...        chosen by target kind
    EnableCppExceptions(...)                  compiled targets
    target_include_directories(...)           compiled targets, reversed
    target_compile_definitions(...)           compiled targets with defines
    find_library / target_link_libraries      shared libs + executables, reversed
    AddDLLCopyStep(...)                       shared libs + executables, reversed
    SetPrecompiledHeader(...)                 per source group, if configured
    add_custom_command(... copy_directory)    per resource folder

Include dirs, link libs and DLLs are stored deepest-dependency-first by
catalog instantiation; ``reverse_for_emission`` restores the order CMake
and the linker expect (dependents before dependencies).
"""

from __future__ import annotations

import logging
import os
import re
from collections.abc import Callable, Sequence
from typing import TypeVar

from metabuild.core.errors import PreconditionError, require
from metabuild.core.models.folder import ProjectFolder
from metabuild.core.models.target import Target, TargetKind, is_object_lib_ref
from metabuild.core.models.template import GeneratedFile
from metabuild.core.services.paths import (
    ends_with_sep,
    is_normalized,
    join_and_normalize,
    to_posix,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")

CMAKE_LISTS_FILE = "CMakeLists.txt"
CMAKE_MINIMUM_VERSION = "3.8"
CONFIGURATION_TYPES = ("Debug", "RelWithAsserts", "RelWithDebInfo")
HELPER_SCRIPT = "Helper.cmake"

# Relative to the workspace folder
DEFAULT_SOURCE_DIR = "src"
HELPER_SCRIPT_DIR = "scripts"

# Bootstrap placeholders, substituted when the script is relocated
PLACEHOLDER_VARS = ("WORKSPACE_FOLDER", "SRC_FOLDER", "BUILD_FOLDER")

PathFilter = Callable[[str], str]


# ═══════════════════════════════════════════════════════════════════
#  Helpers
# ═══════════════════════════════════════════════════════════════════


def reverse_for_emission(items: Sequence[T]) -> list[T]:
    """Reverse a dependency-accumulated list before writing it out."""
    return list(reversed(items))


def _escape(text: str) -> str:
    """Escape a value for a double-quoted CMake argument."""
    return text.replace("\\", "\\\\").replace('"', '\\"')


def _var_name(name: str) -> str:
    """Upper-case CMake variable stem for a target or framework name."""
    return re.sub(r"[^A-Za-z0-9_]", "_", name).upper()


def _with_sep(path: str) -> str:
    return path if path.endswith(os.sep) else path + os.sep


def source_prefix(folder: ProjectFolder) -> str:
    """Prefix recognized as framework source when virtualizing paths."""
    if folder.source_prefix:
        return _with_sep(folder.source_prefix)
    return _with_sep(join_and_normalize(folder.workspace_folder or os.sep, DEFAULT_SOURCE_DIR))


def helper_script_path(folder: ProjectFolder) -> str:
    """Absolute path of the helper script included outside bootstrap mode."""
    return join_and_normalize(folder.workspace_folder or os.sep, HELPER_SCRIPT_DIR, HELPER_SCRIPT)


def make_path_filter(folder: ProjectFolder) -> PathFilter:
    """Return the filter every emitted path goes through.

    Outside bootstrap mode it only converts to forward slashes. In
    bootstrap mode, paths under the source prefix become
    ``${SRC_FOLDER}...`` and paths under the folder root become
    ``${BUILD_FOLDER}...``; anything else stays absolute.
    """
    src_prefix = source_prefix(folder)
    root = folder.root_path

    def filter_path(path: str) -> str:
        require(is_normalized(path), f"Path is not normalized: {path!r}")
        if folder.for_bootstrap:
            if path.startswith(src_prefix):
                return "${SRC_FOLDER}" + to_posix(path[len(src_prefix):])
            if path.startswith(root):
                return "${BUILD_FOLDER}" + to_posix(path[len(root):])
        return to_posix(path)

    return filter_path


def substitute_placeholders(
    text: str,
    workspace_folder: str,
    src_folder: str,
    build_folder: str,
) -> str:
    """Fill in the bootstrap placeholders of a generated script.

    Each value is written with forward slashes and a trailing slash, as
    the virtualized paths are appended to it directly.
    """
    values = {
        "WORKSPACE_FOLDER": workspace_folder,
        "SRC_FOLDER": src_folder,
        "BUILD_FOLDER": build_folder,
    }
    for var in PLACEHOLDER_VARS:
        value = to_posix(values[var])
        if not value.endswith("/"):
            value += "/"
        text = text.replace(f"<<<{var}>>>", _escape(value))
    return text


# ═══════════════════════════════════════════════════════════════════
#  Preamble
# ═══════════════════════════════════════════════════════════════════


def _write_preamble(out: list[str], folder: ProjectFolder) -> None:
    out.append(f"cmake_minimum_required(VERSION {CMAKE_MINIMUM_VERSION})\n")
    out.append(
        f'set(CMAKE_CONFIGURATION_TYPES "{";".join(CONFIGURATION_TYPES)}" '
        'CACHE INTERNAL "Build configs")\n'
    )
    out.append(f"project({folder.solution_name})\n")
    if folder.for_bootstrap:
        for var in PLACEHOLDER_VARS:
            out.append(f'set({var} "<<<{var}>>>")\n')
        out.append(f'include("${{CMAKE_CURRENT_LIST_DIR}}/{HELPER_SCRIPT}")\n')
    else:
        out.append(f'include("{_escape(to_posix(helper_script_path(folder)))}")\n')


# ═══════════════════════════════════════════════════════════════════
#  Per-target steps
# ═══════════════════════════════════════════════════════════════════


def _write_source_groups(out: list[str], target: Target, filter_path: PathFilter) -> list[str]:
    """One source variable per group. Returns the variable names."""
    var_names: list[str] = []
    stem = _var_name(target.name) + "_SOURCES"
    for index, group in enumerate(target.source_groups):
        var_name = stem if index == 0 else f"{stem}_{index + 1}"
        var_names.append(var_name)
        out.append(f'SetSourceFolders({var_name} "{_escape(filter_path(group.root))}"\n')
        for rel_path in group.rel_files:
            out.append(f'    "{_escape(filter_path(rel_path))}"\n')
        out.append(")\n")
    return var_names


def _add_target_directive(target: Target) -> str:
    name = target.name
    kind = target.kind
    if kind is TargetKind.HEADER_ONLY:
        return f"add_custom_target({name} SOURCES\n"
    if kind is TargetKind.STATIC_LIB:
        return f"add_library({name}\n"
    if kind is TargetKind.OBJECT_LIB:
        # Objects go to the final link individually; a static archive would
        # drop exported symbols that nothing references.
        return f"add_library({name} OBJECT\n"
    if kind is TargetKind.SHARED_LIB:
        return f"add_library({name} SHARED\n"
    if kind is TargetKind.EXECUTABLE:
        return f"add_executable({name}\n"
    raise PreconditionError(f"Unhandled target kind {kind!r} for target '{name}'")


def _write_add_target(out: list[str], target: Target, source_vars: list[str]) -> None:
    out.append(_add_target_directive(target))
    for var_name in source_vars:
        out.append(f"    ${{{var_name}}}\n")
    if target.kind.is_linked:
        for lib in reverse_for_emission(target.link_libs):
            if is_object_lib_ref(lib):
                out.append(f"    {lib}\n")
    out.append(")\n")
    if target.kind is TargetKind.EXECUTABLE:
        out.append(f"set_property(TARGET {target.name} PROPERTY ENABLE_EXPORTS TRUE)\n")


def _write_include_dirs(out: list[str], target: Target, filter_path: PathFilter) -> None:
    out.append(f"target_include_directories({target.name} PRIVATE\n")
    for include_dir in reverse_for_emission(target.include_dirs):
        out.append(f'    "{_escape(filter_path(include_dir))}"\n')
    out.append(")\n")


def _write_defines(out: list[str], target: Target) -> None:
    if not target.defines:
        return
    out.append(f"target_compile_definitions({target.name} PRIVATE\n")
    for define in target.defines:
        require(
            "=" not in define.key,
            f"Define key {define.key!r} of target '{target.name}' contains '='",
        )
        require(
            "=" not in define.value,
            f"Define value {define.value!r} of target '{target.name}' contains '='",
        )
        out.append(f'    "{_escape(define.key)}={_escape(define.value)}"\n')
    out.append(")\n")


def _write_link_libraries(out: list[str], target: Target, filter_path: PathFilter) -> None:
    framework_vars: list[str] = []
    for framework in dict.fromkeys(target.frameworks):
        var_name = _var_name(framework) + "_FRAMEWORK"
        framework_vars.append(var_name)
        out.append(f"find_library({var_name} {framework})\n")

    libs = [lib for lib in reverse_for_emission(target.link_libs) if not is_object_lib_ref(lib)]
    if not libs and not framework_vars:
        return
    out.append(f"target_link_libraries({target.name} PRIVATE\n")
    for lib in libs:
        if lib.startswith("${"):
            out.append(f"    {lib}\n")
        else:
            out.append(f'    "{_escape(filter_path(lib))}"\n')
    for var_name in framework_vars:
        out.append(f"    ${{{var_name}}}\n")
    out.append(")\n")


def _write_dll_copy_step(out: list[str], target: Target, filter_path: PathFilter) -> None:
    if not target.copy_dlls:
        return
    out.append(f"AddDLLCopyStep({target.name}\n")
    for dll in reverse_for_emission(target.copy_dlls):
        out.append(f'    "{_escape(filter_path(dll))}"\n')
    out.append(")\n")


def _write_bootstrap_tool_copy(out: list[str], target: Target) -> None:
    out.append(f"add_custom_command(TARGET {target.name} POST_BUILD COMMAND\n")
    out.append(
        f"    ${{CMAKE_COMMAND}} -E copy_if_different $<TARGET_FILE:{target.name}> "
        '"${WORKSPACE_FOLDER}")\n'
    )


def _write_precompiled_header(
    out: list[str],
    target: Target,
    source_vars: list[str],
    filter_path: PathFilter,
) -> None:
    pch = target.precompiled_header
    if pch is None or not pch.include:
        return
    for var_name in source_vars:
        out.append(f"SetPrecompiledHeader({target.name} {var_name}\n")
        out.append(f'    "{_escape(filter_path(pch.generator_source))}"\n')
        out.append(f'    "{_escape(pch.include)}"\n')
        out.append(f'    "{target.name}.$<CONFIG>.pch"\n')
        out.append(")\n")


def _write_resource_copies(out: list[str], target: Target, filter_path: PathFilter) -> None:
    for folder in target.resource_copy_folders:
        out.append(f"add_custom_command(TARGET {target.name} POST_BUILD\n")
        out.append("    COMMAND ${CMAKE_COMMAND} -E copy_directory\n")
        out.append(f'        "{_escape(filter_path(folder.source))}"\n')
        out.append(f'        "${{CMAKE_CURRENT_BINARY_DIR}}/{_escape(to_posix(folder.destination))}"\n')
        out.append(")\n")


def _write_target(
    out: list[str],
    folder: ProjectFolder,
    target: Target,
    filter_path: PathFilter,
) -> None:
    out.append(f"\n# {target.name}\n")
    source_vars = _write_source_groups(out, target, filter_path)
    _write_add_target(out, target, source_vars)

    if target.kind is not TargetKind.HEADER_ONLY:
        enabled = "TRUE" if target.exceptions_enabled else "FALSE"
        out.append(f"EnableCppExceptions({target.name} {enabled})\n")
        _write_include_dirs(out, target, filter_path)
        _write_defines(out, target)

    if target.kind.is_linked:
        _write_link_libraries(out, target, filter_path)
        _write_dll_copy_step(out, target, filter_path)
        if folder.for_bootstrap and target.name == folder.bootstrap_tool:
            _write_bootstrap_tool_copy(out, target)

    _write_precompiled_header(out, target, source_vars, filter_path)
    _write_resource_copies(out, target, filter_path)


# ═══════════════════════════════════════════════════════════════════
#  Public API
# ═══════════════════════════════════════════════════════════════════


def write_cmake_lists(folder: ProjectFolder) -> str:
    """Return the CMakeLists.txt text for *folder*.

    Raises:
        PreconditionError: If the folder root is not a normalized path
            ending with a separator, a path is not normalized, or a
            define contains ``=``.
    """
    require(is_normalized(folder.root_path), f"Folder path is not normalized: {folder.root_path!r}")
    require(ends_with_sep(folder.root_path), f"Folder path must end with a separator: {folder.root_path!r}")

    filter_path = make_path_filter(folder)
    out: list[str] = []
    _write_preamble(out, folder)
    for target in folder.targets:
        _write_target(out, folder, target, filter_path)

    logger.debug(
        "Generated CMakeLists for '%s' (%d targets, bootstrap=%s)",
        folder.solution_name, len(folder.targets), folder.for_bootstrap,
    )
    return "".join(out)


def generate_cmake_lists(folder: ProjectFolder) -> GeneratedFile:
    """Wrap ``write_cmake_lists`` as a GeneratedFile rooted at the folder."""
    return GeneratedFile(
        path=CMAKE_LISTS_FILE,
        content=write_cmake_lists(folder),
    )
