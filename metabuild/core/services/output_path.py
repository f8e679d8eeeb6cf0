"""
Target output path — where CMake will put a target's primary artifact.

Computed from the target kind, the host platform and the generator's
configuration model, without running anything. The naming here has to
agree with CMake's own defaults:

    <folder>/build/[<config>/]<prefix><name><extension>

Multi-config generators (Visual Studio, Xcode, Ninja Multi-Config) nest
output under the configuration name. Single-config generators don't,
and can only ever produce the build type they were configured with.
"""

from __future__ import annotations

import sys

from metabuild.core.errors import PreconditionError, require
from metabuild.core.models.folder import GeneratorOptions
from metabuild.core.models.target import Target, TargetKind
from metabuild.core.services.paths import join_and_normalize

BUILD_SUBDIR = "build"

PLATFORM_WINDOWS = "windows"
PLATFORM_MACOS = "macos"
PLATFORM_LINUX = "linux"

_MULTI_CONFIG_GENERATORS = frozenset({"Xcode", "Ninja Multi-Config"})
_MULTI_CONFIG_PREFIXES = ("Visual Studio",)
_SINGLE_CONFIG_GENERATORS = frozenset({"Unix Makefiles", "Ninja"})

# (prefix, extension) per platform, one table per kind that has an artifact
_EXECUTABLE_AFFIXES = {
    PLATFORM_WINDOWS: ("", ".exe"),
    PLATFORM_MACOS: ("", ""),
    PLATFORM_LINUX: ("", ""),
}
_SHARED_LIB_AFFIXES = {
    PLATFORM_WINDOWS: ("", ".dll"),
    PLATFORM_MACOS: ("lib", ".dylib"),
    PLATFORM_LINUX: ("lib", ".so"),
}
_STATIC_LIB_AFFIXES = {
    PLATFORM_WINDOWS: ("", ".lib"),
    PLATFORM_MACOS: ("lib", ".a"),
    PLATFORM_LINUX: ("lib", ".a"),
}


def host_platform() -> str:
    """Map ``sys.platform`` onto the platform names used here."""
    if sys.platform.startswith("win") or sys.platform == "cygwin":
        return PLATFORM_WINDOWS
    if sys.platform == "darwin":
        return PLATFORM_MACOS
    if sys.platform.startswith("linux"):
        return PLATFORM_LINUX
    return sys.platform


def is_multi_config(generator: str) -> bool:
    """Whether *generator* builds several configurations from one project.

    Raises:
        PreconditionError: For generators this module doesn't know.
    """
    if generator in _MULTI_CONFIG_GENERATORS or generator.startswith(_MULTI_CONFIG_PREFIXES):
        return True
    if generator in _SINGLE_CONFIG_GENERATORS:
        return False
    raise PreconditionError(f"Unrecognized CMake generator: {generator!r}")


def output_affixes(kind: TargetKind, platform: str) -> tuple[str, str]:
    """Return ``(prefix, extension)`` of the artifact for *kind* on *platform*."""
    if kind is TargetKind.EXECUTABLE:
        table = _EXECUTABLE_AFFIXES
    elif kind is TargetKind.SHARED_LIB:
        table = _SHARED_LIB_AFFIXES
    elif kind is TargetKind.STATIC_LIB:
        table = _STATIC_LIB_AFFIXES
    elif kind is TargetKind.OBJECT_LIB or kind is TargetKind.HEADER_ONLY:
        raise PreconditionError(f"Target kind {kind.value!r} has no single output file")
    else:
        raise PreconditionError(f"Unhandled target kind {kind!r}")

    affixes = table.get(platform)
    require(affixes is not None, f"Unsupported platform {platform!r} for {kind.value!r}")
    assert affixes is not None
    return affixes


def get_target_output_path(
    target: Target,
    folder_root: str,
    options: GeneratorOptions,
    build_type: str = "",
    platform: str | None = None,
) -> str:
    """Return the path of *target*'s artifact inside the build folder.

    Args:
        target: The target whose output to locate.
        folder_root: Build folder root (the directory holding CMakeLists.txt).
        options: Generator options the folder was generated with.
        build_type: Configuration to look in. Empty = ``options.build_type``.
            Single-config folders only accept their own build type.
        platform: Host platform override (default: ``host_platform()``).

    Raises:
        PreconditionError: Unknown generator, platform or kind, or a
            build type a single-config folder can't produce.
    """
    multi_config = is_multi_config(options.generator)
    if not multi_config:
        require(
            not build_type or build_type == options.build_type,
            f"Folder was generated for {options.build_type!r} with single-config "
            f"generator {options.generator!r}; can't locate {build_type!r} output",
        )

    prefix, extension = output_affixes(target.kind, platform or host_platform())

    components = [folder_root, BUILD_SUBDIR]
    if multi_config:
        components.append(build_type or options.build_type)
    components.append(f"{prefix}{target.name}{extension}")
    return join_and_normalize(*components)
