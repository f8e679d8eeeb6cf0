"""
CMake operations — configure and build a generated folder.

Both operations spawn exactly one ``cmake`` child process and block
until it exits. They return ``(return_code, output)`` and never raise
for tool failures: a failing or missing cmake is reported through the
optional error callback and a non-zero code. Invalid generator options
are a caller bug and raise PreconditionError.

Layout of a folder on disk:

    <folder>/CMakeLists.txt
    <folder>/build/            ← cmake runs here
"""

from __future__ import annotations

import logging
import subprocess
from collections.abc import Callable
from pathlib import Path

from metabuild.core.errors import require
from metabuild.core.models.folder import GeneratorOptions

logger = logging.getLogger(__name__)

BUILD_SUBDIR = "build"
DEFAULT_CMAKE = "cmake"

# Skip compiler probing: the toolchain is already known to work
_COMPILER_LOCK_FLAGS = ("-DCMAKE_C_COMPILER_FORCED=1", "-DCMAKE_CXX_COMPILER_FORCED=1")

ErrorCallback = Callable[[str], None]
OutputCallback = Callable[[str], None]


# ═══════════════════════════════════════════════════════════════════
#  Helpers
# ═══════════════════════════════════════════════════════════════════


def build_dir(cmake_lists_folder: str | Path) -> Path:
    """The build subdirectory cmake runs in."""
    return Path(cmake_lists_folder) / BUILD_SUBDIR


def generate_args(options: GeneratorOptions) -> list[str]:
    """Arguments for ``cmake`` when configuring from the build directory."""
    args = ["..", "-G", options.generator]
    if options.platform:
        args.extend(["-A", options.platform])
    if options.toolset:
        args.extend(["-T", options.toolset])
    args.append(f"-DCMAKE_BUILD_TYPE={options.build_type}")
    args.extend(_COMPILER_LOCK_FLAGS)
    return args


def build_args(build_type: str) -> list[str]:
    """Arguments for ``cmake`` when building from the build directory."""
    return ["--build", ".", "--config", build_type]


def _report(error_callback: ErrorCallback | None, message: str) -> None:
    if error_callback is not None:
        error_callback(message)


def _stream_output(
    command: list[str],
    cwd: Path,
    on_output: OutputCallback,
) -> tuple[int, str]:
    """Run with merged stdout/stderr, handing each line to *on_output*."""
    lines: list[str] = []
    with subprocess.Popen(
        command,
        cwd=str(cwd),
        stdout=subprocess.PIPE,
        stderr=subprocess.STDOUT,
        text=True,
    ) as proc:
        assert proc.stdout is not None
        for line in proc.stdout:
            lines.append(line)
            on_output(line)
        rc = proc.wait()
    return rc, "".join(lines)


def cmake_available(cmake: str = DEFAULT_CMAKE) -> dict:
    """Check if the cmake executable is usable."""
    try:
        result = subprocess.run(
            [cmake, "--version"],
            capture_output=True,
            text=True,
            timeout=10,
        )
        if result.returncode == 0:
            first_line = result.stdout.strip().split("\n")[0]
            return {"available": True, "version": first_line.removeprefix("cmake version ").strip()}
    except (OSError, subprocess.TimeoutExpired):
        pass
    return {"available": False, "version": None}


# ═══════════════════════════════════════════════════════════════════
#  Operations
# ═══════════════════════════════════════════════════════════════════


def generate_cmake_project(
    cmake_lists_folder: str | Path,
    options: GeneratorOptions,
    error_callback: ErrorCallback | None = None,
    *,
    cmake: str = DEFAULT_CMAKE,
) -> tuple[int, str]:
    """Run the CMake configure step for a folder.

    Creates ``<folder>/build`` if needed, then runs
    ``cmake .. -G <generator> [-A ..] [-T ..] -DCMAKE_BUILD_TYPE=..`` in it.

    Args:
        cmake_lists_folder: Folder holding CMakeLists.txt.
        options: Generator options; must be valid.
        error_callback: Receives a message on folder-creation failure or
            non-zero cmake exit.
        cmake: cmake executable.

    Returns:
        ``(return_code, stdout)``. ``(-1, "")`` if nothing could be run.

    Raises:
        PreconditionError: If ``options`` is invalid.
    """
    require(options.is_valid(), "Generator options need a generator name")
    folder = build_dir(cmake_lists_folder)

    try:
        folder.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        logger.error("Can't create build folder %s: %s", folder, e)
        _report(error_callback, f"Can't create folder '{folder}'\n")
        return -1, ""

    command = [cmake, *generate_args(options)]
    logger.info("Generating %s build system in %s", options.generator, folder)
    logger.debug("Running: %s", " ".join(command))

    try:
        result = subprocess.run(
            command,
            cwd=str(folder),
            stdout=subprocess.PIPE,
            text=True,
        )
    except OSError as e:
        logger.error("Can't run %s: %s", cmake, e)
        _report(error_callback, f"Can't run '{cmake}' for folder '{folder}': {e}\n")
        return -1, ""

    output = result.stdout or ""
    if result.returncode != 0:
        logger.warning("cmake exited with code %d in %s", result.returncode, folder)
        _report(
            error_callback,
            f"Error generating build system using CMake for folder '{folder}'\n",
        )
    return result.returncode, output


def build_cmake_project(
    cmake_lists_folder: str | Path,
    options: GeneratorOptions,
    build_type: str = "",
    capture_output: bool = True,
    *,
    cmake: str = DEFAULT_CMAKE,
    on_output: OutputCallback | None = None,
) -> tuple[int, str]:
    """Build a configured folder with ``cmake --build . --config <type>``.

    Args:
        cmake_lists_folder: Folder holding CMakeLists.txt.
        options: Generator options the folder was configured with.
        build_type: Configuration to build. Empty = ``options.build_type``.
        capture_output: Capture stdout+stderr and return it instead of
            letting the child write to this process's streams.
        cmake: cmake executable.
        on_output: With ``capture_output``, receives each line as it arrives.

    Returns:
        ``(return_code, output)``; output is empty when not captured.

    Raises:
        PreconditionError: If ``options`` is invalid.
    """
    require(options.is_valid(), "Generator options need a generator name")
    folder = build_dir(cmake_lists_folder)
    config = build_type or options.build_type
    command = [cmake, *build_args(config)]
    logger.info("Building %s configuration in %s", config, folder)

    try:
        if capture_output and on_output is not None:
            rc, output = _stream_output(command, folder, on_output)
        elif capture_output:
            result = subprocess.run(
                command,
                cwd=str(folder),
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT,
                text=True,
            )
            rc, output = result.returncode, result.stdout or ""
        else:
            result = subprocess.run(command, cwd=str(folder))
            rc, output = result.returncode, ""
    except OSError as e:
        logger.error("Can't run %s in %s: %s", cmake, folder, e)
        return -1, ""

    if rc != 0:
        logger.warning("Build of %s exited with code %d", folder, rc)
    return rc, output
