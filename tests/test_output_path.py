"""
Tests for target output path resolution and the path helpers.
"""

import os

import pytest

from metabuild.core.errors import PreconditionError
from metabuild.core.models import GeneratorOptions, Target, TargetKind
from metabuild.core.services.output_path import (
    get_target_output_path,
    host_platform,
    is_multi_config,
    output_affixes,
)
from metabuild.core.services.paths import (
    as_folder_path,
    ends_with_sep,
    is_normalized,
    join_and_normalize,
    to_posix,
)

ROOT = "/ws/out/dev/"


def _target(kind: TargetKind, name: str = "app") -> Target:
    return Target(name=name, kind=kind)


class TestIsMultiConfig:
    @pytest.mark.parametrize("generator", [
        "Visual Studio 17 2022",
        "Visual Studio 16 2019",
        "Xcode",
        "Ninja Multi-Config",
    ])
    def test_multi(self, generator):
        assert is_multi_config(generator)

    @pytest.mark.parametrize("generator", ["Unix Makefiles", "Ninja"])
    def test_single(self, generator):
        assert not is_multi_config(generator)

    def test_unknown(self):
        with pytest.raises(PreconditionError, match="Unrecognized CMake generator"):
            is_multi_config("Borland Makefiles")


class TestOutputAffixes:
    @pytest.mark.parametrize("kind,platform,expected", [
        (TargetKind.EXECUTABLE, "windows", ("", ".exe")),
        (TargetKind.EXECUTABLE, "macos", ("", "")),
        (TargetKind.EXECUTABLE, "linux", ("", "")),
        (TargetKind.SHARED_LIB, "windows", ("", ".dll")),
        (TargetKind.SHARED_LIB, "macos", ("lib", ".dylib")),
        (TargetKind.SHARED_LIB, "linux", ("lib", ".so")),
        (TargetKind.STATIC_LIB, "windows", ("", ".lib")),
        (TargetKind.STATIC_LIB, "macos", ("lib", ".a")),
        (TargetKind.STATIC_LIB, "linux", ("lib", ".a")),
    ])
    def test_table(self, kind, platform, expected):
        assert output_affixes(kind, platform) == expected

    @pytest.mark.parametrize("kind", [TargetKind.OBJECT_LIB, TargetKind.HEADER_ONLY])
    def test_no_artifact(self, kind):
        with pytest.raises(PreconditionError, match="no single output file"):
            output_affixes(kind, "linux")

    def test_unknown_platform(self):
        with pytest.raises(PreconditionError, match="Unsupported platform"):
            output_affixes(TargetKind.EXECUTABLE, "haiku")


class TestGetTargetOutputPath:
    def test_single_config_executable(self):
        options = GeneratorOptions(generator="Unix Makefiles", build_type="Debug")
        path = get_target_output_path(_target(TargetKind.EXECUTABLE), ROOT, options, platform="linux")
        assert path == "/ws/out/dev/build/app"

    def test_single_config_static_lib(self):
        options = GeneratorOptions(generator="Ninja", build_type="Release")
        path = get_target_output_path(
            _target(TargetKind.STATIC_LIB, "core"), ROOT, options, "Release", platform="linux",
        )
        assert path == "/ws/out/dev/build/libcore.a"

    def test_single_config_other_build_type(self):
        options = GeneratorOptions(generator="Unix Makefiles", build_type="Debug")
        with pytest.raises(PreconditionError, match="single-config"):
            get_target_output_path(_target(TargetKind.EXECUTABLE), ROOT, options, "RelWithDebInfo", "linux")

    def test_multi_config_default_build_type(self):
        options = GeneratorOptions(generator="Visual Studio 17 2022", build_type="Debug")
        path = get_target_output_path(_target(TargetKind.EXECUTABLE), ROOT, options, platform="windows")
        assert path == join_and_normalize(ROOT, "build", "Debug", "app.exe")

    def test_multi_config_explicit_build_type(self):
        options = GeneratorOptions(generator="Xcode", build_type="Debug")
        path = get_target_output_path(
            _target(TargetKind.SHARED_LIB, "core"), ROOT, options, "RelWithDebInfo", "macos",
        )
        assert path == "/ws/out/dev/build/RelWithDebInfo/libcore.dylib"

    def test_unknown_generator(self):
        options = GeneratorOptions(generator="Borland Makefiles")
        with pytest.raises(PreconditionError):
            get_target_output_path(_target(TargetKind.EXECUTABLE), ROOT, options, platform="linux")

    def test_object_lib(self):
        options = GeneratorOptions(generator="Ninja")
        with pytest.raises(PreconditionError):
            get_target_output_path(_target(TargetKind.OBJECT_LIB), ROOT, options, platform="linux")

    def test_host_platform_default(self):
        options = GeneratorOptions(generator="Ninja")
        path = get_target_output_path(_target(TargetKind.STATIC_LIB, "core"), ROOT, options)
        prefix, ext = output_affixes(TargetKind.STATIC_LIB, host_platform())
        assert path.endswith(f"{prefix}core{ext}")


class TestPaths:
    def test_to_posix(self):
        assert to_posix("C:\\ws\\src") == "C:/ws/src"

    def test_is_normalized(self):
        assert is_normalized("/ws/src")
        assert is_normalized("/ws/src" + os.sep)
        assert is_normalized("core")
        assert not is_normalized("/ws//src")
        assert not is_normalized("/ws/./src")
        assert not is_normalized("")

    def test_ends_with_sep(self):
        assert ends_with_sep("/ws" + os.sep)
        assert not ends_with_sep("/ws")

    def test_join_and_normalize(self):
        assert join_and_normalize("/ws", "src/../lib", "core") == os.path.normpath("/ws/lib/core")

    def test_as_folder_path(self, tmp_path):
        folder = as_folder_path(str(tmp_path / "a" / ".." / "b"))
        assert folder == os.path.normpath(str(tmp_path / "b")) + os.sep
        assert as_folder_path(folder) == folder
