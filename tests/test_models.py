"""
Tests for domain models — targets, folders, catalog declarations.
"""

import pytest
from pydantic import ValidationError

from metabuild.core.models import (
    BuildFolder,
    Define,
    GeneratorOptions,
    Target,
    TargetKind,
    TargetSpec,
    WorkspaceConfig,
    is_object_lib_ref,
    object_lib_ref,
)


class TestTargetKind:
    def test_linked_kinds(self):
        assert TargetKind.SHARED_LIB.is_linked
        assert TargetKind.EXECUTABLE.is_linked

    def test_unlinked_kinds(self):
        assert not TargetKind.HEADER_ONLY.is_linked
        assert not TargetKind.STATIC_LIB.is_linked
        assert not TargetKind.OBJECT_LIB.is_linked

    def test_from_yaml_value(self):
        assert TargetKind("object_lib") is TargetKind.OBJECT_LIB


class TestTarget:
    def test_defaults(self):
        t = Target(name="core", kind=TargetKind.STATIC_LIB)
        assert t.source_groups == []
        assert t.link_libs == []
        assert t.precompiled_header is None
        assert not t.exceptions_enabled

    def test_exceptions_flag(self):
        t = Target(name="app", kind=TargetKind.EXECUTABLE, abstract_flags=["exceptions"])
        assert t.exceptions_enabled

    def test_frozen(self):
        t = Target(name="core", kind=TargetKind.STATIC_LIB)
        with pytest.raises(ValidationError):
            t.name = "other"

    def test_define_default_value(self):
        assert Define(key="NDEBUG").value == ""


class TestObjectLibRef:
    def test_ref_format(self):
        assert object_lib_ref("objs") == "$<TARGET_OBJECTS:objs>"

    def test_is_ref(self):
        assert is_object_lib_ref(object_lib_ref("objs"))
        assert not is_object_lib_ref("objs")
        assert not is_object_lib_ref("${OPENGL_LIBRARY}")


class TestGeneratorOptions:
    def test_invalid_without_generator(self):
        assert not GeneratorOptions().is_valid()

    def test_valid(self):
        options = GeneratorOptions(generator="Ninja")
        assert options.is_valid()
        assert options.build_type == "Debug"


class TestBuildFolder:
    def test_add_root_target(self):
        folder = BuildFolder(name="dev")
        assert folder.add_root_target("local.app") is True
        assert folder.root_targets == ["local.app"]

    def test_add_is_idempotent(self):
        folder = BuildFolder(name="dev")
        folder.add_root_target("local.app")
        assert folder.add_root_target("local.app") is False
        assert folder.root_targets == ["local.app"]

    def test_add_keeps_order(self):
        folder = BuildFolder(name="dev")
        folder.add_root_target("local.b")
        folder.add_root_target("local.a")
        assert folder.root_targets == ["local.b", "local.a"]

    def test_add_shared(self):
        folder = BuildFolder(name="dev")
        folder.add_root_target("local.core", shared=True)
        assert folder.make_shared == ["local.core"]

    def test_remove_root_target(self):
        folder = BuildFolder(name="dev")
        folder.add_root_target("local.core", shared=True)
        assert folder.remove_root_target("local.core") is True
        assert folder.root_targets == []
        assert folder.make_shared == []

    def test_remove_missing(self):
        folder = BuildFolder(name="dev")
        assert folder.remove_root_target("local.core") is False

    def test_solution_name_defaults_to_folder_name(self):
        assert BuildFolder(name="dev").effective_solution_name == "dev"
        assert BuildFolder(name="dev", solution_name="Game").effective_solution_name == "Game"


class TestTargetSpec:
    def test_defaults(self):
        s = TargetSpec(name="core")
        assert s.module == "local"
        assert s.kind is TargetKind.STATIC_LIB
        assert s.qualified_name == "local.core"

    def test_defines_are_stringified(self):
        s = TargetSpec(name="core", defines={"LEVEL": 3, "ENABLED": True, "FLAG": None})
        assert s.defines == {"LEVEL": "3", "ENABLED": "True", "FLAG": ""}

    def test_unknown_kind_rejected(self):
        with pytest.raises(ValidationError):
            TargetSpec(name="core", kind="module_lib")


class TestWorkspaceConfig:
    def test_defaults(self, tmp_path):
        config = WorkspaceConfig(config_dir=tmp_path)
        assert config.generator.generator == "Unix Makefiles"
        assert config.cmake == "cmake"
        assert config.workspace_folder == tmp_path.resolve()
        assert config.catalog_path == tmp_path.resolve() / "targets.yml"

    def test_relative_workspace(self, tmp_path):
        (tmp_path / "repo").mkdir()
        config = WorkspaceConfig(config_dir=tmp_path / "tools", workspace="../repo")
        assert config.workspace_folder == (tmp_path / "repo").resolve()
        assert config.folder_dir("dev") == (tmp_path / "repo").resolve() / "data" / "build" / "dev"
