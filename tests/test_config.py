"""
Tests for configuration loading — metabuild.yml and targets.yml.
"""

import textwrap
from pathlib import Path

import pytest

from metabuild.core.config.catalog_loader import load_catalog
from metabuild.core.config.loader import (
    ConfigError,
    find_workspace_file,
    load_workspace,
)
from metabuild.core.models.target import TargetKind
from metabuild.core.services.catalog import CatalogError


class TestFindWorkspaceFile:
    def test_in_start_dir(self, tmp_path: Path):
        (tmp_path / "metabuild.yml").write_text("")
        assert find_workspace_file(tmp_path) == (tmp_path / "metabuild.yml").resolve()

    def test_walks_up(self, tmp_path: Path):
        (tmp_path / "metabuild.yml").write_text("")
        nested = tmp_path / "src" / "core"
        nested.mkdir(parents=True)
        assert find_workspace_file(nested) == (tmp_path / "metabuild.yml").resolve()

    def test_not_found(self, tmp_path: Path):
        assert find_workspace_file(tmp_path) is None


class TestLoadWorkspace:
    def test_load(self, config_path: Path, workspace: Path):
        config = load_workspace(config_path)
        assert config.config_dir == workspace
        assert config.workspace_folder == workspace
        assert config.catalog_path == workspace / "targets.yml"
        assert config.folders_dir == workspace / "data" / "build"
        assert config.generator.generator == "Unix Makefiles"

    def test_empty_file_uses_defaults(self, tmp_path: Path):
        path = tmp_path / "metabuild.yml"
        path.write_text("")
        config = load_workspace(path)
        assert config.catalog == "targets.yml"
        assert config.generator.build_type == "Debug"

    def test_auto_detect(self, workspace: Path, monkeypatch):
        monkeypatch.chdir(workspace / "src" / "core")
        config = load_workspace()
        assert config.workspace_folder == workspace

    def test_no_config(self, tmp_path: Path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        with pytest.raises(ConfigError, match="No metabuild.yml"):
            load_workspace()

    def test_explicit_missing(self, tmp_path: Path):
        with pytest.raises(ConfigError, match="not found"):
            load_workspace(tmp_path / "nope.yml")

    def test_invalid_yaml(self, tmp_path: Path):
        path = tmp_path / "metabuild.yml"
        path.write_text("generator: [unclosed\n")
        with pytest.raises(ConfigError, match="Invalid YAML"):
            load_workspace(path)

    def test_not_a_mapping(self, tmp_path: Path):
        path = tmp_path / "metabuild.yml"
        path.write_text("- a\n- b\n")
        with pytest.raises(ConfigError, match="Expected a YAML mapping"):
            load_workspace(path)

    def test_invalid_field(self, tmp_path: Path):
        path = tmp_path / "metabuild.yml"
        path.write_text("generator: [1, 2]\n")
        with pytest.raises(ConfigError, match="Invalid workspace configuration"):
            load_workspace(path)


class TestLoadCatalog:
    def test_load(self, workspace: Path):
        catalog = load_catalog(workspace / "targets.yml", workspace)
        assert len(catalog) == 3
        app = catalog.find("app")
        assert app is not None
        assert app.kind is TargetKind.EXECUTABLE
        assert app.qualified_name == "demo.app"
        assert app.defines == {"APP_NAME": "demo"}

    def test_workspace_defaults_to_catalog_dir(self, workspace: Path):
        catalog = load_catalog(workspace / "targets.yml")
        assert catalog.workspace_folder == str(workspace)

    def test_missing(self, tmp_path: Path):
        with pytest.raises(CatalogError, match="not found"):
            load_catalog(tmp_path / "targets.yml")

    def test_empty(self, tmp_path: Path):
        path = tmp_path / "targets.yml"
        path.write_text("")
        assert len(load_catalog(path)) == 0

    def test_invalid_kind(self, tmp_path: Path):
        path = tmp_path / "targets.yml"
        path.write_text(textwrap.dedent("""\
            targets:
              - name: core
                kind: module_lib
        """))
        with pytest.raises(CatalogError, match="Invalid target catalog"):
            load_catalog(path)

    def test_inconsistent(self, tmp_path: Path):
        path = tmp_path / "targets.yml"
        path.write_text(textwrap.dedent("""\
            targets:
              - name: app
                kind: executable
                deps: [missing]
        """))
        with pytest.raises(CatalogError, match="unknown target 'missing'"):
            load_catalog(path)
