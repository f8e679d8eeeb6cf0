"""
Shared test fixtures and configuration.
"""

import textwrap
from pathlib import Path
from unittest.mock import patch

import pytest

from metabuild.core.models.catalog import TargetSpec
from metabuild.core.models.target import TargetKind
from metabuild.core.services.catalog import TargetCatalog

WORKSPACE_YML = textwrap.dedent("""\
    catalog: targets.yml
    folders: data/build
    generator:
      generator: Unix Makefiles
      build_type: Debug
""")

TARGETS_YML = textwrap.dedent("""\
    targets:
      - name: core
        module: engine
        kind: static_lib
        root: src/core
        sources: [Core.cpp, Core.h]
        include_dirs: [src/core/include]
        libs: [pthread]
      - name: gui
        module: engine
        kind: static_lib
        root: src/gui
        sources: [Gui.cpp]
        include_dirs: [src/gui/include]
        deps: [core]
      - name: app
        module: demo
        kind: executable
        root: src/app
        sources: [Main.cpp]
        defines:
          APP_NAME: demo
        resources:
          - source: data/assets
            destination: assets
        flags: [exceptions]
        deps: [gui]
""")


@pytest.fixture(autouse=True)
def cmake_on_path():
    """Report cmake as installed; tests that run it mock subprocess themselves."""
    with patch(
        "metabuild.core.use_cases.build.cmake_available",
        return_value={"available": True, "version": "3.28.1"},
    ) as mock_check:
        yield mock_check


@pytest.fixture
def workspace(tmp_path: Path) -> Path:
    """A workspace with metabuild.yml, targets.yml and a few sources.

    Catalog: demo.app (executable) → engine.gui → engine.core.
    """
    root = tmp_path / "ws"
    root.mkdir()
    (root / "metabuild.yml").write_text(WORKSPACE_YML)
    (root / "targets.yml").write_text(TARGETS_YML)
    for rel in ("src/core/Core.cpp", "src/core/Core.h", "src/gui/Gui.cpp", "src/app/Main.cpp"):
        path = root / rel
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text("// source\n")
    (root / "data" / "assets").mkdir(parents=True)
    return root.resolve()


@pytest.fixture
def config_path(workspace: Path) -> Path:
    return workspace / "metabuild.yml"


def _spec(name: str, kind: TargetKind = TargetKind.STATIC_LIB, **kwargs) -> TargetSpec:
    """Shorthand for a catalog declaration in module ``local``."""
    kwargs.setdefault("root", f"src/{name}")
    kwargs.setdefault("sources", [f"{name}.cpp"])
    return TargetSpec(name=name, kind=kind, **kwargs)


@pytest.fixture
def layered_catalog() -> TargetCatalog:
    """app → (gui → core, platform); tool → core. Rooted at /ws."""
    return TargetCatalog(
        [
            _spec("core", include_dirs=["src/core/include"], libs=["z"]),
            _spec("platform", include_dirs=["src/platform"], libs=["dl", "m"]),
            _spec("gui", include_dirs=["src/gui/include"], deps=["core"]),
            _spec("app", TargetKind.EXECUTABLE, deps=["gui", "platform"]),
            _spec("tool", TargetKind.EXECUTABLE, deps=["core"]),
        ],
        workspace_folder="/ws",
    )
