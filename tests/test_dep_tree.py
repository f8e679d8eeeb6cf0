"""
Tests for dependency tree building and ASCII rendering.
"""

import io

import pytest

from metabuild.core.errors import PreconditionError
from metabuild.core.models.folder import BuildFolder
from metabuild.core.models.tree import DependencyTree
from metabuild.core.services.dep_tree import (
    TreeIndent,
    build_dep_tree,
    dump_dep_tree,
    render_dep_tree,
)


def _leaf(desc: str) -> DependencyTree:
    return DependencyTree(desc=desc)


class TestBuildDepTree:
    def test_roots_in_folder_order(self, layered_catalog):
        folder = BuildFolder(name="dev", root_targets=["local.tool", "local.app"])
        tree = build_dep_tree(folder, layered_catalog)
        assert tree.desc == "dev"
        assert [c.desc for c in tree.children] == ["tool", "app"]

    def test_children_in_declaration_order(self, layered_catalog):
        folder = BuildFolder(name="dev", root_targets=["local.app"])
        app = build_dep_tree(folder, layered_catalog).children[0]
        assert [c.desc for c in app.children] == ["gui", "platform"]
        assert [c.desc for c in app.children[0].children] == ["core"]

    def test_shared_dependency_repeated(self, layered_catalog):
        folder = BuildFolder(name="dev", root_targets=["local.app", "local.tool"])
        tree = build_dep_tree(folder, layered_catalog)
        assert tree.children[0].children[0].children[0].desc == "core"
        assert tree.children[1].children[0].desc == "core"

    def test_empty_folder(self, layered_catalog):
        tree = build_dep_tree(BuildFolder(name="dev"), layered_catalog)
        assert tree.children == []

    def test_missing_root(self, layered_catalog):
        folder = BuildFolder(name="dev", root_targets=["local.gone"])
        with pytest.raises(PreconditionError, match="local.gone"):
            build_dep_tree(folder, layered_catalog)


class TestRenderDepTree:
    def test_single_leaf(self):
        tree = DependencyTree(desc="dev", children=[_leaf("core")])
        assert render_dep_tree(tree) == "    core\n"

    def test_folder_name_not_printed(self):
        tree = DependencyTree(desc="dev", children=[_leaf("core")])
        assert "dev" not in render_dep_tree(tree)

    def test_empty(self):
        assert render_dep_tree(DependencyTree(desc="dev")) == ""

    def test_branches(self, layered_catalog):
        folder = BuildFolder(name="dev", root_targets=["local.app", "local.tool"])
        text = render_dep_tree(build_dep_tree(folder, layered_catalog))
        assert text == (
            "    app\n"
            "    +-- gui\n"
            "    |   `-- core\n"
            "    `-- platform\n"
            "    tool\n"
            "    `-- core\n"
        )

    def test_deep_last_child_continuation(self):
        tree = DependencyTree(desc="dev", children=[
            DependencyTree(desc="a", children=[
                DependencyTree(desc="b", children=[
                    DependencyTree(desc="c", children=[_leaf("d"), _leaf("e")]),
                ]),
                _leaf("f"),
            ]),
        ])
        assert render_dep_tree(tree, indent="") == (
            "a\n"
            "+-- b\n"
            "|   `-- c\n"
            "|       +-- d\n"
            "|       `-- e\n"
            "`-- f\n"
        )

    def test_writes_to_stream(self):
        tree = DependencyTree(desc="dev", children=[_leaf("x")])
        stream = io.StringIO()
        text = render_dep_tree(tree, stream=stream)
        assert stream.getvalue() == text == "    x\n"

    def test_deterministic(self, layered_catalog):
        folder = BuildFolder(name="dev", root_targets=["local.app"])
        first = render_dep_tree(build_dep_tree(folder, layered_catalog))
        second = render_dep_tree(build_dep_tree(folder, layered_catalog))
        assert first == second


class TestDumpDepTree:
    def test_uses_given_prefixes(self):
        lines: list[str] = []
        node = DependencyTree(desc="gui", children=[_leaf("core")])
        dump_dep_tree(node, TreeIndent(node="> ", children=": "), lines)
        assert lines == ["> gui\n", ": `-- core\n"]
