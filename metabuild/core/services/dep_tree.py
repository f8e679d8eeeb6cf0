"""
Dependency tree — build and render what a build folder will produce.

Rendering format (each root at a fixed indent, no branch character):

    app
    +-- gui
    |   `-- core
    `-- platform
    tool

Children keep the order they were discovered in; nothing is sorted.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TextIO

from metabuild.core.errors import require
from metabuild.core.models.folder import BuildFolder
from metabuild.core.models.tree import DependencyTree
from metabuild.core.services.catalog import TargetCatalog

logger = logging.getLogger(__name__)

DEFAULT_INDENT = "    "

_BRANCH = "+-- "
_BRANCH_CONTINUE = "|   "
_LAST_BRANCH = "`-- "
_LAST_BRANCH_CONTINUE = "    "


@dataclass(frozen=True)
class TreeIndent:
    """Prefix for a node's own line, and for the lines of its children."""

    node: str
    children: str


def build_dep_tree(folder: BuildFolder, catalog: TargetCatalog) -> DependencyTree:
    """Tree whose top-level children are the folder's root targets, in order.

    Raises:
        PreconditionError: If a root target doesn't resolve. Callers report
            unknown roots before asking for the tree.
    """
    children = []
    for name in folder.root_targets:
        spec = catalog.find(name)
        require(spec is not None, f"Root target '{name}' is not in the catalog")
        assert spec is not None
        children.append(catalog.dependency_subtree(spec))
    logger.debug("Built dependency tree for '%s' (%d roots)", folder.name, len(children))
    return DependencyTree(desc=folder.name, children=children)


def dump_dep_tree(node: DependencyTree, indent: TreeIndent, lines: list[str]) -> None:
    """Append *node* and its subtree to *lines*."""
    lines.append(f"{indent.node}{node.desc}\n")
    count = len(node.children)
    for i, child in enumerate(node.children):
        if i + 1 < count:
            child_indent = TreeIndent(
                node=indent.children + _BRANCH,
                children=indent.children + _BRANCH_CONTINUE,
            )
        else:
            child_indent = TreeIndent(
                node=indent.children + _LAST_BRANCH,
                children=indent.children + _LAST_BRANCH_CONTINUE,
            )
        dump_dep_tree(child, child_indent, lines)


def render_dep_tree(
    tree: DependencyTree,
    stream: TextIO | None = None,
    indent: str = DEFAULT_INDENT,
) -> str:
    """Render every top-level child of *tree* as an ASCII tree.

    The tree's own ``desc`` (the folder name) is not printed; callers
    print their own heading. Written to *stream* if given, and returned.
    """
    lines: list[str] = []
    root_indent = TreeIndent(node=indent, children=indent)
    for root in tree.children:
        dump_dep_tree(root, root_indent, lines)
    text = "".join(lines)
    if stream is not None:
        stream.write(text)
    return text
