"""
Target catalog — name lookup, dependency trees and instantiation.

The catalog answers three questions for the rest of the engine:

    find(name)            which declaration does a user-supplied name mean?
    dependency_subtree()  what does a root pull in (for ``target graph``)?
    instantiate(roots)    which concrete Targets does a build folder need?

Instantiation order matters. Every list that comes out of dependency
resolution is stored deepest-dependency-first (post-order), and the
CMakeLists generator reverses it on emission:

    app → gui → core        link_libs stored:   [core, gui]
                            link_libs emitted:  [gui, core]
"""

from __future__ import annotations

import logging
import os
from collections.abc import Iterable

from metabuild.core.models.catalog import TargetSpec
from metabuild.core.models.target import (
    Define,
    PrecompiledHeader,
    ResourceCopyFolder,
    SourceGroup,
    Target,
    TargetKind,
    object_lib_ref,
)
from metabuild.core.models.tree import DependencyTree
from metabuild.core.services.paths import join_and_normalize

logger = logging.getLogger(__name__)


class CatalogError(Exception):
    """Raised when the catalog is inconsistent or a name can't be resolved."""


class TargetCatalog:
    """In-memory catalog of target declarations.

    Dependencies are validated on construction: every ``deps`` entry must
    resolve, executables can't be depended on, and cycles are rejected.
    """

    def __init__(self, specs: Iterable[TargetSpec], workspace_folder: str = ".") -> None:
        self.workspace_folder = os.path.abspath(workspace_folder)
        self._specs: dict[str, TargetSpec] = {}
        for spec in specs:
            if spec.qualified_name in self._specs:
                raise CatalogError(f"Duplicate target '{spec.qualified_name}'")
            self._specs[spec.qualified_name] = spec
        self._validate()

    def __len__(self) -> int:
        return len(self._specs)

    def __iter__(self):
        return iter(self._specs.values())

    # ── Lookup ──────────────────────────────────────────────────────

    def find(self, name: str) -> TargetSpec | None:
        """Resolve a qualified (``module.name``) or unambiguous short name."""
        if name in self._specs:
            return self._specs[name]
        matches = [s for s in self._specs.values() if s.name == name]
        if len(matches) == 1:
            return matches[0]
        if len(matches) > 1:
            logger.warning(
                "Target name '%s' is ambiguous: %s",
                name, ", ".join(m.qualified_name for m in matches),
            )
        return None

    def qualified_name(self, spec: TargetSpec) -> str:
        return spec.qualified_name

    def short_name(self, spec: TargetSpec) -> str:
        """Short display name: the bare name unless another module reuses it.

        Also the CMake target name, so it must be unique per catalog.
        """
        clashes = sum(1 for s in self._specs.values() if s.name == spec.name)
        return spec.name if clashes == 1 else spec.qualified_name

    def _resolve_dep(self, spec: TargetSpec, dep_name: str) -> TargetSpec:
        # Unqualified deps prefer the dependent's own module
        dep = self._specs.get(f"{spec.module}.{dep_name}") or self.find(dep_name)
        if dep is None:
            raise CatalogError(
                f"Target '{spec.qualified_name}' depends on unknown target '{dep_name}'"
            )
        return dep

    # ── Validation ──────────────────────────────────────────────────

    def _validate(self) -> None:
        visiting: set[str] = set()
        done: set[str] = set()

        def visit(spec: TargetSpec, chain: list[str]) -> None:
            key = spec.qualified_name
            if key in done:
                return
            if key in visiting:
                cycle = " -> ".join([*chain, key])
                raise CatalogError(f"Dependency cycle: {cycle}")
            visiting.add(key)
            for dep_name in spec.deps:
                dep = self._resolve_dep(spec, dep_name)
                if dep.kind is TargetKind.EXECUTABLE:
                    raise CatalogError(
                        f"Target '{key}' can't depend on executable '{dep.qualified_name}'"
                    )
                visit(dep, [*chain, key])
            visiting.discard(key)
            done.add(key)

        for spec in self._specs.values():
            visit(spec, [])

    # ── Dependency tree ─────────────────────────────────────────────

    def dependency_subtree(self, spec: TargetSpec) -> DependencyTree:
        """Fully expanded tree below *spec*, children in declaration order."""
        return DependencyTree(
            desc=self.short_name(spec),
            children=[
                self.dependency_subtree(self._resolve_dep(spec, dep_name))
                for dep_name in spec.deps
            ],
        )

    # ── Instantiation ───────────────────────────────────────────────

    def _post_order(self, roots: Iterable[TargetSpec]) -> list[TargetSpec]:
        """Roots and their dependencies, each after everything it depends on."""
        ordered: dict[str, TargetSpec] = {}

        def visit(spec: TargetSpec) -> None:
            if spec.qualified_name in ordered:
                return
            for dep_name in spec.deps:
                visit(self._resolve_dep(spec, dep_name))
            ordered[spec.qualified_name] = spec

        for root in roots:
            visit(root)
        return list(ordered.values())

    def _abs(self, path: str) -> str:
        return join_and_normalize(self.workspace_folder, path)

    def _abs_folder(self, path: str) -> str:
        folder = self._abs(path)
        return folder if folder.endswith(os.sep) else folder + os.sep

    def _instantiate_one(self, spec: TargetSpec, kind: TargetKind) -> Target:
        deps = self._post_order(
            [self._resolve_dep(spec, dep_name) for dep_name in spec.deps]
        )

        include_dirs: list[str] = []
        for dep in deps:
            include_dirs.extend(self._abs(d) for d in dep.include_dirs)
        include_dirs.extend(self._abs(d) for d in spec.include_dirs)
        include_dirs.extend(self._abs(d) for d in spec.private_include_dirs)

        # Raw libs first, dependency targets last; both reversed on emission
        raw_libs: list[str] = []
        for owner in [*deps, spec]:
            raw_libs.extend(reversed(owner.libs))
        dep_refs: list[str] = []
        for dep in deps:
            if dep.kind is TargetKind.OBJECT_LIB:
                dep_refs.append(object_lib_ref(self.short_name(dep)))
            elif dep.kind in (TargetKind.STATIC_LIB, TargetKind.SHARED_LIB):
                dep_refs.append(self.short_name(dep))

        copy_dlls: list[str] = []
        frameworks: list[str] = []
        for owner in [*deps, spec]:
            copy_dlls.extend(self._abs(d) for d in owner.dlls)
            frameworks.extend(owner.frameworks)

        source_groups = []
        if spec.sources:
            source_groups.append(
                SourceGroup(root=self._abs_folder(spec.root), rel_files=list(spec.sources))
            )

        pch = None
        if spec.precompiled_header is not None:
            pch = PrecompiledHeader(
                generator_source=self._abs(spec.precompiled_header.generator_source),
                include=spec.precompiled_header.include,
            )

        return Target(
            name=self.short_name(spec),
            kind=kind,
            source_groups=source_groups,
            include_dirs=list(dict.fromkeys(include_dirs)),
            defines=[Define(key=k, value=v) for k, v in spec.defines.items()],
            link_libs=list(dict.fromkeys([*raw_libs, *dep_refs])),
            frameworks=list(dict.fromkeys(frameworks)),
            copy_dlls=list(dict.fromkeys(copy_dlls)),
            resource_copy_folders=[
                ResourceCopyFolder(source=self._abs(r.source), destination=r.destination)
                for r in spec.resources
            ],
            precompiled_header=pch,
            abstract_flags=list(spec.flags),
        )

    def instantiate(
        self,
        root_names: Iterable[str],
        make_shared: Iterable[str] = (),
    ) -> list[Target]:
        """Concrete Targets for a set of roots, dependencies first.

        Static-lib roots listed in *make_shared* are built as shared libs.

        Raises:
            CatalogError: If a root name doesn't resolve.
        """
        roots: list[TargetSpec] = []
        for name in root_names:
            spec = self.find(name)
            if spec is None:
                raise CatalogError(f"Can't find target '{name}'")
            roots.append(spec)

        shared = {s.qualified_name for s in (self.find(n) for n in make_shared) if s}

        targets = []
        for spec in self._post_order(roots):
            kind = spec.kind
            if kind is TargetKind.STATIC_LIB and spec.qualified_name in shared:
                kind = TargetKind.SHARED_LIB
            targets.append(self._instantiate_one(spec, kind))

        logger.debug("Instantiated %d targets from %d roots", len(targets), len(roots))
        return targets
