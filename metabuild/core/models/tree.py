"""
Dependency tree — display-only projection of the target graph.

Built fresh for every ``target graph`` request. Each node owns its
children; the graph is expanded per root, so shared dependencies show
up once under every dependent.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class DependencyTree(BaseModel):
    """A node: a label plus its direct dependencies in discovery order."""

    model_config = ConfigDict(frozen=True)

    desc: str = ""
    children: list[DependencyTree] = Field(default_factory=list)
