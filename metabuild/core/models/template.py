"""
Generated file model — what the CMakeLists generator hands back.
"""

from __future__ import annotations

from pydantic import BaseModel


class GeneratedFile(BaseModel):
    """Generator output: ``path`` is relative to the build folder root."""

    path: str
    content: str
