"""
Path helpers — one joining/normalizing discipline for the whole package.

Paths handed to the generator are native paths; everything written into
a CMakeLists.txt uses forward slashes.
"""

from __future__ import annotations

import os


def to_posix(path: str) -> str:
    """Convert a native path to forward slashes."""
    return path.replace("\\", "/")


def is_normalized(path: str) -> bool:
    """Whether *path* is already in ``os.path.normpath`` form.

    A single trailing separator is allowed (folder paths carry one).
    """
    if not path:
        return False
    stripped = path
    if len(path) > 1 and path.endswith(os.sep):
        stripped = path[:-1]
    return os.path.normpath(stripped) == stripped


def ends_with_sep(path: str) -> bool:
    return path.endswith(os.sep)


def join_and_normalize(*parts: str) -> str:
    """Join path components and normalize the result."""
    return os.path.normpath(os.path.join(*parts))


def as_folder_path(path: str) -> str:
    """Absolute, normalized path with exactly one trailing separator."""
    folder = os.path.normpath(os.path.abspath(path))
    if not folder.endswith(os.sep):
        folder += os.sep
    return folder
