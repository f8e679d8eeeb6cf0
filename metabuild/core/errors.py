"""
Precondition errors — shared by the generator, the process runner and the
output path resolver.

A precondition violation means the caller handed the core something it
must never receive (invalid generator options, a define containing ``=``,
an unknown generator name...). The core refuses to proceed instead of
emitting wrong output. These are never caught inside the core.
"""

from __future__ import annotations


class PreconditionError(AssertionError):
    """Raised when a caller violates a documented precondition."""


def require(condition: bool, message: str) -> None:
    """Raise ``PreconditionError(message)`` unless *condition* holds.

    Unlike a bare ``assert`` this is not stripped under ``python -O``.
    """
    if not condition:
        raise PreconditionError(message)
