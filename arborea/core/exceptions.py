from __future__ import annotations

"""Tree exception classes.

Every structural or codec failure raised by :mod:`arborea.core` derives from
:class:`TreeError`. These are programming or data errors, not transient
faults: they are raised synchronously to the immediate caller and the core
never retries or recovers on its own.
"""

from typing import Optional


__all__ = [
    "TreeError",
    "MalformedInputError",
    "InvalidTreeError",
    "InvalidArgumentError",
    "CycleError",
    "NotAChildError",
    "NodeHasChildrenError",
    "RootDeletionError",
]


class TreeError(Exception):
    """Base exception for all tree-related errors."""

    def __init__(self, message: str, node_id: Optional[int] = None,
                 cause: Optional[Exception] = None) -> None:
        super().__init__(message)
        self.node_id = node_id
        self.cause = cause

    def __str__(self) -> str:
        if self.node_id is not None:
            return f"[Node: {self.node_id}] {super().__str__()}"
        return super().__str__()


class MalformedInputError(TreeError, ValueError):
    """Raised when serialized text is not syntactically valid JSON."""
    pass


class InvalidTreeError(TreeError, ValueError):
    """Raised when parsed data does not describe a valid tree.

    This covers an empty or non-list document, a missing id-0 root,
    duplicate ids, dangling id references and inconsistent parent/children
    links. ``problems`` lists every issue found, not only the first.
    """

    def __init__(self, message: str, node_id: Optional[int] = None,
                 problems: Optional[list[str]] = None,
                 cause: Optional[Exception] = None) -> None:
        super().__init__(message, node_id, cause)
        self.problems = problems or []


class InvalidArgumentError(TreeError, TypeError):
    """Raised when an operation receives a value of the wrong kind.

    Besides non-node values this includes nodes owned by another tree and
    nodes that have already been deleted.
    """
    pass


class CycleError(TreeError):
    """Raised when an attach would make a node its own ancestor."""
    pass


class NotAChildError(TreeError):
    """Raised when removing a node that is not a child of the receiver."""
    pass


class NodeHasChildrenError(TreeError):
    """Raised when a non-recursive delete targets a node with children."""
    pass


class RootDeletionError(TreeError):
    """Raised when a delete targets the root node."""
    pass
