from __future__ import annotations

"""Core tree model and editor services, free of any UI code."""

from .exceptions import (  # noqa: F401
    CycleError,
    InvalidArgumentError,
    InvalidTreeError,
    MalformedInputError,
    NodeHasChildrenError,
    NotAChildError,
    RootDeletionError,
    TreeError,
)
from .tree import Node, Tree, load_tree, new_tree  # noqa: F401
from .models import EditorDocument  # noqa: F401

__all__: list[str] = [
    "CycleError",
    "EditorDocument",
    "InvalidArgumentError",
    "InvalidTreeError",
    "MalformedInputError",
    "Node",
    "NodeHasChildrenError",
    "NotAChildError",
    "RootDeletionError",
    "Tree",
    "TreeError",
    "load_tree",
    "new_tree",
]
