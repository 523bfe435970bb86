"""Top-level package for Arborea, a hierarchical document editor.

Front-ends (GUI, CLI) should only depend on the public API exposed here
rather than importing internal modules directly.
"""

from .core.tree import Node, Tree, load_tree, new_tree  # re-export for convenience
from .core.models import EditorDocument

__all__: list[str] = [
    "EditorDocument",
    "Node",
    "Tree",
    "load_tree",
    "new_tree",
]
