from __future__ import annotations

"""Shared data structures used by the editor services.

This module is intentionally free of UI / I/O code so that the contained
objects can be reused in any context (unit-tests, CLI, GUI, etc.).
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from arborea.core.tree import Tree

__all__ = ["EditorDocument"]


@dataclass
class EditorDocument:
    """An open document in an editing session.

    Attributes
    ----------
    tree
        The in-memory node tree being edited.
    path
        File the document was opened from or last saved to, if any.
    dirty
        True when the tree changed since it was opened or saved. Editing
        services set it; :class:`DocumentService` clears it on save.
    """

    tree: Tree = field(default_factory=Tree)
    path: Optional[Path] = None
    dirty: bool = False

    @property
    def display_name(self) -> str:
        return self.path.name if self.path is not None else "Untitled"
