from __future__ import annotations

"""Service layer for structural edits on an in-memory document tree.

This module provides a UI-agnostic, testable service that wraps the tree
operations the editor surface needs (adding and deleting options, renaming,
moving nodes, building the navigation path).

Scope and guarantees:
- Operates purely in-memory on a Tree or EditorDocument, no file I/O nor UI imports.
- Invalid operations return OperationResult(success=False, ...) with clear
  messaging, never raise.
- A failed operation leaves the tree unchanged.

Examples
--------
Basic usage:

    service = StructureEditingService()
    result = service.add_child(document, parent_id=0, title="Chapter 1")
    if not result.success:
        print(result.message)

"""

from dataclasses import dataclass
import logging
from typing import Any, Dict, List, Optional, Tuple, Union

from arborea.config import ConfigManager
from arborea.core.exceptions import CycleError, NodeHasChildrenError, RootDeletionError
from arborea.core.models import EditorDocument
from arborea.core.tree import Node, Tree


__all__ = ["OperationResult", "StructureEditingService"]

logger = logging.getLogger(__name__)

Target = Union[Tree, EditorDocument]


@dataclass(frozen=True)
class OperationResult:
    """Result of a structural editing operation.

    Attributes
    ----------
    success
        Whether the operation completed successfully.
    message
        Human-readable summary suitable for logs or UI display.
    details
        Optional structured details for diagnostics or caller logic.
    """
    success: bool
    message: str
    details: Optional[Dict[str, Any]] = None


class StructureEditingService:
    """Encapsulates structural edit operations on a document tree.

    Every method accepts either a bare :class:`Tree` or an
    :class:`EditorDocument`; in the latter case successful edits mark the
    document dirty.

    Parameters
    ----------
    new_node_title
        Title given to nodes created without one. Defaults to the
        ``new_node_title`` entry of the editor configuration.
    """

    def __init__(self, new_node_title: Optional[str] = None) -> None:
        if new_node_title is None:
            new_node_title = ConfigManager().get_editor_config().get("new_node_title", "")
        self._new_node_title = new_node_title

    # -------------------------------------------------------------------------
    # Public API
    # -------------------------------------------------------------------------

    def add_child(
        self,
        target: Target,
        parent_id: int,
        title: Optional[str] = None,
        content: str = "",
    ) -> OperationResult:
        """Create a node and append it to the node ``parent_id``."""
        logger.info("Edit: add_child parent=%s", parent_id)
        tree = self._tree_of(target)
        parent = self._find(tree, parent_id)
        if parent is None:
            logger.warning("Edit FAIL: add_child parent_not_found parent=%s", parent_id)
            return OperationResult(False, f"Node not found for id '{parent_id}'.", {"node_id": parent_id})

        node = parent.create_child(self._new_node_title if title is None else title, content)
        self._mark_dirty(target)
        logger.info("Edit OK: add_child parent=%s node=%d", parent_id, node.id)
        return OperationResult(True, "Added option.", {"node_id": node.id, "parent_id": parent.id})

    def update_node(
        self,
        target: Target,
        node_id: int,
        title: Optional[str] = None,
        content: Optional[str] = None,
    ) -> OperationResult:
        """Set the title and/or content of a node. ``None`` keeps the current value."""
        logger.info("Edit: update_node node=%s", node_id)
        tree = self._tree_of(target)
        node = self._find(tree, node_id)
        if node is None:
            logger.warning("Edit FAIL: update_node node_not_found node=%s", node_id)
            return OperationResult(False, f"Node not found for id '{node_id}'.", {"node_id": node_id})

        changed = []
        if title is not None and title != node.title:
            node.title = title
            changed.append("title")
        if content is not None and content != node.content:
            node.content = content
            changed.append("content")
        if not changed:
            logger.info("Edit noop: update_node node=%s", node_id)
            return OperationResult(True, "Nothing to update.", {"node_id": node_id, "changed": []})

        self._mark_dirty(target)
        logger.info("Edit OK: update_node node=%s fields=%s", node_id, ",".join(changed))
        return OperationResult(True, "Updated option.", {"node_id": node_id, "changed": changed})

    def delete_node(self, target: Target, node_id: int, recursive: bool = False) -> OperationResult:
        """Delete a node, optionally with all its descendants.

        On success ``details["parent_id"]`` names the node the editor should
        navigate back to and ``details["deleted"]`` lists the removed ids.
        """
        logger.info("Edit: delete_node node=%s recursive=%s", node_id, recursive)
        tree = self._tree_of(target)
        node = self._find(tree, node_id)
        if node is None:
            logger.warning("Edit FAIL: delete_node node_not_found node=%s", node_id)
            return OperationResult(False, f"Node not found for id '{node_id}'.", {"node_id": node_id})

        parent = node.parent
        deleted = [node.id]
        deleted.extend(n.id for n in node.descendants())
        try:
            tree.delete_node(node, recursive=recursive)
        except RootDeletionError:
            logger.warning("Edit FAIL: delete_node root node=%s", node_id)
            return OperationResult(False, "The root option cannot be deleted.", {"node_id": node_id, "reason": "root"})
        except NodeHasChildrenError:
            logger.warning("Edit FAIL: delete_node has_children node=%s", node_id)
            return OperationResult(
                False,
                "This option still has sub-options.",
                {"node_id": node_id, "reason": "has_children", "child_count": len(node.children)},
            )

        self._mark_dirty(target)
        logger.info("Edit OK: delete_node node=%s deleted=%d", node_id, len(deleted))
        return OperationResult(
            True,
            "Deleted option." if len(deleted) == 1 else f"Deleted {len(deleted)} options.",
            {"node_id": node_id, "parent_id": parent.id if parent is not None else None, "deleted": deleted},
        )

    def move_node(self, target: Target, node_id: int, new_parent_id: int) -> OperationResult:
        """Reparent a node, appending it after the new parent's last child."""
        logger.info("Edit: move_node node=%s parent=%s", node_id, new_parent_id)
        tree = self._tree_of(target)
        node = self._find(tree, node_id)
        new_parent = self._find(tree, new_parent_id)
        if node is None or new_parent is None:
            missing = node_id if node is None else new_parent_id
            logger.warning("Edit FAIL: move_node node_not_found node=%s", missing)
            return OperationResult(False, f"Node not found for id '{missing}'.", {"node_id": missing})
        if node is tree.root:
            logger.warning("Edit FAIL: move_node root node=%s", node_id)
            return OperationResult(False, "The root option cannot be moved.", {"node_id": node_id, "reason": "root"})

        old_parent = node.parent
        try:
            new_parent.append_child(node)
        except CycleError:
            logger.warning("Edit FAIL: move_node cycle node=%s parent=%s", node_id, new_parent_id)
            return OperationResult(
                False,
                "An option cannot be moved below itself.",
                {"node_id": node_id, "parent_id": new_parent_id, "reason": "cycle"},
            )

        self._mark_dirty(target)
        logger.info("Edit OK: move_node node=%s parent=%s", node_id, new_parent_id)
        return OperationResult(
            True,
            "Moved option.",
            {
                "node_id": node_id,
                "old_parent_id": old_parent.id if old_parent is not None else None,
                "parent_id": new_parent.id,
            },
        )

    def get_path(self, target: Target, node_id: int) -> List[Tuple[int, str]]:
        """Return the breadcrumb ``[(id, title), ...]`` from the root to ``node_id``.

        Returns an empty list for unknown ids.
        """
        node = self._find(self._tree_of(target), node_id)
        if node is None:
            return []
        return [(n.id, n.title) for n in node.path()]

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------

    @staticmethod
    def _tree_of(target: Target) -> Tree:
        return target.tree if isinstance(target, EditorDocument) else target

    @staticmethod
    def _find(tree: Tree, node_id: Any) -> Optional[Node]:
        if isinstance(node_id, bool) or not isinstance(node_id, int):
            return None
        return tree.lookup(node_id)

    @staticmethod
    def _mark_dirty(target: Target) -> None:
        if isinstance(target, EditorDocument):
            target.dirty = True
