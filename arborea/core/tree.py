from __future__ import annotations

"""Tree data model: node identity, parent/child linkage and structural edits.

A :class:`Tree` owns every :class:`Node` it contains and is the only place
where nodes enter or leave the collection. Nodes keep a reference to their
owning tree, set once at creation, which they use only to route creation and
deletion requests back to it.

Invariants held after every public call:

- exactly one node has id 0 and it is ``tree.root``; the root never has a
  parent and cannot be deleted;
- ids are unique and never reused within one tree;
- ``child.parent is node`` if and only if ``child in node.children``;
- no node is its own ancestor.

Nodes without a parent other than the root are *orphans*: they are still
members of the tree (freshly created, or detached with
:meth:`Node.remove_child`) and are expected to be re-attached or deleted.

Examples
--------
    tree = new_tree()
    chapter = tree.root.create_child("Chapter", "")
    chapter.create_child("Section", "Some text")
    text = tree.export()
    same = load_tree(text)
"""

import logging
from itertools import chain
from typing import Any, Dict, Iterator, List, Optional, Tuple, Union

from arborea.core.codec import DEFAULT_INDENT, Descriptor, parse_document, serialize_descriptors
from arborea.core.exceptions import (
    CycleError,
    InvalidArgumentError,
    NodeHasChildrenError,
    NotAChildError,
    RootDeletionError,
)

__all__ = ["Node", "Tree", "new_tree", "load_tree"]

logger = logging.getLogger(__name__)

ROOT_ID = 0


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _as_text(value: Any) -> str:
    return "" if value is None else str(value)


class Node:
    """A single vertex of a :class:`Tree`.

    Nodes are created by their tree (:meth:`Tree.create_node`,
    :meth:`Node.create_child` or import); do not instantiate this class
    directly.

    Attributes
    ----------
    id
        Integer id, unique within the tree and immutable.
    title, content
        Free-form text. Assigned values are coerced to ``str``.
    parent
        The parent node, or None for the root and for orphans.
    children
        Tuple snapshot of the child nodes in display order. Use
        :meth:`append_child` / :meth:`remove_child` to change it.
    """

    def __init__(self, tree: "Tree", node_id: int, title: str = "", content: str = "") -> None:
        self._tree = tree
        self._id = node_id
        self._title = _as_text(title)
        self._content = _as_text(content)
        self._parent: Optional[Node] = None
        self._children: List[Node] = []
        self._deleted = False

    # ------------------------------------------------------------------
    # Read access
    # ------------------------------------------------------------------
    @property
    def id(self) -> int:
        return self._id

    @property
    def title(self) -> str:
        return self._title

    @title.setter
    def title(self, value: Any) -> None:
        self._title = _as_text(value)

    @property
    def content(self) -> str:
        return self._content

    @content.setter
    def content(self, value: Any) -> None:
        self._content = _as_text(value)

    @property
    def parent(self) -> Optional[Node]:
        return self._parent

    @property
    def children(self) -> Tuple[Node, ...]:
        return tuple(self._children)

    @property
    def tree(self) -> "Tree":
        return self._tree

    @property
    def is_root(self) -> bool:
        return self._id == ROOT_ID and not self._deleted

    @property
    def is_orphan(self) -> bool:
        return self._parent is None and not self.is_root and not self._deleted

    @property
    def is_deleted(self) -> bool:
        return self._deleted

    @property
    def depth(self) -> int:
        """Number of ancestors (0 for the root and for orphans)."""
        return sum(1 for _ in self.ancestors())

    def ancestors(self) -> Iterator[Node]:
        """Yield the parent, grandparent, ... up to the topmost ancestor."""
        current = self._parent
        while current is not None:
            yield current
            current = current._parent

    def descendants(self) -> Iterator[Node]:
        """Yield every node below this one in pre-order."""
        stack = list(reversed(self._children))
        while stack:
            node = stack.pop()
            yield node
            stack.extend(reversed(node._children))

    def path(self) -> List[Node]:
        """Return the nodes from the topmost ancestor down to this node."""
        nodes = [self]
        nodes.extend(self.ancestors())
        nodes.reverse()
        return nodes

    def __repr__(self) -> str:
        state = " deleted" if self._deleted else ""
        return f"Node(id={self._id}, title={self._title!r}, children={len(self._children)}{state})"

    # ------------------------------------------------------------------
    # Structural mutation
    # ------------------------------------------------------------------
    def append_child(self, node: Node) -> Node:
        """Attach ``node`` as the last child of this node.

        If ``node`` already has a parent it is detached from it first.
        Returns ``self`` so calls can be chained.

        Raises
        ------
        InvalidArgumentError
            If ``node`` is not a live node of the same tree.
        CycleError
            If ``node`` is the root, this node or one of its ancestors.
        """
        self._ensure_alive()
        self._check_member(node)
        if node is self._tree.root:
            raise CycleError("Cannot attach the root node", node_id=node.id)
        for ancestor in chain((self,), self.ancestors()):
            if ancestor is node:
                raise CycleError("A node cannot be its own ancestor", node_id=node.id)
        if node._parent is not None:
            node._parent._detach(node)
        node._parent = self
        self._children.append(node)
        logger.debug("Attached node %d to parent %d", node.id, self._id)
        return self

    def remove_child(self, node: Node) -> None:
        """Detach ``node`` from this node, leaving it an orphan in the tree."""
        self._ensure_alive()
        self._check_member(node)
        if node._parent is not self:
            raise NotAChildError("Provided Node is not a child of this Node", node_id=node.id)
        self._detach(node)
        logger.debug("Detached node %d from parent %d", node.id, self._id)

    def create_child(self, title: Any = "", content: Any = "") -> Node:
        """Create a node in the owning tree and append it to this node."""
        self._ensure_alive()
        node = self._tree.create_node(title, content)
        self.append_child(node)
        return node

    def delete_child(self, node: Node) -> None:
        """Detach ``node`` from this node and delete it from the tree.

        The delete is not recursive: a child that has children of its own is
        refused with :class:`NodeHasChildrenError` and nothing is changed.
        """
        self._ensure_alive()
        self._check_member(node)
        if node._parent is not self:
            raise NotAChildError("Provided Node is not a child of this Node", node_id=node.id)
        if node._children:
            raise NodeHasChildrenError("That Node still has children", node_id=node.id)
        self.remove_child(node)
        self._tree.delete_node(node)

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------
    def _detach(self, node: Node) -> None:
        self._children.remove(node)
        node._parent = None

    def _ensure_alive(self) -> None:
        if self._deleted:
            raise InvalidArgumentError("Node has been deleted from its tree", node_id=self._id)

    def _check_member(self, node: Any) -> None:
        if not isinstance(node, Node):
            raise InvalidArgumentError("Provided argument is not a valid Node")
        if node._deleted:
            raise InvalidArgumentError("Node has been deleted from its tree", node_id=node.id)
        if node._tree is not self._tree:
            raise InvalidArgumentError("Node belongs to another tree", node_id=node.id)


class Tree:
    """Owning collection of nodes with a designated root.

    Parameters
    ----------
    document : str, bytes or list, optional
        Serialized document to reconstruct (JSON text or already-decoded
        list of descriptors). When omitted, a tree holding only an empty
        root node is created.

    Raises
    ------
    MalformedInputError
        If ``document`` is text that is not valid JSON.
    InvalidTreeError
        If the decoded data does not describe a valid tree.
    """

    def __init__(self, document: Union[str, bytes, List[Any], None] = None) -> None:
        if document is None:
            root = Node(self, ROOT_ID)
            self._nodes: Dict[int, Node] = {ROOT_ID: root}
            self._root = root
            self._last_id = ROOT_ID
        else:
            self._load(parse_document(document))

    # ------------------------------------------------------------------
    # Read access
    # ------------------------------------------------------------------
    @property
    def root(self) -> Node:
        return self._root

    @property
    def nodes(self) -> Tuple[Node, ...]:
        """All member nodes in storage order, root first."""
        return tuple(self._nodes.values())

    def lookup(self, node_id: int) -> Optional[Node]:
        """Return the node with ``node_id``, or None if there is none.

        Raises :class:`InvalidArgumentError` for non-integer ids.
        """
        if not _is_int(node_id):
            raise InvalidArgumentError(f"Node id must be an integer, got {type(node_id).__name__}")
        return self._nodes.get(node_id)

    def find_orphans(self) -> List[Node]:
        """Return member nodes other than the root that have no parent."""
        return [node for node in self._nodes.values() if node._parent is None and node is not self._root]

    def __len__(self) -> int:
        return len(self._nodes)

    def __iter__(self) -> Iterator[Node]:
        return iter(list(self._nodes.values()))

    def __contains__(self, node: Any) -> bool:
        return isinstance(node, Node) and self._nodes.get(node.id) is node

    def __repr__(self) -> str:
        return f"Tree(nodes={len(self._nodes)}, root={self._root.title!r})"

    # ------------------------------------------------------------------
    # Membership changes
    # ------------------------------------------------------------------
    def create_node(self, title: Any = "", content: Any = "") -> Node:
        """Create an unattached node with the next free id.

        The node joins the collection immediately and stays an orphan until
        it is appended to a parent.
        """
        self._last_id += 1
        node = Node(self, self._last_id, title, content)
        self._nodes[node.id] = node
        logger.debug("Created node %d", node.id)
        return node

    def delete_node(self, node: Union[Node, int], recursive: bool = False) -> bool:
        """Remove a node (given as node or id) from the tree.

        Returns False when ``node`` does not resolve to a member of this tree
        and True once it has been removed. With ``recursive`` every
        descendant is deleted as well, children before their parents.
        Validation happens before any change, so a refused delete leaves the
        tree untouched.

        Raises
        ------
        RootDeletionError
            If ``node`` is the root, whatever ``recursive`` says.
        NodeHasChildrenError
            If ``node`` has children and ``recursive`` is false.
        """
        if _is_int(node):
            node = self._nodes.get(node)
        if node not in self:
            return False
        if node is self._root:
            raise RootDeletionError("Cannot delete root node", node_id=node.id)
        if node._children and not recursive:
            raise NodeHasChildrenError("That Node still has children", node_id=node.id)

        for doomed in self._postorder(node):
            if doomed._parent is not None:
                doomed._parent._detach(doomed)
            del self._nodes[doomed.id]
            doomed._deleted = True
        logger.debug("Deleted node %d (recursive=%s)", node.id, recursive)
        return True

    # ------------------------------------------------------------------
    # Import / export
    # ------------------------------------------------------------------
    def to_descriptors(self) -> List[Descriptor]:
        """Return one id-referencing descriptor per node, in storage order."""
        return [
            {
                "id": node.id,
                "title": node.title,
                "content": node.content,
                "children": [child.id for child in node._children],
                "parent": node._parent.id if node._parent is not None else None,
            }
            for node in self._nodes.values()
        ]

    def export(self, indent: Optional[int] = DEFAULT_INDENT) -> str:
        """Serialize every node of the tree as a JSON document."""
        return serialize_descriptors(self.to_descriptors(), indent=indent)

    def _load(self, descriptors: List[Descriptor]) -> None:
        # First pass creates every node, second pass wires the links.
        nodes: Dict[int, Node] = {}
        for desc in descriptors:
            nodes[desc["id"]] = Node(self, desc["id"], desc["title"], desc["content"])
        for desc in descriptors:
            node = nodes[desc["id"]]
            if desc["parent"] is not None:
                node._parent = nodes[desc["parent"]]
            node._children = [nodes[child_id] for child_id in desc["children"]]

        self._nodes = nodes
        self._root = nodes[ROOT_ID]
        self._last_id = max(nodes)
        logger.debug("Loaded tree with %d nodes", len(nodes))

    @staticmethod
    def _postorder(node: Node) -> List[Node]:
        """Return ``node`` and its descendants, every node after its children."""
        ordered = [node]
        ordered.extend(node.descendants())
        ordered.reverse()
        return ordered


def new_tree() -> Tree:
    """Return a tree holding only an empty root node."""
    return Tree()


def load_tree(document: Union[str, bytes, List[Any]]) -> Tree:
    """Reconstruct a tree from a serialized document."""
    return Tree(document)
