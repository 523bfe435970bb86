from __future__ import annotations

"""Serialized document codec.

A document is a JSON array of flat node descriptors that reference each other
by id::

    [
      {"id": 0, "title": "Root", "content": "", "children": [1], "parent": null},
      {"id": 1, "title": "A", "content": "", "children": [], "parent": 0}
    ]

This module only deals with descriptors (plain dicts). Turning descriptors
into live nodes is the job of :class:`arborea.core.tree.Tree`. Everything here
is pure and in-memory; reading and writing files belongs to
:mod:`arborea.core.services.document_service`.
"""

import json
import logging
from typing import Any, Dict, List, Optional, Union

from arborea.core.exceptions import InvalidTreeError, MalformedInputError

__all__ = [
    "Descriptor",
    "parse_document",
    "validate_descriptors",
    "serialize_descriptors",
    "DEFAULT_INDENT",
]

logger = logging.getLogger(__name__)

Descriptor = Dict[str, Any]

DEFAULT_INDENT = 2


def _is_int(value: Any) -> bool:
    # JSON true/false decode to bool, which is an int subclass
    return isinstance(value, int) and not isinstance(value, bool)


def _normalize(raw: Any, index: int, problems: List[str]) -> Optional[Descriptor]:
    """Return a descriptor with defaults filled in, or None if unusable."""
    if not isinstance(raw, dict):
        problems.append(f"element {index} is not an object")
        return None

    node_id = raw.get("id")
    if not _is_int(node_id) or node_id < 0:
        problems.append(f"element {index} has invalid id {node_id!r}")
        return None

    title = raw.get("title", "")
    content = raw.get("content", "")
    children = raw.get("children", [])
    parent = raw.get("parent")

    ok = True
    if title is None:
        title = ""
    if content is None:
        content = ""
    if not isinstance(title, str):
        problems.append(f"node {node_id} has non-string title")
        ok = False
    if not isinstance(content, str):
        problems.append(f"node {node_id} has non-string content")
        ok = False
    if not isinstance(children, list) or not all(_is_int(c) for c in children):
        problems.append(f"node {node_id} has invalid children list")
        ok = False
    if parent is not None and not _is_int(parent):
        problems.append(f"node {node_id} has invalid parent {parent!r}")
        ok = False
    if not ok:
        return None

    return {
        "id": node_id,
        "title": title,
        "content": content,
        "children": list(children),
        "parent": parent,
    }


def validate_descriptors(data: Any) -> List[Descriptor]:
    """Validate parsed document data and return normalized descriptors.

    Parameters
    ----------
    data
        The decoded JSON value.

    Returns
    -------
    list of dict
        One descriptor per element, in document order, with missing
        ``title``/``content``/``children``/``parent`` filled with defaults.

    Raises
    ------
    InvalidTreeError
        If the data is not a non-empty list whose first element is the id-0
        root, or if ids are duplicated, dangling or inconsistently linked.
        All detected problems are listed in ``InvalidTreeError.problems``.
    """
    if not isinstance(data, list) or not data:
        raise InvalidTreeError("Parsed data is not a valid tree: expected a non-empty array")
    first = data[0]
    if not isinstance(first, dict) or not _is_int(first.get("id")) or first.get("id") != 0:
        raise InvalidTreeError("Parsed data is not a valid tree: first element must be the root with id 0")

    problems: List[str] = []
    descriptors: List[Descriptor] = []
    by_id: Dict[int, Descriptor] = {}
    for index, raw in enumerate(data):
        desc = _normalize(raw, index, problems)
        if desc is None:
            continue
        if desc["id"] in by_id:
            problems.append(f"duplicate id {desc['id']}")
            continue
        by_id[desc["id"]] = desc
        descriptors.append(desc)

    if problems:
        raise InvalidTreeError("Parsed data is not a valid tree", problems=problems)

    root = descriptors[0]
    if root["parent"] is not None:
        problems.append("root must not have a parent")

    for desc in descriptors:
        node_id = desc["id"]
        parent_id = desc["parent"]
        if parent_id is not None:
            parent = by_id.get(parent_id)
            if parent is None:
                problems.append(f"node {node_id} references missing parent {parent_id}")
            elif node_id not in parent["children"]:
                problems.append(f"node {node_id} is not listed as a child of its parent {parent_id}")

        seen_children = set()
        for child_id in desc["children"]:
            if child_id in seen_children:
                problems.append(f"node {node_id} lists child {child_id} more than once")
                continue
            seen_children.add(child_id)
            child = by_id.get(child_id)
            if child is None:
                problems.append(f"node {node_id} references missing child {child_id}")
            elif child["parent"] != node_id:
                problems.append(f"node {child_id} is listed as a child of {node_id} but its parent is {child['parent']}")

    if problems:
        raise InvalidTreeError("Parsed data is not a valid tree", problems=problems)

    # Links are consistent, so every node has at most one parent; a chain that
    # revisits a node is a cycle.
    acyclic: set = set()
    for desc in descriptors:
        chain: set = set()
        current: Optional[Descriptor] = desc
        while current is not None and current["id"] not in acyclic:
            if current["id"] in chain:
                problems.append(f"node {desc['id']} is its own ancestor")
                break
            chain.add(current["id"])
            parent_id = current["parent"]
            current = by_id[parent_id] if parent_id is not None else None
        else:
            acyclic.update(chain)

    if problems:
        raise InvalidTreeError("Parsed data is not a valid tree", problems=problems)

    logger.debug("Validated document with %d nodes", len(descriptors))
    return descriptors


def parse_document(document: Union[str, bytes, List[Any]]) -> List[Descriptor]:
    """Decode a serialized document into validated descriptors.

    ``document`` may be JSON text or an already-decoded list.
    """
    if isinstance(document, (str, bytes, bytearray)):
        try:
            data = json.loads(document)
        except (json.JSONDecodeError, UnicodeDecodeError, RecursionError) as exc:
            raise MalformedInputError(f"Provided value is not valid JSON: {exc}", cause=exc) from exc
    else:
        data = document
    return validate_descriptors(data)


def serialize_descriptors(descriptors: List[Descriptor], indent: Optional[int] = DEFAULT_INDENT) -> str:
    """Encode descriptors as pretty-printed JSON text."""
    return json.dumps(descriptors, indent=indent, ensure_ascii=False)
