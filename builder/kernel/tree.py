"""
SiteCraft Kernel — Tree Operations

Structural algorithms over a page's root sequence (list of nodes).
Traversal is depth-first, pre-order, children in order.

Operations that target an id which is not in the tree are silent no-ops:
they return False / None and never raise. The store decides whether that
matters to the user.

Unlike the reducer-style helpers elsewhere in the kernel, these functions
mutate the given sequences in place. Callers own the tree; snapshot first
with deep_clone() if the previous state must survive.
"""

from __future__ import annotations

import copy
from collections.abc import Iterator
from typing import Any, NamedTuple

from builder.kernel.nodes import new_node_id
from builder.kernel.types import ROOT, is_container_type


class ParentContext(NamedTuple):
    """The live sequence holding a node, and the node's position in it."""

    sequence: list[dict[str, Any]]
    index: int


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def _children(node: dict[str, Any]) -> list[dict[str, Any]]:
    """A node's children list, tolerating malformed nodes."""
    children = node.get("children")
    if isinstance(children, list):
        return children
    return []


def _clamp(index: Any, length: int) -> int:
    """Clamp an insertion index to [0, length]. None or non-int means append."""
    if isinstance(index, bool) or not isinstance(index, int):
        return length
    return max(0, min(index, length))


def _is_root(parent_id: str | None) -> bool:
    return parent_id is None or parent_id == ROOT


# ---------------------------------------------------------------------------
# Lookup
# ---------------------------------------------------------------------------


def iter_nodes(roots: list[dict[str, Any]]) -> Iterator[dict[str, Any]]:
    """Yield every node in pre-order."""
    for node in roots:
        yield node
        yield from iter_nodes(_children(node))


def collect_ids(roots: list[dict[str, Any]]) -> list[str]:
    return [node.get("id") for node in iter_nodes(roots)]


def find_by_id(roots: list[dict[str, Any]], node_id: str) -> dict[str, Any] | None:
    """First node with this id in pre-order, or None."""
    for node in iter_nodes(roots):
        if node.get("id") == node_id:
            return node
    return None


def find_parent_context(roots: list[dict[str, Any]], node_id: str) -> ParentContext | None:
    """
    Locate the sequence that holds `node_id` (the root list or some node's
    children) and its index there. Returns None if the id is absent.
    """
    for i, node in enumerate(roots):
        if node.get("id") == node_id:
            return ParentContext(roots, i)
        found = find_parent_context(_children(node), node_id)
        if found is not None:
            return found
    return None


def contains(node: dict[str, Any], node_id: str) -> bool:
    """True if `node_id` is `node` itself or one of its descendants."""
    return find_by_id([node], node_id) is not None


# ---------------------------------------------------------------------------
# Structural edits
# ---------------------------------------------------------------------------


def insert(
    roots: list[dict[str, Any]],
    node: dict[str, Any],
    parent: dict[str, Any] | None = None,
    index: int | None = None,
) -> None:
    """Insert `node` into `parent`'s children (root sequence if None). Index is clamped."""
    if parent is None:
        target = roots
    else:
        if not isinstance(parent.get("children"), list):
            parent["children"] = []
        target = parent["children"]
    target.insert(_clamp(index, len(target)), node)


def remove(roots: list[dict[str, Any]], node_id: str) -> bool:
    """Splice the node out of whichever sequence holds it. False if absent."""
    ctx = find_parent_context(roots, node_id)
    if ctx is None:
        return False
    del ctx.sequence[ctx.index]
    return True


def move(
    roots: list[dict[str, Any]],
    node_id: str,
    new_parent_id: str | None,
    new_index: int | None,
) -> bool:
    """
    Detach a node and insert it at `new_index` under `new_parent_id`
    (None or ROOT means the root sequence). The index is clamped to the
    target sequence as it stands after the detach.

    Returns False and leaves the tree untouched if the node is missing, the
    target parent is missing or not a container, or the target lies inside
    the moved subtree.
    """
    ctx = find_parent_context(roots, node_id)
    if ctx is None:
        return False
    node = ctx.sequence[ctx.index]

    parent: dict[str, Any] | None = None
    if not _is_root(new_parent_id):
        parent = find_by_id(roots, new_parent_id)
        if parent is None or not is_container_type(parent.get("type")):
            return False
        if contains(node, new_parent_id):
            return False

    del ctx.sequence[ctx.index]
    insert(roots, node, parent, new_index)
    return True


def reassign_ids(node: dict[str, Any]) -> dict[str, Any]:
    """Deep copy of `node` where it and every descendant carry a fresh id."""
    clone = copy.deepcopy(node)
    for n in iter_nodes([clone]):
        n["id"] = new_node_id()
    return clone


def duplicate(roots: list[dict[str, Any]], node_id: str) -> dict[str, Any] | None:
    """
    Clone the subtree at `node_id` with fresh ids throughout and insert the
    clone right after the original. Returns the clone, or None if absent.
    """
    ctx = find_parent_context(roots, node_id)
    if ctx is None:
        return None
    clone = reassign_ids(ctx.sequence[ctx.index])
    ctx.sequence.insert(ctx.index + 1, clone)
    return clone


def deep_clone(roots: list[dict[str, Any]]) -> list[dict[str, Any]]:
    """Structural copy sharing no mutable state with the source."""
    return copy.deepcopy(roots)
