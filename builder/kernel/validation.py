"""
SiteCraft Kernel — Structural Validation

Checks node trees and page schemas that cross the boundary: payloads from
external callers, and node lists proposed by the AI generator.
Validation is structural (well-formed?) not semantic (does it make a good page?).
Unknown node types pass: the renderer has a fallback for them.

validate_* return a list of error strings. Empty list = valid.
normalize_* / parse_* raise on failure and never return partial data.
"""

from __future__ import annotations

import copy
import json
import re
from typing import Any

from builder.kernel.types import BREAKPOINTS, SCHEMA_VERSION

# ---------------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------------


class BuilderError(Exception):
    """Base class for recoverable kernel errors."""

    pass


class SchemaValidationError(BuilderError):
    """A page schema or node tree failed structural validation."""

    def __init__(self, errors: list[str]):
        self.errors = errors
        super().__init__("; ".join(errors) if errors else "invalid schema")


class GeneratedContentError(BuilderError):
    """AI output could not be read as a node array."""

    def __init__(self, message: str, raw: str | None = None):
        self.raw = raw
        super().__init__(message)


# ---------------------------------------------------------------------------
# Validators
# ---------------------------------------------------------------------------


def validate_node(node: Any, path: str = "node") -> list[str]:
    """Validate one node and its subtree."""
    errors: list[str] = []

    if not isinstance(node, dict):
        return [f"{path}: must be an object"]

    node_id = node.get("id")
    if not isinstance(node_id, str) or not node_id:
        errors.append(f"{path}: 'id' must be a non-empty string")

    if not isinstance(node.get("type"), str):
        errors.append(f"{path}: 'type' must be a string")

    if not isinstance(node.get("props", {}), dict):
        errors.append(f"{path}: 'props' must be an object")

    errors.extend(_validate_styles(node.get("styles", {}), path))

    children = node.get("children", [])
    if not isinstance(children, list):
        errors.append(f"{path}: 'children' must be a list")
    else:
        for i, child in enumerate(children):
            errors.extend(validate_node(child, f"{path}.children[{i}]"))

    return errors


def _validate_styles(styles: Any, path: str) -> list[str]:
    if not isinstance(styles, dict):
        return [f"{path}: 'styles' must be an object"]

    errors: list[str] = []
    for bp, values in styles.items():
        if bp not in BREAKPOINTS:
            errors.append(f"{path}: unknown breakpoint '{bp}'")
            continue
        if not isinstance(values, dict):
            errors.append(f"{path}: styles.{bp} must be an object")
            continue
        for key, value in values.items():
            if not isinstance(value, str):
                errors.append(f"{path}: styles.{bp}.{key} must be a string")
    return errors


def validate_page_schema(data: Any) -> list[str]:
    """Validate a {rootNodes, version} document."""
    if not isinstance(data, dict):
        return ["Page schema must be an object"]

    errors: list[str] = []
    version = data.get("version", SCHEMA_VERSION)
    if isinstance(version, bool) or not isinstance(version, int):
        errors.append("'version' must be an integer")

    roots = data.get("rootNodes")
    if not isinstance(roots, list):
        errors.append("'rootNodes' must be a list")
        return errors

    for i, node in enumerate(roots):
        errors.extend(validate_node(node, f"rootNodes[{i}]"))

    seen: set[str] = set()
    for node_id in _walk_ids(roots):
        if node_id in seen:
            errors.append(f"Duplicate node id: {node_id}")
        seen.add(node_id)

    return errors


def _walk_ids(nodes: list[Any]) -> list[str]:
    ids: list[str] = []
    for node in nodes:
        if not isinstance(node, dict):
            continue
        if isinstance(node.get("id"), str):
            ids.append(node["id"])
        children = node.get("children")
        if isinstance(children, list):
            ids.extend(_walk_ids(children))
    return ids


# ---------------------------------------------------------------------------
# Normalizers / parsers
# ---------------------------------------------------------------------------


def normalize_node(node: dict[str, Any]) -> dict[str, Any]:
    """Copy of a valid node with missing optional keys filled in."""
    return {
        "id": node["id"],
        "type": node["type"],
        "props": copy.deepcopy(node.get("props", {})),
        "styles": copy.deepcopy(node.get("styles", {})),
        "children": [normalize_node(c) for c in node.get("children", [])],
    }


def normalize_page_schema(data: Any) -> dict[str, Any]:
    """
    Validate and return a clean copy of a page schema.
    `version` defaults to 1 when absent.

    Raises:
        SchemaValidationError: listing every structural problem found
    """
    errors = validate_page_schema(data)
    if errors:
        raise SchemaValidationError(errors)
    return {
        "rootNodes": [normalize_node(n) for n in data["rootNodes"]],
        "version": data.get("version", SCHEMA_VERSION),
    }


_FENCE_RE = re.compile(r"^```(?:json)?\s*(.*?)\s*```$", re.DOTALL)


def parse_generated_nodes(raw: Any) -> list[dict[str, Any]]:
    """
    Read AI output as a list of nodes.

    Accepts a JSON string (optionally wrapped in a ``` fence) or an already
    decoded value; either a bare array or an object with a "nodes" array.

    Raises:
        GeneratedContentError: if the output is not JSON, not an array, or any
            node is malformed. Nothing is returned partially.
    """
    raw_text: str | None = None
    data = raw
    if isinstance(raw, str):
        raw_text = raw
        text = raw.strip()
        fenced = _FENCE_RE.match(text)
        if fenced:
            text = fenced.group(1)
        try:
            data = json.loads(text)
        except json.JSONDecodeError as e:
            raise GeneratedContentError(f"AI returned invalid JSON: {e}", raw=raw_text) from e

    if isinstance(data, dict) and isinstance(data.get("nodes"), list):
        data = data["nodes"]

    if not isinstance(data, list):
        raise GeneratedContentError("AI output is not a list of nodes", raw=raw_text)

    errors: list[str] = []
    for i, node in enumerate(data):
        errors.extend(validate_node(node, f"nodes[{i}]"))
    if errors:
        raise GeneratedContentError("; ".join(errors), raw=raw_text)

    return [normalize_node(n) for n in data]
