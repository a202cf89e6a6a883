"""
SiteCraft Kernel — Shared Types

Constants and data classes used across nodes, tree, store, renderer, and autosave.
These are the contracts that bind the kernel together.

A node is a plain JSON-compatible dict:
    {"id": str, "type": str, "props": {...}, "styles": {"base": {...}, "md": {...}, "sm": {...}}, "children": [...]}

A page schema is the persisted unit:
    {"rootNodes": [node, ...], "version": 1}
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any

# ---------------------------------------------------------------------------
# Node type registry
# ---------------------------------------------------------------------------

NODE_TYPES: set[str] = {
    "section",
    "container",
    "heading",
    "text",
    "button",
    "image",
    "spacer",
    "divider",
    "grid",
    "columns",
    "column",
    "navbar",
    "footer",
}

# Only these types may carry children
CONTAINER_TYPES: set[str] = {
    "section",
    "container",
    "grid",
    "columns",
    "column",
    "navbar",
    "footer",
}

# base = desktop, md = tablet, sm = mobile
BREAKPOINTS: tuple[str, ...] = ("base", "md", "sm")

LEFT_PANELS: set[str] = {"components", "layers"}

SCHEMA_VERSION = 1

# Sentinel accepted wherever a parent id may name the root sequence
ROOT = "root"


# ---------------------------------------------------------------------------
# Data classes
# ---------------------------------------------------------------------------


@dataclass
class HistoryEntry:
    """A full snapshot of the root node sequence, captured before a mutation."""

    root_nodes: list[dict[str, Any]]


@dataclass
class SaveTicket:
    """
    Captured when a save starts.
    `generation` is the store's edit generation at capture time; the save may
    only clear the dirty flag if no newer edit happened since.
    """

    page_id: str | None
    schema: dict[str, Any]
    generation: int
    started_at: datetime = field(default_factory=lambda: datetime.now(UTC))


@dataclass
class RenderOptions:
    """Options controlling what the page renderer emits."""

    mode: str = "published"  # "editable" or "published"
    title: str = "Untitled page"
    description: str | None = None
    lang: str = "en"
    selected_id: str | None = None
    hovered_id: str | None = None


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def is_container_type(node_type: Any) -> bool:
    """True if nodes of this type may hold children."""
    return node_type in CONTAINER_TYPES


def is_valid_breakpoint(value: Any) -> bool:
    return value in BREAKPOINTS


def now_utc() -> datetime:
    """Current UTC time."""
    return datetime.now(UTC)
