"""
SiteCraft Kernel — Node Model

Factory for well-formed nodes. Every node type has a static default template
(props, styles, children). create_node() never fails, not even for a type
string outside the known set: it falls back to an empty template.

No validation happens here. See validation.py for boundary checks.
"""

from __future__ import annotations

import copy
import uuid
from typing import Any

from builder.kernel.types import SCHEMA_VERSION

# ---------------------------------------------------------------------------
# Default templates
# ---------------------------------------------------------------------------

_FALLBACK_TEMPLATE: dict[str, Any] = {"props": {}, "styles": {"base": {}}, "children": []}

DEFAULT_TEMPLATES: dict[str, dict[str, Any]] = {
    "section": {
        "props": {},
        "styles": {
            "base": {
                "padding": "48px 24px",
                "display": "flex",
                "flexDirection": "column",
                "alignItems": "center",
                "minHeight": "200px",
            },
        },
        "children": [],
    },
    "container": {
        "props": {},
        "styles": {
            "base": {
                "maxWidth": "1200px",
                "width": "100%",
                "padding": "16px",
                "display": "flex",
                "flexDirection": "column",
            },
        },
        "children": [],
    },
    "heading": {
        "props": {"text": "Heading", "level": 2},
        "styles": {"base": {"fontSize": "32px", "fontWeight": "700", "marginBottom": "16px"}},
        "children": [],
    },
    "text": {
        "props": {"text": "Lorem ipsum dolor sit amet, consectetur adipiscing elit."},
        "styles": {"base": {"fontSize": "16px", "lineHeight": "1.6", "marginBottom": "12px"}},
        "children": [],
    },
    "button": {
        "props": {"text": "Click Me", "href": "#"},
        "styles": {
            "base": {
                "padding": "12px 24px",
                "backgroundColor": "#2563eb",
                "color": "#ffffff",
                "borderRadius": "8px",
                "fontSize": "16px",
                "fontWeight": "600",
                "textAlign": "center",
                "border": "none",
                "display": "inline-block",
            },
        },
        "children": [],
    },
    "image": {
        "props": {"src": "https://placehold.co/800x400", "alt": "Placeholder"},
        "styles": {"base": {"width": "100%", "height": "auto", "borderRadius": "8px"}},
        "children": [],
    },
    "spacer": {
        "props": {},
        "styles": {"base": {"height": "48px"}},
        "children": [],
    },
    "divider": {
        "props": {},
        "styles": {
            "base": {
                "width": "100%",
                "height": "1px",
                "backgroundColor": "#e5e7eb",
                "margin": "24px 0",
            },
        },
        "children": [],
    },
    "grid": {
        "props": {"columns": 3},
        "styles": {
            "base": {
                "display": "grid",
                "gridTemplateColumns": "repeat(3, 1fr)",
                "gap": "24px",
                "width": "100%",
            },
            "sm": {"gridTemplateColumns": "1fr"},
        },
        "children": [],
    },
    "columns": {
        "props": {"columns": 2},
        "styles": {
            "base": {
                "display": "grid",
                "gridTemplateColumns": "repeat(2, 1fr)",
                "gap": "24px",
                "width": "100%",
            },
            "sm": {"gridTemplateColumns": "1fr"},
        },
        "children": [],
    },
    "column": {
        "props": {},
        "styles": {"base": {"display": "flex", "flexDirection": "column", "padding": "8px"}},
        "children": [],
    },
    "navbar": {
        "props": {
            "logoText": "MySite",
            "navLinks": [
                {"label": "Home", "href": "/"},
                {"label": "About", "href": "/about"},
                {"label": "Contact", "href": "/contact"},
            ],
        },
        "styles": {
            "base": {
                "display": "flex",
                "justifyContent": "space-between",
                "alignItems": "center",
                "padding": "16px 24px",
                "backgroundColor": "#ffffff",
                "borderColor": "#e5e7eb",
                "border": "0 0 1px 0",
                "width": "100%",
            },
        },
        "children": [],
    },
    "footer": {
        "props": {
            "copyrightText": "© 2025 MySite. All rights reserved.",
            "footerLinks": [
                {"label": "Privacy", "href": "/privacy"},
                {"label": "Terms", "href": "/terms"},
            ],
        },
        "styles": {
            "base": {
                "padding": "32px 24px",
                "backgroundColor": "#1f2937",
                "color": "#ffffff",
                "textAlign": "center",
                "width": "100%",
            },
        },
        "children": [],
    },
}

# What the editor's component picker offers. `column` is absent: it is only
# ever created as a child of `columns`.
COMPONENT_PALETTE: list[dict[str, str]] = [
    {"type": "section", "label": "Section", "icon": "LayoutDashboard", "category": "layout"},
    {"type": "container", "label": "Container", "icon": "Box", "category": "layout"},
    {"type": "columns", "label": "Columns", "icon": "Columns3", "category": "layout"},
    {"type": "grid", "label": "Grid", "icon": "Grid3x3", "category": "layout"},
    {"type": "heading", "label": "Heading", "icon": "Type", "category": "content"},
    {"type": "text", "label": "Text", "icon": "AlignLeft", "category": "content"},
    {"type": "button", "label": "Button", "icon": "MousePointerClick", "category": "content"},
    {"type": "image", "label": "Image", "icon": "ImageIcon", "category": "content"},
    {"type": "spacer", "label": "Spacer", "icon": "MoveVertical", "category": "content"},
    {"type": "divider", "label": "Divider", "icon": "Minus", "category": "content"},
    {"type": "navbar", "label": "Navbar", "icon": "Navigation", "category": "layout"},
    {"type": "footer", "label": "Footer", "icon": "PanelBottom", "category": "layout"},
]


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def new_node_id() -> str:
    """Fresh globally unique node id (UUID4)."""
    return str(uuid.uuid4())


def create_node(node_type: str, overrides: dict[str, Any] | None = None) -> dict[str, Any]:
    """
    Build a node of `node_type` from its default template.

    overrides["props"] and overrides["styles"] are shallow-merged over the
    defaults (override keys win). overrides["children"] replaces the default
    children verbatim. Malformed overrides are accepted as-is.
    """
    overrides = overrides or {}
    template = copy.deepcopy(DEFAULT_TEMPLATES.get(node_type, _FALLBACK_TEMPLATE))

    props = template.get("props", {})
    props.update(overrides.get("props") or {})

    styles = template.get("styles", {"base": {}})
    styles.update(overrides.get("styles") or {})

    children = overrides.get("children")
    if children is None:
        children = template.get("children", [])

    return {
        "id": new_node_id(),
        "type": node_type,
        "props": props,
        "styles": styles,
        "children": children,
    }


def create_columns_node(count: Any = None, overrides: dict[str, Any] | None = None) -> dict[str, Any]:
    """
    A `columns` node pre-populated with one `column` child per column.
    Uses `count` if given, else props.columns; anything that isn't a positive int means 2.
    """
    node = create_node("columns", overrides)
    if count is None:
        count = node["props"].get("columns")
    if isinstance(count, bool) or not isinstance(count, int) or count < 1:
        count = 2
    node["children"] = [*node["children"], *(create_node("column") for _ in range(count))]
    return node


def create_empty_page_schema() -> dict[str, Any]:
    return {"rootNodes": [], "version": SCHEMA_VERSION}
