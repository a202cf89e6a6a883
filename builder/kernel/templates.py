"""
SiteCraft Kernel — Starter Templates

Ready-made pages a new site can start from. Templates are built on demand,
so every instantiation gets fresh node ids.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

from builder.kernel.nodes import create_empty_page_schema, create_node
from builder.kernel.types import SCHEMA_VERSION

Node = dict[str, Any]


def _node(
    node_type: str,
    props: dict[str, Any],
    styles: dict[str, dict[str, str]],
    children: list[Node] | None = None,
) -> Node:
    """A node with exactly these props/styles (no defaults mixed in)."""
    node = create_node(node_type, {"children": children or []})
    node["props"] = props
    node["styles"] = styles
    return node


_CENTERED_COLUMN = {"display": "flex", "flexDirection": "column", "alignItems": "center"}


def _navbar(logo: str = "MySite", links: list[tuple[str, str]] | None = None) -> Node:
    links = links or [("Home", "/"), ("About", "/about"), ("Contact", "/contact")]
    return _node(
        "navbar",
        {"logoText": logo, "navLinks": [{"label": label, "href": href} for label, href in links]},
        {
            "base": {
                "display": "flex",
                "justifyContent": "space-between",
                "alignItems": "center",
                "padding": "16px 32px",
                "backgroundColor": "#ffffff",
                "width": "100%",
            }
        },
    )


def _footer(copyright_text: str = "© 2025 MySite. All rights reserved.") -> Node:
    return _node(
        "footer",
        {
            "copyrightText": copyright_text,
            "footerLinks": [{"label": "Privacy", "href": "/privacy"}, {"label": "Terms", "href": "/terms"}],
        },
        {
            "base": {
                "padding": "32px 24px",
                "backgroundColor": "#111827",
                "color": "#d1d5db",
                "textAlign": "center",
                "width": "100%",
            }
        },
    )


def _hero(title: str, subtitle: str, cta: str, bg_color: str) -> Node:
    return _node(
        "section",
        {},
        {"base": {"padding": "80px 24px", "backgroundColor": bg_color, "textAlign": "center", **_CENTERED_COLUMN}},
        [
            _node(
                "heading",
                {"text": title, "level": 1},
                {
                    "base": {"fontSize": "48px", "fontWeight": "800", "marginBottom": "16px", "color": "#111827"},
                    "sm": {"fontSize": "32px"},
                },
            ),
            _node(
                "text",
                {"text": subtitle},
                {
                    "base": {
                        "fontSize": "20px",
                        "lineHeight": "1.6",
                        "color": "#4b5563",
                        "maxWidth": "600px",
                        "marginBottom": "32px",
                    },
                    "sm": {"fontSize": "16px"},
                },
            ),
            _node(
                "button",
                {"text": cta, "href": "#"},
                {
                    "base": {
                        "padding": "14px 32px",
                        "backgroundColor": "#2563eb",
                        "color": "#ffffff",
                        "borderRadius": "8px",
                        "fontSize": "18px",
                        "fontWeight": "600",
                    }
                },
            ),
        ],
    )


def _features(features: list[tuple[str, str]]) -> Node:
    cards = [
        _node(
            "container",
            {},
            {"base": {"padding": "24px", "textAlign": "center"}},
            [
                _node("heading", {"text": title, "level": 3}, {"base": {"fontSize": "20px", "fontWeight": "600", "marginBottom": "8px"}}),
                _node("text", {"text": desc}, {"base": {"fontSize": "15px", "lineHeight": "1.6", "color": "#6b7280"}}),
            ],
        )
        for title, desc in features
    ]
    return _node(
        "section",
        {},
        {"base": {"padding": "64px 24px", "backgroundColor": "#ffffff", **_CENTERED_COLUMN}},
        [
            _node(
                "heading",
                {"text": "Features", "level": 2},
                {"base": {"fontSize": "36px", "fontWeight": "700", "marginBottom": "48px", "textAlign": "center"}},
            ),
            _node(
                "grid",
                {"columns": 3},
                {
                    "base": {
                        "display": "grid",
                        "gridTemplateColumns": "repeat(3, 1fr)",
                        "gap": "32px",
                        "maxWidth": "1000px",
                        "width": "100%",
                    },
                    "sm": {"gridTemplateColumns": "1fr"},
                },
                cards,
            ),
        ],
    )


# ---------------------------------------------------------------------------
# Page builders
# ---------------------------------------------------------------------------


def _blank() -> list[Node]:
    return create_empty_page_schema()["rootNodes"]


def _landing() -> list[Node]:
    return [
        _navbar(),
        _hero(
            "Build Something Amazing",
            "The all-in-one platform to launch your next big idea. Fast, beautiful, and effortless.",
            "Get Started Free",
            "#f0f9ff",
        ),
        _features(
            [
                ("Lightning Fast", "Optimized performance that loads in milliseconds."),
                ("Beautiful Design", "Pixel-perfect templates crafted by top designers."),
                ("Easy to Use", "No coding required. Drag, drop, and publish."),
            ]
        ),
        _footer(),
    ]


def _portfolio() -> list[Node]:
    shots = [
        ("e2e8f0/475569", "Project 1"),
        ("dbeafe/1e40af", "Project 2"),
        ("fef3c7/92400e", "Project 3"),
        ("d1fae5/065f46", "Project 4"),
    ]
    images = [
        _node(
            "image",
            {"src": f"https://placehold.co/600x400/{colors}?text={label.replace(' ', '+')}", "alt": label},
            {"base": {"width": "100%", "borderRadius": "12px"}},
        )
        for colors, label in shots
    ]
    return [
        _navbar(),
        _node(
            "section",
            {},
            {"base": {"padding": "80px 24px", "backgroundColor": "#fafafa", **_CENTERED_COLUMN}},
            [
                _node(
                    "heading",
                    {"text": "Jane Designer", "level": 1},
                    {"base": {"fontSize": "48px", "fontWeight": "800", "marginBottom": "8px"}, "sm": {"fontSize": "32px"}},
                ),
                _node(
                    "text",
                    {"text": "UI/UX Designer & Creative Director"},
                    {"base": {"fontSize": "20px", "color": "#6b7280", "marginBottom": "32px"}},
                ),
            ],
        ),
        _node(
            "section",
            {},
            {"base": {"padding": "48px 24px", **_CENTERED_COLUMN}},
            [
                _node(
                    "heading",
                    {"text": "Selected Work", "level": 2},
                    {"base": {"fontSize": "32px", "fontWeight": "700", "marginBottom": "32px"}},
                ),
                _node(
                    "grid",
                    {"columns": 2},
                    {
                        "base": {
                            "display": "grid",
                            "gridTemplateColumns": "repeat(2, 1fr)",
                            "gap": "24px",
                            "maxWidth": "900px",
                            "width": "100%",
                        },
                        "sm": {"gridTemplateColumns": "1fr"},
                    },
                    images,
                ),
            ],
        ),
        _footer(),
    ]


def _business() -> list[Node]:
    return [
        _navbar("Acme Corp", [("Home", "/"), ("Services", "/services"), ("About", "/about"), ("Contact", "/contact")]),
        _hero(
            "Growing Businesses Since 2010",
            "We provide tailored solutions to help your business thrive in the digital age.",
            "Learn More",
            "#f8fafc",
        ),
        _features(
            [
                ("Strategy", "Data-driven strategies that deliver measurable results."),
                ("Design", "Beautiful, functional designs that convert visitors into customers."),
                ("Growth", "Scalable solutions that grow alongside your business."),
            ]
        ),
        _footer("© 2025 Acme Corp. All rights reserved."),
    ]


STARTER_TEMPLATES: list[dict[str, Any]] = [
    {"name": "Blank", "description": "Start from scratch with an empty page", "category": "general", "build": _blank},
    {
        "name": "Landing Page",
        "description": "Modern landing page with hero, features, and CTA",
        "category": "marketing",
        "build": _landing,
    },
    {
        "name": "Portfolio",
        "description": "Showcase your work with a clean portfolio layout",
        "category": "portfolio",
        "build": _portfolio,
    },
    {
        "name": "Business",
        "description": "Professional business website with services sections",
        "category": "business",
        "build": _business,
    },
]


def list_templates() -> list[dict[str, str]]:
    """Template metadata, without the builders."""
    return [{k: v for k, v in t.items() if k != "build"} for t in STARTER_TEMPLATES]


def instantiate_template(name: str) -> list[dict[str, Any]]:
    """
    Build a template's pages with fresh node ids.
    Returns [{"title", "slug", "schema": {"rootNodes", "version"}}].

    Raises:
        KeyError: no template with this name
    """
    for template in STARTER_TEMPLATES:
        if template["name"] == name:
            build: Callable[[], list[Node]] = template["build"]
            return [
                {
                    "title": "Home",
                    "slug": "index",
                    "schema": {"rootNodes": build(), "version": SCHEMA_VERSION},
                }
            ]
    raise KeyError(name)
