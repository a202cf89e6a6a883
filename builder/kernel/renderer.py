"""
SiteCraft Kernel — Dual-Mode Renderer

Pure function: (nodes, mode, selection/hover ids) → HTML string
No IO. No mutation. Deterministic: same input → same output, always.
Never raises on malformed or unknown node data.

Two modes, one schema:
- editable  — every element carries data-node-id and editor hook attributes
              (select on click, hover on enter/leave), selection/hover classes,
              and empty containers get a drop placeholder. Links are inert spans.
- published — inert output. No hooks, no placeholders. Links are real <a href>.

User text is HTML-escaped in both modes.

Only styles.base is emitted. md/sm overlays are stored but not applied here;
the editor emulates breakpoints by resizing its preview viewport.
"""

from __future__ import annotations

import logging
import re
from html import escape as _html_escape
from typing import TYPE_CHECKING, Any, NamedTuple

from builder.kernel.types import CONTAINER_TYPES, RenderOptions

if TYPE_CHECKING:
    from builder.kernel.store import EditorStore

logger = logging.getLogger(__name__)


class _Ctx(NamedTuple):
    editable: bool
    selected_id: str | None
    hovered_id: str | None


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def render_nodes(
    nodes: list[dict[str, Any]],
    mode: str = "published",
    selected_id: str | None = None,
    hovered_id: str | None = None,
) -> str:
    """Render a root sequence as an HTML fragment."""
    ctx = _Ctx(mode == "editable", selected_id, hovered_id)
    if not isinstance(nodes, list):
        return ""
    return "\n".join(_render(node, ctx) for node in nodes)


def render_node(
    node: dict[str, Any],
    mode: str = "published",
    selected_id: str | None = None,
    hovered_id: str | None = None,
) -> str:
    """Render a single node and its subtree as an HTML fragment."""
    return _render(node, _Ctx(mode == "editable", selected_id, hovered_id))


def render_page(schema: dict[str, Any], options: RenderOptions | None = None) -> str:
    """
    Render a complete HTML document from a page schema.
    Returns a UTF-8 HTML string.
    """
    opts = options or RenderOptions()
    editable = opts.mode == "editable"
    roots = schema.get("rootNodes", []) if isinstance(schema, dict) else []

    parts: list[str] = []
    parts.append("<!DOCTYPE html>")
    parts.append(f'<html lang="{escape(opts.lang)}">')
    parts.append("<head>")
    parts.append('  <meta charset="utf-8">')
    parts.append('  <meta name="viewport" content="width=device-width, initial-scale=1">')
    parts.append(f"  <title>{escape(opts.title)}</title>")
    if opts.description:
        parts.append(f'  <meta name="description" content="{escape(opts.description)}">')
    parts.append("  <style>")
    parts.append(BASE_CSS)
    if editable:
        parts.append(EDITOR_CSS)
    parts.append("  </style>")
    parts.append("</head>")
    parts.append("<body>")
    main_class = "site-page editor-canvas" if editable else "site-page"
    parts.append(f'  <main class="{main_class}">')

    body_html = render_nodes(roots, opts.mode, opts.selected_id, opts.hovered_id)
    if body_html:
        parts.append(body_html)
    elif editable:
        parts.append('    <p class="site-empty">Add components to start building this page.</p>')

    parts.append("  </main>")
    parts.append("</body>")
    parts.append("</html>")
    return "\n".join(parts)


def dispatch_canvas_event(store: EditorStore, event_type: str, node_id: str | None) -> bool:
    """
    Route an editable-canvas interaction to the store.
    click → select, mouseenter → hover, mouseleave → clear hover.
    Returns False for events the canvas does not handle.
    """
    if event_type == "click":
        store.select_node(node_id)
        return True
    if event_type == "mouseenter":
        store.hover_node(node_id)
        return True
    if event_type == "mouseleave":
        store.hover_node(None)
        return True
    return False


# ---------------------------------------------------------------------------
# CSS
# ---------------------------------------------------------------------------

BASE_CSS = """
*, *::before, *::after { box-sizing: border-box; margin: 0; padding: 0; }
body { font-family: system-ui, sans-serif; color: #111827; line-height: 1.5; }
.site-page { width: 100%; }
img { max-width: 100%; display: block; }
ul.navbar-links, ul.footer-links { list-style: none; display: flex; gap: 24px; }
ul.footer-links { justify-content: center; gap: 16px; }
.navbar-logo { font-weight: 700; font-size: 18px; }
a { color: inherit; }
"""

EDITOR_CSS = """
[data-node-id] { cursor: default; outline-offset: -1px; }
.node-hovered { outline: 1px dashed #93c5fd; }
.node-selected { outline: 2px solid #2563eb; }
.drop-placeholder { color: #d1d5db; font-size: 14px; padding: 16px 0; text-align: center; width: 100%; }
.unknown-component { color: #b91c1c; font-size: 13px; }
.site-empty { color: #888; font-style: italic; padding: 48px; text-align: center; }
"""


# ---------------------------------------------------------------------------
# Node rendering
# ---------------------------------------------------------------------------

_BOX_TAGS: dict[str, str] = {
    "section": "section",
    "container": "div",
    "grid": "div",
    "columns": "div",
    "column": "div",
}

_PLACEHOLDERS: dict[str, str] = {
    "grid": "Drop columns or components here",
    "columns": "Drop columns or components here",
}


def _render(node: Any, ctx: _Ctx) -> str:
    if not isinstance(node, dict):
        return ""
    try:
        return _render_node(node, ctx)
    except Exception:
        logger.warning("renderer: failed to render node %r", node.get("id"), exc_info=True)
        return _render_unknown(node, ctx)


def _render_node(node: dict[str, Any], ctx: _Ctx) -> str:
    node_type = node.get("type")
    props = node.get("props")
    if not isinstance(props, dict):
        props = {}

    if node_type in _BOX_TAGS:
        tag = _BOX_TAGS[node_type]
        return f"<{tag}{_attrs(node, ctx)}>{_render_children(node, ctx)}</{tag}>"

    if node_type == "heading":
        level = _heading_level(props.get("level"))
        text = escape(_str_prop(props, "text"))
        return f"<h{level}{_attrs(node, ctx)}>{text}</h{level}>"

    if node_type == "text":
        lines = _str_prop(props, "text").split("\n")
        content = "<br>".join(escape(line) for line in lines)
        return f"<p{_attrs(node, ctx)}>{content}</p>"

    if node_type == "button":
        text = escape(_str_prop(props, "text", "Button"))
        if ctx.editable:
            return f"<span{_attrs(node, ctx)}>{text}</span>"
        href = safe_href(_str_prop(props, "href", "#"))
        return f'<a href="{escape(href)}"{_attrs(node, ctx)}>{text}</a>'

    if node_type == "image":
        src = escape(_str_prop(props, "src"))
        alt = escape(_str_prop(props, "alt"))
        return f'<img src="{src}" alt="{alt}" loading="lazy"{_attrs(node, ctx)}>'

    if node_type == "spacer":
        return f"<div{_attrs(node, ctx)}></div>"

    if node_type == "divider":
        return f"<hr{_attrs(node, ctx)}>"

    if node_type == "navbar":
        logo = escape(_str_prop(props, "logoText", "Logo"))
        links = _render_links(props.get("navLinks"), "navbar-links", ctx)
        return (
            f"<nav{_attrs(node, ctx)}>"
            f'<span class="navbar-logo">{logo}</span>'
            f"{links}{_render_children(node, ctx)}"
            f"</nav>"
        )

    if node_type == "footer":
        copyright_text = escape(_str_prop(props, "copyrightText"))
        links = _render_links(props.get("footerLinks"), "footer-links", ctx)
        return (
            f"<footer{_attrs(node, ctx)}>"
            f'<p class="footer-copyright">{copyright_text}</p>'
            f"{links}{_render_children(node, ctx)}"
            f"</footer>"
        )

    return _render_unknown(node, ctx)


def _render_unknown(node: dict[str, Any], ctx: _Ctx) -> str:
    label = escape(str(node.get("type")))
    return f'<div{_attrs(node, ctx, "unknown-component")}>Unknown component: {label}</div>'


def _render_children(node: dict[str, Any], ctx: _Ctx) -> str:
    children = node.get("children")
    if not isinstance(children, list):
        children = []
    html = "".join(_render(child, ctx) for child in children)
    if ctx.editable and not children and node.get("type") in CONTAINER_TYPES:
        text = _PLACEHOLDERS.get(node.get("type"), "Drop components here")
        html = f'<div class="drop-placeholder">{text}</div>'
    return html


def _render_links(links: Any, css_class: str, ctx: _Ctx) -> str:
    if not isinstance(links, list):
        links = []
    items = []
    for link in links:
        if not isinstance(link, dict):
            continue
        label = escape(_str_prop(link, "label"))
        if ctx.editable:
            items.append(f"<li><span>{label}</span></li>")
        else:
            href = escape(safe_href(_str_prop(link, "href", "#")))
            items.append(f'<li><a href="{href}">{label}</a></li>')
    return f'<ul class="{css_class}">{"".join(items)}</ul>'


# ---------------------------------------------------------------------------
# Attribute helpers
# ---------------------------------------------------------------------------


def _attrs(node: dict[str, Any], ctx: _Ctx, css_class: str | None = None) -> str:
    """Style attribute plus, in editable mode, the hook attributes and state classes."""
    classes = [css_class] if css_class else []
    parts: list[str] = []

    if ctx.editable:
        node_id = node.get("id")
        selected = node_id is not None and node_id == ctx.selected_id
        if selected:
            classes.append("node-selected")
        elif node_id is not None and node_id == ctx.hovered_id:
            classes.append("node-hovered")
        parts.append(f'data-node-id="{escape(str(node_id))}"')
        parts.append(f'data-node-type="{escape(str(node.get("type")))}"')
        parts.append('data-editor-select="click"')
        parts.append('data-editor-hover="enter leave"')

    if classes:
        parts.insert(0, f'class="{" ".join(classes)}"')

    style = style_attr(node.get("styles"))
    if style:
        parts.append(f'style="{style}"')

    return (" " + " ".join(parts)) if parts else ""


_CAMEL_RE = re.compile(r"([A-Z])")
_CSS_PROP_RE = re.compile(r"^-?[a-zA-Z][a-zA-Z0-9-]*$")


def style_attr(styles: Any) -> str:
    """Serialize styles.base to an inline CSS declaration list (escaped)."""
    if not isinstance(styles, dict):
        return ""
    base = styles.get("base")
    if not isinstance(base, dict):
        return ""
    decls = []
    for key, value in base.items():
        if not isinstance(key, str) or value is None:
            continue
        prop = _CAMEL_RE.sub(r"-\1", key).lower()
        if not _CSS_PROP_RE.match(prop):
            continue
        decls.append(f"{prop}: {value}")
    return escape("; ".join(decls))


def _heading_level(value: Any) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        return 2
    return max(1, min(6, value))


def _str_prop(props: dict[str, Any], key: str, default: str = "") -> str:
    value = props.get(key)
    return value if isinstance(value, str) else default


_UNSAFE_SCHEMES = ("javascript:", "vbscript:", "data:")


def safe_href(href: str) -> str:
    """Neutralize script-bearing link targets."""
    compact = "".join(href.split()).lower()
    if compact.startswith(_UNSAFE_SCHEMES):
        return "#"
    return href


def escape(text: Any) -> str:
    """HTML-escape user content: & < > \" '."""
    return _html_escape(str(text), quote=True)
