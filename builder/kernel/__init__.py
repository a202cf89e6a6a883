"""
SiteCraft Kernel — the document/editor core.

Components:
  nodes      — node factory and per-type defaults
  tree       — structural operations over the node tree (find, remove, move, duplicate)
  store      — EditorStore: the live tree, undo/redo history, dirty/saving state
  renderer   — (nodes, mode) → HTML, editable or published
  autosave   — debounced save to a page document store

Boundary helpers:
  validation — structural checks for external schemas and AI output
  keyboard   — editor shortcuts mapped to store operations
  templates  — starter pages
"""

from builder.kernel.autosave import Autosaver, MemoryPageStorage, PageStorage
from builder.kernel.nodes import create_empty_page_schema, create_node
from builder.kernel.renderer import render_node, render_nodes, render_page
from builder.kernel.store import EditorStore
from builder.kernel.validation import (
    GeneratedContentError,
    SchemaValidationError,
    normalize_page_schema,
    parse_generated_nodes,
)

__all__ = [
    "create_node",
    "create_empty_page_schema",
    "EditorStore",
    "render_node",
    "render_nodes",
    "render_page",
    "Autosaver",
    "PageStorage",
    "MemoryPageStorage",
    "normalize_page_schema",
    "parse_generated_nodes",
    "SchemaValidationError",
    "GeneratedContentError",
]
