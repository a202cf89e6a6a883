"""
SiteCraft Kernel — Document Store (editor state machine)

Owns the live node tree for one open page, plus selection/view state and a
linear undo/redo history. Every structural edit follows the mutation protocol:

    snapshot root_nodes → push onto undo_stack → clear redo_stack
    → mutate → is_dirty = True → edit_generation += 1

Edits that target a missing node change nothing: no history entry, no dirty
flag, return False / None. Selection, hover, and view changes never touch
history.

Save bookkeeping uses the edit generation: a save captures the generation it
serialized, and only clears the dirty flag if no newer edit happened since.

One EditorStore per editing session. It is not thread-safe and is not meant
to be shared between writers.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime
from typing import Any

from builder.kernel import tree
from builder.kernel.nodes import create_columns_node, create_node, new_node_id
from builder.kernel.types import (
    LEFT_PANELS,
    SCHEMA_VERSION,
    HistoryEntry,
    SaveTicket,
    is_container_type,
    is_valid_breakpoint,
    now_utc,
)
from builder.kernel.validation import parse_generated_nodes

logger = logging.getLogger(__name__)


class EditorStore:
    """
    Editor state for one page.

    Args:
        history_limit: max undo entries kept; None or 0 keeps everything
    """

    def __init__(self, history_limit: int | None = None) -> None:
        self.history_limit = history_limit or None

        # Page data
        self.site_id: str | None = None
        self.page_id: str | None = None
        self.root_nodes: list[dict[str, Any]] = []
        self.is_dirty = False
        self.is_saving = False
        self.last_saved: datetime | None = None
        self.edit_generation = 0

        # Selection
        self.selected_node_id: str | None = None
        self.hovered_node_id: str | None = None

        # View
        self.breakpoint = "base"
        self.is_preview_mode = False
        self.left_panel = "components"

        # History
        self.undo_stack: list[HistoryEntry] = []
        self.redo_stack: list[HistoryEntry] = []

        self._listeners: list[Callable[[], None]] = []

    # -- load --

    def initialize(self, site_id: str, page_id: str, schema: dict[str, Any] | None) -> None:
        """Load a page's persisted schema. Resets selection, view, save state, and history."""
        schema = schema or {}
        self.site_id = site_id
        self.page_id = page_id
        self.root_nodes = tree.deep_clone(schema.get("rootNodes") or [])
        self.is_dirty = False
        self.is_saving = False
        self.last_saved = None
        self.selected_node_id = None
        self.hovered_node_id = None
        self.breakpoint = "base"
        self.is_preview_mode = False
        self.undo_stack = []
        self.redo_stack = []
        logger.info(
            "editor: loaded page %s/%s (%d root nodes, schema v%s)",
            site_id,
            page_id,
            len(self.root_nodes),
            schema.get("version", SCHEMA_VERSION),
        )

    # -- internal --

    def _record(self, before: list[dict[str, Any]], action: str) -> None:
        """Finish the mutation protocol for an edit that has already been applied."""
        self.undo_stack.append(HistoryEntry(root_nodes=before))
        if self.history_limit is not None and len(self.undo_stack) > self.history_limit:
            del self.undo_stack[: len(self.undo_stack) - self.history_limit]
        self.redo_stack = []
        self.is_dirty = True
        self.edit_generation += 1
        logger.debug("editor: %s (generation %d)", action, self.edit_generation)
        self._notify()

    def _resolve_container(self, parent_id: str | None) -> dict[str, Any] | None:
        if parent_id is None:
            return None
        parent = tree.find_by_id(self.root_nodes, parent_id)
        if parent is not None and is_container_type(parent.get("type")):
            return parent
        return None

    def _place(self, node: dict[str, Any], parent_id: str | None, index: int | None) -> None:
        """
        Insert into parent_id's children if it names a container, else into
        the root sequence. A rejected parent means append at root: the index
        was meant for the parent's children.
        """
        parent = self._resolve_container(parent_id)
        if parent is None and parent_id is not None:
            logger.debug("editor: parent %s is not a container, appending at root", parent_id)
            index = None
        tree.insert(self.root_nodes, node, parent, index)

    def _claim_ids(self, nodes: list[dict[str, Any]]) -> list[dict[str, Any]]:
        """Deep copies of `nodes` whose ids are unique against the tree and each other."""
        seen = set(tree.collect_ids(self.root_nodes))
        copies = tree.deep_clone(nodes)
        for node in tree.iter_nodes(copies):
            node_id = node.get("id")
            if not isinstance(node_id, str) or not node_id or node_id in seen:
                node["id"] = new_node_id()
            seen.add(node["id"])
        return copies

    def _prune_view_state(self) -> None:
        """Drop selection/hover pointing at nodes that no longer exist."""
        if self.selected_node_id and tree.find_by_id(self.root_nodes, self.selected_node_id) is None:
            self.selected_node_id = None
        if self.hovered_node_id and tree.find_by_id(self.root_nodes, self.hovered_node_id) is None:
            self.hovered_node_id = None

    def _notify(self) -> None:
        for listener in list(self._listeners):
            listener()

    def subscribe(self, listener: Callable[[], None]) -> Callable[[], None]:
        """Call `listener` after every edit, undo, and redo. Returns an unsubscribe function."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    # -- structural edits --

    def add_node(self, node_type: str, parent_id: str | None = None, index: int | None = None) -> dict[str, Any]:
        """Create a default node of `node_type`, insert it, and select it."""
        before = tree.deep_clone(self.root_nodes)
        if node_type == "columns":
            node = create_columns_node()
        else:
            node = create_node(node_type)
        self._place(node, parent_id, index)
        self.selected_node_id = node["id"]
        self._record(before, f"add {node_type} {node['id']}")
        return node

    def add_node_from_data(
        self,
        node: dict[str, Any],
        parent_id: str | None = None,
        index: int | None = None,
    ) -> dict[str, Any]:
        """Insert a fully formed node (pasted or AI-proposed) and select it."""
        before = tree.deep_clone(self.root_nodes)
        (inserted,) = self._claim_ids([node])
        self._place(inserted, parent_id, index)
        self.selected_node_id = inserted["id"]
        self._record(before, f"add {inserted.get('type')} {inserted['id']} from data")
        return inserted

    def insert_nodes(self, nodes: list[dict[str, Any]], parent_id: str | None = None) -> list[dict[str, Any]]:
        """Append several nodes to a container (or the root). Selection is unchanged."""
        if not nodes:
            return []
        before = tree.deep_clone(self.root_nodes)
        inserted = self._claim_ids(nodes)
        parent = self._resolve_container(parent_id)
        for node in inserted:
            tree.insert(self.root_nodes, node, parent)
        self._record(before, f"insert {len(inserted)} nodes")
        return inserted

    def remove_node(self, node_id: str) -> bool:
        """Delete a node and its subtree. Clears selection/hover inside it."""
        before = tree.deep_clone(self.root_nodes)
        if not tree.remove(self.root_nodes, node_id):
            return False
        self._prune_view_state()
        self._record(before, f"remove {node_id}")
        return True

    def update_node_props(self, node_id: str, props: dict[str, Any]) -> bool:
        """Shallow-merge into the node's props. Nested values are replaced whole."""
        node = tree.find_by_id(self.root_nodes, node_id)
        if node is None:
            return False
        before = tree.deep_clone(self.root_nodes)
        if not isinstance(node.get("props"), dict):
            node["props"] = {}
        node["props"].update(props)
        self._record(before, f"update props {node_id}")
        return True

    def update_node_styles(self, node_id: str, breakpoint: str, styles: dict[str, str]) -> bool:
        """Shallow-merge into styles[breakpoint], creating it if absent. Unknown breakpoints are rejected."""
        if not is_valid_breakpoint(breakpoint):
            logger.warning("editor: rejected style update on %s, unknown breakpoint %r", node_id, breakpoint)
            return False
        node = tree.find_by_id(self.root_nodes, node_id)
        if node is None:
            return False
        before = tree.deep_clone(self.root_nodes)
        if not isinstance(node.get("styles"), dict):
            node["styles"] = {}
        current = node["styles"].get(breakpoint)
        node["styles"][breakpoint] = {**(current if isinstance(current, dict) else {}), **styles}
        self._record(before, f"update styles {node_id} @{breakpoint}")
        return True

    def move_node(self, node_id: str, new_parent_id: str | None, new_index: int | None) -> bool:
        before = tree.deep_clone(self.root_nodes)
        if not tree.move(self.root_nodes, node_id, new_parent_id, new_index):
            return False
        self._record(before, f"move {node_id} -> {new_parent_id or 'root'}[{new_index}]")
        return True

    def duplicate_node(self, node_id: str) -> dict[str, Any] | None:
        """Clone a subtree right after the original and select the clone."""
        before = tree.deep_clone(self.root_nodes)
        clone = tree.duplicate(self.root_nodes, node_id)
        if clone is None:
            return None
        self.selected_node_id = clone["id"]
        self._record(before, f"duplicate {node_id} -> {clone['id']}")
        return clone

    def apply_generated(self, raw: Any, parent_id: str | None = None) -> list[dict[str, Any]]:
        """
        Insert AI-proposed content.

        Raises:
            GeneratedContentError: output is not a valid node array; the
                document is left untouched
        """
        nodes = parse_generated_nodes(raw)
        return self.insert_nodes(nodes, parent_id)

    # -- selection / view --

    def select_node(self, node_id: str | None) -> None:
        self.selected_node_id = node_id

    def hover_node(self, node_id: str | None) -> None:
        self.hovered_node_id = node_id

    def set_breakpoint(self, breakpoint: str) -> None:
        if not is_valid_breakpoint(breakpoint):
            raise ValueError(f"Unknown breakpoint: {breakpoint}")
        self.breakpoint = breakpoint

    def toggle_preview(self) -> None:
        self.is_preview_mode = not self.is_preview_mode

    def set_left_panel(self, panel: str) -> None:
        if panel not in LEFT_PANELS:
            raise ValueError(f"Unknown panel: {panel}")
        self.left_panel = panel

    # -- history --

    @property
    def can_undo(self) -> bool:
        return bool(self.undo_stack)

    @property
    def can_redo(self) -> bool:
        return bool(self.redo_stack)

    def undo(self) -> bool:
        if not self.undo_stack:
            return False
        entry = self.undo_stack.pop()
        self.redo_stack.append(HistoryEntry(root_nodes=tree.deep_clone(self.root_nodes)))
        self.root_nodes = entry.root_nodes
        self._after_history_step("undo")
        return True

    def redo(self) -> bool:
        if not self.redo_stack:
            return False
        entry = self.redo_stack.pop()
        self.undo_stack.append(HistoryEntry(root_nodes=tree.deep_clone(self.root_nodes)))
        self.root_nodes = entry.root_nodes
        self._after_history_step("redo")
        return True

    def _after_history_step(self, action: str) -> None:
        self._prune_view_state()
        self.is_dirty = True
        self.edit_generation += 1
        logger.debug("editor: %s (generation %d)", action, self.edit_generation)
        self._notify()

    # -- schema / save lifecycle --

    def get_schema(self) -> dict[str, Any]:
        """The live tree as a page schema. Not a copy: use export_schema() to serialize."""
        return {"rootNodes": self.root_nodes, "version": SCHEMA_VERSION}

    def export_schema(self) -> dict[str, Any]:
        """Detached copy of the page schema, safe to hand to storage."""
        return {"rootNodes": tree.deep_clone(self.root_nodes), "version": SCHEMA_VERSION}

    def mark_saving(self, saving: bool) -> None:
        self.is_saving = saving

    def begin_save(self) -> SaveTicket:
        """Capture what is about to be saved, and at which edit generation."""
        self.is_saving = True
        return SaveTicket(
            page_id=self.page_id,
            schema=self.export_schema(),
            generation=self.edit_generation,
        )

    def mark_saved(self, generation: int | None = None) -> bool:
        """
        Record a completed save. The dirty flag is cleared only when the save
        covered the latest edit (`generation` is None or current).
        Returns True if the document is now clean.
        """
        self.is_saving = False
        self.last_saved = now_utc()
        if generation is None or generation == self.edit_generation:
            self.is_dirty = False
        else:
            logger.debug(
                "editor: save of generation %s is stale (now %d), staying dirty",
                generation,
                self.edit_generation,
            )
        return not self.is_dirty

    @property
    def save_status(self) -> str:
        """'saving', 'dirty', or 'clean'."""
        if self.is_saving:
            return "saving"
        if self.is_dirty:
            return "dirty"
        return "clean"
