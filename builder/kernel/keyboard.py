"""
SiteCraft Kernel — Keyboard Commands

Maps editor key presses to store operations:

    Ctrl/Cmd+Z            undo
    Ctrl/Cmd+Shift+Z      redo
    Ctrl/Cmd+Y            redo
    Delete / Backspace    delete selected node
    Escape                deselect
    Ctrl/Cmd+D            duplicate selected node

Delete and duplicate only fire with a node selected and focus outside a
text-entry control.
"""

from __future__ import annotations

from builder.kernel.store import EditorStore

TEXT_INPUT_TAGS: set[str] = {"INPUT", "TEXTAREA", "SELECT"}


def handle_key(
    store: EditorStore,
    key: str,
    *,
    ctrl: bool = False,
    meta: bool = False,
    shift: bool = False,
    focus_tag: str | None = None,
) -> str | None:
    """
    Run the command bound to a key press.
    Returns the command name ("undo", "redo", "delete", "deselect", "duplicate"),
    or None when the key is unbound or its guard did not pass.
    """
    modifier = ctrl or meta
    lowered = key.lower()
    in_text_input = (focus_tag or "").upper() in TEXT_INPUT_TAGS

    if modifier and lowered == "z":
        if shift:
            store.redo()
            return "redo"
        store.undo()
        return "undo"

    if modifier and lowered == "y":
        store.redo()
        return "redo"

    if modifier and lowered == "d":
        if store.selected_node_id and not in_text_input:
            store.duplicate_node(store.selected_node_id)
            return "duplicate"
        return None

    if key in ("Delete", "Backspace"):
        if store.selected_node_id and not in_text_input:
            store.remove_node(store.selected_node_id)
            return "delete"
        return None

    if key == "Escape":
        store.select_node(None)
        return "deselect"

    return None
