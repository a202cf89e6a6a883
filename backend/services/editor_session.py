"""
Server-side editor sessions.

Opens a stored page in an EditorStore with an Autosaver writing back to the
page repo, using the configured history limit and autosave delay. Used by
anything that edits pages in-process (imports, AI batch jobs, tests).
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from backend.config import settings
from backend.repos.page_repo import PageRepo
from builder.kernel.autosave import Autosaver
from builder.kernel.store import EditorStore

logger = logging.getLogger(__name__)


@dataclass
class EditorSession:
    """An open page: its store and the autosaver attached to it."""

    store: EditorStore
    autosaver: Autosaver

    async def close(self) -> bool:
        """Stop autosaving and write any unsaved edits. Returns True if clean."""
        self.autosaver.detach()
        clean = await self.autosaver.flush()
        if not clean:
            logger.warning("Editor session for page %s closed dirty: %s", self.store.page_id, self.autosaver.last_error)
        return clean


async def open_editor_session(repo: PageRepo, page_id: str) -> EditorSession | None:
    """
    Load a page into a fresh editor store with autosave attached.

    Returns:
        EditorSession, or None if the page doesn't exist
    """
    page = await repo.get_page(page_id)
    if page is None:
        return None

    store = EditorStore(history_limit=settings.HISTORY_LIMIT)
    store.initialize(page.site_id, page.id, page.schema_json.to_schema())

    autosaver = Autosaver(store, repo, delay=settings.AUTOSAVE_DELAY_SECONDS)
    autosaver.attach()
    return EditorSession(store=store, autosaver=autosaver)
