"""
SiteCraft Kernel — Autosave

Sits between the editor store and the outside world (the page document store).
Edits schedule a debounced save: the timer restarts on every edit, and fires
`delay` seconds after the last one.

Saves run one at a time under a lock, and each one captures the tree and the
store's edit generation when it actually starts. A save only marks the
document clean if no newer edit landed while it was in flight.

Save failures are logged and kept in `last_error`. They never roll back
local edits; the document stays dirty and the debounce re-arms itself, backing
off on consecutive failures, so the save is retried without a further edit.
"""

from __future__ import annotations

import asyncio
import copy
import logging
from typing import Any

from builder.kernel.store import EditorStore

logger = logging.getLogger(__name__)

DEFAULT_AUTOSAVE_DELAY = 2.0
MAX_RETRY_DELAY = 30.0


# ---------------------------------------------------------------------------
# Storage protocol
# ---------------------------------------------------------------------------


class PageStorage:
    """
    Abstract page document store, keyed by page id.
    Implement against a real database for production, or in-memory for tests.
    """

    async def get(self, page_id: str) -> dict[str, Any] | None:
        """Fetch a page schema. Returns None if not found."""
        raise NotImplementedError

    async def put(self, page_id: str, schema: dict[str, Any]) -> None:
        """Write a page schema."""
        raise NotImplementedError


class MemoryPageStorage(PageStorage):
    """In-memory storage for testing."""

    def __init__(self) -> None:
        self.pages: dict[str, dict[str, Any]] = {}

    async def get(self, page_id: str) -> dict[str, Any] | None:
        page = self.pages.get(page_id)
        return copy.deepcopy(page) if page is not None else None

    async def put(self, page_id: str, schema: dict[str, Any]) -> None:
        self.pages[page_id] = copy.deepcopy(schema)


# ---------------------------------------------------------------------------
# Autosaver
# ---------------------------------------------------------------------------


class Autosaver:
    """
    Debounced autosave for one editor store.

    Call attach() to schedule on every edit, or schedule() by hand.
    Call flush() when the editor closes, or cancel() to abandon a pending save.
    """

    def __init__(
        self,
        store: EditorStore,
        storage: PageStorage,
        delay: float = DEFAULT_AUTOSAVE_DELAY,
    ) -> None:
        self.store = store
        self.storage = storage
        self.delay = delay
        self.last_error: str | None = None
        self.save_count = 0
        self.failures = 0
        self._timer: asyncio.Task | None = None
        self._lock = asyncio.Lock()
        self._unsubscribe = None

    def attach(self) -> None:
        """Schedule a save after every edit to the store."""
        if self._unsubscribe is None:
            self._unsubscribe = self.store.subscribe(self.schedule)

    def detach(self) -> None:
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None

    @property
    def pending(self) -> bool:
        """True while a debounce timer is waiting to fire."""
        return self._timer is not None and not self._timer.done()

    @property
    def retry_delay(self) -> float:
        """Wait before retrying after `failures` consecutive failed saves."""
        if self.failures <= 0:
            return self.delay
        return min(self.delay * 2 ** (self.failures - 1), MAX_RETRY_DELAY)

    def schedule(self, delay: float | None = None) -> None:
        """(Re)start the debounce timer. Must be called from a running event loop."""
        self.cancel()
        wait = self.delay if delay is None else delay
        self._timer = asyncio.get_running_loop().create_task(self._fire(wait))

    def cancel(self) -> None:
        """Abandon a pending save. An in-flight save is left to finish."""
        if self._timer is not None and not self._timer.done():
            self._timer.cancel()
        self._timer = None

    async def _fire(self, delay: float) -> None:
        await asyncio.sleep(delay)
        # Past the debounce: from here on a reschedule must not cancel the save.
        self._timer = None
        clean = await self.save_now()
        # An edit during the failed save has already re-armed the timer.
        if not clean and self.last_error is not None and self.store.is_dirty and not self.pending:
            logger.info("autosave: retrying page %s in %.1fs", self.store.page_id, self.retry_delay)
            self.schedule(self.retry_delay)

    async def save_now(self) -> bool:
        """
        Save the current tree immediately.
        Returns True if the document is clean afterwards.
        """
        async with self._lock:
            if self.store.page_id is None:
                return False
            if not self.store.is_dirty:
                return True

            ticket = self.store.begin_save()
            try:
                await self._put(ticket.page_id, ticket.schema)
            except Exception as e:
                self.store.mark_saving(False)
                self.failures += 1
                self.last_error = f"Autosave failed: {e}"
                logger.warning("autosave: save of page %s failed: %s", ticket.page_id, e)
                return False

            self.save_count += 1
            self.failures = 0
            self.last_error = None
            clean = self.store.mark_saved(ticket.generation)
            logger.info(
                "autosave: saved page %s at generation %d%s",
                ticket.page_id,
                ticket.generation,
                "" if clean else " (newer edits pending)",
            )
            return clean

    async def _put(self, page_id: str, schema: dict[str, Any]) -> None:
        """Write with one retry."""
        try:
            await self.storage.put(page_id, schema)
        except Exception as e:
            logger.info("autosave: put failed for %s (retrying): %s", page_id, e)
            await self.storage.put(page_id, schema)

    async def flush(self) -> bool:
        """
        Cancel the debounce timer and save now if there is anything unsaved.
        Use when leaving the editor.
        """
        self.cancel()
        return await self.save_now()
