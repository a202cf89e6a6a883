"""
SiteCraft Kernel -- Autosave Tests

Debounce timing, flush on close, failure handling (per-put retry and the
re-armed debounce after a failed save), and the stale-save guard: a save
that started before an edit never marks the document clean.
"""

import asyncio

import pytest

from builder.kernel.autosave import MAX_RETRY_DELAY, Autosaver, MemoryPageStorage, PageStorage
from builder.kernel.store import EditorStore

DELAY = 0.1


class FailingStorage(PageStorage):
    """Fails the first `failures` puts, then stores in memory."""

    def __init__(self, failures: int):
        self.failures = failures
        self.calls = 0
        self.inner = MemoryPageStorage()

    async def get(self, page_id):
        return await self.inner.get(page_id)

    async def put(self, page_id, schema):
        self.calls += 1
        if self.calls <= self.failures:
            raise ConnectionError("storage unavailable")
        await self.inner.put(page_id, schema)


class SlowStorage(MemoryPageStorage):
    """Blocks each put until released."""

    def __init__(self):
        super().__init__()
        self.started = asyncio.Event()
        self.release = asyncio.Event()

    async def put(self, page_id, schema):
        self.started.set()
        await self.release.wait()
        await super().put(page_id, schema)


@pytest.fixture
def editor():
    s = EditorStore()
    s.initialize("site_1", "page_1", None)
    return s


class TestDebounce:
    @pytest.mark.asyncio
    async def test_single_save_after_burst(self, editor):
        storage = MemoryPageStorage()
        saver = Autosaver(editor, storage, delay=DELAY)
        saver.attach()

        for _ in range(5):
            editor.add_node("text")
            await asyncio.sleep(DELAY / 5)

        assert saver.pending
        assert storage.pages == {}

        await asyncio.sleep(DELAY * 3)
        assert saver.save_count == 1
        assert len(storage.pages["page_1"]["rootNodes"]) == 5
        assert editor.save_status == "clean"

    @pytest.mark.asyncio
    async def test_detach_stops_scheduling(self, editor):
        saver = Autosaver(editor, MemoryPageStorage(), delay=DELAY)
        saver.attach()
        saver.detach()
        editor.add_node("text")
        assert not saver.pending

    @pytest.mark.asyncio
    async def test_cancel_abandons_pending_save(self, editor):
        storage = MemoryPageStorage()
        saver = Autosaver(editor, storage, delay=DELAY)
        saver.attach()
        editor.add_node("text")
        saver.cancel()
        await asyncio.sleep(DELAY * 2)
        assert storage.pages == {}
        assert editor.is_dirty


class TestSaveNow:
    @pytest.mark.asyncio
    async def test_flush_saves_immediately(self, editor):
        storage = MemoryPageStorage()
        saver = Autosaver(editor, storage, delay=10)
        saver.attach()
        editor.add_node("heading")

        assert await saver.flush()
        assert not saver.pending
        assert storage.pages["page_1"]["version"] == 1

    @pytest.mark.asyncio
    async def test_clean_document_not_written(self, editor):
        storage = MemoryPageStorage()
        saver = Autosaver(editor, storage)
        assert await saver.save_now()
        assert storage.pages == {}

    @pytest.mark.asyncio
    async def test_no_page_loaded(self):
        saver = Autosaver(EditorStore(), MemoryPageStorage())
        assert not await saver.save_now()

    @pytest.mark.asyncio
    async def test_saved_schema_is_detached(self, editor):
        storage = MemoryPageStorage()
        saver = Autosaver(editor, storage)
        node = editor.add_node("text")
        await saver.save_now()
        editor.update_node_props(node["id"], {"text": "later"})
        assert storage.pages["page_1"]["rootNodes"][0]["props"]["text"] != "later"


class TestFailures:
    @pytest.mark.asyncio
    async def test_one_failure_is_retried(self, editor):
        storage = FailingStorage(failures=1)
        saver = Autosaver(editor, storage)
        editor.add_node("text")

        assert await saver.save_now()
        assert storage.calls == 2
        assert saver.last_error is None

    @pytest.mark.asyncio
    async def test_persistent_failure_keeps_edits(self, editor):
        storage = FailingStorage(failures=10)
        saver = Autosaver(editor, storage)
        editor.add_node("text")

        assert not await saver.save_now()
        assert storage.calls == 2
        assert saver.last_error == "Autosave failed: storage unavailable"
        assert editor.save_status == "dirty"
        assert len(editor.root_nodes) == 1

    @pytest.mark.asyncio
    async def test_failed_save_retried_without_edit(self, editor):
        storage = FailingStorage(failures=2)
        saver = Autosaver(editor, storage, delay=DELAY)
        saver.attach()
        editor.add_node("text")

        await asyncio.sleep(DELAY * 1.5)
        assert saver.last_error is not None
        assert saver.pending

        await asyncio.sleep(DELAY * 2)
        assert storage.calls == 3
        assert saver.last_error is None
        assert saver.failures == 0
        assert editor.save_status == "clean"

    @pytest.mark.asyncio
    async def test_edit_after_failure_saves(self, editor):
        storage = FailingStorage(failures=2)
        saver = Autosaver(editor, storage, delay=DELAY)
        saver.attach()
        editor.add_node("text")
        await asyncio.sleep(DELAY * 1.5)
        assert saver.last_error is not None

        editor.add_node("text")
        await asyncio.sleep(DELAY * 3)
        assert saver.last_error is None
        assert len(storage.inner.pages["page_1"]["rootNodes"]) == 2
        assert editor.save_status == "clean"

    @pytest.mark.asyncio
    async def test_flush_failure_does_not_rearm(self, editor):
        saver = Autosaver(editor, FailingStorage(failures=10), delay=DELAY)
        editor.add_node("text")
        assert not await saver.flush()
        assert not saver.pending

    def test_retry_backoff_is_capped(self, editor):
        saver = Autosaver(editor, MemoryPageStorage(), delay=2.0)
        assert saver.retry_delay == 2.0
        saver.failures = 3
        assert saver.retry_delay == 8.0
        saver.failures = 20
        assert saver.retry_delay == MAX_RETRY_DELAY


class TestStaleSave:
    @pytest.mark.asyncio
    async def test_edit_during_save_stays_dirty(self, editor):
        storage = SlowStorage()
        saver = Autosaver(editor, storage)
        editor.add_node("text")

        task = asyncio.create_task(saver.save_now())
        await storage.started.wait()
        editor.add_node("heading")
        storage.release.set()

        assert not await task
        assert editor.is_dirty
        assert len(storage.pages["page_1"]["rootNodes"]) == 1

        assert await saver.save_now()
        assert len(storage.pages["page_1"]["rootNodes"]) == 2
        assert not editor.is_dirty

    @pytest.mark.asyncio
    async def test_saves_do_not_overlap(self, editor):
        storage = SlowStorage()
        saver = Autosaver(editor, storage)
        editor.add_node("text")

        first = asyncio.create_task(saver.save_now())
        await storage.started.wait()
        editor.add_node("text")
        second = asyncio.create_task(saver.save_now())
        await asyncio.sleep(0)
        assert editor.is_saving

        storage.release.set()
        await asyncio.gather(first, second)
        assert saver.save_count == 2
        assert len(storage.pages["page_1"]["rootNodes"]) == 2
        assert editor.save_status == "clean"
