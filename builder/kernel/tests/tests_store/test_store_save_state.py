"""
SiteCraft Kernel -- Save Bookkeeping Tests

Dirty / saving / clean transitions, schema export, and the edit generation
that keeps an in-flight save from clearing newer edits.
"""

from builder.kernel.store import EditorStore


class TestSchema:
    def test_get_schema_is_live(self, loaded_store):
        schema = loaded_store.get_schema()
        assert schema["version"] == 1
        assert schema["rootNodes"] is loaded_store.root_nodes

    def test_export_is_detached(self, loaded_store):
        schema = loaded_store.export_schema()
        schema["rootNodes"].clear()
        assert len(loaded_store.root_nodes) == 3

    def test_round_trip_through_initialize(self, loaded_store):
        loaded_store.add_node("columns", "hero")
        exported = loaded_store.export_schema()
        fresh = EditorStore()
        fresh.initialize("site_1", "page_1", exported)
        assert fresh.root_nodes == loaded_store.root_nodes


class TestSaveStatus:
    def test_lifecycle(self, store):
        store.add_node("text")
        assert store.save_status == "dirty"

        ticket = store.begin_save()
        assert store.save_status == "saving"
        assert ticket.page_id == "page_1"
        assert ticket.generation == store.edit_generation

        assert store.mark_saved(ticket.generation)
        assert store.save_status == "clean"
        assert store.last_saved is not None

    def test_failed_save_stays_dirty(self, store):
        store.add_node("text")
        store.begin_save()
        store.mark_saving(False)
        assert store.save_status == "dirty"

    def test_edit_during_save_keeps_dirty(self, store):
        store.add_node("text")
        ticket = store.begin_save()

        store.add_node("heading")  # lands while the save is in flight

        assert not store.mark_saved(ticket.generation)
        assert store.is_dirty
        assert not store.is_saving
        assert len(ticket.schema["rootNodes"]) == 1

    def test_ticket_schema_is_snapshot(self, loaded_store):
        loaded_store.update_node_props("title", {"text": "A"})
        ticket = loaded_store.begin_save()
        loaded_store.update_node_props("title", {"text": "B"})
        assert ticket.schema["rootNodes"][1]["children"][0]["props"]["text"] == "A"

    def test_mark_saved_without_generation_clears(self, store):
        store.add_node("text")
        assert store.mark_saved()
        assert not store.is_dirty
