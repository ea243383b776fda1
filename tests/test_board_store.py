"""Tests for the in-memory board store."""

import pytest


class TestBoardStore:
    @pytest.mark.asyncio
    async def test_create_and_get(self, store):
        created = await store.create_object({"id": "a", "type": "sticky", "x": 1, "y": 2, "text": "hi"})
        assert created["id"] == "a"
        assert store.get_object("a")["text"] == "hi"
        assert store.count == 1
        assert "label" not in created

    @pytest.mark.asyncio
    async def test_duplicate_id_rejected(self, store):
        await store.create_object({"id": "a"})
        with pytest.raises(ValueError):
            await store.create_object({"id": "a"})

    @pytest.mark.asyncio
    async def test_snapshot_is_detached(self, store):
        await store.create_object({"id": "a", "text": "original"})
        snapshot = store.get_objects()
        snapshot["a"]["text"] = "mutated"
        assert store.get_object("a")["text"] == "original"

    @pytest.mark.asyncio
    async def test_update(self, store):
        await store.create_object({"id": "a", "type": "sticky", "x": 0})
        await store.update_object("a", {"x": 50, "color": "#FF0000", "id": "ignored"})
        obj = store.get_object("a")
        assert obj["x"] == 50
        assert obj["color"] == "#FF0000"
        assert obj["id"] == "a"

    @pytest.mark.asyncio
    async def test_update_missing(self, store):
        with pytest.raises(ValueError):
            await store.update_object("nope", {"x": 1})

    @pytest.mark.asyncio
    async def test_type_index_follows_updates(self, store):
        await store.create_object({"id": "a", "type": "sticky"})
        await store.update_object("a", {"type": "rectangle"})
        assert store.type_counts() == {"rectangle": 1}

    @pytest.mark.asyncio
    async def test_delete_cascades_to_connectors(self, store):
        await store.create_object({"id": "a"})
        await store.create_object({"id": "b"})
        await store.create_object({"id": "c"})
        await store.create_object({"id": "ab", "type": "connector", "from_id": "a", "to_id": "b"})
        await store.create_object({"id": "bc", "type": "connector", "from_id": "b", "to_id": "c"})
        await store.delete_object("a")

        assert set(store.get_objects()) == {"b", "c", "bc"}
        assert store.type_counts() == {"sticky": 2, "connector": 1}

        await store.delete_object("c")

        assert set(store.get_objects()) == {"b"}

    @pytest.mark.asyncio
    async def test_delete_missing(self, store):
        with pytest.raises(ValueError):
            await store.delete_object("nope")

    @pytest.mark.asyncio
    async def test_change_callbacks(self, store):
        changes = []
        store.on_change(lambda action, oid: changes.append((action, oid)))
        await store.create_object({"id": "a"})
        await store.create_object({"id": "b"})
        await store.create_object({"id": "ab", "type": "connector", "from_id": "a", "to_id": "b"})
        await store.update_object("a", {"x": 5})
        await store.delete_object("a")
        assert changes == [
            ("create", "a"),
            ("create", "b"),
            ("create", "ab"),
            ("update", "a"),
            ("delete", "ab"),
            ("delete", "a"),
        ]

    @pytest.mark.asyncio
    async def test_state_and_clear(self, store):
        await store.create_object({"id": "a", "type": "frame"})
        await store.create_object({"id": "b"})
        state = store.get_state()
        assert state["count"] == 2
        assert state["types"] == {"frame": 1, "sticky": 1}

        store.clear()
        assert store.count == 0
        assert store.get_state() == {"objects": [], "count": 0, "types": {}}
