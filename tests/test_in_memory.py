"""Tests for the in-memory persistence and undo history."""

import pytest

from render_feature_editor.errors import PersistenceError
from render_feature_editor.services import InMemoryFeatureStore, InMemoryUndoHistory, RendererData

from conftest import ScreenSpaceAO


class TestFeatureStore:
    """Test InMemoryFeatureStore."""

    def test_stable_ids_are_unique_and_nonzero(self):
        store = InMemoryFeatureStore()
        asset = RendererData()
        ids = [store.store_child(asset, ScreenSpaceAO()) for _ in range(5)]
        assert len(set(ids)) == 5
        assert 0 not in ids

    def test_equal_features_get_distinct_ids(self):
        store = InMemoryFeatureStore()
        asset = RendererData()
        first, second = ScreenSpaceAO(), ScreenSpaceAO()
        assert first == second
        assert store.store_child(asset, first) != store.store_child(asset, second)

    def test_restoring_keeps_stable_id(self):
        store = InMemoryFeatureStore()
        asset = RendererData()
        feature = ScreenSpaceAO()
        assert store.store_child(asset, feature) == store.store_child(asset, feature)

    def test_delete_and_revive(self):
        store = InMemoryFeatureStore()
        asset = RendererData()
        feature = ScreenSpaceAO()
        stable_id = store.store_child(asset, feature)

        store.delete_child(feature)
        assert store.load_children(asset) == {}
        assert store.stable_id_of(feature) is None

        store.revive(feature)
        assert store.load_children(asset) == {stable_id: feature}
        assert store.deleted_objects == []

    def test_delete_unknown_child(self):
        with pytest.raises(PersistenceError):
            InMemoryFeatureStore().delete_child(ScreenSpaceAO())

    @pytest.mark.parametrize("operation", ["store", "delete", "flush"])
    def test_fail_on(self, operation):
        store = InMemoryFeatureStore()
        asset = RendererData()
        feature = ScreenSpaceAO()
        store.store_child(asset, feature)
        store.fail_on = {operation}

        with pytest.raises(PersistenceError, match=f"Simulated {operation} failure"):
            if operation == "store":
                store.store_child(asset, ScreenSpaceAO())
            elif operation == "delete":
                store.delete_child(feature)
            else:
                store.flush()

    def test_flush_clears_dirty(self):
        store = InMemoryFeatureStore()
        asset = RendererData()
        store.mark_dirty(asset)
        assert store.is_dirty(asset)
        store.flush()
        assert not store.is_dirty(asset)
        assert store.flush_count == 1


class TestUndoHistory:
    """Test InMemoryUndoHistory grouping."""

    def test_nested_groups_merge(self):
        history = InMemoryUndoHistory()
        feature = ScreenSpaceAO()

        history.begin_group("outer")
        history.begin_group("inner")
        history.record(feature)
        history.end_group()
        feature.radius = 3.0
        history.end_group()

        assert history.labels == ["outer"]
        history.undo()
        assert feature.radius == 0.5

    def test_empty_group_is_dropped(self):
        history = InMemoryUndoHistory()
        history.begin_group("nothing")
        history.end_group()
        assert len(history) == 0

    def test_record_outside_group_is_standalone(self):
        history = InMemoryUndoHistory()
        feature = ScreenSpaceAO()
        history.record(feature)
        feature.name = "Changed"

        assert history.labels == [""]
        assert history.undo()
        assert feature.name == ""

    def test_undo_inside_open_group_raises(self):
        history = InMemoryUndoHistory()
        history.begin_group("open")
        with pytest.raises(RuntimeError):
            history.undo()

    def test_unbalanced_end_group_is_ignored(self, caplog):
        history = InMemoryUndoHistory()
        with caplog.at_level("WARNING"):
            history.end_group()
        assert "without a matching begin_group" in caplog.text

    def test_undo_created_deletes_from_store(self):
        store = InMemoryFeatureStore()
        history = InMemoryUndoHistory(store)
        asset = RendererData()
        feature = ScreenSpaceAO()

        history.begin_group("create")
        history.register_created(feature)
        store.store_child(asset, feature)
        history.end_group()
        history.undo()

        assert not store.is_stored(feature)
