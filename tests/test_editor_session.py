"""Tests for FeatureEditorSession lifetime, menus and analytics."""

import pytest

from render_feature_editor.errors import InvalidIndexError
from render_feature_editor.protocols import EditorConfig, RendererAssetData
from render_feature_editor.services import FeatureEditorSession

from conftest import DepthBlur, ScreenSpaceAO, store_existing


class TestLifetime:
    """Test open/close behavior."""

    def test_open_binds_adapters(self, session, store, asset):
        store_existing(store, asset, ScreenSpaceAO())
        session.open()
        assert session.is_open
        assert len(session.cache) == 1

    def test_open_repairs_drifted_map(self, session, store, asset):
        feature = ScreenSpaceAO()
        stable_id = store.store_child(asset, feature)
        asset.renderer_features.append(feature)

        session.open()

        assert asset.renderer_feature_map == [stable_id]

    def test_closed_session_cannot_reopen(self, session):
        session.open()
        session.close()
        assert not session.is_open
        with pytest.raises(RuntimeError):
            session.open()

    def test_close_tears_down_adapters(self, session, adapter_factory):
        session.open()
        session.add(ScreenSpaceAO)
        session.rows()
        session.close()
        assert adapter_factory.live_adapters == []

    def test_context_manager(self, qapp, asset, context, config):
        with FeatureEditorSession(asset, context, config) as session:
            session.add(ScreenSpaceAO)
            assert session.is_open
        assert not session.is_open

    def test_missing_context_uses_registered_providers(self, qapp, asset):
        with pytest.raises(RuntimeError, match="No persistence provider registered"):
            FeatureEditorSession(asset)


class TestAnalytics:
    """Test the modified-asset report sent on close."""

    def test_modified_asset_is_reported_once(self, session, analytics, asset):
        session.open()
        session.add(ScreenSpaceAO)

        session.close()
        session.close()

        assert analytics.events == [
            ("renderer2DData", RendererAssetData(instance_id=asset.instance_id)),
        ]

    def test_unmodified_asset_is_not_reported(self, session, analytics):
        session.open()
        session.rows()
        session.close()
        assert analytics.events == []

    def test_disabled_analytics(self, qapp, asset, context, analytics):
        session = FeatureEditorSession(asset, context, EditorConfig(analytics_enabled=False))
        session.open()
        session.add(ScreenSpaceAO)
        session.close()
        assert analytics.events == []

    def test_sink_failure_does_not_break_close(self, session, analytics, caplog):
        def broken(event, payload):
            raise ConnectionError("offline")

        analytics.send_data = broken
        session.open()
        session.add(ScreenSpaceAO)

        with caplog.at_level("WARNING"):
            session.close()

        assert not session.is_open
        assert "Failed to send analytics" in caplog.text


class TestMenus:
    """Test add-menu entries and context actions."""

    def test_add_menu_lists_registered_types(self, session):
        entries = {entry.type_name: entry for entry in session.add_menu_entries()}

        assert set(entries) == {"ScreenSpaceAO", "RenderObjects", "DepthBlur", "DecalProjector"}
        assert entries["ScreenSpaceAO"].label == "Screen Space AO"
        assert entries["ScreenSpaceAO"].path == "Lighting/Screen Space AO"
        assert entries["DecalProjector"].label == "Decal Projector (Experimental)"

    def test_add_menu_hides_present_single_instance_types(self, session):
        session.open()
        session.add(DepthBlur)
        session.add(ScreenSpaceAO)

        names = [entry.type_name for entry in session.add_menu_entries()]

        assert "DepthBlur" not in names
        assert "ScreenSpaceAO" in names

    def test_context_actions_disable_moves_past_the_ends(self, session):
        session.open()
        session.add(ScreenSpaceAO)
        session.add(DepthBlur)

        first = {a.key: a.enabled for a in session.context_actions(0)}
        last = {a.key: a.enabled for a in session.context_actions(1)}

        assert first == {"move_up": False, "move_down": True, "remove": True}
        assert last == {"move_up": True, "move_down": False, "remove": True}

    def test_context_actions_for_bad_index(self, session):
        with pytest.raises(InvalidIndexError):
            session.context_actions(0)


def test_undo_resyncs_cache(session, history):
    session.open()
    session.add(ScreenSpaceAO)
    session.add(DepthBlur)
    session.rows()

    assert session.undo() is True

    assert len(session.model) == 1
    assert len(session.cache) == 1
    assert [row.title for row in session.rows()] == ["Screen Space AO"]


def test_undo_with_empty_history(session):
    session.open()
    assert session.undo() is False


def test_validate_and_repair_resyncs(session, store, asset):
    feature = ScreenSpaceAO()
    store_existing(store, asset, feature)
    asset.renderer_features[0] = None
    session.open()
    assert session.row(0).missing

    report = session.validate_and_repair()

    assert report.ok
    assert session.row(0).adapter.feature is feature
