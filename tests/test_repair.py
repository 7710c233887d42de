"""Tests for FeatureCollectionModel.validate_and_repair()."""

from render_feature_editor.services import UNASSIGNED_ID

from conftest import RenderObjects, ScreenSpaceAO, store_existing


def test_intact_list_is_left_alone(model, store, asset, history):
    store_existing(store, asset, ScreenSpaceAO())
    groups = len(history)

    report = model.validate_and_repair()

    assert report.ok
    assert report.linked == []
    assert report.map_rebuilt is False
    assert len(history) == groups


def test_missing_slot_is_resolved_by_stable_id(model, store, asset):
    first = ScreenSpaceAO()
    second = RenderObjects()
    store_existing(store, asset, first)
    store_existing(store, asset, second)
    asset.renderer_features[1] = None
    changes = []
    model.structure_changed.connect(lambda: changes.append(True))

    report = model.validate_and_repair()

    assert report.linked == [1]
    assert asset.renderer_features[1] is second
    assert changes == [True]


def test_unresolvable_slot_is_kept_and_reported(model, store, asset, caplog):
    first = ScreenSpaceAO()
    stable_id = store_existing(store, asset, first)
    asset.renderer_features[0] = None
    store.forget(asset, stable_id)

    with caplog.at_level("ERROR"):
        report = model.validate_and_repair()

    assert report.missing == [0]
    assert not report.ok
    assert len(model) == 1
    assert asset.renderer_feature_map == [stable_id]
    assert "is missing RendererFeatures" in caplog.text
    assert "missing scripts or compile error" in caplog.text


def test_drifted_map_is_rebuilt(model, store, asset):
    first = ScreenSpaceAO()
    second = RenderObjects()
    first_id = store.store_child(asset, first)
    second_id = store.store_child(asset, second)
    asset.renderer_features.extend([first, second])

    report = model.validate_and_repair()

    assert report.map_rebuilt is True
    assert asset.renderer_feature_map == [first_id, second_id]
    assert not model.map_drifted()


def test_without_map_missing_slot_links_unused_child(model, store, asset):
    first = ScreenSpaceAO()
    second = RenderObjects()
    first_id = store.store_child(asset, first)
    second_id = store.store_child(asset, second)
    asset.renderer_features.extend([None, second])

    report = model.validate_and_repair()

    assert report.linked == [0]
    assert asset.renderer_features == [first, second]
    assert asset.renderer_features[0] is first
    assert asset.renderer_feature_map == [first_id, second_id]


def test_without_map_and_nothing_to_link_slot_stays_unassigned(model, store, asset):
    second = RenderObjects()
    second_id = store.store_child(asset, second)
    asset.renderer_features.extend([None, second])

    report = model.validate_and_repair()

    assert report.missing == [0]
    assert asset.renderer_feature_map == [UNASSIGNED_ID, second_id]


def test_duplicate_references_are_reported_not_removed(model, store, asset):
    feature = ScreenSpaceAO()
    stable_id = store_existing(store, asset, feature)
    asset.renderer_features.append(feature)
    asset.renderer_feature_map.append(stable_id)

    report = model.validate_and_repair()

    assert report.duplicates == [1]
    assert len(model) == 2


def test_repair_is_undoable(model, store, asset, history):
    first = ScreenSpaceAO()
    store_existing(store, asset, first)
    asset.renderer_features[0] = None

    model.validate_and_repair()
    assert history.labels[-1] == "Repair Renderer Features"

    history.undo()
    assert asset.renderer_features == [None]
