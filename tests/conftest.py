"""pytest configuration and fixtures for render-feature-editor tests."""

import os
from dataclasses import dataclass
from enum import Enum

import pytest

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

from PyQt6.QtWidgets import QApplication

from render_feature_editor.protocols import (
    DefaultAdapterFactory,
    EditorConfig,
    EditorContext,
)
from render_feature_editor.services import (
    AdapterCache,
    FeatureCollectionModel,
    FeatureEditorSession,
    FeatureTypeCatalog,
    InMemoryFeatureStore,
    InMemoryUndoHistory,
    RendererData,
    RendererFeature,
    disallow_multiple,
)


class DecalTechnique(Enum):
    AUTOMATIC = "automatic"
    DBUFFER = "dbuffer"
    SCREEN_SPACE = "screen_space"


@dataclass
class ScreenSpaceAO(RendererFeature):
    radius: float = 0.5
    sample_count: int = 4
    downsample: bool = False

    category = "Lighting"


@dataclass
class RenderObjects(RendererFeature):
    layer_mask: int = 1
    override_material: str = ""

    category = "Rendering"


@disallow_multiple
@dataclass
class DepthBlur(RendererFeature):
    blur_radius: int = 3

    category = "Post Processing"


@dataclass
class DecalProjector(RendererFeature):
    technique: DecalTechnique = DecalTechnique.AUTOMATIC
    max_draw_distance: float = 1000.0

    category = "Rendering"
    experimental = True


class RecordingAnalytics:
    def __init__(self):
        self.events = []

    def send_data(self, event, payload):
        self.events.append((event, payload))


@pytest.fixture(scope="session")
def qapp():
    """Create QApplication instance for tests."""
    app = QApplication.instance() or QApplication([])
    yield app
    # Don't quit - may cause issues with other tests


@pytest.fixture
def store():
    return InMemoryFeatureStore()


@pytest.fixture
def history(store):
    return InMemoryUndoHistory(store)


@pytest.fixture
def catalog():
    catalog = FeatureTypeCatalog()
    for feature_cls in (ScreenSpaceAO, RenderObjects, DepthBlur, DecalProjector):
        catalog.register(feature_cls)
    return catalog


@pytest.fixture
def adapter_factory():
    return DefaultAdapterFactory()


@pytest.fixture
def analytics():
    return RecordingAnalytics()


@pytest.fixture
def context(store, history, adapter_factory, catalog, analytics):
    return EditorContext(
        persistence=store,
        history=history,
        adapter_factory=adapter_factory,
        registry=catalog,
        analytics=analytics,
    )


@pytest.fixture
def config():
    return EditorConfig()


@pytest.fixture
def asset():
    return RendererData(name="TestRenderer")


@pytest.fixture
def model(qapp, asset, context, config):
    return FeatureCollectionModel(asset, context, config)


@pytest.fixture
def cache(model):
    cache = AdapterCache(model)
    yield cache
    cache.teardown()


@pytest.fixture
def session(qapp, asset, context, config):
    session = FeatureEditorSession(asset, context, config)
    yield session
    session.close()


def store_existing(store, asset, feature):
    """Put an already-saved feature on the asset, as if loaded from disk."""
    stable_id = store.store_child(asset, feature)
    asset.renderer_features.append(feature)
    asset.renderer_feature_map.append(stable_id)
    return stable_id
