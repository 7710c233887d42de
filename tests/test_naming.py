"""Tests for name helpers and the feature type catalog."""

import pytest

from render_feature_editor.errors import UnknownFeatureTypeError
from render_feature_editor.services import (
    FeatureTypeCatalog,
    RendererFeature,
    menu_name_for_type,
    sanitize_feature_name,
    split_camel_case,
)

from conftest import DecalProjector, ScreenSpaceAO


@pytest.mark.parametrize("raw,expected", [
    ("Foo@#1 Bar!", "Foo1 Bar"),
    ("Plain Name 2", "Plain Name 2"),
    ("über-pass", "berpass"),
    ("", ""),
])
def test_sanitize_feature_name(raw, expected):
    assert sanitize_feature_name(raw) == expected


@pytest.mark.parametrize("text,expected", [
    ("ScreenSpaceAO", "Screen Space AO"),
    ("SSAOPass", "SSAO Pass"),
    ("RenderObjects", "Render Objects"),
    ("Blur", "Blur"),
])
def test_split_camel_case(text, expected):
    assert split_camel_case(text) == expected


def test_menu_name_for_experimental_type():
    assert menu_name_for_type("DecalProjector", experimental=True) == "Decal Projector (Experimental)"
    assert menu_name_for_type("DecalProjector", True, " [beta]") == "Decal Projector [beta]"


class TestFeatureTypeCatalog:
    """Test FeatureTypeCatalog registration and lookup."""

    def test_resolve_by_name_and_class(self, catalog):
        assert catalog.resolve("ScreenSpaceAO").feature_cls is ScreenSpaceAO
        assert catalog.resolve(DecalProjector).experimental is True
        assert "ScreenSpaceAO" in catalog
        assert len(catalog) == 4

    def test_unknown_type(self, catalog):
        with pytest.raises(UnknownFeatureTypeError, match="'Missing' is not registered"):
            catalog.resolve("Missing")
        assert "Missing" not in catalog

    def test_name_clash_with_other_class(self, catalog):
        class ScreenSpaceAO(RendererFeature):
            pass

        with pytest.raises(ValueError):
            catalog.register(ScreenSpaceAO)
        assert ScreenSpaceAO not in catalog

    def test_decorator_registration(self):
        catalog = FeatureTypeCatalog()

        @catalog.feature(category="Custom")
        class OutlinePass(RendererFeature):
            pass

        info = catalog.resolve("OutlinePass")
        assert info.category == "Custom"
        assert info.feature_cls is OutlinePass
        assert [i.name for i in catalog.feature_types()] == ["OutlinePass"]
