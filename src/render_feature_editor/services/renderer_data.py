"""
Renderer asset and feature base types.

``RendererData`` owns the two persisted, index-aligned lists the editor keeps
consistent: ``renderer_features`` (feature objects, None where a reference
failed to load) and ``renderer_feature_map`` (their stable ids).
"""

import itertools
from dataclasses import dataclass, field, fields
from typing import Any, ClassVar, Dict, List, Optional, Tuple

_instance_ids = itertools.count(1)


@dataclass
class RendererFeature:
    """Base class for pluggable render-pass features.

    Subclasses are dataclasses; every field other than ``name`` and
    ``active`` (and private ``_`` fields) is editable through the default
    adapter. Compare features with ``is``: dataclass equality is by value.
    """
    name: str = ""
    active: bool = True

    category: ClassVar[str] = "Uncategorized"
    allow_multiple: ClassVar[bool] = True
    experimental: ClassVar[bool] = False

    @property
    def feature_type(self) -> type:
        return type(self)

    def editable_fields(self) -> List[str]:
        return [f.name for f in fields(self)
                if f.name not in ("name", "active") and not f.name.startswith("_")]

    def capture_state(self) -> Dict[str, Any]:
        return {f.name: getattr(self, f.name) for f in fields(self)}

    def restore_state(self, state: Dict[str, Any]) -> None:
        for name, value in state.items():
            setattr(self, name, value)


def disallow_multiple(feature_cls: type) -> type:
    """Class decorator: at most one instance of this feature type per renderer."""
    feature_cls.allow_multiple = False
    return feature_cls


@dataclass
class RendererData:
    """Renderer configuration asset that owns an ordered list of features."""
    name: str = "Renderer2DData"
    renderer_features: List[Optional[RendererFeature]] = field(default_factory=list)
    renderer_feature_map: List[int] = field(default_factory=list)
    instance_id: int = field(default_factory=lambda: next(_instance_ids))

    def duplicate_feature_check(self, feature_cls: type) -> bool:
        """Return True if adding feature_cls would create a forbidden duplicate.

        Unresolved slots carry no type and never count as duplicates.
        """
        if getattr(feature_cls, "allow_multiple", True):
            return False
        return any(type(feature) is feature_cls
                   for feature in self.renderer_features if feature is not None)

    def capture_state(self) -> Tuple[List[Optional[RendererFeature]], List[int]]:
        return list(self.renderer_features), list(self.renderer_feature_map)

    def restore_state(self, state: Tuple[List[Optional[RendererFeature]], List[int]]) -> None:
        features, feature_map = state
        self.renderer_features[:] = features
        self.renderer_feature_map[:] = feature_map
