"""
In-process feature type catalog.

Reference implementation of FeatureTypeRegistryProtocol. Types are listed in
registration order; the add menu groups them by category.
"""

import logging
from typing import Dict, List, Optional, Union

from render_feature_editor.errors import UnknownFeatureTypeError
from render_feature_editor.protocols.feature_registry import FeatureTypeInfo

logger = logging.getLogger(__name__)


class FeatureTypeCatalog:
    """Registry of concrete feature types available for ``add``."""

    def __init__(self) -> None:
        self._types: Dict[str, FeatureTypeInfo] = {}

    def register(self, feature_cls: type, category: Optional[str] = None) -> type:
        """Register a feature class. Usable as a plain call or a decorator."""
        info = FeatureTypeInfo(
            feature_cls=feature_cls,
            category=category or getattr(feature_cls, "category", "Uncategorized"),
        )
        existing = self._types.get(info.name)
        if existing is not None and existing.feature_cls is not feature_cls:
            raise ValueError(f"Feature type name {info.name!r} already registered by {existing.feature_cls!r}")
        self._types[info.name] = info
        logger.debug(f"Registered feature type {info.name} in category {info.category!r}")
        return feature_cls

    def feature(self, category: Optional[str] = None):
        """Decorator form: ``@catalog.feature(category="Lighting")``."""
        def decorator(feature_cls: type) -> type:
            return self.register(feature_cls, category)
        return decorator

    def feature_types(self) -> List[FeatureTypeInfo]:
        return list(self._types.values())

    def resolve(self, feature_type: Union[type, str]) -> FeatureTypeInfo:
        name = feature_type if isinstance(feature_type, str) else feature_type.__name__
        info = self._types.get(name)
        if info is None or (not isinstance(feature_type, str) and info.feature_cls is not feature_type):
            raise UnknownFeatureTypeError(f"Feature type {name!r} is not registered")
        return info

    def __contains__(self, feature_type: Union[type, str]) -> bool:
        try:
            self.resolve(feature_type)
        except UnknownFeatureTypeError:
            return False
        return True

    def __len__(self) -> int:
        return len(self._types)
