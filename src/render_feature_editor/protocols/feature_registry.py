"""Feature type registry protocol for pluggable feature lookup.

Allows applications to provide their own set of concrete feature types
without the editor depending on a specific discovery mechanism.
"""

from dataclasses import dataclass
from typing import Protocol, Optional, List, Union


@dataclass(frozen=True)
class FeatureTypeInfo:
    """Registry entry for one concrete feature type.

    Attributes:
        feature_cls: Concrete RendererFeature subclass
        category: Display category used to group the add menu
    """
    feature_cls: type
    category: str = "Uncategorized"

    @property
    def name(self) -> str:
        return self.feature_cls.__name__

    @property
    def experimental(self) -> bool:
        return bool(getattr(self.feature_cls, "experimental", False)) or \
            "experimental" in self.feature_cls.__module__.lower()


class FeatureTypeRegistryProtocol(Protocol):
    """Protocol for registries that enumerate concrete feature types.

    Example:
        from render_feature_editor.protocols import register_feature_registry
        from myapp.features import FEATURE_CATALOG

        register_feature_registry(FEATURE_CATALOG)
    """

    def feature_types(self) -> List[FeatureTypeInfo]:
        """Get all registered feature types in display order."""
        ...

    def resolve(self, feature_type: Union[type, str]) -> FeatureTypeInfo:
        """Look up a feature type by class or class name.

        Raises:
            UnknownFeatureTypeError: If the type is not registered
        """
        ...


# Global registry instance (set by application)
_feature_registry: Optional[FeatureTypeRegistryProtocol] = None


def register_feature_registry(registry: FeatureTypeRegistryProtocol) -> None:
    """Register a feature type registry implementation.

    Args:
        registry: Object implementing FeatureTypeRegistryProtocol
    """
    global _feature_registry
    _feature_registry = registry


def get_feature_registry() -> Optional[FeatureTypeRegistryProtocol]:
    """Get the registered feature type registry.

    Returns:
        Registered registry or None if not registered
    """
    return _feature_registry
