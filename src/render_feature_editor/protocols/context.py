"""Explicit collaborator bundle handed to an editing session."""

from dataclasses import dataclass
from typing import Optional

from .persistence import FeaturePersistence, get_persistence
from .undo_history import UndoHistory, get_undo_history
from .feature_adapter import FeatureAdapterFactory, get_adapter_factory
from .feature_registry import FeatureTypeRegistryProtocol, get_feature_registry
from .analytics import AnalyticsSink, get_analytics_sink


@dataclass
class EditorContext:
    """Collaborators for one editing session.

    Passed explicitly at construction so a session never reaches for a global
    singleton while it is running. ``analytics`` is optional; a session
    without one simply does not report.
    """
    persistence: FeaturePersistence
    history: UndoHistory
    adapter_factory: FeatureAdapterFactory
    registry: FeatureTypeRegistryProtocol
    analytics: Optional[AnalyticsSink] = None

    @classmethod
    def from_registered(cls) -> "EditorContext":
        """Build a context from the globally registered providers.

        Raises:
            RuntimeError: If a required provider has not been registered
        """
        providers = {
            "persistence": (get_persistence(), "register_persistence"),
            "history": (get_undo_history(), "register_undo_history"),
            "adapter_factory": (get_adapter_factory(), "register_adapter_factory"),
            "registry": (get_feature_registry(), "register_feature_registry"),
        }
        for name, (provider, register_fn) in providers.items():
            if provider is None:
                raise RuntimeError(f"No {name} provider registered. Call {register_fn}(...).")
        return cls(
            **{name: provider for name, (provider, _) in providers.items()},
            analytics=get_analytics_sink(),
        )
