"""
Service layer for feature-list editing.

Framework-agnostic model logic (collection, adapter cache, session) plus
in-memory reference implementations of the collaborator protocols.
"""

from .renderer_data import RendererData, RendererFeature, disallow_multiple
from .naming import sanitize_feature_name, split_camel_case, menu_name_for_type
from .type_registry import FeatureTypeCatalog
from .in_memory import InMemoryFeatureStore, InMemoryUndoHistory, UndoGroup
from .feature_collection import FeatureCollectionModel, FeatureEntry, RepairReport, UNASSIGNED_ID
from .adapter_cache import (
    AdapterCache,
    AdapterBinding,
    BindingState,
    FeatureEdit,
    FeatureRow,
    ATTEMPT_FIX,
)
from .editor_session import FeatureEditorSession, MenuEntry, ContextAction

__all__ = [
    "RendererData",
    "RendererFeature",
    "disallow_multiple",
    "sanitize_feature_name",
    "split_camel_case",
    "menu_name_for_type",
    "FeatureTypeCatalog",
    "InMemoryFeatureStore",
    "InMemoryUndoHistory",
    "UndoGroup",
    "FeatureCollectionModel",
    "FeatureEntry",
    "RepairReport",
    "UNASSIGNED_ID",
    "AdapterCache",
    "AdapterBinding",
    "BindingState",
    "FeatureEdit",
    "FeatureRow",
    "ATTEMPT_FIX",
    "FeatureEditorSession",
    "MenuEntry",
    "ContextAction",
]
