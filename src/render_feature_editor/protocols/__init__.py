"""
Collaborator protocols for the feature-list editor.

Each external collaborator (persistence, undo history, adapter factory, type
registry, analytics) is a typing.Protocol with module-level register/get
functions. Sessions receive them bundled in an explicit EditorContext.
"""

from .field_editors import (
    ValueGettable,
    ValueSettable,
    ChangeSignalEmitter,
    LineEditAdapter,
    SpinBoxAdapter,
    DoubleSpinBoxAdapter,
    ComboBoxAdapter,
    CheckBoxAdapter,
    PyQtWidgetMeta,
    create_field_editor,
)
from .editor_config import EditorConfig, set_editor_config, get_editor_config
from .persistence import FeaturePersistence, register_persistence, get_persistence
from .undo_history import UndoHistory, register_undo_history, get_undo_history
from .feature_registry import (
    FeatureTypeInfo,
    FeatureTypeRegistryProtocol,
    register_feature_registry,
    get_feature_registry,
)
from .feature_adapter import (
    FeatureAdapter,
    FieldFeatureAdapter,
    FeatureAdapterFactory,
    DefaultAdapterFactory,
    nicify_field_name,
    register_adapter_factory,
    get_adapter_factory,
)
from .analytics import RendererAssetData, AnalyticsSink, register_analytics_sink, get_analytics_sink
from .context import EditorContext

__all__ = [
    "ValueGettable",
    "ValueSettable",
    "ChangeSignalEmitter",
    "LineEditAdapter",
    "SpinBoxAdapter",
    "DoubleSpinBoxAdapter",
    "ComboBoxAdapter",
    "CheckBoxAdapter",
    "PyQtWidgetMeta",
    "create_field_editor",
    "EditorConfig",
    "set_editor_config",
    "get_editor_config",
    "FeaturePersistence",
    "register_persistence",
    "get_persistence",
    "UndoHistory",
    "register_undo_history",
    "get_undo_history",
    "FeatureTypeInfo",
    "FeatureTypeRegistryProtocol",
    "register_feature_registry",
    "get_feature_registry",
    "FeatureAdapter",
    "FieldFeatureAdapter",
    "FeatureAdapterFactory",
    "DefaultAdapterFactory",
    "nicify_field_name",
    "register_adapter_factory",
    "get_adapter_factory",
    "RendererAssetData",
    "AnalyticsSink",
    "register_analytics_sink",
    "get_analytics_sink",
    "EditorContext",
]
