"""
Presentation adapters for feature objects.

An adapter is bound to exactly one feature instance and builds the editor for
that instance's own fields. Adapters never write to the feature themselves:
they report edits through ``on_changed`` callbacks so the owner can route the
write through the feature collection (undo, persistence, notification).
"""

import logging
import re
from abc import ABC, abstractmethod
from typing import Any, Callable, Dict, List, Optional, Protocol

from PyQt6.QtWidgets import QWidget, QFormLayout, QLabel

from .field_editors import create_field_editor

logger = logging.getLogger(__name__)

# callback(field_name, value); field_name None means the adapter already
# applied its changes to the feature and only needs them persisted.
FieldChangeCallback = Callable[[Optional[str], Any], None]


def nicify_field_name(name: str) -> str:
    """``render_scale`` -> ``Render Scale``, ``mRenderScale`` -> ``Render Scale``."""
    name = re.sub(r"^m_?(?=[A-Z_])", "", name)
    name = re.sub(r"([a-z0-9])([A-Z])", r"\1 \2", name.replace("_", " "))
    return " ".join(word[:1].upper() + word[1:] for word in name.split())


class FeatureAdapter(ABC):
    """Base class for the editor of one feature instance."""

    def __init__(self, feature: Any):
        self.feature = feature
        self._callbacks: List[FieldChangeCallback] = []
        self._editor: Optional[QWidget] = None
        self._destroyed = False

    @property
    def destroyed(self) -> bool:
        return self._destroyed

    @property
    def editor(self) -> Optional[QWidget]:
        return self._editor

    def on_changed(self, callback: FieldChangeCallback) -> None:
        """Subscribe to field edits made in this adapter's editor."""
        self._callbacks.append(callback)

    def notify_changed(self, field_name: Optional[str] = None, value: Any = None) -> None:
        if self._destroyed:
            logger.debug(f"Ignoring change from destroyed adapter for {type(self.feature).__name__}")
            return
        for callback in list(self._callbacks):
            callback(field_name, value)

    def get_editor(self, parent: Optional[QWidget] = None) -> QWidget:
        """Return the editor widget, building it on first use."""
        if self._destroyed:
            raise RuntimeError(f"Adapter for {type(self.feature).__name__} has been destroyed")
        if self._editor is None:
            self._editor = self.create_editor(parent)
        return self._editor

    @abstractmethod
    def create_editor(self, parent: Optional[QWidget] = None) -> QWidget:
        """Build the editor widget for this adapter's feature."""
        pass

    def destroy(self) -> None:
        """Release the editor widget and drop all callbacks."""
        if self._destroyed:
            return
        self._destroyed = True
        self._callbacks.clear()
        if self._editor is not None:
            try:
                self._editor.deleteLater()
            except RuntimeError:
                pass  # Already deleted with its parent
            self._editor = None


class FieldFeatureAdapter(FeatureAdapter):
    """Default adapter: one typed field editor per ``feature.editable_fields()`` entry."""

    def __init__(self, feature: Any):
        super().__init__(feature)
        self.field_editors: Dict[str, QWidget] = {}
        self._field_callbacks: Dict[str, Callable[[Any], None]] = {}

    def create_editor(self, parent: Optional[QWidget] = None) -> QWidget:
        container = QWidget(parent)
        layout = QFormLayout(container)
        layout.setContentsMargins(0, 0, 0, 0)

        for field_name in self.feature.editable_fields():
            value = getattr(self.feature, field_name)
            try:
                field_editor = create_field_editor(value, container)
            except TypeError:
                logger.debug(f"Skipping {type(self.feature).__name__}.{field_name}: unsupported type {type(value).__name__}")
                continue
            callback = lambda new_value, name=field_name: self.notify_changed(name, new_value)
            field_editor.connect_change_signal(callback)
            self._field_callbacks[field_name] = callback
            self.field_editors[field_name] = field_editor
            layout.addRow(QLabel(nicify_field_name(field_name)), field_editor)

        if not self.field_editors:
            layout.addRow(QLabel("No editable fields"))
        return container

    def refresh(self) -> None:
        """Push current feature values back into the field editors."""
        for field_name, field_editor in self.field_editors.items():
            field_editor.blockSignals(True)
            try:
                field_editor.set_value(getattr(self.feature, field_name))
            finally:
                field_editor.blockSignals(False)

    def destroy(self) -> None:
        for field_name, field_editor in self.field_editors.items():
            try:
                field_editor.disconnect_change_signal(self._field_callbacks[field_name])
            except RuntimeError:
                pass  # Editor already deleted with its parent
        self.field_editors.clear()
        self._field_callbacks.clear()
        super().destroy()


class FeatureAdapterFactory(Protocol):
    """Protocol for creating and destroying per-feature adapters."""

    def create_adapter(self, feature: Any) -> FeatureAdapter:
        ...

    def destroy_adapter(self, adapter: FeatureAdapter) -> None:
        ...


class DefaultAdapterFactory:
    """Adapter factory with per-type registration and a field-based fallback.

    Lookup walks the feature's MRO, so an adapter registered for a base
    feature class also serves its subclasses.
    """

    def __init__(self, fallback: type = FieldFeatureAdapter):
        self._adapters: Dict[type, type] = {}
        self._fallback = fallback
        self.live_adapters: List[FeatureAdapter] = []

    def register(self, feature_cls: type, adapter_cls: type) -> None:
        self._adapters[feature_cls] = adapter_cls

    def adapter_class_for(self, feature_cls: type) -> type:
        for klass in feature_cls.__mro__:
            if klass in self._adapters:
                return self._adapters[klass]
        return self._fallback

    def create_adapter(self, feature: Any) -> FeatureAdapter:
        adapter = self.adapter_class_for(type(feature))(feature)
        self.live_adapters.append(adapter)
        return adapter

    def destroy_adapter(self, adapter: FeatureAdapter) -> None:
        adapter.destroy()
        if adapter in self.live_adapters:
            self.live_adapters.remove(adapter)


_adapter_factory: Optional[FeatureAdapterFactory] = None


def register_adapter_factory(factory: FeatureAdapterFactory) -> None:
    """Register a global adapter factory."""
    global _adapter_factory
    _adapter_factory = factory


def get_adapter_factory() -> Optional[FeatureAdapterFactory]:
    """Get the registered adapter factory."""
    return _adapter_factory
