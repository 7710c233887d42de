"""
Field editor widgets used by the default feature adapter.

Wraps Qt input widgets behind one explicit contract so a feature's own fields
can be edited without duck typing on Qt's inconsistent APIs:

- QLineEdit.text() vs QSpinBox.value() vs QComboBox.currentData()
- textChanged vs valueChanged vs currentIndexChanged

Feature fields always hold concrete values, so there is no None/placeholder
state here.
"""

from abc import ABC, ABCMeta, abstractmethod
from enum import Enum
from typing import Any, Callable, Dict

from PyQt6.QtWidgets import QLineEdit, QSpinBox, QDoubleSpinBox, QComboBox, QCheckBox, QWidget
from PyQt6.QtCore import QObject


class PyQtWidgetMeta(type(QObject), ABCMeta):
    """Metaclass for PyQt widgets that need ABC support."""
    pass


class ValueGettable(ABC):
    """ABC for widgets that can return a value."""

    @abstractmethod
    def get_value(self) -> Any:
        """Get the current value from the widget."""
        pass


class ValueSettable(ABC):
    """ABC for widgets that can accept a value."""

    @abstractmethod
    def set_value(self, value: Any) -> None:
        """Set the widget's value without changing its type."""
        pass


class ChangeSignalEmitter(ABC):
    """
    ABC for widgets that report value changes.

    The callback receives the new value. Connections are tracked per callback
    so they can be disconnected again when an adapter is destroyed.
    """

    @abstractmethod
    def connect_change_signal(self, callback: Callable[[Any], None]) -> None:
        pass

    @abstractmethod
    def disconnect_change_signal(self, callback: Callable[[Any], None]) -> None:
        pass


class _TrackedChangeSignal(ChangeSignalEmitter):
    """Shared connect/disconnect bookkeeping for the adapters below."""

    @abstractmethod
    def _change_signal(self):
        """Return the Qt signal that reports a committed edit."""
        pass

    def connect_change_signal(self, callback: Callable[[Any], None]) -> None:
        slots: Dict[Callable, Callable] = self.__dict__.setdefault("_change_slots", {})
        slot = lambda *_: callback(self.get_value())
        slots[callback] = slot
        self._change_signal().connect(slot)

    def disconnect_change_signal(self, callback: Callable[[Any], None]) -> None:
        slot = self.__dict__.get("_change_slots", {}).pop(callback, None)
        if slot is None:
            return
        try:
            self._change_signal().disconnect(slot)
        except TypeError:
            # Signal not connected - ignore
            pass


class LineEditAdapter(_TrackedChangeSignal, QLineEdit, ValueGettable, ValueSettable,
                      metaclass=PyQtWidgetMeta):
    """String field editor. Commits on editingFinished, like a delayed text field."""

    def get_value(self) -> Any:
        return self.text()

    def set_value(self, value: Any) -> None:
        self.setText("" if value is None else str(value))

    def _change_signal(self):
        return self.editingFinished


class SpinBoxAdapter(_TrackedChangeSignal, QSpinBox, ValueGettable, ValueSettable,
                     metaclass=PyQtWidgetMeta):
    """Integer field editor."""

    def __init__(self, parent=None):
        super().__init__(parent)
        self.setRange(-2147483648, 2147483647)  # Default int range

    def get_value(self) -> Any:
        return self.value()

    def set_value(self, value: Any) -> None:
        self.setValue(int(value))

    def _change_signal(self):
        return self.valueChanged


class DoubleSpinBoxAdapter(_TrackedChangeSignal, QDoubleSpinBox, ValueGettable, ValueSettable,
                           metaclass=PyQtWidgetMeta):
    """Float field editor."""

    def __init__(self, parent=None):
        super().__init__(parent)
        self.setRange(-1e9, 1e9)
        self.setDecimals(4)

    def get_value(self) -> Any:
        return self.value()

    def set_value(self, value: Any) -> None:
        self.setValue(float(value))

    def _change_signal(self):
        return self.valueChanged


class ComboBoxAdapter(_TrackedChangeSignal, QComboBox, ValueGettable, ValueSettable,
                      metaclass=PyQtWidgetMeta):
    """Enum field editor. Stores the enum member in itemData."""

    def get_value(self) -> Any:
        if self.currentIndex() < 0:
            return None
        return self.itemData(self.currentIndex())

    def set_value(self, value: Any) -> None:
        for i in range(self.count()):
            if self.itemData(i) == value:
                self.setCurrentIndex(i)
                return
        self.setCurrentIndex(-1)

    def populate_enum(self, enum_type: type) -> None:
        if not isinstance(enum_type, type) or not issubclass(enum_type, Enum):
            raise TypeError(f"{enum_type} is not an Enum type")

        self.clear()
        for enum_value in enum_type:
            self.addItem(enum_value.name, enum_value)

    def _change_signal(self):
        return self.currentIndexChanged


class CheckBoxAdapter(_TrackedChangeSignal, QCheckBox, ValueGettable, ValueSettable,
                      metaclass=PyQtWidgetMeta):
    """Bool field editor."""

    def get_value(self) -> Any:
        return self.isChecked()

    def set_value(self, value: Any) -> None:
        self.setChecked(bool(value))

    def _change_signal(self):
        return self.toggled


def create_field_editor(value: Any, parent: QWidget = None) -> QWidget:
    """Create the editor matching the type of a field's current value.

    bool is checked before int because bool is an int subclass.

    Raises:
        TypeError: If no editor exists for the value's type
    """
    if isinstance(value, bool):
        editor = CheckBoxAdapter(parent)
    elif isinstance(value, Enum):
        editor = ComboBoxAdapter(parent)
        editor.populate_enum(type(value))
    elif isinstance(value, int):
        editor = SpinBoxAdapter(parent)
    elif isinstance(value, float):
        editor = DoubleSpinBoxAdapter(parent)
    elif isinstance(value, str):
        editor = LineEditAdapter(parent)
    else:
        raise TypeError(f"No field editor for {type(value).__name__}")
    editor.set_value(value)
    return editor
