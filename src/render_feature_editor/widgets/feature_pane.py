"""
Feature Pane Widget for PyQt6

Draws one entry of the feature list: a foldout header with the active toggle
and a context menu, the Name field, and the bound adapter's own editor. An
unresolved entry draws the missing-feature placeholder instead.
"""

import logging
from typing import List, Optional

from PyQt6.QtWidgets import (
    QWidget, QVBoxLayout, QHBoxLayout, QLabel, QCheckBox, QLineEdit,
    QPushButton, QToolButton, QFormLayout, QMenu, QSizePolicy
)
from PyQt6.QtCore import Qt, pyqtSignal
from PyQt6.QtGui import QFont

from render_feature_editor.protocols.editor_config import EditorConfig, get_editor_config
from render_feature_editor.services.adapter_cache import FeatureRow
from render_feature_editor.services.editor_session import ContextAction

logger = logging.getLogger(__name__)


class FeaturePaneWidget(QWidget):
    """
    PyQt6 pane for one feature-list entry.

    The pane never touches the model; every interaction is emitted as a
    signal carrying the entry index and handled by FeatureListEditorWidget.
    """

    # Signals
    active_toggled = pyqtSignal(int, bool)  # index, active
    rename_requested = pyqtSignal(int, str)  # index, raw name
    expanded_toggled = pyqtSignal(int, bool)  # index, expanded
    move_requested = pyqtSignal(int, int)  # index, offset
    remove_requested = pyqtSignal(int)  # index
    attempt_fix_requested = pyqtSignal()

    def __init__(self, row: FeatureRow, actions: Optional[List[ContextAction]] = None,
                 config: Optional[EditorConfig] = None, parent=None):
        """
        Initialize the feature pane.

        Args:
            row: Description of the entry produced by the adapter cache
            actions: Header context-menu actions for this entry
            config: Editor configuration (missing-feature help text)
            parent: Parent widget
        """
        super().__init__(parent)
        self.row = row
        self.index = row.index
        self.actions_for_menu = actions or []
        self.config = config or get_editor_config()

        self.name_edit: Optional[QLineEdit] = None
        self.fix_button: Optional[QPushButton] = None
        self.adapter_editor: Optional[QWidget] = None

        self.setup_ui()

    def setup_ui(self):
        """Setup the user interface."""
        layout = QVBoxLayout(self)
        layout.setContentsMargins(8, 6, 8, 6)
        layout.setSpacing(4)

        layout.addWidget(self.create_header())

        self.body = QWidget()
        body_layout = QVBoxLayout(self.body)
        body_layout.setContentsMargins(16, 0, 0, 0)
        if self.row.missing:
            self.create_missing_body(body_layout)
        else:
            self.create_feature_body(body_layout)
        layout.addWidget(self.body)
        self.body.setVisible(self.row.missing or self.row.expanded)

        self.setSizePolicy(QSizePolicy(QSizePolicy.Policy.Preferred, QSizePolicy.Policy.Minimum))

    def create_header(self) -> QWidget:
        header = QWidget()
        layout = QHBoxLayout(header)
        layout.setContentsMargins(0, 0, 0, 0)
        layout.setSpacing(6)

        self.expand_button = QToolButton()
        self.expand_button.setCheckable(True)
        self.expand_button.setChecked(self.row.expanded)
        self.expand_button.setArrowType(Qt.ArrowType.DownArrow if self.row.expanded else Qt.ArrowType.RightArrow)
        self.expand_button.setEnabled(not self.row.missing)
        self.expand_button.toggled.connect(self._on_expand_toggled)
        layout.addWidget(self.expand_button)

        self.active_checkbox = QCheckBox()
        self.active_checkbox.setChecked(self.row.active)
        # A missing feature can never be enabled
        self.active_checkbox.setEnabled(not self.row.missing)
        self.active_checkbox.toggled.connect(lambda checked: self.active_toggled.emit(self.index, checked))
        layout.addWidget(self.active_checkbox)

        self.title_label = QLabel(self.row.title)
        self.title_label.setFont(QFont("Arial", 10, QFont.Weight.Bold))
        layout.addWidget(self.title_label)
        layout.addStretch()

        self.menu_button = QToolButton()
        self.menu_button.setText("⋮")
        self.menu_button.clicked.connect(
            lambda: self.show_context_menu(self.menu_button.mapToGlobal(self.menu_button.rect().bottomLeft()))
        )
        layout.addWidget(self.menu_button)
        return header

    def create_feature_body(self, layout: QVBoxLayout) -> None:
        form = QFormLayout()
        form.setContentsMargins(0, 0, 0, 0)
        self.name_edit = QLineEdit(self.row.name)
        self.name_edit.setToolTip("Render pass name. This name is the name displayed in Frame Debugger.")
        # editingFinished commits on Enter/focus-out, not per keystroke
        self.name_edit.editingFinished.connect(lambda: self.rename_requested.emit(self.index, self.name_edit.text()))
        form.addRow("Name", self.name_edit)
        layout.addLayout(form)

        if self.row.adapter is not None:
            self.adapter_editor = self.row.adapter.get_editor(self.body)
            layout.addWidget(self.adapter_editor)

    def create_missing_body(self, layout: QVBoxLayout) -> None:
        message = QLabel(self.config.missing_feature_help)
        message.setWordWrap(True)
        message.setStyleSheet("color: #ff6b6b;")
        layout.addWidget(message)

        self.fix_button = QPushButton("Attempt Fix")
        self.fix_button.clicked.connect(lambda: self.attempt_fix_requested.emit())
        layout.addWidget(self.fix_button)

    def build_context_menu(self) -> QMenu:
        menu = QMenu(self)
        for action in self.actions_for_menu:
            if action.key == "remove":
                menu.addSeparator()
            qaction = menu.addAction(action.label)
            qaction.setEnabled(action.enabled)
            qaction.setData(action.key)
        menu.triggered.connect(lambda qaction: self.trigger_action(qaction.data()))
        return menu

    def show_context_menu(self, global_pos) -> None:
        self.build_context_menu().exec(global_pos)

    def contextMenuEvent(self, event):
        self.show_context_menu(event.globalPos())

    def trigger_action(self, key: str) -> None:
        """Emit the signal for a context action, honoring its enabled state."""
        action = next((a for a in self.actions_for_menu if a.key == key), None)
        if action is None or not action.enabled:
            logger.debug(f"Ignoring unavailable action {key!r} on feature {self.index}")
            return
        if key == "move_up":
            self.move_requested.emit(self.index, -1)
        elif key == "move_down":
            self.move_requested.emit(self.index, 1)
        elif key == "remove":
            self.remove_requested.emit(self.index)

    def _on_expand_toggled(self, expanded: bool) -> None:
        self.expand_button.setArrowType(Qt.ArrowType.DownArrow if expanded else Qt.ArrowType.RightArrow)
        self.body.setVisible(expanded)
        self.expanded_toggled.emit(self.index, expanded)

    def update_row(self, row: FeatureRow) -> None:
        """Refresh header and name from a new row without rebuilding the pane."""
        self.row = row
        self.title_label.setText(row.title)
        self.active_checkbox.blockSignals(True)
        self.active_checkbox.setChecked(row.active)
        self.active_checkbox.blockSignals(False)
        if self.name_edit is not None and self.name_edit.text() != row.name:
            self.name_edit.setText(row.name)

    def release(self) -> None:
        """Detach the adapter's editor so deleting this pane leaves it to its adapter."""
        if self.adapter_editor is not None:
            try:
                self.adapter_editor.setParent(None)
            except RuntimeError:
                pass  # Already deleted
            self.adapter_editor = None
