"""
Feature List Editor Widget for PyQt6 GUI.

Displays the renderer feature list of one editing session as a scrollable
column of feature panes with an "Add Renderer Feature" menu.
"""

import logging
from typing import Dict, List

from PyQt6.QtWidgets import (
    QWidget, QVBoxLayout, QHBoxLayout, QPushButton, QLabel, QScrollArea, QMenu
)
from PyQt6.QtCore import Qt, pyqtSignal

from render_feature_editor.errors import FeatureListError
from render_feature_editor.services.adapter_cache import FeatureEdit
from render_feature_editor.services.editor_session import FeatureEditorSession
from render_feature_editor.widgets.feature_pane import FeaturePaneWidget

logger = logging.getLogger(__name__)


class FeatureListEditorWidget(QWidget):
    """
    Renderer feature list editor.

    All edits go through the session's model; the widget rebuilds its panes
    when the model reports a structural change and refreshes a single pane
    when one entry changes.
    """

    # Signals
    features_changed = pyqtSignal()
    error_reported = pyqtSignal(str)

    def __init__(self, session: FeatureEditorSession, parent=None):
        super().__init__(parent)
        self.session = session
        self.session.open()

        self.feature_panes: List[FeaturePaneWidget] = []

        self.setup_ui()

        self.session.model.structure_changed.connect(self._on_structure_changed)
        self.session.model.entry_changed.connect(self._on_entry_changed)

        logger.debug(f"Feature list editor initialized with {len(self.session.model)} features")

    def setup_ui(self):
        """Setup the user interface."""
        layout = QVBoxLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)
        layout.setSpacing(8)

        header_layout = QHBoxLayout()
        self.header_label = QLabel("Renderer Features")
        self.header_label.setStyleSheet("font-weight: bold; font-size: 14px;")
        self.header_label.setToolTip(
            "Features to include in this renderer.\n"
            "To add or remove features, use the button below and each feature's menu."
        )
        header_layout.addWidget(self.header_label)
        header_layout.addStretch()
        layout.addLayout(header_layout)

        self.scroll_area = QScrollArea()
        self.scroll_area.setWidgetResizable(True)
        self.scroll_area.setVerticalScrollBarPolicy(Qt.ScrollBarPolicy.ScrollBarAsNeeded)

        self.feature_container = QWidget()
        self.feature_layout = QVBoxLayout(self.feature_container)
        self.feature_layout.setAlignment(Qt.AlignmentFlag.AlignTop)
        self.feature_layout.setSpacing(8)

        self._populate_feature_list()

        self.scroll_area.setWidget(self.feature_container)
        layout.addWidget(self.scroll_area)

        self.add_button = QPushButton("Add Renderer Feature")
        self.add_button.clicked.connect(self.show_add_menu)
        layout.addWidget(self.add_button)

    def _populate_feature_list(self):
        """Rebuild one pane per entry, or the empty-state label."""
        for pane in self.feature_panes:
            pane.release()
            pane.deleteLater()
        self.feature_panes.clear()

        while self.feature_layout.count():
            child = self.feature_layout.takeAt(0)
            if child.widget():
                child.widget().deleteLater()

        rows = self.session.rows()
        if not rows:
            empty_label = QLabel("No Renderer Features added")
            empty_label.setAlignment(Qt.AlignmentFlag.AlignCenter)
            empty_label.setStyleSheet("font-style: italic; padding: 20px;")
            self.feature_layout.addWidget(empty_label)
            return

        for row in rows:
            pane = FeaturePaneWidget(row, self.session.context_actions(row.index), config=self.session.config)
            pane.active_toggled.connect(self._on_active_toggled)
            pane.rename_requested.connect(self._on_rename_requested)
            pane.expanded_toggled.connect(self._on_expanded_toggled)
            pane.move_requested.connect(self.move_feature)
            pane.remove_requested.connect(self.remove_feature)
            pane.attempt_fix_requested.connect(self.attempt_fix)
            self.feature_panes.append(pane)
            self.feature_layout.addWidget(pane)

    def build_add_menu(self) -> QMenu:
        """Menu of addable feature types, one submenu per category."""
        menu = QMenu(self)
        submenus: Dict[str, QMenu] = {}
        entries = self.session.add_menu_entries()
        for entry in entries:
            submenu = submenus.get(entry.category)
            if submenu is None:
                submenu = menu.addMenu(entry.category)
                submenus[entry.category] = submenu
            action = submenu.addAction(entry.label)
            action.setData(entry.type_name)
            action.triggered.connect(lambda checked=False, name=entry.type_name: self.add_feature(name))
        if not entries:
            menu.addAction("No features available").setEnabled(False)
        return menu

    def show_add_menu(self):
        self.build_add_menu().exec(self.add_button.mapToGlobal(self.add_button.rect().bottomLeft()))

    # ---- actions -----------------------------------------------------

    def add_feature(self, type_name: str) -> bool:
        return self._run(lambda: self.session.add(type_name), f"add {type_name}")

    def remove_feature(self, index: int) -> bool:
        return self._run(lambda: self.session.remove(index), f"remove feature {index}")

    def move_feature(self, index: int, offset: int) -> bool:
        return self._run(lambda: self.session.move(index, offset), f"move feature {index}")

    def attempt_fix(self) -> bool:
        return self._run(self.session.validate_and_repair, "repair features")

    def undo(self) -> bool:
        return self._run(self.session.undo, "undo")

    def _on_active_toggled(self, index: int, active: bool) -> None:
        self._run(lambda: self.session.row(index, FeatureEdit(active=active)), f"toggle feature {index}")

    def _on_rename_requested(self, index: int, name: str) -> None:
        if self._run(lambda: self.session.row(index, FeatureEdit(name=name)), f"rename feature {index}"):
            # Show the sanitized name even when sanitizing left it unchanged
            self.feature_panes[index].update_row(self.session.row(index))

    def _on_expanded_toggled(self, index: int, expanded: bool) -> None:
        self._run(lambda: self.session.row(index, FeatureEdit(expanded=expanded)), f"expand feature {index}")

    def _run(self, operation, description: str) -> bool:
        try:
            operation()
        except FeatureListError as e:
            logger.warning(f"Failed to {description}: {e}")
            self.error_reported.emit(str(e))
            return False
        return True

    # ---- model notifications -----------------------------------------

    def _on_structure_changed(self) -> None:
        if not self.session.is_open:
            return
        self.session.cache.invalidate()
        self._populate_feature_list()
        self.features_changed.emit()

    def _on_entry_changed(self, index: int) -> None:
        if not self.session.is_open:
            return
        if 0 <= index < len(self.feature_panes):
            self.feature_panes[index].update_row(self.session.row(index))
        self.features_changed.emit()

    def closeEvent(self, event):
        self.session.close()
        super().closeEvent(event)
