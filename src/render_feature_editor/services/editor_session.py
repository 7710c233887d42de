"""
Editing session for one renderer asset.

Ties the feature collection, its adapter cache and the collaborators in an
EditorContext to a single open/close lifetime. Also builds what the inspector
chrome needs around the list: add-menu entries and per-entry context actions.
"""

import logging
from dataclasses import dataclass
from typing import List, Optional, Union

from render_feature_editor.protocols.analytics import RendererAssetData
from render_feature_editor.protocols.context import EditorContext
from render_feature_editor.protocols.editor_config import EditorConfig, get_editor_config
from render_feature_editor.services.adapter_cache import AdapterCache, FeatureEdit, FeatureRow
from render_feature_editor.services.feature_collection import (
    FeatureCollectionModel,
    FeatureEntry,
    RepairReport,
)
from render_feature_editor.services.naming import menu_name_for_type
from render_feature_editor.services.renderer_data import RendererData

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MenuEntry:
    """One item of the "Add Renderer Feature" menu."""
    type_name: str
    label: str
    category: str

    @property
    def path(self) -> str:
        return f"{self.category}/{self.label}"


@dataclass(frozen=True)
class ContextAction:
    """One item of a feature header's context menu."""
    key: str
    label: str
    enabled: bool = True


class FeatureEditorSession:
    """
    One editing session of a RendererData's feature list.

    Usage:
        session = FeatureEditorSession(asset, context)
        session.open()
        session.add("ScreenSpaceShadows")
        for i in range(len(session.model)):
            row = session.row(i)
        session.close()
    """

    def __init__(self, asset: RendererData, context: Optional[EditorContext] = None,
                 config: Optional[EditorConfig] = None):
        self.asset = asset
        self.context = context or EditorContext.from_registered()
        self.config = config or get_editor_config()
        self.model = FeatureCollectionModel(asset, self.context, self.config)
        self.cache = AdapterCache(self.model, self.context.adapter_factory, self.config)
        self._opened = False
        self._closed = False

    @property
    def is_open(self) -> bool:
        return self._opened and not self._closed

    def open(self) -> None:
        """Start the session: repair a drifted id map, then bind adapters."""
        if self._closed:
            raise RuntimeError("A closed editing session cannot be reopened")
        if self._opened:
            return
        if self.model.map_drifted():
            self.model.validate_and_repair()
        self.cache.sync()
        self._opened = True
        logger.debug(f"Opened feature editor session for {self.asset.name} ({len(self.model)} features)")

    def close(self) -> None:
        """End the session: destroy adapters and report a modified asset."""
        if self._closed:
            return
        self.cache.teardown()
        self._closed = True
        self._send_modified_analytics()
        logger.debug(f"Closed feature editor session for {self.asset.name}")

    def _send_modified_analytics(self) -> None:
        sink = self.context.analytics
        if not (self.model.was_modified and self.config.analytics_enabled and sink is not None):
            return
        payload = RendererAssetData(
            instance_id=self.asset.instance_id,
            was_create_event=False,
            blending_layers_count=0,
            blending_modes_used=0,
        )
        try:
            sink.send_data(self.config.analytics_event, payload)
        except Exception as e:
            logger.warning(f"Failed to send analytics for {self.asset.name}: {e}")

    # ---- collection operations ---------------------------------------

    def add(self, feature_type: Union[type, str]) -> FeatureEntry:
        return self.model.add(feature_type)

    def remove(self, index: int):
        return self.model.remove(index)

    def move(self, index: int, offset: int) -> None:
        self.model.move(index, offset)

    def validate_and_repair(self) -> RepairReport:
        return self.cache.attempt_fix()

    def undo(self) -> bool:
        """Undo the last group and resync, since undo edits the lists directly."""
        undone = self.context.history.undo()
        if undone:
            self.model.was_modified = True
            self.model.notify_external_change()
            self.cache.sync()
        return undone

    def row(self, index: int, edit: Optional[FeatureEdit] = None) -> FeatureRow:
        return self.cache.render_and_edit(index, edit)

    def rows(self) -> List[FeatureRow]:
        self.cache.sync()
        return [self.cache.render_and_edit(i) for i in range(len(self.model))]

    # ---- menus -------------------------------------------------------

    def add_menu_entries(self) -> List[MenuEntry]:
        """Registered types the add menu may offer, minus forbidden duplicates."""
        entries = []
        for info in self.context.registry.feature_types():
            if self.asset.duplicate_feature_check(info.feature_cls):
                continue
            label = menu_name_for_type(info.name, info.experimental, self.config.experimental_suffix)
            entries.append(MenuEntry(info.name, label, info.category))
        return entries

    def context_actions(self, index: int) -> List[ContextAction]:
        """Move Up / Move Down / Remove for the header at index."""
        self.model.entry_at(index)
        last = len(self.model) - 1
        return [
            ContextAction("move_up", "Move Up", enabled=index > 0),
            ContextAction("move_down", "Move Down", enabled=index < last),
            ContextAction("remove", "Remove"),
        ]

    def __enter__(self) -> "FeatureEditorSession":
        self.open()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()
