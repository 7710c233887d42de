"""
Feature Collection Model - ordered renderer features plus their stable ids.

Owns every structural edit of a RendererData's feature list. The feature list
and the stable-id map are index-aligned and always edited together; each
operation is one undo group, and a persistence failure rolls both lists back
before the error reaches the caller.

Ordering of every edit: structural edit -> mark dirty/flush -> destroy
detached objects -> notify. Listeners therefore never observe a half-applied
edit, even if they re-enter the model from a signal handler.
"""

import logging
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Any, Callable, Iterator, List, Optional, Union

from PyQt6.QtCore import QObject, pyqtSignal

from render_feature_editor.errors import (
    DuplicateFeatureError,
    FeatureListError,
    InvalidIndexError,
    PersistenceError,
    UnresolvedReferenceError,
)
from render_feature_editor.protocols.context import EditorContext
from render_feature_editor.protocols.editor_config import EditorConfig, get_editor_config
from render_feature_editor.services.naming import sanitize_feature_name
from render_feature_editor.services.renderer_data import RendererData, RendererFeature

logger = logging.getLogger(__name__)

UNASSIGNED_ID = 0


@dataclass(frozen=True)
class FeatureEntry:
    """One slot of the feature list: the feature (or None) and its stable id."""
    feature: Optional[RendererFeature]
    stable_id: int

    @property
    def resolved(self) -> bool:
        return self.feature is not None

    @property
    def name(self) -> Optional[str]:
        return self.feature.name if self.feature is not None else None

    @property
    def active(self) -> bool:
        return self.feature is not None and self.feature.active

    @property
    def feature_type(self) -> Optional[type]:
        return type(self.feature) if self.feature is not None else None


@dataclass
class RepairReport:
    """Outcome of validate_and_repair()."""
    linked: List[int] = field(default_factory=list)
    missing: List[int] = field(default_factory=list)
    duplicates: List[int] = field(default_factory=list)
    map_rebuilt: bool = False

    @property
    def ok(self) -> bool:
        return not self.missing


class FeatureCollectionModel(QObject):
    """
    Ordered feature list with a parallel stable-id map.

    Signals:
        structure_changed: add/remove/move/repair, or an external edit such as undo
        entry_changed(int): active flag, name or fields of one entry changed
    """

    structure_changed = pyqtSignal()
    entry_changed = pyqtSignal(int)

    def __init__(self, asset: RendererData, context: EditorContext,
                 config: Optional[EditorConfig] = None, parent: Optional[QObject] = None):
        super().__init__(parent)
        self.asset = asset
        self.context = context
        self.config = config or get_editor_config()
        self.was_modified = False

        if self.map_drifted():
            logger.warning(
                f"{asset.name}: {len(asset.renderer_features)} features but "
                f"{len(asset.renderer_feature_map)} stable ids; run validate_and_repair()"
            )

    # ---- read access -------------------------------------------------

    @property
    def _features(self) -> List[Optional[RendererFeature]]:
        return self.asset.renderer_features

    @property
    def _feature_map(self) -> List[int]:
        return self.asset.renderer_feature_map

    def length(self) -> int:
        return len(self._features)

    def __len__(self) -> int:
        return len(self._features)

    def entry_at(self, index: int) -> FeatureEntry:
        self._check_index(index, "read")
        stable_id = self._feature_map[index] if index < len(self._feature_map) else UNASSIGNED_ID
        return FeatureEntry(self._features[index], stable_id)

    def entries(self) -> List[FeatureEntry]:
        return [self.entry_at(i) for i in range(len(self))]

    def stable_ids(self) -> List[int]:
        return list(self._feature_map)

    def index_of(self, feature: RendererFeature) -> int:
        for i, candidate in enumerate(self._features):
            if candidate is feature:
                return i
        raise ValueError(f"{feature!r} is not in the feature list")

    def map_drifted(self) -> bool:
        return len(self._feature_map) != len(self._features)

    def unresolved_indices(self) -> List[int]:
        return [i for i, feature in enumerate(self._features) if feature is None]

    # ---- structural edits --------------------------------------------

    def add(self, feature_type: Union[type, str]) -> FeatureEntry:
        """Create, store and append a feature of the given registered type.

        Raises:
            UnknownFeatureTypeError: Type is not in the registry
            DuplicateFeatureError: Type disallows multiples and is present
            PersistenceError: Storing or flushing failed; list unchanged
        """
        info = self.context.registry.resolve(feature_type)
        if self.asset.duplicate_feature_check(info.feature_cls):
            logger.warning(f"Rejected add of {info.name}: only one instance allowed on {self.asset.name}")
            raise DuplicateFeatureError(info.feature_cls)

        feature = info.feature_cls()
        feature.name = f"{self.config.default_name_prefix}{info.name}"
        persistence = self.context.persistence
        stored = False

        try:
            with self._undo_group("Add Renderer Feature"), self._structural_edit():
                self.context.history.register_created(feature)
                stable_id = self._persist(persistence.store_child, self.asset, feature)
                stored = True
                self._features.append(feature)
                self._feature_map.append(stable_id)
        except PersistenceError:
            if stored:
                self._discard_orphan(feature)
            raise

        logger.info(f"Added {feature.name} ({info.name}) to {self.asset.name} with id {stable_id}")
        self._structure_committed()
        return FeatureEntry(feature, stable_id)

    def remove(self, index: int) -> Optional[RendererFeature]:
        """Remove the entry at index and destroy its backing object.

        The object is destroyed only after the list edit has been flushed.

        Returns:
            The detached feature (None for an unresolved slot)
        """
        self._check_index(index, "remove")
        feature = self._features[index]
        label = "Remove Renderer Feature" if feature is None else f"Remove {feature.name}"
        committed = False

        try:
            with self._undo_group(label):
                with self._structural_edit():
                    del self._features[index]
                    if index < len(self._feature_map):
                        del self._feature_map[index]
                committed = True

                if feature is not None:
                    self.context.history.register_destroyed(feature)
                    self._persist(self.context.persistence.delete_child, feature)
        finally:
            if committed:
                self._structure_committed()

        logger.info(f"{label} at index {index} of {self.asset.name}")
        return feature

    def move(self, index: int, offset: int) -> None:
        """Relocate the entry at index by offset, keeping the id map aligned.

        Raises:
            InvalidIndexError: index or index+offset is outside the list
        """
        self._check_index(index, "move")
        target = index + offset
        if not 0 <= target < len(self):
            logger.warning(f"Rejected move of index {index} by {offset} in {self.asset.name}")
            raise InvalidIndexError(target, len(self), "move to")
        if offset == 0:
            return

        with self._undo_group("Move Renderer Feature"), self._structural_edit():
            self._features.insert(target, self._features.pop(index))
            self._feature_map.insert(target, self._feature_map.pop(index))

        logger.info(f"Moved feature {index} -> {target} in {self.asset.name}")
        self._structure_committed()

    def validate_and_repair(self) -> RepairReport:
        """Re-resolve missing features and rebuild a drifted stable-id map.

        With a valid map, a missing slot is re-resolved by its stable id.
        Without one, it is linked to a stored child no other slot references.
        Slots that stay unresolved are kept: removing them is the caller's
        decision.
        """
        persistence = self.context.persistence
        stored = self._persist(persistence.load_children, self.asset)
        features = list(self._features)
        map_valid = not self.map_drifted()
        report = RepairReport()

        linked_ids = set()
        seen = []
        for i, feature in enumerate(features):
            if feature is None:
                continue
            if any(other is feature for other in seen):
                report.duplicates.append(i)
            seen.append(feature)
            stable_id = persistence.stable_id_of(feature)
            if stable_id is not None:
                linked_ids.add(stable_id)

        for i, feature in enumerate(features):
            if feature is not None:
                continue
            candidate_id = None
            if map_valid and self._feature_map[i] != UNASSIGNED_ID:
                if self._feature_map[i] in stored and self._feature_map[i] not in linked_ids:
                    candidate_id = self._feature_map[i]
            else:
                candidate_id = next((sid for sid in stored if sid not in linked_ids), None)

            if candidate_id is None:
                report.missing.append(i)
                continue
            features[i] = stored[candidate_id]
            linked_ids.add(candidate_id)
            report.linked.append(i)

        feature_map = self._rebuilt_map(features)
        report.map_rebuilt = not map_valid
        changed = report.linked or feature_map != self._feature_map

        if changed:
            with self._undo_group("Repair Renderer Features"), self._structural_edit():
                self._features[:] = features
                self._feature_map[:] = feature_map
            self._structure_committed()

        if report.duplicates:
            logger.warning(f"{self.asset.name} references the same feature more than once at {report.duplicates}")
        if report.missing:
            logger.error(
                f"{self.asset.name} is missing RendererFeatures at {report.missing}\n"
                "This could be due to missing scripts or compile error."
            )
        else:
            logger.debug(f"{self.asset.name}: all {len(self)} features resolved")
        return report

    def notify_external_change(self) -> None:
        """Announce that the lists were changed outside the model (e.g. by undo)."""
        self.structure_changed.emit()

    # ---- per-entry edits ---------------------------------------------

    def set_active(self, index: int, active: bool) -> bool:
        """Set the active flag. Returns False if it already had that value."""
        feature = self._resolved_feature(index)
        if feature.active == bool(active):
            return False
        with self._entry_edit(index, f"Toggle {feature.name}"):
            feature.active = bool(active)
        return True

    def rename(self, index: int, name: str) -> str:
        """Rename the feature at index after sanitizing name. Returns the stored name."""
        feature = self._resolved_feature(index)
        sanitized = sanitize_feature_name(name)
        if sanitized != feature.name:
            with self._entry_edit(index, f"Rename {feature.name}"):
                feature.name = sanitized
        return sanitized

    def set_field(self, index: int, field_name: str, value: Any) -> bool:
        """Write one of the feature's own editable fields. Returns False if unchanged."""
        feature = self._resolved_feature(index)
        if field_name not in feature.editable_fields():
            raise AttributeError(f"{type(feature).__name__} has no editable field {field_name!r}")
        if getattr(feature, field_name) == value:
            return False
        with self._entry_edit(index, f"Modify {feature.name}"):
            setattr(feature, field_name, value)
        return True

    def mark_fields_changed(self, index: int) -> None:
        """Persist changes an adapter already applied to the feature at index."""
        self._resolved_feature(index)
        self._flush_asset()
        self.was_modified = True
        self.entry_changed.emit(index)

    # ---- internals ---------------------------------------------------

    def _check_index(self, index: int, operation: str) -> None:
        if isinstance(index, bool) or not isinstance(index, int) or not 0 <= index < len(self):
            raise InvalidIndexError(index, len(self), operation)

    def _resolved_feature(self, index: int) -> RendererFeature:
        self._check_index(index, "edit")
        feature = self._features[index]
        if feature is None:
            raise UnresolvedReferenceError(index)
        return feature

    def _persist(self, call: Callable, *args):
        try:
            return call(*args)
        except FeatureListError:
            raise
        except Exception as e:
            raise PersistenceError(f"{getattr(call, '__name__', call)} failed for {self.asset.name}: {e}") from e

    def _flush_asset(self) -> None:
        self._persist(self.context.persistence.mark_dirty, self.asset)
        self._persist(self.context.persistence.flush)

    def _rebuilt_map(self, features: List[Optional[RendererFeature]]) -> List[int]:
        if len(self._feature_map) == len(features):
            feature_map = list(self._feature_map)
        else:
            feature_map = [UNASSIGNED_ID] * len(features)
        for i, feature in enumerate(features):
            if feature is None:
                continue
            stable_id = self.context.persistence.stable_id_of(feature)
            if stable_id is not None:
                feature_map[i] = stable_id
        return feature_map

    def _discard_orphan(self, feature: RendererFeature) -> None:
        try:
            self._persist(self.context.persistence.delete_child, feature)
        except PersistenceError as e:
            logger.error(f"Could not discard unsaved {feature.name}: {e}")

    def _structure_committed(self) -> None:
        self.was_modified = True
        self.structure_changed.emit()

    @contextmanager
    def _undo_group(self, label: str) -> Iterator[None]:
        history = self.context.history
        history.begin_group(label)
        try:
            yield
        finally:
            history.end_group()

    @contextmanager
    def _structural_edit(self) -> Iterator[None]:
        """Record the asset, run the edit, then persist; roll back both lists on failure."""
        snapshot = self.asset.capture_state()
        self.context.history.record(self.asset)
        try:
            yield
            self._flush_asset()
        except Exception as e:
            self.asset.restore_state(snapshot)
            logger.error(f"Rolled back feature list of {self.asset.name}: {e}")
            raise

    @contextmanager
    def _entry_edit(self, index: int, label: str) -> Iterator[None]:
        feature = self._features[index]
        snapshot = feature.capture_state()
        with self._undo_group(label):
            self.context.history.record(feature)
            try:
                yield
                self._flush_asset()
            except PersistenceError:
                feature.restore_state(snapshot)
                raise
        self.was_modified = True
        self.entry_changed.emit(index)
