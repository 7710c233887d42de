"""
Adapter Cache - one presentation adapter per feature-list entry.

The cache rebuilds coarsely. A structural change announced by the model
destroys every adapter at once; the next sync() (or any sync() that finds the
binding count differing from the model's length) creates a fresh one per
entry, in order.

Per-entry lifecycle: Unbound -> Bound(adapter) -> Destroyed. A destroyed
adapter is never rebound; a rebuild always constructs new ones.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

from render_feature_editor.protocols.editor_config import EditorConfig
from render_feature_editor.protocols.feature_adapter import FeatureAdapter, FeatureAdapterFactory
from render_feature_editor.services.feature_collection import FeatureCollectionModel, RepairReport
from render_feature_editor.services.naming import menu_name_for_type
from render_feature_editor.services.renderer_data import RendererFeature

logger = logging.getLogger(__name__)

ATTEMPT_FIX = "attempt_fix"


class BindingState(Enum):
    BOUND = "bound"
    DESTROYED = "destroyed"


@dataclass
class AdapterBinding:
    """Adapter bound to the entry at ``index``. Unresolved entries bind no adapter."""
    index: int
    feature: Optional[RendererFeature]
    adapter: Optional[FeatureAdapter]
    state: BindingState = BindingState.BOUND


@dataclass
class FeatureEdit:
    """Edits collected from one interaction with a feature pane.

    None means "not touched". ``field_name``/``field_value`` carry one field
    edit from the adapter; ``fields_changed`` reports edits the adapter
    already applied itself.
    """
    active: Optional[bool] = None
    name: Optional[str] = None
    expanded: Optional[bool] = None
    field_name: Optional[str] = None
    field_value: Any = None
    fields_changed: bool = False


@dataclass(frozen=True)
class FeatureRow:
    """Everything a pane needs to draw one entry."""
    index: int
    title: str
    name: str
    active: bool
    expanded: bool
    missing: bool
    adapter: Optional[FeatureAdapter]
    actions: Tuple[str, ...] = ()
    changed: bool = False


class AdapterCache:
    """Owns the AdapterBindings of one FeatureCollectionModel."""

    def __init__(self, model: FeatureCollectionModel,
                 adapter_factory: Optional[FeatureAdapterFactory] = None,
                 config: Optional[EditorConfig] = None):
        self.model = model
        self.factory = adapter_factory or model.context.adapter_factory
        self.config = config or model.config
        self._bindings: List[AdapterBinding] = []
        self._expanded: Dict[int, bool] = {}
        self._stale = True
        self._torn_down = False
        self.rebuild_count = 0

        model.structure_changed.connect(self._on_structure_changed)

    def __len__(self) -> int:
        return len(self._bindings)

    @property
    def bindings(self) -> Tuple[AdapterBinding, ...]:
        return tuple(self._bindings)

    @property
    def torn_down(self) -> bool:
        return self._torn_down

    def invalidate(self) -> None:
        """Force a rebuild on the next sync()."""
        self._stale = True

    def _on_structure_changed(self) -> None:
        # Indices shifted; no adapter may report against its old slot
        self._destroy_all()
        self.invalidate()

    def sync(self) -> bool:
        """Rebuild all adapters if the cache drifted from the model.

        Returns:
            True if a rebuild happened
        """
        if self._torn_down:
            logger.warning("sync() called on a torn-down adapter cache")
            return False
        if not self._stale and len(self._bindings) == len(self.model):
            return False

        self._destroy_all()
        for index, entry in enumerate(self.model.entries()):
            adapter = None
            if entry.resolved:
                adapter = self.factory.create_adapter(entry.feature)
                binding = AdapterBinding(index, entry.feature, adapter)
                adapter.on_changed(lambda name, value, b=binding: self._on_adapter_changed(b, name, value))
            else:
                binding = AdapterBinding(index, None, None)
            self._bindings.append(binding)

        live = {id(b.feature) for b in self._bindings if b.feature is not None}
        self._expanded = {key: value for key, value in self._expanded.items() if key in live}
        self._stale = False
        self.rebuild_count += 1
        logger.debug(f"Rebuilt {len(self._bindings)} feature adapters for {self.model.asset.name}")
        return True

    def adapter_at(self, index: int) -> Optional[FeatureAdapter]:
        self.sync()
        self.model.entry_at(index)
        return self._bindings[index].adapter

    def render_and_edit(self, index: int, edit: Optional[FeatureEdit] = None) -> FeatureRow:
        """Apply edit (if any) to the entry at index and describe it for drawing.

        Writes go through the model, which persists them. A missing entry
        ignores edits and only offers the repair action.
        """
        self.sync()
        entry = self.model.entry_at(index)
        binding = self._bindings[index]

        if not entry.resolved:
            if edit is not None:
                logger.debug(f"Ignoring edit of missing feature at index {index}")
            return FeatureRow(
                index=index,
                title=self.config.missing_feature_title,
                name="",
                active=False,
                expanded=False,
                missing=True,
                adapter=None,
                actions=(ATTEMPT_FIX,),
            )

        feature = entry.feature
        changed = False
        if edit is not None:
            if edit.expanded is not None:
                self._expanded[id(feature)] = edit.expanded
            if edit.active is not None:
                changed |= self.model.set_active(index, edit.active)
            if edit.name is not None:
                previous = feature.name
                self.model.rename(index, edit.name)
                changed |= feature.name != previous
            if edit.field_name is not None:
                changed |= self.model.set_field(index, edit.field_name, edit.field_value)
            if edit.fields_changed:
                self.model.mark_fields_changed(index)
                changed = True

        return FeatureRow(
            index=index,
            title=menu_name_for_type(type(feature).__name__),
            name=feature.name,
            active=feature.active,
            expanded=self._expanded.get(id(feature), self.config.expand_new_features),
            missing=False,
            adapter=binding.adapter,
            changed=changed,
        )

    def attempt_fix(self) -> RepairReport:
        """Repair action offered by missing-feature rows."""
        report = self.model.validate_and_repair()
        self.sync()
        return report

    def teardown(self) -> None:
        """Destroy every adapter. Call once when the editing session ends."""
        if self._torn_down:
            logger.debug("Adapter cache already torn down")
            return
        self._destroy_all()
        try:
            self.model.structure_changed.disconnect(self._on_structure_changed)
        except TypeError:
            pass
        self._torn_down = True

    def _destroy_all(self) -> None:
        for binding in reversed(self._bindings):
            if binding.adapter is not None:
                self.factory.destroy_adapter(binding.adapter)
            binding.state = BindingState.DESTROYED
        self._bindings.clear()

    def _on_adapter_changed(self, binding: AdapterBinding, field_name: Optional[str], value: Any) -> None:
        if binding.state is BindingState.DESTROYED:
            return
        try:
            index = self.model.index_of(binding.feature)
        except ValueError:
            logger.warning(f"Ignoring edit of {type(binding.feature).__name__} no longer in {self.model.asset.name}")
            return
        if field_name is None:
            self.model.mark_fields_changed(index)
        else:
            self.model.set_field(index, field_name, value)
