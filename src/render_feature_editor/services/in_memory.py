"""
In-memory persistence and undo history.

Reference implementations of the FeaturePersistence and UndoHistory
protocols, used by tests and by hosts that keep assets in memory. Objects are
tracked by identity (``id()``): features are dataclasses and compare by value.
"""

import itertools
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Set, Tuple

from render_feature_editor.errors import PersistenceError

logger = logging.getLogger(__name__)


class InMemoryFeatureStore:
    """FeaturePersistence backed by dictionaries.

    ``fail_on`` names operations ("store", "delete", "flush") that should
    raise PersistenceError, for exercising failure paths.
    """

    def __init__(self, first_id: int = 1):
        self._ids = itertools.count(first_id)
        self._children: Dict[int, Dict[int, Any]] = {}
        self._stable_ids: Dict[int, int] = {}
        self._objects: Dict[int, Any] = {}  # keeps id() keys unique
        self._owners: Dict[int, int] = {}
        self._deleted: Dict[int, Tuple[int, int]] = {}
        self._dirty: Dict[int, Any] = {}
        self.fail_on: Set[str] = set()
        self.flush_count = 0
        self.deleted_objects: List[Any] = []

    def _check(self, operation: str) -> None:
        if operation in self.fail_on:
            raise PersistenceError(f"Simulated {operation} failure")

    def store_child(self, parent: Any, child: Any) -> int:
        self._check("store")
        stable_id = self._stable_ids.get(id(child))
        if stable_id is None:
            stable_id = next(self._ids)
            self._stable_ids[id(child)] = stable_id
            self._objects[id(child)] = child
        self._children.setdefault(id(parent), {})[stable_id] = child
        self._owners[id(child)] = id(parent)
        logger.debug(f"Stored {type(child).__name__} under {getattr(parent, 'name', parent)!r} as {stable_id}")
        return stable_id

    def delete_child(self, child: Any) -> None:
        self._check("delete")
        stable_id = self._stable_ids.get(id(child))
        owner = self._owners.get(id(child))
        if stable_id is None or owner is None:
            raise PersistenceError(f"{type(child).__name__} is not stored")
        self._children.get(owner, {}).pop(stable_id, None)
        self._deleted[id(child)] = (owner, stable_id)
        del self._owners[id(child)]
        self.deleted_objects.append(child)

    def revive(self, child: Any) -> None:
        """Put a deleted child back under its old parent and stable id."""
        owner, stable_id = self._deleted.pop(id(child))
        self._children.setdefault(owner, {})[stable_id] = child
        self._owners[id(child)] = owner
        self.deleted_objects = [obj for obj in self.deleted_objects if obj is not child]

    def mark_dirty(self, parent: Any) -> None:
        self._dirty[id(parent)] = parent

    def is_dirty(self, parent: Any) -> bool:
        return id(parent) in self._dirty

    def flush(self) -> None:
        self._check("flush")
        self._dirty.clear()
        self.flush_count += 1

    def load_children(self, parent: Any) -> Dict[int, Any]:
        return dict(self._children.get(id(parent), {}))

    def stable_id_of(self, child: Any) -> Optional[int]:
        if id(child) not in self._owners:
            return None
        return self._stable_ids.get(id(child))

    def is_stored(self, child: Any) -> bool:
        return id(child) in self._owners

    def forget(self, parent: Any, stable_id: int) -> None:
        """Drop a stored child as if its backing file disappeared."""
        child = self._children.get(id(parent), {}).pop(stable_id, None)
        if child is not None:
            self._owners.pop(id(child), None)


@dataclass
class UndoGroup:
    """One reversible unit of work."""
    label: str
    records: List[Tuple[Any, Any]] = field(default_factory=list)
    created: List[Any] = field(default_factory=list)
    destroyed: List[Any] = field(default_factory=list)

    def is_empty(self) -> bool:
        return not (self.records or self.created or self.destroyed)


class InMemoryUndoHistory:
    """UndoHistory that snapshots targets via capture_state()/restore_state().

    Groups nest: inner begin/end pairs merge into the outermost group. Work
    recorded outside any group becomes its own unlabeled group.

    Args:
        store: Optional InMemoryFeatureStore; when given, undo deletes
            created objects from it and revives destroyed ones.
    """

    def __init__(self, store: Optional[InMemoryFeatureStore] = None):
        self._store = store
        self._stack: List[UndoGroup] = []
        self._open: Optional[UndoGroup] = None
        self._depth = 0

    @property
    def labels(self) -> List[str]:
        return [group.label for group in self._stack]

    def __len__(self) -> int:
        return len(self._stack)

    def begin_group(self, label: str) -> None:
        if self._depth == 0:
            self._open = UndoGroup(label)
        self._depth += 1

    def end_group(self) -> None:
        if self._depth == 0:
            logger.warning("end_group() called without a matching begin_group()")
            return
        self._depth -= 1
        if self._depth == 0:
            group, self._open = self._open, None
            if not group.is_empty():
                self._stack.append(group)

    def _current(self) -> Tuple[UndoGroup, bool]:
        if self._open is not None:
            return self._open, False
        return UndoGroup(""), True

    def record(self, target: Any) -> None:
        group, standalone = self._current()
        if any(recorded is target for recorded, _ in group.records):
            return
        group.records.append((target, target.capture_state()))
        if standalone:
            self._stack.append(group)

    def register_created(self, obj: Any) -> None:
        group, standalone = self._current()
        group.created.append(obj)
        if standalone:
            self._stack.append(group)

    def register_destroyed(self, obj: Any) -> None:
        group, standalone = self._current()
        group.destroyed.append(obj)
        if standalone:
            self._stack.append(group)

    def undo(self) -> bool:
        if self._depth:
            raise RuntimeError("Cannot undo while an undo group is open")
        if not self._stack:
            return False
        group = self._stack.pop()
        if self._store is not None:
            for obj in reversed(group.destroyed):
                # A failed delete leaves the object stored
                if not self._store.is_stored(obj):
                    self._store.revive(obj)
        for target, state in reversed(group.records):
            target.restore_state(state)
        if self._store is not None:
            for obj in reversed(group.created):
                if self._store.is_stored(obj):
                    self._store.delete_child(obj)
        logger.debug(f"Undid {group.label or 'unlabeled change'}")
        return True
