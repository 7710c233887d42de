"""Undo/history protocol.

The editor groups every structural edit into one reversible unit and reports
object creation and destruction so the history service can reverse them.
"""

from typing import Protocol, Optional, Any


class UndoHistory(Protocol):
    """Protocol for an undo service that groups and reverses mutations."""

    def begin_group(self, label: str) -> None:
        """Open a group; everything recorded until end_group() undoes together."""
        ...

    def end_group(self) -> None:
        """Close the current group."""
        ...

    def record(self, target: Any) -> None:
        """Snapshot target before it is modified.

        Targets implement ``capture_state()`` and ``restore_state(state)``.
        """
        ...

    def register_created(self, obj: Any) -> None:
        """Register a newly created object; undo destroys it."""
        ...

    def register_destroyed(self, obj: Any) -> None:
        """Register an object about to be destroyed; undo revives it."""
        ...

    def undo(self) -> bool:
        """Reverse the most recent group. Returns False if there is nothing to undo."""
        ...


_undo_history: Optional[UndoHistory] = None


def register_undo_history(history: UndoHistory) -> None:
    """Register a global undo history."""
    global _undo_history
    _undo_history = history


def get_undo_history() -> Optional[UndoHistory]:
    """Get the registered undo history."""
    return _undo_history
