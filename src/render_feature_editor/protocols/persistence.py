"""Persistence protocol for feature sub-objects.

Allows applications to plug in their own asset storage without the editor
depending on a specific serialization backend.
"""

from typing import Protocol, Optional, Any, Dict


class FeaturePersistence(Protocol):
    """Protocol for storing feature objects as children of a renderer asset.

    Example:
        from render_feature_editor.protocols import register_persistence
        from myapp.assets import AssetDatabasePersistence

        register_persistence(AssetDatabasePersistence())
    """

    def store_child(self, parent: Any, child: Any) -> int:
        """Store child as a sub-object of parent.

        Args:
            parent: Owning renderer asset
            child: Feature object to store

        Returns:
            Stable local identifier assigned to the child (never 0)
        """
        ...

    def delete_child(self, child: Any) -> None:
        """Delete a previously stored child."""
        ...

    def mark_dirty(self, parent: Any) -> None:
        """Mark parent as needing a save."""
        ...

    def flush(self) -> None:
        """Write all dirty parents to storage."""
        ...

    def load_children(self, parent: Any) -> Dict[int, Any]:
        """Load every stored child of parent that can still be resolved.

        Returns:
            Mapping of stable id to child object
        """
        ...

    def stable_id_of(self, child: Any) -> Optional[int]:
        """Return the stable id of a stored child, or None if it is not stored."""
        ...


_persistence: Optional[FeaturePersistence] = None


def register_persistence(persistence: FeaturePersistence) -> None:
    """Register a global persistence implementation."""
    global _persistence
    _persistence = persistence


def get_persistence() -> Optional[FeaturePersistence]:
    """Get the registered persistence implementation."""
    return _persistence
