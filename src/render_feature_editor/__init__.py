"""
render-feature-editor: in-place PyQt6 editor for a renderer's feature list.

Keeps a renderer asset's ordered, polymorphic feature sub-objects consistent
with their parallel stable-id map and with a cache of per-feature editor
adapters.

Architecture:
- Protocols: collaborator contracts (persistence, undo, adapters, type registry, analytics)
- Services: feature collection model, adapter cache, editing session, in-memory collaborators
- Widgets: feature list editor and per-feature panes
"""

__version__ = "0.1.0"

from .errors import (
    FeatureListError,
    InvalidIndexError,
    DuplicateFeatureError,
    UnknownFeatureTypeError,
    UnresolvedReferenceError,
    PersistenceError,
)

__all__ = [
    "__version__",
    "FeatureListError",
    "InvalidIndexError",
    "DuplicateFeatureError",
    "UnknownFeatureTypeError",
    "UnresolvedReferenceError",
    "PersistenceError",
]
