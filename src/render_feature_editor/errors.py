"""
Domain exceptions for the feature-list editor.

Every expected failure of a feature-list operation maps to one of these.
Operations that raise leave the feature list and its stable-id map exactly as
they were before the call.
"""


class FeatureListError(RuntimeError):
    """Base exception for all feature-list failures."""


class InvalidIndexError(FeatureListError, IndexError):
    """Raised when a remove/move/edit targets an index outside the list."""

    def __init__(self, index: int, length: int, operation: str = "access"):
        self.index = index
        self.length = length
        self.operation = operation
        super().__init__(f"Cannot {operation} index {index}: feature list has {length} entries")


class DuplicateFeatureError(FeatureListError):
    """Raised when a feature type that disallows multiples is added twice."""

    def __init__(self, feature_type: type):
        self.feature_type = feature_type
        super().__init__(f"{feature_type.__name__} does not allow multiple instances on one renderer")


class UnknownFeatureTypeError(FeatureListError, KeyError):
    """Raised when a feature type name is not in the type registry."""

    def __str__(self) -> str:
        return RuntimeError.__str__(self)


class UnresolvedReferenceError(FeatureListError):
    """Raised when an operation needs the backing object of a missing feature."""

    def __init__(self, index: int):
        self.index = index
        super().__init__(f"Feature at index {index} is missing its backing object")


class PersistenceError(FeatureListError):
    """Raised when the persistence collaborator fails to store, delete or flush."""
