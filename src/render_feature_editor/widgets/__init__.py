"""
PyQt6 widgets for the renderer feature list.
"""

from .feature_pane import FeaturePaneWidget
from .feature_list_editor import FeatureListEditorWidget

__all__ = [
    "FeaturePaneWidget",
    "FeatureListEditorWidget",
]
