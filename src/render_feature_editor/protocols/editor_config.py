"""Base configuration for the feature-list editor.

Provides hooks for applications to customize naming, menu labels and
analytics without subclassing the editor.
"""

from typing import Optional
from dataclasses import dataclass


@dataclass
class EditorConfig:
    """Configuration for feature-list editing behavior.

    Applications can subclass this to provide custom configuration.

    Attributes:
        default_name_prefix: Prefix for the name of a newly added feature (``NewSsao``)
        experimental_suffix: Appended to menu labels of experimental feature types
        missing_feature_title: Header title shown for an unresolved feature slot
        expand_new_features: Whether panes start expanded
        analytics_enabled: Whether a modified session reports to the analytics sink
        analytics_event: Event name used for the modification record
    """

    default_name_prefix: str = "New"
    experimental_suffix: str = " (Experimental)"
    missing_feature_title: str = "Missing RendererFeature"
    missing_feature_help: str = (
        "Missing reference, due to compilation issues or missing files. "
        "you can attempt auto fix or choose to remove the feature."
    )
    expand_new_features: bool = True
    analytics_enabled: bool = True
    analytics_event: str = "renderer2DData"


# Global config instance (set by application)
_editor_config: Optional[EditorConfig] = None


def set_editor_config(config: Optional[EditorConfig]) -> None:
    """Set the global editor configuration.

    Args:
        config: EditorConfig instance, or None to restore defaults
    """
    global _editor_config
    _editor_config = config


def get_editor_config() -> EditorConfig:
    """Get the current editor configuration.

    Returns:
        Current EditorConfig or default if not set
    """
    if _editor_config is None:
        return EditorConfig()
    return _editor_config
