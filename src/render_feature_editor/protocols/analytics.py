"""Analytics sink protocol and the renderer modification record."""

from dataclasses import dataclass
from typing import Protocol, Optional, Any


@dataclass(frozen=True)
class RendererAssetData:
    """Record sent when an editing session modified a renderer asset."""
    instance_id: int
    was_create_event: bool = False
    blending_layers_count: int = 0
    blending_modes_used: int = 0


class AnalyticsSink(Protocol):
    """Protocol for receiving editor analytics events."""

    def send_data(self, event: str, payload: Any) -> None:
        ...


_analytics_sink: Optional[AnalyticsSink] = None


def register_analytics_sink(sink: AnalyticsSink) -> None:
    """Register a global analytics sink."""
    global _analytics_sink
    _analytics_sink = sink


def get_analytics_sink() -> Optional[AnalyticsSink]:
    """Get the registered analytics sink."""
    return _analytics_sink
