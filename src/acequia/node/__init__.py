from .base import BaseNode
from .events import (
    DeficitRecorded,
    NodeEvent,
    WaterDonated,
    WaterDrawn,
    WaterReceived,
)
from .region import Region
from .source import WaterSource

__all__ = [
    # Events
    "DeficitRecorded",
    "NodeEvent",
    "WaterDonated",
    "WaterDrawn",
    "WaterReceived",
    # Base
    "BaseNode",
    # Nodes
    "Region",
    "WaterSource",
]
