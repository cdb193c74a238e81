from .canal import Canal
from .events import CanalClosed, CanalEvent, FlowScheduled

__all__ = [
    # Events
    "CanalClosed",
    "CanalEvent",
    "FlowScheduled",
    # Canal
    "Canal",
]
