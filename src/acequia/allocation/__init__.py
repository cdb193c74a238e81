from .config import AllocationConfig, ConfigurationError
from .index import CanalIndex
from .needs import Need, NeedQueue
from .scheduler import HourReport, Transfer, allocate_hour, close_canals, partition

__all__ = [
    # Config
    "AllocationConfig",
    "ConfigurationError",
    # Topology
    "CanalIndex",
    # Needs
    "Need",
    "NeedQueue",
    # Scheduler
    "HourReport",
    "Transfer",
    "allocate_hour",
    "close_canals",
    "partition",
]
