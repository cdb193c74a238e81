"""
acequia

This package schedules hourly water transfers across a network of irrigation
regions connected by canals.

Each hour, regions short of their need are served greedily, largest deficit
first, by regions holding water above their need plus a safety margin. Every
canal draws from a finite water source.

Classes:
    AcequiaSystem: Holds regions, sources and canals and drives the hourly simulation.
    Region: A node with a current level, a required level (need) and a capacity.
    WaterSource: A finite reservoir feeding one or more canals.
    Canal: A directed link between two regions, drawing from one water source.
    AllocationConfig: Negligibility threshold, donor safety margin and iteration cap.
    CanalIndex: Lookup of canals by (donor, target) region pair.
"""

from .allocation import AllocationConfig, CanalIndex, ConfigurationError, HourReport, Transfer, allocate_hour
from .edge import Canal
from .node import Region, WaterSource
from .system import AcequiaSystem, ValidationError

__all__ = [
    "AcequiaSystem",
    "Region",
    "WaterSource",
    "Canal",
    "AllocationConfig",
    "CanalIndex",
    "ConfigurationError",
    "HourReport",
    "Transfer",
    "ValidationError",
    "allocate_hour",
]

__version__ = "0.1.0"
