from typing import Any

from acequia.allocation import AllocationConfig
from acequia.edge import Canal
from acequia.node import Region, WaterSource
from acequia.system import AcequiaSystem

__all__ = [
    # Factory functions
    "make_region",
    "make_source",
    "make_canal",
    "make_system",
]


# --- Factory Functions ---


def make_region(id: str = "region", **overrides: Any) -> Region:
    overrides.setdefault("capacity", 100.0)
    overrides.setdefault("need", 50.0)
    overrides.setdefault("initial_level", 50.0)
    return Region(id=id, **overrides)


def make_source(id: str = "source", **overrides: Any) -> WaterSource:
    overrides.setdefault("initial_level", 1000.0)
    return WaterSource(id=id, **overrides)


def make_canal(
    id: str,
    source: str,
    target: str,
    **overrides: Any,
) -> Canal:
    return Canal(id=id, source=source, target=target, **overrides)


# --- System Builder ---


def make_system(
    *components: Region | WaterSource | Canal,
    max_hours: int = 24,
    config: AllocationConfig | None = None,
    validate: bool = True,
) -> AcequiaSystem:
    system = AcequiaSystem(max_hours=max_hours, config=config or AllocationConfig())
    for component in components:
        if isinstance(component, Canal):
            system.add_canal(component)
        elif isinstance(component, WaterSource):
            system.add_source(component)
        else:
            system.add_region(component)
    if validate:
        system.validate()
    return system
