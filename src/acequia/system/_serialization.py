from __future__ import annotations

from typing import TYPE_CHECKING, Any

from acequia.allocation import AllocationConfig
from acequia.edge import Canal
from acequia.node import Region, WaterSource

if TYPE_CHECKING:
    from .acequia_system import AcequiaSystem

_SYSTEM_KEYS = frozenset({"max_hours", "config", "sources", "regions", "canals"})
_CONFIG_KEYS = frozenset({"epsilon", "safety_margin", "max_iterations"})
_SOURCE_KEYS = frozenset({"id", "level", "location"})
_REGION_KEYS = frozenset({"id", "level", "need", "capacity", "location"})
_CANAL_KEYS = frozenset({"id", "source", "target", "water_source"})


def _check_keys(kind: str, data: dict[str, Any], allowed: frozenset[str]) -> None:
    unknown = set(data) - allowed
    if unknown:
        raise ValueError(f"Unknown {kind} keys: {sorted(unknown)}")


def _location(data: dict[str, Any]) -> tuple[float, float] | None:
    loc = data.get("location")
    if loc is None:
        return None
    lat, lon = loc
    return (float(lat), float(lon))


def _source_from_dict(data: dict[str, Any]) -> WaterSource:
    _check_keys("water source", data, _SOURCE_KEYS)
    return WaterSource(
        id=data["id"],
        initial_level=float(data.get("level", 0.0)),
        location=_location(data),
    )


def _region_from_dict(data: dict[str, Any]) -> Region:
    _check_keys("region", data, _REGION_KEYS)
    return Region(
        id=data["id"],
        capacity=float(data["capacity"]),
        need=float(data.get("need", 0.0)),
        initial_level=float(data.get("level", 0.0)),
        location=_location(data),
    )


def _canal_from_dict(data: dict[str, Any]) -> Canal:
    _check_keys("canal", data, _CANAL_KEYS)
    return Canal(
        id=data["id"],
        source=data["source"],
        target=data["target"],
        water_source=data.get("water_source"),
    )


def system_from_dict(data: dict[str, Any]) -> AcequiaSystem:
    from .acequia_system import AcequiaSystem

    _check_keys("system", data, _SYSTEM_KEYS)
    config_data = data.get("config", {})
    _check_keys("config", config_data, _CONFIG_KEYS)

    kwargs: dict[str, Any] = {"config": AllocationConfig(**config_data)}
    if "max_hours" in data:
        kwargs["max_hours"] = data["max_hours"]
    system = AcequiaSystem(**kwargs)

    for source_data in data.get("sources", []):
        system.add_source(_source_from_dict(source_data))
    for region_data in data.get("regions", []):
        system.add_region(_region_from_dict(region_data))
    for canal_data in data.get("canals", []):
        system.add_canal(_canal_from_dict(canal_data))

    system.validate()
    return system


def system_to_dict(system: AcequiaSystem) -> dict[str, Any]:
    """Serialize the system's topology and current levels."""
    sources = []
    for source in system.sources.values():
        entry: dict[str, Any] = {"id": source.id, "level": source.level}
        if source.location is not None:
            entry["location"] = list(source.location)
        sources.append(entry)

    regions = []
    for region in system.regions.values():
        entry = {"id": region.id, "level": region.level, "need": region.need, "capacity": region.capacity}
        if region.location is not None:
            entry["location"] = list(region.location)
        regions.append(entry)

    canals = [
        {"id": c.id, "source": c.source, "target": c.target, "water_source": c.water_source}
        for c in system.canals.values()
    ]

    return {
        "max_hours": system.max_hours,
        "config": system.config.to_dict(),
        "sources": sources,
        "regions": regions,
        "canals": canals,
    }
