import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import networkx as nx
import numpy as np
import pandas as pd

from acequia.allocation import AllocationConfig, CanalIndex, HourReport, allocate_hour
from acequia.edge import Canal
from acequia.node import Region, WaterSource

from .validation import ValidationError

logger = logging.getLogger(__name__)


@dataclass
class AcequiaSystem:
    """Regions, water sources and canals driven hour by hour.

    The system owns the hour counter and the stopping rules; the
    allocation itself happens in :func:`acequia.allocation.allocate_hour`.
    """

    max_hours: int = 24
    config: AllocationConfig = field(default_factory=AllocationConfig)
    hour: int = field(default=0, init=False)

    _regions: dict[str, Region] = field(default_factory=dict, init=False, repr=False)
    _sources: dict[str, WaterSource] = field(default_factory=dict, init=False, repr=False)
    _canals: dict[str, Canal] = field(default_factory=dict, init=False, repr=False)
    _graph: nx.MultiDiGraph = field(default_factory=nx.MultiDiGraph, init=False, repr=False)
    _validated: bool = field(default=False, init=False, repr=False)

    def __post_init__(self) -> None:
        if isinstance(self.max_hours, bool) or not isinstance(self.max_hours, int):
            raise ValueError(f"max_hours must be an integer, got {type(self.max_hours).__name__}")
        if self.max_hours <= 0:
            raise ValueError("max_hours must be positive")

    def add_region(self, region: Region) -> None:
        if region.id in self._regions:
            raise ValueError(f"Region '{region.id}' already exists")
        self._regions[region.id] = region
        self._validated = False

    def add_source(self, source: WaterSource) -> None:
        if source.id in self._sources:
            raise ValueError(f"Water source '{source.id}' already exists")
        self._sources[source.id] = source
        self._validated = False

    def add_canal(self, canal: Canal) -> None:
        if canal.id in self._canals:
            raise ValueError(f"Canal '{canal.id}' already exists")
        self._canals[canal.id] = canal
        self._validated = False

    def validate(self) -> None:
        errors: list[str] = []

        # 1. Canal endpoints and water sources must exist
        for canal_id, canal in self._canals.items():
            if canal.source not in self._regions:
                errors.append(f"Canal '{canal_id}': source region '{canal.source}' does not exist")
            if canal.target not in self._regions:
                errors.append(f"Canal '{canal_id}': target region '{canal.target}' does not exist")
            if canal.water_source is not None and canal.water_source not in self._sources:
                errors.append(f"Canal '{canal_id}': water source '{canal.water_source}' does not exist")

        if errors:
            raise ValidationError("\n".join(errors))

        # 2. Current state must respect the level bounds
        if self._regions:
            ids = list(self._regions)
            levels = np.array([r.level for r in self._regions.values()], dtype=float)
            capacities = np.array([r.capacity for r in self._regions.values()], dtype=float)
            for i in np.flatnonzero(~np.isfinite(levels) | (levels < 0) | (levels > capacities)):
                errors.append(f"Region '{ids[i]}': level {levels[i]} outside [0, {capacities[i]}]")
        if self._sources:
            ids = list(self._sources)
            levels = np.array([s.level for s in self._sources.values()], dtype=float)
            for i in np.flatnonzero(~np.isfinite(levels) | (levels < 0)):
                errors.append(f"Water source '{ids[i]}': level {levels[i]} is negative or not finite")

        if errors:
            raise ValidationError("\n".join(errors))

        # 3. Build graph
        self._graph = nx.MultiDiGraph()
        self._graph.add_nodes_from(self._regions)
        for canal in self._canals.values():
            self._graph.add_edge(canal.source, canal.target, key=canal.id, water_source=canal.water_source)

        self._validated = True
        logger.debug(
            "Validated system with %d regions, %d sources, %d canals",
            len(self._regions),
            len(self._sources),
            len(self._canals),
        )

    def solved(self) -> bool:
        """True when no region is short by more than the negligibility threshold."""
        return all(region.deficit <= self.config.epsilon for region in self._regions.values())

    def next_hour(self) -> None:
        for region in self._regions.values():
            region.record_deficit(self.hour, self.config.epsilon)
        self.hour += 1

    def run_hour(self, index: CanalIndex | None = None) -> HourReport:
        return allocate_hour(self, self.config, index)

    def simulate(self) -> list[HourReport]:
        """Allocate hour after hour until solved, out of hours, or stuck.

        An hour in which nothing moved ends the run: repeating the same
        configuration cannot move anything either.
        """
        if not self._validated:
            self.validate()

        index = CanalIndex.build(self._canals.values())
        reports: list[HourReport] = []

        while not self.solved() and self.hour < self.max_hours:
            report = self.run_hour(index)
            reports.append(report)
            if not report.progressed:
                logger.info("Hour %d: no transfers possible, stopping", self.hour)
                break
            self.next_hour()

        if self.solved():
            logger.info("All regions satisfied after %d hours", self.hour)
        elif self.hour >= self.max_hours:
            logger.info("Reached max_hours=%d with %d regions short", self.max_hours, len(self.shortfalls()))
        return reports

    def shortfalls(self) -> dict[str, float]:
        eps = self.config.epsilon
        return {rid: r.deficit for rid, r in self._regions.items() if r.deficit > eps}

    def reset(self) -> None:
        """Reset regions, sources and canals for a fresh simulation run.

        Preserves topology and configuration; restores initial levels,
        closes every canal and rewinds the hour counter.
        """
        for region in self._regions.values():
            region.reset()
        for source in self._sources.values():
            source.reset()
        for canal in self._canals.values():
            canal.reset()
        self.hour = 0

    @property
    def regions(self) -> dict[str, Region]:
        return self._regions

    @property
    def sources(self) -> dict[str, WaterSource]:
        return self._sources

    @property
    def canals(self) -> dict[str, Canal]:
        return self._canals

    @property
    def graph(self) -> nx.MultiDiGraph:
        if not self._validated:
            self.validate()
        return self._graph

    def components(self) -> list[set[str]]:
        """Groups of regions linked by canals, ignoring canal direction."""
        return [set(c) for c in nx.weakly_connected_components(self.graph)]

    def region_frame(self) -> pd.DataFrame:
        """Current state of every region, one row per region."""
        margin = self.config.safety_margin
        rows = [
            {
                "region": rid,
                "level": r.level,
                "need": r.need,
                "capacity": r.capacity,
                "deficit": r.deficit,
                "safe_surplus": r.safe_surplus(margin),
            }
            for rid, r in self._regions.items()
        ]
        columns = ["region", "level", "need", "capacity", "deficit", "safe_surplus"]
        return pd.DataFrame(rows, columns=columns).set_index("region")

    def to_dict(self) -> dict[str, Any]:
        from ._serialization import system_to_dict

        return system_to_dict(self)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "AcequiaSystem":
        from ._serialization import system_from_dict

        return system_from_dict(data)

    def to_json(self, indent: int | None = 2) -> str:
        import json

        return json.dumps(self.to_dict(), indent=indent)

    @classmethod
    def from_json(cls, text: str) -> "AcequiaSystem":
        import json

        return cls.from_dict(json.loads(text))

    def visualize(
        self,
        save_to: str | Path | None = None,
        figsize: tuple[float, float] = (12, 8),
        title: str | None = None,
    ) -> None:
        """Draw regions and canals.

        Open canals are curved and highlighted. A pair with both an open and a
        closed parallel canal shows both: the closed one straight in grey.
        """
        import matplotlib.pyplot as plt

        from ._visualize import visualize_system

        fig, _ = visualize_system(self._regions, self._canals, config=self.config, figsize=figsize, title=title)

        if save_to:
            fig.savefig(save_to, dpi=150, bbox_inches="tight")
            plt.close(fig)
        else:
            plt.show()
