"""Greedy hourly water allocation.

Each call to :func:`allocate_hour` runs one simulated hour:

1. Reset: every canal is closed and its flow rate set to zero.
2. Partition: regions short of their need go into a max-priority queue
   keyed by deficit; regions with a safe surplus become donors, kept in
   region enumeration order.
3. Transfer: the largest remaining deficit is popped and served by
   scanning donors in their fixed order, opening every canal that can
   move water from the donor to the target. Needs that are still short
   go back into the queue. The loop ends when needs or donors run out,
   or after ``config.max_iterations`` pops.

The returned :class:`HourReport` tells the driver whether anything moved.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from types import MappingProxyType
from typing import TYPE_CHECKING

from acequia.edge import Canal
from acequia.node import Region, WaterSource

from .config import AllocationConfig
from .index import CanalIndex
from .needs import NeedQueue

if TYPE_CHECKING:
    from acequia.system import AcequiaSystem

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class Transfer:
    canal_id: str
    donor: str
    target: str
    water_source: str
    amount: float


@dataclass(frozen=True, slots=True)
class HourReport:
    hour: int
    transfers: tuple[Transfer, ...]
    iterations: int
    iteration_cap_reached: bool
    unmet: Mapping[str, float]

    @property
    def progressed(self) -> bool:
        return bool(self.transfers)

    @property
    def volume(self) -> float:
        return sum(tr.amount for tr in self.transfers)


def allocate_hour(
    system: AcequiaSystem,
    config: AllocationConfig | None = None,
    index: CanalIndex | None = None,
) -> HourReport:
    """Run one hour of allocation on `system`, mutating it in place."""
    if config is None:
        config = system.config
    if index is None:
        index = CanalIndex.build(system.canals.values())
    t = system.hour

    close_canals(system.canals.values(), t)
    needs, donors = partition(system.regions, config)
    logger.debug("Hour %d: %d needy regions, %d donors", t, len(needs), len(donors))

    transfers: list[Transfer] = []
    iterations = 0
    capped = False

    while needs and donors:
        if iterations >= config.max_iterations:
            capped = True
            logger.warning(
                "Hour %d: stopped after %d iterations with %d regions still short",
                t,
                iterations,
                len(needs),
            )
            break
        iterations += 1

        need = needs.pop()
        target = system.regions[need.region_id]
        remaining = _serve(target, need.amount, donors, system, index, config, t, transfers)

        # Still short: let it compete again on a later pop
        if remaining > config.epsilon:
            needs.push(target.id, remaining)

    report = HourReport(
        hour=t,
        transfers=tuple(transfers),
        iterations=iterations,
        iteration_cap_reached=capped,
        unmet=MappingProxyType(needs.remaining()),
    )
    logger.info(
        "Hour %d: %d transfers, %.3f m³ moved, %d regions short",
        t,
        len(report.transfers),
        report.volume,
        len(report.unmet),
    )
    return report


def close_canals(canals: Iterable[Canal], t: int) -> None:
    for canal in canals:
        canal.close(t)


def partition(regions: Mapping[str, Region], config: AllocationConfig) -> tuple[NeedQueue, list[str]]:
    """Split regions into a deficit queue and an ordered donor list.

    Donors keep region enumeration order and are never re-sorted by
    surplus; that order is the scan order of the transfer loop.
    """
    needs = NeedQueue()
    donors: list[str] = []
    for region_id, region in regions.items():
        deficit = region.deficit
        if deficit > config.epsilon:
            needs.push(region_id, deficit)
        elif region.safe_surplus(config.safety_margin) > config.epsilon:
            donors.append(region_id)
    return needs, donors


def _serve(
    target: Region,
    remaining: float,
    donors: list[str],
    system: AcequiaSystem,
    index: CanalIndex,
    config: AllocationConfig,
    t: int,
    transfers: list[Transfer],
) -> float:
    eps = config.epsilon
    margin = config.safety_margin

    for donor_id in donors:
        donor = system.regions[donor_id]
        if donor.safe_surplus(margin) <= eps:
            continue

        for canal in index.candidates(donor_id, target.id):
            source = _source_for(canal, system.sources)
            if source is None or source.level <= eps:
                continue

            headroom = target.headroom
            amount = min(remaining, donor.safe_surplus(margin), source.level, headroom)
            if amount <= eps:
                continue

            canal.schedule(amount, t)
            source.draw(amount, canal.id, t)
            donor.donate(amount, canal.id, t)
            target.receive(amount, canal.id, t, fills=amount >= headroom)
            remaining -= amount
            transfers.append(
                Transfer(canal_id=canal.id, donor=donor_id, target=target.id, water_source=source.id, amount=amount)
            )
            logger.debug("Hour %d: %s -> %s via %s: %.3f m³", t, donor_id, target.id, canal.id, amount)

            if remaining <= eps:
                break
        if remaining <= eps:
            break

    return remaining


def _source_for(canal: Canal, sources: Mapping[str, WaterSource]) -> WaterSource | None:
    if canal.water_source is None:
        return None
    return sources.get(canal.water_source)
