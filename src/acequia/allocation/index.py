from collections.abc import Iterable
from dataclasses import dataclass

from acequia.edge import Canal

Pair = tuple[str, str]


@dataclass(frozen=True, slots=True)
class CanalIndex:
    """Lookup of canals by (donor region, target region).

    Canals keep their insertion order within a bucket. Canals without a
    water source are indexed too; the scheduler skips them when it
    tries to use them.
    """

    _buckets: dict[Pair, tuple[Canal, ...]]

    @classmethod
    def build(cls, canals: Iterable[Canal]) -> "CanalIndex":
        grouped: dict[Pair, list[Canal]] = {}
        for canal in canals:
            grouped.setdefault((canal.source, canal.target), []).append(canal)
        return cls(_buckets={pair: tuple(bucket) for pair, bucket in grouped.items()})

    def candidates(self, donor_id: str, target_id: str) -> tuple[Canal, ...]:
        return self._buckets.get((donor_id, target_id), ())

    def pairs(self) -> list[Pair]:
        return list(self._buckets)

    def __contains__(self, pair: object) -> bool:
        return pair in self._buckets

    def __len__(self) -> int:
        return len(self._buckets)
