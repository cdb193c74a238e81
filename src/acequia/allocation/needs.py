import heapq
import itertools
from dataclasses import dataclass, field


@dataclass(frozen=True, slots=True, order=True)
class Need:
    """A region still short of water, ordered largest amount first.

    `sequence` breaks ties so that equal amounts pop in insertion order.
    """

    priority: float = field(repr=False)
    sequence: int = field(repr=False)
    region_id: str = field(compare=False)
    amount: float = field(compare=False)


class NeedQueue:
    def __init__(self) -> None:
        self._heap: list[Need] = []
        self._counter = itertools.count()

    def push(self, region_id: str, amount: float) -> None:
        heapq.heappush(
            self._heap,
            Need(priority=-amount, sequence=next(self._counter), region_id=region_id, amount=amount),
        )

    def pop(self) -> Need:
        return heapq.heappop(self._heap)

    def remaining(self) -> dict[str, float]:
        return {need.region_id: need.amount for need in sorted(self._heap)}

    def __len__(self) -> int:
        return len(self._heap)

    def __bool__(self) -> bool:
        return bool(self._heap)
