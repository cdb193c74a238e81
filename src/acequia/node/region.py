import math
from dataclasses import dataclass, field

from .base import BaseNode
from .events import DeficitRecorded, WaterDonated, WaterReceived


@dataclass
class Region(BaseNode):
    capacity: float
    need: float = 0.0
    initial_level: float = 0.0
    _level: float = field(init=False, repr=False)

    def __post_init__(self) -> None:
        super().__post_init__()
        for name in ("capacity", "need", "initial_level"):
            value = getattr(self, name)
            if not math.isfinite(value):
                raise ValueError(f"{name} must be finite, got {value}")
        if self.capacity <= 0:
            raise ValueError("capacity must be positive")
        if self.need < 0:
            raise ValueError("need cannot be negative")
        if self.initial_level < 0:
            raise ValueError("initial_level cannot be negative")
        if self.initial_level > self.capacity:
            raise ValueError("initial_level cannot exceed capacity")
        self._level = self.initial_level

    @property
    def level(self) -> float:
        return self._level

    @property
    def deficit(self) -> float:
        return max(0.0, self.need - self._level)

    @property
    def headroom(self) -> float:
        return self.capacity - self._level

    def safe_surplus(self, margin: float) -> float:
        """Water this region can give away while keeping `margin * capacity` above its need."""
        extra = self._level - self.need
        buffer = margin * self.capacity
        return max(0.0, extra - buffer)

    def receive(self, amount: float, canal_id: str, t: int, *, fills: bool = False) -> float:
        """Add `amount` to the level.

        `fills` marks an amount computed as the full headroom; the level is
        then set to exactly `capacity` so rounding cannot push it above.
        """
        if fills:
            self._level = self.capacity
        else:
            self._level += amount
        self.record(WaterReceived(amount=amount, canal_id=canal_id, t=t))
        return amount

    def donate(self, amount: float, canal_id: str, t: int) -> float:
        self._level -= amount
        self.record(WaterDonated(amount=amount, canal_id=canal_id, t=t))
        return amount

    def record_deficit(self, t: int, threshold: float = 0.0) -> None:
        deficit = self.deficit
        if deficit > threshold:
            self.record(DeficitRecorded(required=self.need, actual=self._level, deficit=deficit, t=t))

    def reset(self) -> None:
        """Reset region to its initial level for a fresh simulation run."""
        super().reset()
        self._level = self.initial_level
