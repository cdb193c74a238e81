import math
from dataclasses import dataclass, field

from .base import BaseNode
from .events import WaterDrawn


@dataclass
class WaterSource(BaseNode):
    """Finite reservoir feeding one or more canals."""

    initial_level: float = 0.0
    _level: float = field(init=False, repr=False)

    def __post_init__(self) -> None:
        super().__post_init__()
        if not math.isfinite(self.initial_level):
            raise ValueError(f"initial_level must be finite, got {self.initial_level}")
        if self.initial_level < 0:
            raise ValueError("initial_level cannot be negative")
        self._level = self.initial_level

    @property
    def level(self) -> float:
        return self._level

    def draw(self, amount: float, canal_id: str, t: int) -> float:
        self._level -= amount
        self.record(WaterDrawn(amount=amount, canal_id=canal_id, t=t))
        return amount

    def reset(self) -> None:
        """Reset source to its initial level for a fresh simulation run."""
        super().reset()
        self._level = self.initial_level
