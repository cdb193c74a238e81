from dataclasses import dataclass, replace
from typing import Self

from acequia.common import EPSILON, MAX_ITERATIONS, SAFETY_MARGIN


class ConfigurationError(ValueError):
    """Raised when allocation settings cannot be used to run the scheduler."""

    pass


@dataclass(frozen=True, slots=True)
class AllocationConfig:
    epsilon: float = EPSILON
    safety_margin: float = SAFETY_MARGIN
    max_iterations: int = MAX_ITERATIONS

    def __post_init__(self) -> None:
        if isinstance(self.max_iterations, bool) or not isinstance(self.max_iterations, int):
            raise ConfigurationError(f"max_iterations must be an integer, got {type(self.max_iterations).__name__}")
        if self.max_iterations <= 0:
            raise ConfigurationError(f"max_iterations must be positive, got {self.max_iterations}")
        if not self.epsilon >= 0:
            raise ConfigurationError(f"epsilon cannot be negative, got {self.epsilon}")
        if not self.safety_margin >= 0:
            raise ConfigurationError(f"safety_margin cannot be negative, got {self.safety_margin}")

    def with_params(self, **kwargs: float) -> Self:
        """Create new config with updated settings (immutable)."""
        return replace(self, **kwargs)

    def to_dict(self) -> dict[str, float | int]:
        return {
            "epsilon": self.epsilon,
            "safety_margin": self.safety_margin,
            "max_iterations": self.max_iterations,
        }
