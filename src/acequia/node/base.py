from dataclasses import dataclass, field

from .events import NodeEvent


@dataclass
class BaseNode:
    id: str
    location: tuple[float, float] | None = field(default=None, kw_only=True)  # (lat, lon) in WGS84
    events: list[NodeEvent] = field(default_factory=list, init=False, repr=False)

    def __post_init__(self) -> None:
        if not self.id:
            raise ValueError("id cannot be empty")

    def record(self, event: NodeEvent) -> None:
        self.events.append(event)

    def events_at(self, t: int) -> list[NodeEvent]:
        return [e for e in self.events if e.t == t]

    def events_of_type[T: NodeEvent](self, event_type: type[T]) -> list[T]:
        return [e for e in self.events if isinstance(e, event_type)]

    def clear_events(self) -> None:
        self.events.clear()

    def reset(self) -> None:
        """Reset node to initial state for a fresh simulation run.

        Clears accumulated events. Subclasses should override to reset
        additional state, calling super().reset() first.
        """
        self.clear_events()
