from dataclasses import dataclass, field

from acequia.common import volume_to_rate

from .events import CanalClosed, CanalEvent, FlowScheduled


@dataclass
class Canal:
    """Directed transport link from one region to another.

    A canal has no capacity of its own; it draws from `water_source`
    while moving water between the regions. A canal without a water
    source is never used.
    """

    id: str
    source: str
    target: str
    water_source: str | None = None
    is_open: bool = field(default=False, init=False)
    flow_rate: float = field(default=0.0, init=False)

    events: list[CanalEvent] = field(default_factory=list, init=False, repr=False)

    def __post_init__(self) -> None:
        if not self.id:
            raise ValueError("id cannot be empty")
        if not self.source:
            raise ValueError("source cannot be empty")
        if not self.target:
            raise ValueError("target cannot be empty")

    def record(self, event: CanalEvent) -> None:
        self.events.append(event)

    def events_of_type[T: CanalEvent](self, event_type: type[T]) -> list[T]:
        return [e for e in self.events if isinstance(e, event_type)]

    def clear_events(self) -> None:
        self.events.clear()

    def toggle_open(self, is_open: bool) -> None:
        self.is_open = is_open

    def set_flow_rate(self, rate: float) -> None:
        self.flow_rate = rate

    def close(self, t: int | None = None) -> None:
        if self.is_open:
            self.toggle_open(False)
            if t is not None:
                self.record(CanalClosed(t=t))
        self.set_flow_rate(0.0)

    def schedule(self, amount: float, t: int) -> float:
        """Open the canal for `amount` m³ over one hour and return the flow rate."""
        rate = volume_to_rate(amount)
        self.toggle_open(True)
        self.set_flow_rate(rate)
        self.record(FlowScheduled(amount=amount, flow_rate=rate, t=t))
        return rate

    def reset(self) -> None:
        """Reset canal to closed with no flow and clear its events."""
        self.clear_events()
        self.is_open = False
        self.flow_rate = 0.0
