from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class FlowScheduled:
    amount: float  # m³ over the hour
    flow_rate: float  # m³/s
    t: int


@dataclass(frozen=True, slots=True)
class CanalClosed:
    t: int


CanalEvent = FlowScheduled | CanalClosed
