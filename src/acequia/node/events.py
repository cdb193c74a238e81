from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class WaterReceived:
    amount: float  # m³
    canal_id: str
    t: int  # hour


@dataclass(frozen=True, slots=True)
class WaterDonated:
    amount: float
    canal_id: str
    t: int


@dataclass(frozen=True, slots=True)
class WaterDrawn:
    amount: float
    canal_id: str
    t: int


@dataclass(frozen=True, slots=True)
class DeficitRecorded:
    required: float
    actual: float
    deficit: float
    t: int


NodeEvent = WaterReceived | WaterDonated | WaterDrawn | DeficitRecorded
