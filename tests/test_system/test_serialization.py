from __future__ import annotations

import json

import pytest

from acequia.allocation import AllocationConfig, ConfigurationError
from acequia.system import AcequiaSystem, ValidationError


def minimal_json_dict() -> dict:
    return {
        "regions": [
            {"id": "north", "level": 20.0, "need": 10.0, "capacity": 30.0},
            {"id": "south", "level": 2.0, "need": 10.0, "capacity": 20.0},
        ],
        "canals": [
            {"id": "c1", "source": "north", "target": "south"},
        ],
    }


def full_json_dict() -> dict:
    return {
        "max_hours": 48,
        "config": {"epsilon": 0.01, "safety_margin": 0.2, "max_iterations": 50},
        "sources": [
            {"id": "rio_grande", "level": 500.0, "location": [35.08, -106.65]},
            {"id": "spring", "level": 20.0},
        ],
        "regions": [
            {"id": "north", "level": 20.0, "need": 10.0, "capacity": 30.0, "location": [35.2, -106.6]},
            {"id": "south", "level": 2.0, "need": 10.0, "capacity": 20.0},
            {"id": "east", "level": 0.0, "need": 4.0, "capacity": 10.0},
        ],
        "canals": [
            {"id": "c1", "source": "north", "target": "south", "water_source": "rio_grande"},
            {"id": "c2", "source": "north", "target": "east", "water_source": "spring"},
            {"id": "c3", "source": "south", "target": "east", "water_source": None},
        ],
    }


class TestFromDict:
    def test_minimal(self):
        system = AcequiaSystem.from_dict(minimal_json_dict())

        assert list(system.regions) == ["north", "south"]
        assert system.canals["c1"].water_source is None
        assert system.sources == {}
        assert system.max_hours == 24
        assert system.config == AllocationConfig()

    def test_full(self):
        system = AcequiaSystem.from_dict(full_json_dict())

        assert system.max_hours == 48
        assert system.config == AllocationConfig(epsilon=0.01, safety_margin=0.2, max_iterations=50)
        assert system.sources["rio_grande"].level == 500.0
        assert system.sources["rio_grande"].location == (35.08, -106.65)
        assert system.regions["north"].location == (35.2, -106.6)
        assert system.regions["south"].location is None
        assert system.canals["c2"].water_source == "spring"
        assert system.canals["c3"].water_source is None

    def test_region_defaults(self):
        data = {"regions": [{"id": "r", "capacity": 10.0}]}
        region = AcequiaSystem.from_dict(data).regions["r"]

        assert region.level == 0.0
        assert region.need == 0.0

    def test_unknown_system_key(self):
        data = minimal_json_dict()
        data["nodes"] = []
        with pytest.raises(ValueError, match="Unknown system keys"):
            AcequiaSystem.from_dict(data)

    def test_unknown_region_key(self):
        data = minimal_json_dict()
        data["regions"][0]["depth"] = 3.0
        with pytest.raises(ValueError, match="Unknown region keys"):
            AcequiaSystem.from_dict(data)

    def test_invalid_config(self):
        data = minimal_json_dict()
        data["config"] = {"max_iterations": 0}
        with pytest.raises(ConfigurationError):
            AcequiaSystem.from_dict(data)

    def test_dangling_reference(self):
        data = minimal_json_dict()
        data["canals"][0]["water_source"] = "ghost"
        with pytest.raises(ValidationError, match="water source 'ghost' does not exist"):
            AcequiaSystem.from_dict(data)

    def test_missing_capacity(self):
        data = {"regions": [{"id": "r", "level": 1.0}]}
        with pytest.raises(KeyError):
            AcequiaSystem.from_dict(data)


class TestToDict:
    def test_round_trip(self):
        original = AcequiaSystem.from_dict(full_json_dict())
        restored = AcequiaSystem.from_dict(original.to_dict())

        assert restored.to_dict() == original.to_dict()

    def test_writes_current_levels(self):
        system = AcequiaSystem.from_dict(full_json_dict())
        system.simulate()
        data = system.to_dict()

        levels = {r["id"]: r["level"] for r in data["regions"]}
        assert levels["north"] == system.regions["north"].level
        assert levels["south"] > 2.0

    def test_omits_missing_location(self):
        data = AcequiaSystem.from_dict(full_json_dict()).to_dict()
        south = next(r for r in data["regions"] if r["id"] == "south")
        assert "location" not in south


class TestJson:
    def test_from_json(self):
        system = AcequiaSystem.from_json(json.dumps(full_json_dict()))
        assert len(system.canals) == 3

    def test_to_json_is_valid_json(self):
        system = AcequiaSystem.from_dict(full_json_dict())
        parsed = json.loads(system.to_json())
        assert parsed["config"]["max_iterations"] == 50
        assert parsed["canals"][2]["water_source"] is None
