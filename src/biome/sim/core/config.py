from __future__ import annotations

from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, Dict, List

import yaml

from .organism import OrganismKind

_SEED_NUMBERS = {
    "count": int,
    "energy": float,
    "age": int,
    "size": float,
    "photosynthesis_rate": float,
    "metabolism_rate": float,
    "speed": float,
    "decomposition_rate": float,
}


@dataclass
class SeedGroupConfig:
    kind: OrganismKind = OrganismKind.PLANT
    count: int = 1
    energy: float = 10.0
    age: int = 0
    size: float = 1.0
    photosynthesis_rate: float = 0.0
    metabolism_rate: float = 0.0
    speed: float = 0.0
    decomposition_rate: float = 0.0

    def __post_init__(self) -> None:
        self.kind = _parse_kind(self.kind)
        for name, cast in _SEED_NUMBERS.items():
            value = getattr(self, name)
            if isinstance(value, bool):
                raise ValueError(f"{self.kind.value} seed {name} must be a number, got {value!r}")
            try:
                setattr(self, name, cast(value))
            except (TypeError, ValueError) as exc:
                raise ValueError(f"{self.kind.value} seed {name} must be a number, got {value!r}") from exc
        for name in ("count", "energy", "age", "size"):
            value = getattr(self, name)
            if value < 0:
                raise ValueError(f"{self.kind.value} seed {name} must be >= 0, got {value}")
def _parse_kind(value: object) -> OrganismKind:
    if isinstance(value, OrganismKind):
        return value
    text = str(value).strip().lower()
    for kind in OrganismKind:
        if kind.value.lower() == text or kind.name.lower() == text:
            return kind
    raise ValueError(f"Unknown organism kind: {value!r}")


def default_seed_groups() -> List[SeedGroupConfig]:
    return [
        SeedGroupConfig(kind=OrganismKind.PLANT, count=15, energy=30.0, age=0, size=5.0, photosynthesis_rate=4.0),
        SeedGroupConfig(
            kind=OrganismKind.ANIMAL, count=5, energy=100.0, age=0, size=10.0, metabolism_rate=1.2, speed=10.0
        ),
        SeedGroupConfig(
            kind=OrganismKind.ANIMAL, count=1, energy=150.0, age=5, size=15.0, metabolism_rate=1.5, speed=15.0
        ),
        SeedGroupConfig(
            kind=OrganismKind.MICROORGANISM, count=20, energy=10.0, age=0, size=0.1, decomposition_rate=0.3
        ),
    ]


@dataclass
class SimulationConfig:
    seed: int = 42
    tick_interval: float = 1.0
    config_version: str = "v1"
    initial_population: List[SeedGroupConfig] = field(default_factory=default_seed_groups)

    def __post_init__(self) -> None:
        try:
            self.tick_interval = float(self.tick_interval)
        except (TypeError, ValueError) as exc:
            raise ValueError(f"tick_interval must be a number, got {self.tick_interval!r}") from exc
        if self.tick_interval < 0:
            raise ValueError(f"tick_interval must be >= 0, got {self.tick_interval}")

    @staticmethod
    def from_yaml(path: Path) -> "SimulationConfig":
        data = yaml.safe_load(Path(path).read_text())
        return load_config(data or {})


def _check_keys(raw: Dict[Any, Any], cls: type, what: str) -> None:
    unknown = sorted(str(key) for key in raw if key not in {f.name for f in fields(cls)})
    if unknown:
        raise ValueError(f"Unknown {what} field(s): {', '.join(unknown)}")


def _parse_group(raw: Any) -> SeedGroupConfig:
    if not isinstance(raw, dict):
        raise ValueError(f"seed group must be a mapping, got {raw!r}")
    _check_keys(raw, SeedGroupConfig, "seed group")
    return SeedGroupConfig(**raw)


def load_config(raw: dict) -> SimulationConfig:
    if not isinstance(raw, dict):
        raise ValueError("configuration must be a mapping")
    _check_keys(raw, SimulationConfig, "configuration")
    groups_raw = raw.get("initial_population")
    sim_values = {k: v for k, v in raw.items() if k != "initial_population"}
    if groups_raw is None:
        return SimulationConfig(**sim_values)
    if not isinstance(groups_raw, list):
        raise ValueError("initial_population must be a list of seed groups")
    groups = [_parse_group(group) for group in groups_raw]
    return SimulationConfig(initial_population=groups, **sim_values)
