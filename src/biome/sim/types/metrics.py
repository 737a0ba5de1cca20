from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict


@dataclass(slots=True)
class KindStats:
    count: int
    average_energy: float


@dataclass(slots=True)
class TickMetrics:
    tick: int
    population: int
    stored: int
    births: int
    deaths: int
    removed: int
    biomass: int
    average_energy: float
    average_age: float
    kinds: Dict[str, KindStats] = field(default_factory=dict)
    tick_duration_ms: float = 0.0
