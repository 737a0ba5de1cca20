from __future__ import annotations

from typing import Dict, Iterable, Tuple

from ..core.organism import Organism
from ..types.metrics import KindStats, TickMetrics


def kind_stats(organisms: Iterable[Organism]) -> Dict[str, KindStats]:
    """Count and mean energy per kind over live organisms, in first-seen order."""
    counts: Dict[str, int] = {}
    energy: Dict[str, float] = {}
    for organism in organisms:
        if not organism.alive:
            continue
        key = organism.kind.value
        counts[key] = counts.get(key, 0) + 1
        energy[key] = energy.get(key, 0.0) + organism.energy
    return {key: KindStats(count=count, average_energy=energy[key] / count) for key, count in counts.items()}


def population_stats(organisms: Iterable[Organism]) -> Tuple[int, int, int, float, float]:
    stored = 0
    alive = 0
    biomass = 0
    energy_sum = 0.0
    age_sum = 0.0
    for organism in organisms:
        stored += 1
        if organism.alive:
            alive += 1
            energy_sum += organism.energy
            age_sum += organism.age
        elif organism.energy > 0:
            biomass += 1
    if alive == 0:
        return stored, 0, biomass, 0.0, 0.0
    return stored, alive, biomass, energy_sum / alive, age_sum / alive


def create_metrics(
    tick: int,
    organisms: list[Organism],
    births: int,
    deaths: int,
    removed: int,
    duration_ms: float,
) -> TickMetrics:
    stored, alive, biomass, avg_energy, avg_age = population_stats(organisms)
    return TickMetrics(
        tick=tick,
        population=alive,
        stored=stored,
        births=births,
        deaths=deaths,
        removed=removed,
        biomass=biomass,
        average_energy=avg_energy,
        average_age=avg_age,
        kinds=kind_stats(organisms),
        tick_duration_ms=duration_ms,
    )
