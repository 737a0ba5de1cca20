from __future__ import annotations

from typing import List, Optional

from ..core.capabilities import can_reproduce
from ..core.config import SeedGroupConfig
from ..core.organism import Animal, Microorganism, Organism, OrganismKind, Plant


def advance(organism: Organism) -> bool:
    """Run the organism's own life process; returns whether it survived."""
    organism.update()
    return organism.alive


def reproduce(organism: Organism) -> Optional[Organism]:
    if not organism.alive or not can_reproduce(organism):
        return None
    return organism.reproduce()  # type: ignore[attr-defined]


def spawn(group: SeedGroupConfig) -> Organism:
    if group.kind is OrganismKind.PLANT:
        return Plant(
            energy=group.energy,
            age=group.age,
            size=group.size,
            photosynthesis_rate=group.photosynthesis_rate,
        )
    if group.kind is OrganismKind.ANIMAL:
        return Animal(
            energy=group.energy,
            age=group.age,
            size=group.size,
            metabolism_rate=group.metabolism_rate,
            speed=group.speed,
        )
    return Microorganism(
        energy=group.energy,
        age=group.age,
        size=group.size,
        decomposition_rate=group.decomposition_rate,
    )


def seed_population(groups: List[SeedGroupConfig]) -> List[Organism]:
    return [spawn(group) for group in groups for _ in range(group.count)]
