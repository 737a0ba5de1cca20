"""Organisms and their fixed per-kind life rules.

Every variant shares the same record (energy, age, size, alive) and the same
energy channel: other organisms only ever take energy through ``be_eaten``.
Nothing in here logs or prints; deaths leave a ``DeathRecord`` behind for the
engine to report.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, ClassVar, Dict, Optional


class OrganismKind(str, Enum):
    PLANT = "Plant"
    ANIMAL = "Animal"
    MICROORGANISM = "Microorganism"


class DeathCause(str, Enum):
    STARVATION = "starvation"
    OLD_AGE = "old_age"
    CONSUMED = "consumed"


PLANT_MAX_AGE = 50
PLANT_MAX_SIZE = 15.0
PLANT_UPKEEP_PER_SIZE = 0.1
PLANT_GROWTH_STEP = 0.1
PLANT_GROWTH_COST = 0.5
PLANT_REPRODUCTION_COST = 20.0
PLANT_REPRODUCTION_MIN_AGE = 5
PLANT_OFFSPRING_ENERGY = 10.0
PLANT_OFFSPRING_SIZE = 1.0

ANIMAL_MAX_AGE = 70
ANIMAL_HUNT_EFFICIENCY = 0.8
ANIMAL_FAILED_HUNT_COST = 5.0
ANIMAL_GRAZE_PER_PLANT_SIZE = 5.0
ANIMAL_GRAZE_EFFICIENCY = 0.5
ANIMAL_REPRODUCTION_COST = 50.0
ANIMAL_REPRODUCTION_MIN_AGE = 10
ANIMAL_OFFSPRING_ENERGY = 30.0
ANIMAL_OFFSPRING_SIZE = 2.0

MICROORGANISM_MAX_AGE = 100
MICROORGANISM_UPKEEP = 0.2
MICROORGANISM_REPRODUCTION_COST = 5.0
MICROORGANISM_OFFSPRING_ENERGY = 2.0
MICROORGANISM_OFFSPRING_SIZE = 0.1


@dataclass(frozen=True, slots=True)
class DeathRecord:
    kind: OrganismKind
    size: float
    age: int
    cause: DeathCause


@dataclass(slots=True, eq=False)
class Organism(ABC):
    """Shared state of every living thing in the world.

    Instances compare by identity: two plants with equal numbers are still two
    plants. ``id`` stays ``-1`` until a population store adopts the organism.
    """

    kind: ClassVar[OrganismKind]

    energy: float
    age: int
    size: float
    id: int = field(default=-1, kw_only=True)
    alive: bool = field(default=True, kw_only=True)
    death: Optional[DeathRecord] = field(default=None, kw_only=True, repr=False)

    def __post_init__(self) -> None:
        for name in ("energy", "age", "size"):
            value = getattr(self, name)
            if value < 0:
                raise ValueError(f"{type(self).__name__} {name} must be >= 0, got {value}")
        self.energy = float(self.energy)
        self.size = float(self.size)

    @abstractmethod
    def update(self) -> None:
        """Advance one tick of this organism's own life process."""

    @abstractmethod
    def traits(self) -> Dict[str, Any]:
        """Kind-specific parameters, inherited unchanged by offspring."""

    def die(self, cause: DeathCause = DeathCause.STARVATION) -> bool:
        """Mark the organism dead. Returns ``True`` only on the first call."""
        if not self.alive:
            return False
        self.alive = False
        self.death = DeathRecord(kind=self.kind, size=self.size, age=self.age, cause=cause)
        return True

    def be_eaten(self, amount: float) -> float:
        """Drain up to ``amount`` energy and return what was actually taken."""
        taken = min(self.energy, max(0.0, amount))
        self.energy -= taken
        if self.energy <= 0:
            self.energy = 0.0
            self.die(DeathCause.CONSUMED)
        return taken

    def _spend(self, amount: float) -> None:
        self.energy -= amount
        if self.energy <= 0:
            self._starve()

    def _starve(self) -> None:
        self.energy = 0.0
        self.die(DeathCause.STARVATION)


@dataclass(slots=True, eq=False)
class Plant(Organism):
    kind: ClassVar[OrganismKind] = OrganismKind.PLANT

    photosynthesis_rate: float

    def update(self) -> None:
        if not self.alive:
            return
        self.age += 1
        self.energy += self.photosynthesis_rate
        self.energy -= self.size * PLANT_UPKEEP_PER_SIZE
        if self.energy <= 0:
            self._starve()
        elif self.age > PLANT_MAX_AGE:
            self.die(DeathCause.OLD_AGE)
        elif self.size < PLANT_MAX_SIZE:
            self.size = min(PLANT_MAX_SIZE, self.size + PLANT_GROWTH_STEP)
            self._spend(PLANT_GROWTH_COST)

    def reproduce(self) -> Optional[Plant]:
        if not self.alive:
            return None
        if self.energy <= PLANT_REPRODUCTION_COST or self.age <= PLANT_REPRODUCTION_MIN_AGE:
            return None
        self.energy -= PLANT_REPRODUCTION_COST
        return Plant(
            energy=PLANT_OFFSPRING_ENERGY,
            age=0,
            size=PLANT_OFFSPRING_SIZE,
            photosynthesis_rate=self.photosynthesis_rate,
        )

    def traits(self) -> Dict[str, Any]:
        return {"photosynthesis_rate": self.photosynthesis_rate}


@dataclass(slots=True, eq=False)
class Animal(Organism):
    kind: ClassVar[OrganismKind] = OrganismKind.ANIMAL

    metabolism_rate: float
    speed: float

    def update(self) -> None:
        if not self.alive:
            return
        self.age += 1
        self.energy -= self.size * self.metabolism_rate
        if self.energy <= 0:
            self._starve()
        elif self.age > ANIMAL_MAX_AGE:
            self.die(DeathCause.OLD_AGE)

    def hunt(self, prey: Organism) -> bool:
        """Chase another animal. Returns ``True`` when the prey was caught.

        Only animals are prey; anything else is ignored. A faster hunter drains
        the prey completely, a tie or a slower hunter pays for the failed chase.
        """
        if not self.alive or not prey.alive:
            return False
        if not isinstance(prey, Animal):
            return False
        if self.speed > prey.speed:
            drained = prey.be_eaten(prey.energy)
            self.energy += drained * ANIMAL_HUNT_EFFICIENCY
            return True
        self._spend(ANIMAL_FAILED_HUNT_COST)
        return False

    def graze(self, plant: Plant) -> float:
        if not self.alive or not plant.alive:
            return 0.0
        drained = plant.be_eaten(plant.size * ANIMAL_GRAZE_PER_PLANT_SIZE)
        self.energy += drained * ANIMAL_GRAZE_EFFICIENCY
        return drained

    def reproduce(self) -> Optional[Animal]:
        if not self.alive:
            return None
        if self.energy <= ANIMAL_REPRODUCTION_COST or self.age <= ANIMAL_REPRODUCTION_MIN_AGE:
            return None
        self.energy -= ANIMAL_REPRODUCTION_COST
        return Animal(
            energy=ANIMAL_OFFSPRING_ENERGY,
            age=0,
            size=ANIMAL_OFFSPRING_SIZE,
            metabolism_rate=self.metabolism_rate,
            speed=self.speed,
        )

    def traits(self) -> Dict[str, Any]:
        return {"metabolism_rate": self.metabolism_rate, "speed": self.speed}


@dataclass(slots=True, eq=False)
class Microorganism(Organism):
    kind: ClassVar[OrganismKind] = OrganismKind.MICROORGANISM

    decomposition_rate: float

    def update(self) -> None:
        if not self.alive:
            return
        self.age += 1
        self.energy -= MICROORGANISM_UPKEEP
        # both checks always run; die() ignores the second one
        if self.energy <= 0:
            self._starve()
        if self.age > MICROORGANISM_MAX_AGE:
            self.die(DeathCause.OLD_AGE)

    def decompose(self, corpse: Organism) -> float:
        if corpse.alive or corpse.energy <= 0:
            return 0.0
        drained = corpse.be_eaten(corpse.energy * self.decomposition_rate)
        self.energy += drained
        return drained

    def reproduce(self) -> Optional[Microorganism]:
        if not self.alive or self.energy <= MICROORGANISM_REPRODUCTION_COST:
            return None
        self.energy -= MICROORGANISM_REPRODUCTION_COST
        return Microorganism(
            energy=MICROORGANISM_OFFSPRING_ENERGY,
            age=0,
            size=MICROORGANISM_OFFSPRING_SIZE,
            decomposition_rate=self.decomposition_rate,
        )

    def traits(self) -> Dict[str, Any]:
        return {"decomposition_rate": self.decomposition_rate}

