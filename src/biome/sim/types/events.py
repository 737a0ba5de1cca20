from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Union

from ..core.organism import DeathCause, OrganismKind


class InteractionAction(str, Enum):
    GRAZE = "graze"
    HUNT = "hunt"
    FAILED_HUNT = "failed_hunt"
    DECOMPOSE = "decompose"


@dataclass(frozen=True, slots=True)
class DeathEvent:
    tick: int
    organism_id: int
    kind: OrganismKind
    size: float
    age: int
    cause: DeathCause


@dataclass(frozen=True, slots=True)
class BirthEvent:
    tick: int
    parent_id: int
    child_id: int
    kind: OrganismKind


@dataclass(frozen=True, slots=True)
class InteractionEvent:
    tick: int
    action: InteractionAction
    actor_id: int
    actor_kind: OrganismKind
    target_id: int
    target_kind: OrganismKind
    energy_drained: float
    actor_energy_delta: float


TickEvent = Union[DeathEvent, BirthEvent, InteractionEvent]
