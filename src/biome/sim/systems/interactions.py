"""Cross-organism effects resolved once per live organism per tick.

Animals graze one random live plant and hunt one random live animal;
microorganisms decompose the first corpse in population order. Plants do not
act on others.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Callable, List, Optional, Type, TypeVar

from ..core.organism import Animal, Microorganism, Organism, Plant
from ..types.events import InteractionAction, InteractionEvent, TickEvent

if TYPE_CHECKING:
    from ..core.world import World

T = TypeVar("T", bound=Organism)


def find_random_target(
    world: World,
    kind: Type[T],
    actor: Organism,
    predicate: Optional[Callable[[T], bool]] = None,
) -> Optional[T]:
    candidates = world.population.candidates(kind, exclude=actor, predicate=predicate)
    return world.rng.choice(candidates)


def find_corpse(world: World) -> Optional[Organism]:
    return world.population.first(lambda organism: not organism.alive and organism.energy > 0)


def resolve_interactions(world: World, organism: Organism, tick: int, events: List[TickEvent]) -> None:
    if isinstance(organism, Animal):
        forage(world, organism, tick, events)
    elif isinstance(organism, Microorganism):
        decompose(world, organism, tick, events)


def forage(world: World, animal: Animal, tick: int, events: List[TickEvent]) -> None:
    plant = find_random_target(world, Plant, animal)
    if plant is not None:
        before = animal.energy
        drained = animal.graze(plant)
        events.append(_event(tick, InteractionAction.GRAZE, animal, plant, drained, animal.energy - before))

    prey = find_random_target(world, Animal, animal)
    if prey is not None:
        before = animal.energy
        prey_energy = prey.energy
        caught = animal.hunt(prey)
        action = InteractionAction.HUNT if caught else InteractionAction.FAILED_HUNT
        drained = prey_energy - prey.energy
        events.append(_event(tick, action, animal, prey, drained, animal.energy - before))


def decompose(world: World, microorganism: Microorganism, tick: int, events: List[TickEvent]) -> None:
    corpse = find_corpse(world)
    if corpse is None:
        return
    before = microorganism.energy
    drained = microorganism.decompose(corpse)
    events.append(
        _event(tick, InteractionAction.DECOMPOSE, microorganism, corpse, drained, microorganism.energy - before)
    )


def _event(
    tick: int,
    action: InteractionAction,
    actor: Organism,
    target: Organism,
    drained: float,
    delta: float,
) -> InteractionEvent:
    return InteractionEvent(
        tick=tick,
        action=action,
        actor_id=actor.id,
        actor_kind=actor.kind,
        target_id=target.id,
        target_kind=target.kind,
        energy_drained=drained,
        actor_energy_delta=delta,
    )
