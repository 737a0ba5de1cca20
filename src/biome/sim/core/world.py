from __future__ import annotations

import logging
from time import perf_counter
from typing import Callable, Dict, List, Optional

from .config import SimulationConfig
from .organism import Organism
from .population import Population
from .rng import DeterministicRng
from ..systems import interactions, lifecycle, metrics as metrics_system
from ..types.events import BirthEvent, DeathEvent, InteractionEvent, TickEvent
from ..types.metrics import KindStats, TickMetrics
from ..types.snapshot import Snapshot, SnapshotMetadata

logger = logging.getLogger(__name__)

EventListener = Callable[[TickEvent], None]


class World:
    def __init__(self, config: Optional[SimulationConfig] = None, rng: Optional[DeterministicRng] = None):
        self._config = config if config is not None else SimulationConfig()
        self._rng = rng if rng is not None else DeterministicRng(self._config.seed)
        self._population = Population()
        self._birth_queue: List[Organism] = []
        self._listeners: List[EventListener] = []
        self._events: List[TickEvent] = []
        self._metrics: TickMetrics | None = None
        self._tick = 0
        self._bootstrap_population()

    @property
    def config(self) -> SimulationConfig:
        return self._config

    @property
    def population(self) -> Population:
        return self._population

    @property
    def rng(self) -> DeterministicRng:
        return self._rng

    @property
    def metrics(self) -> TickMetrics | None:
        return self._metrics

    @property
    def events(self) -> List[TickEvent]:
        return list(self._events)

    @property
    def tick(self) -> int:
        return self._tick

    def add(self, organism: Organism) -> Organism:
        return self._population.add(organism)

    def subscribe(self, listener: EventListener) -> None:
        self._listeners.append(listener)

    def reset(self) -> None:
        self._population.clear()
        self._birth_queue.clear()
        self._events = []
        self._metrics = None
        self._tick = 0
        self._rng.reset()
        self._bootstrap_population()

    def step(self, tick: Optional[int] = None) -> TickMetrics:
        """Run one tick: update, interact and reproduce, then compact."""
        start = perf_counter()
        if tick is None:
            tick = self._tick
        events: List[TickEvent] = []
        births = self._birth_queue
        births.clear()
        parents: List[Organism] = []

        snapshot = self._population.snapshot()
        living = [organism for organism in snapshot if organism.alive]
        for organism in snapshot:
            if not organism.alive:
                continue
            if not lifecycle.advance(organism):
                continue
            interactions.resolve_interactions(self, organism, tick, events)
            offspring = lifecycle.reproduce(organism)
            if offspring is not None:
                births.append(offspring)
                parents.append(organism)

        deaths = [self._death_event(tick, organism) for organism in living if not organism.alive]
        removed = self._population.compact()
        for parent, child in zip(parents, births):
            self._population.add(child)
            events.append(BirthEvent(tick=tick, parent_id=parent.id, child_id=child.id, kind=child.kind))
        births.clear()
        events.extend(deaths)

        self._events = events
        self._tick = tick + 1
        duration_ms = (perf_counter() - start) * 1000.0
        self._metrics = metrics_system.create_metrics(
            tick,
            self._population.snapshot(),
            births=len(parents),
            deaths=len(deaths),
            removed=len(removed),
            duration_ms=duration_ms,
        )
        self._publish(events)
        logger.info("Tick %d end: %d organisms alive.", tick, self._metrics.population)
        return self._metrics

    def alive_count(self) -> int:
        return len(self._population.alive())

    def population_by_kind(self) -> Dict[str, KindStats]:
        return metrics_system.kind_stats(self._population)

    def biomass_count(self) -> int:
        return len(self._population.biomass())

    def snapshot(self, tick: int) -> Snapshot:
        metrics = self._metrics
        if metrics is None or metrics.tick != tick - 1:
            metrics = metrics_system.create_metrics(
                tick, self._population.snapshot(), births=0, deaths=0, removed=0, duration_ms=0.0
            )
        organisms = [
            {
                "id": organism.id,
                "kind": organism.kind.value,
                "energy": organism.energy,
                "age": organism.age,
                "size": organism.size,
                "alive": organism.alive,
                **organism.traits(),
            }
            for organism in self._population
        ]
        return Snapshot(
            tick=tick,
            metrics=metrics,
            organisms=organisms,
            metadata=SnapshotMetadata(
                seed=self._rng.seed,
                tick_interval=self._config.tick_interval,
                config_version=self._config.config_version,
            ),
        )

    def _bootstrap_population(self) -> None:
        self._population.extend(lifecycle.seed_population(self._config.initial_population))

    def _death_event(self, tick: int, organism: Organism) -> DeathEvent:
        record = organism.death
        if record is None:
            raise RuntimeError(f"{organism.kind.value} #{organism.id} was marked dead without a death record")
        return DeathEvent(
            tick=tick,
            organism_id=organism.id,
            kind=record.kind,
            size=record.size,
            age=record.age,
            cause=record.cause,
        )

    def _publish(self, events: List[TickEvent]) -> None:
        for event in events:
            if isinstance(event, DeathEvent):
                logger.info(
                    "%s (Size: %.1f) has died at age %d (%s).",
                    event.kind.value,
                    event.size,
                    event.age,
                    event.cause.value,
                )
            elif isinstance(event, BirthEvent):
                logger.debug("%s #%d has reproduced (child #%d).", event.kind.value, event.parent_id, event.child_id)
            elif isinstance(event, InteractionEvent):
                logger.debug(
                    "%s #%d %s %s #%d for %.2f energy.",
                    event.actor_kind.value,
                    event.actor_id,
                    event.action.value,
                    event.target_kind.value,
                    event.target_id,
                    event.energy_drained,
                )
            for listener in self._listeners:
                listener(event)
