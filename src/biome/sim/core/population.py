from __future__ import annotations

from typing import Callable, Iterable, Iterator, List, Optional, Type, TypeVar

from .organism import Organism

T = TypeVar("T", bound=Organism)


class Population:
    """Insertion-ordered store that owns every organism in a world."""

    def __init__(self, organisms: Iterable[Organism] = ()):
        self._organisms: List[Organism] = []
        self._next_id = 0
        self.extend(organisms)

    def __len__(self) -> int:
        return len(self._organisms)

    def __iter__(self) -> Iterator[Organism]:
        return iter(self._organisms)

    def add(self, organism: Organism) -> Organism:
        if organism.id < 0:
            organism.id = self._next_id
            self._next_id += 1
        self._organisms.append(organism)
        return organism

    def extend(self, organisms: Iterable[Organism]) -> None:
        for organism in organisms:
            self.add(organism)

    def snapshot(self) -> List[Organism]:
        return list(self._organisms)

    def alive(self) -> List[Organism]:
        return [organism for organism in self._organisms if organism.alive]

    def biomass(self) -> List[Organism]:
        """Dead organisms still holding energy for decomposers."""
        return [organism for organism in self._organisms if not organism.alive and organism.energy > 0]

    def candidates(
        self,
        kind: Type[T],
        exclude: Optional[Organism] = None,
        predicate: Optional[Callable[[T], bool]] = None,
    ) -> List[T]:
        matches: List[T] = []
        for organism in self._organisms:
            if not isinstance(organism, kind) or not organism.alive or organism is exclude:
                continue
            if predicate is not None and not predicate(organism):
                continue
            matches.append(organism)
        return matches

    def first(self, predicate: Callable[[Organism], bool]) -> Optional[Organism]:
        for organism in self._organisms:
            if predicate(organism):
                return organism
        return None

    def compact(self) -> List[Organism]:
        """Drop fully spent corpses and return them."""
        kept: List[Organism] = []
        removed: List[Organism] = []
        for organism in self._organisms:
            if not organism.alive and organism.energy <= 0:
                removed.append(organism)
            else:
                kept.append(organism)
        self._organisms = kept
        return removed

    def clear(self) -> None:
        self._organisms.clear()
        self._next_id = 0
