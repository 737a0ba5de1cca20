"""Optional behaviours an organism kind may carry.

Checked structurally, so a kind gains a capability just by implementing the
method.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional, Protocol, runtime_checkable

if TYPE_CHECKING:
    from .organism import Organism


@runtime_checkable
class Reproducible(Protocol):
    def reproduce(self) -> Optional["Organism"]:
        """Return at most one offspring of the same kind, paying its energy cost."""


@runtime_checkable
class Predator(Protocol):
    def hunt(self, prey: "Organism") -> bool:
        """Try to drain another organism. Returns whether the prey was caught."""


def can_reproduce(organism: object) -> bool:
    return isinstance(organism, Reproducible)


def can_hunt(organism: object) -> bool:
    return isinstance(organism, Predator)
