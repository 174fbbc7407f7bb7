"""Replica state: one candidate tour pinned to a temperature slot."""
from __future__ import annotations

import random
from dataclasses import dataclass, field
from typing import List, Sequence

from .utils import make_rng


@dataclass
class Replica:
    """Mutable tour owned by a fixed temperature slot.

    ``temperature`` and ``rng`` belong to the slot and never move; only
    ``tour`` is handed over during an exchange.
    """

    slot: int
    temperature: float
    tour: List[int]
    rng: random.Random = field(repr=False, compare=False)


def make_replicas(
    initial_tour: Sequence[int],
    temperatures: Sequence[float],
    seeds: Sequence[int],
) -> List[Replica]:
    """Seed every slot with its own copy of the same starting tour."""
    if len(seeds) != len(temperatures):
        raise ValueError("One seed per temperature slot is required")
    return [
        Replica(slot=slot, temperature=temp, tour=list(initial_tour), rng=make_rng(seed))
        for slot, (temp, seed) in enumerate(zip(temperatures, seeds))
    ]
