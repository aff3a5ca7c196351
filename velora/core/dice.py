########## Dice ##########
# Small helpers that route every random choice through an injected source.

from __future__ import annotations

import random
from typing import Callable, Optional, Sequence, TypeVar

from . import config

T = TypeVar("T")


def make_random(seed: Optional[int] = None) -> random.Random:
    """Return a generator seeded from config unless a seed is given."""

    return random.Random(config.RANDOM_SEED if seed is None else seed)


def pick(rng: random.Random, pool: Sequence[T]) -> T:
    """Uniform choice; callers guarantee the pool is not empty."""

    return pool[int(rng.random() * len(pool))]


def chance(rng: random.Random, probability: float) -> bool:
    """True with the given probability."""

    return rng.random() < probability


def shuffled(rng: random.Random, items: Sequence[T]) -> list[T]:
    """Return a shuffled copy without touching the input."""

    copy = list(items)
    rng.shuffle(copy)
    return copy


def weighted_pick(rng: random.Random, items: Sequence[T], weight: Callable[[T], float]) -> Optional[T]:
    """Cumulative weight walk; first item whose running total covers the draw wins."""

    # 1 Sum weights then draw uniformly over the total.                        # steps
    # 2 Walk in list order so ties resolve to the earlier entry.               # steps
    # 3 No usable weight or draw falls back to the heaviest item.              # steps
    if not items:
        return None
    total = sum(weight(item) for item in items)
    if total <= 0:
        return max(items, key=weight)
    draw = rng.uniform(0, total)
    running = 0.0
    for item in items:
        running += weight(item)
        if draw <= running:
            return item
    return max(items, key=weight)
