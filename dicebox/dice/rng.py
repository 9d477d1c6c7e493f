"""Random sources for the roller.

Anything with a ``random() -> float`` method returning a value in [0, 1) can
drive the roller; ``random.Random`` qualifies. Callers pass their own source so
rolls can be replayed with a seed or a stub.
"""

from __future__ import annotations

import random
from typing import Protocol

from dicebox.dice.types import RollOrigin, SingleRoll


class RandomSource(Protocol):
    def random(self) -> float: ...


def make_random_source(seed: int | None = None) -> random.Random:
    """Return a new, independent generator, seeded when ``seed`` is given."""
    return random.Random(seed)


def roll_value(sides: int, rng: RandomSource) -> int:
    """Draw one value uniformly from 1..sides."""
    return min(int(rng.random() * sides) + 1, sides)


def roll_single_die(sides: int, rng: RandomSource) -> SingleRoll:
    value = roll_value(sides, rng)
    return SingleRoll(value=value, sides=sides, is_critical=value == sides, origin=RollOrigin.base)


def roll_multiple_dice(count: int, sides: int, rng: RandomSource | None = None) -> list[int]:
    """Roll ``count`` dice of ``sides`` sides and return the raw values."""
    if rng is None:
        rng = make_random_source()
    return [roll_value(sides, rng) for _ in range(count)]
