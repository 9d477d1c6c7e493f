"""Value types for the dice engine.

Every type here is frozen: a parsed expression or a roll result is never
changed after construction. Applying a roll type to a result builds a new
result so the original stays available for undo and comparison.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, replace
from datetime import datetime
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from dicebox.dice.errors import DiceError

# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------


class RollType(str, enum.Enum):
    """How a roll result was modified after the base dice were thrown."""

    normal = "normal"
    advantage = "advantage"
    disadvantage = "disadvantage"
    critical = "critical"


class RollOrigin(str, enum.Enum):
    """Where a single roll came from: the expression itself or a roll-type bonus."""

    base = "base"
    advantage_bonus = "advantage_bonus"
    disadvantage_bonus = "disadvantage_bonus"
    critical_bonus = "critical_bonus"


# ---------------------------------------------------------------------------
# Expressions
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Die:
    """A homogeneous group of dice, e.g. the ``2d6`` in ``2d6+3``."""

    count: int
    sides: int

    @property
    def spec(self) -> str:
        return f"{self.count}d{self.sides}"


@dataclass(frozen=True)
class DiceExpression:
    """A parsed dice expression.

    ``dice`` keeps the order in which each die size first appeared in the
    source text. ``original_expression`` is the caller's input, untouched.
    """

    dice: tuple[Die, ...]
    modifier: int
    original_expression: str

    @property
    def base_die(self) -> Die | None:
        """The first die group, used for critical eligibility and bonus size."""
        return self.dice[0] if self.dice else None

    @property
    def total_dice(self) -> int:
        return sum(die.count for die in self.dice)


# ---------------------------------------------------------------------------
# Rolls
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class SingleRoll:
    """One die result.

    Bonus rolls added by advantage, disadvantage or critical carry a negative
    ``sides`` value as well as their ``origin``; code that needs to tell them
    apart from base rolls reads ``origin``.
    """

    value: int
    sides: int
    is_critical: bool
    origin: RollOrigin = RollOrigin.base

    @property
    def is_synthetic(self) -> bool:
        return self.origin != RollOrigin.base


@dataclass(frozen=True)
class DiceBreakdown:
    die_spec: str
    values: tuple[int, ...]
    subtotal: int


@dataclass(frozen=True)
class DiceRollResult:
    """A complete roll. ``total`` is always ``sum(roll.value) + modifier``."""

    expression: DiceExpression
    rolls: tuple[SingleRoll, ...]
    modifier: int
    total: int
    breakdown: tuple[DiceBreakdown, ...]
    timestamp: datetime
    roll_type: RollType = RollType.normal

    @property
    def base_rolls(self) -> tuple[SingleRoll, ...]:
        return tuple(r for r in self.rolls if not r.is_synthetic)


# ---------------------------------------------------------------------------
# Configuration and validation
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class DiceRollConfig:
    """Limits applied when parsing and rolling. Passed explicitly to every call."""

    max_dice_count: int = 20
    max_die_sides: int = 100
    max_modifier: int = 999
    highlight_criticals: bool = True

    def with_overrides(self, **changes: int | bool) -> DiceRollConfig:
        """Return a copy of this config with the given fields replaced."""
        return replace(self, **changes)


DEFAULT_DICE_CONFIG = DiceRollConfig()


@dataclass(frozen=True)
class DiceValidationResult:
    is_valid: bool
    error: DiceError | None = None
    expression: DiceExpression | None = None


@dataclass(frozen=True)
class DiceRange:
    min: int
    max: int
