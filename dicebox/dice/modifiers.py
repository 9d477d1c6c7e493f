"""Roll-type state machine: advantage, disadvantage and critical.

Transitions when a roll type is applied to an existing result:

  same type                     → unchanged (the same object is returned)
  advantage ↔ disadvantage      → bonus die replaced
  critical ↔ advantage/disadv.  → rejected, unchanged
  → critical, base die is d20   → rejected, unchanged
  → normal                      → bonus rolls stripped

A rejected transition is not an error. Every accepted transition strips all
bonus rolls first and then applies the new type to the base rolls, so bonuses
never stack.
"""

from __future__ import annotations

import logging

from dicebox.dice.breakdown import build_roll_result
from dicebox.dice.parser import resolve_expression
from dicebox.dice.rng import RandomSource, make_random_source, roll_value
from dicebox.dice.types import (
    DEFAULT_DICE_CONFIG,
    DiceExpression,
    DiceRollConfig,
    DiceRollResult,
    Die,
    RollOrigin,
    RollType,
    SingleRoll,
)

logger = logging.getLogger(__name__)

BONUS_DIE_SIDES = 6
CRITICAL_INELIGIBLE_SIDES = 20

_SWINGS = {RollType.advantage, RollType.disadvantage}


def apply_roll_type_modifications(
    rolls: tuple[SingleRoll, ...],
    roll_type: RollType,
    dice: tuple[Die, ...],
    rng: RandomSource | None = None,
) -> tuple[SingleRoll, ...]:
    """Layer ``roll_type`` onto a set of base rolls.

    Args:
        rolls: Base rolls, without any bonus rolls.
        roll_type: The modification to apply.
        dice: Die groups of the expression; the first one is the base die.
        rng: Random source for the advantage/disadvantage d6.

    Returns:
        The rolls with bonus rolls appended (and criticals marked).
    """
    modified = list(rolls)

    if roll_type in _SWINGS:
        if rng is None:
            rng = make_random_source()
        value = roll_value(BONUS_DIE_SIDES, rng)
        if roll_type == RollType.advantage:
            modified.append(
                SingleRoll(
                    value=value,
                    sides=-BONUS_DIE_SIDES,
                    is_critical=value == BONUS_DIE_SIDES,
                    origin=RollOrigin.advantage_bonus,
                )
            )
        else:
            modified.append(
                SingleRoll(
                    value=-value,
                    sides=-BONUS_DIE_SIDES,
                    is_critical=value == BONUS_DIE_SIDES,
                    origin=RollOrigin.disadvantage_bonus,
                )
            )

    elif roll_type == RollType.critical and dice:
        base = dice[0]
        modified = [
            SingleRoll(value=r.value, sides=r.sides, is_critical=True, origin=r.origin)
            if r.origin == RollOrigin.base and r.sides == base.sides
            else r
            for r in modified
        ]
        modified.extend(
            SingleRoll(
                value=base.sides,
                sides=-base.sides,
                is_critical=True,
                origin=RollOrigin.critical_bonus,
            )
            for _ in range(base.count)
        )

    return tuple(modified)


def can_apply_critical(
    target: str | DiceExpression | DiceRollResult,
    config: DiceRollConfig = DEFAULT_DICE_CONFIG,
) -> bool:
    """Return True when the base die exists and is not a d20."""
    if isinstance(target, DiceRollResult):
        expression = target.expression
    else:
        expression = resolve_expression(target, config)
    base = expression.base_die
    return base is not None and base.sides != CRITICAL_INELIGIBLE_SIDES


def strip_bonuses(rolls: tuple[SingleRoll, ...]) -> tuple[SingleRoll, ...]:
    """Drop bonus rolls and undo critical marks, restoring the rolls as first thrown."""
    return tuple(
        SingleRoll(value=r.value, sides=r.sides, is_critical=r.value == r.sides, origin=r.origin)
        for r in rolls
        if r.origin == RollOrigin.base
    )


def _transition_allowed(current: RollType, requested: RollType) -> bool:
    if current == RollType.normal or requested == RollType.normal:
        return True
    return current in _SWINGS and requested in _SWINGS


def apply_roll_type_to_existing_result(
    result: DiceRollResult,
    roll_type: RollType,
    rng: RandomSource | None = None,
) -> DiceRollResult:
    """Apply ``roll_type`` to an existing result without rerolling its base dice.

    Returns ``result`` itself when the transition is a no-op or is rejected,
    otherwise a new result with a fresh timestamp.
    """
    roll_type = RollType(roll_type)
    if result.roll_type == roll_type:
        return result

    if not _transition_allowed(result.roll_type, roll_type):
        logger.debug(
            "Rejected roll type change %s -> %s", result.roll_type.value, roll_type.value
        )
        return result

    if roll_type == RollType.critical and not can_apply_critical(result):
        logger.debug("Critical not applicable to %r", result.expression.original_expression)
        return result

    rolls = apply_roll_type_modifications(
        strip_bonuses(result.rolls), roll_type, result.expression.dice, rng
    )
    logger.debug("Roll type %s -> %s", result.roll_type.value, roll_type.value)
    return build_roll_result(result.expression, rolls, roll_type)
