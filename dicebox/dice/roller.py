"""Roll dice expressions into complete results."""

from __future__ import annotations

import logging

from dicebox.dice.breakdown import build_roll_result
from dicebox.dice.modifiers import apply_roll_type_modifications
from dicebox.dice.parser import resolve_expression
from dicebox.dice.rng import RandomSource, make_random_source, roll_single_die
from dicebox.dice.types import (
    DEFAULT_DICE_CONFIG,
    DiceExpression,
    DiceRollConfig,
    DiceRollResult,
    Die,
    RollType,
    SingleRoll,
)

logger = logging.getLogger(__name__)


def roll_all_dice(dice: tuple[Die, ...], rng: RandomSource) -> tuple[SingleRoll, ...]:
    """Roll every die in every group, in group order."""
    return tuple(roll_single_die(die.sides, rng) for die in dice for _ in range(die.count))


def roll_dice_expression(
    expression: str | DiceExpression,
    roll_type: RollType = RollType.normal,
    config: DiceRollConfig = DEFAULT_DICE_CONFIG,
    rng: RandomSource | None = None,
) -> DiceRollResult:
    """Roll an expression and apply ``roll_type`` to the fresh rolls.

    Args:
        expression: Dice expression text or an already parsed expression.
        roll_type: Modification applied after the base dice are rolled.
        config: Limits the expression must satisfy.
        rng: Random source; a new unseeded generator is used when omitted.

    Returns:
        The complete roll result.

    Raises:
        DiceError: If the expression is invalid under ``config``.
    """
    parsed = resolve_expression(expression, config)
    roll_type = RollType(roll_type)
    if rng is None:
        rng = make_random_source()

    rolls = roll_all_dice(parsed.dice, rng)
    rolls = apply_roll_type_modifications(rolls, roll_type, parsed.dice, rng)
    result = build_roll_result(parsed, rolls, roll_type)
    logger.debug(
        "Rolled %r (%s): total %d", parsed.original_expression, roll_type.value, result.total
    )
    return result


def roll_with_advantage(
    expression: str | DiceExpression,
    config: DiceRollConfig = DEFAULT_DICE_CONFIG,
    rng: RandomSource | None = None,
) -> DiceRollResult:
    """Roll and add one d6."""
    return roll_dice_expression(expression, RollType.advantage, config, rng)


def roll_with_disadvantage(
    expression: str | DiceExpression,
    config: DiceRollConfig = DEFAULT_DICE_CONFIG,
    rng: RandomSource | None = None,
) -> DiceRollResult:
    """Roll and subtract one d6."""
    return roll_dice_expression(expression, RollType.disadvantage, config, rng)


def roll_critical(
    expression: str | DiceExpression,
    config: DiceRollConfig = DEFAULT_DICE_CONFIG,
    rng: RandomSource | None = None,
) -> DiceRollResult:
    """Roll and add the base die's maximum once per base die."""
    return roll_dice_expression(expression, RollType.critical, config, rng)


def reroll(
    result: DiceRollResult,
    config: DiceRollConfig = DEFAULT_DICE_CONFIG,
    rng: RandomSource | None = None,
) -> DiceRollResult:
    """Roll the same expression again from scratch, as a normal roll."""
    return roll_dice_expression(result.expression, RollType.normal, config, rng)
