"""Roll breakdowns, result assembly and expression analysis."""

from __future__ import annotations

from datetime import datetime, timezone

from dicebox.dice.parser import resolve_expression
from dicebox.dice.types import (
    DEFAULT_DICE_CONFIG,
    DiceBreakdown,
    DiceExpression,
    DiceRange,
    DiceRollConfig,
    DiceRollResult,
    Die,
    RollOrigin,
    RollType,
    SingleRoll,
)


def calculate_breakdown(
    dice: tuple[Die, ...], rolls: tuple[SingleRoll, ...]
) -> tuple[DiceBreakdown, ...]:
    """Group rolls into one entry per die group plus any bonus entries.

    Base rolls are consumed in die-group order. Advantage and disadvantage
    bonuses each get their own entry (values shown unsigned, subtotal signed);
    critical bonuses are gathered into a single ``critical`` entry.
    """
    base = [r for r in rolls if r.origin == RollOrigin.base]
    entries: list[DiceBreakdown] = []

    index = 0
    for die in dice:
        values = tuple(r.value for r in base[index : index + die.count])
        entries.append(DiceBreakdown(die_spec=die.spec, values=values, subtotal=sum(values)))
        index += die.count

    for roll in rolls:
        if roll.origin == RollOrigin.advantage_bonus:
            label = "advantage"
        elif roll.origin == RollOrigin.disadvantage_bonus:
            label = "disadvantage"
        else:
            continue
        entries.append(DiceBreakdown(die_spec=label, values=(abs(roll.value),), subtotal=roll.value))

    critical = tuple(r.value for r in rolls if r.origin == RollOrigin.critical_bonus)
    if critical:
        entries.append(DiceBreakdown(die_spec="critical", values=critical, subtotal=sum(critical)))

    return tuple(entries)


def build_roll_result(
    expression: DiceExpression,
    rolls: tuple[SingleRoll, ...],
    roll_type: RollType,
) -> DiceRollResult:
    """Assemble a result, computing its breakdown and total from ``rolls``."""
    return DiceRollResult(
        expression=expression,
        rolls=rolls,
        modifier=expression.modifier,
        total=sum(r.value for r in rolls) + expression.modifier,
        breakdown=calculate_breakdown(expression.dice, rolls),
        timestamp=datetime.now(timezone.utc),
        roll_type=roll_type,
    )


# ---------------------------------------------------------------------------
# Analysis
# ---------------------------------------------------------------------------


def get_dice_range(
    expression: str | DiceExpression, config: DiceRollConfig = DEFAULT_DICE_CONFIG
) -> DiceRange:
    """Return the lowest and highest totals the expression can produce."""
    parsed = resolve_expression(expression, config)
    low = sum(die.count for die in parsed.dice) + parsed.modifier
    high = sum(die.count * die.sides for die in parsed.dice) + parsed.modifier
    return DiceRange(min=low, max=high)


def get_dice_average(
    expression: str | DiceExpression, config: DiceRollConfig = DEFAULT_DICE_CONFIG
) -> float:
    """Return the expected total of the expression."""
    parsed = resolve_expression(expression, config)
    return sum(die.count * (die.sides + 1) / 2 for die in parsed.dice) + parsed.modifier


# ---------------------------------------------------------------------------
# Display
# ---------------------------------------------------------------------------


def describe_expression(expression: DiceExpression) -> str:
    """Canonical text for a parsed expression, e.g. ``2d6+1d4+2``."""
    parts = [die.spec for die in expression.dice]
    text = "+".join(parts)
    if expression.modifier or not parts:
        text += f"{expression.modifier:+d}"
    return text


def format_roll_result(
    result: DiceRollResult, config: DiceRollConfig = DEFAULT_DICE_CONFIG
) -> str:
    """One-line summary such as ``2d6+3 = [4, 6*]+3 = 13``.

    Critical values are starred when ``config.highlight_criticals`` is set.
    """
    values = [
        f"{r.value}*" if config.highlight_criticals and r.is_critical else str(r.value)
        for r in result.rolls
    ]
    text = f"{result.expression.original_expression.strip()} = [{', '.join(values)}]"
    if result.modifier:
        text += f"{result.modifier:+d}"
    text += f" = {result.total}"
    if result.roll_type != RollType.normal:
        text += f" ({result.roll_type.value})"
    return text
