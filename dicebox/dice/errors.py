"""Dice expression errors and their user-facing messages.

Each failure kind is its own ``DiceError`` subclass carrying the offending
quantity. The validator returns these as values; ``parse_dice_expression``
raises them.
"""

from __future__ import annotations

from typing import ClassVar

from dicebox.dice.types import DEFAULT_DICE_CONFIG, DiceRollConfig

MAX_COMPLEXITY = 200


class DiceError(ValueError):
    """Base class for every dice expression failure."""

    code: ClassVar[str] = "UNKNOWN_ERROR"


class InvalidExpression(DiceError):
    """The text does not decompose into dice terms and numbers."""

    code = "INVALID_EXPRESSION"

    def __init__(self, expression: str, message: str | None = None) -> None:
        self.expression = expression
        super().__init__(message or f"Invalid dice expression: {expression!r}")


class InvalidDieCount(DiceError):
    """A die term has fewer than one die, or the expression has too many in total."""

    code = "INVALID_DIE_COUNT"

    def __init__(self, count: int, message: str | None = None) -> None:
        self.count = count
        super().__init__(message or f"Invalid die count: {count}")


class InvalidDieSides(DiceError):
    """A die has fewer than two sides or more than the configured maximum."""

    code = "INVALID_DIE_SIDES"

    def __init__(self, sides: int, message: str | None = None) -> None:
        self.sides = sides
        super().__init__(message or f"Invalid die sides: {sides}")


class ModifierTooLarge(DiceError):
    code = "MODIFIER_TOO_LARGE"

    def __init__(self, modifier: int, message: str | None = None) -> None:
        self.modifier = modifier
        super().__init__(message or f"Modifier {modifier} is too large")


class ExpressionTooComplex(DiceError):
    code = "EXPRESSION_TOO_COMPLEX"

    def __init__(self, complexity: int, message: str | None = None) -> None:
        self.complexity = complexity
        super().__init__(message or f"Dice expression is too complex (score: {complexity})")


class UnknownError(DiceError):
    """An unexpected internal failure, converted so validation stays total."""

    code = "UNKNOWN_ERROR"

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


def format_dice_error(error: DiceError, config: DiceRollConfig = DEFAULT_DICE_CONFIG) -> str:
    """Turn a DiceError into a message a player can act on.

    Args:
        error: The failure returned by validation or raised by parsing.
        config: Limits the expression was checked against, quoted in range errors.

    Returns:
        A sentence naming the offending value and, for range violations,
        the configured limit.
    """
    if isinstance(error, InvalidExpression):
        if not error.expression.strip():
            return 'Please enter a dice expression (e.g., "2d6+3", "d20", or "+5")'
        return (
            f'Invalid dice expression: "{error.expression}". '
            'Try formats like "2d6+3", "d20-1", or "+5"'
        )
    if isinstance(error, InvalidDieCount):
        if error.count > config.max_dice_count:
            return (
                f"Too many dice ({error.count}). "
                f"Maximum allowed is {config.max_dice_count}"
            )
        return f"Invalid number of dice: {error.count}. Must be at least 1"
    if isinstance(error, InvalidDieSides):
        if error.sides > config.max_die_sides:
            return (
                f"Die too large (d{error.sides}). "
                f"Maximum allowed is d{config.max_die_sides}"
            )
        return f"Invalid die size: d{error.sides}. Dice must have at least 2 sides"
    if isinstance(error, ModifierTooLarge):
        return (
            f"Modifier too large ({error.modifier:+d}). "
            f"Maximum allowed is ±{config.max_modifier}"
        )
    if isinstance(error, ExpressionTooComplex):
        return (
            f"Dice expression is too complex (score {error.complexity}, "
            f"limit {MAX_COMPLEXITY}). Try using fewer dice or simpler combinations"
        )
    return str(error) or "Unknown error occurred while parsing dice expression"
