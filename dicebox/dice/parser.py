"""Dice expression normalizer, term parser and validator.

Supported notation: ``XdY`` terms and plain integers joined by ``+``/``-``.
Examples: 2d6, d20-1, +7, 2d6+2+1d4, 1d20+1d4+3-1d6.
"""

from __future__ import annotations

import logging
import re

from dicebox.dice.errors import (
    MAX_COMPLEXITY,
    DiceError,
    ExpressionTooComplex,
    InvalidDieCount,
    InvalidDieSides,
    InvalidExpression,
    ModifierTooLarge,
    UnknownError,
    format_dice_error,
)
from dicebox.dice.types import (
    DEFAULT_DICE_CONFIG,
    DiceExpression,
    DiceRollConfig,
    DiceValidationResult,
    Die,
)

logger = logging.getLogger(__name__)

_TERM = r"(?:\d*d\d+|\d+)"
_EXPRESSION_RE = re.compile(rf"^[+-]?{_TERM}(?:[+-]{_TERM})*$")
_TERM_RE = re.compile(r"([+-]?)(?:(\d*)d(\d+)|(\d+))")
_DICE_COMPONENT_RE = re.compile(r"(\d*)d(\d+)")
_OPERATOR_RE = re.compile(r"[+-]")
_WHITESPACE_RE = re.compile(r"\s+")

# Rollable expressions inside prose, delimited by whitespace, brackets or punctuation.
_INLINE_RE = re.compile(
    rf"(?:^|\s|[(\[{{])([+-]?{_TERM}(?:[+-]{_TERM})*)(?=\s|$|[)\]}}.,;!?])",
    re.IGNORECASE,
)


# ---------------------------------------------------------------------------
# Normalizer
# ---------------------------------------------------------------------------


def normalize_expression(expression: str) -> str | None:
    """Return the canonical form of ``expression``, or None if it is not one.

    Whitespace is removed, the text lower-cased and a leading ``+`` added when
    the first term is unsigned.
    """
    if not isinstance(expression, str):
        return None
    cleaned = _WHITESPACE_RE.sub("", expression).lower()
    if cleaned in ("", "+", "-"):
        return None
    if cleaned[0].isdigit() or cleaned[0] == "d":
        cleaned = "+" + cleaned
    if not _EXPRESSION_RE.match(cleaned):
        return None
    return cleaned


# ---------------------------------------------------------------------------
# Term parser
# ---------------------------------------------------------------------------


def _check_die(count_text: str, sides_text: str, config: DiceRollConfig) -> Die:
    count = int(count_text) if count_text else 1
    sides = int(sides_text)
    if count < 1:
        raise InvalidDieCount(count, f"Invalid die count: {count_text or '(empty)'}")
    if sides < 2:
        raise InvalidDieSides(sides, f"Invalid die sides: {sides_text}. Must be at least 2.")
    if sides > config.max_die_sides:
        raise InvalidDieSides(
            sides, f"Die sides {sides} exceeds maximum allowed {config.max_die_sides}"
        )
    return Die(count=count, sides=sides)


def _is_simple(normalized: str) -> bool:
    """One dice term and nothing else, e.g. ``+2d6`` or ``-d8``."""
    components = _DICE_COMPONENT_RE.findall(normalized)
    operators = _OPERATOR_RE.findall(normalized)
    return len(components) == 1 and len(operators) <= 1


def parse_terms(
    normalized: str, config: DiceRollConfig = DEFAULT_DICE_CONFIG
) -> tuple[tuple[Die, ...], int]:
    """Split a normalized expression into die groups and a flat modifier.

    Dice of the same size are merged by signed count. A size whose running
    count drops to zero or below is discarded, and counting for it restarts
    if it appears again later.

    Args:
        normalized: Output of ``normalize_expression``.
        config: Limits checked on each individual dice term.

    Returns:
        Tuple of (die groups in first-seen order, modifier).

    Raises:
        InvalidDieCount: A dice term has a count below 1.
        InvalidDieSides: A dice term has fewer than 2 or too many sides.
    """
    if _is_simple(normalized):
        count_text, sides_text = _DICE_COMPONENT_RE.findall(normalized)[0]
        return (_check_die(count_text, sides_text, config),), 0

    counts: dict[int, int] = {}
    order: list[int] = []
    modifier = 0
    for sign, count_text, sides_text, number_text in _TERM_RE.findall(normalized):
        negative = sign == "-"
        if number_text:
            modifier += -int(number_text) if negative else int(number_text)
            continue
        die = _check_die(count_text, sides_text, config)
        if die.sides not in order:
            order.append(die.sides)
        running = counts.get(die.sides, 0) + (-die.count if negative else die.count)
        if running <= 0:
            counts.pop(die.sides, None)
        else:
            counts[die.sides] = running

    dice = tuple(Die(count=counts[sides], sides=sides) for sides in order if sides in counts)
    return dice, modifier


# ---------------------------------------------------------------------------
# Validator
# ---------------------------------------------------------------------------


def complexity_score(dice: tuple[Die, ...]) -> int:
    total = sum(die.count for die in dice)
    return len(dice) * 5 + min(total, 100)


def validate_components(
    dice: tuple[Die, ...],
    modifier: int,
    config: DiceRollConfig = DEFAULT_DICE_CONFIG,
    expression: str = "",
) -> DiceError | None:
    """Check parsed components against the configured limits.

    Returns the first failure found, or None when the components are valid.
    """
    for die in dice:
        if die.sides > config.max_die_sides:
            return InvalidDieSides(
                die.sides,
                f"Die sides {die.sides} exceeds maximum allowed {config.max_die_sides}",
            )

    total = sum(die.count for die in dice)
    if total > config.max_dice_count:
        return InvalidDieCount(
            total, f"Total dice count {total} exceeds maximum allowed {config.max_dice_count}"
        )

    if abs(modifier) > config.max_modifier:
        return ModifierTooLarge(
            modifier, f"Modifier {modifier} exceeds maximum allowed ±{config.max_modifier}"
        )

    score = complexity_score(dice)
    if score > MAX_COMPLEXITY:
        return ExpressionTooComplex(score)

    if not dice and modifier == 0:
        return InvalidExpression(
            expression, "Expression must contain at least dice or a modifier"
        )

    return None


def validate_dice_expression(
    expression: str, config: DiceRollConfig = DEFAULT_DICE_CONFIG
) -> DiceValidationResult:
    """Validate and parse ``expression`` without raising.

    Args:
        expression: Raw dice expression text.
        config: Limits to enforce.

    Returns:
        A DiceValidationResult holding either the parsed expression or the error.
    """
    try:
        normalized = normalize_expression(expression)
        if normalized is None:
            return DiceValidationResult(
                is_valid=False,
                error=InvalidExpression(
                    expression if isinstance(expression, str) else "",
                    "Empty or invalid dice expression",
                ),
            )
        dice, modifier = parse_terms(normalized, config)
        error = validate_components(dice, modifier, config, expression)
    except DiceError as exc:
        return DiceValidationResult(is_valid=False, error=exc)
    except Exception as exc:
        logger.exception("Unexpected failure parsing dice expression %r", expression)
        return DiceValidationResult(
            is_valid=False, error=UnknownError(str(exc) or "Unknown parsing error")
        )

    if error is not None:
        return DiceValidationResult(is_valid=False, error=error)
    return DiceValidationResult(
        is_valid=True,
        expression=DiceExpression(dice=dice, modifier=modifier, original_expression=expression),
    )


def parse_dice_expression(
    expression: str, config: DiceRollConfig = DEFAULT_DICE_CONFIG
) -> DiceExpression:
    """Parse ``expression``, raising the validation failure if there is one.

    Raises:
        DiceError: The specific subclass describing why the expression is invalid.
    """
    result = validate_dice_expression(expression, config)
    if result.expression is None:
        raise result.error or UnknownError("Dice expression could not be parsed")
    return result.expression


def resolve_expression(
    expression: str | DiceExpression, config: DiceRollConfig = DEFAULT_DICE_CONFIG
) -> DiceExpression:
    """Accept text or an already parsed expression and return a checked DiceExpression.

    Expressions built by hand are re-validated against ``config``.
    """
    if isinstance(expression, DiceExpression):
        error = validate_components(
            expression.dice, expression.modifier, config, expression.original_expression
        )
        if error is not None:
            raise error
        return expression
    return parse_dice_expression(expression, config)


def validate_multiple_dice_expressions(
    expressions: list[str], config: DiceRollConfig = DEFAULT_DICE_CONFIG
) -> list[DiceValidationResult]:
    """Validate each expression in order."""
    return [validate_dice_expression(expr, config) for expr in expressions]


def is_valid_dice_expression(
    expression: str, config: DiceRollConfig = DEFAULT_DICE_CONFIG
) -> bool:
    return validate_dice_expression(expression, config).is_valid


def get_dice_expression_error(
    expression: str, config: DiceRollConfig = DEFAULT_DICE_CONFIG
) -> str | None:
    """Return a player-facing error message for ``expression``, or None if it is valid."""
    result = validate_dice_expression(expression, config)
    if result.error is None:
        return None
    return format_dice_error(result.error, config)


# ---------------------------------------------------------------------------
# Inline detection
# ---------------------------------------------------------------------------


def is_dice_expression(text: str) -> bool:
    """Quick check that ``text`` looks rollable: dice notation or a bare signed number."""
    if not isinstance(text, str):
        return False
    cleaned = _WHITESPACE_RE.sub("", text).lower()
    if not _EXPRESSION_RE.match(cleaned):
        return False
    return bool(re.search(r"d\d+", cleaned) or re.fullmatch(r"[+-]?\d+", cleaned))


def extract_dice_expressions(text: str) -> list[str]:
    """Find rollable expressions inside a block of prose.

    >>> extract_dice_expressions("The goblin hits for 1d6+2 damage (or 2d6 on a crit).")
    ['1d6+2', '2d6']
    """
    return [
        candidate
        for candidate in (m.group(1).strip() for m in _INLINE_RE.finditer(text))
        if is_dice_expression(candidate)
    ]
