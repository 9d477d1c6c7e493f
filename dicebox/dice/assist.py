"""Input helpers: correction suggestions, sanitizing and safety warnings.

None of these replace validation. The sanitizer pre-cleans sloppy input, the
suggestions explain common mistakes, and the safety check flags expressions
that are valid but expensive to display.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

_WHITESPACE_RE = re.compile(r"\s+")
_OPERATOR_RUN_RE = re.compile(r"[+-]{2,}")
_LARGE_NUMBER_RE = re.compile(r"\d{4,}")
_DIE_COUNT_RE = re.compile(r"(\d+)d")

MAX_SAFE_DIE_COUNT = 50
MAX_SAFE_SYMBOLS = 10

GENERIC_SUGGESTION = (
    'Try formats like: "2d6+3" (dice + modifier), "d20" (single die), or "+5" (modifier only)'
)


@dataclass(frozen=True)
class SafetyReport:
    is_safe: bool
    warnings: tuple[str, ...]


def get_dice_expression_suggestions(expression: str) -> list[str]:
    """Suggest corrections for a malformed expression.

    Always returns at least one suggestion.
    """
    suggestions: list[str] = []
    cleaned = _WHITESPACE_RE.sub("", expression).lower()

    if "dice" in cleaned or "die" in cleaned:
        suggestions.append('Use "d" notation instead of words (e.g., "2d6" instead of "2 dice")')

    if "x" in cleaned or "*" in cleaned or "×" in cleaned:
        suggestions.append('Use "d" for dice notation (e.g., "2d6" instead of "2x6" or "2*6")')

    if re.search(r"\d+-\d+", cleaned) and "d" not in cleaned:
        suggestions.append(
            'Did you mean a die range? Use "d" notation (e.g., "1d6" instead of "1-6")'
        )

    if "." in cleaned or "," in cleaned:
        suggestions.append("Remove decimal points and commas. Use whole numbers only")

    if re.search(r"[a-z]+\d+", cleaned) and "d" not in cleaned:
        suggestions.append('Use "d" for dice notation (e.g., "d20" instead of "die20")')

    if cleaned.isdigit() and 1 < int(cleaned) <= 100:
        number = int(cleaned)
        suggestions.append(f'Did you mean "d{number}" (roll 1 die with {number} sides)?')
        suggestions.append(f'Or did you mean "+{number}" (add {number} as a modifier)?')

    if "++" in cleaned or "--" in cleaned:
        suggestions.append('Use single + or - for modifiers (e.g., "2d6+3" instead of "2d6++3")')

    if not suggestions:
        suggestions.append(GENERIC_SUGGESTION)
    return suggestions


def _collapse_operators(match: re.Match[str]) -> str:
    return "-" if "-" in match.group(0) else "+"


def sanitize_dice_input(text: str) -> str:
    """Clean sloppy input into something the parser has a chance with.

    >>> sanitize_dice_input(" 2 x 6 ++ 3 ")
    '2d6+3'
    """
    if not isinstance(text, str):
        return ""
    cleaned = _WHITESPACE_RE.sub("", text)
    cleaned = re.sub(r"[xX×]", "d", cleaned).lower()
    cleaned = re.sub(r"[^0-9+\-d]", "", cleaned)
    cleaned = _OPERATOR_RUN_RE.sub(_collapse_operators, cleaned)
    return cleaned.strip("+-")


def check_dice_expression_safety(expression: str) -> SafetyReport:
    """Flag expressions that are likely slow or unwieldy to display."""
    warnings: list[str] = []

    large_numbers = _LARGE_NUMBER_RE.findall(expression)
    if large_numbers:
        warnings.append(f"Very large numbers detected: {', '.join(large_numbers)}")

    for count_text in _DIE_COUNT_RE.findall(expression):
        count = int(count_text)
        if count > MAX_SAFE_DIE_COUNT:
            warnings.append(f"High dice count: {count}d (this may be slow to calculate)")

    symbols = expression.count("d") + len(re.findall(r"[+-]", expression))
    if symbols > MAX_SAFE_SYMBOLS:
        warnings.append("Very complex expression (may be slow to process)")

    return SafetyReport(is_safe=not warnings, warnings=tuple(warnings))
