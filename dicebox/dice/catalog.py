"""Standard die types and common Daggerheart rolls."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class DieType:
    sides: int
    name: str
    common: bool


@dataclass(frozen=True)
class CommonRoll:
    name: str
    expression: str
    description: str


STANDARD_DICE: tuple[DieType, ...] = (
    DieType(sides=4, name="d4", common=True),
    DieType(sides=6, name="d6", common=True),
    DieType(sides=8, name="d8", common=True),
    DieType(sides=10, name="d10", common=True),
    DieType(sides=12, name="d12", common=True),
    DieType(sides=20, name="d20", common=True),
    DieType(sides=100, name="d100", common=False),
)

COMMON_DAGGERHEART_ROLLS: tuple[CommonRoll, ...] = (
    CommonRoll("Action Roll", "2d12", "Standard action roll with dual d12s"),
    CommonRoll("Hope Die", "1d20", "Hope die for adding to action rolls"),
    CommonRoll("Damage (Light)", "1d4", "Light weapon damage"),
    CommonRoll("Damage (Medium)", "1d6", "Medium weapon damage"),
    CommonRoll("Damage (Heavy)", "1d8", "Heavy weapon damage"),
    CommonRoll("Damage (Very Heavy)", "1d10", "Very heavy weapon damage"),
    CommonRoll("Magic Damage", "1d20", "Spell damage roll"),
)


def get_die_type_by_name(name: str) -> DieType | None:
    """Look up a standard die by name, case-insensitively (``"D20"`` → d20)."""
    wanted = name.strip().lower()
    for die in STANDARD_DICE:
        if die.name == wanted:
            return die
    return None


def get_common_dice() -> list[DieType]:
    return [die for die in STANDARD_DICE if die.common]
