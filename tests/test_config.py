"""Unit tests for dice configuration values and settings."""

import dataclasses

import pytest

from dicebox.config import Settings
from dicebox.dice.types import DEFAULT_DICE_CONFIG, DiceRollConfig


def test_defaults():
    assert DEFAULT_DICE_CONFIG == DiceRollConfig(
        max_dice_count=20, max_die_sides=100, max_modifier=999, highlight_criticals=True
    )


def test_with_overrides_returns_new_value():
    config = DEFAULT_DICE_CONFIG.with_overrides(max_dice_count=5)
    assert config.max_dice_count == 5
    assert config.max_die_sides == 100
    assert DEFAULT_DICE_CONFIG.max_dice_count == 20


def test_config_is_frozen():
    with pytest.raises(dataclasses.FrozenInstanceError):
        DEFAULT_DICE_CONFIG.max_dice_count = 1  # type: ignore[misc]


def test_unknown_override_rejected():
    with pytest.raises(TypeError):
        DEFAULT_DICE_CONFIG.with_overrides(max_dice=3)


def test_settings_build_dice_config(monkeypatch):
    monkeypatch.setenv("DICE_MAX_DICE_COUNT", "8")
    monkeypatch.setenv("DICE_HIGHLIGHT_CRITICALS", "false")
    config = Settings().dice_config()
    assert config.max_dice_count == 8
    assert config.highlight_criticals is False
    assert config.max_modifier == 999
