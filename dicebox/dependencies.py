"""FastAPI dependencies for dicebox."""

from __future__ import annotations

from dicebox.config import settings
from dicebox.dice.rng import RandomSource, make_random_source
from dicebox.dice.types import DiceRollConfig


def get_dice_config() -> DiceRollConfig:
    """Return the dice limits configured for this deployment."""
    return settings.dice_config()


def get_random_source() -> RandomSource:
    """Return a fresh generator per request so concurrent requests never share state.

    Tests override this dependency with a deterministic stub.
    """
    return make_random_source(settings.dice_rng_seed)
