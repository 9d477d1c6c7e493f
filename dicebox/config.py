from pydantic_settings import BaseSettings, SettingsConfigDict

from dicebox.dice.types import DiceRollConfig


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    environment: str = "local"
    debug: bool = True
    log_level: str = "INFO"

    # Dice limits served by the HTTP layer. The engine itself never reads
    # these; callers pass a DiceRollConfig explicitly.
    dice_max_dice_count: int = 20
    dice_max_die_sides: int = 100
    dice_max_modifier: int = 999
    dice_highlight_criticals: bool = True

    # Seed for per-request generators. Leave unset for unpredictable rolls.
    dice_rng_seed: int | None = None

    def dice_config(self) -> DiceRollConfig:
        return DiceRollConfig(
            max_dice_count=self.dice_max_dice_count,
            max_die_sides=self.dice_max_die_sides,
            max_modifier=self.dice_max_modifier,
            highlight_criticals=self.dice_highlight_criticals,
        )


settings = Settings()
