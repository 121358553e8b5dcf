"""Runtime configuration for the command line host."""

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from chipax.logging import LEVEL_ORDER


class RunConfig(BaseSettings):
    """Settings for a headless run, read from ``CHIPAX_*`` environment variables.

    Attributes:
        cycles: Number of instructions to execute after loading the program
            (``CHIPAX_CYCLES``)
        seed: Seed for the machine's random source (``CHIPAX_SEED``)
        log_level: Minimum level printed by the ``chipax`` logger
            (``CHIPAX_LOG_LEVEL``)
        show_progress: Whether to show a progress bar while running
            (``CHIPAX_SHOW_PROGRESS``)
    """
    model_config = SettingsConfigDict(env_prefix="CHIPAX_", frozen=True)

    cycles: int = Field(default=0, ge=0)
    seed: int = 0
    log_level: str = "INFO"
    show_progress: bool = True

    @field_validator("log_level")
    @classmethod
    def _known_level(cls, value: str) -> str:
        level = value.upper()
        if level not in LEVEL_ORDER:
            raise ValueError(f"Unknown log level '{value}'. Supported levels: {list(LEVEL_ORDER)}")
        return level
