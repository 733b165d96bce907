"""Application settings powered by Pydantic BaseSettings."""

from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from baby_affinity.rating.constants import K_FACTOR
from baby_affinity.sampler.constants import DEFAULT_ROUND_SIZE
from baby_affinity.session.constants import DEFAULT_MAX_SELECTIONS


class AppSettings(BaseSettings):
    """Centralized environment configuration.

    The rating floor and the default rating are fixed by the name model and
    are not configurable here.
    """

    model_config = SettingsConfigDict(
        env_prefix="BABY_AFFINITY_",
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    db_path: Path = Field(default=Path("data/baby_affinity.sqlite"))
    k_factor: int = Field(default=K_FACTOR, gt=0)
    max_selections: int = Field(default=DEFAULT_MAX_SELECTIONS, ge=1)
    round_size: int = Field(default=DEFAULT_ROUND_SIZE, ge=1)
    log_level: str = Field(default="INFO")
    log_json: bool = Field(default=True)
    is_premium: bool = Field(default=False)


def get_settings() -> AppSettings:
    """Get a settings instance."""
    return AppSettings()
