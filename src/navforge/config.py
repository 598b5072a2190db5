"""Configuration settings for navforge."""

from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from navforge.runtime.settings import DirectorSettingsConfig, normalize_director_settings


class Settings(BaseSettings):
    """Runtime configuration loaded from environment variables or overrides."""

    model_config = SettingsConfigDict(
        env_prefix="", case_sensitive=False, populate_by_name=True
    )

    vision_score_offset: float = Field(
        default=0.05, validation_alias="NAVFORGE_VISION_SCORE_OFFSET"
    )
    hysteresis_margin: float = Field(
        default=0.08, validation_alias="NAVFORGE_HYSTERESIS_MARGIN"
    )
    prefer_dom_on_tie: bool = Field(
        default=True, validation_alias="NAVFORGE_PREFER_DOM_ON_TIE"
    )
    max_events: int = Field(default=100, validation_alias="NAVFORGE_MAX_EVENTS")
    store_path: str | None = Field(default=None, validation_alias="NAVFORGE_STORE_PATH")
    profile: str = Field(default="default", validation_alias="NAVFORGE_PROFILE")
    profile_path: str | None = Field(
        default=None, validation_alias="NAVFORGE_PROFILE_PATH"
    )
    log_level: str = Field(default="INFO", validation_alias="NAVFORGE_LOG_LEVEL")

    def director_defaults(self) -> DirectorSettingsConfig:
        return normalize_director_settings(
            {
                "vision_score_offset": self.vision_score_offset,
                "hysteresis_margin": self.hysteresis_margin,
                "prefer_dom_on_tie": self.prefer_dom_on_tie,
            }
        )
