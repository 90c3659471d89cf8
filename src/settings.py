# settings.py
# Environment-driven settings for the generator, the visualizer and the HTTP API.
# Only the outer layers (api.py, cli_driver.py) read these; core.py takes plain arguments.

from functools import lru_cache

from pydantic import BaseModel, Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

import core

HEX_COLOR = r"^#(?:[0-9a-fA-F]{3}|[0-9a-fA-F]{6})$"

class GeneratorSettings(BaseSettings):
    """Board size range. The side length is 2 * a value drawn from [min_half_size, max_half_size]."""

    model_config = SettingsConfigDict(env_prefix="PAIRROT_GEN_")

    min_half_size: int = Field(default=core.DEFAULT_MIN_HALF_SIZE, ge=1, le=23)
    max_half_size: int = Field(default=core.DEFAULT_MAX_HALF_SIZE, ge=1, le=23)

    @model_validator(mode="after")
    def _check_range(self) -> "GeneratorSettings":
        if self.max_half_size < self.min_half_size:
            raise ValueError("max_half_size must be >= min_half_size")
        return self

class RenderSettings(BaseSettings):
    """SVG appearance."""

    model_config = SettingsConfigDict(env_prefix="PAIRROT_RENDER_")

    cell_size: int = Field(default=50, ge=6, le=200)
    matched_color: str = Field(default="#afdfe4", pattern=HEX_COLOR)
    unmatched_color: str = Field(default="#e4a4de", pattern=HEX_COLOR)
    frame_stroke_width: int = Field(default=3, ge=1, le=20)
    show_numbers: bool = True

class ApiSettings(BaseSettings):
    """HTTP binding limits."""

    model_config = SettingsConfigDict(env_prefix="PAIRROT_API_")

    rate_limit: str = "100/minute"
    rate_limit_enabled: bool = True

class Settings(BaseModel):
    generator: GeneratorSettings = Field(default_factory=GeneratorSettings)
    render: RenderSettings = Field(default_factory=RenderSettings)
    api: ApiSettings = Field(default_factory=ApiSettings)

@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Loads the settings once from the environment."""
    return Settings()
