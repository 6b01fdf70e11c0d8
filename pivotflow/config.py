"""Configuration management for pivotflow."""

from __future__ import annotations

from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# Weekday numbering follows the candle calendar: 0 = Sunday ... 6 = Saturday.
WEEKDAY_PRESETS: dict[str, list[int]] = {
    "all": [],
    "weekdays": [1, 2, 3, 4, 5],
    "weekend": [0, 6],
}


def parse_weekday_filter(value: str | None) -> list[int]:
    """Parse a weekday filter from env.

    Supported formats:
      - ""                (no filter, include every day)
      - "weekdays"        (preset, see ``WEEKDAY_PRESETS``)
      - "1,3,5"           (explicit weekday numbers, 0 = Sunday)

    Returns:
        Sorted list of unique weekday numbers. Empty means "all days".
    """

    value = (value or "").strip().lower()
    if not value:
        return []
    if value in WEEKDAY_PRESETS:
        return list(WEEKDAY_PRESETS[value])

    out: set[int] = set()
    for part in (p.strip() for p in value.split(",")):
        if not part:
            continue
        try:
            day = int(part)
        except ValueError:
            raise ValueError(
                f"Invalid weekday '{part}'. Use 0-6 (0 = Sunday) or one of {sorted(WEEKDAY_PRESETS)}."
            ) from None
        if not 0 <= day <= 6:
            raise ValueError(f"Weekday {day} out of range 0-6")
        out.add(day)
    return sorted(out)


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        env_ignore_empty=True,
    )

    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(default="INFO")
    log_json: bool = Field(default=False, description="Render logs as JSON lines")

    # Heatmap rendering defaults (consumed by the rendering layer via PivotAnalyzer)
    heatmap_scheme: Literal["green", "viridis", "plasma", "inferno", "turbo", "blues"] = Field(
        default="viridis",
    )
    heatmap_intensity: float = Field(
        default=1.0,
        gt=0,
        description="Exponent applied as p ** (1 / intensity); >1 boosts low probabilities",
    )
    dark_mode: bool = Field(default=False)

    # Statistics
    weekday_filter: str = Field(
        default="",
        description="Comma-separated weekdays (0 = Sunday) or preset: all, weekdays, weekend",
    )
    histogram_bins: int = Field(default=34, ge=1)
    max_lookback_days: int = Field(
        default=365,
        ge=1,
        description="Candle spans longer than this are analysed but logged as a warning",
    )

    @property
    def weekday_list(self) -> list[int]:
        """Get weekday filter as list."""
        return parse_weekday_filter(self.weekday_filter)


# Global settings instance
settings = Settings()


def get_settings() -> Settings:
    """Get settings instance."""
    return settings
