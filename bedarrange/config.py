"""Configuration management for bedarrange."""

from pathlib import Path
from typing import Literal, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="ARRANGE_",
        extra="ignore",
    )

    # Paths
    output_dir: Path = Field(default=Path("output"), description="Output directory for arranged scenes")

    # Default bed (X1C build plate)
    plate_width: float = Field(default=256.0, gt=0, description="Bed width in mm")
    plate_depth: float = Field(default=256.0, gt=0, description="Bed depth in mm")

    # Packing
    part_spacing: float = Field(default=5.0, ge=0, description="Minimum gap between parts in mm")
    edge_margin: float = Field(default=10.0, ge=0, description="Unusable border around each bed in mm")
    strategy: Literal["density", "height", "spacing", "sequential"] = Field(
        default="density", description="Nesting strategy: density, height, spacing, sequential"
    )
    allow_rotation: bool = Field(default=True, description="Allow 90 degree rotations")
    max_beds: Optional[int] = Field(default=None, ge=1, description="Upper bound on beds used per pass")

    # Logging
    log_level: str = Field(default="INFO", description="Log level for the CLI")


# Global settings instance
_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """Get the global settings instance."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def configure(settings: Optional[Settings]) -> None:
    """Override global settings. Pass None to reload from the environment."""
    global _settings
    _settings = settings
