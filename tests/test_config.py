"""Tests for configuration and arrange settings."""

import pytest
from pydantic import ValidationError

from bedarrange.config import Settings, configure, get_settings
from bedarrange.models import ArrangeSettings, BedShape, NestingStrategy


class TestSettings:
    """Tests for application settings."""

    def test_defaults(self):
        """Test default configuration."""
        settings = Settings()

        assert settings.plate_width == 256.0
        assert settings.plate_depth == 256.0
        assert settings.part_spacing == 5.0
        assert settings.edge_margin == 10.0
        assert settings.strategy == "density"
        assert settings.max_beds is None

    def test_environment(self, monkeypatch):
        """Test settings are read from ARRANGE_ variables."""
        monkeypatch.setenv("ARRANGE_PLATE_WIDTH", "180")
        monkeypatch.setenv("ARRANGE_MAX_BEDS", "3")

        settings = get_settings()

        assert settings.plate_width == 180.0
        assert settings.max_beds == 3

    def test_validation(self):
        """Test invalid values are rejected."""
        with pytest.raises(ValidationError):
            Settings(plate_width=0)

    def test_invalid_strategy(self, monkeypatch):
        """Test an unknown strategy is rejected when settings load."""
        monkeypatch.setenv("ARRANGE_STRATEGY", "bogus")

        with pytest.raises(ValidationError):
            get_settings()

    def test_configure(self):
        """Test overriding the global settings."""
        custom = Settings(part_spacing=1.0)
        configure(custom)

        assert get_settings() is custom


class TestArrangeSettings:
    """Tests for ArrangeSettings."""

    def test_default_config(self):
        """Test default configuration."""
        config = ArrangeSettings()

        assert config.part_spacing == 5.0
        assert config.edge_margin == 10.0
        assert config.strategy == NestingStrategy.DENSITY
        assert config.allow_rotation is True
        assert config.max_beds is None

    def test_to_dict(self):
        """Test config serialization."""
        d = ArrangeSettings(strategy=NestingStrategy.SPACING).to_dict()

        assert d["part_spacing"] == 5.0
        assert d["strategy"] == "spacing"

    def test_from_dict(self):
        """Test config deserialization."""
        config = ArrangeSettings.from_dict({"part_spacing": 2.0, "strategy": "height", "max_beds": 2})

        assert config.part_spacing == 2.0
        assert config.strategy == NestingStrategy.HEIGHT
        assert config.max_beds == 2

    def test_from_settings(self):
        """Test building from application settings."""
        config = ArrangeSettings.from_settings(Settings(strategy="sequential", allow_rotation=False))

        assert config.strategy == NestingStrategy.SEQUENTIAL
        assert config.allow_rotation is False

    def test_strategy_string(self):
        """Test a plain string strategy is coerced."""
        assert ArrangeSettings(strategy="height").strategy is NestingStrategy.HEIGHT

    @pytest.mark.parametrize("kwargs", [
        {"part_spacing": -1},
        {"edge_margin": -0.5},
        {"max_beds": 0},
    ])
    def test_invalid(self, kwargs):
        """Test invalid settings are rejected."""
        with pytest.raises(ValueError):
            ArrangeSettings(**kwargs)

    def test_immutable(self):
        """Test settings cannot change after creation."""
        config = ArrangeSettings()
        with pytest.raises(AttributeError):
            config.part_spacing = 1.0


class TestBedShape:
    """Tests for BedShape."""

    def test_area(self):
        """Test bed area."""
        assert BedShape(100, 50).area == 5000

    def test_from_settings(self):
        """Test the default bed follows the configured plate."""
        assert BedShape.from_settings(Settings(plate_width=180, plate_depth=190)) == BedShape(180, 190)

    @pytest.mark.parametrize("width,depth", [(0, 10), (10, -1)])
    def test_invalid(self, width, depth):
        """Test non-positive sizes are rejected."""
        with pytest.raises(ValueError):
            BedShape(width, depth)
