"""
Tests for YAML configuration loading.
"""

from pathlib import Path

import pytest

from tableslots.config import AppConfig, RestaurantConfig
from tableslots.domain.models import OccupancyMode


def _write(tmp_path: Path, text: str) -> Path:
    config_path = tmp_path / "config.yaml"
    config_path.write_text(text, encoding="utf-8")
    return config_path


class TestAppConfig:
    """Tests for AppConfig.load_from_yaml."""

    def test_minimal_config_uses_defaults(self, tmp_path):
        """Test only the restaurant id is required."""
        config = AppConfig.load_from_yaml(_write(tmp_path, "restaurant:\n  id: 3\n"))

        assert config.restaurant.id == 3
        assert config.restaurant.timezone == "Europe/Berlin"
        assert config.api.base_url == "http://localhost:5000"
        assert config.defaults.guest_count == 2
        assert config.defaults.occupancy_mode is OccupancyMode.TABLES
        assert config.data_file is None

    def test_full_config(self, tmp_path):
        """Test every section is read."""
        config = AppConfig.load_from_yaml(_write(tmp_path, """
restaurant:
  id: 3
  name: "Trattoria"
  timezone: "Europe/Vienna"
api:
  base_url: "https://bookings.example.com/"
  access_token: "secret"
  timeout_seconds: 5
defaults:
  guest_count: 4
  slot_interval_minutes: 15
  default_booking_minutes: 90
  occupancy_mode: guests
data_file: "data.json"
"""))

        assert config.restaurant.display_name() == "Trattoria"
        assert config.api.base_url == "https://bookings.example.com"
        assert config.api.access_token == "secret"
        assert config.defaults.slot_interval_minutes == 15
        assert config.defaults.occupancy_mode is OccupancyMode.GUESTS
        assert config.data_file == Path("data.json")

    def test_missing_file(self, tmp_path):
        """Test a missing config file raises FileNotFoundError."""
        with pytest.raises(FileNotFoundError):
            AppConfig.load_from_yaml(tmp_path / "config.yaml")

    def test_non_mapping_root(self, tmp_path):
        """Test a YAML list at the root is rejected."""
        with pytest.raises(ValueError, match="mapping"):
            AppConfig.load_from_yaml(_write(tmp_path, "- restaurant\n"))

    def test_invalid_yaml(self, tmp_path):
        """Test broken YAML is reported as ValueError."""
        with pytest.raises(ValueError, match="Invalid YAML"):
            AppConfig.load_from_yaml(_write(tmp_path, "restaurant: [id: 3\n"))

    @pytest.mark.parametrize(
        "text",
        [
            "restaurant:\n  id: 3\n  timezone: Nowhere/Special\n",
            "restaurant:\n  id: 3\napi:\n  base_url: localhost:5000\n",
            "restaurant:\n  id: 3\ndefaults:\n  guest_count: 0\n",
        ]
    )
    def test_invalid_values(self, tmp_path, text):
        """Test validators reject bad settings."""
        with pytest.raises(ValueError):
            AppConfig.load_from_yaml(_write(tmp_path, text))

    def test_display_name_fallback(self):
        """Test unnamed restaurants are labelled by id."""
        assert RestaurantConfig(id=7).display_name() == "Restaurant 7"
