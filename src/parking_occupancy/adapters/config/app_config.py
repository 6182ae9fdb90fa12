"""12-factor configuration adapter using environment variables and TOML config."""

from __future__ import annotations

import logging
import tomllib
from pathlib import Path
from typing import Any

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from parking_occupancy.adapters.api_rate_limiter import DEFAULT_MIN_DELAY_SECONDS
from parking_occupancy.adapters.tfnsw_api.constants import TFNSW_DEFAULT_BASE_URL
from parking_occupancy.domain.models.app_state import AppState
from parking_occupancy.domain.models.cadence_group import DEFAULT_HIGH_CADENCE_NAMES
from parking_occupancy.domain.models.coordinate import Coordinate
from parking_occupancy.domain.models.scheduler_settings import SchedulerSettings

# TOML [section] -> settings that section may override
_TOML_SECTIONS: dict[str, tuple[str, ...]] = {
    "api": ("api_base_url", "api_timeout_seconds", "min_api_interval_seconds"),
    "scheduler": (
        "nearest_count",
        "remaining_phase_delay_seconds",
        "stale_after_seconds",
        "high_cadence_names",
        "initial_app_state",
        "store_path",
    ),
    "location": ("device_latitude", "device_longitude"),
}


class AppConfig(BaseSettings):
    """Application configuration following 12-factor principles."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        validate_assignment=True,
    )

    # TfNSW API configuration
    tfnsw_api_key: str = Field(default="", description="TfNSW open data API key")
    api_base_url: str = Field(
        default=TFNSW_DEFAULT_BASE_URL, description="Base URL of the car park API"
    )
    api_timeout_seconds: float = Field(
        default=10.0, description="Timeout for car park API requests in seconds"
    )
    min_api_interval_seconds: float = Field(
        default=DEFAULT_MIN_DELAY_SECONDS,
        description="Minimum spacing between car park API calls in seconds",
    )

    # Scheduler configuration
    nearest_count: int = Field(
        default=5,
        description="Number of nearest facilities refreshed when there are no favourites",
    )
    remaining_phase_delay_seconds: float = Field(
        default=1.0,
        description="Extra delay after each fetch while loading non-priority facilities",
    )
    stale_after_seconds: float = Field(
        default=30.0, description="Age after which an on-demand refresh fetches again"
    )
    high_cadence_names: list[str] = Field(
        default_factory=lambda: list(DEFAULT_HIGH_CADENCE_NAMES),
        description="Facility name fragments refreshed at the high cadence",
    )
    initial_app_state: str = Field(
        default="active", description="Lifecycle state at start-up: 'active' or 'background'"
    )
    store_path: str | None = Field(
        default=None, description="Path of the JSON facility snapshot (in-memory only if unset)"
    )

    # Location configuration
    device_latitude: float | None = Field(default=None, description="Fixed device latitude")
    device_longitude: float | None = Field(default=None, description="Fixed device longitude")

    log_level: str = Field(default="INFO", description="Logging level")

    # TOML config file path with the facility catalog and overrides
    config_file: str | None = Field(
        default="config.example.toml",
        description="Path to TOML configuration file with the facility catalog",
    )

    @classmethod
    def for_testing(cls, **overrides: Any) -> AppConfig:
        """Build a config that ignores any .env file."""
        return cls(_env_file=None, **overrides)

    @field_validator("initial_app_state")
    @classmethod
    def validate_initial_app_state(cls, v: str) -> str:
        """Validate initial app state is either 'active' or 'background'."""
        if v.lower() not in ("active", "background"):
            raise ValueError("initial_app_state must be either 'active' or 'background'")
        return v.lower()

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level is a standard logging level name."""
        level = v.upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"log_level must be a logging level name, got {v!r}")
        return level

    @field_validator("nearest_count")
    @classmethod
    def validate_nearest_count(cls, v: int) -> int:
        if v < 0:
            raise ValueError("nearest_count must not be negative")
        return v

    @field_validator(
        "api_timeout_seconds",
        "min_api_interval_seconds",
        "remaining_phase_delay_seconds",
        "stale_after_seconds",
    )
    @classmethod
    def validate_non_negative_seconds(cls, v: float) -> float:
        if v < 0:
            raise ValueError("durations must not be negative")
        return v

    @property
    def app_state(self) -> AppState:
        return AppState(self.initial_app_state)

    @property
    def device_location(self) -> Coordinate | None:
        """Configured device fix, if both coordinates are set."""
        if self.device_latitude is None or self.device_longitude is None:
            return None
        return Coordinate(self.device_latitude, self.device_longitude)

    def scheduler_settings(self) -> SchedulerSettings:
        return SchedulerSettings(
            nearest_count=self.nearest_count,
            remaining_phase_delay_seconds=self.remaining_phase_delay_seconds,
            stale_after_seconds=self.stale_after_seconds,
        )

    def _load_toml_data(self) -> dict[str, Any]:
        """Load and parse the TOML file, applying its setting overrides."""
        if not self.config_file:
            raise ValueError("config_file must be set to load the facility catalog")

        config_path = Path(self.config_file)
        if not config_path.exists():
            raise FileNotFoundError(f"Configuration file not found: {config_path}")

        with open(config_path, "rb") as f:
            toml_data = tomllib.load(f)

        for section, keys in _TOML_SECTIONS.items():
            values = toml_data.get(section, {})
            if not isinstance(values, dict):
                raise ValueError(f"TOML config '{section}' must be a table")
            for key in keys:
                if key in values:
                    setattr(self, key, values[key])

        return toml_data

    def get_facilities_config(self) -> list[dict[str, Any]]:
        """Parse and return the [[facilities]] catalog from the TOML file."""
        toml_data = self._load_toml_data()

        facilities = toml_data.get("facilities", [])
        if not isinstance(facilities, list):
            raise ValueError("TOML config 'facilities' must be a list")

        ids = [str(f.get("facility_id")) for f in facilities if isinstance(f, dict)]
        if len(ids) != len(set(ids)):
            duplicates = {i for i in ids if ids.count(i) > 1}
            raise ValueError(f"Facility ids must be unique. Duplicate ids found: {duplicates}")

        return facilities
