"""Settings models and configuration loading for the Plantwatch application."""

from functools import cached_property, lru_cache
from typing import Annotated, Any, Literal, Self

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from plantwatch.lib.config.constants import (
    BRIGHTNESS_SLACK,
    HUMIDITY_SLACK,
    MOISTURE_TOO_DRY_BELOW,
    MOISTURE_TOO_WET_ABOVE,
    MOISTURE_WINDOW,
    TEMPERATURE_SLACK,
    TOPIC_PREFIX,
)
from plantwatch.lib.config.enums import Axis, MoistureState


def _parse_bool(v: Any) -> bool:
    """Parse boolean from string '1'/'0' or actual bool."""
    if isinstance(v, bool):
        return v
    if isinstance(v, str):
        return v == "1"
    return bool(v)


_BoolFromStr = Annotated[bool, BeforeValidator(_parse_bool)]
_LogLevel = Annotated[
    Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
    BeforeValidator(lambda v: v.upper() if isinstance(v, str) else v),
]


class ToleranceSettings(BaseModel):
    """Per-axis slack around species ideal values."""

    model_config = ConfigDict(frozen=True)

    brightness_slack: float = Field(default=BRIGHTNESS_SLACK, ge=0)
    temperature_slack: float = Field(default=TEMPERATURE_SLACK, ge=0)
    humidity_slack: float = Field(default=HUMIDITY_SLACK, ge=0)

    def for_axis(self, axis: Axis) -> float:
        """Get the slack configured for an axis."""
        return {
            Axis.BRIGHTNESS: self.brightness_slack,
            Axis.TEMPERATURE: self.temperature_slack,
            Axis.HUMIDITY: self.humidity_slack,
        }[axis]


class MoistureSettings(BaseModel):
    """Soil moisture aggregation settings."""

    model_config = ConfigDict(frozen=True)

    too_dry_below: float = MOISTURE_TOO_DRY_BELOW
    too_wet_above: float = MOISTURE_TOO_WET_ABOVE
    window: int = Field(default=MOISTURE_WINDOW, gt=0)

    def classify(self, value: float) -> MoistureState:
        """Map an average moisture value into its band."""
        if value < self.too_dry_below:
            return MoistureState.TOO_DRY
        if value > self.too_wet_above:
            return MoistureState.TOO_WET
        return MoistureState.OKAY


class SchedulerSettings(BaseModel):
    """Condition check scheduler settings."""

    model_config = ConfigDict(frozen=True)

    interval_sec: float = 60.0
    max_concurrent_tenants: int = 4


class EventBusSettings(BaseModel):
    """Redis event bus settings."""

    model_config = ConfigDict(frozen=True)

    redis_url: str = "redis://localhost:6379/0"
    topic_prefix: str = TOPIC_PREFIX
    publish_max_retries: int = 3
    publish_backoff_sec: float = 1.0


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Database
    db_path: str = "plantwatch.sqlite3"
    db_timeout_sec: float = 30.0

    # Sensors
    mock_sensors: _BoolFromStr = False

    # Logging
    log_level: _LogLevel = "INFO"

    # Web server
    server_host: str = "127.0.0.1"
    server_port: int = Field(default=5000, gt=0, lt=65536)

    # Tolerances
    brightness_slack: float = Field(default=BRIGHTNESS_SLACK, ge=0)
    temperature_slack: float = Field(default=TEMPERATURE_SLACK, ge=0)
    humidity_slack: float = Field(default=HUMIDITY_SLACK, ge=0)

    # Moisture
    moisture_too_dry_below: float = Field(
        default=MOISTURE_TOO_DRY_BELOW, ge=0, le=100
    )
    moisture_too_wet_above: float = Field(
        default=MOISTURE_TOO_WET_ABOVE, ge=0, le=100
    )
    moisture_window: int = Field(default=MOISTURE_WINDOW, gt=0)

    # Scheduler
    check_interval_sec: float = Field(default=60.0, gt=0)
    max_concurrent_tenants: int = Field(default=4, ge=1)

    # Redis
    redis_url: str = "redis://localhost:6379/0"
    topic_prefix: str = Field(default=TOPIC_PREFIX, min_length=1)
    publish_max_retries: int = Field(default=3, ge=1)
    publish_backoff_sec: float = Field(default=1.0, ge=0)

    @cached_property
    def tolerances(self) -> ToleranceSettings:
        """Get tolerance settings as nested object."""
        return ToleranceSettings(
            brightness_slack=self.brightness_slack,
            temperature_slack=self.temperature_slack,
            humidity_slack=self.humidity_slack,
        )

    @cached_property
    def moisture(self) -> MoistureSettings:
        """Get moisture settings as nested object."""
        return MoistureSettings(
            too_dry_below=self.moisture_too_dry_below,
            too_wet_above=self.moisture_too_wet_above,
            window=self.moisture_window,
        )

    @cached_property
    def scheduler(self) -> SchedulerSettings:
        """Get scheduler settings."""
        return SchedulerSettings(
            interval_sec=self.check_interval_sec,
            max_concurrent_tenants=self.max_concurrent_tenants,
        )

    @cached_property
    def eventbus(self) -> EventBusSettings:
        """Get event bus settings."""
        return EventBusSettings(
            redis_url=self.redis_url,
            topic_prefix=self.topic_prefix.rstrip("/"),
            publish_max_retries=self.publish_max_retries,
            publish_backoff_sec=self.publish_backoff_sec,
        )

    @model_validator(mode="after")
    def validate_settings(self) -> Self:
        """Validate cross-field configuration constraints."""
        errors: list[str] = []

        if self.moisture_too_dry_below >= self.moisture_too_wet_above:
            errors.append(
                f"MOISTURE_TOO_DRY_BELOW ({self.moisture_too_dry_below}) must be "
                f"less than MOISTURE_TOO_WET_ABOVE ({self.moisture_too_wet_above})"
            )

        if not self.topic_prefix.strip("/"):
            errors.append("TOPIC_PREFIX must not be empty")

        if errors:
            raise ValueError(
                "Configuration validation failed:\n  - "
                + "\n  - ".join(errors)
            )

        return self


# Settings override for testing - allows injecting custom Settings without
# modifying environment variables or clearing the lru_cache.
_settings_override: Settings | None = None


@lru_cache(maxsize=1)
def _load_settings() -> Settings:
    """Load settings from environment (cached)."""
    return Settings()


def get_settings() -> Settings:
    """Get the global settings instance.

    Returns the test override if set, otherwise loads from environment
    variables (cached after first load). For testing, use set_settings()
    from plantwatch.lib.config.testing to override.
    """
    if _settings_override is not None:
        return _settings_override
    return _load_settings()
