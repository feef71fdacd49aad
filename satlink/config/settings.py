"""Typed runtime settings with dotenv support and startup validation."""

from __future__ import annotations

import logging
from pathlib import Path

from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

_CONFIG_SUPPORTED_LOG_LEVELS = frozenset(logging.getLevelNamesMapping()) - {"NOTSET"}


class SettingsLoadError(RuntimeError):
    """Raised when runtime settings cannot be loaded or validated."""


class AppSettings(BaseSettings):
    """Application settings for schedule inputs, outputs, and resolver tuning.

    Environment variable names map directly to field names in uppercase.
    Example: `time_step_ms` reads from `TIME_STEP_MS`.

    Attributes:
        connection_schedules_path: Directory holding station-to-satellite access reports.
        connection_schedule_filename_start: File-name prefix selecting connection reports.
        flyby_schedules_path: Directory holding imaging-area access reports.
        flyby_schedule_filename_start: File-name prefix selecting flyby reports.
        results_path: Directory receiving per-station schedule text files.
        statistics_path: Directory receiving CSV statistics.
        report_timestamp_format: strptime/strftime pattern of report timestamps.
        statistics_timestamp_format: strftime pattern used in CSV statistics.
        time_step_ms: Quantization step for long connection windows.
        primary_fleet_size: Number of leading satellites using the primary profile.
        primary_max_time_amount: Primary profile memory capacity in shooting milliseconds.
        primary_transmit_ratio: Primary profile downlink-to-shooting time ratio.
        primary_bandwidth: Primary profile downlink bandwidth in MB/s.
        secondary_max_time_amount: Secondary profile memory capacity in shooting milliseconds.
        secondary_transmit_ratio: Secondary profile downlink-to-shooting time ratio.
        secondary_bandwidth: Secondary profile downlink bandwidth in MB/s.
        log_level: Root logging level name.
        application_title: Title written into packaged archive manifests.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )

    connection_schedules_path: Path = Field(default=Path("data/connection_schedules"))
    connection_schedule_filename_start: str = Field(default="Facility-", min_length=1)
    flyby_schedules_path: Path = Field(default=Path("data/flyby_schedules"))
    flyby_schedule_filename_start: str = Field(default="AreaTarget-Russia-To-", min_length=1)
    results_path: Path = Field(default=Path("results"))
    statistics_path: Path = Field(default=Path("statistics"))
    report_timestamp_format: str = Field(default="%d %b %Y %H:%M:%S.%f", min_length=1)
    statistics_timestamp_format: str = Field(default="%Y-%m-%d %H:%M:%S.%f", min_length=1)
    time_step_ms: int = Field(default=60000, ge=1)
    primary_fleet_size: int = Field(default=50, ge=0)
    primary_max_time_amount: int = Field(default=2500000, ge=0)
    primary_transmit_ratio: int = Field(default=4, ge=1)
    primary_bandwidth: int = Field(default=100, ge=0)
    secondary_max_time_amount: int = Field(default=1250000, ge=0)
    secondary_transmit_ratio: int = Field(default=16, ge=1)
    secondary_bandwidth: int = Field(default=25, ge=0)
    log_level: str = Field(default="INFO")
    application_title: str = Field(default="SatLink", min_length=1)

    @field_validator(
        "connection_schedule_filename_start",
        "flyby_schedule_filename_start",
        "report_timestamp_format",
        "statistics_timestamp_format",
        "application_title",
    )
    @classmethod
    def _validate_non_empty_string(cls, value: str) -> str:
        stripped_value = value.strip()
        if not stripped_value:
            raise ValueError("value must not be blank")
        return stripped_value

    @field_validator("log_level")
    @classmethod
    def _validate_log_level(cls, value: str) -> str:
        normalized_value = value.strip().upper()
        if normalized_value not in _CONFIG_SUPPORTED_LOG_LEVELS:
            raise ValueError(f"unsupported log_level={value}")
        return normalized_value


def config_load_settings(env_file: str | Path | None = None) -> AppSettings:
    """Load and validate runtime settings from environment and dotenv.

    Args:
        env_file: Optional dotenv path overriding the default `.env` lookup.

    Returns:
        AppSettings: Validated runtime settings object.

    Raises:
        SettingsLoadError: Raised when settings are invalid or the dotenv file is missing.
    """

    if env_file is not None and not Path(env_file).is_file():
        raise SettingsLoadError(f"Settings file not found: {env_file}")

    try:
        if env_file is None:
            return AppSettings()
        return AppSettings(_env_file=env_file)
    except ValidationError as error:
        raise SettingsLoadError(
            f"Startup configuration validation failed. Update .env or environment variables. Details: {error}"
        ) from error
