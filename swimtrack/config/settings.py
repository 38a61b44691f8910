"""
Application configuration using Pydantic settings.

Configuration is loaded from environment variables (or a `.env` file) with
defaults that reproduce the standard analysis thresholds. The core never
reads settings itself; the helpers below build the option objects that
are passed into it.
"""

from datetime import timedelta, timezone, tzinfo
from functools import lru_cache
from typing import Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from ..core.sessions.metrics import SwolfBand
from ..core.stats.engine import AnalysisConfig
from ..infrastructure.parsers.ingest import IngestOptions


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    All settings can be overridden via environment variables, e.g.
    SESSION_GAP_MINUTES=10 or LOOKBACK_DAYS=90.
    """

    # Logging
    log_level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)"
    )

    # Parsing
    default_timezone: str = Field(
        default="UTC",
        description="IANA timezone applied to timestamps that carry no offset"
    )
    session_gap_minutes: float = Field(
        default=5.0,
        description="Lap rows further apart than this start a new session"
    )
    swolf_band_min_m: float = Field(
        default=20.0,
        description="Shortest lap (meters) counted in lap-based SWOLF"
    )
    swolf_band_max_m: float = Field(
        default=60.0,
        description="Longest lap (meters) counted in lap-based SWOLF"
    )
    swolf_reference_length_m: float = Field(
        default=25.0,
        description="Pool length assumed by session-level SWOLF when no laps exist"
    )

    # Analysis
    lookback_days: Optional[int] = Field(
        default=None,
        description="Analyze only the last N days. Unset means all-time."
    )
    anomaly_min_sessions: int = Field(
        default=5,
        description="Minimum sessions before anomaly detection runs"
    )
    moderate_sigma: float = Field(
        default=2.0,
        description="Standard deviations beyond which a value is a moderate anomaly"
    )
    extreme_sigma: float = Field(
        default=3.0,
        description="Standard deviations beyond which a value is an extreme anomaly"
    )
    sudden_pace_change_pct: float = Field(
        default=15.0,
        description="Session-to-session pace change (%) reported as sudden"
    )
    sudden_distance_change_pct: float = Field(
        default=30.0,
        description="Session-to-session distance change (%) reported as sudden"
    )
    streak_window: int = Field(
        default=10,
        description="Number of most recent sessions examined for streaks"
    )
    streak_change_pct: float = Field(
        default=2.0,
        description="Pace change (%) separating improving/declining from consistent"
    )
    min_streak: int = Field(
        default=3,
        description="Minimum consecutive transitions before a streak is reported"
    )
    weekend_gap_pct: float = Field(
        default=5.0,
        description="Weekend vs weekday pace gap (%) before an insight is emitted"
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    @property
    def timezone_info(self) -> tzinfo:
        """Resolve the default timezone, falling back to UTC when unknown."""
        if self.default_timezone.upper() == "UTC":
            return timezone.utc
        try:
            return ZoneInfo(self.default_timezone)
        except (ZoneInfoNotFoundError, ValueError):
            return timezone.utc

    @property
    def session_gap(self) -> timedelta:
        return timedelta(minutes=self.session_gap_minutes)

    @property
    def swolf_band(self) -> SwolfBand:
        return SwolfBand(min_distance=self.swolf_band_min_m, max_distance=self.swolf_band_max_m)

    @property
    def analysis_config(self) -> AnalysisConfig:
        return AnalysisConfig(
            lookback_days=self.lookback_days,
            anomaly_min_sessions=self.anomaly_min_sessions,
            moderate_sigma=self.moderate_sigma,
            extreme_sigma=self.extreme_sigma,
            sudden_pace_change_pct=self.sudden_pace_change_pct,
            sudden_distance_change_pct=self.sudden_distance_change_pct,
            streak_window=self.streak_window,
            streak_change_pct=self.streak_change_pct,
            min_streak=self.min_streak,
            weekend_gap_pct=self.weekend_gap_pct,
        )

    @property
    def ingest_options(self) -> IngestOptions:
        return IngestOptions(
            default_tz=self.timezone_info,
            band=self.swolf_band,
            reference_length=self.swolf_reference_length_m,
            session_gap=self.session_gap,
        )

    def validate_thresholds(self) -> list[str]:
        """
        Check settings that Pydantic's per-field types cannot express.

        Returns a list of problems; an empty list means the configuration
        is usable.
        """
        problems = []

        if self.swolf_band_min_m <= 0 or self.swolf_band_min_m > self.swolf_band_max_m:
            problems.append("SWOLF_BAND_MIN_M must be positive and not exceed SWOLF_BAND_MAX_M")
        if self.swolf_reference_length_m <= 0:
            problems.append("SWOLF_REFERENCE_LENGTH_M must be positive")
        if self.session_gap_minutes < 0:
            problems.append("SESSION_GAP_MINUTES must not be negative")
        if self.lookback_days is not None and self.lookback_days <= 0:
            problems.append("LOOKBACK_DAYS must be positive when set")
        if self.moderate_sigma > self.extreme_sigma:
            problems.append("MODERATE_SIGMA must not exceed EXTREME_SIGMA")

        if self.default_timezone.upper() != "UTC":
            try:
                ZoneInfo(self.default_timezone)
            except (ZoneInfoNotFoundError, ValueError):
                problems.append(f"DEFAULT_TIMEZONE is not a known timezone: {self.default_timezone}")

        return problems


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Settings are loaded once per process. For tests, call
    get_settings.cache_clear() to reset.
    """
    return Settings()
