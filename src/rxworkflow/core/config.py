"""
Configuration management for the RxWorkflow library.

This module provides centralized configuration using Pydantic Settings
for environment-based configuration management. Pure workflow functions
never read settings themselves; use cases and workers read them and pass
the values in explicitly.
"""

import os
from pathlib import Path
from typing import Dict, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class DatabaseSettings(BaseSettings):
    """Database configuration settings."""

    model_config = SettingsConfigDict(env_prefix="MONGO_")

    uri: str = Field(default="mongodb://localhost:27017", description="MongoDB connection URI")
    db_name: str = Field(default="rxworkflow", description="MongoDB database name")
    workflow_items_collection: str = Field(
        default="workflow_items", description="Collection holding prescription workflow items"
    )
    verification_sessions_collection: str = Field(
        default="verification_sessions", description="Collection holding verification sessions"
    )
    pickup_sessions_collection: str = Field(
        default="pickup_sessions", description="Collection holding pickup sessions"
    )
    will_call_bins_collection: str = Field(
        default="will_call_bins", description="Collection holding will-call bins"
    )

    @field_validator("uri")
    @classmethod
    def validate_mongo_uri(cls, v: str) -> str:
        """Validate MongoDB URI format."""
        if not v.startswith(("mongodb://", "mongodb+srv://")):
            raise ValueError(
                "MongoDB URI must start with 'mongodb://' or 'mongodb+srv://'"
            )
        return v


class LoggingSettings(BaseSettings):
    """Logging configuration settings."""

    model_config = SettingsConfigDict(env_prefix="LOG_")

    level: str = Field(default="INFO", description="Logging level")
    format: str = Field(default="json", description="Log format (json or text)")

    @field_validator("level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate logging level."""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if v.upper() not in valid_levels:
            raise ValueError(f"Log level must be one of: {valid_levels}")
        return v.upper()

    @field_validator("format")
    @classmethod
    def validate_log_format(cls, v: str) -> str:
        """Validate log format."""
        if v.lower() not in ("json", "text"):
            raise ValueError("Log format must be 'json' or 'text'")
        return v.lower()


class QueueSettings(BaseSettings):
    """Worklist color-coding and SLA settings."""

    model_config = SettingsConfigDict(env_prefix="QUEUE_")

    yellow_threshold_minutes: int = Field(
        default=15, description="Minutes before promise time at which an item turns yellow"
    )
    red_threshold_minutes: int = Field(
        default=0, description="Minutes before promise time at which an item turns red"
    )
    stat_promise_minutes: int = Field(default=15, description="SLA base minutes for STAT prescriptions")
    urgent_promise_minutes: int = Field(default=30, description="SLA base minutes for urgent prescriptions")
    normal_promise_minutes: int = Field(default=60, description="SLA base minutes for normal prescriptions")
    low_promise_minutes: int = Field(default=120, description="SLA base minutes for low-priority prescriptions")

    @field_validator("yellow_threshold_minutes", "red_threshold_minutes")
    @classmethod
    def validate_threshold(cls, v: int) -> int:
        """Validate threshold range."""
        if v < 0 or v > 24 * 60:
            raise ValueError("Queue thresholds must be between 0 and 1440 minutes")
        return v

    @field_validator(
        "stat_promise_minutes", "urgent_promise_minutes", "normal_promise_minutes", "low_promise_minutes"
    )
    @classmethod
    def validate_promise_minutes(cls, v: int) -> int:
        """Validate SLA minutes."""
        if v < 1:
            raise ValueError("Promise minutes must be at least 1")
        return v

    def promise_minutes(self) -> Dict[str, int]:
        """SLA base minutes keyed by priority value."""
        return {
            "STAT": self.stat_promise_minutes,
            "URGENT": self.urgent_promise_minutes,
            "NORMAL": self.normal_promise_minutes,
            "LOW": self.low_promise_minutes,
        }


class WillCallSettings(BaseSettings):
    """Will-call bin expiration settings."""

    model_config = SettingsConfigDict(env_prefix="WILL_CALL_")

    return_days: int = Field(default=10, description="Days a filled Rx stays in the bin before return to stock")
    reminder_days_before: int = Field(default=3, description="Days before return at which a reminder is sent")
    send_reminders: bool = Field(default=True, description="Send pickup reminders during sweeps")
    reminder_catch_up: bool = Field(
        default=False,
        description="Remind any unreminded bin inside the reminder window instead of only on the exact day",
    )
    sweeper_enabled: bool = Field(default=False, description="Enable the periodic will-call sweeper")
    sweeper_interval_seconds: int = Field(
        default=3600, description="Interval in seconds between sweeper runs (default: 1 hour)"
    )

    @field_validator("return_days")
    @classmethod
    def validate_return_days(cls, v: int) -> int:
        """Validate return window."""
        if v < 1 or v > 60:
            raise ValueError("Return days must be between 1 and 60")
        return v

    @field_validator("reminder_days_before")
    @classmethod
    def validate_reminder_days(cls, v: int) -> int:
        """Validate reminder offset."""
        if v < 1:
            raise ValueError("Reminder days must be at least 1")
        return v


class PickupSettings(BaseSettings):
    """Pickup counter settings."""

    model_config = SettingsConfigDict(env_prefix="PICKUP_")

    signature_expiry_months: int = Field(default=6, description="Months a HIPAA signature stays valid")
    min_search_chars: int = Field(default=2, description="Name prefix length required for retail search")

    @field_validator("signature_expiry_months")
    @classmethod
    def validate_expiry(cls, v: int) -> int:
        """Validate signature expiry."""
        if v < 1 or v > 24:
            raise ValueError("Signature expiry must be between 1 and 24 months")
        return v


class Settings(BaseSettings):
    """Main library settings."""

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", case_sensitive=False, extra="ignore"
    )

    app_name: str = Field(default="RxWorkflow", description="Application name")
    app_version: str = Field(default="0.1.0", description="Application version")
    app_env: str = Field(default="development", description="Application environment")
    pharmacy_name: str = Field(default="Pharmacy", description="Pharmacy name used in patient messages")

    database: DatabaseSettings = Field(default_factory=DatabaseSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)
    queue: QueueSettings = Field(default_factory=QueueSettings)
    will_call: WillCallSettings = Field(default_factory=WillCallSettings)
    pickup: PickupSettings = Field(default_factory=PickupSettings)

    @field_validator("app_env")
    @classmethod
    def validate_app_env(cls, v: str) -> str:
        """Validate application environment."""
        valid_envs = ["development", "staging", "production", "testing"]
        if v.lower() not in valid_envs:
            raise ValueError(f"App environment must be one of: {valid_envs}")
        return v.lower()

    @property
    def is_production(self) -> bool:
        """Check if running in production mode."""
        return self.app_env == "production"

    @property
    def is_testing(self) -> bool:
        """Check if running in testing mode."""
        return self.app_env == "testing"


_settings: Optional[Settings] = None


def _load_env_file_if_available() -> None:
    """Load .env by searching current and parent directories.

    Already-set environment variables are never overridden.
    """
    from dotenv import load_dotenv

    cwd = Path(os.getcwd()).resolve()
    for parent in [cwd, *cwd.parents]:
        candidate = parent / ".env"
        if candidate.exists():
            load_dotenv(dotenv_path=str(candidate), override=False)
            break


def get_settings() -> Settings:
    """Get settings instance (lazy-init with .env discovery)."""
    global _settings
    if _settings is None:
        _load_env_file_if_available()
        _settings = Settings()
    return _settings


def reset_settings() -> None:
    """Drop the cached settings so the next call re-reads the environment."""
    global _settings
    _settings = None
