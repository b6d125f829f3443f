"""
Centralized configuration with environment variable overrides.

Schedule defaults, booking horizon, password policy and API settings are
configurable here. Nothing is hardcoded in the availability or validation
logic.
"""

import logging
import os
from dataclasses import dataclass, field

from dotenv import load_dotenv

from mechapp.logging_context import LOG_FORMAT, install_session_filter

load_dotenv()

logger = logging.getLogger(__name__)


def _safe_int(env_var: str, default: str) -> int:
    """Parse an integer from an env var with a clear error on bad values."""
    raw = os.getenv(env_var, default)
    try:
        return int(raw)
    except (ValueError, TypeError):
        raise ValueError(
            f"Invalid integer for {env_var}: {raw!r}"
        ) from None


def _safe_float(env_var: str, default: str) -> float:
    """Parse a float from an env var with a clear error on bad values."""
    raw = os.getenv(env_var, default)
    try:
        return float(raw)
    except (ValueError, TypeError):
        raise ValueError(
            f"Invalid float for {env_var}: {raw!r}"
        ) from None


@dataclass(frozen=True)
class ApiConfig:
    """Backend API connection settings."""

    base_url: str = os.getenv("MECHAPP_API_URL", "http://localhost:3000")
    timeout_seconds: float = _safe_float("MECHAPP_API_TIMEOUT", "10.0")
    login_path: str = os.getenv("MECHAPP_LOGIN_PATH", "./login.html")


@dataclass(frozen=True)
class CalendarConfig:
    """Schedule fallbacks and calendar navigation limits."""

    default_start_minutes: int = _safe_int("DEFAULT_SCHEDULE_START", "540")
    default_end_minutes: int = _safe_int("DEFAULT_SCHEDULE_END", "1080")
    slot_step_minutes: int = _safe_int("SLOT_STEP_MINUTES", "60")
    booking_horizon_months: int = _safe_int("BOOKING_HORIZON_MONTHS", "6")
    timezone: str = os.getenv("MECHAPP_TIMEZONE", "")


@dataclass(frozen=True)
class ValidationConfig:
    """Thresholds shared by the form validators."""

    password_min_length: int = _safe_int("PASSWORD_MIN_LENGTH", "8")
    name_min_length: int = _safe_int("NAME_MIN_LENGTH", "3")
    reviews_default_limit: int = _safe_int("REVIEWS_DEFAULT_LIMIT", "20")


@dataclass(frozen=True)
class AppConfig:
    """Root configuration aggregating all sub-configs."""

    api: ApiConfig = field(default_factory=ApiConfig)
    calendar: CalendarConfig = field(default_factory=CalendarConfig)
    validation: ValidationConfig = field(default_factory=ValidationConfig)
    log_level: str = os.getenv("LOG_LEVEL", "INFO")
    app_name: str = os.getenv("APP_NAME", "mechapp")


MINUTES_PER_DAY = 24 * 60


def _validate_config(config: AppConfig) -> None:
    """Validate configuration values are within acceptable ranges."""
    if config.api.timeout_seconds <= 0:
        raise ValueError(
            f"MECHAPP_API_TIMEOUT must be > 0, got {config.api.timeout_seconds}"
        )

    for name, value in [
        ("DEFAULT_SCHEDULE_START", config.calendar.default_start_minutes),
        ("DEFAULT_SCHEDULE_END", config.calendar.default_end_minutes),
    ]:
        if not 0 <= value < MINUTES_PER_DAY:
            raise ValueError(f"{name} must be between 0 and {MINUTES_PER_DAY - 1}, got {value}")

    if config.calendar.default_end_minutes <= config.calendar.default_start_minutes:
        raise ValueError(
            "DEFAULT_SCHEDULE_END must be after DEFAULT_SCHEDULE_START, "
            f"got {config.calendar.default_start_minutes}-{config.calendar.default_end_minutes}"
        )
    if config.calendar.slot_step_minutes < 1:
        raise ValueError(
            f"SLOT_STEP_MINUTES must be >= 1, got {config.calendar.slot_step_minutes}"
        )
    if config.calendar.booking_horizon_months < 1:
        raise ValueError(
            f"BOOKING_HORIZON_MONTHS must be >= 1, got {config.calendar.booking_horizon_months}"
        )
    if config.validation.password_min_length < 1:
        raise ValueError(
            f"PASSWORD_MIN_LENGTH must be >= 1, got {config.validation.password_min_length}"
        )
    if config.validation.name_min_length < 1:
        raise ValueError(
            f"NAME_MIN_LENGTH must be >= 1, got {config.validation.name_min_length}"
        )
    if not 1 <= config.validation.reviews_default_limit <= 50:
        raise ValueError(
            "REVIEWS_DEFAULT_LIMIT must be between 1 and 50, "
            f"got {config.validation.reviews_default_limit}"
        )


def load_config() -> AppConfig:
    """Load and validate application configuration."""
    config = AppConfig()
    _validate_config(config)
    logging.basicConfig(
        level=getattr(logging, config.log_level.upper(), logging.INFO),
        format=LOG_FORMAT,
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    install_session_filter()
    logger.info("Configuration loaded for '%s' (%s)", config.app_name, config.api.base_url)
    return config


# Singleton instance
settings = load_config()
