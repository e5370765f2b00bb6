"""
Centralized configuration with environment variable overrides.

Currency, default availability window and client-side storage locations
are configurable here. Nothing is hardcoded in evaluator or checkout logic.
"""

import logging
import os
import re
from dataclasses import dataclass, field

from dotenv import load_dotenv

from carrental.logging_context import LOG_FORMAT, attach_checkout_id

load_dotenv()

logger = logging.getLogger(__name__)

_HHMM = re.compile(r"^([01]\d|2[0-3]):[0-5]\d$")


def _safe_int(env_var: str, default: str) -> int:
    """Parse an integer from an env var with a clear error on bad values."""
    raw = os.getenv(env_var, default)
    try:
        return int(raw)
    except (ValueError, TypeError):
        raise ValueError(
            f"Invalid integer for {env_var}: {raw!r}"
        ) from None


@dataclass(frozen=True)
class PricingConfig:
    """Currency settings for price breakdowns and payment intents."""

    currency: str = os.getenv("CURRENCY", "PKR")
    payment_currency: str = os.getenv("PAYMENT_CURRENCY", "usd")
    amount_decimal_places: int = _safe_int("AMOUNT_DECIMAL_PLACES", "2")


@dataclass(frozen=True)
class AvailabilityConfig:
    """Daily window applied when a resource's availability omits its times."""

    default_start_time: str = os.getenv("DEFAULT_START_TIME", "00:00")
    default_end_time: str = os.getenv("DEFAULT_END_TIME", "23:59")


@dataclass(frozen=True)
class StorageConfig:
    """Locations of the client-side JSON stores."""

    session_file: str = os.getenv("SESSION_FILE", ".carrental/session.json")
    likes_file: str = os.getenv("LIKES_FILE", ".carrental/likes.json")


@dataclass(frozen=True)
class AppConfig:
    """Root configuration aggregating all sub-configs."""

    pricing: PricingConfig = field(default_factory=PricingConfig)
    availability: AvailabilityConfig = field(default_factory=AvailabilityConfig)
    storage: StorageConfig = field(default_factory=StorageConfig)
    log_level: str = os.getenv("LOG_LEVEL", "INFO")
    app_name: str = os.getenv("APP_NAME", "carrental")


def _validate_config(config: AppConfig) -> None:
    """Validate configuration values are within acceptable ranges."""
    if not config.pricing.currency.strip():
        raise ValueError("CURRENCY must not be empty")
    if not config.pricing.payment_currency.strip():
        raise ValueError("PAYMENT_CURRENCY must not be empty")
    if not 0 <= config.pricing.amount_decimal_places <= 4:
        raise ValueError(
            "AMOUNT_DECIMAL_PLACES must be between 0 and 4, "
            f"got {config.pricing.amount_decimal_places}"
        )

    for name, value in [
        ("DEFAULT_START_TIME", config.availability.default_start_time),
        ("DEFAULT_END_TIME", config.availability.default_end_time),
    ]:
        if not _HHMM.match(value):
            raise ValueError(f"{name} must be in HH:MM format, got {value!r}")

    if config.availability.default_start_time > config.availability.default_end_time:
        raise ValueError(
            "DEFAULT_START_TIME must not be later than DEFAULT_END_TIME, got "
            f"{config.availability.default_start_time} > "
            f"{config.availability.default_end_time}"
        )

    if not config.storage.session_file.strip():
        raise ValueError("SESSION_FILE must not be empty")
    if not config.storage.likes_file.strip():
        raise ValueError("LIKES_FILE must not be empty")


def load_config() -> AppConfig:
    """Load and validate application configuration."""
    config = AppConfig()
    _validate_config(config)
    logging.basicConfig(
        level=getattr(logging, config.log_level.upper(), logging.INFO),
        format=LOG_FORMAT,
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    for handler in logging.getLogger().handlers:
        attach_checkout_id(handler)
    logger.info("Configuration loaded for '%s'", config.app_name)
    return config


# Singleton instance
settings = load_config()
