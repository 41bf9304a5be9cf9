"""
Centralized configuration with environment variable overrides.

Dialogue limits, pricing display and WhatsApp gateway settings are
configurable here. Nothing is hardcoded in the state machine or the
collaborator implementations.
"""

import logging
import os
from dataclasses import dataclass, field
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from dotenv import load_dotenv

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
class BotConfig:
    """Dialogue limits and display settings for the booking assistant."""

    currency_symbol: str = os.getenv("CURRENCY_SYMBOL", "₹")
    max_id_uploads: int = _safe_int("MAX_ID_UPLOADS", "3")
    max_room_photos: int = _safe_int("MAX_ROOM_PHOTOS", "5")
    max_adults: int = _safe_int("MAX_ADULTS", "20")
    max_children: int = _safe_int("MAX_CHILDREN", "10")
    recent_bookings_limit: int = _safe_int("RECENT_BOOKINGS_LIMIT", "5")
    booking_id_attempts: int = _safe_int("BOOKING_ID_ATTEMPTS", "5")
    hotel_timezone: str = os.getenv("HOTEL_TIMEZONE", "Asia/Kolkata")


@dataclass(frozen=True)
class GatewayConfig:
    """WhatsApp Cloud API and document storage settings."""

    api_base_url: str = os.getenv("WHATSAPP_API_BASE_URL", "https://graph.facebook.com")
    api_version: str = os.getenv("WHATSAPP_API_VERSION", "v21.0")
    phone_number_id: str = os.getenv("WHATSAPP_PHONE_NUMBER_ID", "")
    access_token: str = os.getenv("WHATSAPP_ACCESS_TOKEN", "")
    timeout_seconds: float = _safe_float("WHATSAPP_TIMEOUT_SECONDS", "15.0")
    document_storage_dir: str = os.getenv("DOCUMENT_STORAGE_DIR", "./id_documents")


@dataclass(frozen=True)
class AppConfig:
    """Root configuration aggregating all sub-configs."""

    bot: BotConfig = field(default_factory=BotConfig)
    gateway: GatewayConfig = field(default_factory=GatewayConfig)
    log_level: str = os.getenv("LOG_LEVEL", "INFO")
    service_name: str = os.getenv("SERVICE_NAME", "hotel-concierge")


def _validate_config(config: AppConfig) -> None:
    """Validate configuration values are within acceptable ranges."""
    bot = config.bot
    if bot.max_id_uploads < 1:
        raise ValueError(f"MAX_ID_UPLOADS must be >= 1, got {bot.max_id_uploads}")
    if bot.max_room_photos < 0:
        raise ValueError(f"MAX_ROOM_PHOTOS must be >= 0, got {bot.max_room_photos}")
    if bot.max_adults < 1:
        raise ValueError(f"MAX_ADULTS must be >= 1, got {bot.max_adults}")
    if bot.max_children < 0:
        raise ValueError(f"MAX_CHILDREN must be >= 0, got {bot.max_children}")
    if bot.recent_bookings_limit < 1:
        raise ValueError(
            f"RECENT_BOOKINGS_LIMIT must be >= 1, got {bot.recent_bookings_limit}"
        )
    if bot.booking_id_attempts < 1:
        raise ValueError(
            f"BOOKING_ID_ATTEMPTS must be >= 1, got {bot.booking_id_attempts}"
        )
    try:
        ZoneInfo(bot.hotel_timezone)
    except (ZoneInfoNotFoundError, ValueError):
        raise ValueError(f"Unknown HOTEL_TIMEZONE: {bot.hotel_timezone!r}") from None

    if config.gateway.timeout_seconds <= 0:
        raise ValueError(
            "WHATSAPP_TIMEOUT_SECONDS must be > 0, "
            f"got {config.gateway.timeout_seconds}"
        )


def load_config() -> AppConfig:
    """Load and validate application configuration."""
    config = AppConfig()
    _validate_config(config)
    logging.basicConfig(
        level=getattr(logging, config.log_level.upper(), logging.INFO),
        format="%(asctime)s [%(name)s] %(levelname)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    logger.info("Configuration loaded for '%s'", config.service_name)
    return config


# Singleton instance
settings = load_config()
