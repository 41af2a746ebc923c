"""Configuration management with environment variable support."""

import logging
import os
import secrets
from dataclasses import dataclass, field


def _parse_cors_origins() -> list[str]:
    """Parse CORS_ORIGINS environment variable."""
    origins = os.getenv("CORS_ORIGINS", "http://localhost:8000")
    return [o.strip() for o in origins.split(",") if o.strip()]


def _parse_bet_denominations() -> tuple[int, ...]:
    """Parse BET_DENOMINATIONS environment variable."""
    raw = os.getenv("BET_DENOMINATIONS", "10,50,100")
    denominations = tuple(int(d) for d in raw.split(",") if d.strip())
    if any(d <= 0 for d in denominations):
        raise ValueError(f"Bet denominations must be positive: {raw}")
    return denominations


@dataclass(frozen=True)
class CORSConfig:
    """CORS configuration."""

    allowed_origins: list[str] = field(default_factory=_parse_cors_origins)
    allow_credentials: bool = True
    allow_methods: list[str] = field(default_factory=lambda: ["*"])
    allow_headers: list[str] = field(default_factory=lambda: ["*"])


@dataclass(frozen=True)
class RateLimitConfig:
    """Rate limiting configuration."""

    enabled: bool = field(
        default_factory=lambda: os.getenv("RATE_LIMIT_ENABLED", "true").lower() == "true"
    )
    requests_per_minute: int = field(
        default_factory=lambda: int(os.getenv("RATE_LIMIT_RPM", "60"))
    )


@dataclass(frozen=True)
class SecurityConfig:
    """Security configuration."""

    secret_key: str = field(
        default_factory=lambda: os.getenv("SECRET_KEY", secrets.token_urlsafe(32))
    )


@dataclass(frozen=True)
class LoggingConfig:
    """Logging configuration."""

    level: str = field(default_factory=lambda: os.getenv("LOG_LEVEL", "INFO").upper())
    format: str = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


@dataclass(frozen=True)
class GameConfig:
    """Table configuration."""

    starting_chips: int = field(
        default_factory=lambda: int(os.getenv("STARTING_CHIPS", "1000"))
    )
    bet_denominations: tuple[int, ...] = field(default_factory=_parse_bet_denominations)
    strict_actions: bool = field(
        default_factory=lambda: os.getenv("BLACKJACK_STRICT", "false").lower() == "true"
    )


@dataclass(frozen=True)
class AppConfig:
    """Application configuration."""

    debug: bool = field(default_factory=lambda: os.getenv("DEBUG", "false").lower() == "true")
    host: str = field(default_factory=lambda: os.getenv("HOST", "0.0.0.0"))
    port: int = field(default_factory=lambda: int(os.getenv("PORT", "8000")))
    session_ttl: int = 3600  # Session timeout in seconds

    game: GameConfig = field(default_factory=GameConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    cors: CORSConfig = field(default_factory=CORSConfig)
    rate_limit: RateLimitConfig = field(default_factory=RateLimitConfig)
    security: SecurityConfig = field(default_factory=SecurityConfig)


def configure_logging(logging_config: LoggingConfig | None = None) -> None:
    """Apply the logging level and format to the root logger."""
    logging_config = logging_config or config.logging
    logging.basicConfig(level=logging_config.level, format=logging_config.format)


# Global configuration instance
config = AppConfig()
