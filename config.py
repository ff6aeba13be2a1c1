"""Configuration management with environment variable support."""

import os
import secrets
from dataclasses import dataclass, field


def _parse_cors_origins() -> list[str]:
    """Parse CORS_ORIGINS environment variable."""
    origins = os.getenv("CORS_ORIGINS", "http://localhost:8000")
    return [o.strip() for o in origins.split(",") if o.strip()]


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
        default_factory=lambda: int(os.getenv("RATE_LIMIT_RPM", "120"))
    )


@dataclass(frozen=True)
class SecurityConfig:
    """Security configuration."""

    secret_key: str = field(
        default_factory=lambda: os.getenv("SECRET_KEY", secrets.token_urlsafe(32))
    )


@dataclass(frozen=True)
class GameConfig:
    """Trainer table configuration."""

    num_decks: int = field(default_factory=lambda: int(os.getenv("TRAINER_NUM_DECKS", "6")))
    cut_card_min: float = 0.72
    cut_card_max: float = 0.78
    dealer_hits_soft_17: bool = True
    ai_seats: int = field(default_factory=lambda: int(os.getenv("TRAINER_AI_SEATS", "0")))
    count_prompt_interval: int = field(
        default_factory=lambda: int(os.getenv("TRAINER_COUNT_PROMPT_INTERVAL", "5"))
    )
    history_display_limit: int = 25
    streak_milestones: tuple[int, ...] = (50, 100, 200, 300)

    # Visual pacing of queued steps; the engine itself never sleeps
    deal_delay: float = 0.5
    dealer_delay: float = 0.5

    def __post_init__(self) -> None:
        """Validate configuration values."""
        if self.num_decks < 1 or self.num_decks > 8:
            raise ValueError("num_decks must be between 1 and 8")
        if not 0.0 < self.cut_card_min <= self.cut_card_max < 1.0:
            raise ValueError("cut card fractions must satisfy 0 < min <= max < 1")
        if self.ai_seats < 0 or self.ai_seats > 6:
            raise ValueError("ai_seats must be between 0 and 6")
        if self.count_prompt_interval < 1:
            raise ValueError("count_prompt_interval must be at least 1")


@dataclass(frozen=True)
class AppConfig:
    """Application configuration."""

    debug: bool = field(default_factory=lambda: os.getenv("DEBUG", "false").lower() == "true")
    host: str = field(default_factory=lambda: os.getenv("HOST", "0.0.0.0"))
    port: int = field(default_factory=lambda: int(os.getenv("PORT", "8000")))
    log_level: str = field(default_factory=lambda: os.getenv("LOG_LEVEL", "INFO").upper())
    session_ttl: int = 3600  # Session timeout in seconds

    game: GameConfig = field(default_factory=GameConfig)
    cors: CORSConfig = field(default_factory=CORSConfig)
    rate_limit: RateLimitConfig = field(default_factory=RateLimitConfig)
    security: SecurityConfig = field(default_factory=SecurityConfig)


# Global configuration instance
config = AppConfig()
