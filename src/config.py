import os
from dataclasses import dataclass, field
from functools import lru_cache

from dotenv import load_dotenv

load_dotenv()


def _split_origins(raw: str) -> tuple[str, ...]:
    return tuple(origin.strip() for origin in raw.split(",") if origin.strip())


@dataclass(frozen=True)
class Settings:
    """Application settings loaded from environment variables.

    Values are read once when the settings object is created and are not
    reloaded while the process runs.
    """

    # Upstream provider
    iplocate_base_url: str = field(
        default_factory=lambda: os.getenv("IPLOCATE_BASE_URL", "https://www.iplocate.io/api/lookup")
    )
    upstream_timeout_seconds: float = field(
        default_factory=lambda: float(os.getenv("UPSTREAM_TIMEOUT_SECONDS", "10"))
    )

    # Cache
    cache_max_size: int = field(default_factory=lambda: int(os.getenv("CACHE_MAX_SIZE", "10000")))
    cache_ttl_seconds: float = field(default_factory=lambda: float(os.getenv("CACHE_TTL_SECONDS", "3600")))

    # API
    api_host: str = field(default_factory=lambda: os.getenv("API_HOST", "0.0.0.0"))
    api_port: int = field(default_factory=lambda: int(os.getenv("API_PORT", "8080")))
    api_reload: bool = field(default_factory=lambda: os.getenv("API_RELOAD", "false").lower() == "true")
    cors_allow_origins: tuple[str, ...] = field(
        default_factory=lambda: _split_origins(os.getenv("CORS_ALLOW_ORIGINS", "*"))
    )

    log_level: str = field(default_factory=lambda: os.getenv("LOG_LEVEL", "INFO").upper())

    def __post_init__(self) -> None:
        """Validate settings after initialization."""
        if self.cache_max_size <= 0:
            raise ValueError(f"CACHE_MAX_SIZE must be positive, got {self.cache_max_size}")
        if self.cache_ttl_seconds <= 0:
            raise ValueError(f"CACHE_TTL_SECONDS must be positive, got {self.cache_ttl_seconds}")
        if self.upstream_timeout_seconds <= 0:
            raise ValueError(f"UPSTREAM_TIMEOUT_SECONDS must be positive, got {self.upstream_timeout_seconds}")


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
