"""Application configuration using Pydantic Settings with YAML support.

This module provides centralized configuration management with:
- YAML-based configuration files organized by domain
- Environment-specific overrides (local, test, development, staging, production)
- Environment variable loading for secrets
- Type validation and coercion
- Caching for performance
"""

from __future__ import annotations

from functools import lru_cache
from typing import TYPE_CHECKING

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from .yaml_source import MultiYamlConfigSettingsSource


if TYPE_CHECKING:
    from pydantic_settings import PydanticBaseSettingsSource


# =============================================================================
# Nested Configuration Models (from YAML)
# =============================================================================


class AppSettings(BaseModel):
    """Application identity settings."""

    name: str = "Recipe View Ranking Service"
    version: str = "0.1.0"
    debug: bool = False


class ServerSettings(BaseModel):
    """Server configuration settings."""

    host: str = "127.0.0.1"
    port: int = 8000


class ApiSettings(BaseModel):
    """API configuration settings."""

    v1_prefix: str = "/api/v1/recipes-service"
    cors_origins: list[str] = []


class RedisSettings(BaseModel):
    """Redis configuration settings."""

    host: str = "localhost"
    port: int = 6379
    user: str | None = None  # Redis ACL username (Redis 6.0+)
    cache_db: int = 0
    queue_db: int = 1
    socket_timeout: float = 5.0


class DatabaseSettings(BaseModel):
    """PostgreSQL database configuration settings."""

    host: str = "localhost"
    port: int = 5432
    name: str = "recipe_database"
    user: str | None = None
    min_pool_size: int = 5
    max_pool_size: int = 20
    command_timeout: float = 30.0  # Query timeout in seconds
    ssl: bool = False


class LoggingSettings(BaseModel):
    """Logging configuration settings."""

    level: str = "INFO"
    format: str = "json"


class MetricsSettings(BaseModel):
    """Metrics configuration settings."""

    enabled: bool = True


class ObservabilitySettings(BaseModel):
    """Observability configuration settings."""

    metrics: MetricsSettings = MetricsSettings()


class RankingSettings(BaseModel):
    """Most-viewed recipes ranking configuration.

    The ranking is a single sorted set covering the trailing window. It
    expires at the next UTC midnight and is rebuilt from the view log.
    """

    cache_key: str = "recipe-view-count"
    window_days: int = Field(default=30, ge=1)
    default_limit: int = Field(default=5, ge=1)
    max_limit: int = Field(default=5, ge=1)  # Hard ceiling for top-k reads
    rebuild_on_startup: bool = True


class ViewsSettings(BaseModel):
    """Recipe view recording configuration."""

    dedup_key_prefix: str = "recipe-view"
    dedup_ttl: int = Field(default=3600, ge=1)  # One counted view per viewer per hour


class ArqJobIdsSettings(BaseModel):
    """Centralized job IDs for ARQ background tasks.

    Using fixed IDs enables job deduplication - if a job with the same ID
    is already queued or in-progress, a new one won't be created.
    """

    ranking_rebuild: str = "recipe_view_ranking_rebuild"


class ArqSettings(BaseModel):
    """ARQ background worker configuration."""

    job_ids: ArqJobIdsSettings = ArqJobIdsSettings()
    queue_name: str = "ranking:queue:jobs"
    health_check_key: str = "ranking:queue:health-check"
    # Minutes of every hour at which the guarded rebuild runs. The rebuild
    # is a no-op while the ranking exists, so this only does work right
    # after the midnight expiry (or after a failed startup rebuild).
    rebuild_cron_minutes: list[int] = [0, 30]


# =============================================================================
# Main Settings Class
# =============================================================================


class Settings(BaseSettings):
    """Application settings with YAML + environment variable support.

    Configuration is loaded from multiple sources with the following priority
    (highest to lowest):
    1. Environment variables
    2. .env file (secrets only)
    3. Environment-specific YAML files (config/environments/{APP_ENV}/)
    4. Base YAML files (config/base/)
    5. Default values in code

    Environment variables can override any setting using the nested delimiter '__'.
    For example: RANKING__WINDOW_DAYS=7 overrides ranking.window_days.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_ignore_empty=True,
        extra="ignore",
        case_sensitive=False,
        env_nested_delimiter="__",
    )

    APP_ENV: str = "development"

    app: AppSettings = AppSettings()
    server: ServerSettings = ServerSettings()
    api: ApiSettings = ApiSettings()
    redis: RedisSettings = RedisSettings()
    database: DatabaseSettings = DatabaseSettings()
    logging: LoggingSettings = LoggingSettings()
    observability: ObservabilitySettings = ObservabilitySettings()
    ranking: RankingSettings = RankingSettings()
    views: ViewsSettings = ViewsSettings()
    arq: ArqSettings = ArqSettings()

    # =========================================================================
    # Secrets (from .env only - never in YAML)
    # =========================================================================
    REDIS_PASSWORD: str = ""
    DATABASE_PASSWORD: str = ""

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """Customize settings loading order.

        Priority (highest to lowest):
        1. init_settings - Values passed to Settings()
        2. env_settings - Environment variables
        3. dotenv_settings - .env file (secrets)
        4. yaml_settings - YAML files (base + environment)
        5. file_secret_settings - Docker secrets
        """
        return (
            init_settings,
            env_settings,
            dotenv_settings,
            MultiYamlConfigSettingsSource(settings_cls),
            file_secret_settings,
        )

    # =========================================================================
    # Computed Fields
    # =========================================================================

    def _build_redis_url(self, db: int) -> str:
        """Build Redis connection URL with optional authentication.

        URL format: redis://[user:password@]host:port/db
        """
        auth_part = ""
        if self.redis.user and self.REDIS_PASSWORD:
            auth_part = f"{self.redis.user}:{self.REDIS_PASSWORD}@"
        elif self.REDIS_PASSWORD:
            auth_part = f":{self.REDIS_PASSWORD}@"
        elif self.redis.user:
            auth_part = f"{self.redis.user}@"

        return f"redis://{auth_part}{self.redis.host}:{self.redis.port}/{db}"

    @property
    def redis_cache_url(self) -> str:
        """Build Redis cache connection URL."""
        return self._build_redis_url(self.redis.cache_db)

    # =========================================================================
    # Environment Helpers
    # =========================================================================

    @property
    def is_development(self) -> bool:
        """Check if running in development environment."""
        return self.APP_ENV == "development"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance.

    Using lru_cache ensures settings are only loaded once,
    improving performance and consistency.
    """
    return Settings()
