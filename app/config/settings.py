"""
Application settings.

Loads configuration from environment variables using pydantic-settings.
"""

from loguru import logger
from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from app.config.business_constants import BV_EXPIRY_MONTHS, TREE_VIEW_DEPTH


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Database
    database_url: str
    database_echo: bool = False

    # Redis (dashboard cache and Dramatiq)
    redis_host: str = "localhost"
    redis_port: int = 6379
    redis_password: str | None = None
    redis_db: int = 0

    # Application
    environment: str = "production"
    debug: bool = False
    log_level: str = "INFO"
    log_file: str = "logs/network.log"

    # Dashboard bootstrap
    fetch_max_attempts: int = Field(
        default=3, ge=1, le=10,
        description="Attempts per dashboard fetch before falling back to cache"
    )
    fetch_backoff_base_seconds: float = Field(
        default=1.0, ge=0,
        description="Base delay of the exponential backoff between attempts"
    )
    dashboard_cache_ttl_seconds: int = Field(
        default=300, gt=0,
        description="Lifetime of last-known-good dashboard records in Redis"
    )

    # Network
    max_tree_depth: int = Field(
        default=1000, gt=0,
        description="Ancestor walks longer than this are treated as a corrupt tree"
    )
    tree_view_max_depth: int = Field(
        default=TREE_VIEW_DEPTH, ge=1, le=50,
        description="Levels rendered by the tree presenter"
    )
    spillover_policy: str = Field(
        default="bfs",
        description="Placement rule when a direct slot is taken: 'bfs' or 'none'"
    )

    # Business volume
    bv_expiry_months: int = Field(
        default=BV_EXPIRY_MONTHS, ge=0,
        description="Months until credited BV stops counting (0 disables expiry)"
    )

    # Security
    bcrypt_rounds: int = Field(default=12, ge=4, le=16)

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @field_validator("spillover_policy")
    @classmethod
    def validate_spillover_policy(cls, value: str) -> str:
        """Accept only known spillover rules."""
        value = value.strip().lower()
        if value not in ("bfs", "none"):
            raise ValueError("SPILLOVER_POLICY must be 'bfs' or 'none'")
        return value

    @field_validator("database_url")
    @classmethod
    def normalize_database_url(cls, value: str) -> str:
        """Rewrite legacy postgres:// URLs to the asyncpg driver."""
        if value.startswith("postgres://"):
            return value.replace("postgres://", "postgresql+asyncpg://", 1)
        if value.startswith("postgresql://"):
            return value.replace("postgresql://", "postgresql+asyncpg://", 1)
        return value

    @model_validator(mode='after')
    def validate_production(self) -> 'Settings':
        """Validate production-specific requirements."""
        if self.environment == 'production':
            if self.debug:
                raise ValueError(
                    'DEBUG must be False in production environment. '
                    'Set DEBUG=false in your .env file.'
                )
            if self.database_url.startswith("sqlite"):
                logger.warning(
                    "DATABASE_URL points to SQLite in production; "
                    "row locks on ancestor updates are not enforced"
                )
            if self.bcrypt_rounds < 10:
                raise ValueError(
                    'BCRYPT_ROUNDS must be at least 10 in production.'
                )
        return self


# Global settings instance
settings = Settings()
