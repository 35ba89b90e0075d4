"""Application configuration using Pydantic Settings."""

from functools import lru_cache

from pydantic import Field, computed_field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Application
    app_name: str = Field(default="Aqua Gen Marketplace API")
    app_version: str = Field(default="1.0.0")
    app_env: str = Field(default="development")
    debug: bool = Field(default=False)
    log_level: str = Field(default="INFO")

    # Server
    host: str = Field(default="0.0.0.0")
    port: int = Field(default=8000)

    # Database
    database_url: str = Field(
        default="postgresql+asyncpg://localhost:5432/aquagen",
        description="PostgreSQL connection URL with asyncpg driver",
    )

    # For testing with SQLite
    test_database_url: str = Field(
        default="sqlite+aiosqlite:///./test.db",
        description="Test database URL",
    )

    # Identity provider
    auth_jwks_url: str = Field(
        default="",
        description="JWKS endpoint with the identity provider's ID token signing keys",
    )
    auth_issuer: str = Field(
        default="",
        description="Expected 'iss' claim of ID tokens (empty disables the check)",
    )
    auth_audience: str = Field(
        default="",
        description="Expected 'aud' claim of ID tokens (empty disables the check)",
    )

    # JWT Authentication
    jwt_secret_key: str = Field(
        default="CHANGE-ME-IN-PRODUCTION",
        description="Secret key for JWT signing (used for HS256 fallback and tests)",
    )
    jwt_algorithm: str = Field(default="HS256")
    jwt_expire_minutes: int = Field(default=30)

    # Seller handles
    slug_random_attempts: int = Field(
        default=10,
        description="Random 3-digit suffix draws before allocation gives up",
    )
    slug_propagation_batch_size: int = Field(
        default=400,
        description="Listings rewritten per atomic batch when a handle changes",
    )

    # Profiles
    max_name_changes: int = Field(default=3)
    recent_locations_limit: int = Field(default=20)
    default_phone_country_code: str = Field(default="+1")

    # Listings
    listings_page_size: int = Field(default=12)
    max_listing_images: int = Field(default=5)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def async_database_url(self) -> str:
        """Ensure the database URL uses the asyncpg driver scheme.

        Render and other providers supply a standard ``postgresql://`` URL.
        SQLAlchemy's async engine requires ``postgresql+asyncpg://``.
        """
        url = self.database_url
        if url.startswith("postgresql://"):
            url = url.replace("postgresql://", "postgresql+asyncpg://", 1)
        return url

    # Rate Limiting
    rate_limit_enabled: bool = Field(
        default=True,
        description="Enable/disable rate limiting (disable for tests)",
    )

    # CORS
    cors_origins: str = Field(
        default="http://localhost:3000,http://localhost:5173",
        description="Comma-separated list of allowed origins",
    )

    @computed_field  # type: ignore[prop-decorator]
    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.app_env == "production"

    @computed_field  # type: ignore[prop-decorator]
    @property
    def cors_origins_list(self) -> list[str]:
        """Parse CORS origins into a list."""
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


settings = get_settings()
