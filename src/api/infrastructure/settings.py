"""Application settings using pydantic-settings.

Settings are loaded from environment variables with sensible defaults
for development. Production deployments should set all values explicitly.
"""

from functools import lru_cache

from pydantic import Field, SecretStr, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class DatabaseSettings(BaseSettings):
    """Database connection settings.

    Environment variables:
        DIRECTORY_DB_HOST: Database host (default: localhost)
        DIRECTORY_DB_PORT: Database port (default: 5432)
        DIRECTORY_DB_DATABASE: Database name (default: myapp)
        DIRECTORY_DB_USERNAME: Database user (default: postgres)
        DIRECTORY_DB_PASSWORD: Database password (required in production)
        DIRECTORY_DB_POOL_MIN_CONNECTIONS: Minimum connections in pool (default: 2)
        DIRECTORY_DB_POOL_MAX_CONNECTIONS: Maximum connections in pool (default: 10)
    """

    model_config = SettingsConfigDict(
        env_prefix="DIRECTORY_DB_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    host: str = Field(default="localhost", description="Database host")
    port: int = Field(default=5432, description="Database port")
    database: str = Field(default="myapp", description="Database name")
    username: str = Field(default="postgres", description="Database username")
    password: SecretStr = Field(
        default=SecretStr(""),
        description="Database password",
    )
    pool_min_connections: int = Field(
        default=2,
        description="Minimum connections in pool",
        ge=1,
        le=100,
    )
    pool_max_connections: int = Field(
        default=10,
        description="Maximum connections in pool",
        ge=1,
        le=100,
    )

    @model_validator(mode="after")
    def validate_pool_settings(self) -> "DatabaseSettings":
        """Validate pool max >= min."""
        if self.pool_max_connections < self.pool_min_connections:
            raise ValueError(
                f"pool_max_connections ({self.pool_max_connections}) must be >= "
                f"pool_min_connections ({self.pool_min_connections})"
            )
        return self


class DirectorySettings(BaseSettings):
    """User directory settings (view defaults and API client).

    Environment variables:
        DIRECTORY_DEFAULT_PAGE_SIZE: Rows per page for a fresh view (default: 10)
        DIRECTORY_PAGE_SIZE_OPTIONS: Page sizes offered to the user
        DIRECTORY_CORS_ORIGINS: Origins allowed to call the API (default: ["*"])
        DIRECTORY_API_URL: Base URL the client gateway talks to
        DIRECTORY_API_TIMEOUT_SECONDS: Client request timeout (default: 10)
    """

    model_config = SettingsConfigDict(
        env_prefix="DIRECTORY_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    default_page_size: int = Field(
        default=10,
        description="Rows per page for a fresh view",
        ge=1,
    )
    page_size_options: list[int] = Field(
        default=[5, 10, 25, 50, 100],
        description="Page sizes offered to the user",
    )
    cors_origins: list[str] = Field(
        default=["*"],
        description="Origins allowed to call the API",
    )
    api_url: str = Field(
        default="http://localhost:8000",
        description="Base URL of the directory API (client side)",
    )
    api_timeout_seconds: float = Field(
        default=10.0,
        description="Timeout for client gateway requests",
        gt=0,
    )

    @model_validator(mode="after")
    def validate_page_sizes(self) -> "DirectorySettings":
        """Validate that the default page size is one of the offered sizes."""
        if any(size < 1 for size in self.page_size_options):
            raise ValueError("page_size_options must all be >= 1")
        if self.default_page_size not in self.page_size_options:
            raise ValueError(
                f"default_page_size ({self.default_page_size}) must be one of "
                f"page_size_options ({self.page_size_options})"
            )
        return self


class Settings(BaseSettings):
    """Application-wide settings (name and debug flag)."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    app_name: str = Field(default="User Directory API", description="Application name")
    debug: bool = Field(default=False, description="Debug mode, also echoes SQL")


@lru_cache
def get_settings() -> Settings:
    """Get cached application settings.

    Uses lru_cache to ensure settings are only loaded once.
    """
    return Settings()


@lru_cache
def get_database_settings() -> DatabaseSettings:
    """Get cached database settings.

    Uses lru_cache to ensure settings are only loaded once.
    """
    return DatabaseSettings()


@lru_cache
def get_directory_settings() -> DirectorySettings:
    """Get cached directory settings."""
    return DirectorySettings()
