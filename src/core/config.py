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
    app_name: str = Field(default="Career Saathi API")
    app_env: str = Field(default="development")
    debug: bool = Field(default=False)

    # Server
    host: str = Field(default="0.0.0.0")
    port: int = Field(default=3000)

    # Firebase
    firebase_project_id: str = Field(
        default="",
        description="Firebase project ID (falls back to the credentials' project)",
    )
    firebase_credentials_path: str = Field(
        default="",
        description=(
            "Path to a service account JSON key. "
            "Application default credentials are used when empty."
        ),
    )
    firebase_web_api_key: str = Field(
        default="",
        description="Web API key, required to send verification emails",
    )
    firebase_check_revoked: bool = Field(
        default=False,
        description="Reject ID tokens whose sessions were revoked",
    )
    identity_toolkit_url: str = Field(
        default="https://identitytoolkit.googleapis.com/v1",
        description="Identity Toolkit REST base URL",
    )
    http_timeout_seconds: float = Field(default=10.0)

    # Firestore
    users_collection: str = Field(default="users")

    # Rate Limiting
    rate_limit_enabled: bool = Field(
        default=True,
        description="Enable/disable rate limiting (disable for tests)",
    )

    # CORS
    cors_origins: str = Field(
        default="http://localhost:5173,http://localhost:8080",
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
