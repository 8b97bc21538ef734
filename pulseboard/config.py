"""Configuration management using pydantic-settings."""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Database settings
    db_server: str
    db_name: str
    db_user: str
    db_password: str
    db_port: int = 5432
    db_pool_size: int = 10
    db_max_overflow: int = 20
    db_pool_timeout: int = 15
    # Connections opened at startup; 0 skips the warmup
    db_warmup_connections: int = 0
    sql_echo: bool = False

    # JWT settings (tokens are minted for the external identity provider's user id)
    jwt_secret: str
    jwt_algorithm: str = "HS256"
    jwt_expiration_minutes: int = 1440

    # Server settings
    host: str = "0.0.0.0"
    port: int = 8000

    # Public URL of the web client, used for OAuth redirects and notification links
    app_url: str = "http://localhost:3000"

    # WebSocket settings
    ws_max_connections_per_user: int = 20
    ws_max_message_size: int = 65536  # 64KB

    # Redis settings (WebSocket pub/sub across workers)
    redis_url: str = "redis://localhost:6379/0"
    redis_max_connections: int = 50
    redis_socket_timeout: float = 5.0
    redis_retry_on_timeout: bool = True
    redis_required: bool = False  # Set True for multi-worker deployment

    # Identity provider (Clerk) settings
    clerk_webhook_secret: str = ""
    clerk_secret_key: str = ""
    clerk_api_url: str = "https://api.clerk.com/v1"

    # Third-party connection OAuth settings
    discord_client_id: str = ""
    discord_client_secret: str = ""
    discord_redirect_uri: str = ""
    notion_client_id: str = ""
    notion_client_secret: str = ""
    notion_redirect_uri: str = ""
    slack_client_id: str = ""
    slack_client_secret: str = ""
    slack_redirect_uri: str = ""
    oauth_http_timeout: float = 10.0

    # File upload widget key, exposed to the client as-is
    uploadcare_public_key: str = ""

    @property
    def database_url(self) -> str:
        """Build PostgreSQL async connection string."""
        from urllib.parse import quote_plus
        return (
            f"postgresql+asyncpg://{self.db_user}:{quote_plus(self.db_password)}"
            f"@{self.db_server}:{self.db_port}/{self.db_name}"
        )

    @property
    def sync_database_url(self) -> str:
        """Build PostgreSQL sync connection string for Alembic."""
        from urllib.parse import quote_plus
        return (
            f"postgresql+psycopg2://{self.db_user}:{quote_plus(self.db_password)}"
            f"@{self.db_server}:{self.db_port}/{self.db_name}"
        )


# Global settings instance
settings = Settings()
