"""Application configuration from environment variables."""

from functools import lru_cache
from urllib.parse import quote_plus

from pydantic_settings import BaseSettings, SettingsConfigDict
from sqlalchemy.engine import make_url


class Settings(BaseSettings):
    """Settings loaded from environment (and .env file)."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # App
    app_name: str = "Fitness Feed API"
    debug: bool = False
    environment: str = "development"
    log_level: str = "INFO"

    # API
    api_prefix: str = "/api"

    # Database (PostgreSQL)
    database_host: str = "localhost"
    database_port: int = 5432
    database_user: str = "postgres"
    database_password: str = ""  # Set in .env - never commit
    database_name: str = "fitness_feed"
    database_ssl_mode: str = "disable"
    # Full async URL; overrides the parts above (e.g. sqlite+aiosqlite:///./dev.db)
    database_uri: str = ""

    # Pool (ignored for SQLite)
    database_pool_size: int = 5
    database_max_overflow: int = 10

    # Create tables on startup instead of running Alembic (local dev / tests)
    auto_create_tables: bool = False

    # CORS: comma-separated list of allowed origins in production
    cors_origins: str = ""

    # Auth tokens
    secret_key: str = "change-me"  # Set in .env - never commit
    token_algorithm: str = "HS256"
    access_token_expire_minutes: int = 60 * 24 * 7

    # Uploads
    upload_dir: str = "uploads"
    upload_url_prefix: str = "/uploads"
    default_image_extension: str = ".jpg"
    max_images_per_post: int = 10

    def _build_db_url(self, scheme: str = "postgresql", ssl_query: str = "sslmode=require") -> str:
        user = quote_plus(self.database_user)
        password = quote_plus(self.database_password)
        return (
            f"{scheme}://{user}:{password}@{self.database_host}:{self.database_port}"
            f"/{self.database_name}?{ssl_query}"
        )

    @property
    def database_url(self) -> str:
        """Synchronous URL for Alembic and tooling."""
        if self.database_uri:
            # Drop the async driver; asyncpg spells the SSL option "ssl", psycopg2 "sslmode"
            url = make_url(self.database_uri)
            url = url.set(drivername=url.get_backend_name())
            if "ssl" in url.query:
                query = dict(url.query)
                query["sslmode"] = query.pop("ssl")
                url = url.set(query=query)
            return url.render_as_string(hide_password=False)
        return self._build_db_url(scheme="postgresql", ssl_query=f"sslmode={self.database_ssl_mode}")

    @property
    def async_database_url(self) -> str:
        """Async URL for FastAPI (asyncpg driver)."""
        if self.database_uri:
            return self.database_uri
        return self._build_db_url(scheme="postgresql+asyncpg", ssl_query=f"ssl={self.database_ssl_mode}")

    @property
    def is_sqlite(self) -> bool:
        return self.async_database_url.startswith("sqlite")


@lru_cache
def get_settings() -> Settings:
    """Cached settings instance."""
    return Settings()
