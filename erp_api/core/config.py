# erp_api/core/config.py

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # App
    ENV: str = "development"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"

    # Server
    HOST: str = "0.0.0.0"
    PORT: int = 8000
    API_PREFIX: str = "/api"

    # Used to build absolute links for stored asset paths (product images)
    BASE_URL: str = "http://localhost:8000"

    CORS_ORIGINS: list[str] = [
        "http://localhost:5000",
        "http://localhost:3001",
        "http://localhost:5173",
        "http://localhost:8080",
    ]

    # Database
    DATABASE_URL: str = "sqlite:///./erp.db"
    AUTO_CREATE_TABLES: bool = False

    # Rate limiting
    RATE_LIMIT_ENABLED: bool = True

    # Optional JSON file replacing the built-in enum label tables
    ENUM_LABELS_FILE: str | None = None

    # Security
    BCRYPT_ROUNDS: int = 10

    # Record defaults
    DEFAULT_CURRENCY: str = "PKR"
    DEFAULT_CREATED_BY: str = "Admin"

    model_config = SettingsConfigDict(
        env_file=".env",
        extra="forbid",
    )


settings = Settings()
