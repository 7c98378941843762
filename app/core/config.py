# app/core/config.py

from pathlib import Path
from typing import List, Optional
from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Get the project root directory (where .env should be located)
BASE_DIR = Path(__file__).resolve().parent.parent.parent

class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=str(BASE_DIR / ".env"),
        env_file_encoding='utf-8',
        case_sensitive=True,
        extra="ignore"
    )

    # App Configuration
    APP_NAME: str = "Finance Tracker API"
    VERSION: str = "1.0.0"
    ENVIRONMENT: str = "development"
    PORT: int = 5000

    # Database Configuration
    DATABASE_PATH: str = "./finance.db"

    # CORS Configuration (comma separated)
    ALLOWED_ORIGINS: str = "http://localhost:3000,http://localhost:5000"

    # Rate limiting for /api routes
    RATE_LIMIT_WINDOW_SECONDS: int = 900
    RATE_LIMIT_MAX_REQUESTS: int = 100

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_DIR: str = "logs"

    # Static token guarding POST /api/backup
    BACKUP_TOKEN: Optional[str] = None

    @field_validator("BACKUP_TOKEN", mode="before")
    @classmethod
    def blank_token_is_unset(cls, value):
        if isinstance(value, str):
            value = value.strip()
            return value or None
        return value

    @property
    def is_production(self) -> bool:
        return self.ENVIRONMENT.lower() == "production"

    @property
    def allowed_origins(self) -> List[str]:
        return [origin.strip() for origin in self.ALLOWED_ORIGINS.split(",") if origin.strip()]

    @property
    def database_file(self) -> Path:
        """Resolved location of the SQLite file; relative paths hang off the project root."""
        path = Path(self.DATABASE_PATH)
        if not path.is_absolute():
            path = BASE_DIR / path
        return path

# Create a global settings instance
settings = Settings()
