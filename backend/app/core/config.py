from pydantic import field_validator
from pydantic_settings import BaseSettings
from typing import Tuple

class Settings(BaseSettings):
    # Application
    PROJECT_NAME: str = "Event Admin"
    VERSION: str = "1.0.0"
    API_PREFIX: str = "/api"
    DEBUG: bool = False
    ENVIRONMENT: str = "production"

    # Document store
    STORE_BACKEND: str = "sql"  # "sql" or "memory"
    DATABASE_URL: str = "sqlite:///./event_admin.db"

    # Scanning
    SCAN_PREFIX: str = "aux-training"  # two tokens joined by "-"
    DISPLAY_TIMEZONE: str = "Asia/Kuala_Lumpur"

    # Security
    SECRET_KEY: str = "change-me-in-production"
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 12

    # Admin login
    ADMIN_EMAIL: str = "admin@example.com"
    ADMIN_PASSWORD: str = "admin123"

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_FILE: str = "app.log"

    class Config:
        env_file = ".env"
        case_sensitive = True
        extra = "ignore"

    @field_validator("SCAN_PREFIX")
    @classmethod
    def validate_scan_prefix(cls, value: str) -> str:
        tokens = value.split("-")
        if len(tokens) != 2 or not all(tokens):
            raise ValueError("SCAN_PREFIX must be two tokens joined by '-', e.g. aux-training")
        return value

    @property
    def scan_prefix_tokens(self) -> Tuple[str, str]:
        first, second = self.SCAN_PREFIX.split("-")
        return first, second

settings = Settings()
