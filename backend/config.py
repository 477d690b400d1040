# backend/config.py
from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import List, Optional
from pathlib import Path

from database import DEFAULT_DATABASE_URL

# Resolve absolute path to the .env file for reliable loading
env_path = Path(__file__).parent.parent / ".env"

class Settings(BaseSettings):
    # Storage backend selection, read once at startup
    USE_IN_MEMORY_DB: bool = False
    DATABASE_URL: str = DEFAULT_DATABASE_URL

    APP_TITLE: str = "Demo Inventory API"
    APP_VERSION: str = "1.0.0"
    LOG_LEVEL: str = "INFO"

    # Vite, CRA, API and Swagger UI ports used during local development
    CORS_ORIGINS: List[str] = [
        "http://localhost:5173",
        "http://localhost:3000",
        "http://localhost:5126",
        "http://localhost:8080",
    ]
    FRONTEND_URL: Optional[str] = None

    model_config = SettingsConfigDict(env_file=str(env_path), extra="ignore")

    @property
    def allowed_origins(self) -> List[str]:
        origins = list(self.CORS_ORIGINS)
        if self.FRONTEND_URL and self.FRONTEND_URL not in origins:
            origins.append(self.FRONTEND_URL)
        return origins

settings = Settings()
