# backend/config.py
from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import Optional
from pathlib import Path

# Resolve absolute path to the .env file for reliable loading
env_path = Path(__file__).parent.parent / ".env"

class Settings(BaseSettings):
    # Tokens are issued by the external identity provider, we only verify them
    SECRET_KEY: str = "dev-secret-change-me"
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60

    DATABASE_URL: str = "sqlite:///./database_inventoryapp.db"
    SQL_ECHO: bool = False

    # Extra CORS origin for the deployed frontend
    FRONTEND_URL: Optional[str] = None

    LOG_LEVEL: str = "INFO"
    # When set, logs are also written to a rotating file in this directory
    LOG_DIR: Optional[str] = None

    model_config = SettingsConfigDict(env_file=str(env_path), extra="ignore")

    @property
    def database_url(self) -> str:
        # Azure/Heroku style URLs use postgres://, SQLAlchemy needs postgresql://
        url = self.DATABASE_URL
        if url.startswith("postgres://"):
            url = url.replace("postgres://", "postgresql://", 1)
        return url

settings = Settings()
