"""Configuración de la aplicación (variables de entorno o fichero .env)."""
from functools import lru_cache
from typing import List, Literal

from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Aplicación
    APP_NAME: str = "FinalPoint API"
    APP_VERSION: str = "1.0.0"
    LOG_LEVEL: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"

    # Base de datos
    DATABASE_URL: str = "sqlite:///./finalpoint.db"

    # Auth (JWT)
    SECRET_KEY: SecretStr = SecretStr("change-me-in-production")
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = Field(default=60 * 24 * 7, ge=1)

    # Reglas del juego
    CURRENT_SEASON_YEAR: int = 2025
    LOCK_OFFSET_MINUTES: int = Field(default=5, ge=0, le=24 * 60)

    # CORS (frontend)
    CORS_ORIGINS: List[str] = [
        "http://localhost:3000",
        "http://127.0.0.1:3000",
    ]


@lru_cache
def get_settings() -> Settings:
    return Settings()


settings = get_settings()
