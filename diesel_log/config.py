"""
Configuration de l'application / Application configuration.
Utilise pydantic-settings pour charger depuis .env ou variables d'environnement.
"""

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # Application
    APP_NAME: str = "Diesel Log"
    APP_VERSION: str = "0.1.0"
    DEBUG: bool = True
    LOG_LEVEL: str = "INFO"

    # Serveur / Server (python -m diesel_log)
    HOST: str = "0.0.0.0"
    PORT: int = 8080

    # Database - SQLite par défaut, PostgreSQL via postgresql+asyncpg://
    # Database - SQLite by default, PostgreSQL via postgresql+asyncpg://
    DATABASE_URL: str = "sqlite+aiosqlite:///./diesel_records.db"
    DATABASE_ECHO: bool = False

    # CORS - origines autorisées / allowed origins
    CORS_ORIGINS: list[str] = ["*"]

    # Rate Limiting
    RATE_LIMIT_ENABLED: bool = True
    RATE_LIMIT_DEFAULT: str = "120/minute"
    RATE_LIMIT_WRITE: str = "30/minute"

    # Nom des fichiers exportés (sans extension) / Export file base name
    EXPORT_FILENAME: str = "diesel-records"

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}


settings = Settings()
