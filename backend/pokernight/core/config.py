from __future__ import annotations

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    DB_URL: str = "sqlite:///./poker.db"

    CORS_ORIGINS: str = "http://localhost:5173,http://127.0.0.1:5173"

    LOG_LEVEL: str = "INFO"

    # Table-size bounds are a caller policy, not an engine invariant
    SEATING_ENFORCE_TABLE_LIMITS: bool = False
    SEATING_MIN_PLAYERS_PER_TABLE: int = 2
    SEATING_MAX_PLAYERS_PER_TABLE: int = 10
    SEATING_MAX_SUGGESTED_TABLES: int = 8

    def cors_list(self) -> list[str]:
        return [x.strip() for x in self.CORS_ORIGINS.split(",") if x.strip()]


settings = Settings()
