"""Server configuration with defaults for a local single-match front-end."""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Server settings, overridable via environment variables."""

    # Tick loop
    TICK_MS: int = 50
    TIME_COMPRESSION: float = 1.0

    # Match
    DEFAULT_SEED: int = 42

    # Vite dev server
    CORS_ORIGINS: list[str] = [
        "http://localhost:5173",
        "http://localhost:5174",
        "http://localhost:5175",
    ]

    model_config = SettingsConfigDict(env_prefix="SCORCHED_", env_file=".env", extra="ignore")


settings = Settings()
