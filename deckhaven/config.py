from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment."""

    model_config = SettingsConfigDict(env_file=".env")

    app_name: str = "DeckHaven"
    debug: bool = False
    log_level: str = "INFO"

    database_url: str = "postgresql+asyncpg://localhost:5432/deckhaven"

    scryfall_api_url: str = "https://api.scryfall.com"
    scryfall_user_agent: str = "DeckHaven/1.0"

    # Seconds. Kept short: the lookup only decides basic-land exemption
    scryfall_timeout: float = 5.0


settings = Settings()
