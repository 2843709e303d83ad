from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    OPENAI_API_KEY: str | None = None
    OPENAI_MODEL_CHAT: str = "gpt-4o-mini"
    OPENAI_TEMPERATURE_CHAT: float = 0.8
    OPENAI_MAX_TOKENS: int = 500

    PUB_NAME: str = "The Castle Pub"
    BUSINESS_TIMEZONE: str = "Europe/Berlin"
    PUB_DATA_DIR: str | None = None
    ENV: str = "dev"
    LOG_LEVEL: str = "INFO"

    RESERVATION_API_URL: str | None = None
    RESERVATION_API_KEY: str | None = None
    RESERVATION_TIMEOUT_SECONDS: float = 8.0
    RESERVATION_MAX_RETRIES: int = 2
    RESERVATION_USE_MOCK: bool = False


settings = Settings()
