from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    APP_NAME: str = "Billing System API"
    APP_VERSION: str = "1.0.0"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"
    APP_DATABASE_DSN: str = "sqlite:////tmp/usage_ledger.db"

    # Server
    HOST: str = "0.0.0.0"
    PORT: int = 3000

    # Client
    API_BASE_URL: str = "http://localhost:3000"
    CLIENT_TIMEOUT_SECONDS: float = 10.0
    CLIENT_MAX_RETRIES: int = 3  # additional attempts after the first
    CLIENT_BACKOFF_MULTIPLIER: float = 0.1
    CLIENT_BACKOFF_MAX: float = 5.0

    @property
    def version(self) -> str:
        return self.APP_VERSION


settings = Settings()
